from __future__ import annotations

from decimal import Decimal

import pytest

from plancarbon.config import Config
from plancarbon.errors import ConfigurationError
from plancarbon.providers.terraform.aws.data import ami
from plancarbon.providers.terraform.context import ParserContext
from plancarbon.schema.provider import Provider

from .tftest import TfResource, build_plan, const, load_resources, ref

_PROVIDER = {"aws": {"region": "eu-west-3"}}


def _ubuntu_ami():
    return TfResource(
        "aws_ami",
        "ubuntu",
        mode="data",
        values={
            "root_device_name": "/dev/sda1",
            "block_device_mappings": [
                {"device_name": "/dev/sdb", "ebs": {"volume_size": "100"}},
                {"device_name": "/dev/sda1", "ebs": {"volume_size": "30", "volume_type": "gp2"}},
            ],
        },
    )


def test_instance_with_block_devices():
    vm = TfResource(
        "aws_instance",
        "web",
        values={
            "instance_type": "t3.micro",
            "arn": "arn:aws:ec2:eu-west-3:123456789012:instance/i-0abc",
            "root_block_device": [{"volume_size": 20, "volume_type": "gp3"}],
            "ebs_block_device": [
                {"device_name": "/dev/sdf", "volume_size": 100, "volume_type": "st1"},
                {"device_name": "/dev/sdg", "volume_type": "io2"},
            ],
        },
    )
    r = load_resources(build_plan([vm], provider_config=_PROVIDER))["aws_instance.web"]
    ident = r.identification
    assert (ident.provider, ident.region) == (Provider.AWS, "eu-west-3")
    assert ident.self_link.startswith("arn:aws:ec2:")
    assert (r.specs.vcpus, r.specs.memory_mb) == (2, 1024)
    assert r.specs.cpu_type == "Intel Xeon Platinum 8175"
    # 20 gp3 + 8 io2 (default size)
    assert r.specs.ssd_storage_gb == Decimal(28)
    assert r.specs.hdd_storage_gb == Decimal(100)


def test_implicit_root_volume():
    vm = TfResource("aws_instance", "web", values={"instance_type": "m5.large", "availability_zone": "us-east-1b"})
    r = load_resources(build_plan([vm]))["aws_instance.web"]
    assert r.identification.region == "us-east-1"
    assert r.specs.ssd_storage_gb == Decimal(8)

    ctx = ParserContext.default(Config(aws_volume_size_gb=Decimal(12)))
    r = load_resources(build_plan([vm]), ctx)["aws_instance.web"]
    assert r.specs.ssd_storage_gb == Decimal(12)


def test_instance_storage_and_gpus():
    vm = TfResource("aws_instance", "gpu", values={"instance_type": "g4dn.xlarge"})
    r = load_resources(build_plan([vm], provider_config=_PROVIDER))["aws_instance.gpu"]
    assert r.specs.gpu_types == ["nvidia-t4"]
    assert r.specs.ssd_storage_gb == Decimal(8) + Decimal(125)

    vm = TfResource("aws_instance", "dense", values={"instance_type": "d2.xlarge"})
    r = load_resources(build_plan([vm], provider_config=_PROVIDER))["aws_instance.dense"]
    assert r.specs.hdd_storage_gb == Decimal(6144)


def test_root_volume_sized_by_ami():
    vm = TfResource(
        "aws_instance",
        "web",
        values={"instance_type": "t3.micro"},
        expressions={"instance_type": const("t3.micro"), "ami": ref("data.aws_ami.ubuntu.id", "data.aws_ami.ubuntu")},
    )
    resources = load_resources(build_plan([vm], provider_config=_PROVIDER, prior_state=[_ubuntu_ami()]))
    assert resources["aws_instance.web"].specs.ssd_storage_gb == Decimal(30)


def test_ami_root_volume_size():
    image = ami(_ubuntu_ami().planned())
    assert image.address == "data.aws_ami.ubuntu"
    assert image.disk_size_gb == Decimal(30)

    no_devices = TfResource("aws_ami", "bare", mode="data", values={"root_device_name": "/dev/xvda"})
    assert ami(no_devices.planned()).disk_size_gb is None


def test_unknown_volume_type():
    vm = TfResource(
        "aws_instance",
        "web",
        values={"instance_type": "t3.micro", "root_block_device": [{"volume_size": 10, "volume_type": "floppy"}]},
    )
    with pytest.raises(ConfigurationError):
        load_resources(build_plan([vm], provider_config=_PROVIDER))


def test_unknown_instance_type():
    vm = TfResource("aws_instance", "web", values={"instance_type": "x99.huge"})
    with pytest.raises(ConfigurationError):
        load_resources(build_plan([vm], provider_config=_PROVIDER))
