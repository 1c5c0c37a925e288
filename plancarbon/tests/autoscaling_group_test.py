from __future__ import annotations

import logging
from decimal import Decimal

from plancarbon.schema.resource import UnsupportedResource

from .tftest import TfResource, build_plan, const, load_resources, ref

_PROVIDER = {"aws": {"region": "eu-west-1"}}


def _launch_template():
    return TfResource(
        "aws_launch_template",
        "lt",
        values={
            "instance_type": "m5d.large",
            "block_device_mappings": [
                {"device_name": "/dev/xvda", "ebs": [{"volume_size": 50, "volume_type": "gp3"}]},
                {"device_name": "/dev/xvdb", "ebs": [{"volume_size": 500, "volume_type": "sc1"}]},
            ],
        },
    )


def _asg(values, **expressions):
    exprs = {k: const(v) for k, v in values.items()}
    exprs.update(expressions)
    return TfResource("aws_autoscaling_group", "asg", values=values, expressions=exprs)


def test_group_with_launch_template():
    asg = _asg(
        {"desired_capacity": 4, "min_size": 1, "max_size": 10},
        launch_template=[{"id": ref("aws_launch_template.lt.id", "aws_launch_template.lt"), "version": const("$Latest")}],
    )
    resources = load_resources(build_plan([_launch_template(), asg], provider_config=_PROVIDER))

    r = resources["aws_autoscaling_group.asg"]
    assert r.identification.count == 4
    assert r.identification.region == "eu-west-1"
    assert (r.specs.vcpus, r.specs.memory_mb) == (2, 8192)
    # 50 gp3 + 75 instance storage, no implicit root next to block_device_mappings
    assert r.specs.ssd_storage_gb == Decimal(125)
    assert r.specs.hdd_storage_gb == Decimal(500)
    assert "aws_launch_template.lt" not in resources


def test_group_with_mixed_instances_policy():
    asg = _asg(
        {"min_size": 2, "availability_zones": ["eu-west-1a"]},
        mixed_instances_policy=[
            {
                "launch_template": [
                    {"launch_template_specification": [{"launch_template_id": ref("aws_launch_template.lt")}]}
                ]
            }
        ],
    )
    r = load_resources(build_plan([_launch_template(), asg]))["aws_autoscaling_group.asg"]
    # no desired_capacity
    assert r.identification.count == 2
    assert r.identification.region == "eu-west-1"
    assert r.specs.vcpus == 2


def test_group_with_launch_configuration():
    lc = TfResource(
        "aws_launch_configuration",
        "lc",
        values={"instance_type": "t3.small", "root_block_device": [{"volume_size": 16}]},
    )
    asg = _asg({}, launch_configuration=ref("aws_launch_configuration.lc.name", "aws_launch_configuration.lc"))
    r = load_resources(build_plan([lc, asg], provider_config=_PROVIDER))["aws_autoscaling_group.asg"]
    assert r.identification.count == 1
    assert r.specs.memory_mb == 2048
    assert r.specs.ssd_storage_gb == Decimal(16)


def test_group_without_template_is_unsupported(caplog):
    asg = _asg({"desired_capacity": 2})
    with caplog.at_level(logging.WARNING):
        resources = load_resources(build_plan([asg], provider_config=_PROVIDER))
    assert isinstance(resources["aws_autoscaling_group.asg"], UnsupportedResource)
    assert "launch template not found" in caplog.text
