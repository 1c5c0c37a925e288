from __future__ import annotations

from decimal import Decimal

import pytest

from plancarbon.errors import ConfigurationError, MalformedPlanError

from .tftest import TfResource, build_plan, load_resources

_PROVIDER = {"aws": {"region": "us-east-1"}}


def _db(**values):
    return load_resources(build_plan([TfResource("aws_db_instance", "db", values=values)], provider_config=_PROVIDER))[
        "aws_db_instance.db"
    ]


def test_multi_az_instance():
    r = _db(instance_class="db.m5.large", allocated_storage=100, storage_type="gp3", multi_az=True)
    assert r.identification.region == "us-east-1"
    assert (r.specs.vcpus, r.specs.memory_mb) == (2, 8192)
    assert r.specs.ssd_storage_gb == Decimal(100)
    assert r.specs.replication_factor == 2


def test_magnetic_single_az_instance():
    r = _db(instance_class="db.t3.micro", allocated_storage=20, storage_type="standard", multi_az=False)
    assert (r.specs.ssd_storage_gb, r.specs.hdd_storage_gb) == (Decimal(0), Decimal(20))
    assert r.specs.replication_factor == 1


def test_storage_defaults():
    # aurora style instance, storage lives in the cluster
    r = _db(instance_class="db.r5.large")
    assert (r.specs.ssd_storage_gb, r.specs.hdd_storage_gb) == (Decimal(0), Decimal(0))


def test_bad_instances():
    with pytest.raises(MalformedPlanError):
        _db(allocated_storage=20)
    with pytest.raises(ConfigurationError):
        _db(instance_class="db.x99.huge")
    with pytest.raises(ConfigurationError):
        _db(instance_class="db.t3.micro", allocated_storage=20, storage_type="tape")
