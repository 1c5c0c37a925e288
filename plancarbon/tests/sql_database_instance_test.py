from __future__ import annotations

from decimal import Decimal

import pytest

from plancarbon.errors import ConfigurationError

from .tftest import TfResource, build_plan, load_resources


def _sql(**settings):
    return TfResource(
        "google_sql_database_instance",
        "main",
        values={"region": "europe-west1", "database_version": "POSTGRES_15", "settings": [settings]},
    )


def _load(sql):
    return load_resources(build_plan([sql]))["google_sql_database_instance.main"]


def test_regional_instance():
    r = _load(_sql(tier="db-custom-2-7680", availability_type="REGIONAL", disk_size=50, disk_type="PD_SSD"))
    assert r.identification.region == "europe-west1"
    assert (r.specs.vcpus, r.specs.memory_mb) == (2, 7680)
    assert r.specs.ssd_storage_gb == Decimal(50)
    assert r.specs.replication_factor == 2


def test_zonal_hdd_instance():
    r = _load(_sql(tier="db-n1-standard-2", availability_type="ZONAL", disk_size=100, disk_type="pd_hdd"))
    assert (r.specs.vcpus, r.specs.memory_mb) == (2, 7680)
    assert (r.specs.ssd_storage_gb, r.specs.hdd_storage_gb) == (Decimal(0), Decimal(100))
    assert r.specs.replication_factor == 1


def test_disk_defaults():
    r = _load(_sql(tier="db-f1-micro"))
    assert r.specs.memory_mb == 614
    assert r.specs.ssd_storage_gb == Decimal(10)


def test_unknown_disk_type():
    with pytest.raises(ConfigurationError):
        _load(_sql(tier="db-f1-micro", disk_type="PD_TAPE"))


def test_unknown_tier():
    with pytest.raises(ConfigurationError):
        _load(_sql(tier="db-imaginary"))


def test_instance_without_settings():
    sql = TfResource("google_sql_database_instance", "bare", values={"region": "us-east1"})
    r = load_resources(build_plan([sql]))["google_sql_database_instance.bare"]
    assert (r.specs.vcpus, r.specs.ssd_storage_gb, r.specs.replication_factor) == (0, Decimal(0), 1)
