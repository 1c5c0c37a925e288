from __future__ import annotations

import json
from decimal import Decimal

from plancarbon.output.json import to_dicts, to_json
from plancarbon.output.table import render_table
from plancarbon.schema.provider import Provider
from plancarbon.schema.resource import (
    ComputeResource,
    ComputeResourceSpecs,
    ResourceIdentification,
    UnsupportedResource,
)


def _resources():
    vm = ComputeResource(
        identification=ResourceIdentification(
            name="vm", resource_type="google_compute_instance", provider=Provider.GCP, region="europe-west1", count=2
        ),
        specs=ComputeResourceSpecs(
            vcpus=4,
            memory_mb=16384,
            cpu_type="Intel Skylake",
            gpu_types=["nvidia-tesla-t4"],
            ssd_storage_gb=Decimal("10.50"),
            hdd_storage_gb=Decimal(500),
        ),
    )
    bucket = UnsupportedResource(
        identification=ResourceIdentification(name="b", resource_type="aws_s3_bucket", provider=Provider.AWS)
    )
    return {vm.address: vm, bucket.address: bucket}


def test_table_rows():
    out = render_table(_resources(), no_color=True, width=200)
    lines = out.splitlines()
    assert "ADDRESS" in lines[0] and "REPLICATION" in lines[0]
    # sorted by address
    assert lines[1].startswith("aws_s3_bucket.b")
    assert "unsupported" in lines[1]
    assert lines[2].startswith("google_compute_instance.vm")
    for cell in ("GCP", "europe-west1", "16384", "Intel Skylake", "nvidia-tesla-t4", "10.5", "500"):
        assert cell in lines[2]
    assert "\x1b[" not in out


def test_table_dims_unsupported_rows():
    out = render_table(_resources(), width=200)
    assert "\x1b[2m" in out


def test_json_output():
    payload = json.loads(to_json(_resources()))
    assert [r["Address"] for r in payload] == ["aws_s3_bucket.b", "google_compute_instance.vm"]
    assert payload[0]["Unsupported"] is True
    vm = payload[1]
    assert vm["Identification"]["Provider"] == "GCP"
    assert vm["Identification"]["Count"] == 2
    assert vm["Specs"]["SsdStorage"] == "10.50"
    assert vm["Specs"]["GpuTypes"] == ["nvidia-tesla-t4"]


def test_pretty_json_is_the_same_document():
    resources = _resources()
    assert json.loads(to_json(resources, pretty=True)) == to_dicts(resources)
    assert b"\n" in to_json(resources, pretty=True)
    assert b"\n" not in to_json(resources)
