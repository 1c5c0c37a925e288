from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

import main as cli
from plancarbon.errors import ProviderAuthError

from .tftest import TfResource, build_plan


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PLANCARBON_DATA_PATH", raising=False)
    monkeypatch.delenv("PLANCARBON_LOG_LEVEL", raising=False)
    return tmp_path


def _plan_file(workdir, resources):
    path = workdir / "plan.json"
    path.write_text(json.dumps(build_plan(resources)))
    return str(path)


def _vm():
    return TfResource("google_compute_instance", "vm", values={"machine_type": "e2-medium", "zone": "europe-west1-b"})


def test_table_output(workdir):
    result = CliRunner().invoke(cli.main, [_plan_file(workdir, [_vm()]), "--no-color"])
    assert result.exit_code == 0, result.output
    assert "google_compute_instance.vm" in result.output
    assert "europe-west1" in result.output


def test_json_output(workdir):
    path = _plan_file(workdir, [_vm(), TfResource("google_storage_bucket", "b", values={})])
    result = CliRunner().invoke(cli.main, ["-o", "json", path])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [r["Address"] for r in payload] == ["google_compute_instance.vm", "google_storage_bucket.b"]
    assert payload[0]["Specs"]["VCPUs"] == 2


def test_missing_path_shows_help():
    result = CliRunner().invoke(cli.main, [])
    assert result.exit_code == 1
    assert "Please provide a terraform directory or plan file." in result.output
    assert "Usage:" in result.output


def test_empty_plan(workdir):
    result = CliRunner().invoke(cli.main, [_plan_file(workdir, [])])
    assert result.exit_code == 0
    assert "No resources found in plan." in result.output


def test_missing_plan_file(workdir):
    result = CliRunner().invoke(cli.main, [str(workdir / "nope.json")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_invalid_plan_json(workdir):
    path = workdir / "broken.json"
    path.write_text("{")
    result = CliRunner().invoke(cli.main, [str(path)])
    assert result.exit_code == 1
    assert "invalid plan JSON" in result.output


def test_provider_auth_error_is_not_fatal(workdir, monkeypatch):
    def _get_plan(path, config):
        raise ProviderAuthError("no credentials", stderr="No credentials loaded")

    monkeypatch.setattr(cli, "get_plan", _get_plan)
    result = CliRunner().invoke(cli.main, [str(workdir)])
    assert result.exit_code == 0
    assert "No resources found in plan." in result.output


def test_data_path_override(workdir):
    data = workdir / "data"
    data.mkdir()
    (data / "mappings.json").write_text(json.dumps({"compute_resource": {}}))
    path = _plan_file(workdir, [TfResource("google_compute_network", "vpc", values={})])
    result = CliRunner().invoke(cli.main, ["-o", "json", "--data-path", str(data), path])
    assert result.exit_code == 0, result.output
    # no ignore rules in the override, the network shows up as unsupported
    assert json.loads(result.output)[0]["Unsupported"] is True
