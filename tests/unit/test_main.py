import json
from pathlib import Path

import pytest

from cloudroute_agent import main as agent_main

from fakes import RecordingRouteTable


@pytest.fixture(autouse=True)
def no_default_config(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(agent_main, "DEFAULT_CONFIG_PATH", tmp_path / "absent.yaml")


@pytest.fixture
def catalog_path(tmp_path: Path) -> Path:
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            [
                {
                    "service": "AzureSQL",
                    "region": "westeurope",
                    "prefixes": ["10.0.0.0/24", "2001:db8::/32"],
                },
                {"service": "Storage", "region": "northeurope", "prefixes": ["10.2.0.0/16"]},
            ]
        )
    )
    return path


def test_explain_prints_counts(catalog_path: Path, capsys):
    code = agent_main.main(
        [
            "explain",
            "--catalog", str(catalog_path),
            "--gateway", "10.8.0.1",
            "--service", "AzureSQL",
            "--region", "westeurope",
        ]
    )

    out = capsys.readouterr().out
    assert code == 0
    assert "Planned routes:  1" in out
    assert "Skipped IPv6:    1" in out


def test_explain_show_routes(catalog_path: Path, capsys):
    code = agent_main.main(
        ["explain", "--catalog", str(catalog_path), "--gateway", "10.8.0.1", "--show-routes"]
    )

    out = capsys.readouterr().out
    assert code == 0
    assert "10.0.0.0" in out
    assert "10.2.0.0" in out


def test_enable_uses_config_file(tmp_path: Path, catalog_path: Path, monkeypatch, capsys):
    table = RecordingRouteTable()
    backends = []

    def fake_build(name):
        backends.append(name)
        return table

    monkeypatch.setattr(agent_main, "build_route_table", fake_build)
    config_path = tmp_path / "cloudroute.yaml"
    config_path.write_text(
        f"""
catalog: {catalog_path}
gateway:
  address: 10.8.0.1
routes:
  metric: 7
  backend: command
filter:
  services: [All]
"""
    )

    code = agent_main.main(["--config", str(config_path), "enable"])

    out = capsys.readouterr().out
    assert code == 0
    assert backends == ["command"]
    assert "Succeeded:       2" in out
    assert {spec.metric for spec in table.added} == {7}


def test_enable_exit_code_on_route_failures(catalog_path: Path, monkeypatch, capsys):
    table = RecordingRouteTable(fail_networks={"10.2.0.0"})
    monkeypatch.setattr(agent_main, "build_route_table", lambda name: table)

    code = agent_main.main(
        ["enable", "--catalog", str(catalog_path), "--gateway", "10.8.0.1", "--concurrency", "2"]
    )

    out = capsys.readouterr().out
    assert code == agent_main.EXIT_ROUTE_FAILURES
    assert "Failed:          1" in out


def test_services_listing(catalog_path: Path, capsys):
    code = agent_main.main(["services", "--catalog", str(catalog_path)])

    out = capsys.readouterr().out
    assert code == 0
    assert "AzureSQL" in out
    assert "northeurope" in out


def test_missing_catalog_is_a_usage_error(tmp_path: Path):
    assert agent_main.main(["services", "--catalog", str(tmp_path / "none.json")]) == 2
    assert agent_main.main(["explain", "--gateway", "10.8.0.1"]) == 2


def test_missing_gateway_is_a_usage_error(catalog_path: Path):
    assert agent_main.main(["explain", "--catalog", str(catalog_path)]) == 2


def test_malformed_catalog_is_a_usage_error(tmp_path: Path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([{"service": "AzureSQL", "prefixes": ["10.0.0.0/99"]}]))

    assert agent_main.main(["explain", "--catalog", str(path), "--gateway", "10.8.0.1"]) == 2


def test_invalid_config_file_is_a_usage_error(tmp_path: Path):
    config_path = tmp_path / "cloudroute.yaml"
    config_path.write_text("routes:\n  backend: iptables\n")

    assert agent_main.main(["--config", str(config_path), "services"]) == 2
