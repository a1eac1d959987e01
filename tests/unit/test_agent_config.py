from pathlib import Path

import pytest

from cloudroute_agent.config import AgentConfig, load_config


def test_load_config(tmp_path: Path):
    config_path = tmp_path / "cloudroute.yaml"
    config_path.write_text(
        """
catalog: /var/lib/cloudroute/ServiceTags_Public.json
gateway:
  interface: ppp0
routes:
  metric: 3
  concurrency_limit: 4
  backend: command
  normalize_networks: true
filter:
  services: [AzureSQL, Storage]
  regions: westeurope
"""
    )

    cfg = load_config(config_path)

    assert cfg.catalog == Path("/var/lib/cloudroute/ServiceTags_Public.json")
    assert cfg.gateway.address is None
    assert cfg.gateway.interface == "ppp0"
    assert cfg.routes.metric == 3
    assert cfg.routes.concurrency_limit == 4
    assert cfg.routes.backend == "command"
    assert cfg.routes.normalize_networks is True
    assert cfg.filter.services == ["AzureSQL", "Storage"]
    assert cfg.filter.regions == ["westeurope"]

    route_filter = cfg.filter.to_service_filter()
    assert route_filter.services == frozenset({"azuresql", "storage"})
    assert route_filter.regions == frozenset({"westeurope"})


def test_empty_config_uses_defaults(tmp_path: Path):
    config_path = tmp_path / "cloudroute.yaml"
    config_path.write_text("")

    cfg = load_config(config_path)

    assert cfg == AgentConfig()
    assert cfg.routes.metric == 1
    assert cfg.routes.concurrency_limit == 10
    assert cfg.routes.backend == "auto"
    assert cfg.filter.to_service_filter().all_services


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "routes:\n  backend: iptables\n",
        "routes:\n  concurrency_limit: 0\n",
        "routes:\n  metric: -2\n",
        "gateway: 10.8.0.1\n",
        "filter:\n  services: {a: b}\n",
        "routes: [unclosed\n",
        "routes:\n  normalize_networks: \"false\"\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str):
    config_path = tmp_path / "cloudroute.yaml"
    config_path.write_text(content)

    with pytest.raises(ValueError):
        load_config(config_path)
