"""YAML configuration loader for the cloudroute agent."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import yaml

from cloudroute.config import ServiceFilter
from cloudroute.driver import DEFAULT_METRIC
from cloudroute.installer import DEFAULT_CONCURRENCY_LIMIT

DEFAULT_CONFIG_PATH = Path("/etc/cloudroute/cloudroute.yaml")
BACKENDS = ("auto", "netlink", "command")


@dataclass
class GatewayConfig:
    address: Optional[str] = None
    interface: Optional[str] = None


@dataclass
class RoutesConfig:
    metric: int = DEFAULT_METRIC
    concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT
    backend: str = "auto"
    normalize_networks: bool = False


@dataclass
class FilterConfig:
    services: List[str] = field(default_factory=list)
    regions: List[str] = field(default_factory=list)

    def to_service_filter(self) -> ServiceFilter:
        return ServiceFilter.from_values(self.services, self.regions)


@dataclass
class AgentConfig:
    catalog: Optional[Path] = None
    gateway: GatewayConfig = field(default_factory=GatewayConfig)
    routes: RoutesConfig = field(default_factory=RoutesConfig)
    filter: FilterConfig = field(default_factory=FilterConfig)


def _section(data: dict, key: str) -> dict:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'{key}' section must be a mapping")
    return section


def _string_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a string or a list of strings")
    return [str(v) for v in value]


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _parse_routes(section: dict) -> RoutesConfig:
    metric = int(section.get("metric", DEFAULT_METRIC))
    if metric < 0:
        raise ValueError("'routes.metric' must not be negative")
    concurrency = int(section.get("concurrency_limit", DEFAULT_CONCURRENCY_LIMIT))
    if concurrency < 1:
        raise ValueError("'routes.concurrency_limit' must be at least 1")
    backend = str(section.get("backend", "auto")).lower()
    if backend not in BACKENDS:
        raise ValueError(f"Unsupported route backend '{backend}'")
    normalize = section.get("normalize_networks", False)
    if not isinstance(normalize, bool):
        raise ValueError("'routes.normalize_networks' must be true or false")
    return RoutesConfig(
        metric=metric,
        concurrency_limit=concurrency,
        backend=backend,
        normalize_networks=normalize,
    )


def parse_config(data: Any) -> AgentConfig:
    if data is None:
        return AgentConfig()
    if not isinstance(data, dict):
        raise ValueError("Agent configuration must be a mapping")

    catalog = data.get("catalog")
    gateway = _section(data, "gateway")
    filter_section = _section(data, "filter")

    return AgentConfig(
        catalog=Path(catalog) if catalog else None,
        gateway=GatewayConfig(
            address=_optional_str(gateway.get("address")),
            interface=_optional_str(gateway.get("interface")),
        ),
        routes=_parse_routes(_section(data, "routes")),
        filter=FilterConfig(
            services=_string_list(filter_section.get("services"), "filter.services"),
            regions=_string_list(filter_section.get("regions"), "filter.regions"),
        ),
    )


def load_config(path: Path) -> AgentConfig:
    try:
        data = yaml.safe_load(Path(path).read_text())
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse {path}: {exc}") from exc
    return parse_config(data)
