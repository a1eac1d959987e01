"""Name-based lookup of route table backends."""

from __future__ import annotations

import sys
from typing import Callable, Dict, Optional

from .base import RouteTable

RouteTableFactory = Callable[[], RouteTable]


def _netlink() -> RouteTable:
    # Imported lazily: pyroute2 is only usable on Linux.
    from .netlink import NetlinkRouteTable

    return NetlinkRouteTable()


def _command() -> RouteTable:
    from .command import CommandRouteTable

    return CommandRouteTable()


class RouteTableRegistry:
    """Map backend names to factories."""

    def __init__(self, platform: Optional[str] = None) -> None:
        self._platform = platform or sys.platform
        self._factories: Dict[str, RouteTableFactory] = {}

    def register(self, name: str, factory: RouteTableFactory) -> None:
        if name in self._factories:
            raise ValueError(f"route table backend '{name}' already registered")
        self._factories[name] = factory

    def unregister(self, name: str) -> None:
        self._factories.pop(name, None)

    def names(self) -> list[str]:
        return sorted(self._factories)

    def resolve_name(self, name: str) -> str:
        if name == "auto":
            return "netlink" if self._platform.startswith("linux") else "command"
        return name

    def create(self, name: str) -> RouteTable:
        resolved = self.resolve_name(name)
        factory = self._factories.get(resolved)
        if factory is None:
            raise ValueError(
                f"unknown route table backend '{name}' (choose from auto, {', '.join(self.names())})"
            )
        return factory()


def default_registry(platform: Optional[str] = None) -> RouteTableRegistry:
    registry = RouteTableRegistry(platform)
    registry.register("netlink", _netlink)
    registry.register("command", _command)
    return registry


def build_route_table(name: str = "auto", platform: Optional[str] = None) -> RouteTable:
    """Helper mirroring how the agent picks a backend from configuration."""

    return default_registry(platform).create(name)
