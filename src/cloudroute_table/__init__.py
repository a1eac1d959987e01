"""OS routing table backends for the route installer.

Each backend implements :class:`~cloudroute_table.base.RouteTable`.  The
netlink backend talks to the Linux kernel through ``pyroute2``; the command
backend shells out to the platform ``route``/``ip`` utility.  Backends are
looked up by name through :class:`~cloudroute_table.registry.RouteTableRegistry`
so the agent can pick one from its configuration file.
"""

from .base import RouteTable  # noqa: F401
from .registry import RouteTableRegistry, build_route_table  # noqa: F401

__all__ = [
    "RouteTable",
    "RouteTableRegistry",
    "build_route_table",
]
