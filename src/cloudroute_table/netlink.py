"""Linux route table backend using netlink via ``pyroute2``."""

from __future__ import annotations

import errno
import logging

import pyroute2

from cloudroute.config import RouteSpec
from cloudroute.exceptions import RouteInstallFailure

from .base import RouteTable

LOG = logging.getLogger(__name__)

# From /usr/include/linux/rtnetlink.h: RTPROT_STATIC = 4
RTPROT_STATIC = 4


class NetlinkRouteTable(RouteTable):
    """Add routes to a kernel routing table.

    Every call opens its own ``IPRoute`` socket so worker threads never share
    one.
    """

    def __init__(self, table: int = 254) -> None:  # 254 == RT_TABLE_MAIN
        self._table = table

    def add_route(self, spec: RouteSpec) -> None:
        try:
            with pyroute2.IPRoute() as ipr:
                ipr.route(
                    "add",
                    dst=spec.network,
                    dst_len=spec.prefix_length,
                    gateway=spec.gateway,
                    priority=spec.metric,
                    table=self._table,
                    proto=RTPROT_STATIC,
                )
        except pyroute2.NetlinkError as exc:
            if exc.code == errno.EEXIST:
                LOG.debug("Route %s already present in table %d", spec.destination, self._table)
                return
            raise RouteInstallFailure(
                f"netlink refused {spec.destination} via {spec.gateway}: {exc}"
            ) from exc
        except OSError as exc:
            raise RouteInstallFailure(f"netlink unavailable: {exc}") from exc
