"""Turn catalog prefixes into an ordered, de-duplicated route plan."""

from __future__ import annotations

import ipaddress
import logging
from typing import Iterable

from .cidr import convert
from .config import RoutePlan, RouteSpec

LOG = logging.getLogger(__name__)


def build_plan(
    prefixes: Iterable[str],
    gateway: str,
    metric: int,
    *,
    matched_entries: int = 0,
    normalize: bool = False,
) -> RoutePlan:
    """Convert ``prefixes`` into routes via ``gateway`` with ``metric``.

    IPv6 prefixes are counted and dropped.  A malformed prefix aborts the
    whole build with :class:`~cloudroute.exceptions.MalformedAddress` so a
    corrupt catalog never yields a partial plan.  Routes that compare equal
    are kept once, at their first position.
    """

    try:
        ipaddress.IPv4Address(gateway)
    except ipaddress.AddressValueError as exc:
        raise ValueError(f"gateway '{gateway}' is not an IPv4 address") from exc
    if isinstance(metric, bool) or not isinstance(metric, int) or metric < 0:
        raise ValueError(f"metric must be a non-negative integer, got {metric!r}")

    routes = []
    skipped = 0
    for prefix in prefixes:
        converted = convert(prefix, normalize=normalize)
        if converted is None:
            skipped += 1
            continue
        network, mask = converted
        routes.append(RouteSpec(network=network, mask=mask, gateway=gateway, metric=metric))

    # ``dict.fromkeys`` keeps insertion order while de-duplicating.
    unique = tuple(dict.fromkeys(routes))
    if len(unique) != len(routes):
        LOG.debug("Dropped %d duplicate routes", len(routes) - len(unique))

    return RoutePlan(routes=unique, matched_entries=matched_entries, skipped_ipv6=skipped)
