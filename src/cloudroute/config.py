"""Data structures shared by the route provisioning engine.

These light-weight dataclasses describe the catalog, the user filter and the
routes derived from them.  They carry no behaviour beyond small helpers so the
catalog loader, the planner and the installer can exchange them freely.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Sequence, Tuple

ALL_SERVICES = "all"


def _normalise(value: str) -> str:
    return value.strip().lower()


@dataclass(frozen=True)
class CatalogEntry:
    """A named group of IP ranges published by a cloud provider.

    Attributes
    ----------
    service:
        The service tag, e.g. ``AzureSQL``.
    region:
        Region the ranges belong to, or ``None`` for the global tag.  A
        regionless entry is only matched when no region filter is given.
    prefixes:
        CIDR strings in catalog order.  IPv4 and IPv6 may be mixed.
    name:
        Optional display name from the source document
        (``AzureSQL.WestEurope``).  Not used for matching.
    """

    service: str
    region: Optional[str]
    prefixes: Tuple[str, ...] = ()
    name: Optional[str] = None


@dataclass(frozen=True)
class ServiceFilter:
    """Service/region selection applied to the catalog.

    ``services`` set to ``None`` means every service.  An empty ``regions``
    set means the region is not filtered.  Values are trimmed and lowercased
    on construction, and an empty service set or one containing ``All`` is
    stored as ``None``.
    """

    services: Optional[FrozenSet[str]] = None
    regions: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        services = None
        if self.services is not None:
            wanted = frozenset(_normalise(s) for s in self.services if s and s.strip())
            if wanted and ALL_SERVICES not in wanted:
                services = wanted
        regions = frozenset(_normalise(r) for r in self.regions or () if r and r.strip())
        # frozen dataclass: bypass __setattr__
        object.__setattr__(self, "services", services)
        object.__setattr__(self, "regions", regions)

    @classmethod
    def from_values(
        cls,
        services: Optional[Iterable[str]] = None,
        regions: Optional[Iterable[str]] = None,
    ) -> "ServiceFilter":
        return cls(
            services=frozenset(services) if services is not None else None,
            regions=frozenset(regions or ()),
        )

    @property
    def all_services(self) -> bool:
        return self.services is None

    def matches(self, entry: CatalogEntry) -> bool:
        """Return ``True`` when ``entry`` is selected by this filter."""

        if self.services is not None and _normalise(entry.service) not in self.services:
            return False
        if not self.regions:
            return True
        if entry.region is None:
            return False
        return _normalise(entry.region) in self.regions


@dataclass(frozen=True)
class RouteSpec:
    """A static route to install: destination network via ``gateway``."""

    network: str
    mask: str
    gateway: str
    metric: int

    @property
    def prefix_length(self) -> int:
        return ipaddress.IPv4Network(f"0.0.0.0/{self.mask}").prefixlen

    @property
    def destination(self) -> str:
        return f"{self.network}/{self.prefix_length}"


@dataclass(frozen=True)
class RoutePlan:
    """Ordered, de-duplicated routes computed for one provisioning pass."""

    routes: Tuple[RouteSpec, ...] = ()
    matched_entries: int = 0
    skipped_ipv6: int = 0

    def __len__(self) -> int:
        return len(self.routes)

    @property
    def is_empty(self) -> bool:
        return not self.routes


@dataclass(frozen=True)
class InstallOutcome:
    """Result of adding a single route."""

    spec: RouteSpec
    succeeded: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class InstallSummary:
    """Aggregate counts for a batch of route installations."""

    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    outcomes: Sequence[InstallOutcome] = field(default_factory=tuple)

    @classmethod
    def from_outcomes(cls, outcomes: Sequence[InstallOutcome]) -> "InstallSummary":
        succeeded = sum(1 for outcome in outcomes if outcome.succeeded)
        return cls(
            attempted=len(outcomes),
            succeeded=succeeded,
            failed=len(outcomes) - succeeded,
            outcomes=tuple(outcomes),
        )

    def failures(self) -> Sequence[InstallOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]


@dataclass(frozen=True)
class ProvisionResult:
    """What ``enable`` reports: the plan it built and how installing went."""

    plan: RoutePlan
    summary: InstallSummary
