"""Route provisioning orchestrator.

:class:`RouteProvisioner` ties the catalog filter, the plan builder and the
installer together.  ``explain`` stops after planning; ``enable`` builds the
very same plan and hands it to :class:`~cloudroute.installer.RouteInstaller`.
Gateway and metric are fixed per provisioner so both operations always agree
on what would be installed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from .catalog import count_prefixes, select_entries
from .config import CatalogEntry, ProvisionResult, RoutePlan, ServiceFilter
from .installer import DEFAULT_CONCURRENCY_LIMIT, RouteInstaller
from .plan import build_plan

if TYPE_CHECKING:
    from cloudroute_table.base import RouteTable

DEFAULT_METRIC = 1

LOG = logging.getLogger(__name__)


class RouteProvisioner:
    """Plan and install routes for the cloud ranges selected by a filter."""

    def __init__(
        self,
        catalog: Sequence[CatalogEntry],
        gateway: str,
        route_table: Optional["RouteTable"] = None,
        *,
        metric: int = DEFAULT_METRIC,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
        normalize: bool = False,
    ) -> None:
        self._catalog = tuple(catalog)
        self._gateway = gateway
        self._metric = metric
        self._normalize = normalize
        self._installer = (
            RouteInstaller(route_table, concurrency_limit=concurrency_limit)
            if route_table is not None
            else None
        )

    @property
    def gateway(self) -> str:
        return self._gateway

    @property
    def metric(self) -> int:
        return self._metric

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def explain(self, route_filter: ServiceFilter) -> RoutePlan:
        """Compute the plan for ``route_filter`` without installing anything."""

        entries = select_entries(self._catalog, route_filter)
        LOG.debug(
            "Filter matched %d catalog entries with %d prefixes",
            len(entries),
            count_prefixes(entries),
        )
        plan = build_plan(
            (prefix for entry in entries for prefix in entry.prefixes),
            self._gateway,
            self._metric,
            matched_entries=len(entries),
            normalize=self._normalize,
        )
        LOG.info(
            "Planned %d routes via %s from %d matched entries (%d IPv6 prefixes skipped)",
            len(plan),
            self._gateway,
            plan.matched_entries,
            plan.skipped_ipv6,
        )
        return plan

    def enable(self, route_filter: ServiceFilter) -> ProvisionResult:
        """Compute the plan for ``route_filter`` and install it."""

        if self._installer is None:
            raise RuntimeError("enable requires a route table backend")

        plan = self.explain(route_filter)
        summary = self._installer.install(plan)

        if summary.failed:
            LOG.warning(
                "Installed %d of %d routes; %d failed",
                summary.succeeded,
                summary.attempted,
                summary.failed,
            )
        else:
            LOG.info("Installed %d of %d routes", summary.succeeded, summary.attempted)
        return ProvisionResult(plan=plan, summary=summary)
