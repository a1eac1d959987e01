"""Best-effort concurrent installation of a route plan."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TYPE_CHECKING, List

from .config import InstallOutcome, InstallSummary, RoutePlan, RouteSpec

if TYPE_CHECKING:
    from cloudroute_table.base import RouteTable

DEFAULT_CONCURRENCY_LIMIT = 10

LOG = logging.getLogger(__name__)


class RouteInstaller:
    """Add every route of a plan through ``route_table``.

    At most ``concurrency_limit`` additions run at the same time.  A failing
    route is logged and counted; it never cancels the remaining ones and it is
    not retried.  :meth:`install` returns only once every route has resolved.

    Parameters
    ----------
    route_table:
        Backend exposing ``add_route(spec)``; any exception it raises marks
        that route as failed.
    concurrency_limit:
        Size of the worker pool.  It bounds process/netlink pressure on the
        host; route additions are independent of each other.
    """

    def __init__(
        self,
        route_table: "RouteTable",
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
    ) -> None:
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be at least 1, got {concurrency_limit}")
        self._route_table = route_table
        self._concurrency_limit = concurrency_limit

    @property
    def concurrency_limit(self) -> int:
        return self._concurrency_limit

    def _add(self, spec: RouteSpec) -> InstallOutcome:
        try:
            self._route_table.add_route(spec)
        except Exception as exc:
            LOG.warning(
                "Failed to add route %s mask %s via %s: %s",
                spec.network,
                spec.mask,
                spec.gateway,
                exc,
            )
            return InstallOutcome(spec=spec, succeeded=False, error=str(exc) or type(exc).__name__)
        LOG.debug("Added route %s mask %s via %s", spec.network, spec.mask, spec.gateway)
        return InstallOutcome(spec=spec, succeeded=True)

    def install(self, plan: RoutePlan) -> InstallSummary:
        if plan.is_empty:
            return InstallSummary()

        total = len(plan.routes)
        workers = min(self._concurrency_limit, total)
        outcomes: List[InstallOutcome] = []

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="route-add") as executor:
            futures = [executor.submit(self._add, spec) for spec in plan.routes]
            for future in as_completed(futures):
                outcomes.append(future.result())
                if len(outcomes) % 50 == 0 or len(outcomes) == total:
                    LOG.debug("Progress: %d/%d routes processed", len(outcomes), total)

        return InstallSummary.from_outcomes(outcomes)
