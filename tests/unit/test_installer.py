import pytest

from cloudroute.config import RoutePlan, RouteSpec
from cloudroute.installer import RouteInstaller

from fakes import RecordingRouteTable


def build_plan(count: int) -> RoutePlan:
    routes = tuple(
        RouteSpec(f"10.{i // 256}.{i % 256}.0", "255.255.255.0", "10.8.0.1", 1)
        for i in range(count)
    )
    return RoutePlan(routes=routes, matched_entries=1)


@pytest.mark.parametrize("limit", [1, 3, 10, 50])
def test_install_attempts_every_route(limit):
    table = RecordingRouteTable()
    plan = build_plan(25)

    summary = RouteInstaller(table, concurrency_limit=limit).install(plan)

    assert summary.attempted == 25
    assert summary.succeeded == 25
    assert summary.failed == 0
    assert sorted(table.added, key=lambda s: s.network) == sorted(plan.routes, key=lambda s: s.network)


def test_install_never_exceeds_concurrency_limit():
    table = RecordingRouteTable(delay=0.01)

    RouteInstaller(table, concurrency_limit=3).install(build_plan(20))

    assert 1 <= table.max_in_flight <= 3


def test_failures_are_counted_not_raised():
    plan = build_plan(6)
    failing = {plan.routes[1].network, plan.routes[4].network}
    table = RecordingRouteTable(fail_networks=failing)

    summary = RouteInstaller(table, concurrency_limit=2).install(plan)

    assert summary.attempted == 6
    assert summary.succeeded == 4
    assert summary.failed == 2
    assert {o.spec.network for o in summary.failures()} == failing
    assert all(o.error for o in summary.failures())


def test_unexpected_exceptions_are_contained():
    class ExplodingTable(RecordingRouteTable):
        def add_route(self, spec):
            raise KeyError("boom")

    summary = RouteInstaller(ExplodingTable()).install(build_plan(3))

    assert summary.attempted == 3
    assert summary.failed == 3


def test_empty_plan_is_a_no_op():
    table = RecordingRouteTable()

    summary = RouteInstaller(table).install(RoutePlan())

    assert (summary.attempted, summary.succeeded, summary.failed) == (0, 0, 0)
    assert table.added == []


def test_rejects_invalid_concurrency_limit():
    with pytest.raises(ValueError):
        RouteInstaller(RecordingRouteTable(), concurrency_limit=0)
