"""Entry point for the cloudroute command line agent."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cloudroute.catalog import available_filters, load_catalog
from cloudroute.config import CatalogEntry
from cloudroute.driver import RouteProvisioner
from cloudroute.exceptions import CatalogError, GatewayNotFound, MalformedAddress
from cloudroute.render import render_plan
from cloudroute_table import build_route_table

from .config import BACKENDS, DEFAULT_CONFIG_PATH, AgentConfig, load_config
from .gateway import resolve_gateway

LOG = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ROUTE_FAILURES = 1
EXIT_USAGE = 2


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Path to the service tag catalog JSON file",
    )


def _add_route_arguments(parser: argparse.ArgumentParser) -> None:
    _add_common_arguments(parser)
    parser.add_argument(
        "--service",
        dest="services",
        action="append",
        help="Service tag to route (repeatable, 'All' for every service)",
    )
    parser.add_argument(
        "--region",
        dest="regions",
        action="append",
        help="Restrict to this region (repeatable)",
    )
    parser.add_argument("--gateway", help="IPv4 next hop of the VPN")
    parser.add_argument("--interface", help="VPN interface whose address is the next hop")
    parser.add_argument("--metric", type=int, help="Route metric")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cloudroute",
        description="Route selected cloud service ranges through a VPN gateway",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to the agent configuration file (default {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    explain = commands.add_parser("explain", help="Show the routes that would be installed")
    _add_route_arguments(explain)
    explain.add_argument(
        "--show-routes",
        action="store_true",
        help="Print the command for every planned route",
    )

    enable = commands.add_parser("enable", help="Install routes for the selected ranges")
    _add_route_arguments(enable)
    enable.add_argument(
        "--concurrency",
        type=int,
        help="Maximum number of routes added at the same time",
    )
    enable.add_argument("--backend", choices=BACKENDS, help="Route table backend")

    services = commands.add_parser("services", help="List services and regions in the catalog")
    _add_common_arguments(services)
    return parser


def _load_agent_config(path: Optional[Path]) -> AgentConfig:
    if path is not None:
        return load_config(path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    LOG.debug("No configuration file at %s, using defaults", DEFAULT_CONFIG_PATH)
    return AgentConfig()


def _apply_overrides(config: AgentConfig, args: argparse.Namespace) -> AgentConfig:
    if args.catalog is not None:
        config.catalog = args.catalog
    if getattr(args, "services", None):
        config.filter.services = list(args.services)
    if getattr(args, "regions", None):
        config.filter.regions = list(args.regions)
    if getattr(args, "gateway", None):
        config.gateway.address = args.gateway
        config.gateway.interface = None
    if getattr(args, "interface", None):
        config.gateway.interface = args.interface
        if not getattr(args, "gateway", None):
            config.gateway.address = None
    if getattr(args, "metric", None) is not None:
        if args.metric < 0:
            raise ValueError("--metric must not be negative")
        config.routes.metric = args.metric
    if getattr(args, "concurrency", None) is not None:
        if args.concurrency < 1:
            raise ValueError("--concurrency must be at least 1")
        config.routes.concurrency_limit = args.concurrency
    if getattr(args, "backend", None):
        config.routes.backend = args.backend
    return config


def _catalog(config: AgentConfig) -> List[CatalogEntry]:
    if config.catalog is None:
        raise CatalogError("no catalog configured; pass --catalog or set 'catalog'")
    return load_catalog(config.catalog)


def _run_services(config: AgentConfig) -> int:
    filters = available_filters(_catalog(config))
    print("Services:")
    for service in filters["services"]:
        print(f"  {service}")
    print("Regions:")
    for region in filters["regions"]:
        print(f"  {region}")
    return EXIT_OK


def _provisioner(config: AgentConfig, with_table: bool) -> RouteProvisioner:
    catalog = _catalog(config)
    gateway = resolve_gateway(config.gateway.address, config.gateway.interface)
    route_table = build_route_table(config.routes.backend) if with_table else None
    return RouteProvisioner(
        catalog,
        gateway,
        route_table,
        metric=config.routes.metric,
        concurrency_limit=config.routes.concurrency_limit,
        normalize=config.routes.normalize_networks,
    )


def _run_explain(config: AgentConfig, show_routes: bool) -> int:
    provisioner = _provisioner(config, with_table=False)
    plan = provisioner.explain(config.filter.to_service_filter())
    print(f"Matched entries: {plan.matched_entries}")
    print(f"Planned routes:  {len(plan)}")
    print(f"Skipped IPv6:    {plan.skipped_ipv6}")
    if show_routes:
        print(render_plan(plan))
    return EXIT_OK


def _run_enable(config: AgentConfig) -> int:
    provisioner = _provisioner(config, with_table=True)
    result = provisioner.enable(config.filter.to_service_filter())
    print(f"Matched entries: {result.plan.matched_entries}")
    print(f"Skipped IPv6:    {result.plan.skipped_ipv6}")
    print(f"Attempted:       {result.summary.attempted}")
    print(f"Succeeded:       {result.summary.succeeded}")
    print(f"Failed:          {result.summary.failed}")
    return EXIT_ROUTE_FAILURES if result.summary.failed else EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = _apply_overrides(_load_agent_config(args.config), args)
        if args.command == "services":
            return _run_services(config)
        if args.command == "explain":
            return _run_explain(config, args.show_routes)
        return _run_enable(config)
    except (CatalogError, MalformedAddress, GatewayNotFound) as exc:
        LOG.error("%s", exc)
        return EXIT_USAGE
    except (OSError, ValueError) as exc:
        LOG.error("invalid configuration: %s", exc)
        return EXIT_USAGE


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
