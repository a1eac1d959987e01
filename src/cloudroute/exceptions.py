"""Error types raised by the route provisioning engine."""

from __future__ import annotations


class MalformedAddress(ValueError):
    """A catalog prefix is neither valid IPv4 CIDR nor an IPv6 literal."""

    def __init__(self, cidr: str, reason: str) -> None:
        super().__init__(f"malformed prefix '{cidr}': {reason}")
        self.cidr = cidr
        self.reason = reason


class CatalogError(ValueError):
    """The catalog document does not have a supported shape."""


class RouteInstallFailure(RuntimeError):
    """A single route could not be added to the OS routing table."""


class GatewayNotFound(RuntimeError):
    """No usable IPv4 gateway address could be determined."""
