"""Selective cloud-range routing through a VPN gateway.

This package hosts the route provisioning engine used by the ``cloudroute``
agent.  Given a catalog of cloud service tags (named groups of IP ranges,
optionally scoped to a region) and a service/region filter it:

* resolves the filter into the matching IPv4 prefixes;
* converts every prefix into a concrete static route (network, mask, gateway,
  metric), dropping duplicates; and
* installs the resulting routes into the host routing table through a bounded
  worker pool, counting failures instead of aborting the batch.

IPv6 ranges are skipped on purpose.  Everything here is pure Python; the only
side effects happen inside the route table backend handed to
:class:`cloudroute.driver.RouteProvisioner`, which keeps the engine testable
without root privileges.
"""

from .driver import RouteProvisioner  # noqa: F401

__all__ = ["RouteProvisioner"]
