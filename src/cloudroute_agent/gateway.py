"""Resolve the next-hop address of the active VPN interface."""

from __future__ import annotations

import ipaddress
import logging
import socket
from typing import Optional

from cloudroute.exceptions import GatewayNotFound

LOG = logging.getLogger(__name__)


def _peer_address(interface: str) -> Optional[str]:
    """Return the remote end of ``interface``, or ``None`` if it has no IPv4.

    On point-to-point links ``IFA_ADDRESS`` carries the peer while
    ``IFA_LOCAL`` is our own address.  On broadcast/subnet links both hold
    the local address, which the kernel rejects as a next hop.
    """

    # Imported lazily: pyroute2 is only usable on Linux.
    import pyroute2

    local_only = []
    try:
        with pyroute2.IPRoute() as ipr:
            links = ipr.link_lookup(ifname=interface)
            if not links:
                return None
            for addr in ipr.get_addr(family=socket.AF_INET, index=links[0]):
                peer = addr.get_attr("IFA_ADDRESS")
                local = addr.get_attr("IFA_LOCAL")
                if peer and local and peer != local:
                    return str(peer)
                if peer or local:
                    local_only.append(str(local or peer))
    except pyroute2.NetlinkError as exc:
        raise GatewayNotFound(f"could not query interface {interface}: {exc}") from exc

    if local_only:
        raise GatewayNotFound(
            f"interface '{interface}' is not point-to-point (local address "
            f"{local_only[0]}); configure the gateway address instead"
        )
    return None


def resolve_gateway(address: Optional[str] = None, interface: Optional[str] = None) -> str:
    """Return the IPv4 gateway to route through.

    A configured ``address`` wins.  Otherwise the peer address of the
    point-to-point ``interface`` is used.  The VPN itself must already be
    connected.
    """

    if address:
        try:
            return str(ipaddress.IPv4Address(address))
        except ipaddress.AddressValueError as exc:
            raise GatewayNotFound(f"gateway '{address}' is not an IPv4 address") from exc

    if not interface:
        raise GatewayNotFound("no gateway address or VPN interface configured")

    found = _peer_address(interface)
    if found is None:
        raise GatewayNotFound(f"interface '{interface}' has no IPv4 address; is the VPN connected?")
    LOG.info("Using peer %s of interface %s as gateway", found, interface)
    return found
