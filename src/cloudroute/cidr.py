"""CIDR to network/mask conversion."""

from __future__ import annotations

import ipaddress
from typing import Optional, Tuple

from .exceptions import MalformedAddress

IPV4_BITS = 32
_ALL_ONES = (1 << IPV4_BITS) - 1


def mask_for_prefix(length: int) -> str:
    """Return the dotted-quad subnet mask with the top ``length`` bits set."""

    if not 0 <= length <= IPV4_BITS:
        raise ValueError(f"prefix length {length} outside 0..{IPV4_BITS}")
    value = (_ALL_ONES << (IPV4_BITS - length)) & _ALL_ONES
    return str(ipaddress.IPv4Address(value))


def is_ipv6(cidr: str) -> bool:
    return ":" in cidr


def convert(cidr: str, *, normalize: bool = False) -> Optional[Tuple[str, str]]:
    """Split an IPv4 prefix into ``(network, mask)``.

    Returns ``None`` for anything containing ``:``; IPv6 ranges are never
    routed.  The network part is passed through as written unless
    ``normalize`` is set, in which case host bits beyond the prefix length are
    cleared.  Raises :class:`MalformedAddress` for anything else that is not
    ``A.B.C.D/N`` with ``0 <= N <= 32``.
    """

    value = cidr.strip()
    if is_ipv6(value):
        return None

    address, sep, length_text = value.partition("/")
    if not sep:
        raise MalformedAddress(cidr, "missing prefix length")
    if not (length_text.isascii() and length_text.isdigit()):
        raise MalformedAddress(cidr, f"prefix length '{length_text}' is not an integer")

    length = int(length_text)
    if length > IPV4_BITS:
        raise MalformedAddress(cidr, f"prefix length {length} outside 0..{IPV4_BITS}")

    try:
        network = ipaddress.IPv4Address(address)
    except ipaddress.AddressValueError as exc:
        raise MalformedAddress(cidr, str(exc)) from exc

    mask = mask_for_prefix(length)
    if normalize:
        network = ipaddress.IPv4Address(int(network) & int(ipaddress.IPv4Address(mask)))
        return str(network), mask
    return address, mask
