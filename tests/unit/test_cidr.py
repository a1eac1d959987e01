import ipaddress

import pytest

from cloudroute.cidr import convert, mask_for_prefix
from cloudroute.exceptions import MalformedAddress


@pytest.mark.parametrize(
    "cidr, expected",
    [
        ("0.0.0.0/0", ("0.0.0.0", "0.0.0.0")),
        ("10.0.0.0/8", ("10.0.0.0", "255.0.0.0")),
        ("20.38.64.0/19", ("20.38.64.0", "255.255.224.0")),
        ("10.0.0.0/24", ("10.0.0.0", "255.255.255.0")),
        ("52.236.186.7/32", ("52.236.186.7", "255.255.255.255")),
    ],
)
def test_convert_ipv4(cidr, expected):
    assert convert(cidr) == expected


def test_mask_has_exactly_n_leading_ones():
    for length in range(33):
        mask = mask_for_prefix(length)
        bits = format(int(ipaddress.IPv4Address(mask)), "032b")
        assert bits == "1" * length + "0" * (32 - length)


@pytest.mark.parametrize("cidr", ["2001:db8::/32", "::/0", "fe80::1/128", "not:an:address"])
def test_convert_skips_anything_with_colon(cidr):
    assert convert(cidr) is None


@pytest.mark.parametrize(
    "cidr",
    [
        "10.0.0.0",
        "10.0.0.0/33",
        "10.0.0.0/-1",
        "10.0.0.0/x",
        "10.0.0/24",
        "300.1.1.1/8",
        "/24",
        "10.0.0.0/²",
        "10.0.0.0/٢٤",
        "",
    ],
)
def test_convert_rejects_malformed(cidr):
    with pytest.raises(MalformedAddress):
        convert(cidr)


def test_convert_passes_host_bits_through_by_default():
    assert convert("10.0.0.7/24") == ("10.0.0.7", "255.255.255.0")


def test_convert_normalizes_host_bits_on_request():
    assert convert("10.0.0.7/24", normalize=True) == ("10.0.0.0", "255.255.255.0")
    assert convert("192.168.5.130/25", normalize=True) == ("192.168.5.128", "255.255.255.128")


def test_mask_for_prefix_rejects_out_of_range():
    with pytest.raises(ValueError):
        mask_for_prefix(33)
