"""Parsing of source address specifications."""

from __future__ import annotations

import socket
from collections.abc import Iterator

from netsweep.state import MAX_SOURCE_IPS

_ADDRESS_MASK = 0xFFFFFFFF
_INADDR_NONE = 0xFFFFFFFF


def string_to_ip_address(text: str) -> int:
    """Parse an IPv4 address into a host-order integer.

    Raises ValueError for anything that is not an address, including the
    broadcast address, which cannot be told apart from an error.
    """
    try:
        packed = socket.inet_aton(text)
    except (OSError, ValueError):
        raise ValueError(f"invalid ip address: `{text}'") from None
    value = int.from_bytes(packed, "big")
    if value == _INADDR_NONE:
        raise ValueError(f"invalid ip address: `{text}'")
    return value


def _expand(text: str) -> Iterator[int]:
    has_dash = "-" in text
    has_comma = "," in text
    if has_dash and has_comma:
        head, _, tail = text.partition(",")
        yield from _expand(head)
        yield from _expand(tail)
    elif has_comma:
        for part in text.split(","):
            yield string_to_ip_address(part)
    elif has_dash:
        first, _, last = text.partition("-")
        start = string_to_ip_address(first)
        end = (string_to_ip_address(last) + 1) & _ADDRESS_MASK
        while start != end:
            yield start
            start = (start + 1) & _ADDRESS_MASK
    else:
        yield string_to_ip_address(text)


def parse_source_ip_addresses(text: str) -> list[int]:
    """Expand a list of addresses and inclusive ranges.

    Accepts forms such as ``a``, ``a,b,c``, ``a-b`` and mixtures like
    ``a-b,c``. At most 256 addresses may result.
    """
    addresses: list[int] = []
    for address in _expand(text):
        if len(addresses) >= MAX_SOURCE_IPS:
            raise ValueError(
                f"over {MAX_SOURCE_IPS} source IP addresses provided"
            )
        addresses.append(address)
    return addresses