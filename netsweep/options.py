"""Parsing and checking of scanner command-line option values."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_DIGITS = re.compile(r"\d*")
_CORE_SEPARATORS = re.compile(r"[,\s]+")

_BANDWIDTH_SUFFIXES = {
    "g": 1_000_000_000,
    "m": 1_000_000,
    "k": 1_000,
}
PORT_MAX = 0xFFFF
SHARD_MAX = 65534
SHARDS_MAX = 65535


@dataclass(frozen=True)
class OutputFilter:
    """How responses are filtered before output."""

    filter_duplicates: bool
    filter_unsuccessful: bool
    expression: Optional[str] = None


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _enforce_range(name: str, value: int, low: int, high: int) -> int:
    if not low <= value <= high:
        raise ValueError(f"argument `{name}' must be between {low} and {high}")
    return value


def parse_bandwidth(text: str) -> int:
    """Bits per second from a number with an optional G, M or K suffix."""
    digits = _LEADING_DIGITS.match(text).group(0)
    value = int(digits) if digits else 0
    suffix = text[len(digits):]
    if not suffix:
        return value
    multiplier = _BANDWIDTH_SUFFIXES.get(suffix[0].lower())
    if multiplier is None:
        raise ValueError(
            f"unknown bandwidth suffix '{suffix}' "
            "(supported suffixes are G, M and K)"
        )
    return value * multiplier


def parse_source_ports(text: str) -> tuple[int, int]:
    """First and last source port from ``port`` or ``first-last``."""
    if "-" in text:
        first_text, _, last_text = text.partition("-")
        first = _enforce_range("starting source-port", _atoi(first_text), 0, PORT_MAX)
        last = _enforce_range("ending source-port", _atoi(last_text), 0, PORT_MAX)
        if first > last:
            raise ValueError(
                "invalid source port range: last port is less than first port"
            )
        return first, last
    port = _enforce_range("source-port", _atoi(text), 0, PORT_MAX)
    return port, port


def check_sharding(
    shard: Optional[int], shards: Optional[int], seed_given: bool
) -> tuple[int, int]:
    """Validate shard options; return ``(shard_num, total_shards)``.

    ``None`` means the option was not given.
    """
    if (shard is not None or shards is not None) and not seed_given:
        raise ValueError("Need to specify seed if sharding a scan")
    if (shard is None) != (shards is None):
        raise ValueError(
            "Need to specify both shard number and total number of shards"
        )
    shard_num, total_shards = 0, 1
    if shard is not None:
        shard_num = _enforce_range("shard", shard, 0, SHARD_MAX)
    if shards is not None:
        total_shards = _enforce_range("shards", shards, 1, SHARDS_MAX)
    if shard_num >= total_shards:
        raise ValueError(
            f"With {total_shards} total shards, shard number ({shard_num}) "
            f"must be in range [0, {total_shards})"
        )
    return shard_num, total_shards


def resolve_output_filter(text: Optional[str]) -> OutputFilter:
    """Interpret the output filter option.

    Absent or ``default`` drops duplicates and unsuccessful responses, an
    empty string drops nothing, anything else is kept as an expression.
    """
    if text is None or text == "default":
        return OutputFilter(filter_duplicates=True, filter_unsuccessful=True)
    if text == "":
        return OutputFilter(filter_duplicates=False, filter_unsuccessful=False)
    return OutputFilter(
        filter_duplicates=False, filter_unsuccessful=False, expression=text
    )


def parse_cores(text: str) -> list[int]:
    """CPU core numbers from a comma- or space-separated list."""
    cores = [_atoi(part) for part in _CORE_SEPARATORS.split(text) if part]
    if not cores:
        raise ValueError("no cores specified")
    return cores