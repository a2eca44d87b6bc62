"""Walking one subshard of a cyclic multiplicative group of addresses."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Optional

SHARD_DONE = 0
_ELEMENT_LIMIT = 1 << 32
_UINT32_MASK = 0xFFFFFFFF


@dataclass(frozen=True)
class Cycle:
    """A generator of the group modulo ``prime``, its order and a start offset."""

    generator: int
    order: int
    offset: int
    prime: int


@dataclass
class ShardState:
    """Progress counters of one subshard."""

    sent: int = 0
    tried_sent: int = 0
    blacklisted: int = 0
    whitelisted: int = 0
    failures: int = 0
    first_scanned: int = 0
    max_targets: int = 0


class Shard:
    """One subshard: a contiguous run of exponents of the generator.

    Group elements ``e`` map to allowed-address indices ``e - 1``; indices at
    or beyond ``max_index`` are skipped, and ``lookup_index`` turns an index
    into an address.
    """

    def __init__(
        self,
        shard_idx: int,
        num_shards: int,
        thread_idx: int,
        num_threads: int,
        max_total_targets: int,
        cycle: Cycle,
        max_index: int,
        lookup_index: Callable[[int], int],
    ) -> None:
        if num_shards <= 0:
            raise ValueError("number of shards must be positive")
        if num_threads <= 0:
            raise ValueError("number of threads must be positive")
        if not 0 <= shard_idx < num_shards:
            raise ValueError("shard index out of range")
        if not 0 <= thread_idx < num_threads:
            raise ValueError("thread index out of range")
        num_subshards = num_shards * num_threads
        num_elements = cycle.order
        if num_subshards >= num_elements:
            raise ValueError("more subshards than elements in the group")
        if max_total_targets and num_subshards > max_total_targets:
            raise ValueError("more subshards than maximum targets")

        sub_idx = shard_idx * num_threads + thread_idx
        step = num_elements // num_subshards
        exponent_begin = (step * sub_idx + cycle.offset) % num_elements
        exponent_end = (
            step * ((sub_idx + 1) % num_subshards) + cycle.offset
        ) % num_elements

        self.first = pow(cycle.generator, exponent_begin, cycle.prime)
        self.last = pow(cycle.generator, exponent_end, cycle.prime)
        self.factor = cycle.generator
        self.modulus = cycle.prime
        self.current = self.first
        self.thread_id = thread_idx
        self.state = ShardState()
        self._max_index = max_index
        self._lookup_index = lookup_index

        if max_total_targets > 0:
            targets = max_total_targets // num_subshards
            if sub_idx < max_total_targets % num_subshards:
                targets += 1
            self.state.max_targets = targets

        self._roll_to_valid()

    @property
    def done(self) -> bool:
        """Whether the subshard has been walked to its end."""
        return self.current == SHARD_DONE

    def _roll_to_valid(self) -> None:
        if self.current - 1 < self._max_index:
            return
        self.next_ip()

    def _next_element(self) -> int:
        while True:
            self.current = self.current * self.factor % self.modulus
            if self.current < _ELEMENT_LIMIT:
                return self.current

    def current_ip(self) -> Optional[int]:
        """Address at the current position, or None once finished."""
        if self.done:
            return None
        return self._lookup_index(self.current - 1)

    def next_ip(self) -> Optional[int]:
        """Advance to the next allowed address; None once the shard is done."""
        if self.done:
            return None
        while True:
            candidate = self._next_element()
            if candidate == self.last:
                self.current = SHARD_DONE
                return None
            if (candidate - 1) & _UINT32_MASK < self._max_index:
                self.state.whitelisted += 1
                return self._lookup_index(candidate - 1)
            self.state.blacklisted += 1

    def __iter__(self) -> Iterator[int]:
        address = self.current_ip()
        while address is not None:
            yield address
            address = self.next_ip()