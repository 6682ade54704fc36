"""Small shared helpers: item identifiers, key merging, clocks and a seeded PRNG."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional, Sequence

RAND_MAX = 2147483647
_U64_MASK = (1 << 64) - 1


class DataType(Enum):
    """Kind of object an index item points to."""

    TABLE = 0
    PAGE = 1
    ROW = 2


class AccessType(Enum):
    """How a transaction touches a row."""

    RD = 0
    WR = 1
    XP = 2
    SCAN = 3


@dataclass(eq=False)
class ItemId:
    """An index entry pointing at a table, page or row.

    Items sharing a key are linked through ``next``.
    """

    type: DataType = DataType.ROW
    location: Any = None
    next: Optional["ItemId"] = None
    valid: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ItemId):
            return NotImplemented
        return self.type == other.type and self.location is other.location

    def __hash__(self) -> int:
        return hash((self.type, id(self.location)))

    def chain(self) -> Iterator["ItemId"]:
        """Yield this item and every item linked after it."""
        item: Optional[ItemId] = self
        while item is not None:
            yield item
            item = item.next


@dataclass
class MyRand:
    """Linear congruential generator with a 63-bit state."""

    seed: int = 0

    def next(self) -> int:
        """Advance the state and return a value in [0, RAND_MAX)."""
        self.seed = (self.seed * 1103515247 + 12345) % (1 << 63)
        return (self.seed // 65537) % RAND_MAX


def get_thdid_from_txnid(txnid: int, thread_cnt: int) -> int:
    """Thread that owns the given transaction id."""
    return txnid % thread_cnt


def key_to_part(key: int, part_cnt: int, part_alloc: bool) -> int:
    """Partition of a key; everything is partition 0 unless partitioned allocation is on."""
    return key % part_cnt if part_alloc else 0


def _merge_list(key_cnt: int, keys: Sequence[int]) -> int:
    if key_cnt <= 0:
        raise ValueError("key count must be positive")
    if len(keys) < key_cnt:
        raise ValueError(f"expected {key_cnt} keys, got {len(keys)}")
    width = 64 // key_cnt
    merged = 0
    for key in keys[:key_cnt]:
        if not 0 <= key < (1 << width):
            raise ValueError(f"key {key} does not fit in {width} bits")
        merged = ((merged << width) | key) & _U64_MASK
    return merged


def _check_width(keys: Sequence[int], width: int) -> None:
    for key in keys:
        if not 0 <= key < (1 << width):
            raise ValueError(f"key {key} does not fit in {width} bits")


def merge_idx_key(*args: Any) -> int:
    """Merge several keys into one 64-bit index key.

    Accepts ``(key_cnt, keys)``, ``(key1, key2)`` or ``(key1, key2, key3)``.
    """
    if len(args) == 2 and isinstance(args[1], (list, tuple)):
        return _merge_list(args[0], args[1])
    if len(args) == 2:
        _check_width(args, 32)
        key1, key2 = args
        return key1 << 32 | key2
    if len(args) == 3:
        _check_width(args, 21)
        key1, key2, key3 = args
        return key1 << 42 | key2 << 21 | key3
    raise TypeError("merge_idx_key takes (key_cnt, keys), two keys or three keys")


def sys_clock() -> int:
    """Monotonic clock in nanoseconds."""
    return time.monotonic_ns()