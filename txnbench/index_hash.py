"""Hash index: fixed buckets per partition, each a chain of per-key nodes."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from txnbench.helper import ItemId


@dataclass(eq=False)
class BucketNode:
    """All items sharing one key; nodes of a bucket are linked through ``next``."""

    key: int
    items: Optional[ItemId] = None
    next: Optional["BucketNode"] = None


class BucketHeader:
    """One hash bucket: a chain of key nodes guarded by a latch."""

    def __init__(self) -> None:
        self.first_node: Optional[BucketNode] = None
        self.lock = threading.Lock()

    def __iter__(self) -> Iterator[BucketNode]:
        node = self.first_node
        while node is not None:
            yield node
            node = node.next

    @property
    def node_cnt(self) -> int:
        return sum(1 for _ in self)

    def insert_item(self, key: int, item: ItemId) -> None:
        """Add item under key.

        A new key is appended at the end of the chain; for a known key the
        item is put in front of the key's existing items.
        """
        prev: Optional[BucketNode] = None
        for node in self:
            if node.key == key:
                item.next = node.items
                node.items = item
                return
            prev = node
        new_node = BucketNode(key=key, items=item)
        if prev is None:
            self.first_node = new_node
        else:
            prev.next = new_node

    def read_item(self, key: int) -> ItemId:
        """Items stored under key; KeyError if the key is absent."""
        for node in self:
            if node.key == key:
                return node.items
        raise KeyError(f"key {key} does not exist")


class IndexHash:
    """Index mapping integer keys to item chains through per-partition buckets."""

    def __init__(self, bucket_cnt: int, part_cnt: int = 1, table: Any = None) -> None:
        if part_cnt < 1:
            raise ValueError("an index needs at least one partition")
        per_part = bucket_cnt // part_cnt
        if per_part < 1:
            raise ValueError("every partition needs at least one bucket")
        self.table = table
        self.part_cnt = part_cnt
        self.bucket_cnt = bucket_cnt
        self.bucket_cnt_per_part = per_part
        self._buckets = [
            [BucketHeader() for _ in range(per_part)] for _ in range(part_cnt)
        ]

    def _hash(self, key: int) -> int:
        return key % self.bucket_cnt_per_part

    def _bucket(self, key: int, part_id: int) -> BucketHeader:
        if not 0 <= part_id < self.part_cnt:
            raise ValueError(f"partition {part_id} out of range 0..{self.part_cnt - 1}")
        return self._buckets[part_id][self._hash(key)]

    def index_insert(self, key: int, item: ItemId, part_id: int = 0) -> None:
        """Insert item under key in the given partition."""
        bucket = self._bucket(key, part_id)
        with bucket.lock:
            bucket.insert_item(key, item)

    def index_read(self, key: int, part_id: int = 0, thd_id: int = 0) -> ItemId:
        """Items stored under key in the partition; KeyError if absent."""
        return self._bucket(key, part_id).read_item(key)