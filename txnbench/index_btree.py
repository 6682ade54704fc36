"""B+ tree index with one tree per partition and per-thread scan cursors."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from txnbench.config import BTREE_ORDER
from txnbench.helper import ItemId


@dataclass(eq=False)
class BTreeNode:
    """A tree node.

    Leaves hold one item (or chain of items) per key; inner nodes hold one
    more child than keys. Nodes on the same level are linked through ``next``.
    """

    is_leaf: bool = False
    keys: list = field(default_factory=list)
    pointers: list = field(default_factory=list)
    parent: Optional["BTreeNode"] = None
    next: Optional["BTreeNode"] = None

    @property
    def num_keys(self) -> int:
        return len(self.keys)


def _cut(length: int) -> int:
    return length // 2 if length % 2 == 0 else length // 2 + 1


class IndexBTree:
    """An index mapping integer keys to item chains, one B+ tree per partition."""

    def __init__(self, part_cnt: int = 1, table: Any = None, order: int = BTREE_ORDER) -> None:
        if part_cnt < 1:
            raise ValueError("an index needs at least one partition")
        if order < 3:
            raise ValueError("the tree order must be at least 3")
        self.part_cnt = part_cnt
        self.order = order
        self.table = table
        self._roots = [BTreeNode(is_leaf=True) for _ in range(part_cnt)]
        self._cursors: dict[int, tuple[Optional[BTreeNode], int]] = {}

    def root(self, part_id: int) -> BTreeNode:
        """Root node of the tree of a partition."""
        if not 0 <= part_id < self.part_cnt:
            raise ValueError(f"partition {part_id} out of range 0..{self.part_cnt - 1}")
        return self._roots[part_id]

    @staticmethod
    def _find_leaf(node: BTreeNode, key: int) -> BTreeNode:
        while not node.is_leaf:
            node = node.pointers[bisect_right(node.keys, key)]
        return node

    def keys(self, part_id: int) -> Iterator[int]:
        """Yield the keys of a partition in ascending order."""
        node = self.root(part_id)
        while not node.is_leaf:
            node = node.pointers[0]
        leaf: Optional[BTreeNode] = node
        while leaf is not None:
            yield from leaf.keys
            leaf = leaf.next

    def index_exist(self, key: int) -> bool:
        """Whether the key is present in any partition."""
        for root in self._roots:
            leaf = self._find_leaf(root, key)
            pos = bisect_left(leaf.keys, key)
            if pos < len(leaf.keys) and leaf.keys[pos] == key:
                return True
        return False

    def index_read(self, key: int, part_id: int, thd_id: int = 0) -> ItemId:
        """Return the item chain for key and place the thread's cursor on it.

        Raises KeyError if the key is not in the partition.
        """
        leaf = self._find_leaf(self.root(part_id), key)
        pos = bisect_left(leaf.keys, key)
        if pos < len(leaf.keys) and leaf.keys[pos] == key:
            self._cursors[thd_id] = (leaf, pos)
            return leaf.pointers[pos]
        raise KeyError(f"key {key} does not exist")

    def index_next(self, thd_id: int = 0, samekey: bool = False) -> Optional[ItemId]:
        """Advance the thread's cursor and return the item there.

        Returns None at the end of the index, or when samekey is set and the
        next key differs. Raises LookupError if the thread has no cursor.
        """
        try:
            leaf, idx = self._cursors[thd_id]
        except KeyError:
            raise LookupError(f"thread {thd_id} has not read from this index") from None
        if leaf is None:
            return None
        cur_key = leaf.keys[idx]
        idx += 1
        if idx >= leaf.num_keys:
            leaf = leaf.next
            idx = 0
        self._cursors[thd_id] = (leaf, idx)
        if leaf is None:
            return None
        if samekey and leaf.keys[idx] != cur_key:
            return None
        return leaf.pointers[idx]

    def index_insert(self, key: int, item: ItemId, part_id: int) -> None:
        """Insert item under key; an existing key gets the item prepended to its chain."""
        leaf = self._find_leaf(self.root(part_id), key)
        pos = bisect_left(leaf.keys, key)
        if pos < len(leaf.keys) and leaf.keys[pos] == key:
            item.next = leaf.pointers[pos]
            leaf.pointers[pos] = item
        elif leaf.num_keys < self.order - 1:
            leaf.keys.insert(pos, key)
            leaf.pointers.insert(pos, item)
        else:
            self._split_leaf(part_id, leaf, pos, key, item)

    def _split_leaf(self, part_id: int, leaf: BTreeNode, pos: int, key: int, item: ItemId) -> None:
        temp_keys = leaf.keys[:pos] + [key] + leaf.keys[pos:]
        temp_ptrs = leaf.pointers[:pos] + [item] + leaf.pointers[pos:]
        split = _cut(self.order - 1)
        new_leaf = BTreeNode(
            is_leaf=True,
            keys=temp_keys[split:],
            pointers=temp_ptrs[split:],
            parent=leaf.parent,
            next=leaf.next,
        )
        leaf.keys = temp_keys[:split]
        leaf.pointers = temp_ptrs[:split]
        leaf.next = new_leaf
        self._insert_into_parent(part_id, leaf, new_leaf.keys[0], new_leaf)

    def _insert_into_parent(self, part_id: int, left: BTreeNode, key: int, right: BTreeNode) -> None:
        parent = left.parent
        if parent is None:
            new_root = BTreeNode(is_leaf=False, keys=[key], pointers=[left, right])
            left.parent = new_root
            right.parent = new_root
            left.next = right
            self._roots[part_id] = new_root
            return
        insert_idx = bisect_left(parent.keys, key)
        if parent.num_keys < self.order - 1:
            parent.keys.insert(insert_idx, key)
            parent.pointers.insert(insert_idx + 1, right)
            right.parent = parent
            return
        self._split_inner(part_id, parent, insert_idx, key, right)

    def _split_inner(
        self, part_id: int, old: BTreeNode, left_index: int, key: int, right: BTreeNode
    ) -> None:
        temp_keys = old.keys[:left_index] + [key] + old.keys[left_index:]
        temp_ptrs = old.pointers[: left_index + 1] + [right] + old.pointers[left_index + 1:]
        right.parent = old
        split = _cut(self.order)
        new_node = BTreeNode(
            is_leaf=False,
            keys=temp_keys[split:],
            pointers=temp_ptrs[split:],
            parent=old.parent,
            next=old.next,
        )
        k_prime = temp_keys[split - 1]
        old.keys = temp_keys[: split - 1]
        old.pointers = temp_ptrs[:split]
        old.next = new_node
        for child in new_node.pointers:
            child.parent = new_node
        self._insert_into_parent(part_id, old, k_prime, new_node)