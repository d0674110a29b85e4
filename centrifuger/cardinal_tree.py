"""Cardinal tree: every node has up to ``cardinality`` labelled child slots."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import BinaryIO

_U64 = struct.Struct("<Q")


@dataclass
class _Node:
    parent: int
    k: int
    children: list[int] = field(default_factory=list)


def _read_u64s(fp: BinaryIO, count: int) -> tuple[int, ...]:
    data = fp.read(8 * count)
    if len(data) != 8 * count:
        raise ValueError("truncated cardinal tree data")
    return struct.unpack(f"<{count}Q", data)


class CardinalTree:
    """Plain cardinal tree rooted at node 0; child id 0 marks an empty slot."""

    def __init__(self, cardinality: int) -> None:
        if cardinality <= 0:
            raise ValueError("cardinality must be positive")
        self._c = cardinality
        self._nodes = [_Node(0, 0, [0] * cardinality)]

    @property
    def cardinality(self) -> int:
        return self._c

    @property
    def root(self) -> int:
        return 0

    def __len__(self) -> int:
        return len(self._nodes)

    def _check_label(self, label: int) -> None:
        if not 0 <= label < self._c:
            raise ValueError(f"label {label} outside 0..{self._c - 1}")

    def add_node(self, parent: int, k: int) -> int:
        """Add a child of ``parent`` with label ``k``; return its id."""
        if not 0 <= parent < len(self._nodes):
            raise IndexError(parent)
        self._check_label(k)
        node_id = len(self._nodes)
        self._nodes[parent].children[k] = node_id
        self._nodes.append(_Node(parent, k, [0] * self._c))
        return node_id

    def _present_children(self, v: int) -> list[int]:
        return [c for c in self._nodes[v].children if c != 0]

    def child_select(self, v: int, t: int) -> int:
        """The ``t``-th (1-based) child of ``v``; 0 if there is none."""
        children = self._present_children(v)
        return children[t - 1] if 1 <= t <= len(children) else 0

    def first_child(self, v: int) -> int:
        return next(iter(self._present_children(v)), 0)

    def last_child(self, v: int) -> int:
        return next(reversed(self._present_children(v)), 0)

    def children_count(self, v: int) -> int:
        return len(self._present_children(v))

    def child_rank(self, v: int) -> int:
        """``v`` is the returned (1-based) child of its parent; 0 for the root."""
        if v == self.root:
            return 0
        node = self._nodes[v]
        siblings = self._nodes[node.parent].children
        return sum(1 for c in siblings[:node.k + 1] if c != 0)

    def next_sibling(self, v: int) -> int:
        node = self._nodes[v]
        siblings = self._nodes[node.parent].children
        return next((c for c in siblings[node.k + 1:] if c != 0), 0)

    def prev_sibling(self, v: int) -> int:
        node = self._nodes[v]
        siblings = self._nodes[node.parent].children
        return next((c for c in reversed(siblings[:node.k]) if c != 0), 0)

    def parent(self, v: int) -> int:
        return self._nodes[v].parent

    def is_leaf(self, v: int) -> bool:
        return self.children_count(v) == 0

    def children_labeled(self, v: int, label: int) -> int:
        """1 if ``v`` has a child with ``label``, else 0."""
        self._check_label(label)
        child = self._nodes[v].children[label]
        count = 0
        if child != 0:
            count += 1
        return count

    def labeled_child(self, v: int, label: int) -> int:
        self._check_label(label)
        return self._nodes[v].children[label]

    def child_label(self, v: int) -> int:
        """The label of the edge leading to ``v``."""
        return self._nodes[v].k

    def save(self, fp: BinaryIO) -> None:
        fp.write(_U64.pack(len(self._nodes)))
        fp.write(_U64.pack(self._c))
        for node in self._nodes:
            fp.write(struct.pack(f"<{self._c + 2}Q", node.parent, node.k, *node.children))

    @classmethod
    def load(cls, fp: BinaryIO) -> "CardinalTree":
        n, c = _read_u64s(fp, 2)
        if n == 0:
            raise ValueError("cardinal tree without a root")
        tree = cls(c)
        tree._nodes = []
        for _ in range(n):
            values = _read_u64s(fp, c + 2)
            tree._nodes.append(_Node(values[0], values[1], list(values[2:])))
        return tree