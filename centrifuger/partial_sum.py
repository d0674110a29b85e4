"""Prefix sums over non-negative integers with search by value."""

from __future__ import annotations

import struct
from bisect import bisect_right
from itertools import accumulate
from typing import BinaryIO, Iterable

_U64 = struct.Struct("<Q")


class PartialSum:
    """Prefix sums of a sequence of non-negative integers."""

    def __init__(self, values: Iterable[int] = ()) -> None:
        values = list(values)
        if any(v < 0 for v in values):
            raise ValueError("values must be non-negative")
        self._psum = list(accumulate(values, initial=0))

    @classmethod
    def from_partial_sums(cls, psum) -> "PartialSum":
        """Build from sums before each element, ending with the total."""
        psum = list(psum)
        if not psum or psum[0] != 0:
            raise ValueError("partial sums must start with 0")
        if any(b < a for a, b in zip(psum, psum[1:])):
            raise ValueError("partial sums must be non-decreasing")
        result = cls()
        result._psum = psum
        return result

    @property
    def total(self) -> int:
        return self._psum[-1]

    def __len__(self) -> int:
        return len(self._psum) - 1

    def sum(self, i: int) -> int:
        """Sum of the first ``i`` elements."""
        if i <= 0:
            return 0
        if i >= len(self):
            return self.total
        return self._psum[i]

    def search(self, v: int) -> int:
        """The largest ``i`` with ``sum(i) <= v``."""
        if v < 0:
            raise ValueError("search value must be non-negative")
        if v >= self.total:
            return len(self)
        return bisect_right(self._psum, v) - 1

    def value(self, i: int) -> int:
        """The ``i``-th element."""
        if not 0 <= i < len(self):
            raise IndexError(i)
        return self._psum[i + 1] - self._psum[i]

    def save(self, fp: BinaryIO) -> None:
        fp.write(_U64.pack(len(self)))
        fp.write(_U64.pack(self.total))
        fp.write(struct.pack(f"<{len(self._psum)}Q", *self._psum))

    @classmethod
    def load(cls, fp: BinaryIO) -> "PartialSum":
        header = fp.read(2 * _U64.size)
        if len(header) != 2 * _U64.size:
            raise ValueError("truncated partial sum header")
        n, total = struct.unpack("<QQ", header)
        body = fp.read(8 * (n + 1))
        if len(body) != 8 * (n + 1):
            raise ValueError("truncated partial sum body")
        psum = list(struct.unpack(f"<{n + 1}Q", body))
        if psum[-1] != total:
            raise ValueError("inconsistent partial sum total")
        return cls.from_partial_sums(psum)