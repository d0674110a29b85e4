"""Array of non-negative integers stored with variable bit widths.

Each value ``x`` is stored as the bits of ``x + 1`` below its leading one.
The start of every block of elements is kept as an absolute bit pointer,
and the other elements store their offset within the block, so any element
is reached in constant time.
"""

from __future__ import annotations

import math
from typing import Iterable, Iterator

_WORD_BITS = 64


def _default_block_size() -> int:
    return math.ceil(_WORD_BITS * math.log(2))


class DensePointerArray:
    """Immutable compact array with dense block pointers."""

    def __init__(self, values: Iterable[int], block_size: int = 0) -> None:
        values = list(values)
        if any(v < 0 for v in values):
            raise ValueError("values must be non-negative")
        b = block_size if block_size > 1 else _default_block_size()
        self._block_size = b
        self._n = len(values)

        pointers: list[int] = []
        offsets: list[int] = []
        chunks: list[tuple[int, int]] = []
        pos = 0
        within = 0
        for i, x in enumerate(values):
            width = (x + 1).bit_length() - 1
            if i % b == 0:
                pointers.append(pos)
                within = 0
            else:
                offsets.append(within)
            if width:
                chunks.append(((x + 1) & ((1 << width) - 1), pos))
            pos += width
            within += width

        bits = 0
        for value, at in chunks:
            bits |= value << at
        self._bits = bits
        self._total_bits = pos
        self._pointers = pointers
        self._offsets = offsets

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def total_bits(self) -> int:
        """Number of payload bits stored for all elements."""
        return self._total_bits

    def __len__(self) -> int:
        return self._n

    def _start(self, i: int) -> int:
        block, residual = divmod(i, self._block_size)
        start = self._pointers[block]
        if residual:
            start += self._offsets[i - block - 1]
        return start

    def __getitem__(self, i: int) -> int:
        if i < 0:
            i += self._n
        if not 0 <= i < self._n:
            raise IndexError("index out of range")
        start = self._start(i)
        end = self._start(i + 1) if i + 1 < self._n else self._total_bits
        width = end - start
        payload = (self._bits >> start) & ((1 << width) - 1)
        return (payload | (1 << width)) - 1

    def __iter__(self) -> Iterator[int]:
        for i in range(self._n):
            yield self[i]