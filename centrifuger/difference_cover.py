"""Cyclic difference covers built with the Colbourn-Ling construction.

A difference cover modulo ``v`` is a set D of residues such that every
residue is the difference of two members of D.
"""

from __future__ import annotations

import math


def _cover_param(v: int) -> int:
    return math.ceil((-36 + math.sqrt(1296 - 96 * (13 - v))) / 48.0)


def _step(i: int, r: int) -> int:
    if i < r:
        return 1
    if i < r + 1:
        return r + 1
    if i < 2 * r + 1:
        return 2 * r + 1
    if i < 4 * r + 2:
        return 4 * r + 3
    if i < 5 * r + 3:
        return 2 * r + 2
    if i < 6 * r + 3:
        return 1
    return 0


class DifferenceCover:
    """A difference cover with period ``v`` (at least 14)."""

    def __init__(self, v: int = 4096) -> None:
        if v <= 13:
            v = 14
        self._v = v
        r = _cover_param(v)
        raw = [0]
        for i in range(1, 6 * r + 4):
            raw.append(raw[-1] + _step(i - 1, r))
        self._dcs = sorted({x % v for x in raw})
        self._index = {d: i for i, d in enumerate(self._dcs)}

        table = [-1] * v
        table[0] = 0
        for a in self._dcs:
            for b in self._dcs:
                table[(b - a) % v] = a
        self._table = table

    @staticmethod
    def estimate_cover_size(v: int):
        """Upper bound on the cover size for period ``v``; infinite when v <= 13."""
        if v <= 13:
            return math.inf
        return 6 * _cover_param(v) + 4

    @property
    def v(self) -> int:
        return self._v

    @property
    def m(self) -> int:
        return len(self._dcs)

    @property
    def elements(self) -> list[int]:
        return list(self._dcs)

    def __contains__(self, i: int) -> bool:
        return i % self._v in self._index

    def size(self, n: int) -> int:
        """Number of covered positions in ``range(n)``."""
        rem = n % self._v
        below = sum(1 for d in self._dcs if d < rem)
        return n // self._v * len(self._dcs) + below

    def cover_list(self, n: int) -> list[int]:
        """Covered positions in ``range(n)``, increasing."""
        cycles = -(-n // self._v)
        return [c * self._v + d for c in range(cycles) for d in self._dcs
                if c * self._v + d < n]

    def compact_index(self, i: int) -> int:
        """Index of covered position ``i`` among all covered positions."""
        try:
            offset = self._index[i % self._v]
        except KeyError:
            raise ValueError(f"{i} is not in the difference cover") from None
        return i // self._v * len(self._dcs) + offset

    def delta(self, i: int, j: int) -> int:
        """Smallest shift in ``range(v)`` after which both ``i`` and ``j`` are covered."""
        ri = i % self._v
        rj = j % self._v
        d = (rj - ri) % self._v
        return (self._table[d] - ri) % self._v