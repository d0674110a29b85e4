"""Bidirectional mapping between arbitrary hashable values and dense ids."""

from __future__ import annotations

import struct
from typing import BinaryIO, Generic, Hashable, Iterable, TypeVar

T = TypeVar("T", bound=Hashable)

_COUNT = struct.Struct("<Q")


class MapID(Generic[T]):
    """Assign each distinct element an id in ``range(len(self))`` in insertion order."""

    def __init__(self, elements: Iterable[T] = ()) -> None:
        self._to_id: dict[T, int] = {}
        self._to_elem: list[T] = []
        for elem in elements:
            self.add(elem)

    def add(self, elem: T) -> int:
        """Return the id of ``elem``, assigning a new one if it is unseen."""
        nid = self._to_id.get(elem)
        if nid is None:
            nid = len(self._to_elem)
            self._to_id[elem] = nid
            self._to_elem.append(elem)
        return nid

    def map(self, elem: T) -> int:
        """Return the id of a known element; raise KeyError otherwise."""
        return self._to_id[elem]

    def __contains__(self, elem: object) -> bool:
        return elem in self._to_id

    def inverse(self, nid: int) -> T:
        """Return the element that was given id ``nid``."""
        if nid < 0:
            raise IndexError(nid)
        return self._to_elem[nid]

    def elements(self) -> list[T]:
        """Return the elements ordered by their id."""
        return list(self._to_elem)

    def __len__(self) -> int:
        return len(self._to_elem)

    def save(self, fp: BinaryIO) -> None:
        """Write the mapping of unsigned 64-bit integers to a binary stream."""
        fp.write(_COUNT.pack(len(self._to_elem)))
        if self._to_elem:
            values = [int(e) for e in self._to_elem]  # type: ignore[call-overload]
            fp.write(struct.pack(f"<{len(values)}Q", *values))

    @classmethod
    def load(cls, fp: BinaryIO) -> "MapID[int]":
        """Read a mapping written by :meth:`save`."""
        header = fp.read(_COUNT.size)
        if len(header) != _COUNT.size:
            raise ValueError("truncated MapID header")
        (n,) = _COUNT.unpack(header)
        body = fp.read(8 * n)
        if len(body) != 8 * n:
            raise ValueError("truncated MapID body")
        result: MapID[int] = MapID()
        for value in struct.unpack(f"<{n}Q", body):
            result._to_id[value] = len(result._to_elem)
            result._to_elem.append(value)
        return result