"""Whitelist-based correction of cell barcodes with one substitution."""

from __future__ import annotations

import gzip
import io
from enum import IntEnum
from typing import IO, Iterator, Optional

from centrifuger.read_formatter import Category

_BASES = "ACGT"


class CorrectionStatus(IntEnum):
    UNCORRECTABLE = -1
    UNCHANGED = 0
    CORRECTED = 1


def _open_text(path: str) -> IO[str]:
    raw = open(path, "rb")
    stream: IO[bytes] = raw
    if raw.peek(2)[:2] == b"\x1f\x8b":
        stream = gzip.GzipFile(fileobj=raw)  # type: ignore[assignment]
    return io.TextIOWrapper(stream, encoding="latin-1")


class _TrieNode:
    __slots__ = ("children", "end", "count")

    def __init__(self) -> None:
        self.children: dict[str, _TrieNode] = {}
        self.end = False
        self.count = 0


class BarcodeTrie:
    """Trie over nucleotide strings, each end node holding a count."""

    def __init__(self) -> None:
        self._head = _TrieNode()
        self._size = 0

    @staticmethod
    def _valid(s: str) -> bool:
        return all(c in _BASES for c in s)

    def insert(self, s: str, weight: int = 1) -> None:
        """Add ``weight`` to the count of ``s``; strings with non-ACGT letters are ignored."""
        if not self._valid(s):
            return
        node = self._head
        created = False
        for c in s:
            child = node.children.get(c)
            if child is None:
                child = _TrieNode()
                node.children[c] = child
                created = True
            node = child
        node.end = True
        node.count += weight
        if created:
            self._size += 1

    def search_and_update(self, s: str, weight: int = 0) -> int:
        """Add ``weight`` to the count of ``s`` and return it; -1 if ``s`` is absent."""
        if not self._valid(s):
            return -1
        node = self._head
        for c in s:
            child = node.children.get(c)
            if child is None:
                return -1
            node = child
        node.count += weight
        return node.count

    def __len__(self) -> int:
        return self._size


class BarcodeCorrector:
    """Corrects barcodes to the most frequent whitelisted neighbour."""

    def __init__(self) -> None:
        self._trie = BarcodeTrie()

    @property
    def trie(self) -> BarcodeTrie:
        return self._trie

    def load_whitelist(self, path: str) -> None:
        """Read one barcode per line from a plain or gzip-compressed file."""
        with _open_text(path) as fh:
            for line in fh:
                if line.endswith("\n"):
                    line = line[:-1]
                self._trie.insert(line, 1)

    def __len__(self) -> int:
        return len(self._trie)

    def collect_background(self, reads, formatter, case_count: int = 2_000_000) -> None:
        """Count whitelisted barcodes among the first ``case_count`` reads, then rewind."""
        seen = 0
        for read in reads:
            barcode = formatter.extract(read.seq, Category.BARCODE, True)
            self._trie.search_and_update(barcode, 1)
            seen += 1
            if seen >= case_count:
                break
        reads.rewind()

    def _candidates(self, barcode: str) -> Iterator[tuple[int, str, int]]:
        for i, orig in enumerate(barcode):
            for base in _BASES:
                if base == orig:
                    continue
                candidate = barcode[:i] + base + barcode[i + 1:]
                count = self._trie.search_and_update(candidate, 0)
                if count != -1:
                    yield i, candidate, count

    def correct(self, barcode: str, qual: Optional[str] = None) -> tuple[CorrectionStatus, str]:
        """Return the status and the (possibly corrected) barcode.

        Among whitelisted barcodes one substitution away the most frequent
        wins; ties go to the substitution at the lowest quality position.
        """
        if self._trie.search_and_update(barcode, 0) != -1:
            return CorrectionStatus.UNCHANGED, barcode

        best: Optional[str] = None
        best_count = -1
        best_qual = 255
        for i, candidate, count in self._candidates(barcode):
            if count > best_count:
                best_count = count
                best = candidate
                if qual is not None:
                    best_qual = ord(qual[i])
            elif count == best_count and qual is not None and ord(qual[i]) < best_qual:
                best_qual = ord(qual[i])
                best = candidate

        if best is None:
            return CorrectionStatus.UNCORRECTABLE, barcode
        return CorrectionStatus.CORRECTED, best