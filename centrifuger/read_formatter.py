"""Extraction of read, barcode and UMI segments from sequences and headers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

_COMPLEMENT = {"A": "T", "C": "G", "G": "C", "T": "A"}
_SEPARATORS = " \t"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class Category(IntEnum):
    READ1 = 0
    READ2 = 1
    BARCODE = 2
    UMI = 3


_CATEGORY_TAGS = {"r1": Category.READ1, "r2": Category.READ2,
                  "bc": Category.BARCODE, "um": Category.UMI}


class FormatError(ValueError):
    """A format description could not be parsed."""


@dataclass
class Segment:
    """An inclusive range; negative positions count from the end.

    For segments in the header comment, ``field`` selects a whitespace
    separated field by number, or ``field_prefix`` the field starting with it.
    """

    start: int
    end: int
    strand: int = 1
    in_comment: bool = False
    field: int = -1
    field_prefix: Optional[str] = None


def _atoi(s: str) -> int:
    m = _LEADING_INT.match(s)
    return int(m.group(1)) if m else 0


def _parse_spec(spec: str) -> tuple[Category, Segment]:
    if len(spec) < 3 or spec[2] != ":" or spec[:2] not in _CATEGORY_TAGS:
        raise FormatError(f"bad segment description {spec!r}")
    category = _CATEGORY_TAGS[spec[:2]]
    rest = spec[3:]

    in_comment = False
    field = -1
    prefix = None
    if rest.startswith("hd:"):
        in_comment = True
        tag, sep, rest = rest[3:].partition(":")
        if not sep:
            raise FormatError(f"bad segment description {spec!r}")
        if all(c.isdigit() for c in tag):
            field = _atoi(tag)
        else:
            prefix = tag

    parts = rest.split(":")
    if not 2 <= len(parts) <= 3:
        raise FormatError(f"bad segment description {spec!r}")
    strand = 1
    if len(parts) == 3:
        strand = 1 if parts[2].startswith("+") else -1
    return category, Segment(_atoi(parts[0]), _atoi(parts[1]), strand,
                             in_comment, field, prefix)


def _field_bounds(text: str, seg: Segment) -> tuple[int, int]:
    if seg.field >= 0:
        fstart = fend = 0
        count = 0
        for j in range(len(text) + 1):
            if j == len(text) or text[j] in _SEPARATORS:
                count += 1
                if count == seg.field:
                    fstart = j + 1
                elif count == seg.field + 1:
                    fend = j - 1
                    break
        return fstart, fend
    fstart = text.find(seg.field_prefix)
    if fstart < 0:
        raise ValueError(f"field {seg.field_prefix!r} not found in {text!r}")
    p = fstart
    while p < len(text) and text[p] not in _SEPARATORS:
        p += 1
    return fstart, p - 1


class ReadFormatter:
    """Holds the segment layout of each category and extracts it from reads."""

    def __init__(self, format_str: Optional[str] = None) -> None:
        self._segments: dict[Category, list[Segment]] = {c: [] for c in Category}
        if format_str:
            self.parse(format_str)

    def parse(self, format_str: str) -> None:
        """Add segments from a description like "r1:0:-1,bc:0:15;um:16:25"."""
        for spec in re.split(r"[;,]", format_str):
            if not spec:
                continue
            category, seg = _parse_spec(spec)
            self._segments[category].append(seg)

    def add_segment(self, start: int, end: int, strand: int, category) -> None:
        self._segments[Category(category)].append(Segment(start, end, strand))

    def segments(self, category) -> list[Segment]:
        return list(self._segments[Category(category)])

    def segment_count(self, category=None) -> int:
        """Number of segments in a category, or in all when ``category`` is None."""
        if category is None:
            return sum(len(s) for s in self._segments.values())
        return len(self._segments[Category(category)])

    def need_extract(self, category) -> bool:
        segs = self._segments[Category(category)]
        if not segs:
            return False
        if len(segs) == 1:
            s = segs[0]
            if s.start == 0 and s.end == -1 and s.strand == 1 and not s.in_comment:
                return False
        return True

    def is_in_comment(self, category) -> bool:
        segs = self._segments[Category(category)]
        return bool(segs) and segs[0].in_comment

    def extract(self, seq: str, category, need_complement: bool = True) -> str:
        """Concatenate the category's segments of ``seq``.

        If any segment is on the minus strand the result is reversed, and
        also complemented when ``need_complement``.
        """
        category = Category(category)
        if not self.need_extract(category):
            return seq
        in_comment = self.is_in_comment(category)
        pieces = []
        reverse = False
        for seg in self._segments[category]:
            start, end, length = seg.start, seg.end, len(seq)
            if in_comment:
                fstart, fend = _field_bounds(seq, seg)
                if start >= 0:
                    start += fstart
                if end >= 0:
                    end += fstart
                length = fend + 1
            if start < 0:
                start += length
            if end >= length:
                end = length - 1
            elif end < 0:
                end += length
            if start <= end:
                pieces.append(seq[max(start, 0):end + 1])
            if seg.strand == -1:
                reverse = True
        result = "".join(pieces)
        if reverse:
            result = result[::-1]
            if need_complement:
                result = "".join(_COMPLEMENT.get(c, "N") for c in result)
        return result

    def extract_seq_and_qual(self, seq: str, qual: Optional[str], category):
        """Extract from a sequence and, if given, its quality string."""
        new_seq = self.extract(seq, category, True)
        new_qual = None if qual is None else self.extract(qual, category, False)
        return new_seq, new_qual