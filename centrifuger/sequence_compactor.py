"""Conversion of raw sequences to alphabet codes."""

from __future__ import annotations

from typing import Iterable, Optional


class SequenceCompactor:
    """Encodes characters as their position in an alphabet.

    Characters outside the alphabet are dropped, or replaced by
    ``missing_replace`` when it is given.
    """

    def __init__(self, alphabet: str = "ACGT", capitalize: bool = False,
                 missing_replace: Optional[str] = None) -> None:
        if not alphabet or len(set(alphabet)) != len(alphabet) or len(alphabet) > 256:
            raise ValueError("alphabet must hold 1 to 256 distinct characters")
        self._alphabet = alphabet
        self._codes = {c: i for i, c in enumerate(alphabet)}
        if missing_replace is not None and missing_replace not in self._codes:
            raise ValueError("replacement character must be in the alphabet")
        self.capitalize = capitalize
        self.missing_replace = missing_replace

    @property
    def alphabet(self) -> str:
        return self._alphabet

    def compact(self, raw: str) -> bytes:
        """Return the codes of the characters of ``raw`` that are kept."""
        codes = bytearray()
        for c in raw:
            if self.capitalize and "a" <= c <= "z":
                c = c.upper()
            code = self._codes.get(c)
            if code is None:
                if self.missing_replace is None:
                    continue
                code = self._codes[self.missing_replace]
            codes.append(code)
        return bytes(codes)

    def decode(self, codes: Iterable[int]) -> str:
        """Turn codes back into characters."""
        return "".join(self._alphabet[code] for code in codes)