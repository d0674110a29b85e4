"""Translation of barcodes through a table of from/to pairs."""

from __future__ import annotations

import gzip
import io
from typing import IO, Optional

_SEPARATORS = ",\t "


class UnknownBarcodeError(KeyError):
    """A barcode chunk is missing from the translation table."""


def _open_text(path: str) -> IO[str]:
    raw = open(path, "rb")
    stream: IO[bytes] = raw
    if raw.peek(2)[:2] == b"\x1f\x8b":
        stream = gzip.GzipFile(fileobj=raw)  # type: ignore[assignment]
    return io.TextIOWrapper(stream, encoding="latin-1")


class BarcodeTranslator:
    """Maps barcodes, chunk by chunk, to their translated form."""

    def __init__(self) -> None:
        self._table: Optional[dict[str, str]] = None
        self._from_length = -1

    @property
    def is_set(self) -> bool:
        return self._table is not None

    def load_table(self, path: str) -> None:
        """Read lines of "to<sep>from" where sep is a comma, tab or space."""
        table: dict[str, str] = {}
        with _open_text(path) as fh:
            for line in fh:
                if line.endswith("\n"):
                    line = line[:-1]
                cut = next((i for i, c in enumerate(line) if c in _SEPARATORS), None)
                if cut is None:
                    raise ValueError(f"no separator in translation line {line!r}")
                target, source = line[:cut], line[cut + 1:]
                self._from_length = len(source)
                table[source] = target
        self._table = table

    def translate(self, barcode: str) -> str:
        """Translate each whole chunk of the barcode and join them with "-"."""
        if self._table is None:
            return barcode
        length = self._from_length
        if length <= 0:
            return ""
        translated = []
        for k in range(len(barcode) // length):
            chunk = barcode[k * length:(k + 1) * length]
            try:
                translated.append(self._table[chunk])
            except KeyError:
                raise UnknownBarcodeError(
                    f"Barcode {chunk} does not exist in the translation table.") from None
        return "-".join(translated)