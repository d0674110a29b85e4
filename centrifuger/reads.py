"""Reading FASTA/FASTQ records, plain or gzip-compressed, from several files."""

from __future__ import annotations

import glob
import gzip
import io
import logging
import os
import re
import sys
from dataclasses import dataclass
from typing import IO, Iterable, Iterator, Optional

_log = logging.getLogger(__name__)

_HEADER_START = (">", "@")
_HEADER_RE = re.compile(r"(\S*)(?:\s(.*))?$", re.DOTALL)
_FILE_END = object()


@dataclass
class Read:
    """One sequence record."""

    id: str
    seq: str
    qual: Optional[str] = None
    comment: Optional[str] = None


def remove_read_id_suffix(name: str) -> str:
    """Drop a trailing "/1" or "/2" mate marker from a read name."""
    if len(name) >= 2 and name[-2] == "/" and name[-1] in "12":
        return name[:-2]
    return name


def parse_records(handle: Iterable[str]) -> Iterator[Read]:
    """Yield records from FASTA or FASTQ text lines.

    The name is the header up to the first whitespace character and the
    comment is what follows it. Empty quality or comment becomes None.
    """
    lines = (line.rstrip("\r\n") for line in handle)
    header = next((line for line in lines if line[:1] in _HEADER_START), None)
    while header is not None:
        match = _HEADER_RE.match(header[1:])
        name = match.group(1)
        comment = match.group(2) or None

        seq_parts: list[str] = []
        next_header = None
        has_qual = False
        for line in lines:
            if line[:1] in _HEADER_START:
                next_header = line
                break
            if line[:1] == "+":
                has_qual = True
                break
            seq_parts.append(line)
        seq = "".join(seq_parts)

        qual = None
        if has_qual:
            qual_parts: list[str] = []
            qual_len = 0
            for line in lines:
                qual_parts.append(line)
                qual_len += len(line)
                if qual_len >= len(seq):
                    break
            if qual_len != len(seq):
                raise ValueError(f"quality and sequence lengths differ for read {name!r}")
            qual = "".join(qual_parts) or None
            next_header = next((line for line in lines if line[:1] in _HEADER_START), None)

        yield Read(name, seq, qual, comment)
        header = next_header


@dataclass
class _InputFile:
    path: str
    has_mate: bool
    interleaved: bool


class ReadFiles:
    """Sequential reader over a list of sequence files."""

    def __init__(self, need_comment: bool = False) -> None:
        self.need_comment = need_comment
        self._files: list[_InputFile] = []
        self._current = 0
        self._handle: Optional[IO[str]] = None
        self._records: Optional[Iterator[Read]] = None

    # file list --------------------------------------------------------

    def add(self, path: str, has_mate: bool = False, interleaved: bool = False) -> int:
        """Add a file, or every file matching a pattern with "*"; return how many."""
        if "*" in path:
            paths = sorted(glob.glob(os.path.expanduser(path)))
            if not paths:
                _log.warning("no file matches %s", path)
        else:
            paths = [path]
        self._files.extend(_InputFile(p, has_mate, interleaved) for p in paths)
        return len(paths)

    @property
    def file_count(self) -> int:
        return len(self._files)

    @property
    def current_file_index(self) -> int:
        return self._current

    @property
    def has_mate(self) -> bool:
        return self._files[0].has_mate

    @property
    def is_interleaved(self) -> bool:
        return self._files[0].interleaved

    def file_name(self, index: int) -> str:
        return self._files[index].path

    # reading ----------------------------------------------------------

    def _open(self, index: int) -> None:
        self._close_current()
        path = self._files[index].path
        raw = sys.stdin.buffer if path == "-" else open(path, "rb")
        stream: IO[bytes] = raw
        if raw.peek(2)[:2] == b"\x1f\x8b":
            stream = gzip.GzipFile(fileobj=raw)  # type: ignore[assignment]
        text = io.TextIOWrapper(stream, encoding="latin-1")
        self._handle = None if path == "-" else text
        self._records = parse_records(text)

    def _close_current(self) -> None:
        if self._handle is not None:
            self._handle.close()
        self._handle = None
        self._records = None

    def _make_read(self, record: Read) -> Read:
        return Read(
            remove_read_id_suffix(record.id),
            record.seq,
            record.qual,
            record.comment if self.need_comment else None,
        )

    def _advance(self, stop_when_file_ends: bool):
        while self._current < len(self._files):
            if self._records is None:
                self._open(self._current)
            record = next(self._records, None)
            if record is not None:
                return self._make_read(record)
            self._close_current()
            self._current += 1
            if stop_when_file_ends:
                return _FILE_END
        return None

    def next(self) -> Optional[Read]:
        """Return the next read across all files, or None when all are done."""
        return self._advance(False)

    def __iter__(self) -> Iterator[Read]:
        while (read := self.next()) is not None:
            yield read

    def rewind(self) -> None:
        """Start again from the first read of the first file."""
        self._close_current()
        self._current = 0

    def batch(self, max_size: int, stop_when_file_ends: bool = False,
              paired: bool = False):
        """Read up to ``max_size`` reads (pairs when ``paired``).

        With ``stop_when_file_ends`` a batch never spans two files. Returns
        the batch and the index of the file the batch came from.
        """
        reads: list = []
        while len(reads) < max_size:
            read = self._advance(stop_when_file_ends)
            if read is _FILE_END:
                if reads:
                    return reads, self._current - 1
                continue
            if read is None:
                break
            if paired:
                mate = self._advance(stop_when_file_ends)
                if mate is None or mate is _FILE_END:
                    raise ValueError(f"read {read.id!r} has no mate in the interleaved file")
                reads.append((read, mate))
            else:
                reads.append(read)
        return reads, self._current

    def close(self) -> None:
        self._close_current()

    def __enter__(self) -> "ReadFiles":
        return self

    def __exit__(self, *args) -> None:
        self.close()