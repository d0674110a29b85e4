"""Taxonomy tree, scientific names and sequence-to-taxon mappings."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, replace
from typing import BinaryIO, Iterable, Iterator, Mapping, TextIO

from centrifuger.mapid import MapID
from centrifuger.ranks import (
    UNKNOWN_LEVEL,
    Rank,
    is_canonical_rank,
    rank_from_name,
    rank_level,
    rank_name,
)

CENTRIFUGER_VERSION = "1.0.8-r223"

_log = logging.getLogger(__name__)

_U64 = struct.Struct("<Q")
_NODE = struct.Struct("<QBB6x")
_GENOME_EXTENSIONS = ("fna", "fa", "fasta", "faa")


@dataclass
class TaxonomyNode:
    """One node of the flattened tree; ``parent`` is a compact id after loading."""

    parent: int = 0
    rank: Rank = Rank.UNKNOWN
    leaf: bool = False


def _data_lines(path: str) -> Iterator[str]:
    with open(path, encoding="utf-8", errors="replace") as fh:
        for line in fh:
            line = line.rstrip("\r\n")
            if line and not line.startswith("#"):
                yield line


def _file_base_name(path: str, extensions: Iterable[str] = _GENOME_EXTENSIONS) -> str:
    name = path.rsplit("/", 1)[-1]
    if name.endswith(".gz"):
        name = name[:-3]
    stem, dot, ext = name.rpartition(".")
    if dot and ext in extensions:
        return stem
    return name


def _first_number(s: str) -> int:
    digits = []
    for ch in s:
        if ch.isdigit():
            digits.append(ch)
        elif digits:
            break
    return int("".join(digits)) if digits else 0


def _is_next_seq_name(a: str, b: str) -> bool:
    return _first_number(b) == _first_number(a) + 1


def _read_exact(fp: BinaryIO, size: int) -> bytes:
    data = fp.read(size)
    if len(data) != size:
        raise ValueError("truncated taxonomy data")
    return data


def _read_u64(fp: BinaryIO) -> int:
    return _U64.unpack(_read_exact(fp, _U64.size))[0]


def _write_string(fp: BinaryIO, s: str) -> None:
    raw = s.encode("utf-8")
    fp.write(_U64.pack(len(raw)))
    fp.write(raw)


def _read_string(fp: BinaryIO) -> str:
    return _read_exact(fp, _read_u64(fp)).decode("utf-8")


class Taxonomy:
    """Taxonomy restricted to the taxa relevant to a set of sequences.

    Taxa are addressed by compact ids in ``range(node_count)``; the value
    ``node_count`` itself stands for a taxon outside the tree.
    """

    def __init__(self) -> None:
        self._tax_ids: MapID[int] = MapID()
        self._nodes: list[TaxonomyNode] = []
        self._names: list[str] = []
        self._seq_names: MapID[str] = MapID()
        self._seq_to_tax: list[int] = []
        self._seq_count = 0
        self._extra_seq_count = 0
        self._root = 0

    # construction -----------------------------------------------------

    @classmethod
    def from_files(cls, nodes_file, names_file, seqid_file,
                   conversion_table_at_file_level=False) -> "Taxonomy":
        """Build from nodes.dmp, names.dmp and a "sequence taxid" table."""
        tax = cls()
        present = tax._read_present_leaves(seqid_file, column=1)
        selected = tax._read_tree(nodes_file, present)
        tax._read_names(names_file, selected)
        tax._root = tax._find_root()
        tax._read_seq_names(seqid_file, conversion_table_at_file_level)
        return tax

    @classmethod
    def from_tree_files(cls, nodes_file, names_file) -> "Taxonomy":
        """Build from nodes.dmp and names.dmp, keeping every taxon in the tree."""
        tax = cls()
        present = tax._read_present_leaves(nodes_file, column=0)
        selected = tax._read_tree(nodes_file, present)
        tax._read_names(names_file, selected)
        tax._root = tax._find_root()
        return tax

    @staticmethod
    def _read_present_leaves(path: str, column: int) -> set[int]:
        present: set[int] = set()
        for line in _data_lines(path):
            tokens = line.split()
            if len(tokens) > column:
                present.add(int(tokens[column]))
        return present

    def _read_tree(self, path: str, present: set[int]) -> set[int]:
        tree: dict[int, TaxonomyNode] = {}
        for line in _data_lines(path):
            tokens = line.split()
            if len(tokens) < 3:
                continue
            tid, parent = int(tokens[0]), int(tokens[2])
            rank = rank_from_name(tokens[4]) if len(tokens) > 4 else Rank.UNKNOWN
            if tid in tree:
                _log.warning("%d already has a parent!", tid)
                continue
            tree[tid] = TaxonomyNode(parent, rank, True)

        selected: set[int] = set()
        for tid in sorted(present):
            if tid not in tree:
                _log.warning("%d is not in the taxonomy tree", tid)
                continue
            p = tid
            while p not in selected:
                selected.add(p)
                p = tree.setdefault(p, TaxonomyNode(0, Rank.UNKNOWN, True)).parent

        self._tax_ids = MapID()
        self._nodes = []
        for tid in sorted(tree):
            if tid in selected:
                self._tax_ids.add(tid)
                self._nodes.append(replace(tree[tid]))

        for i, node in enumerate(self._nodes):
            if node.parent in self._tax_ids:
                node.parent = self._tax_ids.map(node.parent)
                self._nodes[node.parent].leaf = False
            else:
                _log.warning("parent tax ID of %d does not exist. Set its parent to itself.",
                             self._tax_ids.inverse(i))
                node.parent = i
        return selected

    def _read_names(self, path: str, selected: set[int]) -> None:
        self._names = [""] * len(self._nodes)
        for line in _data_lines(path):
            if "scientific name" not in line:
                continue
            tokens = line.split()
            if len(tokens) < 3:
                continue
            tid = int(tokens[0])
            if tid not in selected:
                continue
            name = tokens[2]
            for word in tokens[3:]:
                if word == "|":
                    break
                name += "_" + word
            self._names[self._tax_ids.map(tid)] = name

    def _read_seq_names(self, path: str, file_level: bool) -> None:
        raw: dict[str, int] = {}
        for line in _data_lines(path):
            tokens = line.split()
            if len(tokens) < 2:
                continue
            seq, tid = tokens[0], int(tokens[1])
            if file_level:
                seq = _file_base_name(seq)
            if seq not in self._seq_names:
                self._seq_names.add(seq)
                raw[seq] = tid
            else:
                raw[seq] = self._common_ancestor(raw[seq], tid)

        self._seq_to_tax = [len(self._nodes)] * len(self._seq_names)
        for name, tid in raw.items():
            self._seq_to_tax[self._seq_names.map(name)] = self.compact_tax_id(tid)
        self._seq_count = len(self._seq_names)

    def _common_ancestor(self, a: int, b: int) -> int:
        path_a = self.lineage(self.compact_tax_id(a))
        path_b = self.lineage(self.compact_tax_id(b))
        i, j = len(path_a) - 1, len(path_b) - 1
        while i >= 0 and j >= 0 and path_a[i] == path_b[j]:
            i -= 1
            j -= 1
        k = i + 1
        if i == len(path_a) - 1 or k >= len(path_b) or path_a[k] != path_b[k]:
            return self.orig_tax_id(self._root)
        return self.orig_tax_id(path_a[k])

    def _find_root(self) -> int:
        return next((i for i, node in enumerate(self._nodes) if node.parent == i),
                    len(self._nodes))

    # queries ----------------------------------------------------------

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def seq_count(self) -> int:
        return self._seq_count

    @property
    def all_seq_count(self) -> int:
        return self._seq_count + self._extra_seq_count

    @property
    def root(self) -> int:
        return self._root

    def tax_id_at_parent_rank(self, ctid: int, rank: int) -> int:
        """The ancestor (or self) with exactly ``rank``; node_count if none."""
        while True:
            node = self._nodes[ctid]
            if node.rank == rank:
                return ctid
            if node.rank > rank or node.parent == ctid:
                return len(self._nodes)
            ctid = node.parent

    def orig_tax_id(self, ctid: int) -> int:
        if ctid >= len(self._nodes):
            return self._tax_ids.inverse(self._root)
        return self._tax_ids.inverse(ctid)

    def compact_tax_id(self, taxid: int) -> int:
        if taxid in self._tax_ids:
            return self._tax_ids.map(taxid)
        return len(self._nodes)

    def parent(self, ctid: int) -> int:
        return self._nodes[ctid].parent

    def rank_of(self, ctid: int) -> Rank:
        if ctid >= len(self._nodes):
            return Rank.UNKNOWN
        return self._nodes[ctid].rank

    def set_name(self, ctid: int, name: str) -> None:
        if ctid < len(self._nodes):
            self._names[ctid] = name

    def name_of(self, ctid: int) -> str:
        if ctid < len(self._nodes):
            return self._names[ctid]
        return "Unknown"

    def seq_name_to_id(self, name: str) -> int:
        if name not in self._seq_names:
            return len(self._seq_names)
        return self._seq_names.map(name)

    def seq_id_to_name(self, seqid: int) -> str:
        return self._seq_names.inverse(seqid)

    def add_extra_seq_name(self, name: str) -> int:
        """Register a sequence without taxonomy information; return its id."""
        seqid = self._seq_names.add(name)
        self._extra_seq_count += 1
        return seqid

    def seq_id_to_tax_id(self, seqid: int) -> int:
        if seqid < self._seq_count:
            return self._seq_to_tax[seqid]
        return len(self._nodes)

    def seq_names(self) -> list[str]:
        return self._seq_names.elements()

    def reduce_tax_ids(self, tax_ids, k: int) -> list[int]:
        """Promote taxa to coarser levels until at most ``k`` remain."""
        tax_ids = list(tax_ids)
        if len(tax_ids) <= k:
            return tax_ids
        n = len(self._nodes)
        if any(t >= n for t in tax_ids):
            return [n]

        levels: list[set[int]] = [set() for _ in range(Rank.MAX)]
        for t in tax_ids:
            prev = 0
            levels[prev].add(t)
            while True:
                level = rank_level(self._nodes[t].rank)
                if level != UNKNOWN_LEVEL and level > prev:
                    for ri in range(level - 1, prev, -1):
                        levels[ri].add(t)
                    if t in levels[level]:
                        break
                    levels[level].add(t)
                    prev = level
                t = self._nodes[t].parent
                if t == self._nodes[t].parent:
                    break

        chosen = next((ri for ri in range(UNKNOWN_LEVEL) if len(levels[ri]) <= k),
                      UNKNOWN_LEVEL)
        return sorted(levels[chosen]) or [self._root]

    def lineage(self, ctid: int) -> list[int]:
        """Path from ``ctid`` towards the root, the root itself excluded."""
        if ctid >= len(self._nodes):
            return [self._root]
        path = []
        while True:
            path.append(ctid)
            ctid = self._nodes[ctid].parent
            if ctid == self._nodes[ctid].parent:
                return path

    def is_in_canonical_rank(self, ctid: int) -> bool:
        return is_canonical_rank(self._nodes[ctid].rank)

    def promote_to_canonical_rank(self, tax_ids, dedup: bool) -> list[int]:
        """Move each taxon up to its nearest canonical-rank ancestor."""
        promoted = []
        for p in tax_ids:
            while not is_canonical_rank(self._nodes[p].rank) and p != self._nodes[p].parent:
                p = self._nodes[p].parent
            promoted.append(p)
        if dedup:
            promoted = list(dict.fromkeys(promoted))
        return promoted

    def children_tax(self, ctid: int) -> set[int]:
        """Compact ids of ``ctid`` and every taxon below it."""
        n = len(self._nodes)
        if ctid >= n:
            return set()
        visited = [-1] * n
        visited[ctid] = 1
        for i in range(n):
            t = i
            path = []
            while t != self._nodes[t].parent and visited[t] == -1:
                path.append(t)
                t = self._nodes[t].parent
            result = max(visited[t], 0)
            for node in path:
                visited[node] = result
        return {i for i, v in enumerate(visited) if v == 1}

    def seq_length_to_tax_length(self, seq_length: Mapping[int, int]) -> list[int]:
        """Genome length per taxon from per-sequence lengths."""
        n = len(self._nodes)
        lengths = [0] * n
        names = sorted(self._seq_names.elements())
        i = 0
        while i < len(names):
            seqid = self.seq_name_to_id(names[i])
            total = seq_length.get(seqid, 0)
            taxid = self.seq_id_to_tax_id(seqid)
            j = i + 1
            while j < len(names):
                next_id = self.seq_name_to_id(names[j])
                if (self.seq_id_to_tax_id(next_id) != taxid
                        or not _is_next_seq_name(names[j - 1], names[j])):
                    break
                total += seq_length.get(next_id, 0)
                j += 1
            if taxid < n and total > lengths[taxid]:
                lengths[taxid] = total
            i = j
        return self.infer_all_tax_length(lengths, True)

    def infer_all_tax_length(self, lengths, from_seq_length: bool) -> list[int]:
        """Fill in lengths of inner taxa by averaging the preset leaves below them."""
        lengths = list(lengths)
        n = len(self._nodes)
        preset = [length != 0 for length in lengths]
        counts = [1 if p else 0 for p in preset]
        sums = [0] * n
        for i, node in enumerate(self._nodes):
            if not preset[i] or node.parent == i or not node.leaf:
                continue
            p = node.parent
            while True:
                counts[p] += 1
                sums[p] += lengths[i]
                if p == self._nodes[p].parent:
                    break
                p = self._nodes[p].parent

        result = list(lengths)
        for i in range(n):
            if lengths[i] == 0 or from_seq_length:
                total = sums[i] + (lengths[i] if preset[i] else 0)
                result[i] = total if counts[i] == 0 else total // counts[i]
        return result

    # persistence ------------------------------------------------------

    def save(self, fp: BinaryIO) -> None:
        fp.write(_U64.pack(len(self._nodes)))
        fp.write(_U64.pack(self._seq_count))
        fp.write(_U64.pack(self._extra_seq_count))
        for node in self._nodes:
            fp.write(_NODE.pack(node.parent, int(node.rank), int(node.leaf)))
        self._tax_ids.save(fp)
        for name in self._names:
            _write_string(fp, name)
        for taxid in self._seq_to_tax[: self._seq_count]:
            fp.write(_U64.pack(taxid))
        for name in self._seq_names.elements()[: self.all_seq_count]:
            _write_string(fp, name)

    @classmethod
    def load(cls, fp: BinaryIO) -> "Taxonomy":
        tax = cls()
        node_count = _read_u64(fp)
        tax._seq_count = _read_u64(fp)
        tax._extra_seq_count = _read_u64(fp)
        for _ in range(node_count):
            parent, rank, leaf = _NODE.unpack(_read_exact(fp, _NODE.size))
            tax._nodes.append(TaxonomyNode(parent, Rank(rank), bool(leaf)))
        tax._tax_ids = MapID.load(fp)
        tax._names = [_read_string(fp) for _ in range(node_count)]
        tax._seq_to_tax = [_read_u64(fp) for _ in range(tax._seq_count)]
        for _ in range(tax.all_seq_count):
            tax._seq_names.add(_read_string(fp))
        tax._root = tax._find_root()
        return tax

    def write_tree(self, out: TextIO) -> None:
        for i, node in enumerate(self._nodes):
            out.write(f"{self.orig_tax_id(i)}\t|\t{self.orig_tax_id(node.parent)}"
                      f"\t|\t{rank_name(node.rank)}\n")

    def write_names(self, out: TextIO) -> None:
        for i, name in enumerate(self._names):
            out.write(f"{self.orig_tax_id(i)}\t|\t{name}\t|\tscientific name\n")

    def write_conversion_table(self, out: TextIO) -> None:
        for i in range(self.all_seq_count):
            taxid = self.orig_tax_id(self.seq_id_to_tax_id(i))
            out.write(f"{self._seq_names.inverse(i)}\t{taxid}\n")