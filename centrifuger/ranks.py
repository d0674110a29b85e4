"""Taxonomic ranks, their names and their coarse levels."""

from __future__ import annotations

from enum import IntEnum


class Rank(IntEnum):
    UNKNOWN = 0
    STRAIN = 1
    SPECIES = 2
    GENUS = 3
    FAMILY = 4
    ORDER = 5
    CLASS = 6
    PHYLUM = 7
    KINGDOM = 8
    DOMAIN = 9
    FORMA = 10
    INFRA_CLASS = 11
    INFRA_ORDER = 12
    PARV_ORDER = 13
    SUB_CLASS = 14
    SUB_FAMILY = 15
    SUB_GENUS = 16
    SUB_KINGDOM = 17
    SUB_ORDER = 18
    SUB_PHYLUM = 19
    SUB_SPECIES = 20
    SUB_TRIBE = 21
    SUPER_CLASS = 22
    SUPER_FAMILY = 23
    SUPER_KINGDOM = 24
    SUPER_ORDER = 25
    SUPER_PHYLUM = 26
    TRIBE = 27
    VARIETAS = 28
    LIFE = 29
    MAX = 30


_NAMES: dict[Rank, str] = {
    Rank.STRAIN: "strain",
    Rank.SPECIES: "species",
    Rank.GENUS: "genus",
    Rank.FAMILY: "family",
    Rank.ORDER: "order",
    Rank.CLASS: "class",
    Rank.PHYLUM: "phylum",
    Rank.KINGDOM: "kingdom",
    Rank.FORMA: "forma",
    Rank.INFRA_CLASS: "infraclass",
    Rank.INFRA_ORDER: "infraorder",
    Rank.PARV_ORDER: "parvorder",
    Rank.SUB_CLASS: "subclass",
    Rank.SUB_FAMILY: "subfamily",
    Rank.SUB_GENUS: "subgenus",
    Rank.SUB_KINGDOM: "subkingdom",
    Rank.SUB_ORDER: "suborder",
    Rank.SUB_PHYLUM: "subphylum",
    Rank.SUB_SPECIES: "subspecies",
    Rank.SUB_TRIBE: "subtribe",
    Rank.SUPER_CLASS: "superclass",
    Rank.SUPER_FAMILY: "superfamily",
    Rank.SUPER_KINGDOM: "superkingdom",
    Rank.SUPER_ORDER: "superorder",
    Rank.SUPER_PHYLUM: "superphylum",
    Rank.TRIBE: "tribe",
    Rank.VARIETAS: "varietas",
    Rank.LIFE: "life",
}

_FROM_NAME: dict[str, Rank] = {name: rank for rank, name in _NAMES.items()}

NO_RANK = "no rank"


def _build_levels() -> dict[Rank, int]:
    groups = [
        (Rank.SUB_SPECIES, Rank.STRAIN),
        (Rank.SPECIES,),
        (Rank.SUB_GENUS, Rank.GENUS),
        (Rank.SUB_FAMILY, Rank.FAMILY, Rank.SUPER_FAMILY),
        (Rank.SUB_ORDER, Rank.INFRA_ORDER, Rank.PARV_ORDER, Rank.ORDER, Rank.SUPER_ORDER),
        (Rank.INFRA_CLASS, Rank.SUB_CLASS, Rank.CLASS, Rank.SUPER_CLASS),
        (Rank.SUB_PHYLUM, Rank.PHYLUM, Rank.SUPER_PHYLUM),
        (Rank.SUB_KINGDOM, Rank.KINGDOM, Rank.SUPER_KINGDOM),
        (Rank.DOMAIN, Rank.FORMA, Rank.SUB_TRIBE, Rank.TRIBE,
         Rank.VARIETAS, Rank.LIFE, Rank.UNKNOWN),
    ]
    return {rank: level for level, group in enumerate(groups) for rank in group}


_LEVELS = _build_levels()

UNKNOWN_LEVEL = _LEVELS[Rank.UNKNOWN]

_CANONICAL = frozenset({
    Rank.STRAIN, Rank.SPECIES, Rank.GENUS, Rank.FAMILY, Rank.ORDER,
    Rank.CLASS, Rank.PHYLUM, Rank.KINGDOM, Rank.SUPER_KINGDOM, Rank.DOMAIN,
})


def rank_from_name(name: str) -> Rank:
    """Return the rank for a name as used in nodes.dmp; UNKNOWN if unrecognised."""
    return _FROM_NAME.get(name, Rank.UNKNOWN)


def rank_name(rank: int) -> str:
    """Return the name of a rank, or "no rank" for ranks without one."""
    try:
        return _NAMES.get(Rank(rank), NO_RANK)
    except ValueError:
        return NO_RANK


def rank_level(rank: int) -> int:
    """Return the coarse level a rank belongs to; related ranks share a level."""
    return _LEVELS[Rank(rank)]


def is_canonical_rank(rank: int) -> bool:
    """Whether the rank is one of the canonical lineage ranks."""
    try:
        return Rank(rank) in _CANONICAL
    except ValueError:
        return False