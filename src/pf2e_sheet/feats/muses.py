"""
Bard muses, including extra muses from Multifarious Muse.

Muse ids come in several spellings: the plain name (``enigma``), the
specialization id (``muse_enigma``) and, for polymath, an old Foundry id.
They are compared by their normalized name.
"""

from __future__ import annotations

from ..catalog.manager import GameDataCatalog
from ..models import Character
from . import count_feats, matching_feats

BARD = "Bard"

ENIGMA_MUSE_IDS = ("enigma", "muse_enigma")
MAESTRO_MUSE_IDS = ("maestro", "muse_maestro")
POLYMATH_MUSE_IDS = ("polymath", "muse_polymath", "z9QXwXcGB9rwYWDm")

MULTIFARIOUS_MUSE = ("multifarious-muse", "a898miJnjgD93ZsX")
MAX_MULTIFARIOUS_MUSE = 3
MULTIFARIOUS_MUSE_OPTIONS = ("polymath", "enigma", "maestro")

_MUSE_NAMES = {muse_id: ids[0] for ids in (ENIGMA_MUSE_IDS, MAESTRO_MUSE_IDS, POLYMATH_MUSE_IDS) for muse_id in ids}


def muse_name(muse_id: str) -> str:
    """Normalized muse name (``muse_enigma`` -> ``enigma``)."""
    if muse_id in _MUSE_NAMES:
        return _MUSE_NAMES[muse_id]
    return muse_id.removeprefix("muse_")


def is_bard(character: Character, catalog: GameDataCatalog) -> bool:
    return catalog.class_name(character.class_id) == BARD


def primary_muses(character: Character) -> list[str]:
    spec = character.class_specialization_id
    if isinstance(spec, list):
        return [s for s in spec if s]
    return [spec] if spec else []


# ------------------------------------------------------------------
# Multifarious Muse
# ------------------------------------------------------------------


def has_multifarious_muse(character: Character) -> bool:
    return count_feats(character, *MULTIFARIOUS_MUSE) > 0


def multifarious_muse_count(character: Character) -> int:
    """How many times Multifarious Muse was taken, at most 3."""
    return min(count_feats(character, *MULTIFARIOUS_MUSE), MAX_MULTIFARIOUS_MUSE)


def has_max_multifarious_muse(character: Character) -> bool:
    return multifarious_muse_count(character) >= MAX_MULTIFARIOUS_MUSE


def additional_muses(character: Character) -> list[str]:
    """Muses picked with Multifarious Muse, excluding the primary muse.

    The muse is the feat's ``muse`` choice, or its first positional choice.
    """
    primary = {muse_name(m) for m in primary_muses(character)}
    muses = []
    for feat in matching_feats(character, *MULTIFARIOUS_MUSE):
        choice = feat.choice_map.get("muse") or (feat.choices[0] if feat.choices else None)
        if choice and muse_name(choice) not in primary:
            muses.append(choice)
    return muses


def multifarious_granted_feats(character: Character) -> list[str]:
    """The 1st-level feat each Multifarious Muse grants (its second choice)."""
    return [
        feat.choices[1]
        for feat in matching_feats(character, *MULTIFARIOUS_MUSE)
        if len(feat.choices) > 1 and feat.choices[1]
    ]


def all_muses(character: Character) -> list[str]:
    return primary_muses(character) + additional_muses(character)


def has_muse(character: Character, muse_id: str) -> bool:
    """Primary or additional muse, whatever spelling ``muse_id`` uses."""
    wanted = muse_name(muse_id)
    return any(muse_name(m) == wanted for m in all_muses(character))


def available_muses_for_multifarious(character: Character) -> list[str]:
    held = {muse_name(m) for m in all_muses(character)}
    return [muse for muse in MULTIFARIOUS_MUSE_OPTIONS if muse not in held]


# ------------------------------------------------------------------
# Muse prerequisites
# ------------------------------------------------------------------


def has_enigma_muse(character: Character, catalog: GameDataCatalog) -> bool:
    return is_bard(character, catalog) and has_muse(character, "enigma")


def has_maestro_muse(character: Character, catalog: GameDataCatalog) -> bool:
    return is_bard(character, catalog) and has_muse(character, "maestro")


def has_polymath_muse(character: Character, catalog: GameDataCatalog) -> bool:
    return is_bard(character, catalog) and has_muse(character, "polymath")
