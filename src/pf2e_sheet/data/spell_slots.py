"""
Spell slot progression for the spellcasting classes.

Progressions are indexed by character level (index 0 is level 1); each row
holds the slots per spell rank starting at rank 1. Configs are keyed by
class name, resolved from a class id through the rules catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..models import Proficiency, SpellSlot, Tradition

SpellcastingType = Literal["prepared", "spontaneous"]

SlotTable = tuple[tuple[int, ...], ...]


def _full_caster(new_rank: int, full_rank: int) -> SlotTable:
    """Every rank kept; a new rank opens with ``new_rank`` slots and fills up next level.

    The 10th rank arrives at level 19 with a single slot.
    """
    rows = []
    for level in range(1, 21):
        top = min((level + 1) // 2, 9)
        row = [full_rank] * top
        if level % 2 and level <= 17:
            row[-1] = new_rank
        if level >= 19:
            row.append(1)
        rows.append(tuple(row))
    return tuple(rows)


def _wave_caster() -> SlotTable:
    """Only the two highest ranks have slots: 2 below, 1 then 2 in the newest."""
    rows = []
    for level in range(1, 21):
        top = min((level + 1) // 2, 9)
        row = [0] * top
        if top > 1:
            row[-2] = 2
        row[-1] = 1 if level % 2 and level <= 17 else 2
        rows.append(tuple(row))
    return tuple(rows)


# Bard, Cleric, Druid, Wizard, Witch and Animist
STANDARD_PROGRESSION = _full_caster(2, 3)
# Sorcerer and Oracle
SORCERER_PROGRESSION = _full_caster(3, 4)
PSYCHIC_PROGRESSION = _full_caster(1, 2)
MAGUS_PROGRESSION = _wave_caster()
SUMMONER_PROGRESSION: SlotTable = (
    (1,),
    (1,),
    (1, 1),
    (2, 2),
    (0, 2, 2),
    (0, 2, 2),
    (0, 0, 2, 2),
    (0, 0, 2, 2),
    (0, 0, 0, 2, 2),
    (0, 0, 0, 2, 2),
    (0, 0, 0, 0, 2, 2),
    (0, 0, 0, 0, 2, 2),
    (0, 0, 0, 0, 0, 2, 2),
    (0, 0, 0, 0, 0, 2, 2),
    (0, 0, 0, 0, 0, 0, 2, 2),
    (0, 0, 0, 0, 0, 0, 2, 2),
    (0, 0, 0, 0, 0, 0, 0, 2, 2),
    (0, 0, 0, 0, 0, 0, 0, 2, 2),
    (0, 0, 0, 0, 0, 0, 0, 0, 2, 2),
    (0, 0, 0, 0, 0, 0, 0, 0, 2, 2),
)


@dataclass(frozen=True)
class SpellcasterConfig:
    class_name: str
    tradition: Tradition
    spellcasting_type: SpellcastingType
    key_ability: str
    slots: SlotTable
    starting_proficiency: Proficiency = Proficiency.TRAINED
    cantrips_known: int = 5


SPELLCASTER_CLASSES: tuple[SpellcasterConfig, ...] = (
    SpellcasterConfig("Bard", "occult", "spontaneous", "cha", STANDARD_PROGRESSION),
    # Tradition is set by the bloodline
    SpellcasterConfig("Sorcerer", "arcane", "spontaneous", "cha", SORCERER_PROGRESSION),
    SpellcasterConfig("Wizard", "arcane", "prepared", "int", STANDARD_PROGRESSION),
    SpellcasterConfig("Cleric", "divine", "prepared", "wis", STANDARD_PROGRESSION),
    SpellcasterConfig("Druid", "primal", "prepared", "wis", STANDARD_PROGRESSION),
    SpellcasterConfig("Magus", "arcane", "prepared", "int", MAGUS_PROGRESSION),
    SpellcasterConfig("Witch", "occult", "prepared", "int", STANDARD_PROGRESSION),
    SpellcasterConfig("Oracle", "divine", "spontaneous", "cha", SORCERER_PROGRESSION),
    SpellcasterConfig("Summoner", "arcane", "spontaneous", "cha", SUMMONER_PROGRESSION),
    SpellcasterConfig("Psychic", "occult", "spontaneous", "int", PSYCHIC_PROGRESSION, cantrips_known=3),
    SpellcasterConfig("Animist", "primal", "spontaneous", "wis", STANDARD_PROGRESSION),
)

SPELLCASTER_CONFIG_BY_NAME = {config.class_name: config for config in SPELLCASTER_CLASSES}

SORCERER_BLOODLINE_TRADITIONS: dict[str, Tradition] = {
    "bloodline_aberrant": "occult",
    "bloodline_angelic": "divine",
    "bloodline_demonic": "divine",
    "bloodline_draconic": "arcane",
    "bloodline_elemental": "primal",
    "bloodline_fey": "primal",
}


@dataclass(frozen=True)
class ClassGrantedSpell:
    spell_id: str
    granted_at_level: int = 1


@dataclass(frozen=True)
class ClassGrantedSpells:
    """Spells a class feature adds to the sheet automatically."""
    focus_spells: tuple[ClassGrantedSpell, ...] = ()
    cantrips: tuple[ClassGrantedSpell, ...] = ()


CLASS_GRANTED_SPELLS: dict[str, ClassGrantedSpells] = {
    # Composition Spells; the composition cantrip is listed with focus spells
    "Bard": ClassGrantedSpells(
        focus_spells=(
            ClassGrantedSpell("WILXkjU5Yq3yw10r"),  # Counter Performance
            ClassGrantedSpell("IAjvwqgiDr3qGYxY"),  # Courageous Anthem
        ),
    ),
}


def spellcaster_config(class_name: str | None) -> SpellcasterConfig | None:
    return SPELLCASTER_CONFIG_BY_NAME.get(class_name or "")


def is_spellcaster_class(class_name: str | None) -> bool:
    return spellcaster_config(class_name) is not None


def tradition_for_bloodline(bloodline_id: str) -> Tradition | None:
    return SORCERER_BLOODLINE_TRADITIONS.get(bloodline_id)


def calculate_spell_slots(class_name: str | None, level: int) -> dict[int, SpellSlot]:
    """Empty slots per rank for ``class_name`` at ``level``; ranks with 0 slots are left out."""
    config = spellcaster_config(class_name)
    if config is None or not 1 <= level <= 20:
        return {}
    return {
        rank: SpellSlot(max=count, used=0)
        for rank, count in enumerate(config.slots[level - 1], start=1)
        if count > 0
    }


def cantrips_known(class_name: str | None) -> int:
    config = spellcaster_config(class_name)
    return config.cantrips_known if config else 0


def spells_known(class_name: str | None, level: int) -> dict[int, int]:
    """Repertoire size per rank for a spontaneous caster.

    Lower ranks hold 3 spells. The highest rank holds 2 at the odd level
    it opens and 3 from the next level.
    """
    config = spellcaster_config(class_name)
    if config is None or config.spellcasting_type != "spontaneous" or not 1 <= level <= 20:
        return {}
    row = config.slots[level - 1]
    top = (level + 1) // 2
    known = {}
    for rank in range(1, min(len(row), top) + 1):
        known[rank] = 3 if rank < top or level % 2 == 0 else 2
    return known


def granted_focus_spells(class_name: str | None, level: int) -> list[str]:
    granted = CLASS_GRANTED_SPELLS.get(class_name or "")
    if granted is None:
        return []
    return [spell.spell_id for spell in granted.focus_spells if spell.granted_at_level <= level]


def granted_cantrips(class_name: str | None, level: int) -> list[str]:
    granted = CLASS_GRANTED_SPELLS.get(class_name or "")
    if granted is None:
        return []
    return [spell.spell_id for spell in granted.cantrips if spell.granted_at_level <= level]
