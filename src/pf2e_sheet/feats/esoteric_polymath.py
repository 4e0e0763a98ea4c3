"""
Esoteric Polymath: an occult spellbook from which the bard prepares one
spell each day.

A prepared spell already in the repertoire becomes a signature spell for
the day; one outside the repertoire is castable as if it were in it. For
spontaneous casters the prepared spell also gets heightened copies at
every slot rank above its base rank, up to the character's level.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..catalog.manager import GameDataCatalog
from ..catalog.models import SpellDefinition
from ..models import Character, EsotericPolymathState, HeightenedSpell
from . import has_feat
from .muses import has_polymath_muse

logger = logging.getLogger("pf2e-sheet")

ESOTERIC_POLYMATH = ("esoteric-polymath", "4HZTLPKPteEFsa7n")

__all__ = [
    "ESOTERIC_POLYMATH",
    "SpellbookEntry",
    "add_spell_to_book",
    "available_spells",
    "can_cast_as_in_repertoire",
    "can_cast_as_signature",
    "effective_repertoire",
    "effective_signature_spells",
    "has_esoteric_polymath",
    "has_polymath_muse",
    "initialize_spellbook",
    "is_daily_preparation",
    "remove_spell_from_book",
    "reset_daily_preparation",
    "set_daily_preparation",
    "sync_spellbook",
]


@dataclass(frozen=True)
class SpellbookEntry:
    spell: SpellDefinition
    in_repertoire: bool
    is_daily_preparation: bool

    @property
    def effect(self) -> str:
        return "signature" if self.in_repertoire else "repertoire"


def has_esoteric_polymath(character: Character) -> bool:
    return has_feat(character, *ESOTERIC_POLYMATH)


def _known(character: Character) -> list[str]:
    return character.spellcasting.known_spells if character.spellcasting else []


def _daily(character: Character) -> str | None:
    return character.spellbook.esoteric_polymath.daily_preparation


def initialize_spellbook(character: Character) -> Character:
    """Fill the book from the repertoire, or clear it if the feat is gone.

    An existing daily preparation is kept.
    """
    updated = character.model_copy(deep=True)
    if not has_esoteric_polymath(character):
        updated.spellbook.esoteric_polymath = EsotericPolymathState()
        return updated
    updated.spellbook.esoteric_polymath.occult_spells = list(_known(character))
    return updated


def add_spell_to_book(character: Character, spell_id: str) -> Character:
    if not has_esoteric_polymath(character):
        return character
    if spell_id in character.spellbook.esoteric_polymath.occult_spells:
        return character
    updated = character.model_copy(deep=True)
    updated.spellbook.esoteric_polymath.occult_spells.append(spell_id)
    return updated


def remove_spell_from_book(character: Character, spell_id: str) -> Character:
    """Remove a spell, clearing today's preparation if it was that spell."""
    updated = character.model_copy(deep=True)
    book = updated.spellbook.esoteric_polymath
    book.occult_spells = [s for s in book.occult_spells if s != spell_id]
    if book.daily_preparation == spell_id:
        book.daily_preparation = None
    return updated


def _remove_heightened(character: Character, spell_id: str) -> None:
    if character.spellcasting is None:
        return
    character.spellcasting.heightened_spells = [
        h for h in character.spellcasting.heightened_spells
        if not (h.spell_id == spell_id and h.from_esoteric_polymath)
    ]


def _add_heightened(character: Character, spell_id: str, base_rank: int) -> None:
    spellcasting = character.spellcasting
    ranks = sorted(r for r in spellcasting.spell_slots if base_rank < r <= character.level)
    if not ranks:
        return
    _remove_heightened(character, spell_id)
    spellcasting.heightened_spells.extend(
        HeightenedSpell(spell_id=spell_id, heightened_level=rank, from_esoteric_polymath=True)
        for rank in ranks
    )


def set_daily_preparation(character: Character, spell_id: str | None, catalog: GameDataCatalog) -> Character:
    """Prepare ``spell_id`` from the book for today (None clears it).

    Args:
        character: The character preparing.
        spell_id: A spell in the book, or None.
        catalog: Used to look up the spell's base rank.

    Returns:
        The updated character; unchanged if the feat is missing or the spell
        is not in the book.
    """
    if not has_esoteric_polymath(character):
        return character

    previous = _daily(character)
    if spell_id is None:
        updated = character.model_copy(deep=True)
        updated.spellbook.esoteric_polymath.daily_preparation = None
        if previous:
            _remove_heightened(updated, previous)
        return updated

    if spell_id not in character.spellbook.esoteric_polymath.occult_spells:
        logger.debug(f"Spell {spell_id} is not in the Esoteric Polymath book")
        return character

    updated = character.model_copy(deep=True)
    updated.spellbook.esoteric_polymath.daily_preparation = spell_id

    spellcasting = updated.spellcasting
    if spellcasting is not None and spellcasting.spellcasting_type == "spontaneous":
        spell = catalog.get_spell(spell_id)
        if spell is not None:
            if previous and previous != spell_id:
                _remove_heightened(updated, previous)
            _add_heightened(updated, spell_id, spell.rank)
    return updated


def is_daily_preparation(character: Character, spell_id: str) -> bool:
    return _daily(character) == spell_id


def can_cast_as_signature(character: Character, spell_id: str) -> bool:
    """Today's preparation, already in the repertoire."""
    return has_esoteric_polymath(character) and _daily(character) == spell_id and spell_id in _known(character)


def can_cast_as_in_repertoire(character: Character, spell_id: str) -> bool:
    """Today's preparation, not in the repertoire."""
    return has_esoteric_polymath(character) and _daily(character) == spell_id and spell_id not in _known(character)


def available_spells(character: Character, catalog: GameDataCatalog) -> list[SpellbookEntry]:
    if not has_esoteric_polymath(character):
        return []
    known = _known(character)
    daily = _daily(character)
    entries = []
    for spell_id in character.spellbook.esoteric_polymath.occult_spells:
        spell = catalog.get_spell(spell_id)
        if spell is None:
            continue
        entries.append(SpellbookEntry(spell=spell, in_repertoire=spell_id in known, is_daily_preparation=spell_id == daily))
    return entries


def sync_spellbook(character: Character) -> Character:
    """Add newly learned repertoire spells; manually added ones stay."""
    if not has_esoteric_polymath(character):
        return character
    updated = character.model_copy(deep=True)
    book = updated.spellbook.esoteric_polymath
    book.occult_spells = list(dict.fromkeys([*book.occult_spells, *_known(character)]))
    return updated


def reset_daily_preparation(character: Character) -> Character:
    """Clear the daily preparation along with its heightened copies."""
    if not has_esoteric_polymath(character):
        return character
    previous = _daily(character)
    updated = character.model_copy(deep=True)
    updated.spellbook.esoteric_polymath.daily_preparation = None
    if previous:
        _remove_heightened(updated, previous)
    return updated


def effective_signature_spells(character: Character) -> list[str]:
    base = list(character.spellcasting.signature_spells) if character.spellcasting else []
    daily = _daily(character)
    if has_esoteric_polymath(character) and daily and daily in _known(character) and daily not in base:
        base.append(daily)
    return base


def effective_repertoire(character: Character) -> list[str]:
    base = list(_known(character))
    daily = _daily(character)
    if has_esoteric_polymath(character) and daily and daily not in base:
        base.append(daily)
    return base
