"""
Studious Capacity: once per day, cast a spell of a rank below your highest
after running out of slots of that rank.
"""

from __future__ import annotations

from datetime import date

from ..catalog.manager import GameDataCatalog
from ..models import Character, Proficiency, StudiousCapacityUse
from . import has_feat
from .muses import has_enigma_muse

STUDIOUS_CAPACITY = ("studious-capacity", "QGpcyvIezLMgmTia")


def has_studious_capacity(character: Character) -> bool:
    return has_feat(character, *STUDIOUS_CAPACITY)


def meets_studious_capacity_prerequisites(character: Character, catalog: GameDataCatalog) -> bool:
    return (
        has_enigma_muse(character, catalog)
        and character.skill_rank("Occultism") == Proficiency.LEGENDARY
    )


def highest_spell_rank(character: Character) -> int:
    """Largest rank with a slot entry, 0 for non-casters."""
    if character.spellcasting is None:
        return 0
    ranks = [rank for rank in character.spellcasting.spell_slots if rank > 0]
    return max(ranks, default=0)


def can_cast_with_studious_capacity(character: Character, spell_rank: int) -> bool:
    """Ranks below the highest that actually have slots."""
    if not has_studious_capacity(character):
        return False
    if spell_rank >= highest_spell_rank(character):
        return False
    slot = character.spellcasting.spell_slots.get(spell_rank)
    return slot is not None and slot.max > 0


def has_used_studious_capacity_today(character: Character, today: date | None = None) -> bool:
    today = today or date.today()
    usage = character.daily_feat_uses.studious_capacity
    return usage.used and usage.last_used == today


def use_studious_capacity(character: Character, spell_rank: int, today: date | None = None) -> Character:
    """Record today's use; unchanged if not allowed or already used."""
    today = today or date.today()
    if not can_cast_with_studious_capacity(character, spell_rank):
        return character
    if has_used_studious_capacity_today(character, today):
        return character

    updated = character.model_copy(deep=True)
    updated.daily_feat_uses.studious_capacity = StudiousCapacityUse(used=True, last_used=today)
    return updated


def reset_studious_capacity(character: Character) -> Character:
    """Daily preparations: make the feat usable again."""
    if not has_studious_capacity(character) or not character.daily_feat_uses.studious_capacity.used:
        return character
    updated = character.model_copy(deep=True)
    updated.daily_feat_uses.studious_capacity = StudiousCapacityUse()
    return updated


def studious_capacity_valid_ranks(character: Character) -> list[int]:
    if not has_studious_capacity(character) or character.spellcasting is None:
        return []
    highest = highest_spell_rank(character)
    return sorted(rank for rank in character.spellcasting.spell_slots if 0 < rank < highest)
