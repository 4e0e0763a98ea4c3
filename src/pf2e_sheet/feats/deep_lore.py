"""
Deep Lore: one extra repertoire spell of each rank the bard can cast.

Selections are stored per rank in ``character.spellbook.deep_lore`` and
merged into the repertoire by ``apply_deep_lore_effects``.
"""

from __future__ import annotations

from ..catalog.manager import GameDataCatalog
from ..catalog.models import SpellDefinition
from ..models import Character, Proficiency
from . import has_feat
from .muses import has_enigma_muse

DEEP_LORE = ("deep-lore", "iTtnN49D8ZJ2Ilur")
EXTRA_SPELLS_PER_RANK = 1


def has_deep_lore(character: Character) -> bool:
    return has_feat(character, *DEEP_LORE)


def meets_deep_lore_prerequisites(character: Character, catalog: GameDataCatalog) -> bool:
    """Bard with the enigma muse and legendary Occultism."""
    return (
        has_enigma_muse(character, catalog)
        and character.skill_rank("Occultism") == Proficiency.LEGENDARY
    )


def deep_lore_extra_spells_per_rank(character: Character) -> int:
    return EXTRA_SPELLS_PER_RANK if has_deep_lore(character) else 0


def max_spell_rank(character: Character) -> int:
    """Highest rank a full caster reaches at the character's level."""
    return (character.level + 1) // 2


def deep_lore_extra_spells(character: Character) -> dict[int, str]:
    return dict(character.spellbook.deep_lore.extra_spells)


def _known_spells(character: Character) -> list[str]:
    return character.spellcasting.known_spells if character.spellcasting else []


def _is_selectable(spell: SpellDefinition) -> bool:
    return "occult" in spell.traditions and not spell.is_cantrip and not spell.is_ritual


def can_select_spell_for_deep_lore(character: Character, spell_id: str, catalog: GameDataCatalog) -> bool:
    """Occult, not a cantrip or ritual, castable, and not already known or picked."""
    if not has_deep_lore(character):
        return False
    spell = catalog.get_spell(spell_id)
    if spell is None or not _is_selectable(spell):
        return False
    if spell.rank > max_spell_rank(character):
        return False
    if spell_id in _known_spells(character):
        return False
    return spell_id not in deep_lore_extra_spells(character).values()


def available_spells_for_deep_lore(
    character: Character,
    rank: int,
    catalog: GameDataCatalog,
) -> list[SpellDefinition]:
    taken = set(_known_spells(character)) | set(deep_lore_extra_spells(character).values())
    return [
        spell
        for spell in catalog.spells()
        if spell.rank == rank and _is_selectable(spell) and spell.id not in taken
    ]


def set_deep_lore_extra_spell(character: Character, rank: int, spell_id: str | None) -> Character:
    """Pick (or with None, clear) the extra spell for ``rank``."""
    if not has_deep_lore(character):
        return character
    updated = character.model_copy(deep=True)
    extra = updated.spellbook.deep_lore.extra_spells
    if spell_id:
        extra[rank] = spell_id
    else:
        extra.pop(rank, None)
    return updated


def deep_lore_spells_for_repertoire(character: Character) -> list[str]:
    if not has_deep_lore(character):
        return []
    return [spell_id for spell_id in deep_lore_extra_spells(character).values() if spell_id]


def apply_deep_lore_effects(character: Character) -> Character:
    """Add the Deep Lore picks to the repertoire if missing."""
    if not has_deep_lore(character) or character.spellcasting is None:
        return character

    missing = [s for s in deep_lore_spells_for_repertoire(character) if s not in character.spellcasting.known_spells]
    if not missing:
        return character

    updated = character.model_copy(deep=True)
    updated.spellcasting.known_spells.extend(missing)
    return updated
