"""
Lingering Composition: grants the focus spell of the same name.
"""

from __future__ import annotations

from ..models import Character
from . import has_feat
from .muses import has_maestro_muse

LINGERING_COMPOSITION = ("lingering-composition", "sVjATEo8eqkAosNp")
LINGERING_COMPOSITION_SPELL = "Lingering Composition"

__all__ = [
    "LINGERING_COMPOSITION",
    "LINGERING_COMPOSITION_SPELL",
    "add_lingering_composition_focus_spell",
    "has_lingering_composition",
    "has_maestro_muse",
]


def has_lingering_composition(character: Character) -> bool:
    return has_feat(character, *LINGERING_COMPOSITION)


def add_lingering_composition_focus_spell(character: Character) -> Character:
    """Add the focus spell when the feat is present and the character casts.

    The character is returned unchanged when there is nothing to add.
    """
    if not has_lingering_composition(character) or character.spellcasting is None:
        return character
    if LINGERING_COMPOSITION_SPELL in character.spellcasting.focus_spells:
        return character

    updated = character.model_copy(deep=True)
    updated.spellcasting.focus_spells.append(LINGERING_COMPOSITION_SPELL)
    return updated
