"""
Ultimate Polymath: every spell in the repertoire is a signature spell.
"""

from __future__ import annotations

from ..models import Character
from . import has_feat
from .muses import has_polymath_muse

ULTIMATE_POLYMATH = ("ultimate-polymath", "QSBuAkJ5GMLcuZg9")

__all__ = [
    "ULTIMATE_POLYMATH",
    "apply_ultimate_polymath_effects",
    "effective_signature_spells",
    "has_polymath_muse",
    "has_ultimate_polymath",
    "is_signature_spell",
]


def has_ultimate_polymath(character: Character) -> bool:
    return has_feat(character, *ULTIMATE_POLYMATH)


def effective_signature_spells(character: Character) -> list[str]:
    if character.spellcasting is None:
        return []
    if has_ultimate_polymath(character):
        return list(character.spellcasting.known_spells)
    return list(character.spellcasting.signature_spells)


def apply_ultimate_polymath_effects(character: Character) -> Character:
    """Store the whole repertoire as signature spells."""
    if not has_ultimate_polymath(character) or character.spellcasting is None:
        return character
    updated = character.model_copy(deep=True)
    updated.spellcasting.signature_spells = list(updated.spellcasting.known_spells)
    return updated


def is_signature_spell(character: Character, spell_id: str) -> bool:
    return spell_id in effective_signature_spells(character)
