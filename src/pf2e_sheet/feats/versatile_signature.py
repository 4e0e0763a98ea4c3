"""
Versatile Signature: swap one signature spell for another repertoire spell
during daily preparations.
"""

from __future__ import annotations

from ..models import Character
from . import has_feat

VERSATILE_SIGNATURE = ("versatile-signature", "toFhkS9QbObxg6cp")
FLEXIBLE_SIGNATURE_SLOTS = 1


def has_versatile_signature(character: Character) -> bool:
    return has_feat(character, *VERSATILE_SIGNATURE)


def _spell_lists(character: Character) -> tuple[list[str], list[str]]:
    if character.spellcasting is None:
        return [], []
    return character.spellcasting.known_spells, character.spellcasting.signature_spells


def versatile_signature_slots(character: Character) -> int:
    return FLEXIBLE_SIGNATURE_SLOTS if has_versatile_signature(character) else 0


def can_change_as_flexible_signature(character: Character, spell_id: str) -> bool:
    """The spell must be known and currently a signature spell."""
    if not has_versatile_signature(character):
        return False
    known, signature = _spell_lists(character)
    return spell_id in known and spell_id in signature


def change_versatile_signature_spell(character: Character, old_spell_id: str, new_spell_id: str) -> Character:
    """Replace ``old_spell_id`` with ``new_spell_id`` among the signature spells.

    Both spells must be in the repertoire and the old one must be a
    signature spell; otherwise the character is returned unchanged.
    """
    if not has_versatile_signature(character):
        return character
    known, signature = _spell_lists(character)
    if old_spell_id not in known or new_spell_id not in known or old_spell_id not in signature:
        return character

    updated = character.model_copy(deep=True)
    updated.spellcasting.signature_spells = [
        new_spell_id if spell_id == old_spell_id else spell_id for spell_id in signature
    ]
    return updated


def available_signature_spells_for_change(character: Character) -> list[str]:
    if not has_versatile_signature(character):
        return []
    known, signature = _spell_lists(character)
    return [spell_id for spell_id in signature if spell_id in known]


def available_repertoire_spells_for_signature(character: Character) -> list[str]:
    if not has_versatile_signature(character):
        return []
    known, signature = _spell_lists(character)
    return [spell_id for spell_id in known if spell_id not in signature]
