"""
Spellcasting setup for spellcasting classes.

``initialize_spellcasting`` builds the sheet's spellcasting block when a class
is chosen; ``update_spell_slots_for_level`` refreshes it on level change.
Known, focus, innate, heightened and signature spells already on the sheet
are always kept.
"""

from __future__ import annotations

import logging

from .catalog.manager import GameDataCatalog
from .data.spell_slots import (
    calculate_spell_slots,
    granted_cantrips,
    granted_focus_spells,
    spellcaster_config,
    tradition_for_bloodline,
)
from .models import Character, Spellcasting

logger = logging.getLogger("pf2e-sheet")


def _with_granted(existing: list[str], granted: list[str]) -> list[str]:
    merged = list(existing)
    for spell_id in granted:
        if spell_id not in merged:
            merged.append(spell_id)
    return merged


def _bloodline_tradition(character: Character, class_name: str | None) -> str | None:
    if class_name != "Sorcerer" or not character.class_specialization_id:
        return None
    spec = character.class_specialization_id
    bloodline = spec if isinstance(spec, str) else next(iter(spec), "")
    return tradition_for_bloodline(bloodline)


def initialize_spellcasting(character: Character, catalog: GameDataCatalog) -> Character:
    """Create or rebuild the spellcasting block for the character's class.

    Non-casting classes lose any spellcasting block. Slots start unused; a
    Sorcerer's tradition follows the chosen bloodline.

    Returns:
        An updated copy of ``character``.
    """
    class_name = catalog.class_name(character.class_id)
    config = spellcaster_config(class_name)
    if config is None:
        if character.spellcasting is None:
            return character
        logger.debug(f"{class_name or character.class_id!r} does not cast spells, dropping spellcasting")
        return character.model_copy(update={"spellcasting": None})

    existing = character.spellcasting or Spellcasting()
    spellcasting = Spellcasting(
        tradition=_bloodline_tradition(character, class_name) or config.tradition,
        spellcasting_type=config.spellcasting_type,
        key_ability=config.key_ability,
        proficiency=config.starting_proficiency,
        spell_slots=calculate_spell_slots(class_name, character.level),
        known_spells=_with_granted(existing.known_spells, granted_cantrips(class_name, character.level)),
        focus_spells=_with_granted(existing.focus_spells, granted_focus_spells(class_name, character.level)),
        rituals=list(existing.rituals),
        innate_spells=[spell.model_copy() for spell in existing.innate_spells],
        heightened_spells=[spell.model_copy() for spell in existing.heightened_spells],
        signature_spells=list(existing.signature_spells),
    )
    return character.model_copy(update={"spellcasting": spellcasting})


def update_spell_slots_for_level(character: Character, catalog: GameDataCatalog) -> Character:
    """Resize spell slots for the current level, keeping used counts within the new maximum."""
    class_name = catalog.class_name(character.class_id)
    if character.spellcasting is None or spellcaster_config(class_name) is None:
        return character

    updated = character.model_copy(deep=True)
    spellcasting = updated.spellcasting
    old_slots = spellcasting.spell_slots
    new_slots = calculate_spell_slots(class_name, character.level)
    for rank, slot in new_slots.items():
        if rank in old_slots:
            slot.used = min(old_slots[rank].used, slot.max)
    spellcasting.spell_slots = new_slots
    spellcasting.tradition = _bloodline_tradition(character, class_name) or spellcasting.tradition
    spellcasting.known_spells = _with_granted(
        spellcasting.known_spells, granted_cantrips(class_name, character.level)
    )
    spellcasting.focus_spells = _with_granted(
        spellcasting.focus_spells, granted_focus_spells(class_name, character.level)
    )
    return updated


def reset_spell_slot_usage(character: Character) -> Character:
    """Mark every slot unused, as after a night's rest."""
    if character.spellcasting is None:
        return character
    updated = character.model_copy(deep=True)
    for slot in updated.spellcasting.spell_slots.values():
        slot.used = 0
    return updated
