"""
Bardic Lore: a special Intelligence-based Lore usable only to Recall
Knowledge. Trained, or expert with legendary Occultism.
"""

from __future__ import annotations

from ..models import Character, Proficiency, SkillProficiency
from . import has_feat
from .muses import has_enigma_muse

BARDIC_LORE = ("bardic-lore", "uVXEZblPRuCyPRua")
BARDIC_LORE_SKILL_NAME = "Bardic Lore"

__all__ = [
    "BARDIC_LORE",
    "BARDIC_LORE_SKILL_NAME",
    "bardic_lore_proficiency",
    "can_use_bardic_lore_for_action",
    "create_bardic_lore_skill",
    "has_bardic_lore_feat",
    "has_enigma_muse",
    "initialize_bardic_lore",
    "is_bardic_lore",
    "is_special_lore_skill",
]


def has_bardic_lore_feat(character: Character) -> bool:
    return has_feat(character, *BARDIC_LORE)


def is_bardic_lore(skill_name: str) -> bool:
    return skill_name.lower() == BARDIC_LORE_SKILL_NAME.lower()


def is_special_lore_skill(skill_name: str) -> bool:
    return is_bardic_lore(skill_name)


def can_use_bardic_lore_for_action(skill_name: str, action: str) -> bool:
    return is_bardic_lore(skill_name) and action.lower() == "recall-knowledge"


def bardic_lore_proficiency(character: Character) -> Proficiency:
    if not has_bardic_lore_feat(character):
        return Proficiency.UNTRAINED
    if character.skill_rank("Occultism") == Proficiency.LEGENDARY:
        return Proficiency.EXPERT
    return Proficiency.TRAINED


def create_bardic_lore_skill(character: Character) -> SkillProficiency:
    return SkillProficiency(
        name=BARDIC_LORE_SKILL_NAME,
        ability="int",
        proficiency=bardic_lore_proficiency(character),
    )


def initialize_bardic_lore(character: Character) -> Character:
    """Add, update or remove the Bardic Lore skill to match the feat."""
    existing = next((s for s in character.skills if is_bardic_lore(s.name)), None)

    if not has_bardic_lore_feat(character):
        if existing is None:
            return character
        updated = character.model_copy(deep=True)
        updated.skills = [s for s in updated.skills if not is_bardic_lore(s.name)]
        return updated

    proficiency = bardic_lore_proficiency(character)
    if existing is not None and existing.proficiency == proficiency:
        return character

    updated = character.model_copy(deep=True)
    if existing is None:
        updated.skills.append(create_bardic_lore_skill(character))
    else:
        for skill in updated.skills:
            if is_bardic_lore(skill.name):
                skill.proficiency = proficiency
    return updated
