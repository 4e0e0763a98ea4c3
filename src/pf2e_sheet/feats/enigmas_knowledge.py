"""
Enigma's Knowledge: Automatic Knowledge with any Recall Knowledge skill.
"""

from __future__ import annotations

from ..models import Character
from . import has_feat
from .assured_knowledge import has_assured_knowledge

ENIGMAS_KNOWLEDGE = ("enigmas-knowledge", "8cbSVw8RnVzy5USe")
AUTOMATIC_KNOWLEDGE_USES_PER_ROUND = 1

RECALL_KNOWLEDGE_SKILLS = frozenset(
    {
        "acrobatics",
        "arcana",
        "athletics",
        "crafting",
        "deception",
        "diplomacy",
        "intimidation",
        "medicine",
        "nature",
        "occultism",
        "performance",
        "religion",
        "society",
        "survival",
        "thievery",
    }
)


def has_enigmas_knowledge(character: Character) -> bool:
    return has_feat(character, *ENIGMAS_KNOWLEDGE)


def has_enigmas_knowledge_prerequisite(character: Character) -> bool:
    return has_assured_knowledge(character)


def can_use_automatic_knowledge_for_skill(skill_name: str) -> bool:
    """Any Recall Knowledge skill, including every Lore."""
    key = skill_name.lower()
    return key in RECALL_KNOWLEDGE_SKILLS or "lore" in key


def is_enigmas_knowledge_active_for_skill(character: Character, skill_name: str) -> bool:
    return has_enigmas_knowledge(character) and can_use_automatic_knowledge_for_skill(skill_name)
