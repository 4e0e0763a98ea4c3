"""
Assured Knowledge: take 10 + proficiency bonus on Recall Knowledge.
"""

from __future__ import annotations

from ..models import Character, Proficiency
from ..pf2e_math import character_proficiency_bonus
from . import has_feat

ASSURED_KNOWLEDGE = ("assured-knowledge", "c6CS97Zs0DPmInaI")


def has_assured_knowledge(character: Character) -> bool:
    return has_feat(character, *ASSURED_KNOWLEDGE)


def can_use_assured_knowledge(character: Character, skill_name: str) -> bool:
    return has_assured_knowledge(character)


def assured_knowledge_result(character: Character, skill_name: str) -> int | None:
    """10 + proficiency bonus in ``skill_name``; no other modifiers apply.

    None without the feat or when the character doesn't have the skill.
    """
    if not has_assured_knowledge(character):
        return None
    skill = character.get_skill(skill_name)
    if skill is None:
        return None
    return 10 + character_proficiency_bonus(character, skill.proficiency)


def meets_automatic_knowledge_prerequisite(character: Character, skill_name: str) -> bool:
    """Assured Knowledge plus expert or better in ``skill_name``."""
    if not has_assured_knowledge(character):
        return False
    return character.skill_rank(skill_name).rank_index >= Proficiency.EXPERT.rank_index
