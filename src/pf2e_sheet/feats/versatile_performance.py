"""
Versatile Performance: use Performance in place of Diplomacy, Intimidation
or Deception for specific actions, and for skill feat prerequisites.
"""

from __future__ import annotations

import re

from ..models import Character, Proficiency
from . import has_feat

VERSATILE_PERFORMANCE = ("versatile-performance", "jBp91q4uzwd4FeSX")
PERFORMANCE = "performance"

SUBSTITUTABLE_SKILLS = ("diplomacy", "intimidation", "deception")

# skill -> action that Performance can replace it for
SUBSTITUTED_ACTIONS = {
    "diplomacy": "makeanimpression",
    "intimidation": "demoralize",
    "deception": "impersonate",
}


def has_versatile_performance(character: Character) -> bool:
    return has_feat(character, *VERSATILE_PERFORMANCE)


def is_skill_substitutable_by_performance(skill_name: str) -> bool:
    return skill_name.lower() in SUBSTITUTABLE_SKILLS


def performance_substitution(original_skill: str) -> str | None:
    return PERFORMANCE if is_skill_substitutable_by_performance(original_skill) else None


def versatile_performance_skills() -> list[str]:
    return list(SUBSTITUTABLE_SKILLS)


def can_use_performance_for_skill(character: Character, target_skill: str) -> bool:
    return has_versatile_performance(character) and is_skill_substitutable_by_performance(target_skill)


def skill_for_action(original_skill: str, action: str) -> str | None:
    """``performance`` when the action is one Performance can replace.

    Action names are compared without case, spaces or hyphens, so
    ``make-an-impression`` and ``Make an Impression`` both match.
    """
    action_key = re.sub(r"[-\s]", "", action.lower())
    wanted = SUBSTITUTED_ACTIONS.get(original_skill.lower())
    if wanted and wanted in action_key:
        return PERFORMANCE
    return None


def can_performance_satisfy_prerequisite(
    character: Character,
    required_skill: str,
    required_proficiency: Proficiency,
) -> bool:
    """Whether the Performance rank meets a Diplomacy/Intimidation/Deception prerequisite."""
    if not can_use_performance_for_skill(character, required_skill):
        return False
    performance = character.get_skill(PERFORMANCE)
    if performance is None:
        return False
    return performance.proficiency.rank_index >= Proficiency(required_proficiency).rank_index


def effective_skill(character: Character, original_skill: str, action: str | None = None) -> str | None:
    """Skill to roll instead of ``original_skill``, or None for no substitution."""
    if not has_versatile_performance(character):
        return None
    if action:
        return skill_for_action(original_skill, action)
    return performance_substitution(original_skill)
