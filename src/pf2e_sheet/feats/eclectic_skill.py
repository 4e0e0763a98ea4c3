"""
Eclectic Skill: attempt checks that need training, and add your level to
untrained skill checks.
"""

from __future__ import annotations

from ..models import Character, Proficiency
from . import has_feat

ECLECTIC_SKILL = ("eclectic-skill", "TOyqtUUnOkOLl1Pm")


def has_eclectic_skill(character: Character) -> bool:
    return has_feat(character, *ECLECTIC_SKILL)


def effective_proficiency(character: Character, current: Proficiency) -> Proficiency | None:
    """Rank Eclectic Skill lets ``current`` count as, or None if unchanged.

    With legendary Occultism, untrained and trained count as expert.
    Otherwise untrained counts as trained.
    """
    if not has_eclectic_skill(character):
        return None
    if character.skill_rank("Occultism") == Proficiency.LEGENDARY and current in (
        Proficiency.UNTRAINED,
        Proficiency.TRAINED,
    ):
        return Proficiency.EXPERT
    if current == Proficiency.UNTRAINED:
        return Proficiency.TRAINED
    return None


def can_attempt_skill_check(character: Character, skill_name: str, required: Proficiency) -> bool:
    """Whether the character may attempt a check needing ``required`` rank.

    Returns False without the feat, even when the character is proficient
    enough on their own.
    """
    if not has_eclectic_skill(character):
        return False
    current = character.skill_rank(skill_name)
    if current.rank_index >= required.rank_index:
        return True
    effective = effective_proficiency(character, current)
    return effective is not None and effective.rank_index >= required.rank_index


def proficiency_bonus(character: Character, skill_name: str) -> int | None:
    """The character's level for untrained or missing skills, else None."""
    if not has_eclectic_skill(character):
        return None
    if character.skill_rank(skill_name) == Proficiency.UNTRAINED:
        return character.level
    return None


def uses_level_bonus(character: Character, skill_name: str) -> bool:
    return proficiency_bonus(character, skill_name) is not None
