"""
The core skills and their key abilities.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SkillInfo:
    id: str
    name: str
    ability: str
    armor_penalty: bool = False


SKILLS: tuple[SkillInfo, ...] = (
    SkillInfo("acrobatics", "Acrobatics", "dex", armor_penalty=True),
    SkillInfo("arcana", "Arcana", "int"),
    SkillInfo("athletics", "Athletics", "str", armor_penalty=True),
    SkillInfo("crafting", "Crafting", "int"),
    SkillInfo("deception", "Deception", "cha"),
    SkillInfo("diplomacy", "Diplomacy", "cha"),
    SkillInfo("intimidation", "Intimidation", "cha"),
    SkillInfo("lore", "Lore", "int"),  # generic Lore
    SkillInfo("medicine", "Medicine", "wis"),
    SkillInfo("nature", "Nature", "wis"),
    SkillInfo("occultism", "Occultism", "int"),
    SkillInfo("performance", "Performance", "cha"),
    SkillInfo("religion", "Religion", "wis"),
    SkillInfo("society", "Society", "int"),
    SkillInfo("stealth", "Stealth", "dex", armor_penalty=True),
    SkillInfo("survival", "Survival", "wis"),
    SkillInfo("thievery", "Thievery", "dex", armor_penalty=True),
)

SKILL_NAMES: tuple[str, ...] = tuple(s.name for s in SKILLS)


def get_skill_info(name: str) -> SkillInfo | None:
    """Look up a skill by id or display name, case-insensitively."""
    wanted = name.strip().lower().replace(" ", "-")
    for skill in SKILLS:
        if skill.id == wanted or skill.name.lower() == wanted:
            return skill
    return None


def skill_ability(name: str) -> str:
    """Key ability for a skill. Lore and unknown skills use Int."""
    info = get_skill_info(name)
    return info.ability if info else "int"
