"""
Static PF2e reference tables: skills, runes, materials, innate spells,
class specializations, spell slots.
"""

from .skills import SKILL_NAMES, SKILLS, SkillInfo, get_skill_info, skill_ability

__all__ = ["SKILL_NAMES", "SKILLS", "SkillInfo", "get_skill_info", "skill_ability"]
