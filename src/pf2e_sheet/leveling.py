"""
Advancement schedule for levels 1-20: feat slots, skill increases and
ability boosts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

FeatSlotType = Literal["ancestry", "class", "general", "skill"]

ABILITY_BOOST_LEVELS = (5, 10, 15, 20)
SKILL_INCREASE_LEVELS = (3, 5, 7, 9, 11, 13, 15, 17, 19)
ANCESTRY_FEAT_LEVELS = (1, 5, 9, 13, 17)
GENERAL_FEAT_LEVELS = (3, 7, 11, 15, 19)


@dataclass(frozen=True)
class LevelFeatures:
    ancestry_feat: bool = False
    class_feat: bool = False
    general_feat: bool = False
    skill_feat: bool = False
    skill_increase: bool = False
    ability_boost: bool = False


@dataclass(frozen=True)
class FeatSlot:
    type: FeatSlotType
    level: int


def _features(level: int) -> LevelFeatures:
    return LevelFeatures(
        ancestry_feat=level in ANCESTRY_FEAT_LEVELS,
        class_feat=level == 1 or level % 2 == 0,
        general_feat=level in GENERAL_FEAT_LEVELS,
        skill_feat=level % 2 == 0,
        skill_increase=level in SKILL_INCREASE_LEVELS,
        ability_boost=level in ABILITY_BOOST_LEVELS,
    )


LEVEL_FEATURES: dict[int, LevelFeatures] = {level: _features(level) for level in range(1, 21)}


def features_at_level(level: int) -> LevelFeatures:
    """What ``level`` grants; nothing outside 1-20."""
    return LEVEL_FEATURES.get(level, LevelFeatures())


def feat_slots_up_to_level(level: int) -> list[FeatSlot]:
    """Every feat slot from level 1 through ``level``, in level order."""
    slots = []
    for current in range(1, min(level, 20) + 1):
        features = LEVEL_FEATURES[current]
        if features.ancestry_feat:
            slots.append(FeatSlot("ancestry", current))
        if features.class_feat:
            slots.append(FeatSlot("class", current))
        if features.general_feat:
            slots.append(FeatSlot("general", current))
        if features.skill_feat:
            slots.append(FeatSlot("skill", current))
    return slots


def skill_increases_up_to_level(level: int) -> int:
    return sum(1 for lvl in SKILL_INCREASE_LEVELS if lvl <= level)


def has_ability_boost_at_level(level: int) -> bool:
    return level in ABILITY_BOOST_LEVELS


def ability_boost_levels_up_to(level: int) -> list[int]:
    return [lvl for lvl in ABILITY_BOOST_LEVELS if lvl <= level]
