"""
Penalties from active conditions (frightened, clumsy, enfeebled...).

Penalties of the same category don't stack: the worst one applies.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Iterable

from .catalog.manager import GameDataCatalog
from .models import ActiveCondition

logger = logging.getLogger("pf2e-sheet")


@dataclass
class ConditionPenalties:
    all: int = 0
    dex_based: int = 0
    str_based: int = 0
    con_based: int = 0
    int_based: int = 0
    wis_based: int = 0
    cha_based: int = 0
    attack: int = 0
    ac: int = 0
    saving_throw: int = 0
    perception: int = 0
    speed: int = 0


# Condition rule selector -> penalty field
SELECTOR_FIELDS = {
    "all": "all",
    "dex-based": "dex_based",
    "str-based": "str_based",
    "con-based": "con_based",
    "int-based": "int_based",
    "wis-based": "wis_based",
    "cha-based": "cha_based",
    "attack": "attack",
    "ac": "ac",
    "saving-throw": "saving_throw",
    "perception": "perception",
    "speed": "speed",
}


def calculate_condition_penalties(
    active: Iterable[ActiveCondition],
    catalog: GameDataCatalog,
) -> ConditionPenalties:
    """Worst penalty per category across all active conditions.

    A rule value of -1 stands for minus the condition's value (the active
    value, else the definition's, else 1).
    """
    penalties = ConditionPenalties()
    for condition in active:
        definition = catalog.get_condition(condition.id)
        if definition is None:
            logger.debug(f"Condition {condition.id} not in catalog")
            continue

        value = condition.value if condition.value is not None else definition.value
        if value is None:
            value = 1

        for rule in definition.rules:
            penalty = -value if rule.value == -1 else rule.value
            selectors = rule.selector if isinstance(rule.selector, list) else [rule.selector]
            for selector in selectors:
                field_name = SELECTOR_FIELDS.get(selector)
                if field_name:
                    setattr(penalties, field_name, min(getattr(penalties, field_name), penalty))
    return penalties


def skill_penalty(ability: str, penalties: ConditionPenalties) -> int:
    """Penalty to a skill keyed to ``ability``."""
    return penalties.all + getattr(penalties, f"{ability}_based", 0)


def ac_penalty(penalties: ConditionPenalties) -> int:
    return penalties.all + penalties.dex_based + penalties.ac


def perception_penalty(penalties: ConditionPenalties) -> int:
    return penalties.all + penalties.wis_based + penalties.perception


def save_penalty(ability: str, penalties: ConditionPenalties) -> int:
    """Penalty to the save keyed to ``ability`` (con, dex or wis)."""
    total = penalties.all + penalties.saving_throw
    if ability in ("con", "dex", "wis"):
        total += getattr(penalties, f"{ability}_based")
    return total


def attack_penalty(penalties: ConditionPenalties) -> int:
    return penalties.all + penalties.attack


def has_any_penalty(penalties: ConditionPenalties) -> bool:
    return any(value < 0 for value in asdict(penalties).values())
