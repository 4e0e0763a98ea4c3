"""
Well-Versed and the other always-on feat bonuses shown on the sheet.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from ..models import BonusType, Character
from . import has_feat

WELL_VERSED = ("well-versed", "iX5HEqRImhKzfPR2")
WELL_VERSED_SOURCE = "WV"
SAVES = ("fortitude", "reflex", "will")


@dataclass(frozen=True)
class FeatBonus:
    feat_name: str
    bonus: str
    description: str
    type: BonusType
    applies_to: tuple[str, ...]


@dataclass(frozen=True)
class FeatModifier:
    value: int
    source: str
    type: str = "buff"


@dataclass
class BonusSummary:
    total: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    by_target: dict[str, int] = field(default_factory=dict)


def has_well_versed(character: Character) -> bool:
    return has_feat(character, *WELL_VERSED)


def save_modifiers(character: Character, save: str) -> list[FeatModifier]:
    """Badges for a save header. Well-Versed shows as +1 on every save."""
    if save in SAVES and has_well_versed(character):
        return [FeatModifier(value=1, source=WELL_VERSED_SOURCE)]
    return []


def active_feat_bonuses(character: Character) -> list[FeatBonus]:
    bonuses = []
    if has_well_versed(character):
        bonuses.append(
            FeatBonus(
                feat_name="Well-Versed",
                bonus="+1",
                description=(
                    "+1 circumstance bonus to saves against effects with the auditory, illusion, "
                    "linguistic, sonic, or visual traits."
                ),
                type="circumstance",
                applies_to=SAVES,
            )
        )
    return bonuses


def save_bonuses(character: Character, save: str) -> list[FeatBonus]:
    return [b for b in active_feat_bonuses(character) if save in b.applies_to]


def skill_bonuses(character: Character, skill_name: str) -> list[FeatBonus]:
    # No tracked feat grants an unconditional skill bonus yet.
    return []


def bonus_summary(character: Character) -> BonusSummary:
    bonuses = active_feat_bonuses(character)
    by_type = Counter(b.type for b in bonuses)
    by_target = Counter(target for b in bonuses for target in b.applies_to)
    return BonusSummary(total=len(bonuses), by_type=dict(by_type), by_target=dict(by_target))
