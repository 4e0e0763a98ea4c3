"""
Active bard compositions and the bonuses they grant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ..models import ActiveComposition, Character, CompositionBonuses

INSPIRE_COURAGE_ID = "inspire-courage"
LINGERING_PREFIX = "lingering-"
LINGERING_DURATION = timedelta(minutes=1)


@dataclass
class CompositionBonusTotals:
    attack: int = 0
    damage: int = 0
    saves: dict[str, int] = field(default_factory=dict)
    skills: dict[str, int] = field(default_factory=dict)


def active_compositions(character: Character) -> list[ActiveComposition]:
    return list(character.active_compositions)


def is_composition_active(character: Character, composition_id: str) -> bool:
    return any(c.id == composition_id for c in character.active_compositions)


def add_active_composition(character: Character, composition: ActiveComposition) -> Character:
    updated = character.model_copy(deep=True)
    updated.active_compositions.append(composition)
    return updated


def remove_active_composition(character: Character, composition_id: str) -> Character:
    updated = character.model_copy(deep=True)
    updated.active_compositions = [c for c in updated.active_compositions if c.id != composition_id]
    return updated


def clear_expired_compositions(character: Character, now: datetime | None = None) -> Character:
    now = now or datetime.now()
    updated = character.model_copy(deep=True)
    updated.active_compositions = [
        c for c in updated.active_compositions if c.expires_at is None or c.expires_at >= now
    ]
    return updated


def has_inspire_courage(character: Character) -> bool:
    return is_composition_active(character, INSPIRE_COURAGE_ID)


def add_inspire_courage(character: Character) -> Character:
    """+1 circumstance bonus to attack and damage rolls while sustained."""
    return add_active_composition(
        character,
        ActiveComposition(
            id=INSPIRE_COURAGE_ID,
            name="Inspire Courage",
            bonuses=CompositionBonuses(attack=1, damage=1),
        ),
    )


def has_lingering_composition_active(character: Character) -> bool:
    return any(c.id.startswith(LINGERING_PREFIX) for c in character.active_compositions)


def add_lingering_composition_effect(
    character: Character,
    base: ActiveComposition,
    now: datetime | None = None,
) -> Character:
    """A copy of ``base`` that lasts one minute."""
    now = now or datetime.now()
    lingering = ActiveComposition(
        id=f"{LINGERING_PREFIX}{base.id}",
        name=f"{base.name} (Lingering)",
        duration="1 minute",
        bonuses=base.bonuses.model_copy(deep=True),
        started_at=now,
        expires_at=now + LINGERING_DURATION,
    )
    return add_active_composition(character, lingering)


def composition_bonuses(character: Character) -> CompositionBonusTotals:
    """Sum of all active composition bonuses.

    Save bonuses are keyed ``all``; skill bonuses default to +1 per skill.
    """
    totals = CompositionBonusTotals()
    for composition in character.active_compositions:
        bonuses = composition.bonuses
        totals.attack += bonuses.attack
        totals.damage += bonuses.damage
        if bonuses.saving_throws:
            totals.saves["all"] = totals.saves.get("all", 0) + bonuses.saving_throws
        for skill in bonuses.skills:
            totals.skills[skill] = totals.skills.get(skill, 0) + (bonuses.skill_bonus or 1)
    return totals
