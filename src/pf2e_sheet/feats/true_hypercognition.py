"""
True Hypercognition: five instant Recall Knowledge actions, tracked per day.
"""

from __future__ import annotations

from datetime import date

from ..models import Character, TrueHypercognitionUse
from . import has_feat

TRUE_HYPERCOGNITION = ("true-hypercognition", "Xk9inG3pln4UKbs3")
ACTIONS_PER_DAY = 5
ACTION_NUMBERS = tuple(range(1, ACTIONS_PER_DAY + 1))


def has_true_hypercognition(character: Character) -> bool:
    return has_feat(character, *TRUE_HYPERCOGNITION)


def true_hypercognition_actions(character: Character) -> int:
    return ACTIONS_PER_DAY if has_true_hypercognition(character) else 0


def _used_today(character: Character, today: date) -> list[int]:
    tracking = character.daily_feat_uses.true_hypercognition
    return tracking.actions_used if tracking.last_reset == today else []


def available_actions(character: Character, today: date | None = None) -> list[int]:
    """Action numbers (1-5) not yet used today."""
    if not has_true_hypercognition(character):
        return []
    used = set(_used_today(character, today or date.today()))
    return [n for n in ACTION_NUMBERS if n not in used]


def can_use_true_hypercognition(character: Character, today: date | None = None) -> bool:
    return bool(available_actions(character, today))


def use_action(character: Character, action_number: int, today: date | None = None) -> Character:
    """Mark ``action_number`` used today; unchanged if invalid or already used."""
    today = today or date.today()
    if not has_true_hypercognition(character) or action_number not in ACTION_NUMBERS:
        return character
    used = _used_today(character, today)
    if action_number in used:
        return character

    updated = character.model_copy(deep=True)
    updated.daily_feat_uses.true_hypercognition = TrueHypercognitionUse(
        actions_used=[*used, action_number],
        last_reset=today,
    )
    return updated


def reset_actions(character: Character, today: date | None = None) -> Character:
    """Daily preparations: clear used actions unless already reset today."""
    today = today or date.today()
    if not has_true_hypercognition(character):
        return character
    if character.daily_feat_uses.true_hypercognition.last_reset == today:
        return character

    updated = character.model_copy(deep=True)
    updated.daily_feat_uses.true_hypercognition = TrueHypercognitionUse(actions_used=[], last_reset=today)
    return updated


def can_trigger_special_abilities() -> bool:
    """Abilities that trigger on Recall Knowledge never trigger from these actions."""
    return False
