"""
Level gating for class specialization choices.

A class without rules, or a specialization type without a rule, is always
available.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TypeVar

from ..catalog.manager import GameDataCatalog

# Kineticists must take Gate's Threshold at these levels and may only take
# Single or Dual Gate at the others.
KINETICIST_GATES_THRESHOLD_LEVELS: tuple[int, ...] = (5, 9, 13, 17)


@dataclass(frozen=True)
class SpecializationAvailabilityRule:
    specialization_type_id: str
    available_at_levels: tuple[int, ...] | None = None
    unavailable_at_levels: tuple[int, ...] | None = None
    min_level: int | None = None
    max_level: int | None = None

    def allows(self, level: int) -> bool:
        if self.available_at_levels is not None and level not in self.available_at_levels:
            return False
        if self.unavailable_at_levels is not None and level in self.unavailable_at_levels:
            return False
        if self.min_level is not None and level < self.min_level:
            return False
        if self.max_level is not None and level > self.max_level:
            return False
        return True


CLASS_SPECIALIZATION_RULES: dict[str, list[SpecializationAvailabilityRule]] = {
    "Kineticist": [
        SpecializationAvailabilityRule(
            "kineticist_gates_threshold",
            available_at_levels=KINETICIST_GATES_THRESHOLD_LEVELS,
        ),
        SpecializationAvailabilityRule(
            "kineticist_single_gate",
            unavailable_at_levels=KINETICIST_GATES_THRESHOLD_LEVELS,
        ),
        SpecializationAvailabilityRule(
            "kineticist_dual_gate",
            unavailable_at_levels=KINETICIST_GATES_THRESHOLD_LEVELS,
        ),
    ],
}


def rules_for_class(class_name: str) -> list[SpecializationAvailabilityRule]:
    return list(CLASS_SPECIALIZATION_RULES.get(class_name, []))


def is_specialization_available(class_name: str, specialization_type_id: str, level: int) -> bool:
    """Whether a specialization type can be chosen at ``level``."""
    for rule in CLASS_SPECIALIZATION_RULES.get(class_name, []):
        if rule.specialization_type_id == specialization_type_id:
            return rule.allows(level)
    return True


def is_specialization_available_by_id(
    class_id: str,
    specialization_type_id: str,
    level: int,
    catalog: GameDataCatalog,
) -> bool:
    class_name = catalog.class_name(class_id)
    if not class_name:
        return True
    return is_specialization_available(class_name, specialization_type_id, level)


T = TypeVar("T")


def filter_specializations_by_level(
    specialization_types: list[T],
    class_id: str,
    level: int,
    catalog: GameDataCatalog,
) -> list[T]:
    """Return the types unchanged, except unavailable ones with no options.

    Each entry must be a dataclass with ``id`` and ``options`` fields, such
    as ``ClassSpecializationType``.
    """
    filtered = []
    for spec_type in specialization_types:
        if is_specialization_available_by_id(class_id, spec_type.id, level, catalog):
            filtered.append(spec_type)
        else:
            filtered.append(replace(spec_type, options=()))
    return filtered
