"""
Feat prerequisite checks.

Prerequisites are free text ("trained in Occultism", "Int +2", "enigma
muse"). The common patterns are parsed and checked against the character;
anything that cannot be parsed counts as met.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .catalog.manager import GameDataCatalog
from .catalog.models import FeatDefinition
from .data.class_specializations import specialization_by_id
from .models import Character, Proficiency

logger = logging.getLogger("pf2e-sheet")

SKILL_RANK_RE = re.compile(r"(untrained|trained|expert|master|legendary)\s+in\s+(\w+)", re.IGNORECASE)
ABILITY_RE = re.compile(
    r"\b(strength|str|dexterity|dex|constitution|con|intelligence|int|wisdom|wis|charisma|cha)\s+(\+)?(\d+)",
    re.IGNORECASE,
)

ABILITY_ALIASES = {
    "strength": "str",
    "dexterity": "dex",
    "constitution": "con",
    "intelligence": "int",
    "wisdom": "wis",
    "charisma": "cha",
}

# Class feature named in a prerequisite -> classes that have it
CLASS_FEATURES: dict[str, tuple[str, ...]] = {
    "rage": ("barbarian",),
    "sneak attack": ("rogue",),
    "spellcasting": (
        "wizard", "cleric", "druid", "bard", "sorcerer", "witch", "magus", "oracle", "psychic", "summoner",
    ),
    "divine ally": ("champion",),
    "wild shape": ("druid",),
    "flurry of blows": ("monk",),
    "hunting prey": ("ranger",),
    "panache": ("swashbuckler",),
}

ANCESTRY_RE = re.compile(r"\b(human|elf|dwarf|gnome|halfling|goblin|orc|leshy)\b", re.IGNORECASE)

SPECIALIZATION_TYPES = (
    "instinct", "muse", "doctrine", "bloodline", "research field", "mystery", "philosophy", "way",
    "hybrid study", "rune", "style", "element", "conscious mind", "lesson", "gate", "innovation",
    "implement", "arcane school", "eidolon",
)
SPECIALIZATION_RE = re.compile(rf"(\w+\s*\w*?)\s+({'|'.join(SPECIALIZATION_TYPES)})\b", re.IGNORECASE)


@dataclass
class PrerequisiteResult:
    met: bool
    reasons: list[str] = field(default_factory=list)


def check_prerequisites(
    feat: FeatDefinition, character: Character, catalog: GameDataCatalog
) -> PrerequisiteResult:
    """Check the feat's level and each of its prerequisites.

    Args:
        feat: The feat being considered.
        character: The character taking it.
        catalog: Resolves the character's class name.

    Returns:
        Whether every requirement is met, and a reason for each that is not.
    """
    reasons = []
    if character.level < feat.level:
        reasons.append(f"Requires level {feat.level}")

    for prerequisite in feat.prerequisites:
        reason = _unmet_reason(prerequisite.lower(), character, catalog)
        if reason:
            logger.debug(f"{feat.name}: prerequisite {prerequisite!r} not met")
            reasons.append(reason)

    return PrerequisiteResult(met=not reasons, reasons=reasons)


def _unmet_reason(prerequisite: str, character: Character, catalog: GameDataCatalog) -> str | None:
    """Reason a single lower-cased prerequisite is not met, or None."""
    match = SKILL_RANK_RE.search(prerequisite)
    if match:
        required = Proficiency(match.group(1).lower())
        skill = match.group(2).lower()
        if character.skill_rank(skill).rank_index >= required.rank_index:
            return None
        return f"Requires {required.value} in {skill}"

    match = ABILITY_RE.search(prerequisite)
    if match:
        name = match.group(1).lower()
        ability = ABILITY_ALIASES.get(name, name)
        value = int(match.group(3))
        # "Int +2" is a modifier: score 14
        required = 10 + value * 2 if match.group(2) else value
        if getattr(character.ability_scores, ability) >= required:
            return None
        return f"Requires {match.group(1)} {'+' if match.group(2) else ''}{value}"

    class_name = (catalog.class_name(character.class_id) or character.class_id).lower()
    for feature, classes in CLASS_FEATURES.items():
        if re.search(rf"\b{feature}\b", prerequisite):
            return None if class_name in classes else f"Requires {feature}"

    match = ANCESTRY_RE.search(prerequisite)
    if match:
        ancestry = match.group(1).lower()
        if character.ancestry_id.lower() == ancestry:
            return None
        return f"Requires {match.group(1)} ancestry"

    match = SPECIALIZATION_RE.search(prerequisite)
    if match and character.class_specialization_id:
        wanted = match.group(1).lower().strip()
        spec_ids = character.class_specialization_id
        if isinstance(spec_ids, str):
            spec_ids = [spec_ids]
        specs = [spec for spec in map(specialization_by_id, spec_ids) if spec is not None]
        if not specs:
            return None
        for spec in specs:
            name = spec.name.lower()
            if wanted in name or name in wanted:
                return None
        return f"Requires {match.group(0)}"

    return None


def extract_skill_from_prerequisites(prerequisites: list[str]) -> str | None:
    """The skill a skill feat keys off, from its first "<rank> in <skill>" prerequisite."""
    for prerequisite in prerequisites:
        match = SKILL_RANK_RE.search(prerequisite)
        if match and match.group(1).lower() != "untrained":
            return match.group(2).lower()
    return None
