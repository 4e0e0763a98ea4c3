"""
Focus point pool.

One point for a focus-casting class, one per distinct focus feat, plus
Additional/Expanded Focus. The pool never exceeds 3.
"""

from __future__ import annotations

import logging

from .catalog.manager import GameDataCatalog
from .models import Character

logger = logging.getLogger("pf2e-sheet")

MAX_FOCUS_POINTS = 3

FOCUS_SPELL_CLASS_NAMES = (
    "Bard",
    "Champion",
    "Cleric",
    "Druid",
    "Monk",
    "Oracle",
    "Psychic",
    "Sorcerer",
    "Summoner",
    "Swashbuckler",
    "Thaumaturge",
    "Wizard",
    "Gunslinger",
    "Kineticist",
)

# Feat slug -> focus points granted
FOCUS_FEATS: dict[str, int] = {
    "cleric-domain": 1,
    "sorcerer-blood-magic": 1,
    "wizard-focus-spell": 1,
    "bard-muse": 1,
    "champion-cause": 1,
    "druid-order": 1,
    "monk-ki": 1,
    "oracle-mystery": 1,
    "psychic-conscious-mind": 1,
    "summoner-eidolon": 1,
    "swashbuckler-panache": 1,
    "thaumaturge-implement": 1,
    "geniekin-versatility": 1,
    "chosen-one": 1,
    "gortle-yip-sigil": 1,
    "blessed-one-dedication": 1,
    "champion-advanced-devotion": 1,
}

ADDITIONAL_FOCUS_FEATS: dict[str, int] = {
    "additional-focus": 1,
    "expanded-focus": 1,
}


def class_grants_focus_points(class_id: str, catalog: GameDataCatalog) -> bool:
    return catalog.class_name(class_id) in FOCUS_SPELL_CLASS_NAMES


def calculate_max_focus_points(character: Character, catalog: GameDataCatalog) -> int:
    """Maximum focus points for ``character``, capped at 3."""
    class_points = 1 if class_grants_focus_points(character.class_id, catalog) else 0
    focus_feats = {f.feat_id for f in character.active_feats() if f.feat_id in FOCUS_FEATS}
    additional = sum(ADDITIONAL_FOCUS_FEATS.get(f.feat_id, 0) for f in character.active_feats())

    total = class_points + len(focus_feats) + additional
    logger.debug(
        f"Focus points for {character.name or character.id}: class={class_points} "
        f"feats={len(focus_feats)} additional={additional} total={total}"
    )
    return min(total, MAX_FOCUS_POINTS)


def has_focus_abilities(character: Character) -> bool:
    return any(f.feat_id in FOCUS_FEATS for f in character.active_feats())


def focus_feats(character: Character) -> list[tuple[str, int]]:
    """(feat id, points) for each focus feat the character has."""
    return [(f.feat_id, FOCUS_FEATS[f.feat_id]) for f in character.active_feats() if f.feat_id in FOCUS_FEATS]
