"""
Archetype dedication rules.

After an archetype's Dedication feat a character must take two more feats
from that archetype before another Dedication, or any other archetype's
feats. Progress is worked out from the feat list on every call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .catalog.manager import GameDataCatalog
from .catalog.models import FeatDefinition
from .feat_rules import parse_granted_items
from .models import Character

logger = logging.getLogger("pf2e-sheet")

# Feats after the Dedication before another Dedication is allowed
FEATS_AFTER_DEDICATION = 2


def is_archetype_dedication(feat: FeatDefinition) -> bool:
    return "dedication" in feat.name.lower() and any(t.lower() == "archetype" for t in feat.traits)


def archetype_name_from_dedication(feat_name: str) -> str:
    """``"Bastion Dedication"`` -> ``"bastion"``."""
    return feat_name.lower().replace("dedication", "").strip()


def is_feat_of_archetype(feat: FeatDefinition, archetype: str) -> bool:
    """Whether ``feat`` belongs to ``archetype``.

    A feat belongs when it carries the archetype as a trait, its name starts
    with the archetype name, or it lists the archetype's Dedication as a
    prerequisite.
    """
    archetype = archetype.lower().strip()
    if archetype in (t.lower() for t in feat.traits):
        return True
    if feat.name.lower().startswith(archetype):
        return True
    dedication = f"{archetype} dedication"
    return any(dedication in prerequisite.lower() for prerequisite in feat.prerequisites)


@dataclass
class DedicationProgress:
    archetype: str
    dedication_level: int
    feats_count: int = 1

    @property
    def remaining_feats_needed(self) -> int:
        # The Dedication itself is the first counted feat
        return max(0, FEATS_AFTER_DEDICATION + 1 - self.feats_count)


def dedication_progress(character: Character, catalog: GameDataCatalog) -> dict[str, DedicationProgress]:
    """Progress per archetype, built from the feats in level order."""
    progress: dict[str, DedicationProgress] = {}
    for character_feat in sorted(character.feats, key=lambda f: f.level):
        feat = catalog.get_feat(character_feat.feat_id)
        if feat is None:
            continue
        if is_archetype_dedication(feat):
            archetype = archetype_name_from_dedication(feat.name)
            progress[archetype] = DedicationProgress(archetype, character_feat.level)
            continue
        for archetype, entry in progress.items():
            if is_feat_of_archetype(feat, archetype):
                entry.feats_count += 1
                break
    return progress


def active_dedication_constraint(character: Character, catalog: GameDataCatalog) -> DedicationProgress | None:
    """The first Dedication still waiting for its follow-up feats, if any."""
    for entry in dedication_progress(character, catalog).values():
        if entry.remaining_feats_needed > 0:
            return entry
    return None


@dataclass
class SelectionCheck:
    allowed: bool
    reason: str | None = None


def can_select_feat(character: Character, feat: FeatDefinition, catalog: GameDataCatalog) -> SelectionCheck:
    """Check ``feat`` against an open Dedication.

    Feats of the open archetype, its own Dedication and non-archetype feats
    are always allowed.
    """
    constraint = active_dedication_constraint(character, catalog)
    if constraint is None:
        return SelectionCheck(True)

    remaining = f"Must take {constraint.remaining_feats_needed} more {constraint.archetype} feat(s)"
    if is_archetype_dedication(feat):
        if archetype_name_from_dedication(feat.name) == constraint.archetype:
            return SelectionCheck(True)
        return SelectionCheck(False, f"{remaining} before selecting another dedication")

    if is_feat_of_archetype(feat, constraint.archetype):
        return SelectionCheck(True)
    if any(t.lower() == "archetype" for t in feat.traits):
        return SelectionCheck(False, f"{remaining} before feats from other archetypes")
    return SelectionCheck(True)


def _granted_feat_ids(dedication: FeatDefinition) -> list[str]:
    """Ids of feats a Dedication grants through GrantItem rules.

    ``Compendium.pf2e.feats-srd.Item.Alchemical Crafting`` -> ``alchemical-crafting``.
    """
    granted = []
    for item in parse_granted_items(dedication):
        name = item.uuid.split(".")[-1].strip()
        if item.type == "feat" and name:
            granted.append("-".join(name.lower().split()))
    return granted


def remove_dedication(
    character: Character, dedication_id: str, catalog: GameDataCatalog
) -> tuple[Character, list[str]]:
    """Remove a Dedication with every feat of its archetype and every feat it granted.

    Returns:
        The updated character and the removed feat ids. The character is
        returned unchanged when ``dedication_id`` is not a known Dedication.
    """
    dedication = catalog.get_feat(dedication_id)
    if dedication is None or not is_archetype_dedication(dedication):
        return character, []

    archetype = archetype_name_from_dedication(dedication.name)
    granted = set(_granted_feat_ids(dedication))
    kept = []
    removed = []
    for character_feat in character.feats:
        feat = catalog.get_feat(character_feat.feat_id)
        belongs = feat is not None and (
            character_feat.feat_id == dedication_id or is_feat_of_archetype(feat, archetype)
        )
        if belongs or character_feat.granted_by == dedication_id or character_feat.feat_id in granted:
            removed.append(character_feat.feat_id)
        else:
            kept.append(character_feat.model_copy())

    logger.info(f"Removed {len(removed)} feat(s) of the {archetype} archetype")
    return character.model_copy(update={"feats": kept}), removed
