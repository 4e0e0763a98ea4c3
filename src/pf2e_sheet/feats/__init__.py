"""
Feat-specific rules that the generic rule engine does not cover.

Each module handles one feat (mostly Bard feats). Feats are matched by slug
or Foundry id, and only feats taken at or below the character's level
count.
"""

from __future__ import annotations

from ..models import Character, CharacterFeat


def active_feats(character: Character) -> list[CharacterFeat]:
    return character.active_feats()


def matching_feats(character: Character, *feat_ids: str) -> list[CharacterFeat]:
    """Active feats whose id is any of ``feat_ids``."""
    return [feat for feat in character.active_feats() if feat.feat_id in feat_ids]


def has_feat(character: Character, *feat_ids: str) -> bool:
    """True if the character has any of ``feat_ids`` at its current level."""
    return bool(matching_feats(character, *feat_ids))


def count_feats(character: Character, *feat_ids: str) -> int:
    return len(matching_feats(character, *feat_ids))


__all__ = ["active_feats", "count_feats", "has_feat", "matching_feats"]
