"""
Rules catalog: normalized PF2e definitions and the registry that serves them.
"""

from .manager import CatalogError, GameDataCatalog
from .models import (
    AncestryDefinition,
    BackgroundDefinition,
    ClassDefinition,
    ClassFeatureDefinition,
    ConditionDefinition,
    ConditionRule,
    DeityDefinition,
    FeatDefinition,
    FeatRule,
    FeatSubfeatures,
    HeritageDefinition,
    SpellDefinition,
    SubfeatureProficiency,
    WeaponDefinition,
)

__all__ = [
    "AncestryDefinition",
    "BackgroundDefinition",
    "CatalogError",
    "ClassDefinition",
    "ClassFeatureDefinition",
    "ConditionDefinition",
    "ConditionRule",
    "DeityDefinition",
    "FeatDefinition",
    "FeatRule",
    "FeatSubfeatures",
    "GameDataCatalog",
    "HeritageDefinition",
    "SpellDefinition",
    "SubfeatureProficiency",
    "WeaponDefinition",
]
