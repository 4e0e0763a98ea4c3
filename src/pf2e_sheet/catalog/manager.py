"""
GameDataCatalog - registry of normalized PF2e rules content.

The catalog is the single source of rules data for the recalculation
pipeline. It is built in memory (``add_*``), from a mapping, or from a
normalized JSON/YAML snapshot, and injected into every component that
needs it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import RLock
from typing import Any, Iterator

import yaml
from pydantic import BaseModel, ValidationError

from .models import (
    AncestryDefinition,
    BackgroundDefinition,
    ClassDefinition,
    ClassFeatureDefinition,
    ConditionDefinition,
    DeityDefinition,
    FeatDefinition,
    HeritageDefinition,
    SpellDefinition,
    WeaponDefinition,
)

logger = logging.getLogger("pf2e-sheet")


class CatalogError(Exception):
    """Error loading or saving a catalog snapshot."""
    pass


# section name -> definition model
SECTIONS: dict[str, type[BaseModel]] = {
    "ancestries": AncestryDefinition,
    "heritages": HeritageDefinition,
    "backgrounds": BackgroundDefinition,
    "classes": ClassDefinition,
    "class_features": ClassFeatureDefinition,
    "feats": FeatDefinition,
    "deities": DeityDefinition,
    "spells": SpellDefinition,
    "conditions": ConditionDefinition,
    "weapons": WeaponDefinition,
}


def _normalize_name(name: str) -> str:
    return "".join(name.lower().split())


class GameDataCatalog:
    """
    Thread-safe store of rules definitions keyed by id.

    Lookups return None for unknown ids; callers treat missing data as
    "skip this rule" rather than an error.
    """

    SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}

    def __init__(self) -> None:
        self._lock = RLock()
        self._content: dict[str, dict[str, BaseModel]] = {name: {} for name in SECTIONS}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def _add(self, section: str, definition: BaseModel) -> None:
        with self._lock:
            self._content[section][definition.id] = definition

    def add_ancestry(self, ancestry: AncestryDefinition) -> None:
        self._add("ancestries", ancestry)

    def add_heritage(self, heritage: HeritageDefinition) -> None:
        self._add("heritages", heritage)

    def add_background(self, background: BackgroundDefinition) -> None:
        self._add("backgrounds", background)

    def add_class(self, class_def: ClassDefinition) -> None:
        self._add("classes", class_def)

    def add_class_feature(self, feature: ClassFeatureDefinition) -> None:
        self._add("class_features", feature)

    def add_feat(self, feat: FeatDefinition) -> None:
        self._add("feats", feat)

    def add_deity(self, deity: DeityDefinition) -> None:
        self._add("deities", deity)

    def add_spell(self, spell: SpellDefinition) -> None:
        self._add("spells", spell)

    def add_condition(self, condition: ConditionDefinition) -> None:
        self._add("conditions", condition)

    def add_weapon(self, weapon: WeaponDefinition) -> None:
        self._add("weapons", weapon)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _get(self, section: str, item_id: str | None) -> Any:
        if not item_id:
            return None
        with self._lock:
            return self._content[section].get(item_id)

    def get_ancestry(self, ancestry_id: str | None) -> AncestryDefinition | None:
        return self._get("ancestries", ancestry_id)

    def get_heritage(self, heritage_id: str | None) -> HeritageDefinition | None:
        return self._get("heritages", heritage_id)

    def get_background(self, background_id: str | None) -> BackgroundDefinition | None:
        return self._get("backgrounds", background_id)

    def get_class(self, class_id: str | None) -> ClassDefinition | None:
        return self._get("classes", class_id)

    def get_class_feature(self, feature_id: str | None) -> ClassFeatureDefinition | None:
        return self._get("class_features", feature_id)

    def get_feat(self, feat_id: str | None) -> FeatDefinition | None:
        return self._get("feats", feat_id)

    def get_deity(self, deity_id: str | None) -> DeityDefinition | None:
        return self._get("deities", deity_id)

    def get_spell(self, spell_id: str | None) -> SpellDefinition | None:
        return self._get("spells", spell_id)

    def get_condition(self, condition_id: str | None) -> ConditionDefinition | None:
        return self._get("conditions", condition_id)

    def get_weapon(self, weapon_id: str | None) -> WeaponDefinition | None:
        return self._get("weapons", weapon_id)

    def feats(self) -> Iterator[FeatDefinition]:
        with self._lock:
            items = list(self._content["feats"].values())
        return iter(items)

    def spells(self) -> Iterator[SpellDefinition]:
        with self._lock:
            items = list(self._content["spells"].values())
        return iter(items)

    def classes(self) -> Iterator[ClassDefinition]:
        with self._lock:
            items = list(self._content["classes"].values())
        return iter(items)

    def class_name(self, class_id: str | None) -> str | None:
        """Display name of a class, or None if unknown."""
        class_def = self.get_class(class_id)
        return class_def.name if class_def else None

    def class_id_by_name(self, name: str) -> str | None:
        """Find a class id by name, ignoring case and whitespace."""
        wanted = _normalize_name(name)
        for class_def in self.classes():
            if _normalize_name(class_def.name) == wanted:
                return class_def.id
        return None

    def content_counts(self) -> dict[str, int]:
        with self._lock:
            return {name: len(items) for name, items in self._content.items()}

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: dict[str, Any], origin: str = "<mapping>") -> GameDataCatalog:
        """Build a catalog from a normalized mapping.

        Sections may sit at the top level or under a ``content`` key. Entries
        that fail validation are logged and skipped.
        """
        catalog = cls()
        content = data.get("content", data)
        for section, model in SECTIONS.items():
            for item in content.get(section, []) or []:
                try:
                    catalog._add(section, model.model_validate(item))
                except ValidationError as e:
                    logger.warning(f"Invalid {section} entry in {origin}: {e}")
        return catalog

    @classmethod
    def load_file(cls, path: Path | str) -> GameDataCatalog:
        """Load a normalized JSON or YAML snapshot.

        Args:
            path: Path to a ``.json``, ``.yaml`` or ``.yml`` file.

        Returns:
            The populated catalog.

        Raises:
            CatalogError: If the file is missing, unsupported or malformed.
        """
        path = Path(path)
        if not path.exists():
            raise CatalogError(f"Catalog file not found: {path}")

        suffix = path.suffix.lower()
        if suffix not in cls.SUPPORTED_EXTENSIONS:
            raise CatalogError(
                f"Unsupported file format: {suffix}. "
                f"Supported: {', '.join(sorted(cls.SUPPORTED_EXTENSIONS))}"
            )

        try:
            raw_content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise CatalogError(f"Failed to read file: {e}") from e

        try:
            if suffix == ".json":
                data = json.loads(raw_content)
            else:
                data = yaml.safe_load(raw_content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise CatalogError(f"Failed to parse {suffix} file: {e}") from e

        if not isinstance(data, dict):
            raise CatalogError("Catalog must be a JSON/YAML object at the top level")

        catalog = cls.from_mapping(data, origin=str(path))
        counts = ", ".join(f"{k}={v}" for k, v in catalog.content_counts().items() if v)
        logger.info(f"Loaded catalog from {path}: {counts or 'empty'}")
        return catalog

    def to_mapping(self) -> dict[str, Any]:
        with self._lock:
            return {
                "content": {
                    section: [
                        item.model_dump(mode="json", by_alias=True, exclude_none=True)
                        for item in items.values()
                    ]
                    for section, items in self._content.items()
                }
            }

    def dump_file(self, path: Path | str) -> None:
        """Write the catalog as a JSON or YAML snapshot, chosen by suffix."""
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix not in self.SUPPORTED_EXTENSIONS:
            raise CatalogError(f"Unsupported file format: {suffix}")

        data = self.to_mapping()
        try:
            if suffix == ".json":
                path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            else:
                path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        except OSError as e:
            raise CatalogError(f"Failed to write file: {e}") from e
        logger.info(f"Saved catalog to {path}")
