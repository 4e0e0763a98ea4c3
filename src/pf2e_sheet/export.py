"""
Character export and sharing.

Characters are written as JSON or YAML snapshots of the pydantic model and
read back through ``migrate_character`` so sheets saved by older versions
still load. A share token is the compact JSON encoded as URL-safe base64.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .bulk import format_bulk
from .catalog.manager import GameDataCatalog
from .models import Character, Proficiency, migrate_character
from .pf2e_math import ability_modifier, armor_class, character_proficiency_bonus, saving_throw

logger = logging.getLogger("pf2e-sheet")

SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}
STAT_BLOCK_MAX_ITEMS = 10


class ExportError(Exception):
    """Raised when a character cannot be exported or imported."""
    pass


def character_to_dict(character: Character) -> dict[str, Any]:
    return character.model_dump(mode="json", by_alias=True)


def export_character(character: Character, path: Path | str) -> Path:
    """Write ``character`` to ``path``; the suffix picks JSON or YAML.

    Raises:
        ExportError: On an unsupported suffix or a write failure.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise ExportError(f"Unsupported file format: {suffix}")

    data = character_to_dict(character)
    try:
        if suffix == ".json":
            path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), encoding="utf-8")
    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}") from e

    logger.info(f"Exported character {character.name or character.id} to {path}")
    return path


def import_character(path: Path | str) -> Character:
    """Read a character saved by ``export_character`` (or an older version).

    Args:
        path: A ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        The migrated, validated character.

    Raises:
        ExportError: If the file is missing, unparseable or not a character.
    """
    path = Path(path)
    if not path.exists():
        raise ExportError(f"Character file not found: {path}")
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise ExportError(f"Unsupported file format: {suffix}")

    try:
        raw_content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ExportError(f"Failed to read file: {e}") from e

    try:
        data = json.loads(raw_content) if suffix == ".json" else yaml.safe_load(raw_content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ExportError(f"Failed to parse {suffix} file: {e}") from e

    return _load(data)


def _load(data: Any) -> Character:
    if not isinstance(data, dict):
        raise ExportError("Character data must be an object at the top level")
    try:
        return migrate_character(data)
    except ValueError as e:
        raise ExportError(str(e)) from e


# ------------------------------------------------------------------
# Share tokens
# ------------------------------------------------------------------


def encode_share_token(character: Character) -> str:
    """URL-safe base64 of the character's compact JSON."""
    payload = json.dumps(character_to_dict(character), separators=(",", ":"))
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")


def decode_share_token(token: str) -> Character:
    """Rebuild a character from ``encode_share_token`` output.

    Raises:
        ExportError: If the token is not valid base64 or not a character.
    """
    token = token.strip()
    padded = token + "=" * (-len(token) % 4)
    try:
        payload = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
        data = json.loads(payload)
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise ExportError(f"Invalid share token: {e}") from e
    return _load(data)


# ------------------------------------------------------------------
# Stat block
# ------------------------------------------------------------------


def _signed(value: int) -> str:
    return f"+{value}" if value >= 0 else str(value)


def generate_stat_block(character: Character, catalog: GameDataCatalog | None = None) -> str:
    """Markdown summary of the character's headline numbers.

    Ancestry and class names come from ``catalog`` when given. Perception is
    shown at least trained.
    """
    ancestry = catalog.get_ancestry(character.ancestry_id) if catalog else None
    class_def = catalog.get_class(character.class_id) if catalog else None
    scores = character.ability_scores

    perception_rank = character.perception
    if perception_rank == Proficiency.UNTRAINED:
        perception_rank = Proficiency.TRAINED
    perception = ability_modifier(scores.wis) + character_proficiency_bonus(character, perception_rank)

    title = " ".join(
        part for part in (f"Level {character.level}", ancestry.name if ancestry else "", class_def.name if class_def else "") if part
    )
    mods = {ability: _signed(ability_modifier(getattr(scores, ability))) for ability in ("str", "dex", "con", "int", "wis", "cha")}

    lines = [
        f"**{character.name or 'Unnamed'}**",
        title,
        "",
        f"**HP** {character.hit_points.current}/{character.hit_points.max}",
        "",
        f"**AC** {armor_class(character)} **Perception** {_signed(perception)}",
        "",
        f"**Fort** {_signed(saving_throw(character, 'fortitude'))}   "
        f"**Ref** {_signed(saving_throw(character, 'reflex'))}   "
        f"**Will** {_signed(saving_throw(character, 'will'))}",
        "",
        f"**Str** {mods['str']}   **Dex** {mods['dex']}   **Con** {mods['con']}",
        f"**Int** {mods['int']}   **Wis** {mods['wis']}   **Cha** {mods['cha']}",
        "",
        f"**Speed** {character.speed.land} feet",
    ]

    trained = [s for s in character.skills if s.proficiency != Proficiency.UNTRAINED]
    if trained:
        lines += ["", "**Skills** " + ", ".join(
            f"{s.name} {_signed(ability_modifier(getattr(scores, s.ability)) + character_proficiency_bonus(character, s.proficiency))}"
            for s in sorted(trained, key=lambda s: s.name)
        )]

    if character.languages:
        lines += ["", f"**Languages** {', '.join(character.languages)}"]

    if character.equipment:
        lines += ["", "**Items**"]
        lines += [
            f"- {item.name} (Bulk {format_bulk(item.bulk)})"
            for item in character.equipment[:STAT_BLOCK_MAX_ITEMS]
        ]

    return "\n".join(lines) + "\n"
