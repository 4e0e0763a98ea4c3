"""
pf2e-sheet: Pathfinder 2e character sheet back end.

A rules catalog of normalized game data plus the calculations that turn a
character's choices into derived statistics.
"""

__version__ = "0.1.0"

from .catalog import CatalogError, GameDataCatalog
from .export import ExportError, decode_share_token, encode_share_token, export_character, import_character
from .models import Character, Proficiency, create_empty_character, migrate_character
from .recalculator import CharacterRecalculator, RecalculationError, recalculate_character

__all__ = [
    "CatalogError",
    "Character",
    "CharacterRecalculator",
    "ExportError",
    "GameDataCatalog",
    "Proficiency",
    "RecalculationError",
    "create_empty_character",
    "decode_share_token",
    "encode_share_token",
    "export_character",
    "import_character",
    "migrate_character",
    "recalculate_character",
]
