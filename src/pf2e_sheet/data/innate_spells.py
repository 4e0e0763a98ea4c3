"""
Innate spell sources: backgrounds, heritages and feats that grant spells
usable without slots.

A source either grants a fixed list of spells or derives them from the
character's choice for that source (the Zodiac Bound sign, an Arcane Eye
enhancement). Choice-based sources grant nothing until a choice is made.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal

from ..models import Character, InnateSpell

Frequency = Literal["at-will", "once-per-day", "once-per-week", "once-per-hour"]
SourceType = Literal["heritage", "background", "feat"]


@dataclass(frozen=True)
class InnateSpellGrant:
    spell_id: str
    frequency: Frequency
    tradition: str


@dataclass(frozen=True)
class InnateSpellSource:
    id: str
    type: SourceType
    name: str
    spells: tuple[InnateSpellGrant, ...] | Callable[[str], list[InnateSpellGrant]] = ()


# Daily-use equivalents. At-will is effectively unlimited; once per week is
# tracked as a single daily use.
FREQUENCY_USES: dict[str, int] = {
    "at-will": 999,
    "once-per-day": 1,
    "once-per-week": 1,
    "once-per-hour": 24,
}

FREQUENCY_TEXT: dict[str, str] = {
    "at-will": "At will",
    "once-per-day": "1/day",
    "once-per-week": "1/week",
    "once-per-hour": "1/hour",
}


def frequency_to_daily_uses(frequency: str) -> int:
    return FREQUENCY_USES.get(frequency, 1)


def frequency_text(frequency: str) -> str:
    return FREQUENCY_TEXT.get(frequency, "1/day")


ZODIAC_SIGNS: dict[str, dict[str, str]] = {
    "underworld-dragon": {"name": "The Underworld Dragon", "ability": "int"},
    "swordswoman": {"name": "The Swordswoman", "ability": "dex"},
    "sea-dragon": {"name": "The Sea Dragon", "ability": "con"},
    "swallow": {"name": "The Swallow", "ability": "dex"},
    "ox": {"name": "The Ox", "ability": "str"},
    "sovereign-dragon": {"name": "The Sovereign Dragon", "ability": "cha"},
    "ogre": {"name": "The Ogre", "ability": "str"},
    "forest-dragon": {"name": "The Forest Dragon", "ability": "wis"},
    "blossom": {"name": "The Blossom", "ability": "cha"},
    "dog": {"name": "The Dog", "ability": "con"},
    "sky-dragon": {"name": "The Sky Dragon", "ability": "int"},
    "archer": {"name": "The Archer", "ability": "dex"},
}


def _divine(spell_id: str, frequency: Frequency) -> tuple[InnateSpellGrant, ...]:
    return (InnateSpellGrant(spell_id, frequency, "divine"),)


ZODIAC_SPELLS: dict[str, tuple[InnateSpellGrant, ...]] = {
    "underworld-dragon": _divine("6DfLZBl8wKIV03Iq", "at-will"),  # Ignition
    "swordswoman": _divine("dDiOnjcsBFbAvP6t", "at-will"),  # Gale Blast
    "sea-dragon": _divine("MZGkMsPBztFN0pUO", "once-per-week"),  # Water Breathing
    "swallow": _divine("Q7QQ91vQtyi1Ux36", "once-per-day"),  # Jump
    "ox": _divine("X9dkmh23lFwMjrYd", "once-per-day"),  # Ant Haul
    "sovereign-dragon": _divine("aIHY2DArKFweIrpf", "once-per-day"),  # Command
    "ogre": _divine("4koZzrnMXhhosn0D", "once-per-day"),  # Fear
    "forest-dragon": _divine("uZK2BYzPnxUBnDjr", "at-will"),  # Tangle Vine
    "blossom": _divine("UKsIOWmMx4hSpafl", "once-per-day"),  # Dizzying Colors
    "dog": _divine("EfFMLVbmkBWmzoLF", "once-per-week"),  # Clear Mind
    "sky-dragon": _divine("XSujb7EsSwKl19Uu", "once-per-day"),  # Bless
    "archer": _divine("Gb7SeieEvd0pL2Eh", "once-per-day"),  # Sure Strike
}

DETECT_MAGIC = "VnDI3pTCx6eS8o6c"
FIGMENT = "VGpj0kJMrHNqaCXF"
KNOW_THE_WAY = "cKuWxRH5H7qsSTsD"


def _zodiac_spells(sign: str) -> list[InnateSpellGrant]:
    return list(ZODIAC_SPELLS.get(sign, ()))


def _arcane_eye_spells(enhancement: str) -> list[InnateSpellGrant]:
    if enhancement == "arcane-eye":
        return [InnateSpellGrant("jwK43yKsHTkJQvQ9", "once-per-hour", "arcane")]  # See the Unseen
    return []


def _source(source_id: str, source_type: SourceType, name: str, *grants: InnateSpellGrant) -> InnateSpellSource:
    return InnateSpellSource(source_id, source_type, name, tuple(grants))


# Heritages whose spell is picked by the player (heritage_choice) grant
# nothing here; the chosen cantrip is stored directly on the sheet.
INNATE_SPELL_SOURCES: dict[str, InnateSpellSource] = {
    source.id: source
    for source in (
        # Backgrounds
        InnateSpellSource("zodiac-bound", "background", "Zodiac Bound", _zodiac_spells),
        # Heritages
        _source("fey-touched-gnome", "heritage", "Fey-Touched Gnome"),
        _source("wellspring-gnome", "heritage", "Wellspring Gnome"),
        _source("seer-elf", "heritage", "Seer Elf", InnateSpellGrant(DETECT_MAGIC, "at-will", "arcane")),
        _source("forge-blessed-dwarf", "heritage", "Forge-Blessed Dwarf"),
        _source("talos", "heritage", "Talos", InnateSpellGrant("AiyDEEQf2vTjZVzJ", "at-will", "arcane")),
        _source("liminal-catfolk", "heritage", "Liminal Catfolk", InnateSpellGrant(DETECT_MAGIC, "at-will", "occult")),
        _source("budding-speaker-centaur", "heritage", "Budding Speaker Centaur"),
        _source("homing-drake", "heritage", "Homing Drake", InnateSpellGrant(KNOW_THE_WAY, "at-will", "arcane")),
        _source("dokkaebi-goblin", "heritage", "Dokkaebi Goblin", InnateSpellGrant(FIGMENT, "at-will", "occult")),
        _source("makari-lizardfolk", "heritage", "Makari Lizardfolk"),
        _source("witch-kholo", "heritage", "Witch Kholo", InnateSpellGrant(FIGMENT, "at-will", "occult")),
        _source("born-of-elements", "heritage", "Born of Elements"),
        _source("born-of-celestial", "heritage", "Born of Celestial"),
        _source("respite-of-loam-and-leaf", "heritage", "Respite of Loam and Leaf"),
        _source("rite-of-invocation", "heritage", "Rite of Invocation"),
        _source("mage-automaton", "heritage", "Mage Automaton"),
        _source("oracular-samsaran", "heritage", "Oracular Samsaran"),
        _source("ghost-bull-minotaur", "heritage", "Ghost Bull Minotaur",
                InnateSpellGrant(KNOW_THE_WAY, "at-will", "occult")),
        _source("spellkeeper-shisk", "heritage", "Spellkeeper Shisk"),
        # Ancestry feats
        _source("efreeti-magic", "feat", "Efreeti Magic",
                InnateSpellGrant("wzctak6BxOW8xvFV", "once-per-day", "arcane"),  # Enlarge
                InnateSpellGrant("2oH5IufzdESuYxat", "once-per-day", "arcane")),  # Illusory Object
        InnateSpellSource("arcane-eye", "feat", "Arcane Eye", _arcane_eye_spells),
        _source("core-attunement", "feat", "Core Attunement"),
        _source("arcane-camouflage", "feat", "Arcane Camouflage",
                InnateSpellGrant("3JG1t3T4mWn6vTke", "once-per-day", "arcane"),  # Blur
                InnateSpellGrant("XXqE1eY3w3z6xJCB", "once-per-day", "arcane")),  # Invisibility
        _source("astral-blink", "feat", "Astral Blink",
                InnateSpellGrant("zjG6NncHyAKqSF7m", "once-per-day", "arcane")),  # Dimensional Steps
        _source("axial-recall", "feat", "Axial Recall",
                InnateSpellGrant("5bTt2CvYHPvaR7QQ", "once-per-week", "arcane")),  # Interplanar Teleport
    )
}


def is_innate_spell_source(source_id: str | None) -> bool:
    return bool(source_id) and source_id in INNATE_SPELL_SOURCES


def grant_to_innate_spell(grant: InnateSpellGrant, source: str, source_type: str) -> InnateSpell:
    uses = frequency_to_daily_uses(grant.frequency)
    return InnateSpell(
        spell_id=grant.spell_id,
        uses=uses,
        max_uses=uses,
        source=source,
        source_type=source_type,
    )


def innate_spells_from_source(
    source_id: str,
    source_type: SourceType,
    choice: str | None = None,
) -> list[InnateSpell]:
    """Innate spells granted by one source.

    Args:
        source_id: Heritage, background or feat id.
        source_type: Where the source sits on the sheet.
        choice: The player's choice for choice-based sources.

    Returns:
        The granted spells; empty for unknown sources and for choice-based
        sources without a choice.
    """
    source = INNATE_SPELL_SOURCES.get(source_id)
    if source is None:
        return []

    if callable(source.spells):
        if not choice:
            return []
        grants = source.spells(choice)
    else:
        grants = list(source.spells)

    return [grant_to_innate_spell(g, source.name, source_type) for g in grants]


def innate_spells_for_character(character: Character) -> list[InnateSpell]:
    """All innate spells from the heritage, background and active feats."""
    spells: list[InnateSpell] = []

    if is_innate_spell_source(character.heritage_id):
        spells.extend(innate_spells_from_source(
            character.heritage_id, "heritage", character.heritage_choice
        ))

    if is_innate_spell_source(character.background_id):
        spells.extend(innate_spells_from_source(
            character.background_id, "background", character.background_choice
        ))

    for feat in character.active_feats():
        if is_innate_spell_source(feat.feat_id):
            choice = feat.choices[0] if feat.choices else None
            spells.extend(innate_spells_from_source(feat.feat_id, "feat", choice))

    return spells
