"""
Class specializations: the level-1 subclass choice of each class (bard
muses, cleric doctrines, barbarian instincts...).

Specializations are grouped by class name; functions that take a class id
resolve the name through the rules catalog.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..catalog.manager import GameDataCatalog


@dataclass(frozen=True)
class ClassSpecialization:
    id: str
    name: str
    class_name: str
    description: str
    source: str


@dataclass(frozen=True)
class ClassSpecializationType:
    """One specialization slot of a class, e.g. the Bard's Muse."""
    id: str
    name: str
    class_name: str
    tag: str
    options: tuple[ClassSpecialization, ...]


def _type(
    type_id: str,
    name: str,
    class_name: str,
    tag: str,
    source: str,
    *options: tuple[str, str, str],
) -> ClassSpecializationType:
    return ClassSpecializationType(
        id=type_id,
        name=name,
        class_name=class_name,
        tag=tag,
        options=tuple(
            ClassSpecialization(option_id, option_name, class_name, description, source)
            for option_id, option_name, description in options
        ),
    )


BARD_MUSES = _type(
    "bard_muses", "Muse", "Bard", "bard-muse", "Player Core",
    ("muse_enigma", "Enigma",
     "Your muse is a mystery, driving you to uncover hidden secrets. You gain the Bardic Lore feat "
     "and the Sure Strike spell."),
    ("muse_maestro", "Maestro",
     "Your muse is a performer of peerless skill. You gain the Lingering Composition feat and the "
     "Soothe spell."),
    ("muse_polymath", "Polymath",
     "Your muse is a jack-of-all-trades. You gain the Versatile Performance feat and the Unseen "
     "Servant spell."),
    ("muse_warrior", "Warrior",
     "Your muse is a master of martial combat. You gain the Martial Performance feat and the Fear spell."),
)

CLERIC_DOCTRINES = _type(
    "cleric_doctrines", "Doctrine", "Cleric", "cleric-doctrine", "Player Core",
    ("doctrine_cloistered", "Cloistered Cleric",
     "You are a priest of the cloth, focusing on spellcasting and knowledge."),
    ("doctrine_warpriest", "Warpriest",
     "You are a priest of the sword, gaining martial weapon and medium armor training."),
)

BARBARIAN_INSTINCTS = _type(
    "barbarian_instincts", "Instinct", "Barbarian", "barbarian-instinct", "Player Core 2",
    ("instinct_animal", "Animal Instinct",
     "Your rage comes from a bestial nature. You gain unarmed animal attacks."),
    ("instinct_dragon", "Dragon Instinct", "Your rage channels the power of dragons."),
    ("instinct_elemental", "Elemental Instinct", "Your rage channels elemental fury."),
    ("instinct_fury", "Fury Instinct", "Your rage is pure, unbridled fury."),
    ("instinct_giant", "Giant Instinct",
     "Your rage makes you powerful like a giant, letting you wield oversized weapons."),
    ("instinct_spirit", "Spirit Instinct", "Your rage channels spiritual power."),
)

SORCERER_BLOODLINES = _type(
    "sorcerer_bloodlines", "Bloodline", "Sorcerer", "sorcerer-bloodline", "Player Core 2",
    ("bloodline_aberrant", "Aberrant", "Your blood carries the corruption of aberrant creatures."),
    ("bloodline_angelic", "Angelic", "Your blood carries the power of celestial beings."),
    ("bloodline_demonic", "Demonic", "Your blood carries the corruption of the Abyss."),
    ("bloodline_draconic", "Draconic", "Your blood carries the power of dragons."),
    ("bloodline_elemental", "Elemental", "Your blood carries the power of the elements."),
    ("bloodline_fey", "Fey", "Your blood carries the magic of the First World."),
)

CHAMPION_CAUSES = _type(
    "champion_causes", "Cause", "Champion", "champion-cause", "Player Core 2",
    ("cause_liberation", "Liberation", "You fight for freedom and against tyranny."),
    ("cause_justice", "Justice", "You fight for justice and retribution."),
    ("cause_redemption", "Redemption", "You fight to redeem the wicked."),
)

DRUID_ORDERS = _type(
    "druid_orders", "Order", "Druid", "druid-order", "Player Core",
    ("order_animal", "Animal Order", "You focus on the animal kingdom and gain an animal companion."),
    ("order_leaf", "Leaf Order", "You focus on plants and fungi."),
    ("order_storm", "Storm Order", "You focus on weather and sky."),
    ("order_wild", "Untamed Order", "You embrace the untamed wilderness and its shapechanging."),
)

RANGER_EDGES = _type(
    "ranger_edges", "Hunter's Edge", "Ranger", "ranger-hunters-edge", "Player Core",
    ("edge_flurry", "Flurry", "You strike your prey with multiple attacks."),
    ("edge_outwit", "Outwit", "You outsmart your prey."),
    ("edge_precision", "Precision", "You strike your prey with deadly precision."),
)

ROGUE_RACKETS = _type(
    "rogue_rackets", "Racket", "Rogue", "rogue-racket", "Player Core",
    ("racket_scoundrel", "Scoundrel", "You use dirty tactics and misdirection."),
    ("racket_ruffian", "Ruffian", "You use brute force and intimidation."),
    ("racket_thief", "Thief", "You are a master of stealth and larceny."),
)

ORACLE_MYSTERIES = _type(
    "oracle_mysteries", "Mystery", "Oracle", "oracle-mystery", "Player Core 2",
    ("mystery_ancestors", "Ancestors", "You draw power from your lineage."),
    ("mystery_battle", "Battle", "You draw power from conflict."),
    ("mystery_flames", "Flames", "You draw power from fire."),
    ("mystery_life", "Life", "You draw power from life force."),
)

INVESTIGATOR_METHODOLOGIES = _type(
    "investigator_methodologies", "Methodology", "Investigator", "investigator-methodology",
    "Player Core 2",
    ("method_alchemy", "Alchemical Sciences", "You use alchemy to solve crimes."),
    ("method_empiricism", "Empiricism", "You rely on practical experience."),
    ("method_forensic", "Forensic Medicine", "You use medical knowledge."),
)

MAGUS_HYBRID_STUDIES = _type(
    "magus_hybrid_studies", "Hybrid Study", "Magus", "magus-hybrid-study", "Secrets of Magic",
    ("study_sparkling_targe", "Sparkling Targe", "You combine spell and shield."),
    ("study_starlit_span", "Starlit Span", "You combine spell and ranged attacks."),
    ("study_twisting_tree", "Twisting Tree", "You combine spell and staff."),
)

WITCH_LESSONS = _type(
    "witch_lessons", "Lesson", "Witch", "witch-lesson", "Player Core",
    ("lesson_protection", "Protection", "You learn protective magic."),
    ("lesson_vengeance", "Vengeance", "You learn vengeful magic."),
    ("lesson_life", "Life", "You learn healing magic."),
)

GUNSLINGER_WAYS = _type(
    "gunslinger_ways", "Way", "Gunslinger", "gunslinger-way", "Guns & Gears",
    ("way_drifter", "Way of the Drifter", "You are a wandering gunslinger."),
    ("way_pistolero", "Way of the Pistolero", "You specialize in one-handed firearms."),
    ("way_sniper", "Way of the Sniper", "You specialize in long-range firearms."),
)

SWASHBUCKLER_STYLES = _type(
    "swashbuckler_styles", "Style", "Swashbuckler", "swashbuckler-style", "Player Core 2",
    ("style_braggart", "Braggart", "You boast and intimidate to gain panache."),
    ("style_fencer", "Fencer", "You use precise fencing techniques."),
    ("style_gymnast", "Gymnast", "You use acrobatic moves to gain panache."),
)

CLASS_SPECIALIZATIONS_BY_NAME: dict[str, list[ClassSpecializationType]] = {
    spec_type.class_name: [spec_type]
    for spec_type in (
        BARD_MUSES,
        CLERIC_DOCTRINES,
        BARBARIAN_INSTINCTS,
        SORCERER_BLOODLINES,
        CHAMPION_CAUSES,
        DRUID_ORDERS,
        RANGER_EDGES,
        ROGUE_RACKETS,
        ORACLE_MYSTERIES,
        INVESTIGATOR_METHODOLOGIES,
        MAGUS_HYBRID_STUDIES,
        WITCH_LESSONS,
        GUNSLINGER_WAYS,
        SWASHBUCKLER_STYLES,
    )
}

CLASSES_WITHOUT_SPECIALIZATIONS: tuple[str, ...] = (
    "Fighter",
    "Monk",
    "Exemplar",
    "Commander",
    "Guardian",
    "Animist",
)


def specializations_for_class(class_id: str, catalog: GameDataCatalog) -> list[ClassSpecializationType]:
    """Specialization slots for a class id; empty for unknown classes."""
    class_name = catalog.class_name(class_id)
    if not class_name:
        return []
    return list(CLASS_SPECIALIZATIONS_BY_NAME.get(class_name, []))


def class_has_specializations(class_id: str, catalog: GameDataCatalog) -> bool:
    class_name = catalog.class_name(class_id)
    return bool(class_name) and class_name in CLASS_SPECIALIZATIONS_BY_NAME


def specialization_by_id(specialization_id: str) -> ClassSpecialization | None:
    for spec_types in CLASS_SPECIALIZATIONS_BY_NAME.values():
        for spec_type in spec_types:
            for option in spec_type.options:
                if option.id == specialization_id:
                    return option
    return None


def default_specialization_for_class(class_id: str, catalog: GameDataCatalog) -> str | None:
    """First option of the class's first specialization slot, if any."""
    spec_types = specializations_for_class(class_id, catalog)
    if not spec_types or not spec_types[0].options:
        return None
    return spec_types[0].options[0].id
