"""
Pytest configuration and fixtures for pf2e-sheet tests.
"""

import pytest

from pf2e_sheet.catalog import GameDataCatalog
from pf2e_sheet.recalculator import KINETICIST_CLASS_ID


# ─── Catalog Content ───────────────────────────────────────────────────


CATALOG_CONTENT = {
    "ancestries": [
        {
            "id": "human", "name": "Human", "hit_points": 8, "speed": 25,
            "ability_boosts": ["free", "free"], "languages": ["Common"],
        },
        {
            "id": "dwarf", "name": "Dwarf", "hit_points": 10, "speed": 20,
            "ability_boosts": ["con", "wis", "free"], "ability_flaws": ["cha"],
            "languages": ["Common", "Dwarven"], "senses": ["darkvision"],
        },
        {
            "id": "elf", "name": "Elf", "hit_points": 6, "speed": 30,
            "ability_boosts": ["dex", "int", "free"], "ability_flaws": ["con"],
            "languages": ["Common", "Elven"], "senses": ["low-light-vision"],
        },
    ],
    "heritages": [
        {
            "id": "swift-elf", "name": "Swift Elf", "ancestry_id": "elf",
            "rules": [{"key": "FlatModifier", "selector": "land-speed", "value": 5}],
        },
    ],
    "backgrounds": [
        {
            "id": "scholar", "name": "Scholar", "ability_boosts": ["int", "wis"],
            "trained_skills": ["Arcana"],
        },
        {
            "id": "acolyte", "name": "Acolyte", "ability_boosts": ["int", "wis"],
            "trained_skills": ["Religion"], "bonus_languages": ["Celestial"],
        },
    ],
    "classes": [
        {
            "id": "bard", "name": "Bard", "hit_points": 8, "key_ability": ["cha"],
            "perception": 2, "fortitude": 1, "reflex": 1, "will": 2,
            "trained_skills": ["Occultism", "Performance"], "additional_trained_skills": 4,
        },
        {
            "id": "fighter", "name": "Fighter", "hit_points": 10, "key_ability": ["str", "dex"],
            "perception": 2, "fortitude": 2, "reflex": 2, "will": 1,
            "trained_skills": ["Athletics"], "additional_trained_skills": 3,
        },
        {
            "id": "wizard", "name": "Wizard", "hit_points": 6, "key_ability": ["int"],
            "fortitude": 1, "reflex": 1, "will": 2, "trained_skills": ["Arcana"],
        },
        {
            "id": "cleric", "name": "Cleric", "hit_points": 8, "key_ability": ["wis"],
            "fortitude": 1, "reflex": 1, "will": 2, "trained_skills": ["Religion"],
        },
        {
            "id": KINETICIST_CLASS_ID, "name": "Kineticist", "hit_points": 8, "key_ability": ["con"],
            "fortitude": 2, "reflex": 2, "will": 1,
        },
    ],
    "class_features": [
        {
            "id": "air-gate", "name": "Air Gate", "level": 1,
            "rules": [
                {
                    "key": "ActiveEffectLike", "mode": "upgrade", "path": "system.skills.acrobatics.rank",
                    "value": 1, "predicate": ["junction:air:skill"],
                },
            ],
        },
    ],
    "feats": [
        {
            "id": "toughness", "name": "Toughness", "level": 1, "category": "general",
            "rules": [{"key": "FlatModifier", "selector": "hp", "value": "@actor.level"}],
        },
        {
            "id": "fleet", "name": "Fleet", "level": 1, "category": "general",
            "rules": [{"key": "FlatModifier", "selector": "land-speed", "value": 5, "type": "circumstance"}],
        },
        {
            "id": "nimble-elf", "name": "Nimble Elf", "level": 1, "category": "ancestry",
            "traits": ["elf"],
            "rules": [{"key": "FlatModifier", "selector": "land-speed", "value": 10}],
        },
        {
            "id": "incredible-initiative", "name": "Incredible Initiative", "level": 1,
            "category": "general",
            "rules": [{"key": "FlatModifier", "selector": "initiative", "value": 2}],
        },
        {
            "id": "untrained-improvisation", "name": "Untrained Improvisation", "level": 3,
            "category": "general",
            "rules": [{"key": "FlatModifier", "selector": "skill-check", "value": "@actor.level"}],
        },
        {
            "id": "canny-acumen", "name": "Canny Acumen", "level": 1, "category": "general",
            "rules": [
                {
                    "key": "ChoiceSet", "flag": "canny", "prompt": "Select a save",
                    "choices": [
                        {"label": "PF2E.SavesFortitude", "value": "system.saves.fortitude.rank"},
                        {"label": "Reflex", "value": "system.saves.reflex.rank"},
                        {"label": "Will", "value": "system.saves.will.rank"},
                        {"label": "Perception", "value": "system.perception.rank"},
                    ],
                },
                {
                    "key": "ActiveEffectLike", "mode": "upgrade",
                    "path": "{item|flags.pf2e.rulesSelections.canny}", "value": 2,
                },
            ],
        },
        {
            "id": "iron-will", "name": "Iron Will", "level": 1, "category": "general",
            "rules": [
                {
                    "key": "ActiveEffectLike", "mode": "upgrade", "path": "system.saves.will.rank",
                    "value": "ternary(gte(@actor.level,17),3,2)",
                },
            ],
        },
        {
            "id": "quick-reflexes", "name": "Quick Reflexes", "level": 1, "category": "general",
            "rules": [
                {"key": "ActiveEffectLike", "mode": "upgrade", "path": "system.saves.reflex.rank", "value": "2"},
            ],
        },
        {
            "id": "skill-training", "name": "Skill Training", "level": 1, "category": "skill",
            "rules": [
                {"key": "ChoiceSet", "flag": "skill", "choices": {"config": "skills"}},
                {
                    "key": "ActiveEffectLike", "mode": "upgrade",
                    "path": "system.skills.{item|flags.pf2e.rulesSelections.skill}.rank", "value": 1,
                },
            ],
        },
        {
            "id": "stealthy-training", "name": "Stealthy Training", "level": 1, "category": "class",
            "rules": [
                {"key": "ActiveEffectLike", "mode": "upgrade", "path": "system.skills.stealth.rank", "value": 2},
            ],
        },
        {
            "id": "multilingual", "name": "Multilingual", "level": 1, "category": "skill",
            "subfeatures": {"languages": {"granted": ["Draconic"]}},
        },
        {
            "id": "armor-proficiency", "name": "Armor Proficiency", "level": 1, "category": "general",
            "subfeatures": {"proficiencies": {"medium": {"rank": 1}}},
        },
        {
            "id": "sorcerer-dedication", "name": "Sorcerer Dedication", "level": 2, "category": "class",
            "traits": ["archetype", "dedication"],
            "subfeatures": {"proficiencies": {"spellcasting": {"rank": 1}, "sorcerer": {"rank": 1, "attribute": "cha"}}},
        },
        {
            "id": "basic-blood-potency", "name": "Basic Blood Potency", "level": 4, "category": "class",
            "traits": ["archetype"], "prerequisites": ["Sorcerer Dedication"],
        },
        {
            "id": "basic-sorcerer-spellcasting", "name": "Basic Sorcerer Spellcasting", "level": 4,
            "category": "class", "traits": ["archetype", "sorcerer"], "prerequisites": ["Sorcerer Dedication"],
        },
        {
            "id": "medic-dedication", "name": "Medic Dedication", "level": 2, "category": "class",
            "traits": ["archetype", "dedication"], "prerequisites": ["trained in Medicine"],
            "rules": [{"key": "GrantItem", "uuid": "Compendium.pf2e.feats-srd.Item.Battle Medicine"}],
        },
        {
            "id": "doctors-visitation", "name": "Doctor's Visitation", "level": 4, "category": "class",
            "traits": ["archetype"], "prerequisites": ["Medic Dedication"],
        },
        {
            "id": "battle-medicine", "name": "Battle Medicine", "level": 1, "category": "skill",
            "traits": ["general", "skill"], "prerequisites": ["trained in Medicine"],
        },
        {
            "id": "cleric-dedication", "name": "Cleric Dedication", "level": 2, "category": "class",
            "traits": ["archetype", "dedication"],
            "rules": [{"key": "ChoiceSet", "flag": "deity", "choices": {"itemType": "deity"}}],
        },
        {
            "id": "martial-training", "name": "Martial Training", "level": 1, "category": "general",
            "rules": [
                {
                    "key": "ActiveEffectLike", "mode": "upgrade",
                    "path": "system.proficiencies.attacks.martial.rank", "value": 1,
                    "predicate": ["defense:light:rank:1"],
                },
            ],
        },
        {
            "id": "bardic-lore", "name": "Bardic Lore", "level": 1, "category": "class", "traits": ["bard"],
        },
        {
            "id": "lingering-composition", "name": "Lingering Composition", "level": 1, "category": "class",
            "traits": ["bard"],
        },
        {
            "id": "versatile-performance", "name": "Versatile Performance", "level": 1, "category": "class",
            "traits": ["bard"],
        },
        {
            "id": "multifarious-muse", "name": "Multifarious Muse", "level": 2, "category": "class",
            "traits": ["bard"],
            "rules": [
                {
                    "key": "ChoiceSet", "flag": "muse",
                    "choices": [
                        {"label": "Enigma", "value": "enigma"},
                        {"label": "Maestro", "value": "maestro"},
                        {"label": "Polymath", "value": "polymath"},
                    ],
                },
            ],
        },
    ],
    "deities": [
        {"id": "sarenrae", "name": "Sarenrae", "skill": "Medicine", "font": ["heal"]},
    ],
    "spells": [
        {"id": "detect-magic", "name": "Detect Magic", "rank": 0, "traditions": ["arcane", "occult"], "traits": ["cantrip"]},
        {"id": "soothe", "name": "Soothe", "rank": 1, "traditions": ["occult", "divine"]},
        {"id": "phantom-pain", "name": "Phantom Pain", "rank": 1, "traditions": ["occult"]},
        {"id": "fireball", "name": "Fireball", "rank": 3, "traditions": ["arcane", "primal"]},
        {"id": "mind-reading", "name": "Mind Reading", "rank": 3, "traditions": ["occult", "arcane"]},
        {"id": "synesthesia", "name": "Synesthesia", "rank": 5, "traditions": ["occult"]},
        {"id": "commune", "name": "Commune", "rank": 6, "traditions": ["occult", "divine"], "is_ritual": True},
    ],
    "conditions": [
        {"id": "frightened", "name": "Frightened", "rules": [{"selector": "all", "value": -1}]},
        {"id": "clumsy", "name": "Clumsy", "rules": [{"selector": "dex-based", "value": -1}]},
        {"id": "sickened", "name": "Sickened", "rules": [{"selector": "all", "value": -1}]},
        {
            "id": "off-guard", "name": "Off-Guard", "value": None,
            "rules": [{"selector": "ac", "value": -2, "type": "circumstance"}],
        },
        {
            "id": "drained", "name": "Drained",
            "rules": [{"selector": ["con-based", "saving-throw"], "value": -1}],
        },
    ],
    "weapons": [
        {"id": "longsword", "name": "Longsword", "category": "martial", "group": "sword",
         "damage": "1d8", "damage_type": "slashing", "traits": ["versatile-p"]},
        {"id": "dagger", "name": "Dagger", "category": "simple", "group": "knife",
         "damage": "1d4", "damage_type": "piercing", "traits": ["agile", "finesse", "thrown-10"], "bulk": 0.1},
        {"id": "bastard-sword", "name": "Bastard Sword", "category": "martial", "group": "sword",
         "damage": "1d8", "damage_type": "slashing", "traits": ["two-hand-d12"]},
        {"id": "shortbow", "name": "Shortbow", "category": "martial", "group": "bow",
         "damage": "1d6", "damage_type": "piercing", "range": 60, "traits": ["deadly-d10"]},
        {"id": "sling", "name": "Sling", "category": "simple", "group": "sling",
         "damage": "1d6", "damage_type": "bludgeoning", "range": 50, "traits": ["propulsive"]},
    ],
}


@pytest.fixture
def catalog():
    """A small catalog covering the content the tests refer to."""
    return GameDataCatalog.from_mapping({"content": CATALOG_CONTENT}, origin="tests")
