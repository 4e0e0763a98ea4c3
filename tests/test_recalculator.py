"""Tests for CharacterRecalculator: the full derived-stat pipeline."""

import pytest

from pf2e_sheet.catalog.models import FeatRule, HeritageDefinition
from pf2e_sheet.models import (
    AbilityBoosts,
    Buff,
    Character,
    CharacterFeat,
    HitPoints,
    KineticistJunction,
    Proficiency,
)
from pf2e_sheet.recalculator import (
    KINETICIST_CLASS_ID,
    CharacterRecalculator,
    RecalculationError,
    recalculate_character,
)


# ─── Helpers ───────────────────────────────────────────────────────────


def make_bard(level: int = 1, **overrides) -> Character:
    """Create a human scholar bard with Cha 18 after recalculation."""
    data = {
        "name": "Lini",
        "level": level,
        "ancestry_id": "human",
        "background_id": "scholar",
        "class_id": "bard",
        "ability_boosts": AbilityBoosts(
            ancestry=["cha", "dex"],
            background=["int", "cha"],
            class_boost="cha",
            free=["cha", "dex", "int", "con"],
        ),
    }
    data.update(overrides)
    return Character(**data)


def make_fighter(level: int = 5, **overrides) -> Character:
    """Create a dwarf fighter with only the fixed and class boosts."""
    data = {
        "level": level,
        "ancestry_id": "dwarf",
        "class_id": "fighter",
        "ability_boosts": AbilityBoosts(class_boost="str"),
    }
    data.update(overrides)
    return Character(**data)


def skill_ranks(character: Character) -> dict[str, Proficiency]:
    return {s.name: s.proficiency for s in character.skills}


# ─── Ability scores ────────────────────────────────────────────────────


class TestAbilityScores:
    """Tests for the ability score stage."""

    def test_boost_sources_stack(self, catalog):
        scores = recalculate_character(make_bard(), catalog).ability_scores
        assert (scores.str, scores.dex, scores.con, scores.int, scores.wis, scores.cha) == (10, 14, 12, 14, 10, 18)

    def test_fixed_boosts_and_flaws(self, catalog):
        scores = recalculate_character(make_fighter(), catalog).ability_scores
        assert scores.con == 12
        assert scores.wis == 12
        assert scores.cha == 8
        assert scores.str == 12

    def test_boosts_above_eighteen_add_one(self, catalog):
        character = make_bard(level=5, ability_boosts=AbilityBoosts(
            ancestry=["cha"], background=["cha"], class_boost="cha", free=["cha"],
            level_up={5: ["cha", "dex"]},
        ))
        assert recalculate_character(character, catalog).ability_scores.cha == 19

    def test_level_up_boosts_above_level_are_ignored(self, catalog):
        character = make_bard(level=4, ability_boosts=AbilityBoosts(level_up={5: ["str"]}))
        assert recalculate_character(character, catalog).ability_scores.str == 10

    def test_background_boosts_need_a_known_background(self, catalog):
        character = make_bard(background_id="unknown")
        assert recalculate_character(character, catalog).ability_scores.cha == 16


# ─── Skills ────────────────────────────────────────────────────────────


class TestSkills:
    """Tests for the skills stage."""

    def test_class_and_background_training(self, catalog):
        ranks = skill_ranks(recalculate_character(make_bard(), catalog))
        assert len(ranks) == 17
        assert ranks["Occultism"] == Proficiency.TRAINED
        assert ranks["Performance"] == Proficiency.TRAINED
        assert ranks["Arcana"] == Proficiency.TRAINED
        assert ranks["Stealth"] == Proficiency.UNTRAINED

    def test_manual_int_and_overlap_training(self, catalog):
        character = make_bard(
            skill_increases={0: "Diplomacy"},
            manual_skill_training=["Crafting"],
            int_bonus_skills={1: ["Society"], 5: ["Nature"]},
        )
        ranks = skill_ranks(recalculate_character(character, catalog))
        assert ranks["Diplomacy"] == Proficiency.TRAINED
        assert ranks["Crafting"] == Proficiency.TRAINED
        assert ranks["Society"] == Proficiency.TRAINED
        assert ranks["Nature"] == Proficiency.UNTRAINED

    def test_skill_increases_respect_level_caps(self, catalog):
        """Expert before 7, master from 7; increases above the level don't apply."""
        character = make_fighter(
            level=7,
            skill_increases={3: "Athletics", 5: "Athletics", 7: "Athletics", 9: "Stealth"},
        )
        ranks = skill_ranks(recalculate_character(character, catalog))
        assert ranks["Athletics"] == Proficiency.MASTER
        assert ranks["Stealth"] == Proficiency.UNTRAINED

    def test_increase_trains_an_untrained_skill(self, catalog):
        character = make_fighter(level=3, skill_increases={3: "Stealth"})
        assert skill_ranks(recalculate_character(character, catalog))["Stealth"] == Proficiency.TRAINED

    def test_feat_skills_then_increases(self, catalog):
        character = make_bard(
            level=3,
            feats=[CharacterFeat(feat_id="skill-training", source="skill", choices=["stealth"])],
            skill_increases={3: "Stealth"},
        )
        assert skill_ranks(recalculate_character(character, catalog))["Stealth"] == Proficiency.EXPERT

    def test_deity_skill_from_dedication(self, catalog):
        character = make_bard(
            level=2,
            feats=[CharacterFeat(feat_id="cleric-dedication", level=2, choices=["sarenrae"])],
        )
        assert skill_ranks(recalculate_character(character, catalog))["Medicine"] == Proficiency.TRAINED

    def test_kineticist_junction_skill(self, catalog):
        junction = KineticistJunction(
            choice="fork_the_path", gate_id="air-gate", junction_ids=["air_gate_skill_junction"],
        )
        character = Character(level=5, class_id=KINETICIST_CLASS_ID, kineticist_junctions={5: junction})
        assert skill_ranks(recalculate_character(character, catalog))["Acrobatics"] == Proficiency.TRAINED

        lower = character.model_copy(update={"level": 4})
        assert skill_ranks(recalculate_character(lower, catalog))["Acrobatics"] == Proficiency.UNTRAINED


# ─── Saves and perception ──────────────────────────────────────────────


class TestSavesAndPerception:
    """Tests for save and perception progression."""

    def test_good_saves_start_trained(self, catalog):
        character = recalculate_character(make_bard(), catalog)
        assert character.saves.will == Proficiency.TRAINED
        assert character.saves.fortitude == Proficiency.UNTRAINED
        assert character.perception == Proficiency.TRAINED

    @pytest.mark.parametrize("level,expected", [
        (1, Proficiency.TRAINED),
        (3, Proficiency.EXPERT),
        (13, Proficiency.MASTER),
    ])
    def test_good_save_progression(self, catalog, level, expected):
        assert recalculate_character(make_fighter(level=level), catalog).saves.fortitude == expected

    def test_perception_master_at_seventeen(self, catalog):
        assert recalculate_character(make_fighter(level=16), catalog).perception == Proficiency.TRAINED
        assert recalculate_character(make_fighter(level=17), catalog).perception == Proficiency.MASTER

    def test_kineticist_table(self, catalog):
        first = recalculate_character(Character(level=1, class_id=KINETICIST_CLASS_ID), catalog)
        assert (first.saves.fortitude, first.saves.reflex, first.saves.will) == (
            Proficiency.EXPERT, Proficiency.EXPERT, Proficiency.TRAINED,
        )
        ninth = recalculate_character(Character(level=9, class_id=KINETICIST_CLASS_ID), catalog)
        assert ninth.saves.fortitude == Proficiency.MASTER
        assert ninth.saves.will == Proficiency.EXPERT
        assert ninth.perception == Proficiency.EXPERT

    def test_canny_acumen_choice_path(self, catalog):
        character = make_bard(feats=[
            CharacterFeat(feat_id="canny-acumen", source="general", choices=["system.saves.fortitude.rank"]),
        ])
        assert recalculate_character(character, catalog).saves.fortitude == Proficiency.EXPERT

    def test_unknown_class_keeps_saves(self, catalog):
        character = make_bard(class_id="unknown")
        assert recalculate_character(character, catalog).saves == character.saves

    def test_level_gated_save_upgrade(self, catalog):
        """Iron Will is expert, then master from level 17."""
        feats = [CharacterFeat(feat_id="iron-will", source="general")]
        assert recalculate_character(make_fighter(level=16, feats=feats), catalog).saves.will == Proficiency.EXPERT
        assert recalculate_character(make_fighter(level=17, feats=feats), catalog).saves.will == Proficiency.MASTER

    def test_integer_string_save_value(self, catalog):
        character = make_bard(feats=[CharacterFeat(feat_id="quick-reflexes", source="general")])
        assert recalculate_character(character, catalog).saves.reflex == Proficiency.EXPERT

    @pytest.mark.parametrize("value,level,expected", [
        (3, 1, 6),
        ("3", 1, 6),
        ("ternary(gte(@actor.level,17),3,2)", 16, 4),
        ("ternary(gte(@actor.level,17),3,2)", 17, 6),
        (None, 1, 4),
    ])
    def test_target_rank_value(self, catalog, value, level, expected):
        assert CharacterRecalculator(catalog)._target_rank_value(value, level) == expected


# ─── HP, speed, senses, languages ──────────────────────────────────────


class TestHitPoints:
    def test_max_hp_formula(self, catalog):
        character = recalculate_character(make_fighter(level=5), catalog)
        assert character.hit_points.max == 10 + (10 + 1) * 5
        assert character.hit_points.current == character.hit_points.max

    def test_existing_current_hp_is_kept(self, catalog):
        character = make_fighter(hit_points=HitPoints(current=12, temporary=4))
        updated = recalculate_character(character, catalog)
        assert updated.hit_points.current == 12
        assert updated.hit_points.temporary == 4

    def test_toughness_adds_level(self, catalog):
        character = make_fighter(feats=[CharacterFeat(feat_id="toughness", source="general", level=3)])
        assert recalculate_character(character, catalog).hit_points.max == 65 + 5

    def test_builder_mode_feat_is_inert(self, catalog):
        """A feat above the current level changes nothing until the level is reached."""
        character = make_fighter(level=2, feats=[CharacterFeat(feat_id="toughness", level=3)])
        assert recalculate_character(character, catalog).hit_points.max == 10 + 11 * 2

        raised = character.model_copy(update={"level": 3})
        assert recalculate_character(raised, catalog).hit_points.max == 10 + 11 * 3 + 3


class TestSpeedSensesLanguages:
    def test_speed_takes_best_bonus(self, catalog):
        character = make_bard(feats=[
            CharacterFeat(feat_id="fleet", source="general"),
            CharacterFeat(feat_id="nimble-elf", source="ancestry"),
        ])
        assert recalculate_character(character, catalog).speed.land == 35

    def test_ancestry_speed(self, catalog):
        assert recalculate_character(make_fighter(), catalog).speed.land == 20

    def test_heritage_speed_bonus(self, catalog):
        character = recalculate_character(make_bard(ancestry_id="elf", heritage_id="swift-elf"), catalog)
        assert character.speed.land == 35
        buff = next(b for b in character.buffs if b.id == "heritage:swift-elf:speed")
        assert buff.source == "heritage:Swift Elf"

    def test_registered_heritage_hp_bonus(self, catalog):
        catalog.add_heritage(HeritageDefinition(
            id="hardy-dwarf", name="Hardy Dwarf", ancestry_id="dwarf",
            rules=[FeatRule(key="FlatModifier", selector="hp", value=3)],
        ))
        base = recalculate_character(make_fighter(), catalog).hit_points.max
        hardy = recalculate_character(make_fighter(heritage_id="hardy-dwarf"), catalog)
        assert hardy.hit_points.max == base + 3
        assert hardy.buffs == []

    def test_senses(self, catalog):
        assert recalculate_character(make_fighter(), catalog).senses == ["darkvision"]
        assert recalculate_character(make_bard(), catalog).senses == ["vision"]
        assert recalculate_character(make_bard(ancestry_id=""), catalog).senses == []

    def test_languages(self, catalog):
        character = make_bard(
            background_id="acolyte",
            feats=[CharacterFeat(feat_id="multilingual", source="skill")],
        )
        assert recalculate_character(character, catalog).languages == [
            "Common", "Celestial", "Draconic", "Elven",
        ]

    def test_no_int_bonus_languages(self, catalog):
        assert recalculate_character(make_fighter(), catalog).languages == ["Common", "Dwarven"]


# ─── Feat buffs ────────────────────────────────────────────────────────


class TestFeatBuffs:
    """Tests for FlatModifier rules turned into buffs."""

    def test_flat_modifier_buffs(self, catalog):
        character = make_bard(level=5, feats=[
            CharacterFeat(feat_id="incredible-initiative", source="general"),
            CharacterFeat(feat_id="untrained-improvisation", source="general", level=3),
        ])
        buffs = {b.id: b for b in recalculate_character(character, catalog).buffs}
        initiative = buffs["feat:incredible-initiative:initiative"]
        assert initiative.bonus == 2
        assert initiative.type == "circumstance"
        assert initiative.source == "feat:Incredible Initiative"
        assert buffs["feat:untrained-improvisation:skill-*"].bonus == 4

    def test_hp_modifiers_are_not_buffs(self, catalog):
        character = make_fighter(feats=[CharacterFeat(feat_id="toughness")])
        assert recalculate_character(character, catalog).buffs == []

    def test_rerun_does_not_duplicate_and_keeps_manual_buffs(self, catalog):
        manual = Buff(name="Heroism", bonus=1, type="status", selector="attack", source="spell")
        character = make_bard(feats=[CharacterFeat(feat_id="fleet")], buffs=[manual])
        once = recalculate_character(character, catalog)
        twice = recalculate_character(once, catalog)
        assert [b.id for b in twice.buffs] == [manual.id, "feat:fleet:speed"]

    def test_removed_feat_drops_its_buff(self, catalog):
        with_feat = recalculate_character(make_bard(feats=[CharacterFeat(feat_id="fleet")]), catalog)
        without = recalculate_character(with_feat.model_copy(update={"feats": []}), catalog)
        assert without.buffs == []


# ─── Pipeline ──────────────────────────────────────────────────────────


class TestPipeline:
    def test_input_is_not_modified(self, catalog):
        character = make_bard()
        recalculate_character(character, catalog)
        assert character.skills == []
        assert character.ability_scores.cha == 10

    def test_idempotent(self, catalog):
        character = make_fighter(level=9, skill_increases={3: "Athletics"}, feats=[CharacterFeat(feat_id="toughness")])
        once = recalculate_character(character, catalog)
        assert recalculate_character(once, catalog) == once

    def test_lowering_level_drops_feat_proficiencies(self, catalog):
        character = make_bard(level=3, feats=[
            CharacterFeat(feat_id="sorcerer-dedication", source="class", level=2),
            CharacterFeat(feat_id="armor-proficiency", source="general", level=3),
        ])
        third = recalculate_character(character, catalog)
        assert third.armor_rank("medium") == Proficiency.TRAINED
        assert [dc.class_type for dc in third.class_dcs] == ["sorcerer"]
        assert third.spellcasting_from_feats == ["Sorcerer Dedication"]

        first = recalculate_character(third.model_copy(update={"level": 1}), catalog)
        fresh = recalculate_character(character.model_copy(update={"level": 1}), catalog)
        assert first.armor_proficiencies == fresh.armor_proficiencies == []
        assert first.class_dcs == fresh.class_dcs == []
        assert first.spellcasting_from_feats == []

    def test_lowering_then_raising_level_reproduces_state(self, catalog):
        character = make_bard(level=3, skill_increases={3: "Arcana"}, feats=[
            CharacterFeat(feat_id="sorcerer-dedication", source="class", level=2),
            CharacterFeat(feat_id="armor-proficiency", source="general", level=3),
            CharacterFeat(feat_id="fleet", source="general", level=3),
        ])
        third = recalculate_character(character, catalog)
        lowered = recalculate_character(third.model_copy(update={"level": 1}), catalog)
        raised = recalculate_character(lowered.model_copy(update={"level": 3}), catalog)
        assert raised == third

    def test_removed_feat_drops_its_proficiencies(self, catalog):
        character = make_bard(level=3, feats=[CharacterFeat(feat_id="armor-proficiency", source="general")])
        with_feat = recalculate_character(character, catalog)
        without = recalculate_character(with_feat.model_copy(update={"feats": []}), catalog)
        assert without.armor_proficiencies == []

    def test_level_out_of_range(self, catalog):
        character = make_bard()
        character.level = 25
        with pytest.raises(RecalculationError, match="1-20"):
            CharacterRecalculator(catalog).recalculate(character)

    def test_missing_catalog_entries_do_not_fail(self, catalog):
        character = Character(level=3, ancestry_id="x", class_id="y", background_id="z")
        updated = recalculate_character(character, catalog)
        assert updated.hit_points.max == 0
        assert updated.speed.land == 25
