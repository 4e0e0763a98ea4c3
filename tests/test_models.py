"""Tests for the character sheet models and stored-data migration."""

from pathlib import Path

import pytest

from pf2e_sheet.models import (
    AbilityBoosts,
    AbilityScores,
    CategoryProficiency,
    Character,
    CharacterFeat,
    Proficiency,
    SkillProficiency,
    create_empty_character,
    max_proficiency,
    migrate_character,
)


# ─── Proficiency ───────────────────────────────────────────────────────


class TestProficiency:
    """Tests for the proficiency rank ladder."""

    def test_rank_index_and_value(self):
        """Ranks map to 0-4 and to rank values 0-8."""
        assert Proficiency.UNTRAINED.rank_index == 0
        assert Proficiency.LEGENDARY.rank_index == 4
        assert Proficiency.EXPERT.rank_value == 4

    def test_from_index_clamps(self):
        """Out-of-range indices are clamped."""
        assert Proficiency.from_index(-3) == Proficiency.UNTRAINED
        assert Proficiency.from_index(9) == Proficiency.LEGENDARY
        assert Proficiency.from_index(2) == Proficiency.EXPERT

    def test_from_rank_value(self):
        """Rank values map back; unknown ones are untrained."""
        assert Proficiency.from_rank_value(6) == Proficiency.MASTER
        assert Proficiency.from_rank_value(5) == Proficiency.UNTRAINED

    def test_step_up_caps_at_legendary(self):
        assert Proficiency.TRAINED.step_up() == Proficiency.EXPERT
        assert Proficiency.LEGENDARY.step_up() == Proficiency.LEGENDARY

    def test_ordering(self):
        """Ranks compare by position, not alphabetically."""
        assert Proficiency.TRAINED < Proficiency.EXPERT
        assert not Proficiency.MASTER < Proficiency.EXPERT
        assert max_proficiency(Proficiency.MASTER, Proficiency.TRAINED) == Proficiency.MASTER

    def test_numeric_foundry_ranks_are_accepted(self):
        assert SkillProficiency(name="Arcana", proficiency=2).proficiency == Proficiency.EXPERT
        assert CategoryProficiency(category="light", proficiency=1).proficiency == Proficiency.TRAINED
        assert SkillProficiency(name="Arcana", proficiency="master").proficiency == Proficiency.MASTER


# ─── Character ─────────────────────────────────────────────────────────


class TestCharacter:
    """Tests for Character defaults and helpers."""

    def test_empty_character_defaults(self):
        """A new character is level 1 with one hero point and 15 gp."""
        character = create_empty_character("Lini")
        assert character.name == "Lini"
        assert character.level == 1
        assert character.hero_points == 1
        assert character.currency.gp == 15
        assert character.perception == Proficiency.TRAINED
        assert len(character.id) == 8

    def test_ability_modifier(self):
        scores = AbilityScores(str=18, dex=9, con=10)
        assert scores.modifier("str") == 4
        assert scores.modifier("dex") == -1
        assert scores.modifier("con") == 0

    def test_class_boost_alias(self):
        """The class boost is stored under the ``class`` key."""
        boosts = AbilityBoosts.model_validate({"class": "int"})
        assert boosts.class_boost == "int"
        assert boosts.model_dump(by_alias=True)["class"] == "int"

    def test_skill_lookup_is_case_insensitive(self):
        character = Character(skills=[SkillProficiency(name="Arcana", proficiency=Proficiency.EXPERT)])
        assert character.get_skill("arcana").name == "Arcana"
        assert character.skill_rank("ARCANA") == Proficiency.EXPERT
        assert character.skill_rank("Stealth") == Proficiency.UNTRAINED

    def test_active_feats_exclude_higher_levels(self):
        """Feats above the character's level stay on the sheet but are inactive."""
        character = Character(
            level=3,
            feats=[CharacterFeat(feat_id="a", level=1), CharacterFeat(feat_id="b", level=4)],
        )
        assert [f.feat_id for f in character.active_feats()] == ["a"]
        assert len(character.feats) == 2

    def test_armor_rank(self):
        character = Character(
            armor_proficiencies=[CategoryProficiency(category="light", proficiency=Proficiency.TRAINED)]
        )
        assert character.armor_rank("light") == Proficiency.TRAINED
        assert character.armor_rank("heavy") is None

    def test_level_bounds(self):
        with pytest.raises(ValueError):
            Character(level=0)
        with pytest.raises(ValueError):
            Character(level=21)


# ─── Migration ─────────────────────────────────────────────────────────


class TestMigrateCharacter:
    """Tests for upgrading stored character data."""

    def test_old_kineticist_id_is_migrated(self):
        character = migrate_character({"name": "Kai", "class_id": "IiG7DgeLWYrSNXuX"})
        assert character.class_id == "RggQN3bX5SEcsffR"

    def test_missing_fields_get_defaults(self):
        """Older sheets without variant rules or hero points still load."""
        character = migrate_character({"name": "Old", "hero_points": None})
        assert character.hero_points == 1
        assert character.variant_rules.free_archetype is False

    def test_feat_slot_type_backfilled_from_source(self):
        character = migrate_character({
            "feats": [
                {"feat_id": "toughness", "source": "general"},
                {"feat_id": "granted", "source": "bonus"},
                {"feat_id": "kept", "source": "class", "slot_type": "archetype"},
            ]
        })
        slots = [f.slot_type for f in character.feats]
        assert slots == ["general", None, "archetype"]

    def test_input_dict_is_not_modified(self):
        data = {"class_id": "IiG7DgeLWYrSNXuX"}
        migrate_character(data)
        assert data == {"class_id": "IiG7DgeLWYrSNXuX"}

    def test_invalid_data_raises_value_error(self):
        with pytest.raises(ValueError, match="Invalid character data"):
            migrate_character({"level": "not a number"})

    @pytest.mark.parametrize("feats", [3, "toughness", [5], [None], [["toughness"]]])
    def test_malformed_feats_raise_value_error(self, feats):
        with pytest.raises(ValueError, match="Invalid character data"):
            migrate_character({"feats": feats})


# ─── Packaging ─────────────────────────────────────────────────────────


def test_package_is_imported_from_src():
    """The root conftest puts ``src`` on the path; the package resolves there."""
    import pf2e_sheet

    assert Path(pf2e_sheet.__file__).resolve().parent.parent.name == "src"
