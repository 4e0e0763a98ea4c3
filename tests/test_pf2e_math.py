"""Tests for core PF2e math: proficiency, ABP, AC, saves, HP, strikes and spell DCs."""

import pytest

from pf2e_sheet.models import (
    AbilityScores,
    ArmorClass,
    CategoryProficiency,
    Character,
    EquippedItem,
    HitPoints,
    ItemCustomization,
    Proficiency,
    Saves,
    VariantRules,
    WeaponRunes,
)
from pf2e_sheet.pf2e_math import (
    ProficiencyRank,
    abp_bonuses,
    apply_ability_boost,
    armor_class,
    ensure_valid_hp,
    extract_damage_from_description,
    max_hp_at_first_level,
    proficiency_bonus,
    saving_throw,
    simplify_formula,
    spell_dc,
    weapon_attack,
    weapon_damage,
)


# ─── Helpers ───────────────────────────────────────────────────────────


def make_fighter(level: int = 1, **overrides) -> Character:
    """Create a fighter with Str 16, Dex 14 and trained simple and martial weapons."""
    data = {
        "level": level,
        "ancestry_id": "human",
        "class_id": "fighter",
        "ability_scores": AbilityScores(str=16, dex=14, con=14),
        "weapon_proficiencies": [
            CategoryProficiency(category="simple", proficiency=Proficiency.TRAINED),
            CategoryProficiency(category="martial", proficiency=Proficiency.TRAINED),
        ],
    }
    data.update(overrides)
    return Character(**data)


def make_weapon_item(**runes) -> EquippedItem:
    """Create an equipped weapon carrying the given runes."""
    return EquippedItem(name="Weapon", bulk=1, runes=WeaponRunes(**runes))


# ─── Proficiency and boosts ────────────────────────────────────────────


class TestProficiencyBonus:
    def test_untrained_is_zero(self):
        assert proficiency_bonus(10, ProficiencyRank.UNTRAINED) == 0

    def test_adds_level(self):
        assert proficiency_bonus(5, ProficiencyRank.TRAINED) == 7
        assert proficiency_bonus(5, ProficiencyRank.LEGENDARY) == 13

    def test_without_level_variant(self):
        assert proficiency_bonus(5, ProficiencyRank.EXPERT, without_level=True) == 4

    def test_rank_of_proficiency(self):
        assert ProficiencyRank.of(Proficiency.MASTER) == ProficiencyRank.MASTER


class TestAbilityBoost:
    def test_boost_adds_two_below_eighteen(self):
        assert apply_ability_boost(16) == 18

    def test_boost_adds_one_from_eighteen(self):
        assert apply_ability_boost(18) == 19
        assert apply_ability_boost(19) == 20


class TestAutomaticBonusProgression:
    def test_level_eight(self):
        assert abp_bonuses(8) == {"potency": 2, "striking": 1, "resilient": 1}

    def test_out_of_range_level(self):
        assert abp_bonuses(0) == {"potency": 0, "striking": 0, "resilient": 0}


# ─── Defenses ──────────────────────────────────────────────────────────


class TestArmorClass:
    """Tests for AC calculation."""

    def test_dex_cap_armor_and_item_bonus(self):
        character = Character(
            level=3,
            ability_scores=AbilityScores(dex=16),
            armor_class=ArmorClass(proficiency=Proficiency.TRAINED, ac_bonus=4, dex_cap=1, item_bonus=1),
        )
        assert armor_class(character) == 10 + 1 + 4 + 5 + 1

    def test_legacy_item_bonus_counts_as_armor_bonus_once(self):
        """Old sheets kept the armor bonus in item_bonus."""
        character = Character(
            level=3,
            ability_scores=AbilityScores(dex=16),
            armor_class=ArmorClass(proficiency=Proficiency.TRAINED, item_bonus=3),
        )
        assert armor_class(character) == 10 + 3 + 3 + 5

    def test_abp_replaces_item_bonus(self):
        character = Character(
            level=8,
            ability_scores=AbilityScores(dex=16),
            armor_class=ArmorClass(proficiency=Proficiency.TRAINED, ac_bonus=4, dex_cap=1, item_bonus=1),
            variant_rules=VariantRules(automatic_bonus_progression=True),
        )
        assert armor_class(character) == 10 + 1 + 4 + 10 + 3

    def test_proficiency_without_level(self):
        character = Character(
            level=10,
            armor_class=ArmorClass(proficiency=Proficiency.EXPERT),
            variant_rules=VariantRules(proficiency_without_level=True),
        )
        assert armor_class(character) == 14


class TestSavingThrow:
    def test_will_save(self):
        character = Character(level=3, saves=Saves(will=Proficiency.EXPERT), ability_scores=AbilityScores(wis=14))
        assert saving_throw(character, "will") == 3 + 4 + 2

    def test_untrained_save_is_ability_only(self):
        character = Character(level=3, ability_scores=AbilityScores(dex=12))
        assert saving_throw(character, "reflex") == 1


class TestHitPoints:
    """Tests for first-level HP and HP repair."""

    def test_first_level_hp(self, catalog):
        assert max_hp_at_first_level(make_fighter(), catalog) == 8 + 10 + 2

    def test_dual_class_takes_larger_hp(self, catalog):
        character = make_fighter(class_id="wizard", secondary_class_id="fighter")
        assert max_hp_at_first_level(character, catalog) == 8 + 10 + 2

    def test_missing_hp_is_filled(self, catalog):
        repaired = ensure_valid_hp(make_fighter(), catalog)
        assert repaired.hit_points.max == 20
        assert repaired.hit_points.current == 20

    def test_current_above_max_is_reset(self, catalog):
        character = make_fighter(hit_points=HitPoints(current=50, max=20, temporary=3))
        repaired = ensure_valid_hp(character, catalog)
        assert repaired.hit_points.current == 20
        assert repaired.hit_points.temporary == 3

    def test_valid_hp_is_untouched(self, catalog):
        character = make_fighter(hit_points=HitPoints(current=10, max=20))
        assert ensure_valid_hp(character, catalog) is character


# ─── Strikes ───────────────────────────────────────────────────────────


class TestWeaponAttack:
    """Tests for Strike attack modifiers."""

    def test_melee_uses_strength(self, catalog):
        assert weapon_attack(make_fighter(), catalog.get_weapon("longsword")) == (6, 1, -4)

    def test_agile_finesse(self, catalog):
        """Finesse takes the better of Str and Dex; agile lowers the MAP."""
        assert weapon_attack(make_fighter(), catalog.get_weapon("dagger")) == (6, 2, -2)

    def test_ranged_uses_dexterity(self, catalog):
        assert weapon_attack(make_fighter(), catalog.get_weapon("shortbow")) == (5, 0, -5)

    def test_untrained_category(self, catalog):
        character = make_fighter(weapon_proficiencies=[
            CategoryProficiency(category="simple", proficiency=Proficiency.TRAINED),
        ])
        assert weapon_attack(character, catalog.get_weapon("longsword"))[0] == 3

    def test_all_category_matches_everything(self, catalog):
        character = make_fighter(weapon_proficiencies=[
            CategoryProficiency(category="all", proficiency=Proficiency.EXPERT),
        ])
        assert weapon_attack(character, catalog.get_weapon("longsword"))[0] == 3 + 5

    def test_potency_rune_and_customization(self, catalog):
        item = make_weapon_item(potency_rune=1)
        item.customization = ItemCustomization(bonus_attack=1, attack_ability_override="dex")
        assert weapon_attack(make_fighter(), catalog.get_weapon("longsword"), item)[0] == 2 + 3 + 1 + 1

    def test_abp_potency(self, catalog):
        character = make_fighter(level=4, variant_rules=VariantRules(automatic_bonus_progression=True))
        assert weapon_attack(character, catalog.get_weapon("longsword"))[0] == 3 + 6 + 1


class TestWeaponDamage:
    """Tests for Strike damage expressions."""

    def test_melee_adds_strength(self, catalog):
        assert weapon_damage(make_fighter(), catalog.get_weapon("longsword")) == "1d8 + 3"

    def test_two_hand_trait(self, catalog):
        assert weapon_damage(make_fighter(), catalog.get_weapon("bastard-sword"), two_handed=True) == "1d12 + 3"
        assert weapon_damage(make_fighter(), catalog.get_weapon("bastard-sword")) == "1d8 + 3"

    def test_striking_rune(self, catalog):
        item = make_weapon_item(striking_rune="greaterStriking")
        assert weapon_damage(make_fighter(), catalog.get_weapon("longsword"), equipped=item) == "3d8 + 3"

    def test_ranged_has_no_strength(self, catalog):
        assert weapon_damage(make_fighter(), catalog.get_weapon("shortbow")) == "1d6"

    def test_propulsive_adds_half_strength(self, catalog):
        assert weapon_damage(make_fighter(), catalog.get_weapon("sling")) == "1d6 + 1"

    def test_negative_modifier(self, catalog):
        character = make_fighter(ability_scores=AbilityScores(str=8))
        assert weapon_damage(character, catalog.get_weapon("longsword")) == "1d8 - 1"

    def test_abp_striking(self, catalog):
        character = make_fighter(level=7, variant_rules=VariantRules(automatic_bonus_progression=True))
        assert weapon_damage(character, catalog.get_weapon("longsword")) == "2d8 + 3"


# ─── Spellcasting ──────────────────────────────────────────────────────


class TestSpellDC:
    def test_trained_caster(self, catalog):
        character = Character(level=1, class_id="bard", ability_scores=AbilityScores(cha=18))
        assert spell_dc(character, "occult", catalog) == {"attack": 7, "dc": 17}

    def test_expert_at_seven(self, catalog):
        character = Character(level=7, class_id="bard")
        assert spell_dc(character, "occult", catalog)["attack"] == 11

    def test_wizard_starts_expert(self, catalog):
        character = Character(level=1, class_id="wizard")
        assert spell_dc(character, "arcane", catalog)["attack"] == 5

    def test_class_id_used_without_catalog(self):
        character = Character(level=1, class_id="Wizard")
        assert spell_dc(character, "arcane")["attack"] == 5


# ─── Foundry text helpers ──────────────────────────────────────────────


class TestDamageExtraction:
    def test_damage_tag(self):
        text = "Deals @Damage[2d4[slashing],2d4[piercing]|options:area-damage] damage."
        assert extract_damage_from_description(text) == ["2d4"]

    def test_multiple_tags(self):
        text = "@Damage[1d6[fire]] then @Damage[2d6[cold]]"
        assert extract_damage_from_description(text) == ["1d6", "2d6"]

    def test_several_formulas_in_one_tag(self):
        assert extract_damage_from_description("@Damage[(1d6+4)[fire],1d6[cold]]") == ["(1d6+4)", "1d6"]

    def test_no_tags(self):
        assert extract_damage_from_description("No damage here") is None


class TestSimplifyFormula:
    @pytest.mark.parametrize("level,expected", [(1, "1d4"), (5, "3d4"), (9, "5d4")])
    def test_level_scaling_dice(self, level, expected):
        assert simplify_formula("(floor((@actor.level -1)/2)+1)d4", Character(level=level)) == expected

    def test_ability_reference(self):
        character = Character(ability_scores=AbilityScores(str=16))
        assert simplify_formula("1d8+@actor.abilities.str.mod", character) == "1d8+3"
