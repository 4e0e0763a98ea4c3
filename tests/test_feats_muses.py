"""Tests for bard muses and Multifarious Muse."""

import pytest

from pf2e_sheet.feats import count_feats, has_feat
from pf2e_sheet.feats.muses import (
    additional_muses,
    all_muses,
    available_muses_for_multifarious,
    has_enigma_muse,
    has_max_multifarious_muse,
    has_multifarious_muse,
    has_muse,
    has_polymath_muse,
    multifarious_granted_feats,
    multifarious_muse_count,
    muse_name,
    primary_muses,
)
from pf2e_sheet.models import Character, CharacterFeat


def make_bard(muse="enigma", *feats: CharacterFeat, level: int = 10) -> Character:
    """Create a bard with a primary muse and the given feats."""
    return Character(class_id="bard", class_specialization_id=muse, level=level, feats=list(feats))


def multifarious(muse: str, granted: str = "", level: int = 2, **kwargs) -> CharacterFeat:
    choices = [muse, granted] if granted else [muse]
    return CharacterFeat(feat_id="multifarious-muse", level=level, choices=choices, **kwargs)


class TestFeatLookup:
    def test_only_active_feats_count(self):
        character = make_bard("enigma", multifarious("maestro"), multifarious("polymath", level=12))
        assert has_feat(character, "multifarious-muse")
        assert count_feats(character, "multifarious-muse") == 1
        assert not has_feat(character, "toughness")


class TestMuseIds:
    @pytest.mark.parametrize("muse_id,expected", [
        ("enigma", "enigma"),
        ("muse_maestro", "maestro"),
        ("z9QXwXcGB9rwYWDm", "polymath"),
        ("muse_warrior", "warrior"),
    ])
    def test_muse_name(self, muse_id, expected):
        assert muse_name(muse_id) == expected

    def test_primary_muses_from_string_or_list(self):
        assert primary_muses(make_bard("enigma")) == ["enigma"]
        assert primary_muses(make_bard(["muse_enigma", "", "maestro"])) == ["muse_enigma", "maestro"]
        assert primary_muses(make_bard(None)) == []


class TestMultifariousMuse:
    """Tests for extra muses."""

    def test_count_is_capped(self):
        feats = [multifarious(m) for m in ("maestro", "polymath", "warrior", "maestro")]
        character = make_bard("enigma", *feats)
        assert multifarious_muse_count(character) == 3
        assert has_max_multifarious_muse(character)

    def test_foundry_id_counts(self):
        character = make_bard("enigma", CharacterFeat(feat_id="a898miJnjgD93ZsX", level=2, choices=["maestro"]))
        assert has_multifarious_muse(character)
        assert additional_muses(character) == ["maestro"]

    def test_choice_map_wins_over_choices(self):
        feat = multifarious("maestro", choice_map={"muse": "polymath"})
        assert additional_muses(make_bard("enigma", feat)) == ["polymath"]

    def test_primary_muse_is_not_repeated(self):
        character = make_bard("muse_enigma", multifarious("enigma"), multifarious("maestro"))
        assert additional_muses(character) == ["maestro"]
        assert all_muses(character) == ["muse_enigma", "maestro"]

    def test_granted_feats(self):
        character = make_bard("enigma", multifarious("maestro", "lingering-composition"), multifarious("polymath"))
        assert multifarious_granted_feats(character) == ["lingering-composition"]

    def test_available_muses(self):
        character = make_bard("enigma", multifarious("muse_maestro"))
        assert available_muses_for_multifarious(character) == ["polymath"]
        assert not has_multifarious_muse(make_bard())


class TestMusePrerequisites:
    def test_any_spelling_matches(self, catalog):
        character = make_bard("enigma", multifarious("z9QXwXcGB9rwYWDm"))
        assert has_muse(character, "muse_polymath")
        assert has_polymath_muse(character, catalog)
        assert has_enigma_muse(character, catalog)

    def test_requires_bard_class(self, catalog):
        fighter = Character(class_id="fighter", class_specialization_id="enigma")
        assert not has_enigma_muse(fighter, catalog)
