"""Tests for Bulk, containers and encumbrance."""

import pytest

from pf2e_sheet.bulk import (
    calculate_bulk,
    can_add_item,
    containers,
    format_bulk,
    is_coin_item,
    item_bulk,
    items_in_container,
    max_bulk,
    move_item_to_container,
)
from pf2e_sheet.models import AbilityScores, Character, EquippedItem, ItemCustomization


# ─── Helpers ───────────────────────────────────────────────────────────


def make_character(strength: int = 10, equipment: list[EquippedItem] | None = None) -> Character:
    """Create a character with the given Strength and inventory."""
    return Character(ability_scores=AbilityScores(str=strength), equipment=equipment or [])


def make_backpack(item_id: str = "pack", capacity: float | None = 4, reduction: float = 1) -> EquippedItem:
    return EquippedItem(
        id=item_id, name="Backpack", bulk=0.1, is_container=True,
        capacity=capacity, bulk_reduction=reduction,
    )


# ─── Items ─────────────────────────────────────────────────────────────


class TestItemBulk:
    def test_light_items_count_as_zero(self):
        """Items under 1/10 Bulk are negligible."""
        assert item_bulk(EquippedItem(name="Chalk", bulk=0.05)) == 0
        assert item_bulk(EquippedItem(name="Dagger", bulk=0.1)) == 0.1

    def test_bulk_override(self):
        item = EquippedItem(name="Mithral Chain", bulk=2, customization=ItemCustomization(bulk_override=1))
        assert item_bulk(item) == 1

    def test_coins(self):
        coins = EquippedItem(name="Gold Coins", bulk=500)
        assert is_coin_item(coins)
        assert item_bulk(coins) == 0.5

    def test_max_bulk(self):
        assert max_bulk(10) == 5
        assert max_bulk(18) == 9
        assert max_bulk(8) == 4


# ─── Totals ────────────────────────────────────────────────────────────


class TestCalculateBulk:
    """Tests for inventory totals and encumbrance."""

    def test_loose_items(self):
        character = make_character(equipment=[
            EquippedItem(name="Longsword", bulk=1),
            EquippedItem(name="Rope", bulk=1),
        ])
        result = calculate_bulk(character)
        assert result.total_bulk == 2
        assert result.max_bulk == 5
        assert result.encumbrance == "normal"
        assert result.containers[0].container is None

    def test_container_reduction_and_capacity(self):
        pack = make_backpack(capacity=2, reduction=1)
        inventory = [
            pack,
            EquippedItem(name="Bedroll", bulk=1, container_id="pack"),
            EquippedItem(name="Tent", bulk=3, container_id="pack"),
        ]
        result = calculate_bulk(make_character(), inventory)
        # contents 0 + 2 = 2, at capacity; plus the pack itself
        assert result.containers[1].bulk == pytest.approx(2.1)
        assert result.total_bulk == pytest.approx(2.1)

    def test_items_in_unknown_container_are_loose(self):
        inventory = [EquippedItem(name="Torch", bulk=1, container_id="gone")]
        result = calculate_bulk(make_character(), inventory)
        assert result.containers[0].items == inventory

    @pytest.mark.parametrize("bulk,expected", [(5, "normal"), (6, "encumbered"), (7, "overburdened")])
    def test_encumbrance_levels(self, bulk, expected):
        character = make_character(equipment=[EquippedItem(name="Load", bulk=bulk)])
        assert calculate_bulk(character).encumbrance == expected


class TestCanAddItem:
    def test_fits(self):
        character = make_character()
        result = can_add_item(character, [EquippedItem(name="A", bulk=3)], EquippedItem(name="B", bulk=2))
        assert result == {"can_add": True, "current_bulk": 3, "new_bulk": 5, "max_bulk": 5}

    def test_one_over_limit_still_fits(self):
        result = can_add_item(make_character(), [EquippedItem(name="A", bulk=5)], EquippedItem(name="B", bulk=1))
        assert result["can_add"] is True
        result = can_add_item(make_character(), [EquippedItem(name="A", bulk=5)], EquippedItem(name="B", bulk=2))
        assert result["can_add"] is False

    def test_full_container_rejects(self):
        pack = make_backpack(capacity=2, reduction=0)
        inventory = [pack, EquippedItem(name="Bedroll", bulk=2, container_id="pack")]
        result = can_add_item(make_character(), inventory, EquippedItem(name="Rope", bulk=1), "pack")
        assert result["can_add"] is False
        assert result["new_bulk"] == result["current_bulk"]


# ─── Formatting and containers ─────────────────────────────────────────


class TestFormatBulk:
    @pytest.mark.parametrize("bulk,expected", [
        (0, "L"),
        (0.1, "1/10"),
        (0.5, "1/2"),
        (0.25, "1/4"),
        (0.33, "1/3"),
        (0.83, "0.8"),
        (1, "1"),
        (2.5, "2.5"),
    ])
    def test_format(self, bulk, expected):
        assert format_bulk(bulk) == expected


class TestContainers:
    def test_listing_and_moving(self):
        pack = make_backpack()
        rope = EquippedItem(id="rope", name="Rope", bulk=1)
        inventory = [pack, rope]
        assert containers(inventory) == [pack]

        moved = move_item_to_container(inventory, "rope", "pack")
        assert [i.id for i in items_in_container(moved, "pack")] == ["rope"]
        assert rope.container_id is None

        back = move_item_to_container(moved, "rope", None)
        assert items_in_container(back, "pack") == []
