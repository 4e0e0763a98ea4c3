"""
Bulk and encumbrance.

Items may sit inside containers that reduce the Bulk of each item they
hold and cap how much they can hold. Coin stacks store their coin count in
``bulk`` and weigh 1 Bulk per 1000 coins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from .models import Character, EquippedItem

EncumbranceLevel = Literal["normal", "encumbered", "overburdened"]

NEGLIGIBLE_BULK = 0.1
DEFAULT_CAPACITY = 999

_FRACTIONS = {
    0.1: "1/10",
    0.2: "1/5",
    0.25: "1/4",
    0.3: "1/3",
    0.4: "2/5",
    0.5: "1/2",
    0.6: "3/5",
    0.7: "7/10",
    0.75: "3/4",
}


@dataclass
class ContainerBulk:
    container: EquippedItem | None  # None for loose items
    items: list[EquippedItem] = field(default_factory=list)
    bulk: float = 0


@dataclass
class BulkCalculation:
    total_bulk: float
    max_bulk: int
    encumbrance: EncumbranceLevel
    containers: list[ContainerBulk] = field(default_factory=list)


def max_bulk(strength_score: int) -> int:
    """Bulk carried before becoming encumbered: Str modifier + 5."""
    return (strength_score - 10) // 2 + 5


def is_coin_item(item: EquippedItem) -> bool:
    name = item.name.lower()
    return "coin" in name or "moneta" in name


def item_bulk(item: EquippedItem) -> float:
    """Effective Bulk of one inventory entry."""
    if is_coin_item(item):
        return (item.bulk or 0) / 1000
    bulk = item.bulk or 0
    if item.customization and item.customization.bulk_override is not None:
        bulk = item.customization.bulk_override
    return 0 if bulk < NEGLIGIBLE_BULK else bulk


def _contained_bulk(container: EquippedItem, items: list[EquippedItem]) -> float:
    reduction = container.bulk_reduction or 0
    return sum(max(0.0, item_bulk(item) - reduction) for item in items)


def calculate_bulk(character: Character, inventory: list[EquippedItem] | None = None) -> BulkCalculation:
    """Total Bulk carried and the resulting encumbrance.

    Args:
        character: Supplies Strength.
        inventory: Items to weigh; defaults to ``character.equipment``.

    Returns:
        The total, the limit, the encumbrance level, and a per-container
        breakdown with loose items first.
    """
    if inventory is None:
        inventory = character.equipment
    limit = max_bulk(character.ability_scores.str)

    containers = {item.id: item for item in inventory if item.is_container}
    loose: list[EquippedItem] = []
    contents: dict[str, list[EquippedItem]] = {container_id: [] for container_id in containers}

    for item in inventory:
        if item.is_container:
            continue
        if item.container_id and item.container_id in contents:
            contents[item.container_id].append(item)
        else:
            loose.append(item)

    loose_bulk = sum(item_bulk(item) for item in loose)
    groups = [ContainerBulk(container=None, items=loose, bulk=loose_bulk)]
    total = loose_bulk

    for container_id, container in containers.items():
        items = contents[container_id]
        capacity = container.capacity or DEFAULT_CAPACITY
        bulk = item_bulk(container) + min(_contained_bulk(container, items), capacity)
        groups.append(ContainerBulk(container=container, items=items, bulk=bulk))
        total += bulk

    if total > limit + 1:
        encumbrance: EncumbranceLevel = "overburdened"
    elif total > limit:
        encumbrance = "encumbered"
    else:
        encumbrance = "normal"

    return BulkCalculation(total_bulk=total, max_bulk=limit, encumbrance=encumbrance, containers=groups)


def can_add_item(
    character: Character,
    inventory: list[EquippedItem],
    item: EquippedItem,
    target_container_id: str | None = None,
) -> dict[str, float | bool]:
    """Whether ``item`` fits, and the Bulk before and after adding it.

    An item fits when the target container has room for it and the new
    total stays at most one over the limit.
    """
    current = calculate_bulk(character, inventory)
    added = item_bulk(item)
    result = {
        "can_add": True,
        "current_bulk": current.total_bulk,
        "new_bulk": current.total_bulk + added,
        "max_bulk": current.max_bulk,
    }

    if target_container_id:
        container = next((i for i in inventory if i.id == target_container_id), None)
        if container is not None and container.capacity:
            held = _contained_bulk(container, items_in_container(inventory, target_container_id))
            if held + added > container.capacity:
                result.update(can_add=False, new_bulk=current.total_bulk)
                return result

    result["can_add"] = result["new_bulk"] <= current.max_bulk + 1
    return result


def format_bulk(bulk: float) -> str:
    """``"L"`` for light items, a fraction below 1, otherwise the number."""
    if bulk == 0:
        return "L"
    if bulk < 1:
        for rounded in (round(bulk, 2), round(bulk, 1)):
            if rounded in _FRACTIONS:
                return _FRACTIONS[rounded]
        return f"{round(bulk, 1):g}"
    return f"{bulk:g}"


def containers(inventory: list[EquippedItem]) -> list[EquippedItem]:
    return [item for item in inventory if item.is_container]


def items_in_container(inventory: list[EquippedItem], container_id: str) -> list[EquippedItem]:
    return [item for item in inventory if item.container_id == container_id]


def move_item_to_container(
    inventory: list[EquippedItem],
    item_id: str,
    container_id: str | None,
) -> list[EquippedItem]:
    """Return a new inventory with ``item_id`` moved (None takes it out)."""
    return [
        item.model_copy(update={"container_id": container_id or None}) if item.id == item_id else item
        for item in inventory
    ]
