"""
Weapon material catalog: precious metals, special and alchemical materials.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Rarity = Literal["common", "uncommon", "rare"]


@dataclass(frozen=True)
class MaterialEffects:
    damage_bonus: int = 0
    strike_bonus: int = 0
    bulk_reduction: int = 0
    special: str | None = None


@dataclass(frozen=True)
class Material:
    id: str
    name: str
    level: int
    price: int
    rarity: Rarity = "common"
    traits: tuple[str, ...] = ()
    description: str = ""
    effects: MaterialEffects = field(default_factory=MaterialEffects)
    weapon_only: bool = False


BASIC_MATERIAL = Material("none", "Standard (Steel/Iron)", 0, 0,
                          description="Standard weapons are made of steel or iron.")

PRECIOUS_METALS: dict[str, Material] = {
    m.id: m
    for m in (
        Material("silver", "Silver", 2, 20, traits=("precious",),
                 description="Silver weapons are valuable but soft. They deal additional damage to creatures with weakness to silver.",
                 effects=MaterialEffects(special="Effective against creatures with weakness to silver (lycanthropes, devils, etc.)")),
        Material("gold", "Gold", 4, 50, rarity="uncommon", traits=("precious", "soft"),
                 description="Gold weapons are ceremonial and valuable. They are extremely soft and deal damage as if one grade lower.",
                 effects=MaterialEffects(special="Damage die reduced by one step (d8 to d6, d6 to d4, etc.)")),
        Material("platinum", "Platinum", 8, 150, rarity="uncommon", traits=("precious",),
                 description="Platinum weapons are extremely valuable but soft. They are mostly ceremonial."),
    )
}

SPECIAL_MATERIALS: dict[str, Material] = {
    m.id: m
    for m in (
        Material("coldIron", "Cold Iron", 2, 20,
                 description="Cold iron is effective against fey and demons. It bypasses their damage reduction.",
                 effects=MaterialEffects(special="Ignores damage reduction of fey and demons")),
        Material("adamantine", "Adamantine", 5, 90,
                 description="Adamantine is incredibly durable. Weapons ignore object hardness and have +1 weapon potency rune effect.",
                 effects=MaterialEffects(strike_bonus=1, special="Ignores object hardness when damaging objects")),
        Material("mithral", "Mithral", 3, 45,
                 description="Mithral is lightweight and durable. Weapons have -1 bulk.",
                 effects=MaterialEffects(bulk_reduction=1)),
        Material("orichalcum", "Orichalcum", 15, 3500, rarity="rare", traits=("magical",),
                 description="Orichalcum is a legendary metal with powerful magical properties. It grants a +2 potency rune effect.",
                 effects=MaterialEffects(strike_bonus=2, special="Counts as magical for overcoming resistance")),
        Material("darkwood", "Darkwood", 3, 40, rarity="uncommon",
                 description="Darkwood is lightweight and sturdy. Ranged weapons made of darkwood have -1 bulk.",
                 effects=MaterialEffects(bulk_reduction=1), weapon_only=True),
        Material("dragonscale", "Dragon Scale", 9, 650, rarity="rare",
                 description="Weapons made from dragon scales. They have resistance to the dragon's energy type.",
                 effects=MaterialEffects(special="Grants energy resistance to weapon wielder (varies by dragon type)")),
    )
}

_ALCH = ("alchemical",)

ALCHEMICAL_MATERIALS: dict[str, Material] = {
    m.id: m
    for m in (
        Material("aboundedum", "Abundanum", 9, 120, rarity="uncommon", traits=_ALCH,
                 description="Abundanum is a pale metal that promotes healing. Critical hits heal the wielder.",
                 effects=MaterialEffects(special="On critical hit, heal 1d6 HP (+1 per 2 weapon levels above 9)")),
        Material("abysium", "Abysium", 6, 70, rarity="uncommon", traits=_ALCH,
                 description="Abysium is radioactive and causes sickness. On hit, targets must Fort save or become sickened.",
                 effects=MaterialEffects(special="On hit, DC 20 Fort save or become sickened 1")),
        Material("baarrhal", "Baarrhal", 8, 110, rarity="uncommon", traits=_ALCH,
                 description="Baarrhal is hot to the touch and deals fire damage. Deals 1d6 persistent fire damage on critical hit.",
                 effects=MaterialEffects(special="+1d6 fire damage, on crit: 1d6 persistent fire")),
        Material("djezet", "Djezet", 7, 90, rarity="uncommon", traits=_ALCH,
                 description="Djezet enhances speed. Gives a +1 item bonus to attack rolls.",
                 effects=MaterialEffects(strike_bonus=1)),
        Material("inubrix", "Inubrix", 6, 75, rarity="uncommon", traits=_ALCH,
                 description="Inubrix is ghostly and can strike incorporeal creatures without penalty.",
                 effects=MaterialEffects(special="No penalty against incorporeal creatures (like ghost touch)")),
        Material("katapesh", "Katapesh", 5, 65, rarity="uncommon", traits=_ALCH,
                 description="Katapesh is a soporific metal. Critical hits cause targets to become fatigued.",
                 effects=MaterialEffects(special="On crit: DC 20 Fort save or become fatigued")),
        Material("noqual", "Noqual", 9, 120, rarity="uncommon", traits=_ALCH,
                 description="Noqual interferes with magic. On hit, creatures cannot cast spells or use abilities for 1 round.",
                 effects=MaterialEffects(special="On hit: disrupt spellcasting (DC 20 Will negates)")),
        Material("orcblood", "Orcblood", 4, 50, rarity="uncommon", traits=_ALCH,
                 description="Orcblood steel is red and exceptionally hard. Deals additional damage on critical hits.",
                 effects=MaterialEffects(damage_bonus=1)),
        Material("siccatiteHot", "Siccatite (Hot)", 7, 100, rarity="uncommon", traits=_ALCH,
                 description="Hot siccatite deals fire damage and makes metal red-hot.",
                 effects=MaterialEffects(special="+1d6 fire damage, heats metal objects")),
        Material("siccatiteCold", "Siccatite (Cold)", 7, 100, rarity="uncommon", traits=_ALCH,
                 description="Cold siccatite deals cold damage and freezes metal.",
                 effects=MaterialEffects(special="+1d6 cold damage, freezes metal objects")),
        Material("skymetal", "Skymetal", 11, 450, rarity="rare", traits=("alchemical", "magical"),
                 description="Skymetal from the Starstone falls grants incredible properties. Weapons have +2 potency rune effect and strike as magical.",
                 effects=MaterialEffects(strike_bonus=2, special="Counts as magical, light enough to float")),
    )
}

ALL_MATERIALS: dict[str, Material] = {
    "none": BASIC_MATERIAL,
    **PRECIOUS_METALS,
    **SPECIAL_MATERIALS,
    **ALCHEMICAL_MATERIALS,
}


def get_material(material_id: str) -> Material | None:
    return ALL_MATERIALS.get(material_id)


def materials_by_rarity(rarity: Rarity) -> list[Material]:
    return [m for m in ALL_MATERIALS.values() if m.rarity == rarity]


def all_materials() -> list[Material]:
    """Every material, lowest level first."""
    return sorted(ALL_MATERIALS.values(), key=lambda m: m.level)


def materials_for_item_level(item_level: int) -> list[Material]:
    return [m for m in ALL_MATERIALS.values() if m.level <= item_level]
