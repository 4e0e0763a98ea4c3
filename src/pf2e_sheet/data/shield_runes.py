"""
Shield rune catalog: reinforcing runes and shield property runes.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReinforcingRune:
    value: int
    level: int
    price: int
    name: str
    hardness_increase: int
    max_hp_increase: int


@dataclass(frozen=True)
class ShieldPropertyRune:
    id: str
    name: str
    level: int
    price: int
    rarity: str = "common"
    traits: tuple[str, ...] = ("magical",)
    description: str = ""


REINFORCING_RUNES: tuple[ReinforcingRune, ...] = (
    ReinforcingRune(1, 4, 75, "Minor Reinforcing Rune", 3, 44),
    ReinforcingRune(2, 7, 300, "Lesser Reinforcing Rune", 3, 52),
    ReinforcingRune(3, 10, 900, "Moderate Reinforcing Rune", 3, 64),
    ReinforcingRune(4, 13, 2500, "Greater Reinforcing Rune", 5, 80),
    ReinforcingRune(5, 16, 8000, "Major Reinforcing Rune", 5, 84),
    ReinforcingRune(6, 19, 32000, "Supreme Reinforcing Rune", 7, 108),
)

SHIELD_PROPERTY_RUNES: dict[str, ShieldPropertyRune] = {
    rune.id: rune
    for rune in (
        ShieldPropertyRune("arrowCatching", "Arrow Catching", 9, 650,
                           description="Can use Shield Block to catch projectiles."),
        ShieldPropertyRune("arrowDeflecting", "Arrow Deflecting", 6, 230,
                           description="Bonus to AC against ranged attacks."),
        ShieldPropertyRune("bashing", "Bashing", 4, 90, description="Shield deals additional damage on shield bash."),
        ShieldPropertyRune("fortification", "Fortification", 12, 2000,
                           description="When you critically fail a Reflex save while using the shield, you get a failure instead."),
        ShieldPropertyRune("animated", "Animated", 15, 9000, description="Shield can float and protect you on its own."),
        ShieldPropertyRune("defending", "Defending", 8, 450, description="Grants a bonus to AC when raised."),
        ShieldPropertyRune("dragonhide", "Dragonhide", 7, 320, rarity="uncommon",
                           description="Grants resistance to a dragon's energy type."),
        ShieldPropertyRune("energyAbsorption", "Energy Absorption", 12, 1800, rarity="uncommon",
                           description="Absorb energy damage when using Shield Block."),
        ShieldPropertyRune("guardian", "Guardian", 5, 160, description="Can protect adjacent allies."),
        ShieldPropertyRune("reflecting", "Reflecting", 10, 950, description="Reflect ranged attacks back at attacker."),
        ShieldPropertyRune("returning", "Returning", 4, 70, description="Returns to your hand after being thrown."),
        ShieldPropertyRune("spellguard", "Spellguard", 13, 2800, rarity="uncommon",
                           description="Grants bonus to saves against spells."),
        ShieldPropertyRune("shieldOther", "Shield Other", 3, 50,
                           description="Can use Shield Block to protect an adjacent ally."),
        ShieldPropertyRune("livingShield", "Living Shield", 11, 1400, rarity="uncommon",
                           traits=("magical", "necromancy"), description="Shield can heal you when blocking."),
        ShieldPropertyRune("invulnerable", "Invulnerable", 16, 8000, rarity="rare",
                           traits=("magical", "abjuration"), description="Grants incredible durability."),
    )
}


def reinforcing_rune(value: int) -> ReinforcingRune | None:
    for rune in REINFORCING_RUNES:
        if rune.value == value:
            return rune
    return None


def shield_stats_with_reinforcing(base_hardness: int, base_max_hp: int, value: int) -> dict[str, int]:
    """Hardness and max HP of a shield carrying reinforcing rune ``value``.

    The rune's increase doubles as the cap on the result. Without a matching
    rune the base stats are returned.
    """
    rune = reinforcing_rune(value)
    if rune is None:
        return {"hardness": base_hardness, "max_hp": base_max_hp}
    return {
        "hardness": min(base_hardness + rune.hardness_increase, rune.hardness_increase),
        "max_hp": min(base_max_hp + rune.max_hp_increase, rune.max_hp_increase),
    }


def shield_property_rune_price(rune_id: str) -> int:
    rune = SHIELD_PROPERTY_RUNES.get(rune_id)
    return rune.price if rune else 0


def available_shield_property_runes(max_level: int) -> list[ShieldPropertyRune]:
    return [rune for rune in SHIELD_PROPERTY_RUNES.values() if rune.level <= max_level]


def max_shield_property_runes() -> int:
    """A shield takes a single property rune."""
    return 1
