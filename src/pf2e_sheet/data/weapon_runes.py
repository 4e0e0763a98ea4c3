"""
Weapon rune catalog: fundamental runes (potency, striking) and property runes.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RuneDamage:
    type: str
    dice: str
    persistent: bool = False


@dataclass(frozen=True)
class FundamentalRune:
    value: int | str
    level: int
    price: int
    name: str
    dice_bonus: int = 0
    rarity: str = "common"


@dataclass(frozen=True)
class PropertyRune:
    id: str
    name: str
    level: int
    price: int
    rarity: str = "common"
    traits: tuple[str, ...] = ()
    damage: RuneDamage | None = None
    description: str = ""


POTENCY_RUNES: tuple[FundamentalRune, ...] = (
    FundamentalRune(1, 2, 35, "+1 Potency Rune"),
    FundamentalRune(2, 10, 935, "+2 Potency Rune"),
    FundamentalRune(3, 16, 8935, "+3 Potency Rune"),
)

STRIKING_RUNES: tuple[FundamentalRune, ...] = (
    FundamentalRune("striking", 4, 65, "Striking Rune", dice_bonus=1),
    FundamentalRune("greaterStriking", 12, 1065, "Greater Striking Rune", dice_bonus=2),
    FundamentalRune("majorStriking", 19, 31065, "Major Striking Rune", dice_bonus=3),
)

PROPERTY_RUNES: dict[str, PropertyRune] = {
    rune.id: rune
    for rune in (
        PropertyRune("frost", "Frost", 8, 500, traits=("cold", "magical"),
                     damage=RuneDamage("cold", "1d6"),
                     description="The weapon deals an additional 1d6 cold damage on a successful hit."),
        PropertyRune("flaming", "Flaming", 8, 500, traits=("fire", "magical"),
                     damage=RuneDamage("fire", "1d6", persistent=True),
                     description="The weapon deals an additional 1d6 fire damage and 1d10 persistent fire damage on a critical hit."),
        PropertyRune("shock", "Shock", 8, 500, traits=("electricity", "magical"),
                     damage=RuneDamage("electricity", "1d6"),
                     description="The weapon deals an additional 1d6 electricity damage on a successful hit."),
        PropertyRune("corrosive", "Corrosive", 8, 500, traits=("acid", "magical"),
                     damage=RuneDamage("acid", "1d6"),
                     description="The weapon deals an additional 1d6 acid damage on a successful hit."),
        PropertyRune("ghostTouch", "Ghost Touch", 4, 75, traits=("magical",),
                     description="The weapon can damage incorporeal creatures with no attack roll penalty."),
        PropertyRune("keen", "Keen", 13, 3000, rarity="uncommon", traits=("magical",),
                     description="On a 19, the attack counts as a critical hit (20 is still a critical hit)."),
        PropertyRune("returning", "Returning", 3, 55, traits=("magical",),
                     description="The weapon returns to your hand after making a thrown attack."),
        PropertyRune("wounding", "Wounding", 7, 340, traits=("magical",),
                     damage=RuneDamage("bleed", "1d6", persistent=True),
                     description="The weapon deals an additional 1d6 persistent bleed damage."),
        PropertyRune("holy", "Holy", 11, 1400, traits=("holy", "magical"),
                     damage=RuneDamage("spirit", "1d4"),
                     description="The weapon deals additional spirit damage to unholy targets."),
        PropertyRune("unholy", "Unholy", 11, 1400, traits=("unholy", "magical"),
                     damage=RuneDamage("spirit", "1d4"),
                     description="The weapon deals additional spirit damage to holy targets."),
        PropertyRune("disrupting", "Disrupting", 5, 150, traits=("magical",),
                     damage=RuneDamage("vitality", "1d6", persistent=True),
                     description="The weapon deals additional vitality damage to negative healing creatures."),
        PropertyRune("vorpal", "Vorpal", 17, 15000, rarity="rare", traits=("magical",),
                     description="On a critical hit, the weapon decapitates the target if it has a head."),
        PropertyRune("dancing", "Dancing", 13, 2700, rarity="uncommon", traits=("magical",),
                     description="The weapon can fight on its own for a limited time."),
        PropertyRune("thundering", "Thundering", 8, 500, traits=("magical", "sonic"),
                     damage=RuneDamage("sonic", "1d6"),
                     description="The weapon deals an additional 1d6 sonic damage."),
        PropertyRune("anchoring", "Anchoring", 10, 900, rarity="uncommon", traits=("magical",),
                     description="On a critical hit, the weapon prevents the target from moving away."),
        PropertyRune("transformative", "Transformative", 6, 250, traits=("magical",),
                     description="The weapon can transform into another weapon of the same group."),
        PropertyRune("speed", "Speed", 16, 10000, rarity="rare", traits=("magical",),
                     description="You can make an extra attack with this weapon each round."),
    )
}


def max_property_runes(potency: int) -> int:
    """A weapon holds one property rune per point of potency, at most 4."""
    return min(potency, 4)


def property_rune_price(rune_id: str) -> int:
    rune = PROPERTY_RUNES.get(rune_id)
    return rune.price if rune else 0


def is_valid_property_rune(rune_id: str, potency: int) -> bool:
    """Property runes are limited to level ``potency + 3``."""
    rune = PROPERTY_RUNES.get(rune_id)
    if rune is None:
        return False
    return rune.level <= potency + 3


def available_property_runes(potency: int) -> list[PropertyRune]:
    return [rune for rune in PROPERTY_RUNES.values() if rune.level <= potency + 3]


def striking_rune(value: str | None) -> FundamentalRune | None:
    for rune in STRIKING_RUNES:
        if rune.value == value:
            return rune
    return None
