"""
Armor rune catalog: potency, resilient and armor property runes.
"""

from __future__ import annotations

from dataclasses import dataclass

from .weapon_runes import FundamentalRune


@dataclass(frozen=True)
class ArmorPropertyRune:
    id: str
    name: str
    level: int
    price: int
    rarity: str = "common"
    traits: tuple[str, ...] = ("magical",)
    description: str = ""


ARMOR_POTENCY_RUNES: tuple[FundamentalRune, ...] = (
    FundamentalRune(1, 5, 160, "+1 Armor Potency Rune"),
    FundamentalRune(2, 11, 1060, "+2 Armor Potency Rune"),
    FundamentalRune(3, 18, 20560, "+3 Armor Potency Rune"),
    FundamentalRune(4, 20, 70000, "+4 Armor Potency Rune", rarity="rare"),
)

RESILIENT_RUNES: tuple[FundamentalRune, ...] = (
    FundamentalRune(1, 8, 340, "Resilient Rune"),
    FundamentalRune(2, 14, 3440, "Greater Resilient Rune"),
    FundamentalRune(3, 20, 49440, "Major Resilient Rune"),
)

_ILLUSION = ("illusion", "magical")

ARMOR_PROPERTY_RUNES: dict[str, ArmorPropertyRune] = {
    rune.id: rune
    for rune in (
        # Energy resistance
        ArmorPropertyRune("acidResistant", "Acid Resistant", 8, 420, description="Grants resistance to acid damage."),
        ArmorPropertyRune("coldResistant", "Cold Resistant", 8, 420, description="Grants resistance to cold damage."),
        ArmorPropertyRune("electricityResistant", "Electricity Resistant", 8, 420,
                          description="Grants resistance to electricity damage."),
        ArmorPropertyRune("fireResistant", "Fire Resistant", 8, 420, description="Grants resistance to fire damage."),
        ArmorPropertyRune("greaterAcidResistant", "Greater Acid Resistant", 12, 1650,
                          description="Grants greater resistance to acid damage."),
        ArmorPropertyRune("greaterColdResistant", "Greater Cold Resistant", 12, 1650,
                          description="Grants greater resistance to cold damage."),
        ArmorPropertyRune("greaterElectricityResistant", "Greater Electricity Resistant", 12, 1650,
                          description="Grants greater resistance to electricity damage."),
        ArmorPropertyRune("greaterFireResistant", "Greater Fire Resistant", 12, 1650,
                          description="Grants greater resistance to fire damage."),
        # Stealth and mobility
        ArmorPropertyRune("shadow", "Shadow", 5, 55, description="Reduces armor check penalty by 1."),
        ArmorPropertyRune("greaterShadow", "Greater Shadow", 9, 650, description="Reduces armor check penalty by 2."),
        ArmorPropertyRune("majorShadow", "Major Shadow", 17, 14000, description="Reduces armor check penalty by 3."),
        ArmorPropertyRune("slick", "Slick", 5, 45, description="Reduces armor Speed penalty by 5 ft."),
        ArmorPropertyRune("greaterSlick", "Greater Slick", 8, 450, description="Reduces armor Speed penalty by 10 ft."),
        ArmorPropertyRune("majorSlick", "Major Slick", 16, 9000, description="Eliminates armor Speed penalty."),
        ArmorPropertyRune("invisibility", "Invisibility", 8, 500, traits=_ILLUSION,
                          description="Can cast invisibility once per day."),
        ArmorPropertyRune("greaterInvisibility", "Greater Invisibility", 10, 1000, traits=_ILLUSION,
                          description="Can cast invisibility twice per day."),
        ArmorPropertyRune("glamered", "Glamered", 5, 140, traits=_ILLUSION,
                          description="Armor can be disguised as other clothing."),
        # Defensive
        ArmorPropertyRune("fortification", "Fortification", 12, 2000,
                          description="When you critically fail a Reflex save, you get a failure instead."),
        ArmorPropertyRune("greaterFortification", "Greater Fortification", 19, 24000,
                          description="When you critically fail a Reflex save, you get a success instead."),
        ArmorPropertyRune("quenching", "Quenching", 6, 250, description="Grants fire resistance and can cast quench."),
        ArmorPropertyRune("greaterQuenching", "Greater Quenching", 10, 1000, description="Grants greater fire resistance."),
        ArmorPropertyRune("majorQuenching", "Major Quenching", 14, 4500, description="Grants major fire resistance."),
        ArmorPropertyRune("stanching", "Stanching", 5, 130, rarity="uncommon", description="Reduces persistent bleed damage."),
        ArmorPropertyRune("greaterStanching", "Greater Stanching", 9, 600, rarity="uncommon",
                          description="Negates persistent bleed damage."),
        # Utility
        ArmorPropertyRune("energyAdaptive", "Energy Adaptive", 13, 2600,
                          description="Adapt to one energy type as a free action."),
        ArmorPropertyRune("ready", "Ready", 6, 200, description="Don armor quickly."),
        ArmorPropertyRune("greaterReady", "Greater Ready", 11, 1200, description="Don armor instantly."),
        ArmorPropertyRune("winged", "Winged", 13, 2500, description="Can fly for 1 minute per day."),
        ArmorPropertyRune("greaterWinged", "Greater Winged", 19, 35000, description="Can fly for 10 minutes per day."),
        ArmorPropertyRune("gliding", "Gliding", 8, 450, description="Can glide safely to the ground."),
        ArmorPropertyRune("soaring", "Soaring", 14, 3750, description="Can fly once per day."),
    )
}


def max_armor_property_runes(potency: int) -> int:
    return min(potency, 4)


def armor_property_rune_price(rune_id: str) -> int:
    rune = ARMOR_PROPERTY_RUNES.get(rune_id)
    return rune.price if rune else 0


def is_valid_armor_property_rune(rune_id: str, potency: int) -> bool:
    """Armor property runes are limited to level ``potency + 4``."""
    rune = ARMOR_PROPERTY_RUNES.get(rune_id)
    if rune is None:
        return False
    return rune.level <= potency + 4


def available_armor_property_runes(potency: int) -> list[ArmorPropertyRune]:
    return [rune for rune in ARMOR_PROPERTY_RUNES.values() if rune.level <= potency + 4]
