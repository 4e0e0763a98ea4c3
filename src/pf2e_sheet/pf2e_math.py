"""
PF2e core math: proficiency, Automatic Bonus Progression, AC, HP, strikes,
spell DCs and saving throws.
"""

from __future__ import annotations

import logging
import re
from enum import IntEnum
from typing import Literal

from .catalog.manager import GameDataCatalog
from .catalog.models import WeaponDefinition
from .formulas import FormulaError, evaluate
from .models import (
    ABILITY_NAMES,
    Character,
    EquippedItem,
    HitPoints,
    Proficiency,
    WeaponRunes,
)

logger = logging.getLogger("pf2e-sheet")

SaveName = Literal["fortitude", "reflex", "will"]

SAVE_ABILITIES: dict[str, str] = {
    "fortitude": "con",
    "reflex": "dex",
    "will": "wis",
}

TRADITION_ABILITIES: dict[str, str] = {
    "arcane": "cha",
    "occult": "cha",
    "divine": "wis",
    "primal": "wis",
}

STRIKING_DICE = {
    "striking": 1,
    "greaterStriking": 2,
    "majorStriking": 3,
}

# Automatic Bonus Progression (GM Core), indexed by level - 1
ABP_POTENCY = (0, 0, 0, 1, 1, 1, 1, 2, 2, 2, 2, 3, 3, 3, 3, 4, 4, 4, 4, 5)
ABP_STRIKING = (0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 2, 2, 2, 2, 2, 3, 3, 3, 3)
ABP_RESILIENT = (0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 2, 2, 2, 2, 3, 3, 3, 3, 4)


class ProficiencyRank(IntEnum):
    UNTRAINED = 0
    TRAINED = 2
    EXPERT = 4
    MASTER = 6
    LEGENDARY = 8

    @classmethod
    def of(cls, proficiency: Proficiency) -> ProficiencyRank:
        return cls(proficiency.rank_value)


def ability_modifier(score: int) -> int:
    return (score - 10) // 2


def apply_ability_boost(score: int) -> int:
    """A boost adds 2, or 1 once the score is 18 or higher."""
    if score < 18:
        return score + 2
    return score + 1


def proficiency_bonus(level: int, rank: ProficiencyRank | int, without_level: bool = False) -> int:
    """Proficiency bonus for ``rank`` at ``level``.

    Args:
        level: Character level.
        rank: Rank value (0/2/4/6/8).
        without_level: Proficiency Without Level variant, which drops the level.

    Returns:
        0 when untrained, otherwise ``level + rank`` (or ``rank`` alone).
    """
    if rank == ProficiencyRank.UNTRAINED:
        return 0
    if without_level:
        return int(rank)
    return level + int(rank)


def character_proficiency_bonus(character: Character, proficiency: Proficiency) -> int:
    """Proficiency bonus using the character's level and variant rules."""
    return proficiency_bonus(
        character.level,
        ProficiencyRank.of(proficiency),
        character.variant_rules.proficiency_without_level,
    )


def abp_bonuses(level: int) -> dict[str, int]:
    """Potency, striking and resilient values granted by ABP at ``level``."""
    if not 1 <= level <= 20:
        return {"potency": 0, "striking": 0, "resilient": 0}
    return {
        "potency": ABP_POTENCY[level - 1],
        "striking": ABP_STRIKING[level - 1],
        "resilient": ABP_RESILIENT[level - 1],
    }


# ------------------------------------------------------------------
# Defenses
# ------------------------------------------------------------------


def armor_class(character: Character) -> int:
    """AC = 10 + Dex (capped) + armor bonus + proficiency + item bonus.

    Older sheets stored the armor's own bonus in ``item_bonus``. When
    ``ac_bonus`` is unset and ``item_bonus`` is within the armor range
    (1-6) it is read as the armor bonus instead, and not counted twice.
    """
    ac = character.armor_class
    dex_mod = character.ability_scores.modifier("dex")
    dex_cap = ac.dex_cap if ac.dex_cap is not None else 99
    effective_dex = min(dex_mod, dex_cap)

    armor_bonus = ac.ac_bonus
    legacy_item_bonus = False
    if armor_bonus == 0 and 0 < ac.item_bonus <= 6:
        armor_bonus = ac.item_bonus
        legacy_item_bonus = True

    prof = character_proficiency_bonus(character, ac.proficiency)

    if character.variant_rules.automatic_bonus_progression:
        abp = abp_bonuses(character.level)
        item_bonus = abp["potency"] + abp["resilient"]
    else:
        item_bonus = 0 if legacy_item_bonus else ac.item_bonus

    return ac.base + effective_dex + armor_bonus + prof + item_bonus


def saving_throw(character: Character, save: SaveName) -> int:
    """Save modifier: proficiency bonus plus the save's key ability modifier."""
    rank = getattr(character.saves, save)
    return character_proficiency_bonus(character, rank) + character.ability_scores.modifier(
        SAVE_ABILITIES[save]
    )


def max_hp_at_first_level(character: Character, catalog: GameDataCatalog) -> int:
    """Ancestry HP + class HP + Con modifier. Dual class takes the larger class HP."""
    ancestry = catalog.get_ancestry(character.ancestry_id)
    class_def = catalog.get_class(character.class_id)

    ancestry_hp = ancestry.hit_points if ancestry else 0
    class_hp = class_def.hit_points if class_def else 0

    if character.secondary_class_id:
        secondary = catalog.get_class(character.secondary_class_id)
        class_hp = max(class_hp, secondary.hit_points if secondary else 0)

    return ancestry_hp + class_hp + character.ability_scores.modifier("con")


def ensure_valid_hp(character: Character, catalog: GameDataCatalog) -> Character:
    """Fill in HP for sheets with no max HP, or current HP above max."""
    hp = character.hit_points
    if hp.max != 0 and hp.current <= hp.max:
        return character

    max_hp = max_hp_at_first_level(character, catalog)
    current = max_hp if hp.current == 0 or hp.current > hp.max else hp.current
    return character.model_copy(
        update={"hit_points": HitPoints(max=max_hp, current=current, temporary=hp.temporary or 0)}
    )


# ------------------------------------------------------------------
# Strikes
# ------------------------------------------------------------------


def weapon_proficiency_rank(character: Character, category: str) -> ProficiencyRank:
    """Rank for a weapon category. An ``all`` entry matches every category."""
    for entry in character.weapon_proficiencies:
        if entry.category == category or entry.category == "all":
            return ProficiencyRank.of(entry.proficiency)
    return ProficiencyRank.UNTRAINED


def _weapon_runes(equipped: EquippedItem | None) -> WeaponRunes:
    if equipped is not None and isinstance(equipped.runes, WeaponRunes):
        return equipped.runes
    return WeaponRunes()


def weapon_attack(
    character: Character,
    weapon: WeaponDefinition,
    equipped: EquippedItem | None = None,
) -> tuple[int, int, int]:
    """Attack modifiers for the first, second and third Strike.

    The multiple attack penalty is 0/-4/-8 for agile weapons and 0/-5/-10
    otherwise.
    """
    scores = character.ability_scores
    str_mod = scores.modifier("str")
    dex_mod = scores.modifier("dex")
    custom = equipped.customization if equipped else None

    override = custom.attack_ability_override if custom else None
    if override and override != "auto":
        ability_mod = scores.modifier(override)
    elif weapon.is_ranged and not weapon.has_trait("thrown"):
        ability_mod = dex_mod
    elif weapon.has_trait("finesse"):
        ability_mod = max(str_mod, dex_mod)
    else:
        ability_mod = str_mod

    prof = proficiency_bonus(
        character.level,
        weapon_proficiency_rank(character, weapon.category),
        character.variant_rules.proficiency_without_level,
    )

    if character.variant_rules.automatic_bonus_progression:
        item_bonus = abp_bonuses(character.level)["potency"]
    else:
        item_bonus = _weapon_runes(equipped).potency_rune

    base = ability_mod + prof + item_bonus + (custom.bonus_attack if custom else 0)
    if weapon.has_trait("agile"):
        return base, base - 4, base - 8
    return base, base - 5, base - 10


def weapon_damage(
    character: Character,
    weapon: WeaponDefinition,
    two_handed: bool = False,
    equipped: EquippedItem | None = None,
) -> str:
    """Damage expression such as ``"2d8 + 4"``, ``"1d6 - 1"`` or ``"1d4"``."""
    match = re.match(r"^(\d+)d(\d+)$", weapon.damage)
    if not match:
        return weapon.damage

    dice = int(match.group(1))
    die_size = int(match.group(2))

    if two_handed:
        for trait in weapon.traits:
            two_hand = re.match(r"two-hand-d(\d+)", trait.lower())
            if two_hand:
                die_size = int(two_hand.group(1))
                break

    if character.variant_rules.automatic_bonus_progression:
        dice += abp_bonuses(character.level)["striking"]
    else:
        dice += STRIKING_DICE.get(_weapon_runes(equipped).striking_rune or "", 0)

    str_mod = character.ability_scores.modifier("str")
    if weapon.is_ranged and not weapon.has_trait("thrown"):
        modifier = str_mod // 2 if weapon.has_trait("propulsive") else 0
    else:
        modifier = str_mod

    if equipped and equipped.customization:
        modifier += equipped.customization.bonus_damage

    damage_dice = f"{dice}d{die_size}"
    if modifier > 0:
        return f"{damage_dice} + {modifier}"
    if modifier < 0:
        return f"{damage_dice} - {abs(modifier)}"
    return damage_dice


# ------------------------------------------------------------------
# Spellcasting
# ------------------------------------------------------------------


def spell_dc(
    character: Character,
    tradition: str,
    catalog: GameDataCatalog | None = None,
) -> dict[str, int]:
    """Spell attack modifier and spell DC for ``tradition``.

    Casters are trained, expert at 7, master at 15 and legendary at 19.
    Wizards are expert from level 1; clerics reach master at 17.
    """
    ability = TRADITION_ABILITIES.get(tradition, "int")
    ability_mod = character.ability_scores.modifier(ability)

    rank = ProficiencyRank.TRAINED
    if character.level >= 7:
        rank = ProficiencyRank.EXPERT
    if character.level >= 15:
        rank = ProficiencyRank.MASTER
    if character.level >= 19:
        rank = ProficiencyRank.LEGENDARY

    class_key = (character.class_id or "").lower()
    if catalog is not None:
        class_key = (catalog.class_name(character.class_id) or class_key).lower()
    if class_key == "wizard":
        rank = ProficiencyRank.EXPERT
    if class_key == "cleric" and character.level >= 17:
        rank = ProficiencyRank.MASTER

    prof = proficiency_bonus(character.level, rank, character.variant_rules.proficiency_without_level)
    attack = ability_mod + prof
    return {"attack": attack, "dc": 10 + attack}


# ------------------------------------------------------------------
# Foundry text helpers
# ------------------------------------------------------------------

_DAMAGE_TAG_RE = re.compile(r"@Damage\[((?:[^\[\]]|\[[^\]]*\])+)\]")


def _split_top_level(text: str) -> list[str]:
    parts: list[str] = []
    current = ""
    depth = 0
    for char in text:
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        elif char == "," and depth == 0:
            if current.strip():
                parts.append(current.strip())
            current = ""
            continue
        current += char
    if current.strip():
        parts.append(current.strip())
    return parts


def extract_damage_from_description(description: str) -> list[str] | None:
    """Damage formulas found in ``@Damage[...]`` tags, or None.

    ``@Damage[2d4[slashing],2d4[piercing]|options:area-damage]`` yields
    ``["2d4"]``: options are dropped, damage types stripped and duplicates
    removed.
    """
    formulas: list[str] = []
    for match in _DAMAGE_TAG_RE.finditer(description):
        without_options = match.group(1).split("|")[0]
        for part in _split_top_level(without_options):
            cleaned = re.sub(r"\[.*$", "", part).strip()
            if cleaned and cleaned not in formulas:
                formulas.append(cleaned)
    return formulas or None


_INNER_GROUP_RE = re.compile(r"(?:\b(floor|ceil|max|min)\s*)?\(([^()]*)\)")
_ARITHMETIC_RE = re.compile(r"^[\d\s+\-*/,.]+$")


def simplify_formula(formula: str, character: Character) -> str:
    """Resolve actor references and arithmetic in a dice formula.

    ``(floor((@actor.level -1)/2)+1)d4`` becomes ``3d4`` at level 5. Dice
    terms are left in place; only groups made purely of numbers are folded.
    """
    result = re.sub(r"@actor\.level", str(character.level), formula, flags=re.IGNORECASE)

    def ability(match: re.Match) -> str:
        name = match.group(1).lower()
        if name not in ABILITY_NAMES:
            return match.group(0)
        return str(character.ability_scores.modifier(name))

    result = re.sub(r"@actor\.abilities\.(\w+)\.mod", ability, result, flags=re.IGNORECASE)

    def fold(match: re.Match) -> str:
        func, inner = match.group(1), match.group(2)
        if not _ARITHMETIC_RE.match(inner):
            return match.group(0)
        expression = f"{func}({inner})" if func else f"({inner})"
        try:
            value = evaluate(expression, character)
        except FormulaError:
            return match.group(0)
        return str(int(value)) if float(value).is_integer() else str(value)

    while True:
        folded = _INNER_GROUP_RE.sub(fold, result)
        if folded == result:
            break
        result = folded

    return re.sub(r"\s+", " ", result).strip()
