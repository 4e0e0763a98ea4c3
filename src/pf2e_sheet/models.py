"""
Data models for the PF2e character sheet.
"""

from __future__ import annotations

import builtins
import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from shortuuid import random

logger = logging.getLogger("pf2e-sheet")


AbilityName = Literal["str", "dex", "con", "int", "wis", "cha"]
ABILITY_NAMES: tuple[str, ...] = ("str", "dex", "con", "int", "wis", "cha")

Tradition = Literal["arcane", "divine", "occult", "primal"]
BonusType = Literal["status", "circumstance", "item", "penalty"]
FeatSource = Literal["ancestry", "class", "general", "skill", "bonus"]
SlotType = Literal["ancestry", "class", "general", "skill", "archetype", "impulse"]

# Old Foundry id -> current Foundry id
CLASS_ID_MIGRATION_MAP = {
    "IiG7DgeLWYrSNXuX": "RggQN3bX5SEcsffR",  # Kineticist
}


class Proficiency(str, Enum):
    """Proficiency rank, ordered untrained < trained < expert < master < legendary."""
    UNTRAINED = "untrained"
    TRAINED = "trained"
    EXPERT = "expert"
    MASTER = "master"
    LEGENDARY = "legendary"

    @property
    def rank_index(self) -> int:
        """Position in the rank ladder, 0 (untrained) to 4 (legendary)."""
        return _PROFICIENCY_ORDER.index(self)

    @property
    def rank_value(self) -> int:
        """Numeric rank bonus: 0, 2, 4, 6 or 8."""
        return self.rank_index * 2

    @classmethod
    def from_index(cls, index: int) -> Proficiency:
        """Return the rank at ``index``, clamped to the 0-4 range."""
        return _PROFICIENCY_ORDER[max(0, min(4, int(index)))]

    @classmethod
    def from_rank_value(cls, value: int) -> Proficiency:
        """Map 0/2/4/6/8 back to a rank. Unknown values are untrained."""
        return _RANK_VALUES.get(value, cls.UNTRAINED)

    def step_up(self) -> Proficiency:
        """The next rank, capped at legendary."""
        return Proficiency.from_index(self.rank_index + 1)

    def __lt__(self, other: object) -> bool:
        if isinstance(other, Proficiency):
            return self.rank_index < other.rank_index
        return NotImplemented


_PROFICIENCY_ORDER = list(Proficiency)
_RANK_VALUES = {p.rank_value: p for p in _PROFICIENCY_ORDER}


def max_proficiency(a: Proficiency, b: Proficiency) -> Proficiency:
    """Return the higher of two ranks."""
    return a if a.rank_index >= b.rank_index else b


def _coerce_rank(value: Any) -> Any:
    """Accept Foundry's numeric ranks (0-4) wherever a Proficiency is stored."""
    if isinstance(value, int) and not isinstance(value, bool):
        return Proficiency.from_index(value)
    return value


# ---------------------------------------------------------------------------
# Abilities, skills, defenses
# ---------------------------------------------------------------------------


class AbilityScores(BaseModel):
    """The six ability scores."""
    str: builtins.int = 10
    dex: builtins.int = 10
    con: builtins.int = 10
    int: builtins.int = 10
    wis: builtins.int = 10
    cha: builtins.int = 10

    def modifier(self, ability: AbilityName) -> builtins.int:
        """Ability modifier for ``ability``."""
        return (getattr(self, ability) - 10) // 2


class AbilityBoosts(BaseModel):
    """User-selected ability boosts, grouped by where they came from."""
    model_config = ConfigDict(populate_by_name=True)

    ancestry: list[AbilityName] = Field(default_factory=list)
    background: list[AbilityName] = Field(default_factory=list)
    class_boost: AbilityName | None = Field(default="str", alias="class")
    free: list[AbilityName] = Field(default_factory=list)
    level_up: dict[int, list[AbilityName]] = Field(default_factory=dict)


class SkillProficiency(BaseModel):
    """A single skill with its key ability and rank."""
    name: str
    ability: AbilityName = "int"
    proficiency: Proficiency = Proficiency.UNTRAINED

    @field_validator("proficiency", mode="before")
    @classmethod
    def _foundry_rank(cls, value: Any) -> Any:
        return _coerce_rank(value)


class Saves(BaseModel):
    fortitude: Proficiency = Proficiency.UNTRAINED
    reflex: Proficiency = Proficiency.UNTRAINED
    will: Proficiency = Proficiency.UNTRAINED


class HitPoints(BaseModel):
    current: int = 0
    max: int = 0
    temporary: int = 0


class ArmorClass(BaseModel):
    """Armor class inputs.

    Attributes:
        base: Base value, normally 10.
        proficiency: Rank with the worn armor category.
        item_bonus: Potency bonus from armor runes.
        ac_bonus: Armor bonus of the equipped armor itself.
        dex_cap: Maximum dexterity modifier allowed by the armor.
    """
    base: int = 10
    proficiency: Proficiency = Proficiency.UNTRAINED
    item_bonus: int = 0
    ac_bonus: int = 0
    dex_cap: int | None = None


class Speed(BaseModel):
    land: int = 25
    swim: int | None = None
    climb: int | None = None
    fly: int | None = None
    burrow: int | None = None


class CategoryProficiency(BaseModel):
    """Proficiency in a weapon or armor category (``simple``, ``light``...).

    ``granted_by`` names the feat that added the entry and ``base_proficiency``
    holds the rank a feat raised it from, so feat grants can be undone.
    """
    category: str
    proficiency: Proficiency = Proficiency.UNTRAINED
    granted_by: str | None = None
    base_proficiency: Proficiency | None = None

    @field_validator("proficiency", mode="before")
    @classmethod
    def _foundry_rank(cls, value: Any) -> Any:
        return _coerce_rank(value)


class ClassDC(BaseModel):
    """A class DC, either from the character's class or from an archetype."""
    class_type: str
    proficiency: Proficiency = Proficiency.TRAINED
    ability: AbilityName = "cha"
    dedicated: bool = False
    granted_by: str | None = None
    base_proficiency: Proficiency | None = None


# ---------------------------------------------------------------------------
# Feats and buffs
# ---------------------------------------------------------------------------


class CharacterFeat(BaseModel):
    """A feat the character has taken.

    Attributes:
        feat_id: Id of the feat in the catalog.
        level: Character level the feat was taken at. Feats above the current
            level are kept but inactive.
        source: The slot family that paid for the feat.
        slot_type: The concrete slot occupied, distinguishing archetype and
            impulse feats from plain class feats.
        choices: Positional ChoiceSet selections.
        choice_map: ChoiceSet flag -> selection, used to resolve dynamic
            ``{item|flags.pf2e.rulesSelections.<flag>}`` references.
        granted_by: Id of the feat that granted this one, if any.
    """
    feat_id: str
    level: int = 1
    source: FeatSource = "class"
    slot_type: SlotType | None = None
    choices: list[str] = Field(default_factory=list)
    choice_map: dict[str, str] = Field(default_factory=dict)
    granted_by: str | None = None


class Buff(BaseModel):
    """A numeric bonus or penalty applied to a selector (``ac``, ``skill-*``...)."""
    id: str = Field(default_factory=lambda: random(length=8))
    name: str
    bonus: int
    type: BonusType = "circumstance"
    selector: str
    duration: int | None = None  # rounds; None = permanent
    source: str | None = None


class ActiveCondition(BaseModel):
    id: str
    value: int | None = None
    duration: int | None = None


# ---------------------------------------------------------------------------
# Equipment
# ---------------------------------------------------------------------------


class WeaponRunes(BaseModel):
    potency_rune: int = 0
    striking_rune: Literal["striking", "greaterStriking", "majorStriking"] | None = None
    property_runes: list[str] = Field(default_factory=list)


class ArmorRunes(BaseModel):
    potency_rune: int = 0
    resilient_rune: int = 0
    property_runes: list[str] = Field(default_factory=list)


class ShieldRunes(BaseModel):
    reinforcing_rune: int = 0
    property_runes: list[str] = Field(default_factory=list)


class ItemCustomization(BaseModel):
    """Per-item overrides shared by weapons, armor and shields."""
    custom_name: str | None = None
    material: str | None = None
    attack_ability_override: Literal["str", "dex", "con", "int", "wis", "cha", "auto"] | None = None
    bonus_attack: int = 0
    bonus_damage: int = 0
    bulk_override: float | None = None


class EquippedItem(BaseModel):
    """An item carried by the character."""
    id: str = Field(default_factory=lambda: random(length=8))
    name: str
    bulk: float = 0
    quantity: int = 1
    invested: bool = False
    worn: bool = False
    container_id: str | None = None
    is_container: bool = False
    capacity: float | None = None
    bulk_reduction: float = 0
    runes: WeaponRunes | ArmorRunes | ShieldRunes | None = None
    customization: ItemCustomization | None = None


class Currency(BaseModel):
    cp: int = 0
    sp: int = 0
    gp: int = 15
    pp: int = 0


# ---------------------------------------------------------------------------
# Spellcasting
# ---------------------------------------------------------------------------


class SpellSlot(BaseModel):
    max: int = 0
    used: int = 0


class InnateSpell(BaseModel):
    """A spell usable a fixed number of times per day without slots."""
    spell_id: str
    uses: int = 1
    max_uses: int = 1
    source: str = ""
    source_type: Literal["heritage", "background", "feat", "item"] = "feat"


class HeightenedSpell(BaseModel):
    """A higher-rank copy of a repertoire spell for a spontaneous caster."""
    spell_id: str
    heightened_level: int
    from_esoteric_polymath: bool = False


class Spellcasting(BaseModel):
    tradition: Tradition = "arcane"
    spellcasting_type: Literal["prepared", "spontaneous"] = "prepared"
    key_ability: AbilityName = "int"
    proficiency: Proficiency = Proficiency.TRAINED
    spell_slots: dict[int, SpellSlot] = Field(default_factory=dict)
    known_spells: list[str] = Field(default_factory=list)
    focus_spells: list[str] = Field(default_factory=list)
    rituals: list[str] = Field(default_factory=list)
    innate_spells: list[InnateSpell] = Field(default_factory=list)
    heightened_spells: list[HeightenedSpell] = Field(default_factory=list)
    signature_spells: list[str] = Field(default_factory=list)


class DeepLoreState(BaseModel):
    extra_spells: dict[int, str] = Field(default_factory=dict)


class EsotericPolymathState(BaseModel):
    occult_spells: list[str] = Field(default_factory=list)
    daily_preparation: str | None = None


class Spellbook(BaseModel):
    """Bard spellbook-like state: Deep Lore extras and the Esoteric Polymath book."""
    deep_lore: DeepLoreState = Field(default_factory=DeepLoreState)
    esoteric_polymath: EsotericPolymathState = Field(default_factory=EsotericPolymathState)


class StudiousCapacityUse(BaseModel):
    used: bool = False
    last_used: date | None = None


class TrueHypercognitionUse(BaseModel):
    actions_used: list[int] = Field(default_factory=list)
    last_reset: date | None = None


class DailyFeatUses(BaseModel):
    studious_capacity: StudiousCapacityUse = Field(default_factory=StudiousCapacityUse)
    true_hypercognition: TrueHypercognitionUse = Field(default_factory=TrueHypercognitionUse)


class CompositionBonuses(BaseModel):
    attack: int = 0
    damage: int = 0
    saving_throws: int = 0
    skills: list[str] = Field(default_factory=list)
    skill_bonus: int | None = None


class ActiveComposition(BaseModel):
    """A bard composition currently in effect."""
    id: str = Field(default_factory=lambda: random(length=8))
    name: str
    duration: str = "sustained"
    bonuses: CompositionBonuses = Field(default_factory=CompositionBonuses)
    started_at: datetime = Field(default_factory=datetime.now)
    expires_at: datetime | None = None


class KineticistJunction(BaseModel):
    """Gate's Threshold decision taken at level 5, 9, 13 or 17."""
    choice: Literal["expand_the_portal", "fork_the_path"] = "expand_the_portal"
    gate_id: str | None = None
    junction_ids: list[str] = Field(default_factory=list)
    new_element_gate_id: str | None = None
    new_element_impulse_id: str | None = None


class VariantRules(BaseModel):
    free_archetype: bool = False
    dual_class: bool = False
    ancestry_paragon: bool = False
    automatic_bonus_progression: bool = False
    gradual_ability_boosts: bool = False
    proficiency_without_level: bool = False


# ---------------------------------------------------------------------------
# Character
# ---------------------------------------------------------------------------


class Character(BaseModel):
    """Complete PF2e character sheet.

    Raw choices (ancestry, background, class, boosts, feats, skill increases)
    are edited by the caller. Derived fields (ability scores, skills, saves,
    perception, HP, speed, senses, languages, feat buffs) are overwritten by
    the recalculation pipeline.
    """
    # Identity
    id: str = Field(default_factory=lambda: random(length=8))
    name: str = ""
    player: str | None = None
    level: int = Field(default=1, ge=1, le=20)
    xp: int = 0

    ancestry_id: str = ""
    heritage_id: str | None = None
    heritage_choice: str | None = None
    background_id: str = ""
    background_choice: str | None = None
    class_id: str = ""
    class_specialization_id: str | list[str] | None = None
    secondary_class_id: str | None = None
    deity_id: str | None = None

    # Raw choices
    ability_boosts: AbilityBoosts = Field(default_factory=AbilityBoosts)
    feats: list[CharacterFeat] = Field(default_factory=list)
    skill_increases: dict[int, str] = Field(default_factory=dict)
    int_bonus_skills: dict[int, list[str]] = Field(default_factory=dict)
    manual_skill_training: list[str] = Field(default_factory=list)
    kineticist_junctions: dict[int, KineticistJunction] = Field(default_factory=dict)
    variant_rules: VariantRules = Field(default_factory=VariantRules)

    # Derived
    ability_scores: AbilityScores = Field(default_factory=AbilityScores)
    hit_points: HitPoints = Field(default_factory=HitPoints)
    skills: list[SkillProficiency] = Field(default_factory=list)
    saves: Saves = Field(default_factory=Saves)
    perception: Proficiency = Proficiency.TRAINED
    armor_class: ArmorClass = Field(default_factory=ArmorClass)
    speed: Speed = Field(default_factory=Speed)
    weapon_proficiencies: list[CategoryProficiency] = Field(default_factory=list)
    armor_proficiencies: list[CategoryProficiency] = Field(default_factory=list)
    class_dcs: list[ClassDC] = Field(default_factory=list)
    spellcasting_from_feats: list[str] = Field(default_factory=list)
    senses: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)

    # Play state
    hero_points: int = 1
    equipment: list[EquippedItem] = Field(default_factory=list)
    currency: Currency = Field(default_factory=Currency)
    conditions: list[ActiveCondition] = Field(default_factory=list)
    buffs: list[Buff] = Field(default_factory=list)
    spellcasting: Spellcasting | None = None
    spellbook: Spellbook = Field(default_factory=Spellbook)
    daily_feat_uses: DailyFeatUses = Field(default_factory=DailyFeatUses)
    active_compositions: list[ActiveComposition] = Field(default_factory=list)

    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def get_skill(self, name: str) -> SkillProficiency | None:
        """Find a skill by name, case-insensitively."""
        wanted = name.lower()
        for skill in self.skills:
            if skill.name.lower() == wanted:
                return skill
        return None

    def skill_rank(self, name: str) -> Proficiency:
        """Rank in ``name``, untrained when the skill is missing."""
        skill = self.get_skill(name)
        return skill.proficiency if skill else Proficiency.UNTRAINED

    def active_feats(self) -> list[CharacterFeat]:
        """Feats taken at or below the current level."""
        return [f for f in self.feats if f.level <= self.level]

    def armor_rank(self, category: str) -> Proficiency | None:
        for entry in self.armor_proficiencies:
            if entry.category == category:
                return entry.proficiency
        return None


def create_empty_character(name: str = "") -> Character:
    """A level-1 character with no ancestry, background or class chosen."""
    return Character(name=name)


def migrate_character(data: dict[str, Any]) -> Character:
    """Validate stored character data, upgrading older layouts.

    Args:
        data: A character dictionary, possibly written by an older version.

    Returns:
        A validated Character.

    Raises:
        ValueError: If the data cannot be validated as a character.
    """
    data = dict(data)

    # 1. Renamed Foundry class ids
    for key in ("class_id", "secondary_class_id"):
        old = data.get(key)
        if old and old in CLASS_ID_MIGRATION_MAP:
            data[key] = CLASS_ID_MIGRATION_MAP[old]
            logger.info(f"Migrated {key} {old} -> {data[key]}")

    # 2. Fields added after the first release
    data.setdefault("variant_rules", {})
    if data.get("hero_points") is None:
        data["hero_points"] = 1

    # 3. Feats stored before slot types existed
    stored_feats = data.get("feats") or []
    if not isinstance(stored_feats, list):
        kind = type(stored_feats).__name__
        raise ValueError(f"Invalid character data: feats must be a list, got {kind}")
    feats = []
    for feat in stored_feats:
        if not isinstance(feat, dict):
            raise ValueError(f"Invalid character data: feat entries must be objects, got {feat!r}")
        feat = dict(feat)
        if not feat.get("slot_type"):
            source = feat.get("source", "class")
            feat["slot_type"] = source if source != "bonus" else None
        feats.append(feat)
    data["feats"] = feats

    try:
        return Character.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid character data: {e}") from e
