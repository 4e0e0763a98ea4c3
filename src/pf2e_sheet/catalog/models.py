"""
Pydantic definitions for normalized PF2e rules content.

These mirror the shape of already-normalized Foundry pf2e items: each
definition carries the handful of fields the recalculation pipeline reads,
plus the raw automation ``rules`` list for feats and class features.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..models import AbilityName


class FeatRule(BaseModel):
    """One automation rule element (ChoiceSet, FlatModifier, ActiveEffectLike...).

    Only the keys the pipeline reads are declared; anything else is kept as an
    extra attribute so a rule survives a dump/load cycle untouched.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    key: str
    selector: str | list[str] | None = None
    value: Any = None
    type: str | None = None
    mode: str | None = None
    path: str | None = None
    predicate: Any = None
    flag: str | None = None
    prompt: str | None = None
    choices: Any = None
    roll_option: str | None = Field(default=None, alias="rollOption")
    option: str | None = None
    uuid: str | None = None
    label: str | None = None

    def extra(self, name: str, default: Any = None) -> Any:
        """Read an undeclared key (``itemType``, ``config``...)."""
        return (self.model_extra or {}).get(name, default)


class SubfeatureProficiency(BaseModel):
    rank: int = 1
    attribute: AbilityName | None = None


class GrantedLanguages(BaseModel):
    granted: list[str] = Field(default_factory=list)


class FeatSubfeatures(BaseModel):
    proficiencies: dict[str, SubfeatureProficiency] = Field(default_factory=dict)
    languages: GrantedLanguages = Field(default_factory=GrantedLanguages)


class AncestryDefinition(BaseModel):
    """An ancestry.

    ``ability_boosts`` may contain ``"free"`` entries, which the user fills in
    through ``AbilityBoosts.ancestry``.
    """
    id: str
    name: str
    hit_points: int = 8
    speed: int = 25
    size: str = "med"
    ability_boosts: list[str] = Field(default_factory=list)
    ability_flaws: list[AbilityName] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    senses: list[str] = Field(default_factory=list)
    traits: list[str] = Field(default_factory=list)


class HeritageDefinition(BaseModel):
    id: str
    name: str
    ancestry_id: str | None = None
    rules: list[FeatRule] = Field(default_factory=list)


class BackgroundDefinition(BaseModel):
    id: str
    name: str
    ability_boosts: list[str] = Field(default_factory=list)
    trained_skills: list[str] = Field(default_factory=list)
    bonus_languages: list[str] = Field(default_factory=list)
    skill_feat: str | None = None


class ClassDefinition(BaseModel):
    """A class.

    Save values follow Foundry: 1 is trained, 2 or more marks a good save that
    improves with class level.
    """
    id: str
    name: str
    hit_points: int = 8
    key_ability: list[AbilityName] = Field(default_factory=list)
    perception: int = 1
    fortitude: int = 1
    reflex: int = 1
    will: int = 1
    trained_skills: list[str] = Field(default_factory=list)
    additional_trained_skills: int = 0
    class_features: list[str] = Field(default_factory=list)


class ClassFeatureDefinition(BaseModel):
    id: str
    name: str
    level: int = 1
    rules: list[FeatRule] = Field(default_factory=list)


class FeatDefinition(BaseModel):
    id: str
    name: str
    level: int = 1
    category: str = "general"
    traits: list[str] = Field(default_factory=list)
    prerequisites: list[str] = Field(default_factory=list)
    rules: list[FeatRule] = Field(default_factory=list)
    subfeatures: FeatSubfeatures = Field(default_factory=FeatSubfeatures)
    description: str = ""

    @property
    def slug(self) -> str:
        return self.name.lower().replace("'", "").replace(" ", "-")


class DeityDefinition(BaseModel):
    id: str
    name: str
    skill: str | None = None
    font: list[str] = Field(default_factory=list)
    favored_weapon: list[str] = Field(default_factory=list)


class SpellDefinition(BaseModel):
    id: str
    name: str
    rank: int = 1
    traditions: list[str] = Field(default_factory=list)
    traits: list[str] = Field(default_factory=list)
    is_ritual: bool = False
    description: str = ""

    @property
    def is_cantrip(self) -> bool:
        return "cantrip" in self.traits or self.rank == 0

    @property
    def slug(self) -> str:
        return self.name.lower().replace("'", "").replace(" ", "-")


class ConditionRule(BaseModel):
    selector: str | list[str]
    value: int = -1
    type: str = "status"


class ConditionDefinition(BaseModel):
    """A condition. A rule value of -1 means "minus the condition's value"."""
    id: str
    name: str
    value: int | None = None
    rules: list[ConditionRule] = Field(default_factory=list)


class WeaponDefinition(BaseModel):
    """A weapon base item.

    ``range`` is None for melee weapons. Traits are matched case-insensitively
    (``agile``, ``finesse``, ``thrown``, ``propulsive``, ``two-hand-d10``).
    """
    id: str
    name: str
    category: str = "simple"
    group: str | None = None
    damage: str = "1d4"
    damage_type: str = "bludgeoning"
    range: int | None = None
    traits: list[str] = Field(default_factory=list)
    bulk: float = 1

    def has_trait(self, trait: str) -> bool:
        wanted = trait.lower()
        return any(t.lower() == wanted for t in self.traits)

    @property
    def is_ranged(self) -> bool:
        return self.range is not None and self.range > 0
