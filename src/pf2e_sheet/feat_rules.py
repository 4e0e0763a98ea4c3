"""
Feat rule engine: reads the automation rules attached to feats.

Foundry pf2e feats carry a list of rule elements. This module understands
the ones the character sheet acts on:

- ``ChoiceSet``: a choice the player makes when taking the feat
- ``ActiveEffectLike``: a change to a character path (usually a rank)
- ``GrantItem``: another feat, spell or item granted by the feat
- ``RollOption``: a named flag other rules can test in their predicates

Only feats at or below the character's level take part; higher feats stay
on the sheet but are inert (builder mode).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Literal

from .catalog.manager import GameDataCatalog
from .catalog.models import FeatDefinition, FeatRule
from .data.skills import SKILL_NAMES, get_skill_info
from .formulas import evaluate_formula
from .models import Character, CharacterFeat, Proficiency

logger = logging.getLogger("pf2e-sheet")

ChoiceType = Literal["skill", "feat", "spell", "string", "number", "ability"]

DYNAMIC_SELECTION_RE = re.compile(r"\{item\|flags\.pf2e\.rulesSelections\.([^}]+)\}")

# Flags for choices stored after the ChoiceSet ones, in this order
ADDITIONAL_SKILL_FLAGS: tuple[str, ...] = ("additionalSkill",) + tuple(
    f"conditionalSkill_{i}" for i in range(10)
)


@dataclass
class GrantedItem:
    uuid: str
    type: Literal["feat", "spell", "item"]


@dataclass
class ActiveEffect:
    """An ActiveEffectLike rule. ``flag`` is empty for static paths."""
    path: str
    value: Any
    mode: str = "set"
    flag: str = ""
    predicate: Any = None


@dataclass
class FeatChoiceOption:
    label: str
    value: str
    predicate: Any = None


@dataclass
class ChoiceFilter:
    level: int | None = None
    category: str | None = None
    traits: list[str] = field(default_factory=list)
    item_type: str | None = None
    slugs: list[str] = field(default_factory=list)


@dataclass
class FeatChoice:
    """A parsed ChoiceSet rule."""
    flag: str = "choice"
    prompt: str = "Choose"
    type: ChoiceType = "string"
    roll_option: str | None = None
    options: list[FeatChoiceOption] | None = None
    filter: ChoiceFilter | None = None


# ------------------------------------------------------------------
# Rule parsing
# ------------------------------------------------------------------


def _rules(feat: FeatDefinition | None, key: str) -> list[FeatRule]:
    if feat is None:
        return []
    return [rule for rule in feat.rules if rule.key == key]


def parse_granted_items(feat: FeatDefinition) -> list[GrantedItem]:
    """GrantItem rules, typed by what their uuid points at."""
    granted = []
    for rule in _rules(feat, "GrantItem"):
        if not rule.uuid:
            continue
        uuid = rule.uuid
        if "feat" in uuid or "Item" in uuid or "{item|flags.pf2e.rulesSelections." in uuid:
            item_type = "feat"
        elif "spell" in uuid:
            item_type = "spell"
        else:
            item_type = "item"
        granted.append(GrantedItem(uuid=uuid, type=item_type))
    return granted


def selection_flag(path: str | None) -> str:
    """The ChoiceSet flag referenced by a dynamic path, or ``""``."""
    if not path:
        return ""
    match = DYNAMIC_SELECTION_RE.search(path)
    return match.group(1) if match else ""


def parse_active_effects(feat: FeatDefinition) -> list[ActiveEffect]:
    return [
        ActiveEffect(
            path=rule.path,
            value=rule.value,
            mode=rule.mode or "set",
            flag=selection_flag(rule.path),
            predicate=rule.predicate,
        )
        for rule in _rules(feat, "ActiveEffectLike")
        if rule.path
    ]


def parse_filter(filters: list[Any], choice_filter: ChoiceFilter) -> ChoiceFilter:
    """Fill ``choice_filter`` from Foundry ``item:<field>:<value>`` filters.

    ``{"or": [...]}`` entries only contribute ``item:slug`` alternatives.
    """
    for entry in filters:
        if isinstance(entry, str):
            parts = entry.split(":")
            if len(parts) < 3 or parts[0] != "item":
                continue
            kind, value = parts[1], parts[2]
            if kind == "level":
                try:
                    choice_filter.level = int(value)
                except ValueError:
                    logger.debug(f"Ignoring non-numeric level filter {entry!r}")
            elif kind == "trait":
                choice_filter.traits.append(value)
            elif kind == "category":
                choice_filter.category = value
            elif kind == "slug":
                choice_filter.slugs.append(value)
        elif isinstance(entry, dict) and isinstance(entry.get("or"), list):
            for alternative in entry["or"]:
                parts = str(alternative).split(":")
                if len(parts) >= 3 and parts[0] == "item" and parts[1] == "slug":
                    choice_filter.slugs.append(parts[2])
    return choice_filter


def _parse_choice(rule: FeatRule) -> FeatChoice:
    choice = FeatChoice(
        flag=rule.flag or "choice",
        prompt=rule.prompt or "Choose",
        roll_option=rule.roll_option,
    )

    config = rule.choices
    if isinstance(config, list):
        choice.type = "string"
        choice.options = [
            FeatChoiceOption(
                label=str(item.get("label", item.get("value", ""))),
                value=str(item.get("value", "")),
                predicate=item.get("predicate"),
            )
            for item in config
            if isinstance(item, dict)
        ]
    elif isinstance(config, dict):
        if config.get("config") == "skills":
            choice.type = "skill"
        elif config.get("itemType") in ("feat", "spell"):
            choice.type = config["itemType"]
            choice.filter = ChoiceFilter(item_type="spell" if choice.type == "spell" else None)
            if isinstance(config.get("filter"), list):
                parse_filter(config["filter"], choice.filter)
    return choice


def parse_feat_choices(feat: FeatDefinition) -> list[FeatChoice]:
    """ChoiceSet rules of a feat, in rule order."""
    return [_parse_choice(rule) for rule in _rules(feat, "ChoiceSet")]


def build_choice_map(feat: FeatDefinition | None, character_feat: CharacterFeat) -> dict[str, str]:
    """Map a feat's positional choices to ChoiceSet flags.

    Choices beyond the feat's ChoiceSets are dedication extras and map to
    ``additionalSkill`` then ``conditionalSkill_0`` to ``conditionalSkill_9``.
    Entries already in ``character_feat.choice_map`` take precedence.
    """
    featured = parse_feat_choices(feat) if feat else []
    mapped: dict[str, str] = {}
    for index, value in enumerate(character_feat.choices):
        if index < len(featured):
            mapped[featured[index].flag] = value
            continue
        extra = index - len(featured)
        if extra < len(ADDITIONAL_SKILL_FLAGS):
            mapped[ADDITIONAL_SKILL_FLAGS[extra]] = value
    mapped.update(character_feat.choice_map)
    return mapped


# ------------------------------------------------------------------
# Predicates and roll options
# ------------------------------------------------------------------


def _character_value(character: Character, path: str) -> float:
    value: Any = character
    for part in path.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        elif hasattr(value, part):
            value = getattr(value, part)
        else:
            return 0
    if isinstance(value, bool):
        return int(value)
    return value if isinstance(value, (int, float)) else 0


def _check_defense(character: Character, spec: str) -> bool:
    """``<category>:rank:<n>``; rank 0 means untrained or no entry."""
    parts = spec.split(":")
    if len(parts) < 3 or parts[1] != "rank":
        return True
    rank = character.armor_rank(parts[0])
    if parts[2] == "0":
        return rank is None or rank == Proficiency.UNTRAINED
    if rank is None:
        return False
    try:
        return rank.rank_index >= int(parts[2])
    except ValueError:
        return False


def _check_skill(character: Character, spec: str) -> bool:
    """``<skill>:rank:<n>`` against the character's current skills."""
    parts = spec.split(":")
    if len(parts) < 3 or parts[1] != "rank":
        return True
    skill = character.get_skill(parts[0])
    if skill is None:
        return False
    try:
        return skill.proficiency.rank_index >= int(parts[2])
    except ValueError:
        return False


def _lte(character: Character, operand: Any) -> bool:
    if isinstance(operand, dict) and operand:
        path, limit = next(iter(operand.items()))
    elif isinstance(operand, list) and len(operand) == 2:
        path, limit = operand
    else:
        return True
    try:
        return _character_value(character, str(path)) <= float(limit)
    except (TypeError, ValueError):
        return False


def _evaluate(
    character: Character,
    predicate: Any,
    roll_options: dict[str, Any],
    check_skills: bool,
) -> bool:
    if not predicate:
        return True

    def recurse(p: Any) -> bool:
        return _evaluate(character, p, roll_options, check_skills)

    if isinstance(predicate, list):
        return all(recurse(p) for p in predicate)

    if isinstance(predicate, dict):
        if isinstance(predicate.get("or"), list):
            return any(recurse(p) for p in predicate["or"])
        if isinstance(predicate.get("and"), list):
            return all(recurse(p) for p in predicate["and"])
        if "not" in predicate:
            negated = predicate["not"]
            items = negated if isinstance(negated, list) else [negated]
            return not any(recurse(p) for p in items)
        if isinstance(predicate.get("nor"), list):
            return not any(recurse(p) for p in predicate["nor"])
        if "lte" in predicate:
            return _lte(character, predicate["lte"])
        return True

    if isinstance(predicate, str):
        kind, _, rest = predicate.partition(":")
        if rest and kind == "defense":
            return _check_defense(character, rest)
        if rest and kind == "skill" and check_skills:
            return _check_skill(character, rest)
        return bool(roll_options.get(predicate))

    return True


def evaluate_predicate(
    character: Character,
    predicate: Any,
    catalog: GameDataCatalog,
    roll_options: dict[str, Any] | None = None,
) -> bool:
    """Evaluate a Foundry predicate against a character.

    Args:
        character: The character being tested.
        predicate: A string, a list (all must hold), or a dict using ``or``,
            ``and``, ``not``, ``nor`` or ``lte``.
        catalog: Rules catalog, used to gather roll options when none are
            given.
        roll_options: Pre-computed roll options.

    Returns:
        True when the predicate holds. Empty predicates always hold.
    """
    if not predicate:
        return True
    if roll_options is None:
        roll_options = process_roll_options(character, catalog)
    return _evaluate(character, predicate, roll_options, check_skills=False)


def process_roll_options(character: Character, catalog: GameDataCatalog) -> dict[str, Any]:
    """Roll options set by the character's active feats.

    A ChoiceSet with ``rollOption`` sets ``"<option>:<value>"`` to True and
    ``<option>`` to the chosen value. RollOption rules set ``option`` to their
    value (default True). Unconditional options are gathered first;
    predicated RollOption rules are then tested against those.
    """
    options: dict[str, Any] = {}
    predicated: list[FeatRule] = []

    for character_feat in character.active_feats():
        feat = catalog.get_feat(character_feat.feat_id)
        if feat is None:
            continue

        for index, choice in enumerate(parse_feat_choices(feat)):
            if choice.roll_option and index < len(character_feat.choices):
                value = character_feat.choices[index]
                options[f"{choice.roll_option}:{value}"] = True
                options[choice.roll_option] = value

        for rule in _rules(feat, "RollOption"):
            if not rule.option:
                continue
            if rule.predicate:
                predicated.append(rule)
            else:
                options[rule.option] = rule.value if rule.value else True

    gathered = dict(options)
    for rule in predicated:
        if _evaluate(character, rule.predicate, gathered, check_skills=False):
            options[rule.option] = rule.value if rule.value else True

    return options


def evaluate_effect_value(value: Any, character: Character) -> int:
    """Numeric value of an ActiveEffectLike rule."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return evaluate_formula(value, character)


# ------------------------------------------------------------------
# Choice options
# ------------------------------------------------------------------


def get_choice_options(
    choice: FeatChoice,
    catalog: GameDataCatalog,
    character: Character | None = None,
    previous: dict[str, str] | None = None,
) -> list[str]:
    """Values a player may pick for ``choice``.

    Args:
        choice: Parsed ChoiceSet.
        catalog: Rules catalog for feat lookups.
        character: When given, option predicates are evaluated against it.
            ``skill:<name>:rank:<n>`` predicates are supported here.
        previous: Earlier selections of the same feat (flag -> value). A
            skill picked earlier is still tested at its current rank.

    Returns:
        Option values, skill names, feat ids or spell slugs.
    """
    if choice.options is not None:
        if character is None:
            return [option.value for option in choice.options]
        roll_options = process_roll_options(character, catalog)
        return [
            option.value
            for option in choice.options
            if _evaluate(character, option.predicate, roll_options, check_skills=True)
        ]

    if choice.type == "skill":
        return list(SKILL_NAMES)

    if choice.type == "feat":
        choice_filter = choice.filter or ChoiceFilter()
        wanted_traits = {t.lower() for t in choice_filter.traits}
        feat_ids = []
        for feat in catalog.feats():
            if choice_filter.level is not None and feat.level != choice_filter.level:
                continue
            if choice_filter.category and feat.category != choice_filter.category:
                continue
            if wanted_traits and not wanted_traits & {t.lower() for t in feat.traits}:
                continue
            feat_ids.append(feat.id)
        return feat_ids

    if choice.type == "spell" and choice.filter:
        return list(choice.filter.slugs)

    return []


def _split_capitals(text: str) -> str:
    spaced = re.sub(r"([A-Z])", r" \1", text).strip()
    return spaced[:1].upper() + spaced[1:]


def get_choice_display_value(
    value: str,
    choice: FeatChoice,
    catalog: GameDataCatalog | None = None,
) -> str:
    """Human-readable text for a selected value."""
    for option in choice.options or []:
        if option.value == value:
            if "." in option.label:
                # Localization key such as PF2E.Actor...Defense.LightShort
                return _split_capitals(option.label.split(".")[-1])
            return option.label

    if choice.type == "skill":
        info = get_skill_info(value)
        return info.name if info else value
    if choice.type == "feat":
        feat = catalog.get_feat(value) if catalog else None
        return feat.name if feat else value
    if choice.type == "spell":
        return " ".join(word[:1].upper() + word[1:] for word in value.split("-"))
    if choice.type == "ability":
        return value.upper()
    return value
