"""
Feat-driven changes to skills and proficiencies.

Skill functions take and return skill lists; they copy what they touch so
callers can chain them. ``apply_subfeature_proficiencies`` returns an
updated character.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from .catalog.manager import GameDataCatalog
from .feat_rules import (
    ActiveEffect,
    build_choice_map,
    evaluate_effect_value,
    evaluate_predicate,
    parse_active_effects,
    process_roll_options,
)
from .data.skills import skill_ability
from .models import (
    CategoryProficiency,
    Character,
    ClassDC,
    Proficiency,
    SkillProficiency,
)

logger = logging.getLogger("pf2e-sheet")

SKILL_RANK_PATH_RE = re.compile(r"system\.skills\.([^.}]+)\.rank")
ATTACK_RANK_PATH_RE = re.compile(r"system\.proficiencies\.attacks\.(.+)\.rank")
DEFENSE_RANK_PATH_RE = re.compile(r"system\.proficiencies\.defenses\.(.+)\.rank")

ARMOR_CATEGORIES = ("light", "medium", "heavy")
WEAPON_CATEGORIES = ("unarmed", "simple", "martial")
DEDICATION_DEITY_FEATS = ("Cleric Dedication", "Champion Dedication")


def _copy_skills(skills: Iterable[SkillProficiency]) -> list[SkillProficiency]:
    return [skill.model_copy() for skill in skills]


def _find_or_add_skill(skills: list[SkillProficiency], name: str) -> SkillProficiency:
    wanted = name.lower()
    for skill in skills:
        if skill.name.lower() == wanted:
            return skill
    skill = SkillProficiency(
        name=name[:1].upper() + name[1:].lower(),
        ability=skill_ability(name),
    )
    skills.append(skill)
    return skill


def _effect_rank(value: Any, character: Character | None) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    if character is not None:
        return evaluate_effect_value(value, character)
    return None


def _apply_rank(skill: SkillProficiency, mode: str, rank: int) -> None:
    if mode == "upgrade":
        if rank > skill.proficiency.rank_index:
            skill.proficiency = Proficiency.from_index(rank)
    elif mode == "set":
        if 0 <= rank <= 4:
            skill.proficiency = Proficiency.from_index(rank)


def apply_active_effects(
    skills: list[SkillProficiency],
    choices: dict[str, str],
    effects: list[ActiveEffect],
    character: Character | None = None,
) -> list[SkillProficiency]:
    """Apply flagged ActiveEffectLike rules to the chosen skills.

    The target skill is the value of the effect's flag in ``choices``.
    Values that are Foundry paths (``system.saves...``) are not skills and
    are left to the saves stage.

    Args:
        skills: Current skills; not modified.
        choices: ChoiceSet flag -> selected value.
        effects: Parsed effects of one feat.
        character: Used to evaluate formula values.

    Returns:
        The updated skill list.
    """
    updated = _copy_skills(skills)
    for effect in effects:
        if not effect.flag:
            continue
        target = choices.get(effect.flag)
        if not target or "system." in target:
            continue
        rank = _effect_rank(effect.value, character)
        if rank is None:
            continue
        _apply_rank(_find_or_add_skill(updated, target), effect.mode, rank)
    return updated


def apply_additional_skill_choices(
    skills: list[SkillProficiency],
    choices: dict[str, str],
) -> list[SkillProficiency]:
    """Train the skills picked for ``additionalSkill``/``conditionalSkill_*``."""
    updated = _copy_skills(skills)
    for flag, value in choices.items():
        if flag != "additionalSkill" and not flag.startswith("conditionalSkill_"):
            continue
        if not value:
            continue
        skill = _find_or_add_skill(updated, value)
        if skill.proficiency == Proficiency.UNTRAINED:
            skill.proficiency = Proficiency.TRAINED
    return updated


def recalculate_skills_from_feats(character: Character, catalog: GameDataCatalog) -> list[SkillProficiency]:
    """Apply every active feat's skill effects on top of ``character.skills``.

    For each feat: static ``system.skills.<skill>.rank`` effects, then
    effects keyed to a choice, then additional skill choices.
    """
    skills = _copy_skills(character.skills)

    for character_feat in character.active_feats():
        feat = catalog.get_feat(character_feat.feat_id)
        if feat is None:
            logger.debug(f"Feat {character_feat.feat_id} not in catalog, skipping skill effects")
            continue

        effects = parse_active_effects(feat)
        choices = build_choice_map(feat, character_feat)

        for effect in effects:
            if effect.flag:
                continue
            match = SKILL_RANK_PATH_RE.search(effect.path)
            if not match:
                continue
            rank = _effect_rank(effect.value, character)
            if rank is not None:
                _apply_rank(_find_or_add_skill(skills, match.group(1)), effect.mode, rank)

        if choices:
            skills = apply_active_effects(skills, choices, effects, character)
            skills = apply_additional_skill_choices(skills, choices)

    return skills


def apply_deity_skills_from_dedications(character: Character, catalog: GameDataCatalog) -> list[SkillProficiency]:
    """Train deity skills from Cleric/Champion Dedication and dedication extras."""
    skills = _copy_skills(character.skills)

    def train(name: str) -> None:
        wanted = name.lower()
        spaced = wanted.replace("-", " ")
        skill = next((s for s in skills if s.name.lower() in (wanted, spaced)), None)
        if skill is None:
            skill = SkillProficiency(name=name, ability=skill_ability(name))
            skills.append(skill)
        if skill.proficiency == Proficiency.UNTRAINED:
            skill.proficiency = Proficiency.TRAINED

    for character_feat in character.active_feats():
        feat = catalog.get_feat(character_feat.feat_id)
        if feat is None:
            continue
        choices = build_choice_map(feat, character_feat)

        if feat.name in DEDICATION_DEITY_FEATS and choices.get("deity"):
            deity = catalog.get_deity(choices["deity"])
            if deity and deity.skill:
                train(deity.skill)

        if choices.get("additionalSkill"):
            train(choices["additionalSkill"])

    return skills


# ------------------------------------------------------------------
# Weapon, armor and class DC proficiencies
# ------------------------------------------------------------------


def _upgrade_category(
    entries: list[CategoryProficiency], category: str, rank: Proficiency, feat_id: str
) -> None:
    for entry in entries:
        if entry.category == category:
            if rank.rank_index > entry.proficiency.rank_index:
                if entry.granted_by is None and entry.base_proficiency is None:
                    entry.base_proficiency = entry.proficiency
                entry.proficiency = rank
            return
    entries.append(CategoryProficiency(category=category, proficiency=rank, granted_by=feat_id))


def _upgrade_class_dc(
    character: Character, class_type: str, rank: Proficiency, ability: str | None, feat_id: str
) -> None:
    for class_dc in character.class_dcs:
        if class_dc.class_type == class_type:
            if rank.rank_index > class_dc.proficiency.rank_index:
                if class_dc.granted_by is None and class_dc.base_proficiency is None:
                    class_dc.base_proficiency = class_dc.proficiency
                class_dc.proficiency = rank
            if ability and class_dc.granted_by is not None:
                class_dc.ability = ability
            return
    character.class_dcs.append(
        ClassDC(class_type=class_type, proficiency=rank, ability=ability or "cha", granted_by=feat_id)
    )


def clear_feat_proficiencies(character: Character) -> None:
    """Undo earlier feat grants in place, leaving only the class base."""
    for name in ("armor_proficiencies", "weapon_proficiencies", "class_dcs"):
        kept = []
        for entry in getattr(character, name):
            if entry.granted_by is not None:
                continue
            if entry.base_proficiency is not None:
                entry.proficiency = entry.base_proficiency
                entry.base_proficiency = None
            kept.append(entry)
        setattr(character, name, kept)
    character.spellcasting_from_feats = []


def apply_subfeature_proficiencies(character: Character, catalog: GameDataCatalog) -> Character:
    """Apply armor, weapon, class DC, spellcasting and language grants from feats.

    Sources are the feats' ``subfeatures`` plus ActiveEffectLike upgrades of
    ``system.proficiencies.attacks|defenses.<category>.rank``. Grants from an
    earlier pass are cleared first, then existing proficiencies are only ever
    raised.

    Returns:
        An updated copy of ``character``.
    """
    updated = character.model_copy(deep=True)
    clear_feat_proficiencies(updated)

    for character_feat in character.active_feats():
        feat = catalog.get_feat(character_feat.feat_id)
        if feat is None:
            continue

        choices = build_choice_map(feat, character_feat)
        proficiencies = feat.subfeatures.proficiencies

        for category, data in proficiencies.items():
            if not data.rank:
                continue
            rank = Proficiency.from_index(data.rank)
            if category in ARMOR_CATEGORIES:
                _upgrade_category(updated.armor_proficiencies, category, rank, feat.id)
            elif category in WEAPON_CATEGORIES:
                _upgrade_category(updated.weapon_proficiencies, category, rank, feat.id)
            elif category == "spellcasting":
                if feat.name not in updated.spellcasting_from_feats:
                    updated.spellcasting_from_feats.append(feat.name)
            else:
                ability = choices.get("attribute") or data.attribute
                _upgrade_class_dc(updated, category, rank, ability, feat.id)

        for language in feat.subfeatures.languages.granted:
            if language not in updated.languages:
                updated.languages.append(language)

        upgrades = [r for r in feat.rules if r.key == "ActiveEffectLike" and r.path and r.mode == "upgrade"]
        if not upgrades:
            continue

        roll_options = process_roll_options(updated, catalog)
        for rule in upgrades:
            if not evaluate_predicate(updated, rule.predicate, catalog, roll_options):
                continue
            attack = ATTACK_RANK_PATH_RE.search(rule.path)
            defense = DEFENSE_RANK_PATH_RE.search(rule.path)
            if not attack and not defense:
                continue
            value = evaluate_effect_value(rule.value, updated)
            if value <= 0:
                continue
            rank = Proficiency.from_index(value)
            if attack:
                _upgrade_category(updated.weapon_proficiencies, attack.group(1), rank, feat.id)
            else:
                _upgrade_category(updated.armor_proficiencies, defense.group(1), rank, feat.id)

    return updated
