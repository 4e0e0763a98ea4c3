"""
Character recalculation pipeline.

Derived statistics are rebuilt from scratch from the character's raw
choices every time anything changes. Stages run in dependency order:

1. ability scores
2. skills
3. saves and perception
4. feat proficiencies (armor, weapons, class DCs, languages)
5. hit points
6. speed
7. senses
8. languages
9. feat and heritage bonuses turned into buffs

Choices above the current level (feats, boosts, skill increases) stay on the
sheet but none of their effects are applied, so lowering and raising the
level reproduces the same result.
"""

from __future__ import annotations

import logging
import math
import re

from .catalog.manager import GameDataCatalog
from .catalog.models import ClassDefinition, FeatRule
from .data.skills import SKILLS
from .feat_effects import (
    SKILL_RANK_PATH_RE,
    apply_deity_skills_from_dedications,
    apply_subfeature_proficiencies,
    recalculate_skills_from_feats,
)
from .formulas import evaluate_formula
from .models import (
    ABILITY_NAMES,
    AbilityScores,
    Buff,
    Character,
    HitPoints,
    Proficiency,
    Saves,
    SkillProficiency,
    Speed,
)
from .pf2e_math import apply_ability_boost

logger = logging.getLogger("pf2e-sheet")

KINETICIST_CLASS_ID = "RggQN3bX5SEcsffR"

SKILL_INCREASE_LEVELS = (3, 5, 7, 9, 11, 13, 15, 17, 19)

# Languages granted for a positive Int modifier, in order
BONUS_LANGUAGES = ("Common", "Elven", "Dwarven", "Orcish", "Gnomish", "Goblin", "Sylvan", "Undercommon")

# FlatModifier selector -> buff selector
BUFF_SELECTORS = {
    "initiative": "initiative",
    "ac": "ac",
    "fortitude": "fortitude",
    "reflex": "reflex",
    "will": "will",
    "perception": "perception",
    "attack": "attack",
    "damage": "damage",
    "land-speed": "speed",
    "skill-check": "skill-*",
}

# Buff sources rebuilt from rules on every pass
RULE_BUFF_SOURCES = ("feat:", "heritage:")

# Foundry rank (1-4) -> rank value (2-8)
FOUNDRY_RANK_VALUES = {2: 4, 3: 6, 4: 8}


class RecalculationError(Exception):
    """Raised when a character cannot be recalculated."""
    pass


def _skill_cap(increase_level: int) -> Proficiency:
    if increase_level >= 15:
        return Proficiency.LEGENDARY
    if increase_level >= 7:
        return Proficiency.MASTER
    return Proficiency.EXPERT


class CharacterRecalculator:
    """
    Rebuilds every derived field of a character from its raw choices.

    All rules data comes from the injected catalog. Missing entries are not
    errors: the stage that needs them is skipped.
    """

    def __init__(self, catalog: GameDataCatalog):
        self.catalog = catalog

    def recalculate(self, character: Character) -> Character:
        """Run all stages and return a new character.

        Raises:
            RecalculationError: If the character's level is outside 1-20.
        """
        if not 1 <= character.level <= 20:
            raise RecalculationError(f"Character level must be 1-20, got {character.level}")

        updated = character.model_copy(deep=True)
        updated = self.recalculate_ability_scores(updated)
        updated = self.recalculate_skills(updated)
        updated = self.recalculate_saves_and_perception(updated)
        updated = self.apply_feat_proficiencies(updated)
        updated = self.recalculate_hp(updated)
        updated = self.recalculate_speed(updated)
        updated = self.recalculate_senses(updated)
        updated = self.recalculate_languages(updated)
        updated = self.process_feat_flat_modifiers(updated)
        return updated

    def _active_rules(self, character: Character, key: str) -> list[tuple[str, str, FeatRule]]:
        """(source, name, rule) for every ``key`` rule of the heritage and active feats.

        ``source`` is ``heritage:<id>`` or ``feat:<id>``.
        """
        found = []
        heritage = self.catalog.get_heritage(character.heritage_id)
        if heritage is not None:
            found.extend((f"heritage:{heritage.id}", heritage.name, r) for r in heritage.rules if r.key == key)
        for character_feat in character.active_feats():
            feat = self.catalog.get_feat(character_feat.feat_id)
            if feat is None:
                continue
            for rule in feat.rules:
                if rule.key == key:
                    found.append((f"feat:{feat.id}", feat.name, rule))
        return found

    def _is_kineticist(self, class_def: ClassDefinition) -> bool:
        return class_def.id == KINETICIST_CLASS_ID or class_def.name.lower() == "kineticist"

    # ------------------------------------------------------------------
    # 1. Ability scores
    # ------------------------------------------------------------------

    def recalculate_ability_scores(self, character: Character) -> Character:
        scores = {ability: 10 for ability in ABILITY_NAMES}
        boosts = character.ability_boosts

        def boost(ability: str | None) -> None:
            if ability:
                scores[ability] = apply_ability_boost(scores[ability])

        ancestry = self.catalog.get_ancestry(character.ancestry_id)
        if ancestry:
            for flaw in ancestry.ability_flaws:
                scores[flaw] -= 2
            for fixed in ancestry.ability_boosts:
                if fixed != "free" and fixed in scores:
                    boost(fixed)

        for ability in boosts.ancestry:
            boost(ability)

        if self.catalog.get_background(character.background_id):
            for ability in boosts.background:
                boost(ability)

        if self.catalog.get_class(character.class_id):
            boost(boosts.class_boost)

        for ability in boosts.free:
            boost(ability)

        for level in sorted(boosts.level_up):
            if level <= character.level:
                for ability in boosts.level_up[level]:
                    boost(ability)

        return character.model_copy(update={"ability_scores": AbilityScores(**scores)})

    # ------------------------------------------------------------------
    # 2. Skills
    # ------------------------------------------------------------------

    def kineticist_junction_skills(self, character: Character) -> list[str]:
        """Skills granted by the skill junctions of active Gate's Thresholds.

        Junction ids look like ``air_gate_skill_junction``; the gate's
        class feature holds ``system.skills.<skill>.rank`` upgrades whose
        predicate names ``junction:<element>:<type>``.
        """
        skills: list[str] = []
        for level, junction in sorted(character.kineticist_junctions.items()):
            if level > character.level or not junction.gate_id:
                continue
            gate = self.catalog.get_class_feature(junction.gate_id)
            if gate is None:
                logger.debug(f"Gate feature {junction.gate_id} not in catalog")
                continue
            for junction_id in junction.junction_ids:
                parts = junction_id.split("_")
                if len(parts) < 3:
                    continue
                marker = f"junction:{parts[0]}:{parts[2]}"
                for rule in gate.rules:
                    if rule.key != "ActiveEffectLike" or rule.mode != "upgrade" or not rule.path:
                        continue
                    predicate = rule.predicate if isinstance(rule.predicate, list) else []
                    if not any(isinstance(p, str) and marker in p for p in predicate):
                        continue
                    match = SKILL_RANK_PATH_RE.fullmatch(rule.path)
                    if match:
                        name = match.group(1)[:1].upper() + match.group(1)[1:]
                        if name not in skills:
                            skills.append(name)
        return skills

    def recalculate_skills(self, character: Character) -> Character:
        skill_map = {
            info.name.lower(): SkillProficiency(name=info.name, ability=info.ability)
            for info in SKILLS
        }

        def train(name: str | None, only_untrained: bool = False) -> None:
            skill = skill_map.get((name or "").lower())
            if skill is None:
                return
            if only_untrained and skill.proficiency != Proficiency.UNTRAINED:
                return
            skill.proficiency = Proficiency.TRAINED

        class_def = self.catalog.get_class(character.class_id)
        background = self.catalog.get_background(character.background_id)

        for name in class_def.trained_skills if class_def else []:
            train(name)
        for name in background.trained_skills if background else []:
            train(name)
        # Level 0 holds the bonus skill for a class/background overlap
        train(character.skill_increases.get(0))

        for name in character.manual_skill_training:
            train(name, only_untrained=True)
        for level, names in character.int_bonus_skills.items():
            if level <= character.level:
                for name in names:
                    train(name, only_untrained=True)
        for name in self.kineticist_junction_skills(character):
            train(name, only_untrained=True)

        updated = character.model_copy(update={"skills": list(skill_map.values())})
        updated = updated.model_copy(update={"skills": recalculate_skills_from_feats(updated, self.catalog)})
        updated = updated.model_copy(
            update={"skills": apply_deity_skills_from_dedications(updated, self.catalog)}
        )

        # Skill increases run last so they see feat-granted ranks
        for level in SKILL_INCREASE_LEVELS:
            name = character.skill_increases.get(level)
            if not name or level > character.level:
                continue
            skill = updated.get_skill(name)
            if skill and skill.proficiency.rank_index < _skill_cap(level).rank_index:
                skill.proficiency = skill.proficiency.step_up()

        return updated

    # ------------------------------------------------------------------
    # 3. Saves and perception
    # ------------------------------------------------------------------

    def _target_rank_value(self, value: object, level: int) -> int:
        """Convert an ActiveEffectLike save/perception value to a rank value."""
        if isinstance(value, int) and not isinstance(value, bool):
            return FOUNDRY_RANK_VALUES.get(value, value)
        if isinstance(value, str):
            if "gte(@actor.level,17)" in value:
                return 6 if level >= 17 else 4
            match = re.match(r"\s*(-?\d+)", value)
            if match:
                parsed = int(match.group(1))
                return FOUNDRY_RANK_VALUES.get(parsed, parsed)
        return 4

    def recalculate_saves_and_perception(self, character: Character) -> Character:
        class_def = self.catalog.get_class(character.class_id)
        if class_def is None:
            logger.debug(f"Class {character.class_id!r} not in catalog, skipping saves")
            return character

        level = character.level
        good = {
            "fortitude": class_def.fortitude >= 2,
            "reflex": class_def.reflex >= 2,
            "will": class_def.will >= 2,
        }
        ranks = {save: 2 if is_good else 0 for save, is_good in good.items()}
        perception = 2

        if self._is_kineticist(class_def):
            ranks["fortitude"] = max(ranks["fortitude"], 4)
            ranks["reflex"] = max(ranks["reflex"], 4)
            ranks["will"] = max(ranks["will"], 2)
            if level >= 3:
                ranks["will"] = max(ranks["will"], 4)
            if level >= 7:
                ranks["fortitude"] = max(ranks["fortitude"], 6)
            if level >= 9:
                perception = max(perception, 4)
            if level >= 11:
                ranks["reflex"] = max(ranks["reflex"], 6)
            if level >= 15:
                ranks["fortitude"] = max(ranks["fortitude"], 8)
        else:
            for save, is_good in good.items():
                if is_good and level >= 3:
                    ranks[save] = max(ranks[save], 4)
                if is_good and level >= 13:
                    ranks[save] = max(ranks[save], 6)
            if level >= 17:
                perception = max(perception, 6)

        for character_feat in character.active_feats():
            feat = self.catalog.get_feat(character_feat.feat_id)
            if feat is None:
                continue
            for rule in feat.rules:
                if rule.key != "ActiveEffectLike" or rule.mode != "upgrade":
                    continue
                path = rule.path or ""
                if "{item|flags.pf2e.rulesSelections." in path:
                    chosen = character_feat.choices[0] if character_feat.choices else ""
                    if "system.saves." in chosen or "system.perception." in chosen:
                        logger.debug(f"{feat.name}: resolved {path} -> {chosen}")
                        path = chosen
                if not path:
                    continue

                target = self._target_rank_value(rule.value, level)
                for save in ranks:
                    if f"saves.{save}.rank" in path:
                        ranks[save] = max(ranks[save], target)
                if "perception.rank" in path:
                    perception = max(perception, target)

        saves = Saves(**{save: Proficiency.from_rank_value(value) for save, value in ranks.items()})
        return character.model_copy(
            update={"saves": saves, "perception": Proficiency.from_rank_value(perception)}
        )

    # ------------------------------------------------------------------
    # 4. Feat proficiencies
    # ------------------------------------------------------------------

    def apply_feat_proficiencies(self, character: Character) -> Character:
        return apply_subfeature_proficiencies(character, self.catalog)

    # ------------------------------------------------------------------
    # 5-8. HP, speed, senses, languages
    # ------------------------------------------------------------------

    def recalculate_hp(self, character: Character) -> Character:
        """Max HP = ancestry HP + (class HP + Con) x level + feat HP bonuses."""
        class_def = self.catalog.get_class(character.class_id)
        if class_def is None:
            logger.debug(f"Class {character.class_id!r} not in catalog, skipping HP")
            return character

        ancestry = self.catalog.get_ancestry(character.ancestry_id)
        ancestry_hp = ancestry.hit_points if ancestry else 0
        per_level = (class_def.hit_points or 8) + character.ability_scores.modifier("con")
        max_hp = ancestry_hp + per_level * character.level

        for _, _, rule in self._active_rules(character, "FlatModifier"):
            if rule.selector != "hp":
                continue
            bonus = 0
            if isinstance(rule.value, (int, float)) and not isinstance(rule.value, bool):
                bonus = int(rule.value)
            elif isinstance(rule.value, str):
                if "@actor.level" in rule.value:
                    bonus = character.level
                else:
                    match = re.match(r"\s*(-?\d+)", rule.value)
                    bonus = int(match.group(1)) if match else 0
            if bonus > 0:
                max_hp += bonus

        hp = character.hit_points
        return character.model_copy(
            update={
                "hit_points": HitPoints(
                    current=hp.current or max_hp,
                    max=max_hp,
                    temporary=hp.temporary or 0,
                )
            }
        )

    def recalculate_speed(self, character: Character) -> Character:
        """Land speed is the ancestry speed plus the best land-speed bonus.

        Land-speed bonuses from different feats do not stack.
        """
        ancestry = self.catalog.get_ancestry(character.ancestry_id)
        if ancestry is None:
            logger.debug(f"Ancestry {character.ancestry_id!r} not in catalog, skipping speed")
            return character

        best = 0
        for _, _, rule in self._active_rules(character, "FlatModifier"):
            if rule.selector == "land-speed":
                best = max(best, evaluate_formula(rule.value, character))

        speed = character.speed
        return character.model_copy(
            update={
                "speed": Speed(
                    land=(ancestry.speed or 25) + best,
                    swim=speed.swim,
                    climb=speed.climb,
                    fly=speed.fly,
                    burrow=speed.burrow,
                )
            }
        )

    def recalculate_senses(self, character: Character) -> Character:
        ancestry = self.catalog.get_ancestry(character.ancestry_id)
        if ancestry is None:
            return character.model_copy(update={"senses": []})
        return character.model_copy(update={"senses": list(ancestry.senses) or ["vision"]})

    def recalculate_languages(self, character: Character) -> Character:
        """Ancestry and background languages, feat grants, then Int bonus languages."""
        languages: list[str] = []

        def add(language: str) -> None:
            if language not in languages:
                languages.append(language)

        ancestry = self.catalog.get_ancestry(character.ancestry_id)
        background = self.catalog.get_background(character.background_id)
        for language in ancestry.languages if ancestry else []:
            add(language)
        for language in background.bonus_languages if background else []:
            add(language)

        for character_feat in character.active_feats():
            feat = self.catalog.get_feat(character_feat.feat_id)
            if feat:
                for language in feat.subfeatures.languages.granted:
                    add(language)

        int_mod = character.ability_scores.modifier("int")
        for language in BONUS_LANGUAGES[:max(int_mod, 0)]:
            add(language)

        return character.model_copy(update={"languages": languages})

    # ------------------------------------------------------------------
    # 9. Feat FlatModifiers as buffs
    # ------------------------------------------------------------------

    def _flat_modifier_bonus(self, value: object, character: Character) -> int:
        if isinstance(value, str) and "@actor.level" in value:
            # Untrained Improvisation: level + clamp(-2, floor((level - 7) / 2), 0)
            level = character.level
            return level + max(-2, min(0, math.floor((level - 7) / 2)))
        return evaluate_formula(value, character)

    def process_feat_flat_modifiers(self, character: Character) -> Character:
        buffs = [b for b in character.buffs if not (b.source or "").startswith(RULE_BUFF_SOURCES)]
        seen = {b.id for b in buffs}

        for source, name, rule in self._active_rules(character, "FlatModifier"):
            if not isinstance(rule.selector, str) or not rule.value:
                continue
            selector = BUFF_SELECTORS.get(rule.selector)
            if selector is None:
                if not rule.selector.startswith("skill-"):
                    continue
                selector = rule.selector

            buff_id = f"{source}:{selector}"
            if buff_id in seen:
                continue
            seen.add(buff_id)
            buffs.append(
                Buff(
                    id=buff_id,
                    name=name,
                    bonus=self._flat_modifier_bonus(rule.value, character),
                    type=rule.type if rule.type in ("status", "item", "penalty") else "circumstance",
                    selector=selector,
                    source=f"{source.partition(':')[0]}:{name}",
                )
            )

        return character.model_copy(update={"buffs": buffs})


def recalculate_character(character: Character, catalog: GameDataCatalog) -> Character:
    """Recalculate ``character`` against ``catalog``."""
    return CharacterRecalculator(catalog).recalculate(character)
