"""Progression orchestrator: walks a character from its level to a target level.

Every precondition is checked before the first level is applied, and all
violations are reported together.  Each level is then computed and applied
as one unit and recorded as an immutable ``ProgressionStep``:

  1. hit points, skill points, attack and save deltas from the class
  2. epic capability decision (21, 24, 27, ...)
  3. ability increase decision (24, 28, ... plus 40)
  4. epic spell slots for casters
  5. divine rank (level 50+) and cosmic powers (level 80+)
  6. epic damage reduction and spell resistance
  7. milestones

Choices are never made here; they are surfaced as pending decisions and
closed by ``resolve_decision``.
"""

from __future__ import annotations

import logging
from collections import Counter
from contextlib import nullcontext
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from epic_progression.config import ProgressionConfig
from epic_progression.core.abilities import (
    ABILITY_KEYS, ability_ceiling, apply_increase, due_increases, parse_ability,
)
from epic_progression.core.capabilities import CapabilityCatalog, grant_capability
from epic_progression.core.character import CharacterSnapshot, Decision
from epic_progression.core.classes import attack_bonus_delta, save_delta
from epic_progression.core.divine import DivineRankLadder, WorshipMetrics
from epic_progression.core.enums import ABILITY_NAMES, Ability, DecisionKind, SaveType
from epic_progression.core.errors import CapacityExceeded, NotFound, ValidationFailed
from epic_progression.core.experience import experience_for_level
from epic_progression.core.spells import SpellCalculator
from epic_progression.engine.history import ProgressionHistory
from epic_progression.utils.locks import CharacterLocks
from epic_progression.utils.monitor import PerformanceMonitor

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProgressionStep:
    """Deltas recorded for one level; immutable once built."""

    level: int
    hp_gain: int
    skill_point_gain: int
    attack_gain: int
    save_gains: Mapping[SaveType, int]
    class_features: tuple[str, ...] = ()
    capability_decision: Decision | None = None
    ability_decision: Decision | None = None
    spell_slots_gained: int = 0
    rank_before: int = 0
    rank_after: int = 0
    new_immunities: tuple[str, ...] = ()
    new_cosmic_powers: tuple[str, ...] = ()
    ascension_available: bool | None = None     # None when not evaluated
    ascension_unmet: tuple[str, ...] = ()
    damage_reduction: int = 0
    spell_resistance: int = 0
    milestones: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "save_gains", MappingProxyType(dict(self.save_gains)))

    @property
    def rank_changed(self) -> bool:
        return self.rank_after != self.rank_before

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "hp_gain": self.hp_gain,
            "skill_point_gain": self.skill_point_gain,
            "attack_gain": self.attack_gain,
            "save_gains": {s.name.lower(): v for s, v in self.save_gains.items()},
            "class_features": list(self.class_features),
            "capability_decision": self.capability_decision.to_dict() if self.capability_decision else None,
            "ability_decision": self.ability_decision.to_dict() if self.ability_decision else None,
            "spell_slots_gained": self.spell_slots_gained,
            "rank_before": self.rank_before,
            "rank_after": self.rank_after,
            "new_immunities": list(self.new_immunities),
            "new_cosmic_powers": list(self.new_cosmic_powers),
            "ascension_available": self.ascension_available,
            "ascension_unmet": list(self.ascension_unmet),
            "damage_reduction": self.damage_reduction,
            "spell_resistance": self.spell_resistance,
            "milestones": list(self.milestones),
        }


@dataclass(slots=True)
class AdvancementResult:
    snapshot: CharacterSnapshot
    steps: list[ProgressionStep] = field(default_factory=list)
    new_milestones: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "character": self.snapshot.to_dict(),
            "steps": [s.to_dict() for s in self.steps],
            "new_milestones": list(self.new_milestones),
        }


class ProgressionOrchestrator:
    """Applies level-by-level epic advancement to character snapshots."""

    def __init__(
        self,
        config: ProgressionConfig,
        catalog: CapabilityCatalog,
        spells: SpellCalculator,
        ladder: DivineRankLadder,
        history: ProgressionHistory | None = None,
        locks: CharacterLocks | None = None,
        monitor: PerformanceMonitor | None = None,
    ) -> None:
        self._config = config
        self._catalog = catalog
        self._spells = spells
        self._ladder = ladder
        self._history = history or ProgressionHistory()
        self._locks = locks
        self._monitor = monitor

    @property
    def history(self) -> ProgressionHistory:
        return self._history

    # -- validation --

    def validate(self, snapshot: CharacterSnapshot, target_level: int) -> list[str]:
        """Every violated advancement precondition; empty when advancement may proceed."""
        cfg = self._config
        violations: list[str] = []
        if target_level <= snapshot.level:
            violations.append(
                f"Target level {target_level} must be greater than current level {snapshot.level}"
            )
        in_range = cfg.first_epic_level <= target_level <= cfg.max_level
        if not in_range:
            violations.append(
                f"Target level {target_level} is outside the epic range "
                f"{cfg.first_epic_level}-{cfg.max_level}"
            )
        if snapshot.level < cfg.epic_entry_level:
            violations.append(
                f"Epic advancement requires level {cfg.epic_entry_level}, currently {snapshot.level}"
            )
        if in_range:
            with self._track("xp_calculation"):
                required = experience_for_level(target_level, cfg)
            if snapshot.experience < required:
                violations.append(
                    f"Insufficient experience: {required} required for level {target_level}, "
                    f"currently {snapshot.experience}"
                )
        return violations

    # -- advancement --

    def advance(
        self,
        snapshot: CharacterSnapshot,
        target_level: int,
        worship: WorshipMetrics | None = None,
    ) -> AdvancementResult:
        """Advance *snapshot* to *target_level*, one recorded step per level."""
        with self._hold(snapshot), self._track("progression_update"):
            violations = self.validate(snapshot, target_level)
            if violations:
                raise ValidationFailed(violations, "Advancement preconditions not met")

            result = AdvancementResult(snapshot)
            start = snapshot.level
            for level in range(start + 1, target_level + 1):
                step = self._advance_one(snapshot, level, worship)
                self._history.record(snapshot.character_id, step)
                result.steps.append(step)
                result.new_milestones.extend(step.milestones)

            logger.info("%s advanced from level %d to %d", snapshot.name, start, target_level)
            return result

    def _advance_one(
        self,
        snapshot: CharacterSnapshot,
        level: int,
        worship: WorshipMetrics | None,
    ) -> ProgressionStep:
        cfg = self._config
        cdef = snapshot.class_def
        primary = cdef.name.lower()

        snapshot.enter_level(level)
        if snapshot.class_levels:
            snapshot.class_levels[primary] = snapshot.class_levels.get(primary, 0) + 1
        class_level = snapshot.class_level(primary)

        # Statistics
        hp_gain = max(1, cdef.hit_die + snapshot.abilities.modifier(Ability.CON))
        sp_gain = max(1, cdef.skill_points + snapshot.abilities.modifier(Ability.INT))
        attack_gain = attack_bonus_delta(cdef, class_level)
        save_gains = {s: save_delta(cdef, s, class_level) for s in SaveType}
        snapshot.hit_points += hp_gain
        snapshot.skill_points += sp_gain
        snapshot.base_attack_bonus += attack_gain
        for s, gain in save_gains.items():
            snapshot.saves[s] = snapshot.saves.get(s, 0) + gain
        features = tuple(cdef.features_at(class_level))
        snapshot.feats.update(features)

        # Decisions
        capability_decision = None
        if (level - cfg.first_epic_level) % cfg.epic_feat_interval == 0:
            options = tuple(d.capability_id for d in self._catalog.list_eligible(snapshot, level))
            capability_decision = Decision(level, DecisionKind.EPIC_CAPABILITY, 1, options)
            snapshot.pending_decisions.append(capability_decision)

        ability_decision = None
        due = due_increases(level, cfg)
        if due:
            ceiling = ability_ceiling(level, cfg)
            options = tuple(ABILITY_KEYS[a] for a in Ability if snapshot.abilities.get(a) < ceiling)
            # Only as many points as the abilities below the ceiling can still absorb
            room = sum(max(0, ceiling - snapshot.abilities.get(a)) for a in Ability)
            count = min(due, room)
            if count < due:
                logger.info(
                    "%s forfeits %d ability increase(s) at level %d: every ability is at the ceiling of %d",
                    snapshot.name, due - count, level, ceiling,
                )
            if count:
                ability_decision = Decision(level, DecisionKind.ABILITY_INCREASE, count, options)
                snapshot.pending_decisions.append(ability_decision)

        # Spell slots
        slots_gained = self._spells.refresh_slots(snapshot) if snapshot.is_spellcaster else 0

        # Divinity
        rank_before = snapshot.divine_rank
        immunities_before = snapshot.epic.immunities
        powers_before = list(snapshot.epic.cosmic_powers)
        ascension_available = None
        ascension_unmet: tuple[str, ...] = ()
        if level >= cfg.divine_ascension_level:
            if snapshot.is_divine:
                permitted = self._ladder.max_rank_for_level(level)
                if snapshot.divine_rank < min(permitted, self._ladder.max_rank):
                    self._ladder.advance_rank(snapshot, permitted)
            elif worship is not None:
                ascension_unmet = tuple(self._ladder.check_ascension(snapshot, worship))
                ascension_available = not ascension_unmet
        if level >= cfg.cosmic_level:
            self._ladder.unlock_cosmic_powers(snapshot)
        new_powers = tuple(p for p in snapshot.epic.cosmic_powers if p not in powers_before)
        new_immunities = tuple(sorted(snapshot.epic.immunities - immunities_before))

        # Epic bonuses
        damage_reduction = level // 10
        spell_resistance = level + 10
        snapshot.bonuses["epic_damage_reduction"] = damage_reduction
        snapshot.bonuses["epic_spell_resistance"] = spell_resistance

        # Milestones
        milestones = tuple(self._history.evaluate_milestones(snapshot))
        snapshot.achieved_milestones.update(milestones)
        for mid in milestones:
            logger.info("%s achieves milestone %s", snapshot.name, mid)

        logger.debug(
            "%s level %d: +%d HP, +%d SP, +%d BAB, saves %s",
            snapshot.name, level, hp_gain, sp_gain, attack_gain,
            {s.name.lower(): g for s, g in save_gains.items()},
        )
        return ProgressionStep(
            level=level,
            hp_gain=hp_gain,
            skill_point_gain=sp_gain,
            attack_gain=attack_gain,
            save_gains=save_gains,
            class_features=features,
            capability_decision=capability_decision,
            ability_decision=ability_decision,
            spell_slots_gained=slots_gained,
            rank_before=rank_before,
            rank_after=snapshot.divine_rank,
            new_immunities=new_immunities,
            new_cosmic_powers=new_powers,
            ascension_available=ascension_available,
            ascension_unmet=ascension_unmet,
            damage_reduction=damage_reduction,
            spell_resistance=spell_resistance,
            milestones=milestones,
        )

    # -- decisions --

    def resolve_decision(
        self,
        snapshot: CharacterSnapshot,
        level: int,
        kind: DecisionKind,
        selection: str | list[str],
    ) -> CharacterSnapshot:
        """Close the pending *kind* decision surfaced at *level* with *selection*."""
        metric = "ability_increase" if kind == DecisionKind.ABILITY_INCREASE else "feat_validation"
        with self._hold(snapshot), self._track(metric):
            decision = next(
                (d for d in snapshot.pending_decisions if d.level == level and d.kind == kind),
                None,
            )
            if decision is None:
                raise NotFound("pending decision", f"{kind.name.lower()}@{level}")

            if kind == DecisionKind.EPIC_CAPABILITY:
                self._resolve_capability(snapshot, decision, selection)
            else:
                self._resolve_increase(snapshot, decision, selection)

            snapshot.pending_decisions.remove(decision)
            return snapshot

    def _resolve_capability(
        self,
        snapshot: CharacterSnapshot,
        decision: Decision,
        selection: str | list[str],
    ) -> None:
        picks = [selection] if isinstance(selection, str) else list(selection)
        if len(picks) != decision.count:
            raise ValidationFailed([f"Expected {decision.count} capability, got {len(picks)}"])
        capability_id = picks[0]
        self._catalog.get(capability_id)
        if capability_id not in decision.options:
            raise ValidationFailed([f"{capability_id} was not offered at level {decision.level}"])
        grant_capability(self._catalog, snapshot, capability_id, snapshot.level)

    def _resolve_increase(
        self,
        snapshot: CharacterSnapshot,
        decision: Decision,
        selection: str | list[str],
    ) -> None:
        picks = [selection] if isinstance(selection, str) else list(selection)
        if len(picks) != decision.count:
            raise ValidationFailed(
                [f"Expected {decision.count} ability increase(s) at level {decision.level}, got {len(picks)}"]
            )
        counts = Counter(parse_ability(p) for p in picks)
        limit = ability_ceiling(snapshot.level, self._config)
        # Check every point before applying any
        for ability, amount in counts.items():
            attempted = snapshot.abilities.get(ability) + amount
            if attempted > limit:
                raise CapacityExceeded(ABILITY_NAMES[ability], limit, attempted)
        for ability, amount in counts.items():
            apply_increase(snapshot, ability, amount, self._config)

    # -- helpers --

    def _hold(self, snapshot: CharacterSnapshot):
        if self._locks is None:
            return nullcontext()
        return self._locks.hold(snapshot.character_id)

    def _track(self, metric: str):
        if self._monitor is None:
            return nullcontext()
        return self._monitor.track(metric)
