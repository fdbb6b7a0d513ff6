"""ProgressionService: process-wide owner of the catalogs, orchestrator and characters.

Reference data (capabilities, seeds, tiers, milestones) is built once here
and injected into the components.  Characters live in an in-memory registry;
persistence is left to whoever embeds the service.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Any

from epic_progression.config import ProgressionConfig
from epic_progression.core.abilities import AbilityScores, parse_ability
from epic_progression.core.capabilities import CapabilityCatalog
from epic_progression.core.character import CharacterSnapshot, CosmicPowerUse
from epic_progression.core.classes import class_by_name
from epic_progression.core.divine import DivineRankLadder, DivineRankTier, WorshipMetrics
from epic_progression.core.enums import DecisionKind
from epic_progression.core.epic_feats import EPIC_CAPABILITY_DEFS
from epic_progression.core.errors import NotFound, ValidationFailed
from epic_progression.core.spells import CastOutcome, SpellCalculator, SpellComposition
from epic_progression.engine.history import ProgressionHistory
from epic_progression.engine.progression import AdvancementResult, ProgressionOrchestrator, ProgressionStep
from epic_progression.systems.rng import DeterministicRNG
from epic_progression.utils.locks import CharacterLocks
from epic_progression.utils.monitor import PerformanceMonitor

logger = logging.getLogger(__name__)


class ProgressionService:
    """Wires the progression components together and tracks live characters."""

    def __init__(self, config: ProgressionConfig | None = None) -> None:
        self._config = config or ProgressionConfig()
        self.config = self._config

        self.monitor = PerformanceMonitor(self._config)
        self.locks = CharacterLocks()
        self.rng = DeterministicRNG(self._config.rng_seed)
        self.catalog = CapabilityCatalog(EPIC_CAPABILITY_DEFS, monitor=self.monitor, config=self._config)
        self.spells = SpellCalculator(
            self._config, rng=self.rng, locks=self.locks, monitor=self.monitor,
        )
        self.ladder = DivineRankLadder(self._config, locks=self.locks, monitor=self.monitor)
        self.history = ProgressionHistory()
        self.orchestrator = ProgressionOrchestrator(
            self._config, self.catalog, self.spells, self.ladder,
            history=self.history, locks=self.locks, monitor=self.monitor,
        )

        self._characters: dict[str, CharacterSnapshot] = {}
        self._registry_lock = threading.Lock()
        self._ids = itertools.count(1)
        logger.info(
            "Progression service ready: %d capabilities, %d seeds, %d divine ranks",
            len(self.catalog), len(self.spells.seeds), len(self.ladder.tiers) - 1,
        )

    # -- registry --

    def create_character(
        self,
        name: str,
        character_class: str,
        level: int = 20,
        experience: int = 0,
        abilities: dict[str, int] | None = None,
        feats: list[str] | None = None,
        skills: dict[str, int] | None = None,
        spellcraft_ranks: int | None = None,
        class_levels: dict[str, int] | None = None,
        hit_points: int = 0,
    ) -> CharacterSnapshot:
        if level < 1 or level > self._config.max_level:
            raise ValidationFailed([f"Level must be between 1 and {self._config.max_level}, got {level}"])
        scores = AbilityScores()
        for key, value in (abilities or {}).items():
            scores.set(parse_ability(key), value)
        with self._registry_lock:
            character_id = f"char-{next(self._ids)}"
            snapshot = CharacterSnapshot(
                character_id=character_id,
                name=name,
                character_class=class_by_name(character_class),
                level=level,
                experience=experience,
                abilities=scores,
                class_levels={k.lower(): v for k, v in (class_levels or {}).items()},
                feats=set(feats or ()),
                skills={k.lower(): v for k, v in (skills or {}).items()},
                spellcraft_ranks=spellcraft_ranks,
                hit_points=hit_points,
            )
            if snapshot.is_spellcaster:
                self.spells.refresh_slots(snapshot)
            self._characters[character_id] = snapshot
        logger.info("Created %s (%s) as %s", name, character_class, character_id)
        return snapshot

    def get(self, character_id: str) -> CharacterSnapshot:
        with self._registry_lock:
            snapshot = self._characters.get(character_id)
        if snapshot is None:
            raise NotFound("character", character_id)
        return snapshot

    def list_characters(self) -> list[CharacterSnapshot]:
        with self._registry_lock:
            return list(self._characters.values())

    def delete_character(self, character_id: str) -> dict[str, Any]:
        snapshot = self.get(character_id)
        report = self.history.stop_tracking(snapshot)
        with self._registry_lock:
            self._characters.pop(character_id, None)
        self.locks.discard(character_id)
        return report

    # -- progression --

    def advance(
        self,
        character_id: str,
        target_level: int,
        worship: WorshipMetrics | None = None,
    ) -> AdvancementResult:
        return self.orchestrator.advance(self.get(character_id), target_level, worship)

    def resolve_decision(
        self,
        character_id: str,
        level: int,
        kind: str,
        selection: str | list[str],
    ) -> CharacterSnapshot:
        try:
            decision_kind = DecisionKind[kind.upper()]
        except KeyError:
            raise ValidationFailed([f"Unknown decision kind: {kind}"]) from None
        return self.orchestrator.resolve_decision(self.get(character_id), level, decision_kind, selection)

    def steps(self, character_id: str) -> list[ProgressionStep]:
        self.get(character_id)
        return self.history.steps(character_id)

    def report(self, character_id: str) -> dict[str, Any]:
        return self.history.report(self.get(character_id))

    # -- divinity --

    def check_ascension(self, character_id: str, worship: WorshipMetrics) -> list[str]:
        return self.ladder.check_ascension(self.get(character_id), worship)

    def ascend(self, character_id: str, worship: WorshipMetrics) -> DivineRankTier:
        return self.ladder.ascend(self.get(character_id), worship)

    def advance_rank(self, character_id: str, to_rank: int) -> DivineRankTier:
        return self.ladder.advance_rank(self.get(character_id), to_rank)

    def use_cosmic_power(self, character_id: str, power_id: str) -> CosmicPowerUse:
        return self.ladder.use_cosmic_power(self.get(character_id), power_id)

    # -- spells --

    def develop_spell(
        self,
        character_id: str,
        name: str = "",
        seeds: list[str] | None = None,
        modifiers: list[str] | None = None,
        template: str | None = None,
    ) -> SpellComposition:
        snapshot = self.get(character_id)
        if template:
            composition = self.spells.compose_template(template)
        else:
            composition = self.spells.compose(name or "Unnamed Epic Spell", seeds or (), modifiers or ())
        return self.spells.develop(snapshot, composition)

    def cast(self, character_id: str, composition_id: str) -> CastOutcome:
        return self.spells.cast(self.get(character_id), composition_id)

    def rest(self, character_id: str) -> int:
        return self.spells.rest(self.get(character_id))
