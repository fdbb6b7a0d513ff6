"""Thread-safe per-character progression log and milestone tracker."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from epic_progression.core.milestones import MILESTONE_DEFS, MilestoneDef

if TYPE_CHECKING:
    from epic_progression.core.character import CharacterSnapshot
    from epic_progression.engine.progression import ProgressionStep

logger = logging.getLogger(__name__)


class ProgressionHistory:
    """Append-only step log per character plus milestone evaluation.

    Recorded steps are immutable and never rewritten.  Milestone evaluation
    is a pure query: merging the result into the snapshot is the caller's job.
    """

    __slots__ = ("_logs", "_milestones", "_lock")

    def __init__(self, milestones: dict[str, MilestoneDef] | None = None) -> None:
        self._logs: dict[str, list[ProgressionStep]] = {}
        self._milestones = MILESTONE_DEFS if milestones is None else milestones
        self._lock = threading.Lock()

    @property
    def milestones(self) -> list[MilestoneDef]:
        return list(self._milestones.values())

    def record(self, character_id: str, step: ProgressionStep) -> None:
        with self._lock:
            self._logs.setdefault(character_id, []).append(step)

    def steps(self, character_id: str) -> list[ProgressionStep]:
        with self._lock:
            return list(self._logs.get(character_id, ()))

    def since_level(self, character_id: str, level: int) -> list[ProgressionStep]:
        """Return all steps with level >= *level*."""
        with self._lock:
            return [s for s in self._logs.get(character_id, ()) if s.level >= level]

    def tracked(self) -> list[str]:
        with self._lock:
            return sorted(self._logs)

    def evaluate_milestones(self, snapshot: CharacterSnapshot) -> list[str]:
        """Ids of milestones not yet achieved that *snapshot* now satisfies."""
        return [
            m.milestone_id for m in self._milestones.values()
            if m.milestone_id not in snapshot.achieved_milestones and m.is_met(snapshot)
        ]

    def report(self, snapshot: CharacterSnapshot) -> dict[str, Any]:
        steps = self.steps(snapshot.character_id)
        achieved = [m for m in self._milestones if m in snapshot.achieved_milestones]
        upcoming = sorted(
            (m for m in self._milestones.values() if m.milestone_id not in snapshot.achieved_milestones),
            key=lambda m: (m.level, m.milestone_id),
        )
        total = len(self._milestones)
        return {
            "character_id": snapshot.character_id,
            "name": snapshot.name,
            "level": snapshot.level,
            "divine_rank": snapshot.divine_rank,
            "levels_gained": len(steps),
            "hit_points_gained": sum(s.hp_gain for s in steps),
            "skill_points_gained": sum(s.skill_point_gain for s in steps),
            "capability_decisions": sum(1 for s in steps if s.capability_decision is not None),
            "ability_increases_due": sum(s.ability_decision.count for s in steps if s.ability_decision is not None),
            "epic_capabilities": snapshot.epic_capability_count,
            "achieved_milestones": achieved,
            "completion_percent": round(100.0 * len(achieved) / total, 1) if total else 0.0,
            "next_milestones": [m.to_dict() for m in upcoming[:5]],
        }

    def stop_tracking(self, snapshot: CharacterSnapshot) -> dict[str, Any]:
        """Final report for *snapshot*; its step log is dropped afterwards."""
        report = self.report(snapshot)
        with self._lock:
            self._logs.pop(snapshot.character_id, None)
        logger.info("Stopped tracking %s", snapshot.name)
        return report
