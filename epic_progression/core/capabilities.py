"""Capability catalog: immutable epic feat / epic ability descriptors and queries.

Descriptors are plain content (see ``epic_feats.py``); this module holds the
evaluation code that queries them:

  - ``meets_prerequisites``: short-circuit AND over the predicate list
  - ``list_eligible``: every satisfied, not-yet-held capability ordered by
    power score (descending), ties broken by id
  - ``grant_capability``: checked acquisition that applies numeric effects,
    refusing any ability effect that would pass the ability ceiling

Power score = sum of weighted effect magnitudes
            + 2 per ordinary prerequisite + 3 per ability prerequisite
            + 5 per level of epic-prerequisite chain depth
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator

from epic_progression.config import ProgressionConfig
from epic_progression.core.abilities import ability_ceiling
from epic_progression.core.enums import ABILITY_NAMES, Ability, CapabilityCategory, EffectKind, SaveType
from epic_progression.core.errors import CapacityExceeded, NotFound, PrerequisiteNotMet, ValidationFailed
from epic_progression.core.prerequisites import (
    AbilityAtLeast, HasCapability, HasEpicCapability, Prerequisite,
    all_met, unmet,
)

if TYPE_CHECKING:
    from epic_progression.core.character import CharacterSnapshot
    from epic_progression.utils.monitor import PerformanceMonitor

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CapabilityEffect:
    """One numeric bonus, derived-stat change, or qualitative unlock."""
    kind: EffectKind
    magnitude: int = 0
    target: str = ""        # Save / ability / skill name where relevant

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.name.lower(), "magnitude": self.magnitude, "target": self.target}


@dataclass(frozen=True, slots=True)
class CapabilityDef:
    """Immutable epic capability descriptor."""
    capability_id: str
    name: str
    category: CapabilityCategory
    description: str
    benefit: str
    prerequisites: tuple[Prerequisite, ...] = ()
    effects: tuple[CapabilityEffect, ...] = ()
    repeatable: bool = False
    min_level: int = 21

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.capability_id,
            "name": self.name,
            "category": self.category.name.lower(),
            "description": self.description,
            "benefit": self.benefit,
            "prerequisites": [p.to_dict() for p in self.prerequisites],
            "prerequisite_text": [p.describe() for p in self.prerequisites],
            "effects": [e.to_dict() for e in self.effects],
            "repeatable": self.repeatable,
            "min_level": self.min_level,
        }


# Weight per point of effect magnitude in the power heuristic
EFFECT_WEIGHTS: dict[EffectKind, float] = {
    EffectKind.UNLOCK: 5.0,
    EffectKind.HIT_POINTS: 0.25,
    EffectKind.ATTACK: 2.0,
    EffectKind.DAMAGE: 3.0,
    EffectKind.SAVE: 0.5,
    EffectKind.ABILITY: 3.0,
    EffectKind.SKILL: 0.2,
    EffectKind.SPEED: 0.1,
    EffectKind.INITIATIVE: 0.5,
    EffectKind.ARMOR_CLASS: 2.0,
    EffectKind.DAMAGE_REDUCTION: 2.0,
    EffectKind.SPELL_RESISTANCE: 0.5,
}

ORDINARY_PREREQ_WEIGHT = 2.0
ABILITY_PREREQ_WEIGHT = 3.0
CHAIN_DEPTH_WEIGHT = 5.0


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class CapabilityCatalog:
    """Read-only registry of capability descriptors keyed by id.

    Built once and injected into the orchestrator.  Construction validates
    that every epic-capability reference resolves inside the catalog, so a
    ``NotFound`` at query time indicates a programming error.
    """

    def __init__(
        self,
        defs: dict[str, CapabilityDef],
        monitor: PerformanceMonitor | None = None,
        config: ProgressionConfig | None = None,
    ) -> None:
        self._defs: dict[str, CapabilityDef] = dict(defs)
        self._monitor = monitor
        self._config = config or ProgressionConfig()
        self._validate()
        self._depths: dict[str, int] = {}
        for cid in self._defs:
            self._depths[cid] = self._chain_depth(cid, ())
        self._scores: dict[str, float] = {cid: self._score(cid) for cid in self._defs}
        logger.debug("Capability catalog loaded with %d descriptors", len(self._defs))

    def _validate(self) -> None:
        problems: list[str] = []
        for cid, d in self._defs.items():
            if cid != d.capability_id:
                problems.append(f"{cid}: registered under a different id ({d.capability_id})")
            for p in d.prerequisites:
                if isinstance(p, HasEpicCapability) and p.capability_id not in self._defs:
                    problems.append(f"{cid}: unknown epic prerequisite {p.capability_id}")
        if problems:
            raise ValueError("Invalid capability catalog: " + "; ".join(problems))

    def _chain_depth(self, cid: str, seen: tuple[str, ...]) -> int:
        if cid in seen:
            raise ValueError(f"Prerequisite cycle through {cid}")
        if cid in self._depths:
            return self._depths[cid]
        refs = [p.capability_id for p in self._defs[cid].prerequisites if isinstance(p, HasEpicCapability)]
        if not refs:
            return 0
        return 1 + max(self._chain_depth(r, seen + (cid,)) for r in refs)

    def _score(self, cid: str) -> float:
        d = self._defs[cid]
        score = 0.0
        for e in d.effects:
            score += EFFECT_WEIGHTS[e.kind] * (abs(e.magnitude) if e.kind != EffectKind.UNLOCK else 1)
        for p in d.prerequisites:
            if isinstance(p, AbilityAtLeast):
                score += ABILITY_PREREQ_WEIGHT
            elif isinstance(p, HasCapability):
                score += ORDINARY_PREREQ_WEIGHT
        score += CHAIN_DEPTH_WEIGHT * self._depths[cid]
        return score

    # -- lookup --

    def get(self, capability_id: str) -> CapabilityDef:
        try:
            return self._defs[capability_id]
        except KeyError:
            raise NotFound("capability", capability_id) from None

    def __contains__(self, capability_id: object) -> bool:
        return capability_id in self._defs

    def __iter__(self) -> Iterator[CapabilityDef]:
        return iter(self._defs.values())

    def __len__(self) -> int:
        return len(self._defs)

    def by_category(self, category: CapabilityCategory) -> list[CapabilityDef]:
        return [d for d in self._defs.values() if d.category == category]

    def power_score(self, capability_id: str) -> float:
        self.get(capability_id)
        return self._scores[capability_id]

    def chain_depth(self, capability_id: str) -> int:
        self.get(capability_id)
        return self._depths[capability_id]

    # -- evaluation --

    def meets_prerequisites(
        self,
        snapshot: CharacterSnapshot,
        descriptor: CapabilityDef | str,
        at_level: int | None = None,
    ) -> bool:
        d = self.get(descriptor) if isinstance(descriptor, str) else descriptor
        return all_met(snapshot, d.prerequisites, at_level)

    def unmet_prerequisites(
        self,
        snapshot: CharacterSnapshot,
        capability_id: str,
        at_level: int | None = None,
    ) -> list[str]:
        return unmet(snapshot, self.get(capability_id).prerequisites, at_level)

    def is_held(self, snapshot: CharacterSnapshot, d: CapabilityDef) -> bool:
        return snapshot.has_epic_capability(d.capability_id)

    def ceiling_overflow(
        self,
        snapshot: CharacterSnapshot,
        d: CapabilityDef,
        at_level: int | None = None,
    ) -> tuple[Ability, int, int] | None:
        """First ability effect of *d* that would push a score past the ceiling.

        Returns ``(ability, ceiling, attempted)``, or None when every ability
        effect fits.
        """
        limit = ability_ceiling(snapshot.level if at_level is None else at_level, self._config)
        raised: dict[Ability, int] = {}
        for e in d.effects:
            if e.kind != EffectKind.ABILITY:
                continue
            ability = Ability[e.target.upper()]
            raised[ability] = raised.get(ability, snapshot.abilities.get(ability)) + e.magnitude
            if raised[ability] > limit:
                return ability, limit, raised[ability]
        return None

    def list_eligible(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> list[CapabilityDef]:
        """Satisfied capabilities not already held (unless repeatable), strongest first."""
        if self._monitor is not None:
            with self._monitor.track("feat_validation"):
                return self._list_eligible(snapshot, at_level)
        return self._list_eligible(snapshot, at_level)

    def _list_eligible(self, snapshot: CharacterSnapshot, at_level: int | None) -> list[CapabilityDef]:
        eligible = [
            d for d in self._defs.values()
            if (d.repeatable or not self.is_held(snapshot, d))
            and all_met(snapshot, d.prerequisites, at_level)
            and self.ceiling_overflow(snapshot, d, at_level) is None
        ]
        eligible.sort(key=lambda d: (-self._scores[d.capability_id], d.capability_id))
        return eligible


# ---------------------------------------------------------------------------
# Acquisition
# ---------------------------------------------------------------------------

def apply_effect(snapshot: CharacterSnapshot, effect: CapabilityEffect) -> None:
    kind = effect.kind
    if kind == EffectKind.UNLOCK:
        return
    if kind == EffectKind.HIT_POINTS:
        snapshot.hit_points += effect.magnitude
    elif kind == EffectKind.SAVE:
        save = SaveType[effect.target.upper()]
        snapshot.saves[save] = snapshot.saves.get(save, 0) + effect.magnitude
    elif kind == EffectKind.ABILITY:
        ability = Ability[effect.target.upper()]
        snapshot.abilities.set(ability, snapshot.abilities.get(ability) + effect.magnitude)
    elif kind == EffectKind.SKILL:
        snapshot.add_bonus(f"skill:{effect.target.lower()}", effect.magnitude)
    else:
        snapshot.add_bonus(kind.name.lower(), effect.magnitude)


def grant_capability(
    catalog: CapabilityCatalog,
    snapshot: CharacterSnapshot,
    capability_id: str,
    at_level: int | None = None,
) -> CapabilityDef:
    """Add an epic capability to *snapshot* after re-checking its prerequisites."""
    d = catalog.get(capability_id)
    if snapshot.epic is None:
        raise ValidationFailed([f"Epic capabilities require level 21, currently {snapshot.level}"])
    if not d.repeatable and catalog.is_held(snapshot, d):
        raise PrerequisiteNotMet(capability_id, [f"{d.name} is already held and not repeatable"])
    missing = catalog.unmet_prerequisites(snapshot, capability_id, at_level)
    if missing:
        raise PrerequisiteNotMet(capability_id, missing)
    overflow = catalog.ceiling_overflow(snapshot, d, at_level)
    if overflow is not None:
        ability, limit, attempted = overflow
        raise CapacityExceeded(ABILITY_NAMES[ability], limit, attempted)

    snapshot.epic.epic_capabilities.append(capability_id)
    for effect in d.effects:
        apply_effect(snapshot, effect)
    logger.info("%s gains epic capability %s", snapshot.name, d.name)
    return d
