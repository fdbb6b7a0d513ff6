"""Divine rank ladder: tiers 0-20, cosmic powers and the ascension gate.

Rank 0 is mortal.  Rank r (1..20) requires character level 49 + r.  Each
tier adds exactly one immunity on top of the previous tier, so replacing
the held immunity set on promotion never loses anything.

Per tier:
  divine aura radius = 10 * rank (feet)
  divine blast       = rank d12, save DC 19 + rank

Rank changes go through ``ascend`` (0 -> 1, gated) and ``advance_rank``
(strictly upward, every intermediate level gate checked).  There is no
way down.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic.dataclasses import dataclass as pydantic_dataclass

from epic_progression.config import ProgressionConfig
from epic_progression.core.character import CosmicPowerUse
from epic_progression.core.enums import ABILITY_NAMES, Ability
from epic_progression.core.errors import (
    MaxRankReached, NotFound, PrerequisiteNotMet, ValidationFailed,
)

if TYPE_CHECKING:
    from epic_progression.core.character import CharacterSnapshot
    from epic_progression.utils.locks import CharacterLocks
    from epic_progression.utils.monitor import PerformanceMonitor

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Cosmic powers
# ---------------------------------------------------------------------------

@pydantic_dataclass(frozen=True)
class CosmicPowerDef:
    """A rank-gated divine power; the mightiest also need a minimum level."""

    power_id: str
    name: str
    rank_requirement: int
    description: str
    level_requirement: int = 0


COSMIC_POWER_DEFS: dict[str, CosmicPowerDef] = {}


def _power(power_id: str, name: str, rank: int, description: str, level: int = 0) -> None:
    COSMIC_POWER_DEFS[power_id] = CosmicPowerDef(power_id, name, rank, description, level)


_power("banishment", "Banishment", 11, "Banish any creature to its home plane.")
_power("divine_inspiration", "Divine Inspiration", 11, "Inspire followers with divine fervour.")
_power("grant_spells", "Grant Spells", 11, "Grant spells to worshippers.")
_power("plane_shift", "Plane Shift", 11, "Move between planes at will.")
_power("summon_creatures", "Summon Creatures", 11, "Summon servitor creatures.")
_power("teleport_without_error", "Teleport Without Error", 11, "Teleport anywhere without mishap.")
_power("alter_size", "Alter Size", 12, "Change size at will.")
_power("create_item", "Create Item", 12, "Create any mundane or magic item.")
_power("foresight", "Foresight", 12, "Perceive danger before it arrives.")
_power("resurrection", "Resurrection", 12, "Return the dead to life.")
_power("anarchic_burst", "Anarchic Burst", 13, "Unleash a blast of pure chaos.")
_power("axiomatic_burst", "Axiomatic Burst", 13, "Unleash a blast of pure law.")
_power("energy_storm", "Energy Storm", 13, "Call down a storm of raw energy.")
_power("holy_word", "Holy Word", 13, "Speak a word of divine power.")
_power("apocalyptic_barrage", "Apocalyptic Barrage", 14, "Rain destruction over a vast area.")
_power("divine_retribution", "Divine Retribution", 14, "Strike back at those who harm your faithful.")
_power("true_resurrection", "True Resurrection", 14, "Restore the dead to perfect health.")
_power("create_life", "Create Life", 15, "Create new living creatures.")
_power("mass_divine_blast", "Mass Divine Blast", 15, "Strike many foes with divine blasts.")
_power("divine_dominion", "Divine Dominion", 16, "Rule over a portfolio absolutely.")
_power("time_stop", "Time Stop", 16, "Stop time for all but yourself.", level=85)
_power("alter_reality", "Alter Reality", 11, "Reshape reality within your portfolio.", level=80)
_power("miracle", "Miracle", 17, "Work a miracle of any kind.", level=90)
_power("shape_reality", "Shape Reality", 18, "Rewrite the laws of the cosmos locally.", level=95)
_power("wish", "Wish", 19, "Alter reality with a single word.", level=100)


# ---------------------------------------------------------------------------
# Rank tiers
# ---------------------------------------------------------------------------

_IMMUNITY_ORDER: tuple[str, ...] = (
    "charm", "compulsion", "fear", "poison", "disease",
    "ability damage", "ability drain", "energy drain", "death effects", "transmutation",
    "necromancy effects", "mind-affecting effects", "paralysis", "sleep", "stunning",
    "petrification", "polymorph", "disintegration", "imprisonment", "banishment",
)

_RANK_ABILITIES: dict[int, tuple[str, ...]] = {
    1: ("Divine Shield", "Divine Blast", "Divine Aura"),
    5: ("Divine Spellcasting",),
    10: ("Portfolio Sense",),
    15: ("Extended Divine Aura",),
    20: ("Avatar Form",),
}


@dataclass(frozen=True, slots=True)
class DivineRankTier:
    """Immutable description of one divine rank."""
    rank: int
    min_level: int
    immunities: frozenset[str]
    offensive_power: int              # Divine blast dice (d12)
    blast_save_dc: int
    aura_radius: int
    abilities: tuple[str, ...] = ()
    cosmic_powers: tuple[str, ...] = ()

    @property
    def divine_blast(self) -> str:
        return f"{self.offensive_power}d12" if self.offensive_power else ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "rank": self.rank,
            "min_level": self.min_level,
            "immunities": sorted(self.immunities),
            "offensive_power": self.offensive_power,
            "divine_blast": self.divine_blast,
            "blast_save_dc": self.blast_save_dc,
            "aura_radius": self.aura_radius,
            "abilities": list(self.abilities),
            "cosmic_powers": list(self.cosmic_powers),
        }


def build_tiers(
    config: ProgressionConfig,
    powers: dict[str, CosmicPowerDef] | None = None,
) -> tuple[DivineRankTier, ...]:
    powers = COSMIC_POWER_DEFS if powers is None else powers
    tiers = [DivineRankTier(rank=0, min_level=1, immunities=frozenset(),
                            offensive_power=0, blast_save_dc=0, aura_radius=0)]
    abilities: tuple[str, ...] = ()
    for rank in range(1, config.max_divine_rank + 1):
        abilities = abilities + _RANK_ABILITIES.get(rank, ())
        tiers.append(DivineRankTier(
            rank=rank,
            min_level=config.divine_ascension_level + rank - 1,
            immunities=frozenset(_IMMUNITY_ORDER[:rank]),
            offensive_power=rank,
            blast_save_dc=19 + rank,
            aura_radius=10 * rank,
            abilities=abilities,
            cosmic_powers=tuple(sorted(p.power_id for p in powers.values() if p.rank_requirement == rank)),
        ))
    return tuple(tiers)


# ---------------------------------------------------------------------------
# Ascension gate
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AscensionRequirements:
    min_level: int = 50
    ability_minimums: tuple[tuple[Ability, int], ...] = ((Ability.CHA, 30), (Ability.WIS, 25))
    required_capabilities: tuple[str, ...] = ("epic_leadership", "epic_reputation")
    min_followers: int = 100000
    min_temples: int = 10
    requires_realm: bool = True
    required_quests: frozenset[str] = frozenset({"divine_quest", "defeat_rival_deity", "establish_realm"})


@dataclass(frozen=True, slots=True)
class WorshipMetrics:
    """Externally tracked worship and quest state supplied by the caller."""
    followers: int = 0
    temples: int = 0
    has_realm: bool = False
    completed_quests: frozenset[str] = field(default_factory=frozenset)


# ---------------------------------------------------------------------------
# Ladder
# ---------------------------------------------------------------------------

class DivineRankLadder:
    """The only writer of a character's divine rank."""

    def __init__(
        self,
        config: ProgressionConfig | None = None,
        requirements: AscensionRequirements | None = None,
        powers: dict[str, CosmicPowerDef] | None = None,
        locks: CharacterLocks | None = None,
        monitor: PerformanceMonitor | None = None,
    ) -> None:
        self._config = config or ProgressionConfig()
        self._requirements = requirements or AscensionRequirements(min_level=self._config.divine_ascension_level)
        self._powers = COSMIC_POWER_DEFS if powers is None else powers
        self._tiers = build_tiers(self._config, self._powers)
        self._locks = locks
        self._monitor = monitor

    @property
    def tiers(self) -> tuple[DivineRankTier, ...]:
        return self._tiers

    @property
    def requirements(self) -> AscensionRequirements:
        return self._requirements

    @property
    def max_rank(self) -> int:
        return self._config.max_divine_rank

    def tier(self, rank: int) -> DivineRankTier:
        if not 0 <= rank <= self.max_rank:
            raise NotFound("divine rank", rank)
        return self._tiers[rank]

    def power(self, power_id: str) -> CosmicPowerDef:
        try:
            return self._powers[power_id]
        except KeyError:
            raise NotFound("cosmic power", power_id) from None

    def max_rank_for_level(self, level: int) -> int:
        best = 0
        for t in self._tiers[1:]:
            if t.min_level <= level:
                best = t.rank
        return best

    def available_powers(self, rank: int, level: int) -> list[str]:
        return sorted(
            p.power_id for p in self._powers.values()
            if p.rank_requirement <= rank and p.level_requirement <= level
        )

    # -- ascension --

    def check_ascension(self, snapshot: CharacterSnapshot, metrics: WorshipMetrics) -> list[str]:
        """Every unmet ascension condition; empty when ascension is allowed."""
        with self._track("ascension_check"):
            return self._check_ascension(snapshot, metrics)

    def _check_ascension(self, snapshot: CharacterSnapshot, metrics: WorshipMetrics) -> list[str]:
        req = self._requirements
        problems: list[str] = []
        if snapshot.is_divine:
            problems.append(f"Already ascended (divine rank {snapshot.divine_rank})")
        if snapshot.level < req.min_level:
            problems.append(f"Character level {req.min_level} required, currently {snapshot.level}")
        for ability, minimum in req.ability_minimums:
            score = snapshot.abilities.get(ability)
            if score < minimum:
                problems.append(f"{ABILITY_NAMES[ability]} {minimum} required, currently {score}")
        for cid in req.required_capabilities:
            if not snapshot.has_epic_capability(cid):
                problems.append(f"Epic capability {cid} required")
        if metrics.followers < req.min_followers:
            problems.append(f"{req.min_followers} followers required, currently {metrics.followers}")
        if metrics.temples < req.min_temples:
            problems.append(f"{req.min_temples} temples required, currently {metrics.temples}")
        if req.requires_realm and not metrics.has_realm:
            problems.append("A divine realm is required")
        for quest in sorted(req.required_quests - metrics.completed_quests):
            problems.append(f"Quest {quest} must be completed")
        return problems

    def ascend(self, snapshot: CharacterSnapshot, metrics: WorshipMetrics) -> DivineRankTier:
        """Mortal -> rank 1, if every ascension condition holds."""
        with self._hold(snapshot), self._track("divine_ascension"):
            if snapshot.divine_rank >= self.max_rank:
                raise MaxRankReached(snapshot.divine_rank)
            problems = self.check_ascension(snapshot, metrics)
            if problems:
                raise ValidationFailed(problems, "Divine ascension requirements not met")
            tier = self._tiers[1]
            snapshot.epic.promote(1, tier.immunities, self.available_powers(1, snapshot.level))
            snapshot.epic.ascended_at_level = snapshot.level
            logger.info("%s ascends to divinity at level %d", snapshot.name, snapshot.level)
            return tier

    def advance_rank(self, snapshot: CharacterSnapshot, to_rank: int) -> DivineRankTier:
        """Move strictly upward to *to_rank*; every intermediate level gate must hold."""
        with self._hold(snapshot), self._track("divine_ascension"):
            current = snapshot.divine_rank
            if current >= self.max_rank:
                raise MaxRankReached(current)
            problems: list[str] = []
            if current == 0:
                problems.append("A mortal must ascend before advancing divine rank")
            if to_rank <= current:
                problems.append(f"Divine rank can only increase (current {current}, requested {to_rank})")
            if to_rank > self.max_rank:
                problems.append(f"Divine rank {to_rank} exceeds the maximum of {self.max_rank}")
            if not problems:
                for r in range(current + 1, to_rank + 1):
                    t = self._tiers[r]
                    if snapshot.level < t.min_level:
                        problems.append(
                            f"Divine rank {r} requires character level {t.min_level}, currently {snapshot.level}"
                        )
            if problems:
                raise ValidationFailed(problems, "Divine rank advancement not allowed")

            for r in range(current + 1, to_rank + 1):
                t = self._tiers[r]
                snapshot.epic.promote(r, t.immunities, self.available_powers(r, snapshot.level))
            logger.info("%s advances to divine rank %d", snapshot.name, to_rank)
            return self._tiers[to_rank]

    def unlock_cosmic_powers(self, snapshot: CharacterSnapshot) -> list[str]:
        """Grant level-gated cosmic powers the held rank already qualifies for."""
        if not snapshot.is_divine:
            return []
        return snapshot.epic.add_cosmic_powers(self.available_powers(snapshot.divine_rank, snapshot.level))

    def use_cosmic_power(self, snapshot: CharacterSnapshot, power_id: str) -> CosmicPowerUse:
        with self._hold(snapshot), self._track("cosmic_power_usage"):
            p = self.power(power_id)
            if snapshot.epic is None or power_id not in snapshot.epic.cosmic_powers:
                raise PrerequisiteNotMet(power_id, [
                    f"Divine rank {p.rank_requirement} required, currently {snapshot.divine_rank}"
                    if snapshot.divine_rank < p.rank_requirement
                    else f"Character level {p.level_requirement} required, currently {snapshot.level}"
                ])
            use = CosmicPowerUse(power_id, p.name, snapshot.divine_rank, snapshot.level)
            snapshot.epic.cosmic_power_uses.append(use)
            logger.info("%s uses cosmic power %s", snapshot.name, p.name)
            return use

    # -- helpers --

    def _hold(self, snapshot: CharacterSnapshot):
        if self._locks is None:
            return nullcontext()
        return self._locks.hold(snapshot.character_id)

    def _track(self, metric: str):
        if self._monitor is None:
            return nullcontext()
        return self._monitor.track(metric)
