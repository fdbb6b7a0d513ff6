"""Character snapshot: the mutable aggregate walked through epic progression.

Epic-only state lives on ``EpicState`` which exists if and only if the
character is level 21 or higher.  The divine rank is read-only from the
outside: the only writer is ``EpicState.promote``, which refuses any
non-increasing rank, and it is only called by the divine rank ladder after
its gates have been checked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from epic_progression.core.abilities import ABILITY_KEYS, AbilityScores
from epic_progression.core.classes import CLASS_DEFS, ClassDef, EpicClass
from epic_progression.core.enums import Ability, DecisionKind, SaveType

if TYPE_CHECKING:
    from epic_progression.core.spells import SpellComposition


@dataclass(frozen=True, slots=True)
class Decision:
    """A player choice surfaced by the orchestrator at a given level."""
    level: int
    kind: DecisionKind
    count: int                      # How many picks are due
    options: tuple[str, ...] = ()   # Eligible ids (abilities for ABILITY_INCREASE)

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "kind": self.kind.name.lower(),
            "count": self.count,
            "options": list(self.options),
        }


@dataclass(frozen=True, slots=True)
class CosmicPowerUse:
    power_id: str
    name: str
    rank: int
    level: int


@dataclass(slots=True)
class EpicState:
    """State that only exists once a character has reached epic levels."""

    epic_capabilities: list[str] = field(default_factory=list)   # Ordered; repeatable ids may recur
    ability_increases: list[tuple[int, Ability]] = field(default_factory=list)
    known_spells: dict[str, SpellComposition] = field(default_factory=dict)
    spell_slots: int = 0
    spell_slots_used: int = 0
    casts_attempted: int = 0
    # Divinity
    _divine_rank: int = 0
    ascended_at_level: int | None = None
    immunities: frozenset[str] = frozenset()
    cosmic_powers: list[str] = field(default_factory=list)
    cosmic_power_uses: list[CosmicPowerUse] = field(default_factory=list)

    @property
    def divine_rank(self) -> int:
        return self._divine_rank

    @property
    def spell_slots_available(self) -> int:
        return max(0, self.spell_slots - self.spell_slots_used)

    def promote(self, rank: int, immunities: frozenset[str], new_powers: list[str]) -> None:
        """Move to *rank*, replacing the immunity set and appending cosmic powers."""
        if rank <= self._divine_rank:
            raise ValueError(f"Divine rank cannot move from {self._divine_rank} to {rank}")
        self._divine_rank = rank
        self.immunities = immunities
        self.add_cosmic_powers(new_powers)

    def add_cosmic_powers(self, power_ids: list[str]) -> list[str]:
        added = [pid for pid in power_ids if pid not in self.cosmic_powers]
        self.cosmic_powers.extend(added)
        return added


@dataclass(slots=True)
class CharacterSnapshot:
    """A character under epic progression."""

    character_id: str
    name: str
    character_class: EpicClass
    level: int = 1
    experience: int = 0
    abilities: AbilityScores = field(default_factory=AbilityScores)
    # Levels per class name; empty means all levels are in character_class
    class_levels: dict[str, int] = field(default_factory=dict)
    feats: set[str] = field(default_factory=set)            # Ordinary capabilities and class features
    skills: dict[str, int] = field(default_factory=dict)    # Skill ranks by lowercase name
    spellcraft_ranks: int | None = None                     # None for non-casters
    hit_points: int = 0
    skill_points: int = 0                                   # Unspent
    base_attack_bonus: int = 0
    saves: dict[SaveType, int] = field(default_factory=lambda: {s: 0 for s in SaveType})
    # Numeric bonuses granted by epic capabilities, keyed by bonus name
    bonuses: dict[str, int] = field(default_factory=dict)
    epic: EpicState | None = None
    achieved_milestones: set[str] = field(default_factory=set)
    pending_decisions: list[Decision] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.level >= 21 and self.epic is None:
            self.epic = EpicState()

    # -- derived --

    @property
    def class_def(self) -> ClassDef:
        return CLASS_DEFS[self.character_class]

    @property
    def is_epic(self) -> bool:
        return self.epic is not None

    @property
    def is_spellcaster(self) -> bool:
        return self.spellcraft_ranks is not None

    @property
    def divine_rank(self) -> int:
        return self.epic.divine_rank if self.epic is not None else 0

    @property
    def is_divine(self) -> bool:
        return self.divine_rank > 0

    @property
    def epic_capability_count(self) -> int:
        return len(self.epic.epic_capabilities) if self.epic is not None else 0

    def class_level(self, class_name: str) -> int:
        if not self.class_levels:
            return self.level if class_name.lower() == self.character_class.name.lower() else 0
        return self.class_levels.get(class_name.lower(), 0)

    def skill_rank(self, skill: str) -> int:
        key = skill.lower()
        if key == "spellcraft" and self.spellcraft_ranks is not None:
            return self.spellcraft_ranks
        return self.skills.get(key, 0)

    def has_capability(self, name: str) -> bool:
        return name in self.feats

    def has_epic_capability(self, capability_id: str) -> bool:
        return self.epic is not None and capability_id in self.epic.epic_capabilities

    def add_bonus(self, key: str, amount: int) -> None:
        self.bonuses[key] = self.bonuses.get(key, 0) + amount

    def enter_level(self, level: int) -> None:
        """Set the level; never moves backwards, creates epic state at 21."""
        if level <= self.level:
            raise ValueError(f"Level cannot move from {self.level} to {level}")
        self.level = level
        if level >= 21 and self.epic is None:
            self.epic = EpicState()

    # -- serialization --

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "character_id": self.character_id,
            "name": self.name,
            "character_class": self.character_class.name.lower(),
            "level": self.level,
            "experience": self.experience,
            "abilities": self.abilities.to_dict(),
            "modifiers": {ABILITY_KEYS[a]: self.abilities.modifier(a) for a in Ability},
            "feats": sorted(self.feats),
            "skills": dict(self.skills),
            "spellcraft_ranks": self.spellcraft_ranks,
            "hit_points": self.hit_points,
            "skill_points": self.skill_points,
            "base_attack_bonus": self.base_attack_bonus,
            "saves": {s.name.lower(): v for s, v in self.saves.items()},
            "bonuses": dict(self.bonuses),
            "divine_rank": self.divine_rank,
            "achieved_milestones": sorted(self.achieved_milestones),
            "pending_decisions": [d.to_dict() for d in self.pending_decisions],
            "epic": None,
        }
        if self.epic is not None:
            e = self.epic
            data["epic"] = {
                "epic_capabilities": list(e.epic_capabilities),
                "ability_increases": [
                    {"level": lvl, "ability": ABILITY_KEYS[a]} for lvl, a in e.ability_increases
                ],
                "known_spells": sorted(e.known_spells),
                "spell_slots": e.spell_slots,
                "spell_slots_used": e.spell_slots_used,
                "ascended_at_level": e.ascended_at_level,
                "immunities": sorted(e.immunities),
                "cosmic_powers": list(e.cosmic_powers),
                "cosmic_power_uses": [
                    {"power_id": u.power_id, "name": u.name, "rank": u.rank, "level": u.level}
                    for u in e.cosmic_power_uses
                ],
            }
        return data
