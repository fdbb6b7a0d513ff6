"""Prerequisite predicates for epic capabilities.

A small tagged-variant type: each predicate is a frozen dataclass with a
``kind`` tag and evaluates structurally against a character snapshot.
Nothing is parsed from prose at runtime.

Ability predicates compare against the current total score, which already
includes any epic increases taken so far.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Iterable, Union

from epic_progression.core.abilities import ABILITY_KEYS, parse_ability
from epic_progression.core.enums import ABILITY_NAMES, Ability

if TYPE_CHECKING:
    from epic_progression.core.character import CharacterSnapshot


@dataclass(frozen=True, slots=True)
class LevelAtLeast:
    level: int
    kind: ClassVar[str] = "level"

    def is_met(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> bool:
        return (at_level if at_level is not None else snapshot.level) >= self.level

    def describe(self) -> str:
        return f"Character level {self.level}"

    def shortfall(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> str:
        current = at_level if at_level is not None else snapshot.level
        return f"Character level {self.level} required, currently {current}"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "level": self.level}


@dataclass(frozen=True, slots=True)
class AbilityAtLeast:
    ability: Ability
    score: int
    kind: ClassVar[str] = "ability"

    def is_met(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> bool:
        return snapshot.abilities.get(self.ability) >= self.score

    def describe(self) -> str:
        return f"{ABILITY_NAMES[self.ability]} {self.score}"

    def shortfall(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> str:
        current = snapshot.abilities.get(self.ability)
        return f"{ABILITY_NAMES[self.ability]} {self.score} required, currently {current}"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "ability": ABILITY_KEYS[self.ability], "score": self.score}


@dataclass(frozen=True, slots=True)
class HasCapability:
    """An ordinary (non-epic) feat or class feature, referenced by name."""
    name: str
    kind: ClassVar[str] = "capability"

    def is_met(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> bool:
        return snapshot.has_capability(self.name)

    def describe(self) -> str:
        return self.name

    def shortfall(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> str:
        return f"{self.name} required"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "name": self.name}


@dataclass(frozen=True, slots=True)
class HasEpicCapability:
    capability_id: str
    kind: ClassVar[str] = "epic_capability"

    def is_met(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> bool:
        return snapshot.has_epic_capability(self.capability_id)

    def describe(self) -> str:
        return f"Epic capability {self.capability_id}"

    def shortfall(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> str:
        return f"Epic capability {self.capability_id} required"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "capability_id": self.capability_id}


@dataclass(frozen=True, slots=True)
class ClassLevelAtLeast:
    class_name: str
    level: int
    kind: ClassVar[str] = "class_level"

    def is_met(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> bool:
        current = snapshot.class_level(self.class_name)
        # Levels taken during the advancement being evaluated count for the primary class
        if at_level is not None and self.class_name.lower() == snapshot.character_class.name.lower():
            current += max(0, at_level - snapshot.level)
        return current >= self.level

    def describe(self) -> str:
        return f"{self.class_name.title()} level {self.level}"

    def shortfall(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> str:
        current = snapshot.class_level(self.class_name)
        return f"{self.class_name.title()} level {self.level} required, currently {current}"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "class_name": self.class_name, "level": self.level}


@dataclass(frozen=True, slots=True)
class SkillRanksAtLeast:
    skill: str
    ranks: int
    kind: ClassVar[str] = "skill"

    def is_met(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> bool:
        return snapshot.skill_rank(self.skill) >= self.ranks

    def describe(self) -> str:
        return f"{self.skill.title()} {self.ranks} ranks"

    def shortfall(self, snapshot: CharacterSnapshot, at_level: int | None = None) -> str:
        current = snapshot.skill_rank(self.skill)
        return f"{self.skill.title()} {self.ranks} ranks required, currently {current}"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "skill": self.skill, "ranks": self.ranks}


Prerequisite = Union[
    LevelAtLeast, AbilityAtLeast, HasCapability,
    HasEpicCapability, ClassLevelAtLeast, SkillRanksAtLeast,
]


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def all_met(
    snapshot: CharacterSnapshot,
    prerequisites: Iterable[Prerequisite],
    at_level: int | None = None,
) -> bool:
    """Short-circuit AND over *prerequisites*."""
    return all(p.is_met(snapshot, at_level) for p in prerequisites)


def unmet(
    snapshot: CharacterSnapshot,
    prerequisites: Iterable[Prerequisite],
    at_level: int | None = None,
) -> list[str]:
    """Every failing predicate, described with the character's current value."""
    return [p.shortfall(snapshot, at_level) for p in prerequisites if not p.is_met(snapshot, at_level)]


# ---------------------------------------------------------------------------
# Compact constructors for catalog tables
# ---------------------------------------------------------------------------

def lvl(level: int) -> LevelAtLeast:
    return LevelAtLeast(level)


def ab(ability: str, score: int) -> AbilityAtLeast:
    return AbilityAtLeast(parse_ability(ability), score)


def feat(name: str) -> HasCapability:
    return HasCapability(name)


def epic(capability_id: str) -> HasEpicCapability:
    return HasEpicCapability(capability_id)


def cls(class_name: str, level: int) -> ClassLevelAtLeast:
    return ClassLevelAtLeast(class_name.lower(), level)


def skill(name: str, ranks: int) -> SkillRanksAtLeast:
    return SkillRanksAtLeast(name.lower(), ranks)
