"""Ability scores and the epic ability-increase schedule.

Scores are stored as current totals; epic increases are added directly to
the score and also recorded on the character's epic state so they can be
audited later.  Modifiers follow the usual ``floor((score - 10) / 2)``.

Schedule:
  - one increase at every level divisible by 4, starting at 24
  - one extra increase at level 40 (explicit exception in the tables)

Ceiling (configurable via ``ProgressionConfig.ability_ceiling_rule``):
  - level_scaled: 40 + floor((level - 20) / 4)
  - flat:         40
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from epic_progression.config import ProgressionConfig
from epic_progression.core.enums import ABILITY_NAMES, Ability
from epic_progression.core.errors import CapacityExceeded, ValidationFailed

if TYPE_CHECKING:
    from epic_progression.core.character import CharacterSnapshot

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = ProgressionConfig()

_FIELDS: dict[Ability, str] = {
    Ability.STR: "str_",
    Ability.DEX: "dex",
    Ability.CON: "con",
    Ability.INT: "int_",
    Ability.WIS: "wis",
    Ability.CHA: "cha",
}

# Short keys used on the wire and in prerequisite descriptions
ABILITY_KEYS: dict[Ability, str] = {
    Ability.STR: "str",
    Ability.DEX: "dex",
    Ability.CON: "con",
    Ability.INT: "int",
    Ability.WIS: "wis",
    Ability.CHA: "cha",
}


def ability_modifier(score: int) -> int:
    return (score - 10) // 2


def parse_ability(key: str | Ability) -> Ability:
    """Accept an Ability, a short key ("str"), an enum name ("STR") or a full name."""
    if isinstance(key, Ability):
        return key
    lowered = key.strip().lower()
    for ability, short in ABILITY_KEYS.items():
        if lowered in (short, ABILITY_NAMES[ability].lower()):
            return ability
    raise ValidationFailed([f"Unknown ability: {key}"])


@dataclass(slots=True)
class AbilityScores:
    """The six ability scores of a character (current totals)."""

    str_: int = 10      # Strength
    dex: int = 10       # Dexterity
    con: int = 10       # Constitution
    int_: int = 10      # Intelligence
    wis: int = 10       # Wisdom
    cha: int = 10       # Charisma

    def get(self, ability: Ability) -> int:
        return getattr(self, _FIELDS[ability])

    def set(self, ability: Ability, value: int) -> None:
        setattr(self, _FIELDS[ability], value)

    def modifier(self, ability: Ability) -> int:
        return ability_modifier(self.get(ability))

    def highest(self) -> int:
        return max(self.get(a) for a in Ability)

    def copy(self) -> AbilityScores:
        return AbilityScores(
            str_=self.str_, dex=self.dex, con=self.con,
            int_=self.int_, wis=self.wis, cha=self.cha,
        )

    def to_dict(self) -> dict[str, int]:
        return {ABILITY_KEYS[a]: self.get(a) for a in Ability}


# ---------------------------------------------------------------------------
# Increase schedule
# ---------------------------------------------------------------------------

def due_increases(level: int, config: ProgressionConfig = _DEFAULT_CONFIG) -> int:
    """Number of ability increases granted on reaching *level*."""
    count = 0
    if level >= config.ability_increase_start and level % config.ability_increase_interval == 0:
        count += 1
    if level in config.bonus_ability_increase_levels:
        count += 1
    return count


def ability_ceiling(level: int, config: ProgressionConfig = _DEFAULT_CONFIG) -> int:
    """Highest score an ability may reach through epic increases at *level*."""
    if config.ability_ceiling_rule == "flat":
        return config.ability_ceiling_base
    steps = max(0, (level - config.epic_entry_level) // config.ability_ceiling_interval)
    return config.ability_ceiling_base + steps


def apply_increase(
    snapshot: CharacterSnapshot,
    ability: Ability,
    amount: int = 1,
    config: ProgressionConfig = _DEFAULT_CONFIG,
) -> CharacterSnapshot:
    """Raise *ability* by *amount*, one point at a time.

    The whole amount is checked against the ceiling before the first point
    is applied, so a rejected increase leaves the snapshot untouched.
    """
    if amount < 1:
        raise ValidationFailed([f"Increase amount must be positive, got {amount}"])
    current = snapshot.abilities.get(ability)
    limit = ability_ceiling(snapshot.level, config)
    if current + amount > limit:
        raise CapacityExceeded(ABILITY_NAMES[ability], limit, current + amount)

    for _ in range(amount):
        snapshot.abilities.set(ability, snapshot.abilities.get(ability) + 1)
        if snapshot.epic is not None:
            snapshot.epic.ability_increases.append((snapshot.level, ability))

    logger.info(
        "%s: %s %d -> %d",
        snapshot.name, ABILITY_NAMES[ability], current, snapshot.abilities.get(ability),
    )
    return snapshot
