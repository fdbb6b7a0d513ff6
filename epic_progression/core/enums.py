"""Enumerations used throughout the rules engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class Ability(IntEnum):
    """The six ability scores."""

    STR = 0
    DEX = 1
    CON = 2
    INT = 3
    WIS = 4
    CHA = 5


ABILITY_NAMES: dict[Ability, str] = {
    Ability.STR: "Strength",
    Ability.DEX: "Dexterity",
    Ability.CON: "Constitution",
    Ability.INT: "Intelligence",
    Ability.WIS: "Wisdom",
    Ability.CHA: "Charisma",
}


@unique
class SaveType(IntEnum):
    """Saving throw categories."""

    FORTITUDE = 0
    REFLEX = 1
    WILL = 2


@unique
class ProgressionRate(IntEnum):
    """How fast a class gains attack bonus or a saving throw."""

    POOR = 0
    AVERAGE = 1
    GOOD = 2


@unique
class CapabilityCategory(IntEnum):
    """Category tag of an epic capability."""

    COMBAT = 0
    DEFENSIVE = 1
    MAGIC = 2
    DIVINE = 3
    PSIONIC = 4
    UTILITY = 5
    SKILL = 6
    ABILITY = 7
    LEADERSHIP = 8
    SOCIAL = 9
    ITEM_CREATION = 10
    EPIC_ABILITY = 11    # Tiered abilities chained on their previous tier


@unique
class EffectKind(IntEnum):
    """What a capability effect changes on the character."""

    UNLOCK = 0           # Qualitative unlock, no numeric change
    HIT_POINTS = 1
    ATTACK = 2
    DAMAGE = 3
    SAVE = 4             # target = SaveType name
    ABILITY = 5          # target = Ability name
    SKILL = 6            # target = skill name
    SPEED = 7
    INITIATIVE = 8
    ARMOR_CLASS = 9
    DAMAGE_REDUCTION = 10
    SPELL_RESISTANCE = 11


@unique
class DecisionKind(IntEnum):
    """Player choices the orchestrator surfaces instead of guessing."""

    EPIC_CAPABILITY = 0
    ABILITY_INCREASE = 1


@unique
class AlertLevel(IntEnum):
    """Severity of a performance alert."""

    WARNING = 0
    CRITICAL = 1


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    SPELLCRAFT = 0
