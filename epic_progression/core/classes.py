"""Epic class progression tables.

Each base class carries:
  - Hit die and skill points per level (per-level HP / skill point gain)
  - Attack and saving-throw progression rates
  - Whether it casts spells (epic spell slots, spellcraft checks)
  - Epic class features reached at specific levels

Attack bonus and saves keep their pre-epic formulas past level 20:
  good BAB = L, average = floor(3L/4), poor = floor(L/2)
  good save = 2 + floor(L/2), poor save = floor(L/3)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, unique

from epic_progression.core.enums import ProgressionRate, SaveType
from epic_progression.core.errors import NotFound


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

@unique
class EpicClass(IntEnum):
    """Base class identities."""
    BARBARIAN = 1
    BARD = 2
    CLERIC = 3
    DRUID = 4
    FIGHTER = 5
    MONK = 6
    PALADIN = 7
    RANGER = 8
    ROGUE = 9
    SORCERER = 10
    WIZARD = 11


ATTACK_RATES: dict[ProgressionRate, float] = {
    ProgressionRate.GOOD: 1.0,
    ProgressionRate.AVERAGE: 0.75,
    ProgressionRate.POOR: 0.5,
}


# ---------------------------------------------------------------------------
# Class definition
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ClassDef:
    """Immutable epic class template."""
    class_id: EpicClass
    name: str
    description: str
    hit_die: int
    skill_points: int              # Per level, before the Int modifier
    attack: ProgressionRate
    fortitude: ProgressionRate
    reflex: ProgressionRate
    will: ProgressionRate
    spellcaster: bool = False
    # (level, feature name) pairs, ascending by level
    epic_features: tuple[tuple[int, str], ...] = ()

    def save_rate(self, save: SaveType) -> ProgressionRate:
        if save == SaveType.FORTITUDE:
            return self.fortitude
        if save == SaveType.REFLEX:
            return self.reflex
        return self.will

    def features_at(self, level: int) -> list[str]:
        return [name for lvl, name in self.epic_features if lvl == level]


_G = ProgressionRate.GOOD
_A = ProgressionRate.AVERAGE
_P = ProgressionRate.POOR

CLASS_DEFS: dict[EpicClass, ClassDef] = {
    EpicClass.BARBARIAN: ClassDef(
        EpicClass.BARBARIAN, "Barbarian", "Ferocious warrior fuelled by rage.",
        hit_die=12, skill_points=4, attack=_G, fortitude=_G, reflex=_P, will=_P,
        epic_features=(
            (22, "Damage Reduction +1"), (25, "Greater Rage"), (28, "Damage Reduction +2"),
            (31, "Mighty Rage"), (34, "Damage Reduction +3"), (37, "Legendary Rage"),
        ),
    ),
    EpicClass.BARD: ClassDef(
        EpicClass.BARD, "Bard", "Performer whose music weaves magic.",
        hit_die=6, skill_points=6, attack=_A, fortitude=_P, reflex=_G, will=_G,
        spellcaster=True,
        epic_features=(
            (23, "Epic Bardic Music"), (26, "Epic Bardic Knowledge"),
            (29, "Epic Inspire Courage +3"), (32, "Epic Inspire Courage +4"),
        ),
    ),
    EpicClass.CLERIC: ClassDef(
        EpicClass.CLERIC, "Cleric", "Divine servant channelling a deity's power.",
        hit_die=8, skill_points=2, attack=_A, fortitude=_G, reflex=_P, will=_G,
        spellcaster=True,
        epic_features=(
            (22, "Epic Turn Undead"), (25, "Divine Spell Power"),
            (28, "Epic Domain Power"), (31, "Divine Ascension"),
        ),
    ),
    EpicClass.DRUID: ClassDef(
        EpicClass.DRUID, "Druid", "Guardian of nature and shapechanger.",
        hit_die=8, skill_points=4, attack=_A, fortitude=_G, reflex=_P, will=_G,
        spellcaster=True,
        epic_features=(
            (22, "Epic Wild Shape"), (25, "Timeless Body Enhancement"),
            (28, "Epic Animal Companion"), (31, "Nature's Wrath"),
        ),
    ),
    EpicClass.FIGHTER: ClassDef(
        EpicClass.FIGHTER, "Fighter", "Master of arms and armor.",
        hit_die=10, skill_points=2, attack=_G, fortitude=_G, reflex=_P, will=_P,
        epic_features=(
            (22, "Epic Weapon Specialization"), (24, "Epic Weapon Focus"),
            (26, "Epic Greater Weapon Specialization"), (28, "Epic Greater Weapon Focus"),
            (30, "Legendary Weapon Master"),
        ),
    ),
    EpicClass.MONK: ClassDef(
        EpicClass.MONK, "Monk", "Martial artist of perfect discipline.",
        hit_die=8, skill_points=4, attack=_A, fortitude=_G, reflex=_G, will=_G,
        epic_features=(
            (21, "Epic Unarmed Strike"), (23, "Epic Speed"), (25, "Epic Ki Strike"),
            (27, "Perfect Self Enhancement"), (29, "Epic Flurry"),
        ),
    ),
    EpicClass.PALADIN: ClassDef(
        EpicClass.PALADIN, "Paladin", "Holy champion of law and good.",
        hit_die=10, skill_points=2, attack=_G, fortitude=_G, reflex=_P, will=_P,
        spellcaster=True,
        epic_features=(
            (22, "Epic Smite Evil"), (25, "Epic Lay on Hands"),
            (28, "Epic Divine Grace"), (31, "Legendary Paladin"),
        ),
    ),
    EpicClass.RANGER: ClassDef(
        EpicClass.RANGER, "Ranger", "Tracker and hunter of the wilds.",
        hit_die=8, skill_points=6, attack=_G, fortitude=_G, reflex=_G, will=_P,
        spellcaster=True,
        epic_features=(
            (22, "Epic Favored Enemy"), (25, "Epic Track"),
            (28, "Epic Animal Companion"), (31, "Legendary Ranger"),
        ),
    ),
    EpicClass.ROGUE: ClassDef(
        EpicClass.ROGUE, "Rogue", "Skilled infiltrator striking from the shadows.",
        hit_die=6, skill_points=8, attack=_A, fortitude=_P, reflex=_G, will=_P,
        epic_features=(
            (21, "Epic Sneak Attack +1d6"), (23, "Epic Sneak Attack +2d6"),
            (25, "Epic Sneak Attack +3d6"), (27, "Epic Sneak Attack +4d6"),
            (29, "Epic Sneak Attack +5d6"),
        ),
    ),
    EpicClass.SORCERER: ClassDef(
        EpicClass.SORCERER, "Sorcerer", "Innate arcane caster.",
        hit_die=4, skill_points=2, attack=_P, fortitude=_P, reflex=_P, will=_G,
        spellcaster=True,
        epic_features=(
            (21, "Epic Spell Slots"), (24, "Epic Metamagic"),
            (27, "Epic Sorcery"), (30, "Legendary Spellcaster"),
        ),
    ),
    EpicClass.WIZARD: ClassDef(
        EpicClass.WIZARD, "Wizard", "Scholar of arcane formulae.",
        hit_die=4, skill_points=2, attack=_P, fortitude=_P, reflex=_P, will=_G,
        spellcaster=True,
        epic_features=(
            (21, "Epic Spell Slots"), (24, "Epic Spellbook"),
            (27, "Epic School Specialization"), (30, "Archmage Powers"),
        ),
    ),
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def class_by_name(name: str | EpicClass) -> EpicClass:
    if isinstance(name, EpicClass):
        return name
    try:
        return EpicClass[name.strip().upper()]
    except KeyError:
        raise NotFound("class", name) from None


def attack_bonus_at(rate: ProgressionRate, level: int) -> int:
    return int(level * ATTACK_RATES[rate])


def attack_bonus_delta(cdef: ClassDef, level: int) -> int:
    """Base attack bonus gained on reaching *level*."""
    return attack_bonus_at(cdef.attack, level) - attack_bonus_at(cdef.attack, level - 1)


def save_bonus_at(rate: ProgressionRate, level: int) -> int:
    if rate == ProgressionRate.GOOD:
        return 2 + level // 2
    return level // 3


def save_delta(cdef: ClassDef, save: SaveType, level: int) -> int:
    rate = cdef.save_rate(save)
    return save_bonus_at(rate, level) - save_bonus_at(rate, level - 1)
