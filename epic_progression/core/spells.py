"""Epic spell composition: seeds, modifier factors, development and casting.

Cost model (spellcraft DC):
  cost = sum(seed costs) + sum(modifier deltas), floored at 21

A caster may develop a composition when
  cost <= spellcraft ranks + Int modifier
Development takes ``cost`` days, ``cost * 9000`` gp and ``cost * 360`` XP.

Casting reserves an epic spell slot first, then rolls
  d20 + spellcraft ranks + Int modifier >= cost
A failed check keeps the slot consumed unless ``refund_failed_cast`` is set.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable

import xxhash
from pydantic.dataclasses import dataclass as pydantic_dataclass

from epic_progression.config import ProgressionConfig
from epic_progression.core.enums import Ability, Domain
from epic_progression.core.errors import (
    CapacityExceeded, InsufficientSkill, NotFound, ValidationFailed,
)
from epic_progression.systems.rng import DeterministicRNG, character_key

if TYPE_CHECKING:
    from epic_progression.core.character import CharacterSnapshot
    from epic_progression.utils.locks import CharacterLocks
    from epic_progression.utils.monitor import PerformanceMonitor

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed and modifier definitions
# ---------------------------------------------------------------------------

@pydantic_dataclass(frozen=True)
class SpellSeed:
    """Base building block of an epic spell."""

    seed_id: str
    name: str
    cost: int               # Spellcraft DC contribution
    school: str
    description: str


@pydantic_dataclass(frozen=True)
class SpellModifierDef:
    """A named factor that raises (positive) or mitigates (negative) the DC."""

    modifier_id: str
    name: str
    delta: int
    description: str


SPELL_SEEDS: dict[str, SpellSeed] = {}
SPELL_MODIFIERS: dict[str, SpellModifierDef] = {}


def _seed(seed_id: str, name: str, cost: int, school: str, description: str) -> None:
    SPELL_SEEDS[seed_id] = SpellSeed(seed_id, name, cost, school, description)


def _mod(modifier_id: str, name: str, delta: int, description: str) -> None:
    SPELL_MODIFIERS[modifier_id] = SpellModifierDef(modifier_id, name, delta, description)


_seed("afflict", "Afflict", 14, "enchantment", "Impose a penalty on a creature's checks or statistics.")
_seed("animate", "Animate", 25, "transmutation", "Give life to inanimate objects.")
_seed("animate_dead", "Animate Dead", 23, "necromancy", "Raise undead servants.")
_seed("armor", "Armor", 14, "conjuration", "Grant an armor bonus to AC.")
_seed("banish", "Banish", 27, "abjuration", "Force extraplanar creatures back to their home plane.")
_seed("compel", "Compel", 19, "enchantment", "Compel a creature to follow a course of action.")
_seed("conceal", "Conceal", 17, "illusion", "Hide creatures or objects from sight and divination.")
_seed("conjure", "Conjure", 21, "conjuration", "Create creatures or objects from nothing.")
_seed("contact", "Contact", 23, "divination", "Communicate across distances or planes.")
_seed("delude", "Delude", 14, "illusion", "Create a false impression in a creature's mind.")
_seed("destroy", "Destroy", 29, "transmutation", "Deal damage or disintegrate a target.")
_seed("dispel", "Dispel", 19, "abjuration", "End ongoing spells and magical effects.")
_seed("energy", "Energy", 19, "evocation", "Shape raw energy into a blast or wall.")
_seed("foresee", "Foresee", 17, "divination", "Glimpse the future.")
_seed("fortify", "Fortify", 17, "transmutation", "Grant an enhancement bonus to statistics.")
_seed("heal", "Heal", 25, "conjuration", "Cure wounds, ailments and conditions.")
_seed("life", "Life", 27, "conjuration", "Restore the dead to life.")
_seed("reflect", "Reflect", 27, "abjuration", "Turn attacks or spells back on their source.")
_seed("reveal", "Reveal", 19, "divination", "See and hear at a distance.")
_seed("slay", "Slay", 25, "necromancy", "Snuff out the life force of a creature.")
_seed("summon", "Summon", 14, "conjuration", "Call a creature to serve you.")
_seed("transform", "Transform", 21, "transmutation", "Change a creature's form.")
_seed("transport", "Transport", 27, "conjuration", "Move creatures or objects instantly.")
_seed("ward", "Ward", 14, "abjuration", "Protect against a type of attack or energy.")

# -- Enhancing factors --
_mod("increase_area", "Increase Area", 4, "Increase the area by 100%.")
_mod("extra_damage_die", "Extra Damage Die", 2, "Add one extra die of damage.")
_mod("extend_duration", "Extend Duration", 2, "Increase the duration by 100%.")
_mod("extend_range", "Extend Range", 2, "Increase the range by 100%.")
_mod("additional_target", "Additional Target", 10, "Affect one additional creature.")
_mod("change_target_to_area", "Change Target to Area", 10, "Change a targeted spell into an area spell.")
_mod("increase_save_dc", "Increase Save DC", 2, "Increase the saving throw DC by 1.")
_mod("quicken", "Quicken", 28, "Cast the spell as a free action.")
_mod("remove_verbal", "Remove Verbal Component", 2, "Cast the spell without speaking.")
_mod("remove_somatic", "Remove Somatic Component", 2, "Cast the spell without gestures.")
# -- Mitigating factors --
_mod("burn_xp", "Burn 100 XP", -1, "Spend 100 XP when casting.")
_mod("backlash", "Backlash 1d6", -1, "The caster takes 1d6 points of damage.")
_mod("extend_casting_time", "Extend Casting Time", -2, "Increase the casting time by 1 minute.")
_mod("ritual_participant", "Ritual Participant", -19, "Another caster contributes an epic spell slot.")


# ---------------------------------------------------------------------------
# Compositions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ModifierTerm:
    """One modifier applied to a composition; ``delta`` may be negative."""
    label: str
    delta: int

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "delta": self.delta}


@dataclass(frozen=True, slots=True)
class SpellComposition:
    """A developed epic spell. Immutable once created."""
    composition_id: str
    name: str
    seeds: tuple[str, ...]
    modifiers: tuple[ModifierTerm, ...]
    cost: int
    development_days: int
    gold_cost: int
    xp_cost: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "composition_id": self.composition_id,
            "name": self.name,
            "seeds": list(self.seeds),
            "modifiers": [m.to_dict() for m in self.modifiers],
            "cost": self.cost,
            "development_days": self.development_days,
            "gold_cost": self.gold_cost,
            "xp_cost": self.xp_cost,
        }


@dataclass(frozen=True, slots=True)
class SpellTemplate:
    """A well-known epic spell expressed as seeds plus named modifiers."""
    spell_id: str
    name: str
    seeds: tuple[str, ...]
    modifiers: tuple[str, ...] = ()
    description: str = ""


EPIC_SPELL_TEMPLATES: dict[str, SpellTemplate] = {
    t.spell_id: t for t in (
        SpellTemplate("moments_respite", "Moment's Respite", ("heal",), ("extra_damage_die",),
                      "Heals 10 points of damage per caster level."),
        SpellTemplate("ruin", "Ruin", ("destroy",), ("extend_range", "extra_damage_die"),
                      "Deals 20d6 points of damage to a single target."),
        SpellTemplate("contingent_resurrection", "Contingent Resurrection", ("life",),
                      ("extend_duration",), "Returns the subject to life when it dies."),
        SpellTemplate("damnation", "Damnation", ("banish", "transport"), ("increase_save_dc",),
                      "Sends a creature to the lower planes."),
        SpellTemplate("genesis", "Genesis", ("conjure", "fortify"), ("increase_area",),
                      "Creates a small demiplane."),
        SpellTemplate("living_vault", "Living Vault", ("animate", "conjure"), (),
                      "Creates an animated guardian vault."),
        SpellTemplate("superb_dispelling", "Superb Dispelling", ("dispel",), ("extend_range",),
                      "Dispels magic with a high bonus."),
        SpellTemplate("eclipse", "Eclipse", ("conceal", "energy"), ("increase_area", "extend_duration"),
                      "Blocks out the sun over a wide area."),
    )
}


def composition_key(seeds: Iterable[str], modifiers: Iterable[ModifierTerm]) -> str:
    """Order-independent identity of a seed set plus modifier set."""
    seed_part = ",".join(sorted(seeds))
    mod_part = ",".join(sorted(f"{m.label}:{m.delta}" for m in modifiers))
    return xxhash.xxh64(f"{seed_part}|{mod_part}".encode("utf-8")).hexdigest()


@dataclass(frozen=True, slots=True)
class CastOutcome:
    composition_id: str
    success: bool
    roll: int
    bonus: int
    total: int
    dc: int
    slot_consumed: bool
    slots_remaining: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "composition_id": self.composition_id,
            "success": self.success,
            "roll": self.roll,
            "bonus": self.bonus,
            "total": self.total,
            "dc": self.dc,
            "slot_consumed": self.slot_consumed,
            "slots_remaining": self.slots_remaining,
        }


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

class SpellCalculator:
    """Computes composition costs and manages development, slots and casting."""

    def __init__(
        self,
        config: ProgressionConfig | None = None,
        seeds: dict[str, SpellSeed] | None = None,
        modifiers: dict[str, SpellModifierDef] | None = None,
        rng: DeterministicRNG | None = None,
        locks: CharacterLocks | None = None,
        monitor: PerformanceMonitor | None = None,
    ) -> None:
        self._config = config or ProgressionConfig()
        self._seeds = seeds if seeds is not None else SPELL_SEEDS
        self._modifiers = modifiers if modifiers is not None else SPELL_MODIFIERS
        self._rng = rng or DeterministicRNG(self._config.rng_seed)
        self._locks = locks
        self._monitor = monitor

    # -- lookups --

    def seed(self, seed_id: str) -> SpellSeed:
        try:
            return self._seeds[seed_id]
        except KeyError:
            raise NotFound("spell seed", seed_id) from None

    def modifier(self, modifier_id: str) -> ModifierTerm:
        try:
            m = self._modifiers[modifier_id]
        except KeyError:
            raise NotFound("spell modifier", modifier_id) from None
        return ModifierTerm(m.modifier_id, m.delta)

    @property
    def seeds(self) -> list[SpellSeed]:
        return list(self._seeds.values())

    @property
    def modifier_defs(self) -> list[SpellModifierDef]:
        return list(self._modifiers.values())

    # -- cost --

    def compose_cost(
        self,
        seeds: Iterable[str | SpellSeed],
        modifiers: Iterable[ModifierTerm | int] = (),
    ) -> int:
        """Sum of seed costs and modifier deltas, never below the minimum spell cost."""
        total = 0
        for s in seeds:
            total += s.cost if isinstance(s, SpellSeed) else self.seed(s).cost
        for m in modifiers:
            total += m if isinstance(m, int) else m.delta
        return max(self._config.min_spell_cost, total)

    def compose(
        self,
        name: str,
        seeds: Iterable[str],
        modifiers: Iterable[ModifierTerm | str] = (),
    ) -> SpellComposition:
        """Build (but do not store) a composition from seed ids and modifier terms or ids."""
        seed_ids = tuple(seeds)
        if not seed_ids:
            raise ValidationFailed(["An epic spell needs at least one seed"])
        terms = tuple(m if isinstance(m, ModifierTerm) else self.modifier(m) for m in modifiers)
        with self._track("spell_database_query"):
            cost = self.compose_cost(seed_ids, terms)
        return SpellComposition(
            composition_id=composition_key(seed_ids, terms),
            name=name,
            seeds=seed_ids,
            modifiers=terms,
            cost=cost,
            development_days=cost,
            gold_cost=cost * self._config.gold_per_spell_dc,
            xp_cost=cost * self._config.xp_per_spell_dc,
        )

    def compose_template(self, spell_id: str) -> SpellComposition:
        try:
            t = EPIC_SPELL_TEMPLATES[spell_id]
        except KeyError:
            raise NotFound("epic spell", spell_id) from None
        return self.compose(t.name, t.seeds, t.modifiers)

    # -- development --

    def spellcraft_bonus(self, snapshot: CharacterSnapshot) -> int:
        if snapshot.spellcraft_ranks is None:
            return 0
        return snapshot.spellcraft_ranks + snapshot.abilities.modifier(Ability.INT)

    def can_develop(self, snapshot: CharacterSnapshot, cost: int) -> bool:
        return snapshot.is_spellcaster and cost <= self.spellcraft_bonus(snapshot)

    def develop(self, snapshot: CharacterSnapshot, composition: SpellComposition) -> SpellComposition:
        """Add *composition* to the caster's known spells.

        Developing an already-known seed/modifier combination returns the
        stored record unchanged.
        """
        with self._hold(snapshot), self._track("spell_development"):
            if snapshot.epic is None or not snapshot.is_spellcaster:
                raise ValidationFailed([f"{snapshot.name} is not an epic spellcaster"])
            known = snapshot.epic.known_spells.get(composition.composition_id)
            if known is not None:
                return known
            if not self.can_develop(snapshot, composition.cost):
                raise InsufficientSkill(composition.cost, self.spellcraft_bonus(snapshot))
            snapshot.epic.known_spells[composition.composition_id] = composition
            logger.info(
                "%s develops %s (DC %d, %d days, %d gp, %d XP)",
                snapshot.name, composition.name, composition.cost,
                composition.development_days, composition.gold_cost, composition.xp_cost,
            )
            return composition

    # -- slots --

    def slots_for(self, snapshot: CharacterSnapshot) -> int:
        if snapshot.epic is None or not snapshot.is_spellcaster:
            return 0
        return max(1, (snapshot.spellcraft_ranks or 0) // self._config.spell_slot_ranks)

    def refresh_slots(self, snapshot: CharacterSnapshot) -> int:
        """Raise the slot total to what the caster now qualifies for; return slots gained."""
        if snapshot.epic is None:
            return 0
        target = self.slots_for(snapshot)
        gained = max(0, target - snapshot.epic.spell_slots)
        snapshot.epic.spell_slots += gained
        return gained

    def rest(self, snapshot: CharacterSnapshot) -> int:
        """Replenish every used epic spell slot; return the number restored."""
        with self._hold(snapshot), self._track("spell_rest"):
            if snapshot.epic is None:
                return 0
            restored = snapshot.epic.spell_slots_used
            snapshot.epic.spell_slots_used = 0
            return restored

    # -- casting --

    def cast(
        self,
        snapshot: CharacterSnapshot,
        composition_id: str,
        roller: Callable[[], int] | None = None,
    ) -> CastOutcome:
        with self._hold(snapshot), self._track("spell_casting"):
            if snapshot.epic is None:
                raise ValidationFailed([f"{snapshot.name} is not an epic spellcaster"])
            epic = snapshot.epic
            composition = epic.known_spells.get(composition_id)
            if composition is None:
                raise NotFound("known epic spell", composition_id)
            if epic.spell_slots_available < 1:
                raise CapacityExceeded("epic spell slots", epic.spell_slots, epic.spell_slots_used + 1)

            # Reserve the slot before the check
            epic.spell_slots_used += 1
            counter = epic.casts_attempted
            epic.casts_attempted += 1

            try:
                if roller is not None:
                    roll = roller()
                else:
                    roll = self._rng.d20(Domain.SPELLCRAFT, character_key(snapshot.character_id), counter)
            except Exception:
                epic.spell_slots_used -= 1
                epic.casts_attempted -= 1
                raise
            bonus = self.spellcraft_bonus(snapshot)
            total = roll + bonus
            success = total >= composition.cost

            slot_consumed = True
            if not success and self._config.refund_failed_cast:
                epic.spell_slots_used -= 1
                slot_consumed = False

            if success:
                logger.info("%s casts %s (%d vs DC %d)", snapshot.name, composition.name, total, composition.cost)
            else:
                logger.info("%s fails to cast %s (%d vs DC %d)", snapshot.name, composition.name, total, composition.cost)
            return CastOutcome(
                composition_id=composition_id,
                success=success,
                roll=roll,
                bonus=bonus,
                total=total,
                dc=composition.cost,
                slot_consumed=slot_consumed,
                slots_remaining=epic.spell_slots_available,
            )

    def _hold(self, snapshot: CharacterSnapshot):
        if self._locks is None:
            return nullcontext()
        return self._locks.hold(snapshot.character_id)

    def _track(self, metric: str):
        if self._monitor is None:
            return nullcontext()
        return self._monitor.track(metric)
