"""Metadata endpoints — expose all rule content so clients have zero hardcoded data.

Seed, modifier and cosmic power definitions are pydantic dataclasses from
epic_progression/core/ and are serialized directly through TypeAdapters.  The
remaining definitions get thin response views here.
"""

from __future__ import annotations

from pydantic import BaseModel, TypeAdapter

from fastapi import APIRouter

from epic_progression.config import ProgressionConfig
from epic_progression.core.abilities import ABILITY_KEYS, ability_ceiling, due_increases
from epic_progression.core.capabilities import EFFECT_WEIGHTS, CapabilityCatalog
from epic_progression.core.classes import CLASS_DEFS, ClassDef
from epic_progression.core.divine import COSMIC_POWER_DEFS, CosmicPowerDef, build_tiers
from epic_progression.core.enums import (
    ABILITY_NAMES, Ability, CapabilityCategory, DecisionKind, EffectKind,
    ProgressionRate, SaveType,
)
from epic_progression.core.epic_feats import EPIC_CAPABILITY_DEFS
from epic_progression.core.experience import experience_table
from epic_progression.core.milestones import MILESTONE_DEFS
from epic_progression.core.spells import (
    EPIC_SPELL_TEMPLATES, SPELL_MODIFIERS, SPELL_SEEDS, SpellModifierDef, SpellSeed,
)

router = APIRouter(prefix="/metadata", tags=["Metadata"])

_CONFIG = ProgressionConfig()
_CATALOG = CapabilityCatalog(EPIC_CAPABILITY_DEFS, config=_CONFIG)


# ---------------------------------------------------------------------------
# Response schemas for data not already held in pydantic core models
# ---------------------------------------------------------------------------

class EnumEntry(BaseModel):
    id: int
    name: str
    description: str = ""


class EnumsResponse(BaseModel):
    abilities: list[EnumEntry]
    saves: list[EnumEntry]
    progression_rates: list[EnumEntry]
    capability_categories: list[EnumEntry]
    effect_kinds: list[EnumEntry]
    decision_kinds: list[EnumEntry]


class ClassFeatureEntry(BaseModel):
    level: int
    name: str


class ClassView(BaseModel):
    """Thin view that restructures flat ClassDef fields for clients."""
    id: str
    name: str
    description: str
    hit_die: int
    skill_points: int
    attack: str
    saves: dict[str, str]
    spellcaster: bool
    epic_features: list[ClassFeatureEntry]


class ClassesResponse(BaseModel):
    classes: list[ClassView]


class CapabilityView(BaseModel):
    id: str
    name: str
    category: str
    description: str
    benefit: str
    prerequisites: list[dict]
    prerequisite_text: list[str]
    effects: list[dict]
    repeatable: bool
    min_level: int
    power_score: float
    chain_depth: int


class CapabilitiesResponse(BaseModel):
    capabilities: list[CapabilityView]
    effect_weights: dict[str, float]


class AbilityScheduleEntry(BaseModel):
    level: int
    increases: int
    ceiling: int


class ExperienceEntry(BaseModel):
    level: int
    experience: int


class ExperienceResponse(BaseModel):
    levels: list[ExperienceEntry]
    ability_schedule: list[AbilityScheduleEntry]


# ---------------------------------------------------------------------------
# TypeAdapters for the pydantic dataclass definitions
# ---------------------------------------------------------------------------

_seed_ta = TypeAdapter(SpellSeed)
_modifier_ta = TypeAdapter(SpellModifierDef)
_cosmic_ta = TypeAdapter(CosmicPowerDef)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_CATEGORY_DESCRIPTIONS: dict[str, str] = {
    "COMBAT": "Offensive weapon and melee capabilities.",
    "DEFENSIVE": "Saves, armor and damage mitigation.",
    "MAGIC": "Spellcasting power beyond ninth level.",
    "DIVINE": "Turning, channeling and divine grace.",
    "PSIONIC": "Psionic power manipulation.",
    "UTILITY": "General-purpose unlocks.",
    "SKILL": "Legendary skill mastery.",
    "ABILITY": "Direct ability score increases.",
    "LEADERSHIP": "Followers, cohorts and reputation.",
    "SOCIAL": "Influence over other creatures.",
    "ITEM_CREATION": "Crafting epic magic items.",
    "EPIC_ABILITY": "Tiered epic abilities gained in sequence.",
}


def _class_view(cd: ClassDef) -> ClassView:
    return ClassView(
        id=cd.class_id.name.lower(),
        name=cd.name,
        description=cd.description,
        hit_die=cd.hit_die,
        skill_points=cd.skill_points,
        attack=cd.attack.name.lower(),
        saves={s.name.lower(): cd.save_rate(s).name.lower() for s in SaveType},
        spellcaster=cd.spellcaster,
        epic_features=[ClassFeatureEntry(level=lvl, name=name) for lvl, name in cd.epic_features],
    )


def _enum_entries(enum_cls, descriptions: dict[str, str] | None = None) -> list[EnumEntry]:
    descriptions = descriptions or {}
    return [
        EnumEntry(id=e.value, name=e.name.lower(), description=descriptions.get(e.name, ""))
        for e in enum_cls
    ]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/enums", response_model=EnumsResponse)
def get_enums() -> EnumsResponse:
    """Abilities, saves, progression rates, capability categories, effect and decision kinds."""
    abilities = [
        EnumEntry(id=a.value, name=ABILITY_KEYS[a], description=ABILITY_NAMES[a]) for a in Ability
    ]
    return EnumsResponse(
        abilities=abilities,
        saves=_enum_entries(SaveType),
        progression_rates=_enum_entries(ProgressionRate),
        capability_categories=_enum_entries(CapabilityCategory, _CATEGORY_DESCRIPTIONS),
        effect_kinds=_enum_entries(EffectKind),
        decision_kinds=_enum_entries(DecisionKind),
    )


@router.get("/classes", response_model=ClassesResponse)
def get_classes() -> ClassesResponse:
    return ClassesResponse(classes=[_class_view(cd) for cd in CLASS_DEFS.values()])


@router.get("/capabilities", response_model=CapabilitiesResponse)
def get_capabilities() -> CapabilitiesResponse:
    """Every epic feat and epic ability with its power score and prerequisite chain depth."""
    views = []
    for d in _CATALOG:
        data = d.to_dict()
        views.append(CapabilityView(
            **data,
            power_score=_CATALOG.power_score(d.capability_id),
            chain_depth=_CATALOG.chain_depth(d.capability_id),
        ))
    return CapabilitiesResponse(
        capabilities=views,
        effect_weights={k.name.lower(): w for k, w in EFFECT_WEIGHTS.items()},
    )


@router.get("/spells")
def get_spells() -> dict:
    """Epic spell seeds, modifiers and the well-known sample spells."""
    return {
        "seeds": [_seed_ta.dump_python(s, mode="json") for s in SPELL_SEEDS.values()],
        "modifiers": [_modifier_ta.dump_python(m, mode="json") for m in SPELL_MODIFIERS.values()],
        "templates": [
            {
                "spell_id": t.spell_id,
                "name": t.name,
                "seeds": list(t.seeds),
                "modifiers": list(t.modifiers),
                "description": t.description,
            }
            for t in EPIC_SPELL_TEMPLATES.values()
        ],
        "min_cost": _CONFIG.min_spell_cost,
    }


@router.get("/divine")
def get_divine() -> dict:
    """Divine rank tiers 0-20 and every cosmic power."""
    return {
        "tiers": [t.to_dict() for t in build_tiers(_CONFIG)],
        "cosmic_powers": [_cosmic_ta.dump_python(p, mode="json") for p in COSMIC_POWER_DEFS.values()],
    }


@router.get("/milestones")
def get_milestones() -> dict:
    return {"milestones": [m.to_dict() for m in MILESTONE_DEFS.values()]}


@router.get("/experience", response_model=ExperienceResponse)
def get_experience() -> ExperienceResponse:
    """XP table plus the ability-increase schedule and ceiling per epic level."""
    rows = experience_table(_CONFIG)
    return ExperienceResponse(
        levels=[ExperienceEntry(level=lvl, experience=xp) for lvl, xp in rows],
        ability_schedule=[
            AbilityScheduleEntry(
                level=lvl, increases=due_increases(lvl, _CONFIG), ceiling=ability_ceiling(lvl, _CONFIG),
            )
            for lvl, _ in rows
        ],
    )
