"""Pydantic request and response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from epic_progression.core.divine import WorshipMetrics


# --- Characters ---

class CreateCharacterRequest(BaseModel):
    name: str
    character_class: str
    level: int = 20
    experience: int = 0
    abilities: dict[str, int] = Field(default_factory=dict)
    feats: list[str] = Field(default_factory=list)
    skills: dict[str, int] = Field(default_factory=dict)
    spellcraft_ranks: int | None = None
    class_levels: dict[str, int] = Field(default_factory=dict)
    hit_points: int = 0


class WorshipSchema(BaseModel):
    followers: int = 0
    temples: int = 0
    has_realm: bool = False
    completed_quests: list[str] = Field(default_factory=list)

    def to_metrics(self) -> WorshipMetrics:
        return WorshipMetrics(
            followers=self.followers,
            temples=self.temples,
            has_realm=self.has_realm,
            completed_quests=frozenset(self.completed_quests),
        )


class AdvanceRequest(BaseModel):
    target_level: int
    worship: WorshipSchema | None = None


class DecisionRequest(BaseModel):
    level: int
    kind: str                        # "epic_capability" | "ability_increase"
    selection: str | list[str]


class RankRequest(BaseModel):
    to_rank: int


class CosmicPowerRequest(BaseModel):
    power_id: str


class AscensionCheckResponse(BaseModel):
    eligible: bool
    unmet: list[str]


class CosmicPowerUseResponse(BaseModel):
    power_id: str
    name: str
    rank: int
    level: int


# --- Spells ---

class DevelopSpellRequest(BaseModel):
    name: str = ""
    seeds: list[str] = Field(default_factory=list)
    modifiers: list[str] = Field(default_factory=list)
    template: str | None = None      # Develop a well-known epic spell by id instead


class CastRequest(BaseModel):
    composition_id: str


class CastResponse(BaseModel):
    composition_id: str
    success: bool
    roll: int
    bonus: int
    total: int
    dc: int
    slot_consumed: bool
    slots_remaining: int


class RestResponse(BaseModel):
    restored: int
    slots_available: int


# --- Monitor ---

class HealthResponse(BaseModel):
    score: int
    status: str
    critical_alerts: int
    warning_alerts: int
    failure_rate: float


class ControlResponse(BaseModel):
    status: str
    message: str


# --- Config ---

class ProgressionConfigResponse(BaseModel):
    epic_entry_level: int
    first_epic_level: int
    max_level: int
    epic_base_xp: int
    xp_base_increment: int
    xp_growth_rate: float
    epic_feat_interval: int
    ability_increase_start: int
    ability_increase_interval: int
    bonus_ability_increase_levels: list[int]
    ability_ceiling_rule: str
    ability_ceiling_base: int
    min_spell_cost: int
    spell_slot_ranks: int
    refund_failed_cast: bool
    divine_ascension_level: int
    cosmic_level: int
    max_divine_rank: int
    rng_seed: int
