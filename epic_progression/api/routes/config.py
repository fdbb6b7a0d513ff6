"""GET /api/v1/config — expose progression configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from epic_progression.api.dependencies import get_progression_service
from epic_progression.api.schemas import ProgressionConfigResponse
from epic_progression.api.service import ProgressionService

router = APIRouter()


@router.get("/config", response_model=ProgressionConfigResponse)
def get_config(
    service: ProgressionService = Depends(get_progression_service),
) -> ProgressionConfigResponse:
    cfg = service.config
    return ProgressionConfigResponse(
        epic_entry_level=cfg.epic_entry_level,
        first_epic_level=cfg.first_epic_level,
        max_level=cfg.max_level,
        epic_base_xp=cfg.epic_base_xp,
        xp_base_increment=cfg.xp_base_increment,
        xp_growth_rate=cfg.xp_growth_rate,
        epic_feat_interval=cfg.epic_feat_interval,
        ability_increase_start=cfg.ability_increase_start,
        ability_increase_interval=cfg.ability_increase_interval,
        bonus_ability_increase_levels=list(cfg.bonus_ability_increase_levels),
        ability_ceiling_rule=cfg.ability_ceiling_rule,
        ability_ceiling_base=cfg.ability_ceiling_base,
        min_spell_cost=cfg.min_spell_cost,
        spell_slot_ranks=cfg.spell_slot_ranks,
        refund_failed_cast=cfg.refund_failed_cast,
        divine_ascension_level=cfg.divine_ascension_level,
        cosmic_level=cfg.cosmic_level,
        max_divine_rank=cfg.max_divine_rank,
        rng_seed=cfg.rng_seed,
    )
