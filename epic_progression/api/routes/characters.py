"""/api/v1/characters — registry, advancement, decisions and divine ranks."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from epic_progression.api.dependencies import get_progression_service
from epic_progression.api.schemas import (
    AdvanceRequest,
    AscensionCheckResponse,
    CosmicPowerRequest,
    CosmicPowerUseResponse,
    CreateCharacterRequest,
    DecisionRequest,
    RankRequest,
    WorshipSchema,
)
from epic_progression.api.service import ProgressionService

router = APIRouter(prefix="/characters")


@router.post("", status_code=201)
def create_character(
    body: CreateCharacterRequest,
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    snapshot = service.create_character(**body.model_dump())
    return snapshot.to_dict()


@router.get("")
def list_characters(
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    return {"characters": [s.to_dict() for s in service.list_characters()]}


@router.get("/{character_id}")
def get_character(
    character_id: str,
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    return service.get(character_id).to_dict()


@router.delete("/{character_id}")
def delete_character(
    character_id: str,
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    """Stop tracking a character; returns its final progress report."""
    return service.delete_character(character_id)


@router.post("/{character_id}/advance")
def advance(
    character_id: str,
    body: AdvanceRequest,
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    worship = body.worship.to_metrics() if body.worship is not None else None
    return service.advance(character_id, body.target_level, worship).to_dict()


@router.post("/{character_id}/decisions")
def resolve_decision(
    character_id: str,
    body: DecisionRequest,
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    snapshot = service.resolve_decision(character_id, body.level, body.kind, body.selection)
    return snapshot.to_dict()


@router.get("/{character_id}/history")
def history(
    character_id: str,
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    return {"steps": [s.to_dict() for s in service.steps(character_id)]}


@router.get("/{character_id}/report")
def report(
    character_id: str,
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    return service.report(character_id)


# ---------------------------------------------------------------------------
# Divinity
# ---------------------------------------------------------------------------

@router.post("/{character_id}/ascension/check", response_model=AscensionCheckResponse)
def check_ascension(
    character_id: str,
    body: WorshipSchema,
    service: ProgressionService = Depends(get_progression_service),
) -> AscensionCheckResponse:
    unmet = service.check_ascension(character_id, body.to_metrics())
    return AscensionCheckResponse(eligible=not unmet, unmet=unmet)


@router.post("/{character_id}/ascend")
def ascend(
    character_id: str,
    body: WorshipSchema,
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    return service.ascend(character_id, body.to_metrics()).to_dict()


@router.post("/{character_id}/rank")
def advance_rank(
    character_id: str,
    body: RankRequest,
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    return service.advance_rank(character_id, body.to_rank).to_dict()


@router.post("/{character_id}/cosmic-powers", response_model=CosmicPowerUseResponse)
def use_cosmic_power(
    character_id: str,
    body: CosmicPowerRequest,
    service: ProgressionService = Depends(get_progression_service),
) -> CosmicPowerUseResponse:
    use = service.use_cosmic_power(character_id, body.power_id)
    return CosmicPowerUseResponse(power_id=use.power_id, name=use.name, rank=use.rank, level=use.level)
