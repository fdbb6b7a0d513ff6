"""/api/v1/characters/{id}/spells — epic spell development, casting and rest."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from epic_progression.api.dependencies import get_progression_service
from epic_progression.api.schemas import CastRequest, CastResponse, DevelopSpellRequest, RestResponse
from epic_progression.api.service import ProgressionService

router = APIRouter(prefix="/characters/{character_id}/spells")


@router.get("")
def known_spells(
    character_id: str,
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    snapshot = service.get(character_id)
    known = snapshot.epic.known_spells.values() if snapshot.epic is not None else ()
    return {"spells": [c.to_dict() for c in known]}


@router.post("", status_code=201)
def develop(
    character_id: str,
    body: DevelopSpellRequest,
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    composition = service.develop_spell(
        character_id, name=body.name, seeds=body.seeds,
        modifiers=body.modifiers, template=body.template,
    )
    return composition.to_dict()


@router.post("/cast", response_model=CastResponse)
def cast(
    character_id: str,
    body: CastRequest,
    service: ProgressionService = Depends(get_progression_service),
) -> CastResponse:
    return CastResponse(**service.cast(character_id, body.composition_id).to_dict())


@router.post("/rest", response_model=RestResponse)
def rest(
    character_id: str,
    service: ProgressionService = Depends(get_progression_service),
) -> RestResponse:
    restored = service.rest(character_id)
    snapshot = service.get(character_id)
    available = snapshot.epic.spell_slots_available if snapshot.epic is not None else 0
    return RestResponse(restored=restored, slots_available=available)
