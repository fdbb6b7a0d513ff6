"""/api/v1/monitor — operation metrics, alerts and health."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from epic_progression.api.dependencies import get_progression_service
from epic_progression.api.schemas import ControlResponse, HealthResponse
from epic_progression.api.service import ProgressionService

router = APIRouter(prefix="/monitor")


@router.get("/metrics")
def metrics(
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    return {
        "metrics": service.monitor.metrics(),
        "operations": service.monitor.operation_counts(),
    }


@router.get("/alerts")
def alerts(
    count: int = Query(20, ge=1, le=500),
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    return {"alerts": [a.to_dict() for a in service.monitor.alerts(count)]}


@router.get("/health", response_model=HealthResponse)
def health(
    service: ProgressionService = Depends(get_progression_service),
) -> HealthResponse:
    return HealthResponse(**service.monitor.health())


@router.get("/recommendations")
def recommendations(
    service: ProgressionService = Depends(get_progression_service),
) -> dict:
    return {"recommendations": service.monitor.recommendations()}


@router.post("/reset", response_model=ControlResponse)
def reset(
    service: ProgressionService = Depends(get_progression_service),
) -> ControlResponse:
    service.monitor.reset()
    return ControlResponse(status="ok", message="Monitor reset.")
