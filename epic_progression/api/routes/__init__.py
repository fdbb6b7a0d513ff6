"""Versioned API route modules."""

from fastapi import APIRouter

from epic_progression.api.routes.characters import router as characters_router
from epic_progression.api.routes.spells import router as spells_router
from epic_progression.api.routes.monitor import router as monitor_router
from epic_progression.api.routes.config import router as config_router
from epic_progression.api.routes.metadata import router as metadata_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(characters_router, tags=["Characters"])
api_router.include_router(spells_router, tags=["Spells"])
api_router.include_router(monitor_router, tags=["Monitor"])
api_router.include_router(config_router, tags=["Config"])
api_router.include_router(metadata_router)

__all__ = ["api_router"]
