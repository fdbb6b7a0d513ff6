"""FastAPI dependency injection — provides the ProgressionService singleton."""

from __future__ import annotations

from epic_progression.api.service import ProgressionService

_progression_service: ProgressionService | None = None


def set_progression_service(service: ProgressionService | None) -> None:
    global _progression_service
    _progression_service = service


def get_progression_service() -> ProgressionService:
    if _progression_service is None:
        raise RuntimeError("ProgressionService not initialized — server not started correctly.")
    return _progression_service
