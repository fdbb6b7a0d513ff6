"""Engine layer: progression orchestrator and history tracker."""

from epic_progression.engine.history import ProgressionHistory
from epic_progression.engine.progression import AdvancementResult, ProgressionOrchestrator, ProgressionStep

__all__ = ["AdvancementResult", "ProgressionHistory", "ProgressionOrchestrator", "ProgressionStep"]
