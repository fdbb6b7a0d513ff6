"""Domain errors raised by the progression rules.

Every error carries a stable ``error_code`` and a ``details`` dict so the
presentation layer can show the specific unmet condition ("Charisma 30
required, currently 24") instead of a generic failure.  All of them are
raised before the character snapshot is touched.
"""

from __future__ import annotations

from typing import Any


class ProgressionError(Exception):
    """Base class for all rule violations."""

    error_code: str = "progression_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationFailed(ProgressionError):
    """One or more preconditions are unmet. Always lists every violation."""

    error_code = "validation_failed"

    def __init__(self, violations: list[str], message: str = "Validation failed") -> None:
        super().__init__(message, {"violations": list(violations)})
        self.violations = list(violations)

    def __str__(self) -> str:
        return f"{self.message}: " + "; ".join(self.violations)


class PrerequisiteNotMet(ProgressionError):
    error_code = "prerequisite_not_met"

    def __init__(self, capability_id: str, unmet: list[str]) -> None:
        super().__init__(
            f"Prerequisites not met for {capability_id}: " + "; ".join(unmet),
            {"capability_id": capability_id, "unmet": list(unmet)},
        )
        self.capability_id = capability_id
        self.unmet = list(unmet)


class InsufficientSkill(ProgressionError):
    error_code = "insufficient_skill"

    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            f"Spellcraft DC {required} exceeds maximum {available}",
            {"required": required, "available": available},
        )
        self.required = required
        self.available = available


class CapacityExceeded(ProgressionError):
    error_code = "capacity_exceeded"

    def __init__(self, resource: str, limit: int, attempted: int) -> None:
        super().__init__(
            f"{resource} limit is {limit}, attempted {attempted}",
            {"resource": resource, "limit": limit, "attempted": attempted},
        )
        self.resource = resource
        self.limit = limit
        self.attempted = attempted


class MaxRankReached(ProgressionError):
    error_code = "max_rank_reached"

    def __init__(self, rank: int) -> None:
        super().__init__(f"Divine rank {rank} is the maximum", {"rank": rank})
        self.rank = rank


class NotFound(ProgressionError):
    """Reference to an unknown catalog id or character."""

    error_code = "not_found"

    def __init__(self, kind: str, key: Any) -> None:
        super().__init__(f"Unknown {kind}: {key!r}", {"kind": kind, "key": key})
        self.kind = kind
        self.key = key
