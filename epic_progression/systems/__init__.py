"""Engine systems: deterministic RNG."""

from epic_progression.systems.rng import DeterministicRNG

__all__ = ["DeterministicRNG"]
