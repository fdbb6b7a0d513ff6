"""Core rule content and character model."""

from epic_progression.core.enums import Ability, CapabilityCategory, DecisionKind, Domain, EffectKind, SaveType
from epic_progression.core.abilities import AbilityScores
from epic_progression.core.character import CharacterSnapshot, Decision, EpicState
from epic_progression.core.capabilities import CapabilityCatalog, CapabilityDef
from epic_progression.core.divine import DivineRankLadder, WorshipMetrics

__all__ = [
    "Ability",
    "AbilityScores",
    "CapabilityCatalog",
    "CapabilityCategory",
    "CapabilityDef",
    "CharacterSnapshot",
    "Decision",
    "DecisionKind",
    "DivineRankLadder",
    "Domain",
    "EffectKind",
    "EpicState",
    "SaveType",
    "WorshipMetrics",
]
