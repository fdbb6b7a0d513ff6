"""Epic milestone definitions.

Each milestone is a pure predicate over a character snapshot.  ``level`` is
the character level at which the milestone is typically reached and only
orders the "next milestones" list in progress reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from epic_progression.core.enums import Ability

if TYPE_CHECKING:
    from epic_progression.core.character import CharacterSnapshot


@dataclass(frozen=True, slots=True)
class MilestoneDef:
    milestone_id: str
    name: str
    description: str
    kind: str                   # level / feat / ability / divine / cosmic / spell
    level: int
    reward: str
    predicate: Callable[[CharacterSnapshot], bool]
    threshold: int = 0

    def is_met(self, snapshot: CharacterSnapshot) -> bool:
        return bool(self.predicate(snapshot))

    def to_dict(self) -> dict[str, Any]:
        return {
            "milestone_id": self.milestone_id,
            "name": self.name,
            "description": self.description,
            "kind": self.kind,
            "level": self.level,
            "threshold": self.threshold,
            "reward": self.reward,
        }


def _cosmic_count(s: CharacterSnapshot) -> int:
    return len(s.epic.cosmic_powers) if s.epic is not None else 0


def _known_spells(s: CharacterSnapshot) -> int:
    return len(s.epic.known_spells) if s.epic is not None else 0


def _ascension_ready(s: CharacterSnapshot) -> bool:
    # Worship and quest metrics are tracked outside the snapshot
    return (
        s.level >= 50
        and s.abilities.get(Ability.CHA) >= 30
        and s.abilities.get(Ability.WIS) >= 25
        and s.has_epic_capability("epic_leadership")
        and s.has_epic_capability("epic_reputation")
    )


MILESTONE_DEFS: dict[str, MilestoneDef] = {}


def _reg(
    milestone_id: str, name: str, description: str, kind: str, level: int,
    reward: str, predicate: Callable[[CharacterSnapshot], bool], threshold: int = 0,
) -> None:
    MILESTONE_DEFS[milestone_id] = MilestoneDef(
        milestone_id, name, description, kind, level, reward, predicate, threshold,
    )


_reg("first_epic_level", "First Epic Level", "Reached level 21, entering epic progression",
     "level", 21, "Access to epic feats and abilities",
     lambda s: s.level >= 21, 21)
_reg("epic_feat_master", "Epic Feat Master", "Acquired 10 epic feats",
     "feat", 48, "Legendary status among adventurers",
     lambda s: s.epic_capability_count >= 10, 10)
_reg("ability_score_30", "Superhuman Ability", "Reached ability score of 30 in any ability",
     "ability", 24, "Transcendent physical and mental capabilities",
     lambda s: s.abilities.highest() >= 30, 30)
_reg("level_30_legend", "Living Legend", "Reached level 30",
     "level", 30, "Legendary status, songs written about you",
     lambda s: s.level >= 30, 30)
_reg("divine_ascension_ready", "Divine Ascension Ready", "Met the personal requirements for divine ascension",
     "divine", 50, "Path to godhood opens",
     _ascension_ready)
_reg("cosmic_power_master", "Cosmic Power Master", "Acquired 10 cosmic powers",
     "cosmic", 61, "Mastery over cosmic forces",
     lambda s: _cosmic_count(s) >= 10, 10)
_reg("epic_spellcaster", "Epic Spellcaster", "Learned 5 epic spells",
     "spell", 21, "Command over reality-bending magic",
     lambda s: _known_spells(s) >= 5, 5)
_reg("level_40_myth", "Living Myth", "Reached level 40",
     "level", 40, "Mythical status, worshipped by some",
     lambda s: s.level >= 40, 40)
_reg("divine_rank_10", "Demi-God", "Achieved divine rank 10",
     "divine", 59, "Demi-god status, divine realm established",
     lambda s: s.divine_rank >= 10, 10)
_reg("cosmic_power_supreme", "Cosmic Power Supreme", "Acquired all cosmic powers",
     "cosmic", 100, "Supreme mastery over cosmic forces",
     lambda s: _cosmic_count(s) >= 25, 25)
_reg("level_50_deity", "True Deity", "Reached level 50 and divine ascension",
     "level", 50, "Full deity status, divine portfolio",
     lambda s: s.level >= 50 and s.is_divine, 50)
