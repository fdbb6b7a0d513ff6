"""Epic experience table.

Level 21 needs 210,000 XP; each further level costs the previous increment
grown by 15%, starting from 10,000 for 21 -> 22.
"""

from __future__ import annotations

import math
from functools import lru_cache

from epic_progression.config import ProgressionConfig

_DEFAULT_CONFIG = ProgressionConfig()


@lru_cache(maxsize=8)
def experience_table(config: ProgressionConfig = _DEFAULT_CONFIG) -> tuple[tuple[int, int], ...]:
    """(level, total XP required) for every epic level up to the maximum."""
    rows = [(config.first_epic_level, config.epic_base_xp)]
    xp = config.epic_base_xp
    for level in range(config.first_epic_level, config.max_level):
        xp += math.floor(config.xp_base_increment * config.xp_growth_rate ** (level - config.first_epic_level))
        rows.append((level + 1, xp))
    return tuple(rows)


def experience_for_level(level: int, config: ProgressionConfig = _DEFAULT_CONFIG) -> int:
    """Total XP required to hold *level*; 0 below the epic range."""
    if level < config.first_epic_level:
        return 0
    if level > config.max_level:
        raise ValueError(f"Level {level} is beyond the maximum level {config.max_level}")
    return experience_table(config)[level - config.first_epic_level][1]


def level_for_experience(experience: int, config: ProgressionConfig = _DEFAULT_CONFIG) -> int:
    """Highest epic level *experience* pays for, or the epic entry level if none."""
    level = config.epic_entry_level
    for lvl, required in experience_table(config):
        if experience < required:
            break
        level = lvl
    return level


def experience_to_next(level: int, experience: int, config: ProgressionConfig = _DEFAULT_CONFIG) -> int:
    if level >= config.max_level:
        return 0
    return max(0, experience_for_level(level + 1, config) - experience)
