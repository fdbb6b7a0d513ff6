"""Progression configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProgressionConfig:
    """Immutable configuration for the epic progression rules."""

    # Levels
    epic_entry_level: int = 20             # Minimum level before epic advancement is allowed
    first_epic_level: int = 21
    max_level: int = 100

    # Experience table
    epic_base_xp: int = 210000             # XP required for level 21
    xp_base_increment: int = 10000         # Increment from 21 to 22
    xp_growth_rate: float = 1.15           # Compounding growth of the increment per level

    # Epic feats
    epic_feat_interval: int = 3            # One epic feat at 21, 24, 27, ...

    # Ability increases
    ability_increase_start: int = 24
    ability_increase_interval: int = 4
    bonus_ability_increase_levels: tuple = (40,)
    # "level_scaled": base + floor((level - 20) / interval); "flat": base only
    ability_ceiling_rule: str = "level_scaled"
    ability_ceiling_base: int = 40
    ability_ceiling_interval: int = 4

    # Epic spells
    min_spell_cost: int = 21
    gold_per_spell_dc: int = 9000
    xp_per_spell_dc: int = 360
    spell_slot_ranks: int = 10             # Spellcraft ranks per epic spell slot
    refund_failed_cast: bool = False

    # Divinity
    divine_ascension_level: int = 50
    cosmic_level: int = 80
    max_divine_rank: int = 20

    # Monitor thresholds: (metric, warning_ms, critical_ms)
    monitor_thresholds: tuple = (
        ("xp_calculation", 10.0, 50.0),
        ("feat_validation", 5.0, 20.0),
        ("divine_ascension", 100.0, 500.0),
        ("cosmic_power_usage", 1.0, 5.0),
        ("ability_increase", 2.0, 10.0),
        ("spell_database_query", 15.0, 75.0),
        ("progression_update", 25.0, 100.0),
    )
    monitor_history_size: int = 100
    monitor_alert_limit: int = 50
    monitor_operation_limit: int = 1000

    # Randomness
    rng_seed: int = 42

    # Logging
    log_level: str = "INFO"
