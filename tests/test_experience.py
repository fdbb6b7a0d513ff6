"""Tests for the epic experience table."""

import pytest

from epic_progression.config import ProgressionConfig
from epic_progression.core.experience import (
    experience_for_level, experience_table, experience_to_next, level_for_experience,
)


class TestExperienceTable:

    def test_entry_points(self):
        assert experience_for_level(21) == 210_000
        assert experience_for_level(22) == 220_000
        assert experience_for_level(23) == 231_500

    def test_below_epic_range_is_free(self):
        assert experience_for_level(20) == 0
        assert experience_for_level(1) == 0

    def test_covers_every_epic_level(self):
        rows = experience_table()
        assert rows[0] == (21, 210_000)
        assert rows[-1][0] == 100
        assert len(rows) == 80

    def test_strictly_increasing(self):
        totals = [xp for _, xp in experience_table()]
        assert all(b > a for a, b in zip(totals, totals[1:]))

    def test_beyond_max_level(self):
        with pytest.raises(ValueError):
            experience_for_level(101)

    def test_custom_growth(self):
        cfg = ProgressionConfig(xp_growth_rate=1.0)
        assert experience_for_level(25, cfg) == 250_000


class TestLevelLookup:

    def test_level_for_experience(self):
        assert level_for_experience(0) == 20
        assert level_for_experience(209_999) == 20
        assert level_for_experience(215_000) == 21
        assert level_for_experience(220_000) == 22

    def test_experience_to_next(self):
        assert experience_to_next(21, 210_000) == 10_000
        assert experience_to_next(21, 225_000) == 0
        assert experience_to_next(100, 0) == 0
