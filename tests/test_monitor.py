"""Tests for the performance monitor."""

import pytest

from epic_progression.config import ProgressionConfig
from epic_progression.core.divine import DivineRankLadder, WorshipMetrics
from epic_progression.core.enums import AlertLevel
from epic_progression.core.errors import NotFound
from epic_progression.core.spells import SpellCalculator
from epic_progression.utils.monitor import PerformanceMonitor
from tests.helpers.characters import make_character


class TestThresholds:

    def test_below_warning(self):
        mon = PerformanceMonitor()
        assert mon.record("xp_calculation", 5.0) is None
        assert mon.alerts() == []

    def test_warning_and_critical(self):
        mon = PerformanceMonitor()
        warn = mon.record("xp_calculation", 20.0)
        crit = mon.record("xp_calculation", 60.0)
        assert warn.level == AlertLevel.WARNING
        assert warn.threshold_ms == 10.0
        assert crit.level == AlertLevel.CRITICAL
        assert crit.threshold_ms == 50.0
        assert mon.alerts() == [warn, crit]
        assert mon.alerts(count=1) == [crit]

    def test_unknown_metric_has_no_threshold(self):
        mon = PerformanceMonitor()
        assert mon.record("teleport_latency", 10_000.0) is None
        assert mon.metrics()["teleport_latency"]["count"] == 1

    def test_alerts_are_bounded(self):
        mon = PerformanceMonitor(ProgressionConfig(monitor_alert_limit=3))
        for _ in range(5):
            mon.record("cosmic_power_usage", 10.0)
        assert len(mon.alerts()) == 3


class TestStats:

    def test_running_statistics(self):
        mon = PerformanceMonitor()
        for ms in (1.0, 2.0, 3.0):
            mon.record("feat_validation", ms)
        stats = mon.metrics()["feat_validation"]
        assert stats["count"] == 3
        assert stats["average_ms"] == 2.0
        assert stats["min_ms"] == 1.0
        assert stats["max_ms"] == 3.0
        assert stats["last_ms"] == 3.0

    def test_track_counts_success(self):
        mon = PerformanceMonitor()
        with mon.track("progression_update"):
            pass
        assert mon.operation_counts() == {"total": 1, "successful": 1, "failed": 0}
        assert mon.operations()[0].operation == "progression_update"

    def test_track_counts_failure_and_reraises(self):
        mon = PerformanceMonitor()
        with pytest.raises(KeyError):
            with mon.track("feat_validation"):
                raise KeyError("boom")
        assert mon.operation_counts()["failed"] == 1
        assert mon.operations()[0].error == "KeyError"

    def test_reset(self):
        mon = PerformanceMonitor()
        mon.record("xp_calculation", 100.0)
        mon.reset()
        assert mon.metrics() == {}
        assert mon.alerts() == []
        assert mon.operation_counts()["total"] == 0


class TestHealth:

    def test_healthy_when_idle(self):
        health = PerformanceMonitor().health()
        assert health["score"] == 100
        assert health["status"] == "healthy"

    @pytest.mark.parametrize("criticals, score, status", [
        (1, 80, "healthy"),
        (2, 60, "warning"),
        (3, 40, "critical"),
    ])
    def test_critical_alerts_lower_score(self, criticals, score, status):
        mon = PerformanceMonitor()
        for _ in range(criticals):
            mon.record("divine_ascension", 1000.0)
        health = mon.health()
        assert health["score"] == score
        assert health["status"] == status
        assert health["critical_alerts"] == criticals

    def test_failures_cost_points(self):
        mon = PerformanceMonitor()
        with pytest.raises(ValueError):
            with mon.track("some_operation"):
                raise ValueError
        health = mon.health()
        assert health["failure_rate"] == 1.0
        assert health["score"] == 90

    def test_recommendations(self):
        mon = PerformanceMonitor()
        mon.record("spell_database_query", 40.0)
        recs = mon.recommendations()
        assert len(recs) == 1
        assert recs[0].startswith("spell_database_query")


class TestComponentMetrics:

    def test_spell_lifecycle_is_timed(self):
        mon = PerformanceMonitor()
        calc = SpellCalculator(monitor=mon)
        hero = make_character("wizard", level=21, abilities={"int": 14}, spellcraft_ranks=19)
        calc.refresh_slots(hero)
        comp = calc.develop(hero, calc.compose("Summon", ["summon"]))
        calc.cast(hero, comp.composition_id, roller=lambda: 20)
        calc.rest(hero)
        metrics = mon.metrics()
        for name in ("spell_database_query", "spell_development", "spell_casting", "spell_rest"):
            assert metrics[name]["count"] == 1
        assert mon.operation_counts() == {"total": 4, "successful": 4, "failed": 0}

    def test_rejected_cast_counts_as_failure(self):
        mon = PerformanceMonitor()
        calc = SpellCalculator(monitor=mon)
        hero = make_character("wizard", level=21, spellcraft_ranks=19)
        with pytest.raises(NotFound):
            calc.cast(hero, "deadbeef")
        assert mon.metrics()["spell_casting"]["count"] == 1
        assert mon.operation_counts()["failed"] == 1

    def test_ascension_check_is_timed(self):
        mon = PerformanceMonitor()
        ladder = DivineRankLadder(monitor=mon)
        problems = ladder.check_ascension(make_character("fighter", level=21), WorshipMetrics())
        assert problems
        assert mon.metrics()["ascension_check"]["count"] == 1
