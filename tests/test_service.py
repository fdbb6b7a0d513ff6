"""Tests for the progression service and the REST route functions.

Route functions are called directly with an explicit ``service`` argument,
so no server or HTTP client is involved.
"""

import pytest

from epic_progression.api.app import create_app, error_status
from epic_progression.api.dependencies import get_progression_service, set_progression_service
from epic_progression.api.routes import characters, config, monitor, spells
from epic_progression.api.schemas import (
    AdvanceRequest, CastRequest, CosmicPowerRequest, CreateCharacterRequest,
    DecisionRequest, DevelopSpellRequest, RankRequest, WorshipSchema,
)
from epic_progression.api.service import ProgressionService
from epic_progression.config import ProgressionConfig
from epic_progression.core.errors import (
    CapacityExceeded, InsufficientSkill, MaxRankReached, NotFound,
    PrerequisiteNotMet, ValidationFailed,
)
from epic_progression.core.experience import experience_for_level

WORSHIP = WorshipSchema(
    followers=100_000, temples=10, has_realm=True,
    completed_quests=["divine_quest", "defeat_rival_deity", "establish_realm"],
)


@pytest.fixture
def service():
    return ProgressionService(ProgressionConfig())


def _create(service, **overrides):
    body = dict(
        name="Mordain",
        character_class="wizard",
        level=20,
        experience=experience_for_level(100),
        abilities={"int": 30, "wis": 26, "cha": 30},
        feats=["Leadership"],
        spellcraft_ranks=30,
    )
    body.update(overrides)
    return characters.create_character(CreateCharacterRequest(**body), service=service)


class TestRegistry:

    def test_create_assigns_ids(self, service):
        a = _create(service)
        b = _create(service, name="Ilsa")
        assert a["character_id"] == "char-1"
        assert b["character_id"] == "char-2"
        assert len(characters.list_characters(service=service)["characters"]) == 2

    def test_invalid_level(self, service):
        with pytest.raises(ValidationFailed):
            _create(service, level=0)

    def test_unknown_class(self, service):
        with pytest.raises(NotFound):
            _create(service, character_class="bard-king")

    def test_get_unknown(self, service):
        with pytest.raises(NotFound):
            characters.get_character("char-99", service=service)

    def test_delete_returns_report(self, service):
        cid = _create(service)["character_id"]
        characters.advance(cid, AdvanceRequest(target_level=22), service=service)
        report = characters.delete_character(cid, service=service)
        assert report["levels_gained"] == 2
        with pytest.raises(NotFound):
            service.get(cid)


class TestAdvancementRoutes:

    def test_advance_and_history(self, service):
        cid = _create(service)["character_id"]
        result = characters.advance(cid, AdvanceRequest(target_level=24), service=service)
        assert [s["level"] for s in result["steps"]] == [21, 22, 23, 24]
        assert result["character"]["level"] == 24
        assert len(characters.history(cid, service=service)["steps"]) == 4

    def test_resolve_decisions(self, service):
        cid = _create(service)["character_id"]
        characters.advance(cid, AdvanceRequest(target_level=24), service=service)
        characters.resolve_decision(
            cid, DecisionRequest(level=24, kind="ability_increase", selection="int"), service=service,
        )
        snap = service.get(cid)
        assert snap.abilities.int_ == 31
        assert [d.level for d in snap.pending_decisions] == [21, 24]

    def test_unknown_decision_kind(self, service):
        cid = _create(service)["character_id"]
        with pytest.raises(ValidationFailed):
            service.resolve_decision(cid, 21, "feat_swap", "x")

    def test_report(self, service):
        cid = _create(service)["character_id"]
        characters.advance(cid, AdvanceRequest(target_level=21), service=service)
        report = characters.report(cid, service=service)
        assert "first_epic_level" in report["achieved_milestones"]


class TestDivineRoutes:

    def _deity(self, service, level=60):
        cid = _create(service, character_class="cleric", level=level - 1)["character_id"]
        snap = service.get(cid)
        characters.advance(cid, AdvanceRequest(target_level=level), service=service)
        snap.epic.epic_capabilities.extend(["epic_leadership", "epic_reputation"])
        return cid

    def test_check_and_ascend(self, service):
        cid = self._deity(service, level=50)
        check = characters.check_ascension(cid, WORSHIP, service=service)
        assert check.eligible
        tier = characters.ascend(cid, WORSHIP, service=service)
        assert tier["rank"] == 1

    def test_check_reports_unmet(self, service):
        cid = _create(service, level=30)["character_id"]
        check = characters.check_ascension(cid, WorshipSchema(), service=service)
        assert not check.eligible
        assert "Character level 50 required, currently 30" in check.unmet

    def test_rank_and_cosmic_power(self, service):
        cid = self._deity(service, level=60)
        characters.ascend(cid, WORSHIP, service=service)
        characters.advance_rank(cid, RankRequest(to_rank=11), service=service)
        use = characters.use_cosmic_power(cid, CosmicPowerRequest(power_id="grant_spells"), service=service)
        assert use.rank == 11
        with pytest.raises(PrerequisiteNotMet):
            characters.use_cosmic_power(cid, CosmicPowerRequest(power_id="wish"), service=service)


class TestSpellRoutes:

    def test_develop_cast_rest(self, service):
        cid = _create(service)["character_id"]
        characters.advance(cid, AdvanceRequest(target_level=21), service=service)
        comp = spells.develop(cid, DevelopSpellRequest(template="ruin"), service=service)
        assert comp["cost"] == 33
        assert len(spells.known_spells(cid, service=service)["spells"]) == 1

        outcome = spells.cast(cid, CastRequest(composition_id=comp["composition_id"]), service=service)
        assert outcome.dc == 33
        assert outcome.slots_remaining == 2
        rested = spells.rest(cid, service=service)
        assert rested.restored == 1
        assert rested.slots_available == 3

    def test_develop_too_hard(self, service):
        cid = _create(service, spellcraft_ranks=12)["character_id"]
        characters.advance(cid, AdvanceRequest(target_level=21), service=service)
        with pytest.raises(InsufficientSkill):
            spells.develop(cid, DevelopSpellRequest(seeds=["destroy", "fortify"]), service=service)

    def test_develop_custom(self, service):
        cid = _create(service)["character_id"]
        characters.advance(cid, AdvanceRequest(target_level=21), service=service)
        comp = spells.develop(
            cid, DevelopSpellRequest(name="Shield Wall", seeds=["ward"], modifiers=["increase_area"]),
            service=service,
        )
        assert comp["name"] == "Shield Wall"
        assert comp["cost"] == 21


class TestMonitorRoutes:

    def test_operations_are_timed(self, service):
        cid = _create(service)["character_id"]
        characters.advance(cid, AdvanceRequest(target_level=22), service=service)
        m = monitor.metrics(service=service)
        assert m["metrics"]["progression_update"]["count"] == 1
        assert m["metrics"]["xp_calculation"]["count"] == 1
        assert m["operations"]["successful"] >= 1

    def test_health_and_reset(self, service):
        assert monitor.health(service=service).score == 100
        service.monitor.record("divine_ascension", 1000.0)
        assert monitor.health(service=service).critical_alerts == 1
        assert len(monitor.alerts(count=5, service=service)["alerts"]) == 1
        assert monitor.reset(service=service).status == "ok"
        assert monitor.health(service=service).score == 100

    def test_config_route(self, service):
        cfg = config.get_config(service=service)
        assert cfg.max_level == 100
        assert cfg.ability_ceiling_rule == "level_scaled"


class TestAppWiring:

    def test_error_status(self):
        assert error_status(NotFound("character", "x")) == 404
        assert error_status(MaxRankReached(20)) == 409
        assert error_status(CapacityExceeded("slots", 1, 2)) == 409
        assert error_status(ValidationFailed(["bad"])) == 422
        assert error_status(InsufficientSkill(46, 20)) == 422

    def test_error_payload(self):
        exc = ValidationFailed(["a", "b"])
        assert exc.to_dict() == {
            "error": "validation_failed",
            "message": "Validation failed",
            "details": {"violations": ["a", "b"]},
        }

    def test_routes_registered(self):
        app = create_app(ProgressionConfig())
        paths = {route.path for route in app.routes}
        assert "/api/v1/characters" in paths
        assert "/api/v1/characters/{character_id}/advance" in paths
        assert "/api/v1/characters/{character_id}/spells/cast" in paths
        assert "/api/v1/metadata/capabilities" in paths
        assert "/api/v1/monitor/health" in paths

    def test_dependency_requires_service(self):
        set_progression_service(None)
        with pytest.raises(RuntimeError):
            get_progression_service()
        svc = ProgressionService()
        set_progression_service(svc)
        assert get_progression_service() is svc
        set_progression_service(None)
