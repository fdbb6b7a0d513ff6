"""Tests for level-by-level epic advancement and decision resolution."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from epic_progression.config import ProgressionConfig
from epic_progression.core.capabilities import CapabilityCatalog
from epic_progression.core.divine import DivineRankLadder, WorshipMetrics
from epic_progression.core.enums import Ability, DecisionKind, SaveType
from epic_progression.core.epic_feats import EPIC_CAPABILITY_DEFS
from epic_progression.core.errors import CapacityExceeded, NotFound, ValidationFailed
from epic_progression.core.spells import SpellCalculator
from epic_progression.engine.history import ProgressionHistory
from epic_progression.engine.progression import ProgressionOrchestrator
from tests.helpers.characters import make_character, make_deity_candidate


def _orchestrator(config=None):
    config = config or ProgressionConfig()
    return ProgressionOrchestrator(
        config,
        CapabilityCatalog(EPIC_CAPABILITY_DEFS, config=config),
        SpellCalculator(config),
        DivineRankLadder(config),
        history=ProgressionHistory(),
    )


class TestValidation:

    def test_insufficient_experience(self):
        orch = _orchestrator()
        hero = make_character(level=20, experience=200_000)
        with pytest.raises(ValidationFailed) as exc:
            orch.advance(hero, 21)
        assert exc.value.violations == [
            "Insufficient experience: 210000 required for level 21, currently 200000",
        ]
        assert hero.level == 20
        assert hero.epic is None
        assert orch.history.steps(hero.character_id) == []

    def test_every_violation_listed(self):
        orch = _orchestrator()
        hero = make_character(level=19, experience=0)
        violations = orch.validate(hero, 15)
        assert len(violations) == 3
        assert violations[0].startswith("Target level 15 must be greater")
        assert "outside the epic range 21-100" in violations[1]
        assert violations[2] == "Epic advancement requires level 20, currently 19"

    def test_beyond_max_level(self):
        orch = _orchestrator()
        hero = make_character(level=99)
        assert orch.validate(hero, 101) == ["Target level 101 is outside the epic range 21-100"]

    def test_valid_request(self):
        orch = _orchestrator()
        assert orch.validate(make_character(level=20), 30) == []


class TestAdvance:

    def test_first_epic_level(self):
        orch = _orchestrator()
        hero = make_character("fighter", level=20)
        result = orch.advance(hero, 21)
        step = result.steps[0]

        assert hero.level == 21
        assert hero.is_epic
        assert step.hp_gain == 10
        assert step.skill_point_gain == 2
        assert step.attack_gain == 1
        assert step.save_gains[SaveType.FORTITUDE] == 0
        assert step.save_gains[SaveType.REFLEX] == 1
        assert step.save_gains[SaveType.WILL] == 1
        assert step.capability_decision is not None
        assert step.ability_decision is None
        assert step.ascension_available is None
        assert len(hero.pending_decisions) == 1

    def test_one_step_per_level(self):
        orch = _orchestrator()
        hero = make_character("fighter", level=20)
        result = orch.advance(hero, 30)
        assert [s.level for s in result.steps] == list(range(21, 31))
        assert len(orch.history.steps(hero.character_id)) == 10

    def test_hit_points_use_constitution(self):
        orch = _orchestrator()
        hero = make_character("wizard", level=20, abilities={"con": 14}, spellcraft_ranks=24)
        step = orch.advance(hero, 21).steps[0]
        assert step.hp_gain == 6

    def test_minimum_one_hit_point(self):
        orch = _orchestrator()
        hero = make_character("wizard", level=20, abilities={"con": 1}, spellcraft_ranks=24)
        step = orch.advance(hero, 21).steps[0]
        assert step.hp_gain == 1

    def test_capability_decision_schedule(self):
        orch = _orchestrator()
        hero = make_character(level=20)
        result = orch.advance(hero, 30)
        levels = [s.level for s in result.steps if s.capability_decision is not None]
        assert levels == [21, 24, 27, 30]

    def test_ability_decision_schedule(self):
        orch = _orchestrator()
        hero = make_character(level=20)
        result = orch.advance(hero, 44)
        due = {s.level: s.ability_decision.count for s in result.steps if s.ability_decision is not None}
        assert due == {24: 1, 28: 1, 32: 1, 36: 1, 40: 2, 44: 1}

    def test_class_features_recorded(self):
        orch = _orchestrator()
        hero = make_character("fighter", level=20)
        result = orch.advance(hero, 22)
        assert result.steps[1].class_features == ("Epic Weapon Specialization",)
        assert hero.has_capability("Epic Weapon Specialization")

    def test_spell_slots_for_casters(self):
        orch = _orchestrator()
        hero = make_character("wizard", level=20, spellcraft_ranks=24)
        step = orch.advance(hero, 21).steps[0]
        assert step.spell_slots_gained == 2
        assert hero.epic.spell_slots == 2

    def test_epic_bonuses(self):
        orch = _orchestrator()
        hero = make_character(level=20)
        step = orch.advance(hero, 35).steps[-1]
        assert step.damage_reduction == 3
        assert step.spell_resistance == 45
        assert hero.bonuses["epic_damage_reduction"] == 3

    def test_milestones(self):
        orch = _orchestrator()
        hero = make_character(level=20)
        result = orch.advance(hero, 30)
        assert result.new_milestones == ["first_epic_level", "level_30_legend"]
        assert result.steps[0].milestones == ("first_epic_level",)
        assert hero.achieved_milestones == {"first_epic_level", "level_30_legend"}

    def test_ascension_reported_with_worship(self):
        orch = _orchestrator()
        hero = make_deity_candidate(level=49)
        worship = WorshipMetrics(
            followers=100_000, temples=10, has_realm=True,
            completed_quests=frozenset({"divine_quest", "defeat_rival_deity", "establish_realm"}),
        )
        step = orch.advance(hero, 50, worship).steps[0]
        assert step.ascension_available is True
        assert step.ascension_unmet == ()
        assert hero.divine_rank == 0

    def test_divine_rank_climbs_with_level(self):
        orch = _orchestrator()
        hero = make_deity_candidate(level=50)
        orch._ladder.ascend(hero, WorshipMetrics(
            followers=100_000, temples=10, has_realm=True,
            completed_quests=frozenset({"divine_quest", "defeat_rival_deity", "establish_realm"}),
        ))
        result = orch.advance(hero, 80)
        by_level = {s.level: s for s in result.steps}

        assert by_level[51].rank_before == 1
        assert by_level[51].rank_after == 2
        assert by_level[51].rank_changed
        assert by_level[51].new_immunities == ("compulsion",)
        assert by_level[69].rank_after == 20
        assert not by_level[75].rank_changed
        assert by_level[80].new_cosmic_powers == ("alter_reality",)
        assert hero.divine_rank == 20


class TestResolveDecision:

    def test_capability_decision(self):
        orch = _orchestrator()
        hero = make_character(level=20)
        orch.advance(hero, 21)
        orch.resolve_decision(hero, 21, DecisionKind.EPIC_CAPABILITY, "great_strength")
        assert hero.abilities.get(Ability.STR) == 11
        assert hero.pending_decisions == []

    def test_great_ability_withheld_at_ceiling(self):
        orch = _orchestrator()
        hero = make_character("fighter", level=20, abilities={"str": 40})
        step = orch.advance(hero, 21).steps[0]
        assert "great_strength" not in step.capability_decision.options
        with pytest.raises(ValidationFailed):
            orch.resolve_decision(hero, 21, DecisionKind.EPIC_CAPABILITY, "great_strength")
        assert hero.abilities.get(Ability.STR) == 40

    def test_capability_not_offered(self):
        orch = _orchestrator()
        hero = make_character(level=20)
        orch.advance(hero, 21)
        with pytest.raises(ValidationFailed):
            orch.resolve_decision(hero, 21, DecisionKind.EPIC_CAPABILITY, "epic_prowess")
        with pytest.raises(NotFound):
            orch.resolve_decision(hero, 21, DecisionKind.EPIC_CAPABILITY, "no_such_feat")
        assert len(hero.pending_decisions) == 1

    def test_no_pending_decision(self):
        orch = _orchestrator()
        hero = make_character(level=20)
        orch.advance(hero, 21)
        with pytest.raises(NotFound):
            orch.resolve_decision(hero, 21, DecisionKind.ABILITY_INCREASE, "str")

    def test_ability_increase(self):
        orch = _orchestrator()
        hero = make_character(level=20)
        orch.advance(hero, 40)
        orch.resolve_decision(hero, 40, DecisionKind.ABILITY_INCREASE, ["str", "str"])
        assert hero.abilities.get(Ability.STR) == 12
        assert (40, Ability.STR) in hero.epic.ability_increases

    def test_ability_increase_wrong_count(self):
        orch = _orchestrator()
        hero = make_character(level=20)
        orch.advance(hero, 40)
        with pytest.raises(ValidationFailed):
            orch.resolve_decision(hero, 40, DecisionKind.ABILITY_INCREASE, "str")

    def test_ability_ceiling(self):
        orch = _orchestrator()
        hero = make_character(level=20, abilities={"str": 41})
        step = orch.advance(hero, 24).steps[-1]
        assert "str" not in step.ability_decision.options
        with pytest.raises(CapacityExceeded):
            orch.resolve_decision(hero, 24, DecisionKind.ABILITY_INCREASE, "str")
        assert hero.abilities.get(Ability.STR) == 41

    def test_no_decision_when_every_ability_capped(self):
        orch = _orchestrator()
        scores = {key: 41 for key in ("str", "dex", "con", "int", "wis", "cha")}
        hero = make_character(level=20, abilities=scores)
        step = orch.advance(hero, 24).steps[-1]
        assert step.ability_decision is None
        assert all(d.kind != DecisionKind.ABILITY_INCREASE for d in hero.pending_decisions)

    def test_increase_count_limited_by_room(self):
        orch = _orchestrator()
        scores = {key: 45 for key in ("dex", "con", "int", "wis", "cha")}
        scores["str"] = 44
        hero = make_character(level=20, abilities=scores)
        result = orch.advance(hero, 40)
        decisions = [s.ability_decision for s in result.steps if s.ability_decision is not None]
        assert [(d.level, d.count, d.options) for d in decisions] == [(40, 1, ("str",))]
        orch.resolve_decision(hero, 40, DecisionKind.ABILITY_INCREASE, "str")
        assert hero.abilities.get(Ability.STR) == 45
        assert all(d.kind != DecisionKind.ABILITY_INCREASE for d in hero.pending_decisions)

    def test_flat_ceiling(self):
        orch = _orchestrator(ProgressionConfig(ability_ceiling_rule="flat"))
        hero = make_character(level=20, abilities={"dex": 40})
        orch.advance(hero, 24)
        with pytest.raises(CapacityExceeded):
            orch.resolve_decision(hero, 24, DecisionKind.ABILITY_INCREASE, "dex")


class TestProperties:

    @pytest.mark.parametrize("target", [21, 23, 24, 33, 47, 60])
    def test_capability_decision_count(self, target):
        orch = _orchestrator()
        hero = make_character(level=20)
        result = orch.advance(hero, target)
        assert hero.level == target
        count = sum(1 for s in result.steps if s.capability_decision is not None)
        assert count == (target - 21) // 3 + 1

    def test_resumable_after_partial_advance(self):
        orch = _orchestrator()
        hero = make_character(level=20)
        orch.advance(hero, 25)
        orch.advance(hero, 30)
        assert [s.level for s in orch.history.steps(hero.character_id)] == list(range(21, 31))
