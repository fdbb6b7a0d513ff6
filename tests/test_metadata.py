"""Tests for the metadata API and the shared pydantic dataclass models.

Verifies that:
1. Core pydantic dataclasses still behave as plain immutable definitions
2. Core models serialize correctly via TypeAdapter
3. All metadata endpoints return expected data shapes
"""

import pytest
from pydantic import TypeAdapter

from epic_progression.core.classes import CLASS_DEFS, EpicClass
from epic_progression.core.divine import COSMIC_POWER_DEFS, CosmicPowerDef
from epic_progression.core.epic_feats import EPIC_CAPABILITY_DEFS
from epic_progression.core.milestones import MILESTONE_DEFS
from epic_progression.core.spells import SPELL_MODIFIERS, SPELL_SEEDS, SpellModifierDef, SpellSeed


# ---------------------------------------------------------------------------
# Core models used as rule content
# ---------------------------------------------------------------------------

class TestCoreDefinitions:

    def test_seed_values(self):
        s = SPELL_SEEDS["destroy"]
        assert s.cost == 29
        assert s.school == "transmutation"

    def test_seed_frozen(self):
        s = SPELL_SEEDS["heal"]
        with pytest.raises(Exception):
            s.cost = 1  # type: ignore

    def test_cosmic_power_frozen(self):
        p = COSMIC_POWER_DEFS["wish"]
        with pytest.raises(Exception):
            p.rank_requirement = 1  # type: ignore

    def test_cosmic_power_requirements(self):
        assert COSMIC_POWER_DEFS["wish"].rank_requirement == 19
        assert COSMIC_POWER_DEFS["wish"].level_requirement == 100
        assert COSMIC_POWER_DEFS["plane_shift"].level_requirement == 0


class TestCoreSerialization:

    _seed_ta = TypeAdapter(SpellSeed)
    _modifier_ta = TypeAdapter(SpellModifierDef)
    _cosmic_ta = TypeAdapter(CosmicPowerDef)

    def test_seed_serialization(self):
        d = self._seed_ta.dump_python(SPELL_SEEDS["summon"], mode="json")
        assert d == {
            "seed_id": "summon",
            "name": "Summon",
            "cost": 14,
            "school": "conjuration",
            "description": "Call a creature to serve you.",
        }

    def test_mitigating_modifier_serialization(self):
        d = self._modifier_ta.dump_python(SPELL_MODIFIERS["ritual_participant"], mode="json")
        assert d["delta"] == -19

    def test_cosmic_power_serialization(self):
        d = self._cosmic_ta.dump_python(COSMIC_POWER_DEFS["time_stop"], mode="json")
        assert d["power_id"] == "time_stop"
        assert d["rank_requirement"] == 16
        assert d["level_requirement"] == 85


# ---------------------------------------------------------------------------
# Metadata endpoints
# ---------------------------------------------------------------------------

class TestMetadataEndpoints:
    """Test all metadata endpoint functions directly."""

    def test_get_enums(self):
        from epic_progression.api.routes.metadata import get_enums
        e = get_enums()
        assert [a.name for a in e.abilities] == ["str", "dex", "con", "int", "wis", "cha"]
        assert len(e.saves) == 3
        assert len(e.capability_categories) == 12
        assert len(e.decision_kinds) == 2

    def test_get_classes(self):
        from epic_progression.api.routes.metadata import get_classes
        c = get_classes()
        assert len(c.classes) == len(CLASS_DEFS)
        fighter = next(cv for cv in c.classes if cv.id == "fighter")
        assert fighter.hit_die == 10
        assert fighter.attack == "good"
        assert fighter.saves == {"fortitude": "good", "reflex": "poor", "will": "poor"}
        assert not fighter.spellcaster

    def test_get_capabilities(self):
        from epic_progression.api.routes.metadata import get_capabilities
        result = get_capabilities()
        assert len(result.capabilities) == len(EPIC_CAPABILITY_DEFS)
        specialization = next(cv for cv in result.capabilities if cv.id == "epic_weapon_specialization")
        assert specialization.chain_depth == 2
        assert specialization.category == "combat"
        assert "Epic capability epic_weapon_focus" in specialization.prerequisite_text
        assert result.effect_weights["unlock"] == 5.0

    def test_get_spells(self):
        from epic_progression.api.routes.metadata import get_spells
        result = get_spells()
        assert len(result["seeds"]) == len(SPELL_SEEDS)
        assert len(result["modifiers"]) == len(SPELL_MODIFIERS)
        assert result["min_cost"] == 21
        ruin = next(t for t in result["templates"] if t["spell_id"] == "ruin")
        assert ruin["seeds"] == ["destroy"]

    def test_get_divine(self):
        from epic_progression.api.routes.metadata import get_divine
        result = get_divine()
        assert len(result["tiers"]) == 21
        assert result["tiers"][1]["immunities"] == ["charm"]
        assert len(result["cosmic_powers"]) == len(COSMIC_POWER_DEFS)

    def test_get_milestones(self):
        from epic_progression.api.routes.metadata import get_milestones
        result = get_milestones()
        assert len(result["milestones"]) == len(MILESTONE_DEFS)
        assert "predicate" not in result["milestones"][0]

    def test_get_experience(self):
        from epic_progression.api.routes.metadata import get_experience
        result = get_experience()
        assert result.levels[0].level == 21
        assert result.levels[0].experience == 210_000
        schedule = {row.level: row for row in result.ability_schedule}
        assert schedule[40].increases == 2
        assert schedule[24].ceiling == 41


# ---------------------------------------------------------------------------
# Registry completeness
# ---------------------------------------------------------------------------

class TestRegistryCompleteness:

    def test_capability_defs(self):
        assert len(EPIC_CAPABILITY_DEFS) >= 80

    def test_class_defs_cover_every_class(self):
        for ec in EpicClass:
            assert ec in CLASS_DEFS

    def test_cosmic_powers(self):
        assert len(COSMIC_POWER_DEFS) == 25

    def test_seed_catalog(self):
        assert len(SPELL_SEEDS) == 24
