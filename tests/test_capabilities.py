"""Tests for the capability catalog: eligibility, ordering and acquisition."""

import pytest

from epic_progression.core.capabilities import (
    CapabilityCatalog, CapabilityDef, CapabilityEffect, grant_capability,
)
from epic_progression.core.enums import Ability, CapabilityCategory, EffectKind, SaveType
from epic_progression.core.epic_feats import EPIC_CAPABILITY_DEFS
from epic_progression.core.errors import CapacityExceeded, NotFound, PrerequisiteNotMet, ValidationFailed
from epic_progression.core.prerequisites import epic, lvl
from tests.helpers.characters import make_character


@pytest.fixture(scope="module")
def catalog():
    return CapabilityCatalog(EPIC_CAPABILITY_DEFS)


class TestCatalogContent:

    def test_catalog_is_populated(self, catalog):
        assert len(catalog) >= 80
        assert "epic_leadership" in catalog
        assert "epic_spellcasting" in catalog

    def test_every_descriptor_requires_its_min_level(self, catalog):
        for d in catalog:
            assert lvl(d.min_level) in d.prerequisites

    def test_descriptors_are_frozen(self, catalog):
        d = catalog.get("epic_prowess")
        with pytest.raises(Exception):
            d.name = "Hacked"  # type: ignore

    def test_unknown_id(self, catalog):
        with pytest.raises(NotFound):
            catalog.get("no_such_feat")

    def test_by_category(self, catalog):
        abilities = catalog.by_category(CapabilityCategory.ABILITY)
        assert {d.capability_id for d in abilities} >= {"great_strength", "great_charisma"}


class TestCatalogValidation:

    def test_unknown_epic_reference_rejected(self):
        bad = CapabilityDef("a", "A", CapabilityCategory.UTILITY, "", "", (epic("missing"),))
        with pytest.raises(ValueError):
            CapabilityCatalog({"a": bad})

    def test_prerequisite_cycle_rejected(self):
        a = CapabilityDef("a", "A", CapabilityCategory.UTILITY, "", "", (epic("b"),))
        b = CapabilityDef("b", "B", CapabilityCategory.UTILITY, "", "", (epic("a"),))
        with pytest.raises(ValueError):
            CapabilityCatalog({"a": a, "b": b})


class TestScoring:

    def test_chain_depth(self, catalog):
        assert catalog.chain_depth("epic_prowess") == 0
        assert catalog.chain_depth("epic_weapon_focus") == 1
        assert catalog.chain_depth("epic_weapon_specialization") == 2

    def test_power_score(self, catalog):
        # +1 attack (2.0) plus one ability prerequisite (3.0)
        assert catalog.power_score("epic_prowess") == pytest.approx(5.0)
        # +2 attack (4.0), one ordinary prerequisite (2.0), chain depth 1 (5.0)
        assert catalog.power_score("epic_weapon_focus") == pytest.approx(11.0)


class TestEligibility:

    def test_level_21_character_has_options(self, catalog):
        hero = make_character(level=20)
        ids = [d.capability_id for d in catalog.list_eligible(hero, at_level=21)]
        assert "great_strength" in ids
        assert "additional_magic_item_space" in ids
        assert "epic_prowess" not in ids        # Str 21 unmet

    def test_ordering_is_score_then_id(self, catalog):
        hero = make_character(level=30, abilities={"str": 25, "dex": 25, "con": 25, "cha": 25})
        eligible = catalog.list_eligible(hero)
        keys = [(-catalog.power_score(d.capability_id), d.capability_id) for d in eligible]
        assert keys == sorted(keys)

    def test_held_non_repeatable_excluded(self, catalog):
        hero = make_character(level=21, abilities={"cha": 21})
        assert "epic_reputation" in [d.capability_id for d in catalog.list_eligible(hero)]
        grant_capability(catalog, hero, "epic_reputation")
        assert "epic_reputation" not in [d.capability_id for d in catalog.list_eligible(hero)]

    def test_repeatable_stays_eligible(self, catalog):
        hero = make_character(level=21)
        grant_capability(catalog, hero, "great_strength")
        assert "great_strength" in [d.capability_id for d in catalog.list_eligible(hero)]

    def test_ability_prerequisite_tracks_increases(self, catalog):
        hero = make_character(level=21, abilities={"str": 20})
        assert not catalog.meets_prerequisites(hero, "epic_prowess")
        grant_capability(catalog, hero, "great_strength")
        assert hero.abilities.get(Ability.STR) == 21
        assert catalog.meets_prerequisites(hero, "epic_prowess")

    def test_chained_epic_ability_gated_by_level_and_chain(self, catalog):
        hero = make_character(level=21, feats=("Toughness",))
        assert not catalog.meets_prerequisites(hero, "epic_toughness_2")
        grant_capability(catalog, hero, "epic_toughness_1")
        assert not catalog.meets_prerequisites(hero, "epic_toughness_2")
        assert catalog.meets_prerequisites(hero, "epic_toughness_2", at_level=24)


class TestGrant:

    def test_unmet_reports_every_condition(self, catalog):
        hero = make_character(level=21)
        with pytest.raises(PrerequisiteNotMet) as exc:
            grant_capability(catalog, hero, "epic_leadership")
        assert "Charisma 25 required, currently 10" in exc.value.unmet
        assert "Leadership required" in exc.value.unmet
        assert hero.epic.epic_capabilities == []

    def test_hit_point_effect(self, catalog):
        hero = make_character(level=21, abilities={"con": 21}, feats=("Toughness",))
        grant_capability(catalog, hero, "epic_toughness")
        assert hero.hit_points == 20

    def test_save_effect(self, catalog):
        hero = make_character(level=21, abilities={"con": 21}, feats=("Great Fortitude",))
        grant_capability(catalog, hero, "epic_fortitude")
        assert hero.saves[SaveType.FORTITUDE] == 4

    def test_attack_effect_lands_in_bonuses(self, catalog):
        hero = make_character(level=21, abilities={"str": 21})
        grant_capability(catalog, hero, "epic_prowess")
        grant_capability(catalog, hero, "epic_prowess")
        assert hero.bonuses["attack"] == 2
        assert hero.epic.epic_capabilities.count("epic_prowess") == 2

    def test_non_repeatable_twice(self, catalog):
        hero = make_character(level=21, abilities={"cha": 21})
        grant_capability(catalog, hero, "epic_reputation")
        with pytest.raises(PrerequisiteNotMet):
            grant_capability(catalog, hero, "epic_reputation")

    def test_requires_epic_state(self, catalog):
        hero = make_character(level=20)
        with pytest.raises(ValidationFailed):
            grant_capability(catalog, hero, "great_strength")

    def test_great_ability_respects_ceiling(self, catalog):
        hero = make_character(level=21, abilities={"str": 40})
        with pytest.raises(CapacityExceeded) as exc:
            grant_capability(catalog, hero, "great_strength")
        assert exc.value.limit == 40
        assert exc.value.attempted == 41
        assert hero.abilities.get(Ability.STR) == 40
        assert hero.epic.epic_capabilities == []

    def test_capped_great_ability_not_offered(self, catalog):
        hero = make_character(level=21, abilities={"str": 40})
        offered = [d.capability_id for d in catalog.list_eligible(hero)]
        assert "great_strength" not in offered
        assert "great_dexterity" in offered
        assert catalog.ceiling_overflow(hero, catalog.get("great_strength")) == (Ability.STR, 40, 41)

    def test_ceiling_follows_level(self, catalog):
        hero = make_character(level=21, abilities={"str": 40})
        assert "great_strength" in [d.capability_id for d in catalog.list_eligible(hero, at_level=24)]
        grant_capability(catalog, hero, "great_strength", at_level=24)
        assert hero.abilities.get(Ability.STR) == 41

    def test_effect_descriptor(self):
        e = CapabilityEffect(EffectKind.SAVE, 4, "will")
        assert e.to_dict() == {"kind": "save", "magnitude": 4, "target": "will"}
