"""Tests for the structured prerequisite predicates."""

from epic_progression.core.abilities import apply_increase
from epic_progression.core.enums import Ability
from epic_progression.core.prerequisites import (
    ClassLevelAtLeast, LevelAtLeast, ab, all_met, cls, epic, feat, lvl, skill, unmet,
)
from tests.helpers.characters import make_character


class TestPredicates:

    def test_level_uses_at_level_when_given(self):
        hero = make_character(level=20)
        assert not lvl(21).is_met(hero)
        assert lvl(21).is_met(hero, at_level=21)

    def test_ability_compares_current_total(self):
        hero = make_character(level=24, abilities={"str": 20})
        assert not ab("str", 21).is_met(hero)
        apply_increase(hero, Ability.STR, 1)
        assert ab("str", 21).is_met(hero)

    def test_ordinary_and_epic_capabilities(self):
        hero = make_character(level=21, feats=("Toughness",))
        assert feat("Toughness").is_met(hero)
        assert not epic("epic_toughness").is_met(hero)
        hero.epic.epic_capabilities.append("epic_toughness")
        assert epic("epic_toughness").is_met(hero)

    def test_class_level_counts_pending_primary_levels(self):
        hero = make_character("fighter", level=20)
        p = cls("fighter", 21)
        assert isinstance(p, ClassLevelAtLeast)
        assert not p.is_met(hero)
        assert p.is_met(hero, at_level=21)
        assert not cls("wizard", 1).is_met(hero, at_level=21)

    def test_skill_ranks_use_spellcraft_field(self):
        hero = make_character("wizard", level=21, spellcraft_ranks=24, skills={"knowledge (arcana)": 24})
        assert skill("spellcraft", 24).is_met(hero)
        assert skill("knowledge (arcana)", 24).is_met(hero)
        assert not skill("search", 1).is_met(hero)


class TestEvaluation:

    def test_all_met_is_conjunction(self):
        hero = make_character(level=21, abilities={"cha": 25}, feats=("Leadership",))
        assert all_met(hero, (lvl(21), ab("cha", 25), feat("Leadership")))
        assert not all_met(hero, (lvl(21), ab("cha", 26)))

    def test_unmet_lists_every_failure_with_current_value(self):
        hero = make_character(level=21, abilities={"cha": 24})
        missing = unmet(hero, (LevelAtLeast(30), ab("cha", 30), feat("Leadership")))
        assert missing == [
            "Character level 30 required, currently 21",
            "Charisma 30 required, currently 24",
            "Leadership required",
        ]

    def test_to_dict_is_tagged(self):
        assert ab("str", 25).to_dict() == {"kind": "ability", "ability": "str", "score": 25}
        assert lvl(21).to_dict() == {"kind": "level", "level": 21}
