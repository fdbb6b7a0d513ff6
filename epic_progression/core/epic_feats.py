"""Epic feat and epic ability content.

Pure data: every descriptor is registered once at import time into
``EPIC_CAPABILITY_DEFS`` and never mutated.  Prerequisites use the compact
predicate constructors; every descriptor implicitly requires its minimum
level (21 unless stated).
"""

from __future__ import annotations

from epic_progression.core.capabilities import CapabilityDef, CapabilityEffect
from epic_progression.core.enums import CapabilityCategory as Cat
from epic_progression.core.enums import EffectKind as Fx
from epic_progression.core.prerequisites import Prerequisite, ab, cls, epic, feat, lvl, skill

EPIC_CAPABILITY_DEFS: dict[str, CapabilityDef] = {}


def _reg(
    capability_id: str,
    name: str,
    category: Cat,
    description: str,
    benefit: str,
    prereqs: tuple[Prerequisite, ...] = (),
    effects: tuple[CapabilityEffect, ...] = (),
    repeatable: bool = False,
    min_level: int = 21,
) -> None:
    EPIC_CAPABILITY_DEFS[capability_id] = CapabilityDef(
        capability_id=capability_id,
        name=name,
        category=category,
        description=description,
        benefit=benefit,
        prerequisites=(lvl(min_level),) + tuple(prereqs),
        effects=effects or (CapabilityEffect(Fx.UNLOCK),),
        repeatable=repeatable,
        min_level=min_level,
    )


def _fx(kind: Fx, magnitude: int = 0, target: str = "") -> CapabilityEffect:
    return CapabilityEffect(kind, magnitude, target)


# -- Combat --
_reg("blinding_speed", "Blinding Speed", Cat.COMBAT,
     "You move with incredible speed.",
     "Your base land speed increases by 30 feet.",
     (ab("dex", 25),), (_fx(Fx.SPEED, 30),))
_reg("combat_archery", "Combat Archery", Cat.COMBAT,
     "You are skilled at firing while threatened.",
     "You can fire a bow or crossbow as a standard action, even when threatened.",
     (feat("Point Blank Shot"), feat("Dodge"), feat("Mobility")))
_reg("devastating_critical", "Devastating Critical", Cat.COMBAT,
     "Your critical hits are especially deadly.",
     "When you score a critical hit, you multiply the damage by x3 instead of x2.",
     (ab("str", 25), feat("Cleave"), feat("Great Cleave"), feat("Improved Critical"),
      feat("Power Attack"), feat("Weapon Focus")),
     (_fx(Fx.DAMAGE, 2),), repeatable=True)
_reg("dire_charge", "Dire Charge", Cat.COMBAT,
     "Your charges carry tremendous force.",
     "When you charge, you deal an extra 1d6 points of damage.",
     (feat("Improved Initiative"),), (_fx(Fx.DAMAGE, 1),))
_reg("distant_shot", "Distant Shot", Cat.COMBAT,
     "You can hit targets at extreme range.",
     "You double the range increment of any bow or crossbow you use.",
     (ab("dex", 25), feat("Far Shot"), skill("spot", 20)))
_reg("epic_initiative", "Epic Initiative", Cat.COMBAT,
     "You react with uncanny speed.",
     "You gain a +4 bonus on initiative checks.",
     (ab("dex", 21), feat("Improved Initiative")), (_fx(Fx.INITIATIVE, 4),))
_reg("epic_prowess", "Epic Prowess", Cat.COMBAT,
     "You are a superior combatant.",
     "You gain a +1 bonus on all attack rolls.",
     (ab("str", 21),), (_fx(Fx.ATTACK, 1),), repeatable=True)
_reg("epic_weapon_focus", "Epic Weapon Focus", Cat.COMBAT,
     "You are unmatched with your chosen weapon.",
     "You gain a +2 bonus on attack rolls with the chosen weapon.",
     (feat("Weapon Focus"), epic("epic_prowess")), (_fx(Fx.ATTACK, 2),), repeatable=True)
_reg("epic_weapon_specialization", "Epic Weapon Specialization", Cat.COMBAT,
     "Your chosen weapon deals devastating damage.",
     "You gain a +4 bonus on damage rolls with the chosen weapon.",
     (feat("Weapon Specialization"), epic("epic_weapon_focus"), cls("fighter", 12)),
     (_fx(Fx.DAMAGE, 4),), repeatable=True)
_reg("improved_combat_reflexes", "Improved Combat Reflexes", Cat.COMBAT,
     "You can respond to every opening.",
     "You can make one additional attack of opportunity per round.",
     (ab("dex", 21), feat("Combat Reflexes")))
_reg("improved_death_attack", "Improved Death Attack", Cat.COMBAT,
     "Your death attack is harder to resist.",
     "Your death attack DC increases by 2.",
     (feat("Death Attack"), feat("Sneak Attack +5d6")))
_reg("improved_favored_enemy", "Improved Favored Enemy", Cat.COMBAT,
     "You know how to hunt your favored enemies.",
     "You gain an additional +1 bonus on damage rolls against your favored enemies.",
     (feat("Favored Enemy"), cls("ranger", 20)), (_fx(Fx.DAMAGE, 1),))
_reg("improved_ki_strike", "Improved Ki Strike", Cat.COMBAT,
     "Your ki strike overcomes stronger defenses.",
     "Your unarmed strikes count as magic weapons for overcoming damage reduction.",
     (ab("wis", 21), feat("Ki Strike"), cls("monk", 20)))
_reg("improved_sneak_attack", "Improved Sneak Attack", Cat.COMBAT,
     "Your sneak attacks are more damaging.",
     "Your sneak attack damage increases by +1d6.",
     (feat("Sneak Attack +8d6"),), (_fx(Fx.DAMAGE, 3),), repeatable=True)
_reg("improved_stunning_fist", "Improved Stunning Fist", Cat.COMBAT,
     "Your stunning blows are harder to resist.",
     "You can use your stunning fist ability one additional time per day.",
     (ab("dex", 19), ab("wis", 19), feat("Stunning Fist"), feat("Improved Unarmed Strike")))
_reg("instant_reload", "Instant Reload", Cat.COMBAT,
     "You reload in the blink of an eye.",
     "You can reload a crossbow as a free action.",
     (ab("dex", 21), feat("Rapid Reload"), feat("Weapon Focus (crossbow)")))
_reg("legendary_wrestler", "Legendary Wrestler", Cat.COMBAT,
     "No one escapes your grasp.",
     "You gain a +10 bonus on grapple checks.",
     (ab("str", 25), feat("Improved Grapple"), feat("Improved Unarmed Strike")),
     (_fx(Fx.SKILL, 10, "grapple"),))
_reg("lingering_damage", "Lingering Damage", Cat.COMBAT,
     "Your sneak attacks leave lasting wounds.",
     "Your sneak attacks deal damage again on the following round.",
     (feat("Sneak Attack +8d6"),), (_fx(Fx.DAMAGE, 2),))
_reg("overwhelming_critical", "Overwhelming Critical", Cat.COMBAT,
     "Your critical hits overwhelm your foes.",
     "When you score a critical hit, you deal extra damage.",
     (ab("str", 23), feat("Cleave"), feat("Great Cleave"), feat("Improved Critical"),
      feat("Power Attack"), feat("Weapon Focus")),
     (_fx(Fx.DAMAGE, 3),), repeatable=True)
_reg("penetrate_damage_reduction", "Penetrate Damage Reduction", Cat.COMBAT,
     "Your attacks ignore one kind of damage reduction.",
     "Choose one type of damage reduction. Your attacks ignore that type.",
     repeatable=True)
_reg("perfect_multiweapon_fighting", "Perfect Multiweapon Fighting", Cat.COMBAT,
     "You are a master of fighting with many weapons.",
     "You take no penalties when fighting with multiple weapons.",
     (ab("dex", 25), feat("Multiweapon Fighting"), feat("Greater Multiweapon Fighting")))
_reg("perfect_two_weapon_fighting", "Perfect Two-Weapon Fighting", Cat.COMBAT,
     "You fight with two weapons as easily as with one.",
     "You take no penalties when fighting with two weapons.",
     (ab("dex", 25), feat("Two-Weapon Fighting"), feat("Greater Two-Weapon Fighting")),
     (_fx(Fx.ATTACK, 2),))
_reg("righteous_strike", "Righteous Strike", Cat.COMBAT,
     "Your blows smite evil.",
     "Your attacks deal an extra 1d6 points of damage to evil creatures.",
     (ab("wis", 19), feat("Smite Evil"), feat("Stunning Fist")), (_fx(Fx.DAMAGE, 1),))
_reg("ruinous_rage", "Ruinous Rage", Cat.COMBAT,
     "Your rage shatters objects and foes alike.",
     "While raging, you gain an additional +4 bonus to Strength and Constitution.",
     (ab("str", 25), ab("con", 25), feat("Rage"), epic("epic_toughness")),
     (_fx(Fx.DAMAGE, 2),))
_reg("shattering_strike", "Shattering Strike", Cat.COMBAT,
     "Your blows can shatter weapons.",
     "You can attempt to sunder an opponent's weapon or armor as a free action.",
     (ab("str", 23), feat("Improved Sunder"), feat("Weapon Focus")))
_reg("sneak_attack_of_opportunity", "Sneak Attack of Opportunity", Cat.COMBAT,
     "Every opening is a chance to strike.",
     "Any attack of opportunity you make counts as a sneak attack.",
     (feat("Sneak Attack +8d6"), feat("Opportunist")))
_reg("spectral_strike", "Spectral Strike", Cat.COMBAT,
     "Your attacks ignore incorporeality.",
     "Your attacks affect incorporeal creatures normally.",
     (ab("wis", 19), feat("Turn Undead")))
_reg("storm_of_throws", "Storm of Throws", Cat.COMBAT,
     "You hurl weapons in a blur.",
     "You can throw one additional weapon per round.",
     (ab("dex", 23), feat("Quick Draw"), feat("Point Blank Shot")))
_reg("superior_initiative", "Superior Initiative", Cat.COMBAT,
     "You always act first.",
     "You gain a +8 bonus on initiative checks.",
     (ab("dex", 25), feat("Improved Initiative"), epic("epic_initiative")),
     (_fx(Fx.INITIATIVE, 8),))
_reg("terrifying_rage", "Terrifying Rage", Cat.COMBAT,
     "Your rage terrifies enemies.",
     "Opponents within 30 feet must make a Will save or become shaken.",
     (skill("intimidate", 20), feat("Rage")))
_reg("thundering_rage", "Thundering Rage", Cat.COMBAT,
     "Your raging blows boom like thunder.",
     "Your rage attacks create sonic damage in a 10-foot radius.",
     (ab("str", 23), feat("Rage"), epic("epic_toughness")), (_fx(Fx.DAMAGE, 2),))
_reg("two_weapon_rend", "Two-Weapon Rend", Cat.COMBAT,
     "You tear into foes struck by both weapons.",
     "You can make a rend attack with two weapons.",
     (ab("dex", 21), feat("Two-Weapon Fighting"), feat("Improved Two-Weapon Fighting")),
     (_fx(Fx.DAMAGE, 2),))
_reg("uncanny_accuracy", "Uncanny Accuracy", Cat.COMBAT,
     "Concealment means little to your ranged attacks.",
     "You ignore up to 5 points of miss chance from concealment.",
     (ab("dex", 21), feat("Point Blank Shot"), feat("Precise Shot")))
_reg("unholy_strike", "Unholy Strike", Cat.COMBAT,
     "Your blows smite the good.",
     "Your attacks deal an extra 1d6 points of damage to good creatures.",
     (ab("cha", 21), feat("Smite Good")), (_fx(Fx.DAMAGE, 1),))
_reg("vorpal_strike", "Vorpal Strike", Cat.COMBAT,
     "Your critical hits can sever heads.",
     "Your critical hits can sever limbs.",
     (ab("str", 25), feat("Weapon Focus"), feat("Improved Critical")))

# -- Defensive --
_reg("armor_skin", "Armor Skin", Cat.DEFENSIVE,
     "Your skin is as hard as armor.",
     "+1 natural armor bonus.",
     (ab("con", 13),), (_fx(Fx.ARMOR_CLASS, 1),), repeatable=True)
_reg("bulwark_of_defense", "Bulwark of Defense", Cat.DEFENSIVE,
     "You defend yourself against multiple opponents.",
     "You gain a +1 dodge bonus to AC for each opponent you threaten (maximum +4).",
     (ab("con", 25), feat("Combat Reflexes")), (_fx(Fx.ARMOR_CLASS, 1),))
_reg("damage_reduction", "Damage Reduction", Cat.DEFENSIVE,
     "You shrug off blows.",
     "You gain damage reduction 3/-.",
     (ab("con", 21),), (_fx(Fx.DAMAGE_REDUCTION, 3),), repeatable=True)
_reg("epic_dodge", "Epic Dodge", Cat.DEFENSIVE,
     "You avoid the first blow each round.",
     "You automatically avoid the first attack each round from an opponent you designate.",
     (ab("dex", 25), feat("Dodge"), feat("Mobility"), feat("Spring Attack"), skill("tumble", 30)),
     (_fx(Fx.ARMOR_CLASS, 2),))
_reg("epic_fortitude", "Epic Fortitude", Cat.DEFENSIVE,
     "You have tremendous fortitude.",
     "You gain a +4 bonus on Fortitude saves.",
     (ab("con", 21), feat("Great Fortitude")), (_fx(Fx.SAVE, 4, "fortitude"),))
_reg("epic_reflexes", "Epic Reflexes", Cat.DEFENSIVE,
     "You have tremendous reflexes.",
     "You gain a +4 bonus on Reflex saves.",
     (ab("dex", 21), feat("Lightning Reflexes")), (_fx(Fx.SAVE, 4, "reflex"),))
_reg("epic_toughness", "Epic Toughness", Cat.DEFENSIVE,
     "You are far tougher than normal.",
     "You gain +20 hit points.",
     (ab("con", 21), feat("Toughness")), (_fx(Fx.HIT_POINTS, 20),), repeatable=True)
_reg("epic_will", "Epic Will", Cat.DEFENSIVE,
     "You have tremendous willpower.",
     "You gain a +4 bonus on Will saves.",
     (ab("wis", 21), feat("Iron Will")), (_fx(Fx.SAVE, 4, "will"),))
_reg("exceptional_deflection", "Exceptional Deflection", Cat.DEFENSIVE,
     "You deflect ranged attacks of all kinds.",
     "You can deflect any ranged attack, including spells that require a ranged touch attack.",
     (ab("dex", 21), ab("wis", 19), feat("Deflect Arrows"), feat("Improved Unarmed Strike")))
_reg("fast_healing", "Fast Healing", Cat.DEFENSIVE,
     "You recover from wounds quickly.",
     "You gain fast healing 3.",
     (ab("con", 25),), (_fx(Fx.HIT_POINTS, 3),), repeatable=True)
_reg("improved_spell_resistance", "Improved Spell Resistance", Cat.DEFENSIVE,
     "Magic struggles to affect you.",
     "Your spell resistance increases by 2.",
     (feat("Spell Resistance"),), (_fx(Fx.SPELL_RESISTANCE, 2),), repeatable=True)
_reg("perfect_health", "Perfect Health", Cat.DEFENSIVE,
     "You are immune to disease and poison.",
     "You are immune to all nonmagical diseases and poisons.",
     (ab("con", 25), feat("Great Fortitude"), epic("epic_fortitude")))
_reg("reflect_arrows", "Reflect Arrows", Cat.DEFENSIVE,
     "You send projectiles back at their source.",
     "You can reflect arrows and other projectiles back at attackers.",
     (ab("dex", 25), feat("Deflect Arrows"), feat("Improved Unarmed Strike")))
_reg("self_concealment", "Self-Concealment", Cat.DEFENSIVE,
     "You are difficult to pin down.",
     "You gain 10% concealment from all attacks.",
     (ab("dex", 23), skill("hide", 30), skill("tumble", 30), feat("Improved Evasion")))

# -- Magic --
_reg("epic_spellcasting", "Epic Spellcasting", Cat.MAGIC,
     "You can cast and develop epic spells.",
     "You can develop and cast epic spells.",
     (skill("spellcraft", 24), skill("knowledge (arcana)", 24), feat("9th-Level Spells")))
_reg("ignore_material_components", "Ignore Material Components", Cat.MAGIC,
     "You need no material components.",
     "You can cast spells without material components.",
     (feat("Eschew Materials"), skill("spellcraft", 25)))
_reg("improved_metamagic", "Improved Metamagic", Cat.MAGIC,
     "Your metamagic is more efficient.",
     "The spell level increase of your metamagic feats is reduced by one.",
     (skill("spellcraft", 30), feat("Empower Spell"), feat("Extend Spell"), feat("Quicken Spell")),
     repeatable=True)
_reg("improved_spell_capacity", "Improved Spell Capacity", Cat.MAGIC,
     "You can prepare more powerful spells.",
     "You gain one spell slot of a level higher than your maximum.",
     (feat("9th-Level Spells"),), repeatable=True)
_reg("multispell", "Multispell", Cat.MAGIC,
     "You cast several quickened spells at once.",
     "You can cast one additional quickened spell in a round.",
     (ab("int", 25), feat("Quicken Spell")), repeatable=True)
_reg("multitude_of_missiles", "Multitude of Missiles", Cat.MAGIC,
     "Your magic missiles fill the air.",
     "Your magic missile spell creates many more missiles.",
     (ab("int", 21), feat("Enhance Spell")))
_reg("permanent_emanation", "Permanent Emanation", Cat.MAGIC,
     "One emanation of yours becomes permanent.",
     "Choose one emanation spell. That spell becomes permanent.",
     (skill("spellcraft", 25),), repeatable=True)
_reg("spell_stowaway", "Spell Stowaway", Cat.MAGIC,
     "A spell waits to trigger when you are targeted.",
     "A designated spell triggers automatically when a chosen spell is cast on you.",
     (skill("spellcraft", 24),), repeatable=True)
_reg("spellcasting_harrier", "Spellcasting Harrier", Cat.MAGIC,
     "Casters near you find spellcasting difficult.",
     "You gain a +4 bonus on checks to disrupt spellcasters.",
     (feat("Combat Reflexes"),))
_reg("spontaneous_spell", "Spontaneous Spell", Cat.MAGIC,
     "One spell is always at hand.",
     "You can spontaneously cast one chosen spell.",
     (skill("spellcraft", 25),), repeatable=True)
_reg("tenacious_magic", "Tenacious Magic", Cat.MAGIC,
     "Your spells resist dispelling.",
     "Your spells have a +4 bonus on checks to resist being dispelled.",
     (skill("spellcraft", 15),), repeatable=True)
_reg("zone_of_animation", "Zone of Animation", Cat.MAGIC,
     "Objects around you come alive.",
     "You can animate objects in a 30-foot radius.",
     (ab("cha", 25), feat("Turn Undead")))

# -- Divine --
_reg("improved_turning", "Improved Turning", Cat.DIVINE,
     "Your turning is more potent.",
     "You turn undead as if you were one level higher.",
     (ab("cha", 21), feat("Turn Undead")))
_reg("negative_energy_burst", "Negative Energy Burst", Cat.DIVINE,
     "You release a burst of negative energy.",
     "You can use a negative energy burst once per day.",
     (ab("cha", 25), feat("Rebuke Undead")))
_reg("planar_turning", "Planar Turning", Cat.DIVINE,
     "You can turn outsiders.",
     "You can turn outsiders as if they were undead.",
     (ab("wis", 25), ab("cha", 25), feat("Turn Undead")))
_reg("positive_energy_aura", "Positive Energy Aura", Cat.DIVINE,
     "Undead near you are destroyed.",
     "You radiate positive energy in a 30-foot radius.",
     (ab("cha", 25), feat("Turn Undead"), feat("Quicken Turning")))
_reg("spontaneous_domain_access", "Spontaneous Domain Access", Cat.DIVINE,
     "Domain spells come to you unbidden.",
     "You can spontaneously cast spells of one of your domains.",
     (ab("wis", 25), skill("spellcraft", 25)), repeatable=True)
_reg("widen_aura_of_courage", "Widen Aura of Courage", Cat.DIVINE,
     "Your aura of courage extends further.",
     "Your aura of courage extends to 100 feet.",
     (ab("cha", 25), feat("Aura of Courage")))

# -- Psionic --
_reg("improved_manifestation", "Improved Manifestation", Cat.PSIONIC,
     "Your psionic powers are stronger.",
     "You gain one additional power point per manifester level.",
     (feat("Psionic"), skill("psicraft", 24)))

# -- Utility / skill --
_reg("epic_endurance", "Epic Endurance", Cat.UTILITY,
     "You have boundless endurance.",
     "You gain a +10 bonus on checks for physical exertion.",
     (ab("con", 21), feat("Endurance")), (_fx(Fx.SKILL, 10, "endurance"),))
_reg("epic_skill_focus", "Epic Skill Focus", Cat.SKILL,
     "You are legendary with one skill.",
     "You gain a +10 bonus on checks with the chosen skill.",
     (feat("Skill Focus"),), (_fx(Fx.SKILL, 10, "chosen"),), repeatable=True)
_reg("epic_speed", "Epic Speed", Cat.UTILITY,
     "You move faster than normal.",
     "Your base land speed increases by 30 feet.",
     (ab("dex", 21), feat("Run")), (_fx(Fx.SPEED, 30),))
_reg("improved_darkvision", "Improved Darkvision", Cat.UTILITY,
     "Your darkvision is sharper.",
     "The range of your darkvision doubles.",
     (feat("Darkvision"),))
_reg("improved_low_light_vision", "Improved Low-Light Vision", Cat.UTILITY,
     "Your low-light vision is sharper.",
     "You see four times as far as a human in poor light.",
     (feat("Low-Light Vision"),))
_reg("legendary_climber", "Legendary Climber", Cat.UTILITY,
     "You can climb nearly anything.",
     "You gain a +20 bonus on Climb checks.",
     (ab("dex", 21), skill("climb", 24), skill("balance", 12)), (_fx(Fx.SKILL, 20, "climb"),))
_reg("legendary_leaper", "Legendary Leaper", Cat.UTILITY,
     "You leap incredible distances.",
     "You gain a +10 bonus on Jump checks.",
     (ab("str", 21), feat("Power Attack"), skill("jump", 24)), (_fx(Fx.SKILL, 10, "jump"),))
_reg("legendary_rider", "Legendary Rider", Cat.UTILITY,
     "You are a superb mounted combatant.",
     "You gain a +10 bonus on Ride checks.",
     (ab("dex", 21), skill("ride", 24), feat("Mounted Combat")), (_fx(Fx.SKILL, 10, "ride"),))
_reg("legendary_tracker", "Legendary Tracker", Cat.UTILITY,
     "You can track across any terrain.",
     "You gain a +20 bonus on Survival checks made to track.",
     (ab("wis", 21), skill("survival", 30), feat("Track")), (_fx(Fx.SKILL, 20, "survival"),))
_reg("reactive_countersong", "Reactive Countersong", Cat.UTILITY,
     "You counter sonic magic instantly.",
     "You can use countersong as an immediate action.",
     (skill("perform", 30), feat("Countersong"), feat("Combat Reflexes")))
_reg("swift_and_silent", "Swift and Silent", Cat.UTILITY,
     "You move stealthily at full speed.",
     "You can move at full speed while hiding without penalty.",
     (skill("hide", 24), skill("move silently", 24)))
_reg("trap_sense", "Trap Sense", Cat.UTILITY,
     "You have an uncanny sense for traps.",
     "You gain a +4 bonus on Reflex saves against traps.",
     (skill("search", 21), feat("Trapfinding")), (_fx(Fx.SKILL, 4, "search"),))

# -- Ability --
for _ability, _label in (
    ("str", "Strength"), ("dex", "Dexterity"), ("con", "Constitution"),
    ("int", "Intelligence"), ("wis", "Wisdom"), ("cha", "Charisma"),
):
    _reg(f"great_{_label.lower()}", f"Great {_label}", Cat.ABILITY,
         f"Your {_label} surpasses mortal limits.",
         f"Your {_label} score increases by 1.",
         (), (_fx(Fx.ABILITY, 1, _ability),), repeatable=True)

# -- Leadership / social --
_reg("epic_leadership", "Epic Leadership", Cat.LEADERSHIP,
     "You attract legendary followers.",
     "Your Leadership score improves and you attract epic cohorts.",
     (ab("cha", 25), feat("Leadership")))
_reg("epic_reputation", "Epic Reputation", Cat.SOCIAL,
     "Your reputation precedes you.",
     "You gain a +4 bonus on Bluff, Diplomacy, Gather Information, Intimidate and Perform checks.",
     (ab("cha", 21),), (_fx(Fx.SKILL, 4, "diplomacy"),))
_reg("improved_aura_of_courage", "Improved Aura of Courage", Cat.LEADERSHIP,
     "Your courage inspires even more.",
     "Your aura of courage grants a +8 morale bonus against fear.",
     (ab("cha", 25), feat("Aura of Courage")))
_reg("ranged_inspiration", "Ranged Inspiration", Cat.LEADERSHIP,
     "Your inspiration carries further.",
     "The range of your bardic music doubles.",
     (skill("perform", 25), feat("Bardic Music")))

# -- Item creation --
_reg("additional_magic_item_space", "Additional Magic Item Space", Cat.ITEM_CREATION,
     "You can wear one more magic item.",
     "You can benefit from one additional magic item of each wearable type.",
     repeatable=True)
_reg("efficient_item_creation", "Efficient Item Creation", Cat.ITEM_CREATION,
     "You craft magic items quickly.",
     "Creating a magic item takes one day per 10000 gp of its price.",
     (skill("spellcraft", 20), feat("Craft Wondrous Item")), repeatable=True)

# -- Epic abilities: tiered, each tier chained on the previous one --
_reg("epic_toughness_1", "Epic Toughness I", Cat.EPIC_ABILITY,
     "The first step of legendary resilience.",
     "You gain +10 hit points.",
     (feat("Toughness"),), (_fx(Fx.HIT_POINTS, 10),), min_level=21)
_reg("epic_toughness_2", "Epic Toughness II", Cat.EPIC_ABILITY,
     "Your resilience deepens.",
     "You gain +10 hit points.",
     (epic("epic_toughness_1"),), (_fx(Fx.HIT_POINTS, 10),), min_level=24)
_reg("epic_toughness_3", "Epic Toughness III", Cat.EPIC_ABILITY,
     "Your resilience approaches the divine.",
     "You gain +10 hit points.",
     (epic("epic_toughness_2"),), (_fx(Fx.HIT_POINTS, 10),), min_level=27)
_reg("epic_toughness_4", "Epic Toughness IV", Cat.EPIC_ABILITY,
     "Your body is nearly indestructible.",
     "You gain +10 hit points.",
     (epic("epic_toughness_3"),), (_fx(Fx.HIT_POINTS, 10),), min_level=30)
