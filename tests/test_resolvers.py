from __future__ import annotations

from unittest.mock import patch

from roadwar.events import (
    AttackRollEvent,
    CombatLog,
    DamageEvent,
    OpposedCheckEvent,
    SavingThrowEvent,
    SkillCheckEvent,
)
from roadwar.game.damage import DamageFormula
from roadwar.game.effects import DamageEffect, EffectInvocation
from roadwar.game.enums import (
    Attribute,
    ModifierType,
    SkillRollType,
    TargetPrecision,
)
from roadwar.game.modifiers import AttributeModifier
from roadwar.game.skills import Skill, SkillExecutor
from roadwar.game.vehicle import Vehicle
from tests.helpers import FixedRandom, weapon_of

BLAST = EffectInvocation(DamageEffect(DamageFormula(skill_dice=1, skill_die_size=6)))


def make_skill(roll_type: SkillRollType, **kwargs) -> Skill:
    return Skill("Blast", roll_type=roll_type, effect_invocations=(BLAST,), **kwargs)


def last_action_events(log: CombatLog, event_type: type) -> list:
    return log.completed_actions[-1].events_of(event_type)


class TestAttackResolver:
    def test_hit_routes_damage_to_chassis(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        skill = make_skill(SkillRollType.ATTACK_ROLL)
        with patch("random.randint", FixedRandom([10, 4])):
            used = SkillExecutor(combat_log).execute(
                skill, attacker, defender, source_component=weapon_of(attacker)
            )

        assert used
        assert defender.chassis.health == 36
        (roll_event,) = last_action_events(combat_log, AttackRollEvent)
        assert roll_event.is_hit
        assert roll_event.roll.total == 13

    def test_miss_applies_nothing(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        skill = make_skill(SkillRollType.ATTACK_ROLL)
        with patch("random.randint", FixedRandom([8])):
            used = SkillExecutor(combat_log).execute(
                skill, attacker, defender, source_component=weapon_of(attacker)
            )

        assert not used
        assert defender.chassis.health == 40
        assert not last_action_events(combat_log, DamageEvent)

    def test_auto_precision_ignores_chosen_component(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        drive = defender.get_drive_component()
        skill = make_skill(
            SkillRollType.ATTACK_ROLL, target_precision=TargetPrecision.AUTO
        )
        with patch("random.randint", FixedRandom([10, 4])):
            SkillExecutor(combat_log).execute(
                skill,
                attacker,
                defender,
                source_component=weapon_of(attacker),
                target_component=drive,
            )

        assert drive.health == drive.max_health
        assert defender.chassis.health == 36
        assert len(last_action_events(combat_log, AttackRollEvent)) == 1

    def test_critical_hit_doubles_dice(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        skill = make_skill(SkillRollType.ATTACK_ROLL)
        with patch("random.randint", FixedRandom([20, 5, 3])):
            SkillExecutor(combat_log).execute(
                skill, attacker, defender, source_component=weapon_of(attacker)
            )

        (damage,) = last_action_events(combat_log, DamageEvent)
        assert damage.result.is_critical
        assert damage.result.final_damage == 8
        assert defender.chassis.health == 32


class TestTwoStageAttack:
    def precise(self) -> Skill:
        return make_skill(
            SkillRollType.ATTACK_ROLL, target_precision=TargetPrecision.PRECISE
        )

    def armor_drive(self, defender: Vehicle) -> None:
        drive = defender.get_drive_component()
        armor = AttributeModifier(Attribute.ARMOR_CLASS, ModifierType.FLAT, 6)
        drive.modifiers.add(armor)

    def test_component_hit_rolls_once(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        drive = defender.get_drive_component()
        with patch("random.randint", FixedRandom([10, 4])):
            used = SkillExecutor(combat_log).execute(
                self.precise(),
                attacker,
                defender,
                source_component=weapon_of(attacker),
                target_component=drive,
            )

        assert used
        assert drive.health == 16
        assert defender.chassis.health == 40
        (roll_event,) = last_action_events(combat_log, AttackRollEvent)
        assert roll_event.target is drive
        assert not roll_event.is_chassis_fallback

    def test_component_miss_falls_back_to_chassis_with_penalty(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        self.armor_drive(defender)
        drive = defender.get_drive_component()
        with patch("random.randint", FixedRandom([12, 11, 4])):
            used = SkillExecutor(combat_log).execute(
                self.precise(),
                attacker,
                defender,
                source_component=weapon_of(attacker),
                target_component=drive,
            )

        assert used
        assert drive.health == drive.max_health
        assert defender.chassis.health == 36

        first, fallback = last_action_events(combat_log, AttackRollEvent)
        assert not first.is_hit
        assert fallback.is_chassis_fallback
        assert fallback.target is defender.chassis
        assert fallback.roll.total == 12
        assert ("Component targeting", -2) in [
            (b.label, b.value) for b in fallback.roll.bonuses
        ]

    def test_double_miss_applies_nothing(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        self.armor_drive(defender)
        drive = defender.get_drive_component()
        fr = FixedRandom([12, 10])
        with patch("random.randint", fr):
            used = SkillExecutor(combat_log).execute(
                self.precise(),
                attacker,
                defender,
                source_component=weapon_of(attacker),
                target_component=drive,
            )

        assert not used
        assert fr.calls == 2
        assert defender.chassis.health == 40
        assert len(last_action_events(combat_log, AttackRollEvent)) == 2


class TestSaveResolver:
    def test_successful_save_resists(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        skill = make_skill(SkillRollType.SAVING_THROW, save_dc_base=15)
        with patch("random.randint", FixedRandom([12])):
            used = SkillExecutor(combat_log).execute(skill, attacker, defender)

        assert not used
        assert defender.chassis.health == 40
        (save,) = last_action_events(combat_log, SavingThrowEvent)
        assert save.succeeded
        assert save.roll.total == 15

    def test_failed_save_applies_effects(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        skill = make_skill(SkillRollType.SAVING_THROW, save_dc_base=15)
        with patch("random.randint", FixedRandom([11, 4])):
            used = SkillExecutor(combat_log).execute(skill, attacker, defender)

        assert used
        assert defender.chassis.health == 36
        (save,) = last_action_events(combat_log, SavingThrowEvent)
        assert not save.succeeded


class TestCheckResolver:
    def test_passed_check(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        skill = make_skill(SkillRollType.SKILL_CHECK, check_dc=15)
        with patch("random.randint", FixedRandom([15, 4])):
            assert SkillExecutor(combat_log).execute(skill, attacker, defender)
        (check,) = last_action_events(combat_log, SkillCheckEvent)
        assert check.succeeded

    def test_failed_check(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        skill = make_skill(SkillRollType.SKILL_CHECK, check_dc=15)
        with patch("random.randint", FixedRandom([14])):
            assert not SkillExecutor(combat_log).execute(skill, attacker, defender)
        assert defender.chassis.health == 40


class TestOpposedCheckResolver:
    def test_tie_goes_to_defender(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        skill = make_skill(SkillRollType.OPPOSED_CHECK)
        # Attacker mobility 0 rolls 13, defender mobility 3 rolls 10
        with patch("random.randint", FixedRandom([13, 10])):
            used = SkillExecutor(combat_log).execute(skill, attacker, defender)

        assert not used
        (opposed,) = last_action_events(combat_log, OpposedCheckEvent)
        assert opposed.attacker_roll.total == opposed.defender_roll.total
        assert not opposed.attacker_won

    def test_higher_total_wins(
        self, combat_log: CombatLog, attacker: Vehicle, defender: Vehicle
    ) -> None:
        skill = make_skill(SkillRollType.OPPOSED_CHECK)
        with patch("random.randint", FixedRandom([14, 10, 4])):
            used = SkillExecutor(combat_log).execute(skill, attacker, defender)

        assert used
        assert defender.chassis.health == 36
