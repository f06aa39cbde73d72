from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from roadwar.events import CombatLog, DamageEvent
from roadwar.game.components import WeaponProfile, make_weapon
from roadwar.game.damage import (
    DamageApplicator,
    DamageCalculator,
    DamageFormula,
    DamageMode,
    DamagePacket,
    DamageResult,
    apply_resistance,
)
from roadwar.game.entity import Entity
from roadwar.game.enums import (
    Attribute,
    DamageSource,
    DamageType,
    ModifierType,
    ResistanceLevel,
)
from roadwar.game.modifiers import AttributeModifier
from roadwar.game.status_effects import StatusEffect
from tests.helpers import FixedRandom


def make_gun(dice: int = 1, size: int = 8, bonus: int = 2):
    return make_weapon(
        "Autocannon",
        profile=WeaponProfile(dice, size, bonus, damage_type=DamageType.PIERCING),
    )


class TestResistanceAlgebra:
    @pytest.mark.parametrize("damage", range(0, 25))
    def test_every_level(self, damage: int) -> None:
        assert apply_resistance(damage, ResistanceLevel.NORMAL) == damage
        assert apply_resistance(damage, ResistanceLevel.VULNERABLE) == 2 * damage
        assert apply_resistance(damage, ResistanceLevel.RESISTANT) == damage // 2
        assert apply_resistance(damage, ResistanceLevel.IMMUNE) == 0

    @pytest.mark.parametrize("level", list(ResistanceLevel))
    def test_never_negative(self, level: ResistanceLevel) -> None:
        assert apply_resistance(-7, level) >= 0


class TestDamageCalculator:
    def test_skill_only(self) -> None:
        formula = DamageFormula(skill_dice=2, skill_die_size=6, skill_bonus=1)
        with patch("random.randint", FixedRandom([3, 5])):
            result = DamageCalculator.compute(formula)
        assert result.raw_total == 9
        assert result.damage_type is DamageType.PHYSICAL

    def test_weapon_plus_skill(self) -> None:
        formula = DamageFormula(DamageMode.WEAPON_PLUS_SKILL, 1, 6, 0)
        with patch("random.randint", FixedRandom([5, 4])):
            result = DamageCalculator.compute(formula, make_gun())
        # one d8, one d6, the weapon's +2
        assert result.raw_total == 5 + 4 + 2
        assert [c.source for c in result.components] == ["weapon", "skill"]
        assert result.damage_type is DamageType.PIERCING

    def test_weapon_plus_skill_critical_rolls_dice_twice(self) -> None:
        formula = DamageFormula(DamageMode.WEAPON_PLUS_SKILL, 1, 6, 0)
        fr = FixedRandom([5, 3, 4, 2])
        with patch("random.randint", fr):
            result = DamageCalculator.compute(formula, make_gun(), is_critical=True)
        assert fr.calls == 4
        # Bonus added once
        assert result.raw_total == (5 + 3) + (4 + 2) + 2
        assert result.is_critical

    def test_weapon_multiplied_scales_dice_not_bonus(self) -> None:
        formula = DamageFormula(DamageMode.WEAPON_MULTIPLIED, weapon_multiplier=2.0)
        with patch("random.randint", FixedRandom([3, 6])):
            result = DamageCalculator.compute(formula, make_gun())
        assert result.components[0].dice_count == 2
        assert result.components[0].notation == "2d8+2"
        assert result.raw_total == 3 + 6 + 2

    def test_weapon_only_reads_effective_weapon_stats(self) -> None:
        gun = make_gun()
        bonus = AttributeModifier(Attribute.DAMAGE_BONUS, ModifierType.FLAT, 3)
        gun.modifiers.add(bonus)
        with patch("random.randint", FixedRandom([4])):
            formula = DamageFormula(DamageMode.WEAPON_ONLY)
            result = DamageCalculator.compute(formula, gun)
        assert result.raw_total == 4 + 5

    def test_skill_damage_type_when_weapon_type_disabled(self) -> None:
        formula = DamageFormula(
            DamageMode.WEAPON_ONLY,
            skill_damage_type=DamageType.FIRE,
            use_weapon_damage_type=False,
        )
        with patch("random.randint", FixedRandom([1])):
            result = DamageCalculator.compute(formula, make_gun())
        assert result.damage_type is DamageType.FIRE

    def test_missing_weapon_yields_empty_result(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            result = DamageCalculator.compute(DamageFormula(DamageMode.WEAPON_ONLY))
        assert result.is_empty
        assert result.raw_total == 0
        assert "needs a weapon" in caplog.text

    def test_resistance_applied_when_requested(self) -> None:
        with patch("random.randint", FixedRandom([5])):
            result = DamageCalculator.compute(
                DamageFormula(skill_bonus=2), resistance=ResistanceLevel.RESISTANT
            )
        assert result.raw_total == 7
        assert result.final_damage == 3

    def test_expected_damage(self) -> None:
        formula = DamageFormula(DamageMode.WEAPON_PLUS_SKILL, 1, 6, 0)
        assert DamageCalculator.expected_damage(formula, make_gun()) == pytest.approx(
            4.5 + 2 + 3.5
        )
        multiplied = DamageFormula(DamageMode.WEAPON_MULTIPLIED, weapon_multiplier=1.5)
        # 1 x 1.5 rounds to 2 dice
        expected = DamageCalculator.expected_damage(multiplied, make_gun())
        assert expected == pytest.approx(9 + 2)
        weapon_only = DamageFormula(DamageMode.WEAPON_ONLY)
        assert DamageCalculator.expected_damage(weapon_only) == 0


class TestDamageApplicator:
    def test_applies_resistance_once_and_emits(self, combat_log: CombatLog) -> None:
        seen: list[DamageEvent] = []
        combat_log.event_bus.subscribe(DamageEvent, seen.append)
        target = Entity(
            "Hull",
            max_health=30,
            resistances={DamageType.PIERCING: ResistanceLevel.VULNERABLE},
        )
        result = DamageResult.flat(6, DamageType.PIERCING)

        dealt = DamageApplicator(combat_log).apply(result, target)
        assert dealt == 12
        assert target.health == 18
        assert result.final_damage == 12
        assert len(seen) == 1

    def test_destroyed_target_is_a_no_op(self, combat_log: CombatLog) -> None:
        target = Entity("Hull", max_health=5)
        applicator = DamageApplicator(combat_log)
        applicator.apply_flat(10, DamageType.PHYSICAL, target)
        assert target.is_destroyed
        events_before = len(combat_log.history)

        assert applicator.apply_flat(10, DamageType.PHYSICAL, target) == 0
        assert target.health == 0
        assert len(combat_log.history) == events_before

    def test_destruction_hook_runs_once(self) -> None:
        calls: list[str] = []

        class Fragile(Entity):
            def on_destroyed(self) -> None:
                calls.append(self.name)

        target = Fragile("Glass", max_health=3)
        applicator = DamageApplicator()
        applicator.apply_flat(5, DamageType.PHYSICAL, target)
        applicator.apply_flat(5, DamageType.PHYSICAL, target)
        target.take_damage(5)
        assert calls == ["Glass"]

    def test_immune_hit_is_reported(self, combat_log: CombatLog) -> None:
        seen: list[DamageEvent] = []
        combat_log.event_bus.subscribe(DamageEvent, seen.append)
        target = Entity("Shield", resistances={DamageType.FIRE: ResistanceLevel.IMMUNE})

        assert DamageApplicator(combat_log).apply_flat(8, DamageType.FIRE, target) == 0
        assert target.health == target.max_health
        (event,) = seen
        assert event.result.final_damage == 0
        (entry,) = combat_log.history
        assert entry.message == "Shield: Shield is immune to fire damage"

    def test_resisted_to_zero_emits_nothing(self, combat_log: CombatLog) -> None:
        resistances = {DamageType.ACID: ResistanceLevel.RESISTANT}
        target = Entity("Hull", resistances=resistances)
        assert DamageApplicator(combat_log).apply_flat(1, DamageType.ACID, target) == 0
        assert len(combat_log.history) == 0

    def test_non_positive_damage_is_ignored(self) -> None:
        target = Entity("Hull")
        assert DamageApplicator().apply_flat(0, DamageType.PHYSICAL, target) == 0
        assert DamageApplicator().apply_flat(-3, DamageType.PHYSICAL, target) == 0
        assert target.health == target.max_health

    def test_packet_from_attacker(self, combat_log: CombatLog) -> None:
        seen: list[DamageEvent] = []
        combat_log.event_bus.subscribe(DamageEvent, seen.append)
        gunner = Entity("Gunner")
        target = Entity("Hull", max_health=20)
        packet = DamagePacket.from_attacker(
            5, DamageType.PIERCING, gunner, "Ram", is_critical=True
        )
        assert packet.source_type is DamageSource.WEAPON

        assert DamageApplicator(combat_log).apply_packet(packet, target) == 5
        (event,) = seen
        assert event.source is gunner
        assert event.causal_source == "Ram"
        assert event.source_type is DamageSource.WEAPON
        assert event.result.is_critical

    def test_environmental_flat_respects_resistance(
        self, combat_log: CombatLog
    ) -> None:
        seen: list[DamageEvent] = []
        combat_log.event_bus.subscribe(DamageEvent, seen.append)
        target = Entity(
            "Hull",
            max_health=20,
            resistances={DamageType.FIRE: ResistanceLevel.RESISTANT},
        )

        dealt = DamageApplicator(combat_log).apply_environmental_flat(
            7, DamageType.FIRE, target, causal_source="Oil Fire"
        )
        assert dealt == 3
        assert target.health == 17
        (event,) = seen
        assert event.source is None
        assert event.source_type is DamageSource.ENVIRONMENT
        assert event.result.resistance is ResistanceLevel.RESISTANT

    def test_environmental_damage_can_ignore_resistance(self) -> None:
        target = Entity(
            "Hull",
            max_health=20,
            resistances={DamageType.ACID: ResistanceLevel.RESISTANT},
        )
        packet = DamagePacket.environmental(6, DamageType.ACID, ignores_resistance=True)
        assert DamageApplicator().apply_packet(packet, target) == 6
        assert packet.source_type is DamageSource.ENVIRONMENT

    def test_environmental_dice(self, combat_log: CombatLog) -> None:
        target = Entity("Hull", max_health=20)
        with patch("random.randint", FixedRandom([2, 3])):
            dealt = DamageApplicator(combat_log).apply_environmental_dice(
                2, 4, 1, DamageType.PHYSICAL, target, causal_source="Spike Strip"
            )
        assert dealt == 6
        assert target.health == 14

    def test_damage_amplification(self) -> None:
        target = Entity("Hull", max_health=30)
        target.apply_status_effect(StatusEffect("Exposed", damage_amplification=1.5))
        assert DamageApplicator().apply_flat(5, DamageType.PHYSICAL, target) == 7
