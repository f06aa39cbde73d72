from __future__ import annotations

import pytest

from roadwar.events import CombatLog, ModifierExpiredEvent
from roadwar.game.entity import Entity
from roadwar.game.enums import Attribute, ModifierCategory, ModifierType
from roadwar.game.modifiers import AttributeModifier, StatCalculator


def flat(attribute: Attribute, value: float, **kwargs) -> AttributeModifier:
    return AttributeModifier(attribute, ModifierType.FLAT, value, **kwargs)


class TestStatCalculator:
    def test_flat_modifiers_sum_onto_base(self) -> None:
        mods = [flat(Attribute.ARMOR_CLASS, 2), flat(Attribute.ARMOR_CLASS, -1)]
        assert StatCalculator.calculate(mods, Attribute.ARMOR_CLASS, 14) == 15

    def test_multiplicative_modifiers_apply_after_flat(self) -> None:
        mods = [
            flat(Attribute.MAX_SPEED, 2),
            AttributeModifier(Attribute.MAX_SPEED, ModifierType.PERCENT, 50),
            AttributeModifier(Attribute.MAX_SPEED, ModifierType.MULTIPLIER, 2.0),
        ]
        # (10 + 2) * 1.5 * 2.0
        assert StatCalculator.calculate(mods, Attribute.MAX_SPEED, 10) == 36

    def test_other_attributes_are_ignored(self) -> None:
        mods = [flat(Attribute.MOBILITY, 5)]
        assert StatCalculator.calculate(mods, Attribute.ARMOR_CLASS, 12) == 12

    def test_breakdown_lists_contributors(self) -> None:
        mod = flat(Attribute.ARMOR_CLASS, 3, display_name_override="Plating")
        zero = flat(Attribute.ARMOR_CLASS, 0)
        breakdown = StatCalculator.breakdown([mod, zero], Attribute.ARMOR_CLASS, 12)
        assert breakdown.total == 15
        assert breakdown.modifiers == [mod]
        assert breakdown.modifier_delta == 3
        assert "Plating" in str(breakdown)

    def test_zero_multiplier_is_kept(self) -> None:
        stop = AttributeModifier(Attribute.MAX_SPEED, ModifierType.MULTIPLIER, 0)
        breakdown = StatCalculator.breakdown([stop], Attribute.MAX_SPEED, 8)
        assert breakdown.total == 0
        assert breakdown.modifiers == [stop]


class TestModifierCollection:
    def test_removal_by_reference_restores_stat(self) -> None:
        entity = Entity("Hull", armor_class=12)
        mod = entity.modifiers.add(flat(Attribute.ARMOR_CLASS, 4))
        assert entity.effective_armor_class == 16

        assert entity.modifiers.remove(mod)
        assert entity.effective_armor_class == 12
        assert mod not in entity.modifiers
        assert not entity.modifiers.remove(mod)

    def test_identical_modifiers_are_removed_independently(self) -> None:
        entity = Entity("Hull", armor_class=12)
        first = entity.modifiers.add(flat(Attribute.ARMOR_CLASS, 1))
        entity.modifiers.add(flat(Attribute.ARMOR_CLASS, 1))
        entity.modifiers.remove(first)
        assert entity.effective_armor_class == 13

    def test_remove_from_source(self) -> None:
        entity = Entity("Hull")
        source = object()
        entity.modifiers.add(flat(Attribute.ARMOR_CLASS, 1, source=source))
        entity.modifiers.add(flat(Attribute.MOBILITY, 1, source=source))
        keep = entity.modifiers.add(flat(Attribute.MOBILITY, 2))

        removed = entity.modifiers.remove_from_source(source)
        assert len(removed) == 2
        assert list(entity.modifiers) == [keep]

    def test_remove_by_category(self) -> None:
        entity = Entity("Hull")
        entity.modifiers.add(
            flat(Attribute.ARMOR_CLASS, 1, category=ModifierCategory.EQUIPMENT)
        )
        aura = entity.modifiers.add(
            flat(Attribute.ARMOR_CLASS, 1, category=ModifierCategory.AURA)
        )
        entity.modifiers.remove_by_category(ModifierCategory.EQUIPMENT)
        assert list(entity.modifiers) == [aura]
        assert aura.is_dispellable


class TestModifierDurations:
    @pytest.mark.parametrize("duration", [1, 2, 5])
    def test_temporary_modifier_gone_after_exactly_n_updates(
        self, duration: int
    ) -> None:
        entity = Entity("Hull")
        mod = entity.modifiers.add(
            flat(Attribute.ARMOR_CLASS, 2, duration_turns=duration)
        )
        assert mod.is_temporary

        for _ in range(duration - 1):
            entity.update_modifiers()
        assert mod in entity.modifiers

        entity.update_modifiers()
        assert mod not in entity.modifiers

    def test_permanent_modifier_survives_updates(self) -> None:
        entity = Entity("Hull")
        mod = entity.modifiers.add(flat(Attribute.ARMOR_CLASS, 2))
        assert mod.is_permanent
        for _ in range(50):
            entity.update_modifiers()
        assert mod in entity.modifiers

    def test_expiry_is_reported(self, combat_log: CombatLog) -> None:
        entity = Entity("Hull")
        mod = entity.modifiers.add(
            flat(
                Attribute.ARMOR_CLASS,
                2,
                duration_turns=1,
                display_name_override="Smoke",
            )
        )
        entity.update_modifiers(combat_log)

        assert len(combat_log.history) == 1
        entry = combat_log.history[0]
        assert "Smoke" in entry.message
        assert entry.involves(entity)

    def test_expiry_event_reaches_subscribers(self, combat_log: CombatLog) -> None:
        seen: list[ModifierExpiredEvent] = []
        combat_log.event_bus.subscribe(ModifierExpiredEvent, seen.append)
        entity = Entity("Hull")
        mod = entity.modifiers.add(flat(Attribute.MOBILITY, -1, duration_turns=1))
        entity.update_modifiers(combat_log)
        assert [event.modifier for event in seen] == [mod]
