from __future__ import annotations

import pytest

from roadwar.game.damage import DamageFormula
from roadwar.game.effects import (
    ApplyStatusEffect,
    AttributeModifierEffect,
    CustomEffect,
    DamageEffect,
    PositionChangeEffect,
    ResourceRestorationEffect,
    SetSpeedCommand,
)
from roadwar.game.enums import Attribute, ResourceType
from roadwar.game.routing import VehicleEffectRouter
from roadwar.game.status_effects import ModifierData, StatusEffect
from roadwar.game.vehicle import Vehicle
from tests.helpers import make_vehicle


@pytest.mark.parametrize("attribute", list(Attribute))
def test_every_attribute_resolves_to_a_component(
    attacker: Vehicle, attribute: Attribute
) -> None:
    component = VehicleEffectRouter.resolve_modifier_target(attacker, attribute)
    assert component is not None
    assert attacker.owns(component)


@pytest.mark.parametrize("attribute", list(Attribute))
def test_every_attribute_resolves_without_a_drive(attribute: Attribute) -> None:
    vehicle = make_vehicle("Trike", with_drive=False)
    component = VehicleEffectRouter.resolve_modifier_target(vehicle, attribute)
    assert vehicle.owns(component)


def test_attribute_table(attacker: Vehicle) -> None:
    drive = attacker.get_drive_component()
    resolve = VehicleEffectRouter.resolve_modifier_target
    assert resolve(attacker, Attribute.ARMOR_CLASS) is attacker.chassis
    assert resolve(attacker, Attribute.MOBILITY) is attacker.chassis
    assert resolve(attacker, Attribute.MAX_ENERGY) is attacker.power_core
    assert resolve(attacker, Attribute.ENERGY_REGEN) is attacker.power_core
    assert resolve(attacker, Attribute.MAX_SPEED) is drive
    assert resolve(attacker, Attribute.STABILITY) is drive
    # Unlisted attributes default to the chassis
    assert resolve(attacker, Attribute.AMMO) is attacker.chassis


def test_drive_attributes_fall_back_to_chassis() -> None:
    vehicle = make_vehicle("Trike", with_drive=False)
    resolved = VehicleEffectRouter.resolve_modifier_target(vehicle, Attribute.MAX_SPEED)
    assert resolved is vehicle.chassis


class TestEffectRouting:
    def test_damage_goes_to_chassis(self, attacker: Vehicle) -> None:
        effect = DamageEffect(DamageFormula())
        assert VehicleEffectRouter.route_effect(effect, attacker) is attacker.chassis

    def test_restoration_goes_to_chassis(self, attacker: Vehicle) -> None:
        for resource in ResourceType:
            effect = ResourceRestorationEffect(resource, 5)
            routed = VehicleEffectRouter.route_effect(effect, attacker)
            assert routed is attacker.chassis

    def test_modifier_follows_attribute(self, attacker: Vehicle) -> None:
        effect = AttributeModifierEffect(Attribute.MAX_SPEED, value=-2)
        routed = VehicleEffectRouter.route_effect(effect, attacker)
        assert routed is attacker.get_drive_component()

    def test_status_follows_first_modifier(self, attacker: Vehicle) -> None:
        overcharge = StatusEffect(
            "Overcharge",
            modifiers=(
                ModifierData(Attribute.ENERGY_REGEN, value=2),
                ModifierData(Attribute.ARMOR_CLASS, value=-1),
            ),
        )
        effect = ApplyStatusEffect(overcharge)
        routed = VehicleEffectRouter.route_effect(effect, attacker)
        assert routed is attacker.power_core

    def test_status_without_modifiers_goes_to_chassis(self, attacker: Vehicle) -> None:
        effect = ApplyStatusEffect(StatusEffect("Stunned", prevents_actions=True))
        assert VehicleEffectRouter.route_effect(effect, attacker) is attacker.chassis

    @pytest.mark.parametrize(
        "effect",
        [PositionChangeEffect(1), CustomEffect("Boost", SetSpeedCommand())],
    )
    def test_other_effects_fall_back_to_chassis(
        self, attacker: Vehicle, effect
    ) -> None:
        assert VehicleEffectRouter.route_effect(effect, attacker) is attacker.chassis
