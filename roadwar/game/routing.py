"""
Routing effects and modifiers onto the right component of a vehicle.

A vehicle is never the direct target of an effect: the effect lands on one
of its components. The router picks that component.

Effect routing:

- Damage and resource restoration go to the chassis.
- Attribute modifiers go to the component that owns the attribute.
- Status effects go to the component owning their first modifier's
  attribute, or the chassis if they install no modifiers.
- Anything else goes to the chassis.

The attribute table is total: every :class:`Attribute` resolves to some
component, and unlisted attributes resolve to the chassis.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .effects import (
    ApplyStatusEffect,
    AttributeModifierEffect,
    DamageEffect,
    Effect,
    ResourceRestorationEffect,
)
from .enums import Attribute

if TYPE_CHECKING:
    from .components import VehicleComponent
    from .vehicle import Vehicle

logger = logging.getLogger(__name__)

_CHASSIS_ATTRIBUTES = frozenset(
    {
        Attribute.MAX_HEALTH,
        Attribute.ARMOR_CLASS,
        Attribute.MAGIC_RESISTANCE,
        Attribute.MOBILITY,
        Attribute.DRAG_COEFFICIENT,
    }
)
_POWER_ATTRIBUTES = frozenset({Attribute.MAX_ENERGY, Attribute.ENERGY_REGEN})
_DRIVE_ATTRIBUTES = frozenset(
    {
        Attribute.MAX_SPEED,
        Attribute.ACCELERATION,
        Attribute.STABILITY,
        Attribute.BASE_FRICTION,
    }
)


class VehicleEffectRouter:
    """Stateless mapping from effects and attributes to components."""

    @classmethod
    def route_effect(cls, effect: Effect, vehicle: Vehicle) -> VehicleComponent:
        match effect:
            case DamageEffect() | ResourceRestorationEffect():
                # TODO: send ENERGY restoration to the power core once skills
                # that recharge energy are authored against it.
                return vehicle.chassis
            case AttributeModifierEffect(attribute=attribute):
                return cls.resolve_modifier_target(vehicle, attribute)
            case ApplyStatusEffect(status=status) if status.modifiers:
                attribute = status.modifiers[0].attribute
                return cls.resolve_modifier_target(vehicle, attribute)
        return vehicle.chassis

    @staticmethod
    def resolve_modifier_target(
        vehicle: Vehicle, attribute: Attribute
    ) -> VehicleComponent:
        """Component that should carry a modifier to ``attribute``."""
        if attribute in _POWER_ATTRIBUTES:
            return vehicle.power_core
        if attribute in _DRIVE_ATTRIBUTES:
            drive = vehicle.get_drive_component()
            if drive is not None:
                return drive
            logger.debug(
                "%s has no drive, routing %s to chassis", vehicle.name, attribute.name
            )
            return vehicle.chassis
        if attribute not in _CHASSIS_ATTRIBUTES:
            logger.debug("No routing entry for %s, using chassis", attribute.name)
        return vehicle.chassis
