"""
Which components of a vehicle an opponent can currently target.

Rules, checked in order:

1. Missing or destroyed components are never accessible.
2. EXTERNAL components are always accessible.
3. PROTECTED and SHIELDED components are accessible only once their
   ``shielded_by`` component is destroyed. Without a shield assigned they are
   treated as exposed.
4. INTERNAL components are accessible once the chassis has lost at least
   ``internal_access_threshold`` of its max health.

These checks apply to *opponents*. A vehicle acting on its own components
skips them entirely; see :func:`can_target_component`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .enums import ComponentExposure

if TYPE_CHECKING:
    from .components import VehicleComponent
    from .vehicle import Vehicle


def chassis_damage_fraction(vehicle: Vehicle) -> float:
    chassis = vehicle.chassis
    return 1.0 - (chassis.health or 0) / chassis.effective_max_health


def is_component_accessible(
    vehicle: Vehicle, component: VehicleComponent | None
) -> bool:
    if component is None or component.is_destroyed:
        return False

    match component.exposure:
        case ComponentExposure.EXTERNAL:
            return True
        case ComponentExposure.PROTECTED | ComponentExposure.SHIELDED:
            shield = component.shielded_by
            return shield is None or shield.is_destroyed
        case ComponentExposure.INTERNAL:
            if vehicle.chassis is None:
                return True
            threshold = component.internal_access_threshold
            return chassis_damage_fraction(vehicle) >= threshold
    return True


def get_inaccessibility_reason(
    vehicle: Vehicle, component: VehicleComponent | None
) -> str:
    """Human-readable reason a component cannot be targeted, or ``""``."""
    if component is None:
        return "Cannot target"
    if component.is_destroyed:
        return "Component destroyed"
    if is_component_accessible(vehicle, component):
        return ""

    match component.exposure:
        case ComponentExposure.PROTECTED | ComponentExposure.SHIELDED:
            shield = component.shielded_by
            return f"Shielded by {shield.name}" if shield else "Cannot target"
        case ComponentExposure.INTERNAL:
            percent = round(component.internal_access_threshold * 100)
            return f"Chassis must be {percent}% damaged"
    return "Cannot target"


def can_target_component(
    acting_vehicle: Vehicle | None,
    target_vehicle: Vehicle,
    component: VehicleComponent | None,
) -> bool:
    """Whether ``acting_vehicle`` may aim at ``component`` on ``target_vehicle``.

    A vehicle may always act on its own (non-destroyed) components.
    """
    if component is None or component.is_destroyed:
        return False
    if acting_vehicle is not None and acting_vehicle is target_vehicle:
        return True
    return is_component_accessible(target_vehicle, component)
