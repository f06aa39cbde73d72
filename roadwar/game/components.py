"""
Vehicle components.

A vehicle is built from components: exactly one chassis, exactly one power
core, and any number of optional parts (drives, weapons, utilities). Every
component is the same :class:`VehicleComponent` record. What makes a weapon a
weapon is its ``component_type`` plus a :class:`WeaponProfile`; what makes a
power core a power core is its type plus an energy pool. Behavior that differs
by kind (``can_act``, ``get_display_stats``) is written as plain functions
that switch on ``component_type`` rather than as subclass overrides.

Targeting is governed by three fields that are independent of health:

- ``exposure``: EXTERNAL parts are always reachable. PROTECTED and SHIELDED
  parts are unreachable while ``shielded_by`` is alive. INTERNAL parts need
  the chassis to have lost ``internal_access_threshold`` of its max health.
- ``shielded_by``: the component standing in the way.
- ``internal_access_threshold``: fraction of chassis health that must be gone.

See :mod:`roadwar.game.accessibility` for the rules themselves.

Components can also *provide* equipment modifiers to other parts of their
vehicle (an armor plate raising chassis AC, a turbo raising drive speed).
Provided modifiers are installed when the vehicle is assembled and removed
when the providing component is destroyed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from roadwar.constants.combat import CombatConstants as Combat

from .entity import Entity
from .enums import (
    Attribute,
    ComponentExposure,
    ComponentType,
    DamageType,
    ModifierType,
)
from .modifiers import StatBreakdown
from .resources import EnergyPool

if TYPE_CHECKING:
    from .character import Character
    from .vehicle import Vehicle


@dataclass
class WeaponProfile:
    """Kind-specific data for weapon components."""

    damage_dice: int = 1
    damage_die_size: int = 6
    damage_bonus: int = 0
    damage_type: DamageType = DamageType.PHYSICAL
    attack_bonus: int = 0
    ammo: int = -1  # -1 = unlimited


@dataclass
class DriveProfile:
    """Kind-specific data for drive components."""

    target_speed: float = 1.0  # Proportional throttle, 0.0-1.0

    def set_target_speed(self, speed: float) -> None:
        self.target_speed = max(0.0, min(1.0, speed))


@dataclass(frozen=True)
class ProvidedModifier:
    """An equipment modifier a component grants to another part of its vehicle.

    ``target_type`` picks the receiving component. ``None`` lets the vehicle
    router choose by attribute.
    """

    attribute: Attribute
    value: float
    type: ModifierType = ModifierType.FLAT
    target_type: ComponentType | None = None


@dataclass(eq=False)
class VehicleComponent(Entity):
    """A single, independently damageable part of a vehicle."""

    component_type: ComponentType = ComponentType.CUSTOM
    exposure: ComponentExposure = ComponentExposure.EXTERNAL
    shielded_by: VehicleComponent | None = field(default=None, repr=False)
    internal_access_threshold: float = Combat.DEFAULT_INTERNAL_ACCESS_THRESHOLD
    is_disabled: bool = False
    weapon: WeaponProfile | None = None
    drive: DriveProfile | None = None
    provided_modifiers: tuple[ProvidedModifier, ...] = ()
    operator: Character | None = field(default=None, repr=False)
    vehicle: Vehicle | None = field(default=None, repr=False, init=False)

    @property
    def is_chassis(self) -> bool:
        return self.component_type is ComponentType.CHASSIS

    def get_base_value(self, attribute: Attribute) -> float:
        if self.weapon is not None:
            match attribute:
                case Attribute.DAMAGE_DICE:
                    return self.weapon.damage_dice
                case Attribute.DAMAGE_DIE_SIZE:
                    return self.weapon.damage_die_size
                case Attribute.DAMAGE_BONUS:
                    return self.weapon.damage_bonus
                case Attribute.ATTACK_BONUS:
                    return self.weapon.attack_bonus
                case Attribute.AMMO:
                    return self.weapon.ammo
        return super().get_base_value(attribute)

    def on_destroyed(self) -> None:
        if self.vehicle is not None:
            self.vehicle.on_component_destroyed(self)


# =============================================================================
# CAPABILITIES (dispatched on component_type)
# =============================================================================

_COMMON_STATS = (Attribute.MAX_HEALTH, Attribute.ARMOR_CLASS)

_DISPLAY_STATS: dict[ComponentType, tuple[Attribute, ...]] = {
    ComponentType.CHASSIS: (
        Attribute.MOBILITY,
        Attribute.STABILITY,
        Attribute.DRAG_COEFFICIENT,
        Attribute.COMPONENT_SPACE,
        Attribute.MAGIC_RESISTANCE,
        Attribute.PHYSICAL_RESISTANCE,
    ),
    ComponentType.POWER_CORE: (Attribute.MAX_ENERGY, Attribute.ENERGY_REGEN),
    ComponentType.DRIVE: (
        Attribute.MAX_SPEED,
        Attribute.ACCELERATION,
        Attribute.STABILITY,
        Attribute.BASE_FRICTION,
        Attribute.POWER_DRAW,
    ),
    ComponentType.WEAPON: (
        Attribute.ATTACK_BONUS,
        Attribute.DAMAGE_DICE,
        Attribute.DAMAGE_DIE_SIZE,
        Attribute.DAMAGE_BONUS,
        Attribute.AMMO,
        Attribute.POWER_DRAW,
    ),
}
_DISPLAY_STATS[ComponentType.UTILITY_WEAPON] = _DISPLAY_STATS[ComponentType.WEAPON]


def get_display_stats(component: VehicleComponent) -> dict[Attribute, StatBreakdown]:
    """Effective stats worth showing for this kind of component."""
    attributes = _COMMON_STATS + _DISPLAY_STATS.get(component.component_type, ())
    return {attr: component.get_stat_breakdown(attr) for attr in attributes}


def get_non_operational_reason(component: VehicleComponent) -> str | None:
    """Why ``component`` cannot act right now, or ``None`` if it can."""
    if component.is_destroyed:
        return f"{component.name} is destroyed"
    if component.is_disabled:
        return f"{component.name} is disabled"
    for applied in component.status_effects:
        if applied.prevents_actions:
            return f"{component.name} is affected by {applied.template.name}"

    chassis = component.vehicle.chassis if component.vehicle is not None else None
    if chassis is not None and chassis is not component:
        for applied in chassis.status_effects:
            if applied.prevents_actions:
                return f"Vehicle is affected by {applied.template.name}"
    return None


def can_act(component: VehicleComponent) -> bool:
    """Destroyed, disabled, or action-locked components (or chassis) cannot act."""
    return get_non_operational_reason(component) is None


# =============================================================================
# FACTORIES
# =============================================================================


def make_chassis(
    name: str = "Chassis",
    max_health: int = 40,
    armor_class: int = 14,
    *,
    mobility: int = 0,
    stability: int = 0,
    **kwargs,
) -> VehicleComponent:
    base_stats = {Attribute.MOBILITY: mobility, Attribute.STABILITY: stability}
    base_stats.update(kwargs.pop("base_stats", {}))
    return VehicleComponent(
        name=name,
        max_health=max_health,
        armor_class=armor_class,
        component_type=ComponentType.CHASSIS,
        base_stats=base_stats,
        **kwargs,
    )


def make_power_core(
    name: str = "Power Core",
    max_health: int = 20,
    armor_class: int = 12,
    *,
    max_energy: int = 10,
    energy_regen: int = 2,
    **kwargs,
) -> VehicleComponent:
    kwargs.setdefault("exposure", ComponentExposure.INTERNAL)
    return VehicleComponent(
        name=name,
        max_health=max_health,
        armor_class=armor_class,
        component_type=ComponentType.POWER_CORE,
        energy=EnergyPool(max_energy=max_energy, energy_regen=energy_regen),
        **kwargs,
    )


def make_drive(
    name: str = "Drive",
    max_health: int = 20,
    armor_class: int = 12,
    *,
    max_speed: int = 10,
    acceleration: int = 2,
    **kwargs,
) -> VehicleComponent:
    base_stats = {Attribute.MAX_SPEED: max_speed, Attribute.ACCELERATION: acceleration}
    base_stats.update(kwargs.pop("base_stats", {}))
    return VehicleComponent(
        name=name,
        max_health=max_health,
        armor_class=armor_class,
        component_type=ComponentType.DRIVE,
        drive=DriveProfile(),
        base_stats=base_stats,
        **kwargs,
    )


def make_weapon(
    name: str = "Weapon",
    max_health: int = 15,
    armor_class: int = 12,
    *,
    profile: WeaponProfile | None = None,
    **kwargs,
) -> VehicleComponent:
    return VehicleComponent(
        name=name,
        max_health=max_health,
        armor_class=armor_class,
        component_type=ComponentType.WEAPON,
        weapon=profile if profile is not None else WeaponProfile(),
        **kwargs,
    )
