from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from roadwar.types import LaneIndex

from . import accessibility
from .components import VehicleComponent, can_act
from .enums import (
    CharacterAttribute,
    CharacterSkill,
    ComponentType,
    ModifierCategory,
    VehicleStatus,
)
from .modifiers import AttributeModifier
from .routing import VehicleEffectRouter

if TYPE_CHECKING:
    from roadwar.events import CombatLog

    from .character import Character

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Vehicle:
    """A composed target: one chassis, one power core, optional parts.

    Chassis destruction is terminal for the whole vehicle. Destroying any
    other component only removes that component's contribution: it can no
    longer act, be targeted, or provide modifiers.
    """

    name: str
    chassis: VehicleComponent
    power_core: VehicleComponent
    optional_components: list[VehicleComponent] = field(default_factory=list)
    crew: list[Character] = field(default_factory=list)
    status: VehicleStatus = VehicleStatus.ACTIVE
    current_stage: Stage | None = field(default=None, repr=False)
    current_lane: LaneIndex | None = None

    def __post_init__(self) -> None:
        if self.chassis.component_type is not ComponentType.CHASSIS:
            raise ValueError(
                f"{self.name}: chassis slot holds {self.chassis.component_type.name}"
            )
        if self.power_core.component_type is not ComponentType.POWER_CORE:
            raise ValueError(
                f"{self.name}: power core slot holds "
                f"{self.power_core.component_type.name}"
            )
        for component in self.all_components():
            component.vehicle = self
        for component in self.all_components():
            self._install_provided_modifiers(component)

    # ------------------------------------------------------------------
    # Composition queries
    # ------------------------------------------------------------------

    def all_components(self) -> list[VehicleComponent]:
        return [self.chassis, self.power_core, *self.optional_components]

    def __iter__(self) -> Iterator[VehicleComponent]:
        return iter(self.all_components())

    def owns(self, component: VehicleComponent | None) -> bool:
        if component is None:
            return False
        return any(c is component for c in self.all_components())

    def get_components_of_type(
        self, component_type: ComponentType
    ) -> list[VehicleComponent]:
        return [c for c in self.all_components() if c.component_type is component_type]

    def get_drive_component(self) -> VehicleComponent | None:
        drives = self.get_components_of_type(ComponentType.DRIVE)
        return drives[0] if drives else None

    def get_weapon_components(self) -> list[VehicleComponent]:
        return [
            c
            for c in self.all_components()
            if c.component_type in (ComponentType.WEAPON, ComponentType.UTILITY_WEAPON)
        ]

    @property
    def is_active(self) -> bool:
        return self.status is VehicleStatus.ACTIVE

    # ------------------------------------------------------------------
    # Targeting
    # ------------------------------------------------------------------

    def is_component_accessible(self, component: VehicleComponent) -> bool:
        return accessibility.is_component_accessible(self, component)

    def get_inaccessibility_reason(self, component: VehicleComponent) -> str:
        return accessibility.get_inaccessibility_reason(self, component)

    def get_accessible_components(self) -> list[VehicleComponent]:
        return [c for c in self.all_components() if self.is_component_accessible(c)]

    # ------------------------------------------------------------------
    # Operability
    # ------------------------------------------------------------------

    def get_non_operational_reason(self) -> str | None:
        if self.status is VehicleStatus.DESTROYED:
            return f"{self.name} is destroyed"
        if self.power_core.is_destroyed:
            return "Power core destroyed"
        if self.chassis.prevents_actions:
            return f"{self.name} cannot act"
        return None

    def can_move(self) -> bool:
        if self.get_non_operational_reason() is not None:
            return False
        if self.chassis.prevents_movement:
            return False
        drive = self.get_drive_component()
        return drive is not None and can_act(drive) and not drive.prevents_movement

    # ------------------------------------------------------------------
    # Crew
    # ------------------------------------------------------------------

    def best_crew_for_skill(self, skill: CharacterSkill) -> Character | None:
        if not self.crew:
            return None
        return max(self.crew, key=lambda character: character.skill_modifier(skill))

    def best_crew_for_save(self, attribute: CharacterAttribute) -> Character | None:
        if not self.crew:
            return None
        return max(self.crew, key=lambda character: character.save_modifier(attribute))

    # ------------------------------------------------------------------
    # Turn updates
    # ------------------------------------------------------------------

    def update_status_effects(self, log: CombatLog | None = None) -> None:
        for component in self.all_components():
            component.update_status_effects(log)

    def update_modifiers(self, log: CombatLog | None = None) -> None:
        for component in self.all_components():
            component.update_modifiers(log)

    def end_turn(self, log: CombatLog | None = None) -> None:
        """Run the turn-end pass for every component."""
        self.update_status_effects(log)
        self.update_modifiers(log)

    # ------------------------------------------------------------------
    # Destruction
    # ------------------------------------------------------------------

    def on_component_destroyed(self, component: VehicleComponent) -> None:
        removed = 0
        for other in self.all_components():
            removed += len(other.modifiers.remove_from_source(component))
        logger.info(
            "%s: %s destroyed, %d provided modifier(s) removed",
            self.name,
            component.name,
            removed,
        )
        if component is self.chassis:
            self.mark_as_destroyed()

    def mark_as_destroyed(self) -> None:
        if self.status is VehicleStatus.DESTROYED:
            return
        self.status = VehicleStatus.DESTROYED
        logger.info("%s destroyed", self.name)

    def _install_provided_modifiers(self, provider: VehicleComponent) -> None:
        for provided in provider.provided_modifiers:
            if provided.target_type is None:
                receiver = VehicleEffectRouter.resolve_modifier_target(
                    self, provided.attribute
                )
            else:
                matches = self.get_components_of_type(provided.target_type)
                receiver = matches[0] if matches else None
            if receiver is None:
                logger.warning(
                    "%s: no %s to receive %s from %s",
                    self.name,
                    provided.target_type.name if provided.target_type else "component",
                    provided.attribute.name,
                    provider.name,
                )
                continue
            receiver.modifiers.add(
                AttributeModifier(
                    attribute=provided.attribute,
                    type=provided.type,
                    value=provided.value,
                    source=provider,
                    category=ModifierCategory.EQUIPMENT,
                )
            )


@dataclass(eq=False)
class Stage:
    """A stretch of track: the vehicles racing on it and its lanes."""

    name: str
    lane_count: int = 3
    vehicles: list[Vehicle] = field(default_factory=list)

    def add_vehicle(self, vehicle: Vehicle, lane: LaneIndex = 0) -> None:
        if vehicle not in self.vehicles:
            self.vehicles.append(vehicle)
        vehicle.current_stage = self
        vehicle.current_lane = lane if self.is_valid_lane(lane) else 0

    def active_vehicles(self) -> list[Vehicle]:
        return [v for v in self.vehicles if v.status is VehicleStatus.ACTIVE]

    def is_valid_lane(self, lane: LaneIndex) -> bool:
        return 0 <= lane < self.lane_count

    def move_vehicle_to_lane(self, vehicle: Vehicle, lane: LaneIndex) -> bool:
        if vehicle.current_stage is not self or not self.is_valid_lane(lane):
            return False
        vehicle.current_lane = lane
        return True
