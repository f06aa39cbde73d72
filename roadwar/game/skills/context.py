from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from roadwar.game.components import VehicleComponent

if TYPE_CHECKING:
    from roadwar.game.character import Character
    from roadwar.game.entity import Entity
    from roadwar.game.vehicle import Vehicle

    from .skill import Skill


@dataclass(frozen=True)
class SkillContext:
    """Everything one skill use needs, bundled once and passed along.

    ``target_vehicle`` is set when the skill is aimed at a vehicle.
    ``target_entity`` is the explicitly chosen entity: a component picked by
    the caller, a standalone entity, or ``None`` when the whole vehicle is
    the target and routing should pick components per effect.

    Resolvers derive narrowed copies with :meth:`with_target` and
    :meth:`with_critical_hit` rather than mutating.
    """

    skill: Skill
    source_vehicle: Vehicle | None = None
    target_vehicle: Vehicle | None = None
    target_entity: Entity | None = None
    source_entity: Entity | None = None
    source_character: Character | None = None
    is_critical_hit: bool = False

    @property
    def source_component(self) -> VehicleComponent | None:
        if isinstance(self.source_entity, VehicleComponent):
            return self.source_entity
        return None

    @property
    def target_component(self) -> VehicleComponent | None:
        if isinstance(self.target_entity, VehicleComponent):
            return self.target_entity
        return None

    @property
    def has_target(self) -> bool:
        return self.target_entity is not None or self.target_vehicle is not None

    @property
    def primary_target(self) -> Entity | None:
        """The entity rolls are made against: the chosen one, else the chassis."""
        if self.target_entity is not None:
            return self.target_entity
        if self.target_vehicle is not None:
            return self.target_vehicle.chassis
        return None

    @property
    def acting_entity(self) -> Entity | None:
        """Whoever performs the skill: the source component, else the chassis."""
        if self.source_entity is not None:
            return self.source_entity
        if self.source_vehicle is not None:
            return self.source_vehicle.chassis
        return None

    @property
    def is_self_target(self) -> bool:
        source = self.source_vehicle
        return source is not None and source is self.target_vehicle

    def with_target(self, target: Entity) -> SkillContext:
        vehicle = getattr(target, "vehicle", None) or self.target_vehicle
        return replace(self, target_entity=target, target_vehicle=vehicle)

    def without_component_target(self) -> SkillContext:
        if self.target_component is None:
            return self
        return replace(self, target_entity=None)

    def with_critical_hit(self, is_critical_hit: bool) -> SkillContext:
        return replace(self, is_critical_hit=is_critical_hit)
