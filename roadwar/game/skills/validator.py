from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from roadwar.game.accessibility import can_target_component
from roadwar.game.enums import VehicleStatus

if TYPE_CHECKING:
    from .context import SkillContext


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    reason: str = ""

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(True)

    @classmethod
    def fail(cls, reason: str) -> ValidationResult:
        return cls(False, reason)


class SkillValidator:
    """Preconditions a skill use must meet before any roll is made."""

    @staticmethod
    def validate(context: SkillContext) -> ValidationResult:
        skill = context.skill
        if not context.has_target:
            return ValidationResult.fail("No target")
        if not skill.has_effects:
            return ValidationResult.fail(f"{skill.name} has no effects configured")

        vehicle = context.target_vehicle
        if vehicle is not None and vehicle.status is VehicleStatus.DESTROYED:
            return ValidationResult.fail(f"{vehicle.name} is destroyed")

        component = context.target_component
        if component is None:
            target = context.primary_target
            if target is not None and target.is_destroyed:
                return ValidationResult.fail(f"{target.name} is destroyed")
        elif vehicle is not None:
            if not vehicle.owns(component):
                return ValidationResult.fail(
                    f"{component.name} is not part of the target"
                )
            if component.is_destroyed:
                return ValidationResult.fail(f"{component.name} is destroyed")
            if not can_target_component(context.source_vehicle, vehicle, component):
                reason = vehicle.get_inaccessibility_reason(component)
                return ValidationResult.fail(f"{component.name}: {reason}")
        return ValidationResult.ok()
