"""
Turning a resolved skill use into concrete effect applications.

For each :class:`EffectInvocation` on the skill, the applicator resolves one
or more target entities from the invocation's :class:`EffectTarget` and
applies the effect to each. Vehicle targets are routed through
:class:`VehicleEffectRouter`, so a damage effect aimed at "the target
vehicle" lands on its chassis and a speed debuff lands on its drive.

All applications for one skill use happen inside a single action scope on
the combat log, so the history shows one aggregated line per skill use.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from roadwar.game.effects import Effect, EffectContext, EffectInvocation
from roadwar.game.enums import EffectTarget
from roadwar.game.routing import VehicleEffectRouter

if TYPE_CHECKING:
    from roadwar.events import CombatLog
    from roadwar.game.entity import Entity
    from roadwar.game.vehicle import Vehicle

    from .context import SkillContext

logger = logging.getLogger(__name__)


class SkillEffectApplicator:
    def __init__(
        self,
        log: CombatLog | None = None,
        router: type[VehicleEffectRouter] = VehicleEffectRouter,
    ) -> None:
        self.log = log
        self.router = router

    def apply_all(self, context: SkillContext) -> int:
        """Apply every effect of ``context.skill``. Returns the application count."""
        user = context.acting_entity
        effect_context = EffectContext(
            log=self.log,
            is_critical_hit=context.is_critical_hit,
            skill_context=context,
        )

        if self.log is None:
            return self._apply_invocations(context, user, effect_context)
        with self.log.action_scope(user, context.skill, context.primary_target):
            return self._apply_invocations(context, user, effect_context)

    def _apply_invocations(
        self,
        context: SkillContext,
        user: Entity | None,
        effect_context: EffectContext,
    ) -> int:
        applied = 0
        for invocation in context.skill.effect_invocations:
            for target in self.resolve_targets(invocation, context):
                logger.debug(
                    "%s: applying %s to %s (%s)",
                    context.skill.name,
                    invocation.effect.display_name,
                    target.name,
                    invocation.target.name,
                )
                invocation.effect.apply(user, target, effect_context, context.skill)
                applied += 1
        return applied

    def resolve_targets(
        self, invocation: EffectInvocation, context: SkillContext
    ) -> list[Entity]:
        effect = invocation.effect
        source_vehicle = context.source_vehicle
        target_vehicle = context.target_vehicle
        source_entity = context.source_entity
        target_entity = context.target_entity
        targets: list[Entity | None] = []

        match invocation.target:
            case EffectTarget.SOURCE_COMPONENT:
                targets.append(source_entity)
            case EffectTarget.SOURCE_VEHICLE:
                targets.append(self._route(effect, source_vehicle, source_entity))
            case EffectTarget.SELECTED_TARGET:
                if target_entity is not None:
                    targets.append(target_entity)
                else:
                    targets.append(self._route(effect, target_vehicle))
            case EffectTarget.TARGET_VEHICLE:
                targets.append(self._route(effect, target_vehicle, target_entity))
            case EffectTarget.BOTH:
                targets.append(self._route(effect, source_vehicle, source_entity))
                targets.append(self._route(effect, target_vehicle, target_entity))
            case EffectTarget.ALL_ENEMIES_IN_STAGE:
                targets.extend(
                    self._route(effect, vehicle)
                    for vehicle in self._stage_vehicles(source_vehicle)
                    if vehicle is not source_vehicle
                )
            case EffectTarget.ALL_ALLIES_IN_STAGE:
                # No factions yet: every active vehicle, the user included.
                targets.extend(
                    self._route(effect, vehicle)
                    for vehicle in self._stage_vehicles(source_vehicle)
                )

        return [target for target in targets if target is not None]

    def _route(
        self,
        effect: Effect,
        vehicle: Vehicle | None,
        fallback: Entity | None = None,
    ) -> Entity | None:
        """Route onto ``vehicle``, or use ``fallback`` for a non-vehicle target."""
        if vehicle is None:
            return fallback
        return self.router.route_effect(effect, vehicle)

    @staticmethod
    def _stage_vehicles(vehicle: Vehicle | None) -> list[Vehicle]:
        if vehicle is None or vehicle.current_stage is None:
            return []
        return vehicle.current_stage.active_vehicles()
