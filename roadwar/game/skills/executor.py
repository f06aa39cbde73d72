"""
The entry point for using a skill.

:meth:`SkillExecutor.execute` validates the skill use, then hands it to
exactly one resolver chosen by the skill's roll type. The whole resolution,
rolls and effects alike, runs inside one action scope on the combat log, so
the history records a single line per skill use.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from roadwar.game.components import VehicleComponent
from roadwar.game.enums import EventImportance, EventType, SkillRollType
from roadwar.game.vehicle import Vehicle

from .applicator import SkillEffectApplicator
from .context import SkillContext
from .resolvers import (
    AttackResolver,
    CheckResolver,
    NoRollResolver,
    OpposedCheckResolver,
    SaveResolver,
    SkillResolver,
)
from .validator import SkillValidator, ValidationResult

if TYPE_CHECKING:
    from roadwar.events import CombatLog
    from roadwar.game.character import Character
    from roadwar.game.entity import Entity

    from .skill import Skill

logger = logging.getLogger(__name__)


class SkillExecutor:
    """Validates skill uses and dispatches them to their resolver."""

    def __init__(self, log: CombatLog | None = None) -> None:
        self.log = log
        applicator = SkillEffectApplicator(log)
        self._resolvers: dict[SkillRollType, SkillResolver] = {
            SkillRollType.NONE: NoRollResolver(log, applicator),
            SkillRollType.ATTACK_ROLL: AttackResolver(log, applicator),
            SkillRollType.SAVING_THROW: SaveResolver(log, applicator),
            SkillRollType.SKILL_CHECK: CheckResolver(log, applicator),
            SkillRollType.OPPOSED_CHECK: OpposedCheckResolver(log, applicator),
        }

    def execute(
        self,
        skill: Skill,
        user: Vehicle | Entity,
        main_target: Vehicle | Entity | None,
        source_component: VehicleComponent | None = None,
        target_component: VehicleComponent | None = None,
        source_character: Character | None = None,
    ) -> bool:
        """Use ``skill`` from ``user`` against ``main_target``.

        Args:
            skill: The skill being used.
            user: The acting vehicle, or a standalone acting entity.
            main_target: The target vehicle or standalone entity.
            source_component: The component performing the skill, if any.
            target_component: A specific component of ``main_target`` to aim at.
            source_character: The crew member who initiated the skill, if any.

        Returns:
            True if the skill's effects were applied.
        """
        context = self.build_context(
            skill,
            user,
            main_target,
            source_component,
            target_component,
            source_character,
        )

        validation = SkillValidator.validate(context)
        if not validation.is_valid:
            self._report_invalid(context, validation)
            return False

        resolver = self._resolvers[skill.roll_type]
        if self.log is None:
            return resolver.resolve(context)
        actor = context.acting_entity
        with self.log.action_scope(actor, skill, context.primary_target):
            return resolver.resolve(context)

    @staticmethod
    def build_context(
        skill: Skill,
        user: Vehicle | Entity,
        main_target: Vehicle | Entity | None,
        source_component: VehicleComponent | None = None,
        target_component: VehicleComponent | None = None,
        source_character: Character | None = None,
    ) -> SkillContext:
        if isinstance(user, Vehicle):
            source_vehicle: Vehicle | None = user
        else:
            source_vehicle = getattr(user, "vehicle", None)
        source_entity: Entity | None = source_component
        if source_entity is None and not isinstance(user, Vehicle):
            source_entity = user

        if isinstance(main_target, Vehicle):
            target_vehicle = main_target
            target_entity: Entity | None = target_component
        else:
            target_entity = (
                target_component if target_component is not None else main_target
            )
            target_vehicle = getattr(target_entity, "vehicle", None)

        if source_character is None and source_component is not None:
            source_character = source_component.operator

        return SkillContext(
            skill=skill,
            source_vehicle=source_vehicle,
            target_vehicle=target_vehicle,
            target_entity=target_entity,
            source_entity=source_entity,
            source_character=source_character,
        )

    def _report_invalid(
        self, context: SkillContext, validation: ValidationResult
    ) -> None:
        logger.info("%s not used: %s", context.skill.name, validation.reason)
        if self.log is None:
            return
        actor = context.acting_entity
        stage = getattr(context.source_vehicle, "current_stage", None)
        self.log.log(
            EventType.SKILL_USE,
            EventImportance.LOW,
            f"{getattr(actor, 'name', 'Unknown')} cannot use {context.skill.name}: "
            f"{validation.reason}",
            stage,
            actor,
        ).with_metadata("skill", context.skill.name).with_metadata(
            "reason", validation.reason
        )
