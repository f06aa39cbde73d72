"""
One resolver per skill roll type.

Each resolver decides whether a validated skill use succeeds and, if so,
hands it to the :class:`SkillEffectApplicator`. Every roll made is reported
to the combat log before the resolver returns.

Attack skills with PRECISE targeting and a chosen component make a
two-stage attack:

1. Roll against the component's AC with no penalty. A hit applies the
   effects to that component and stops.
2. On a miss, roll once more against the chassis AC with the skill's
   ``component_targeting_penalty`` subtracted. A hit applies the effects to
   the chassis. A second miss fails the skill.
"""

from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING

from roadwar.game.resolution import D20Calculator, D20RollOutcome, RollBonus
from roadwar.game.resolution.attacks import (
    armor_class_of,
    gather_attack_bonuses,
    with_penalty,
)
from roadwar.game.resolution.checks import roll_check, roll_save

from .applicator import SkillEffectApplicator

if TYPE_CHECKING:
    from roadwar.events import CombatLog
    from roadwar.game.entity import Entity

    from .context import SkillContext

logger = logging.getLogger(__name__)


class SkillResolver(abc.ABC):
    """Base class for roll-type resolvers."""

    def __init__(
        self,
        log: CombatLog | None = None,
        applicator: SkillEffectApplicator | None = None,
    ) -> None:
        self.log = log
        if applicator is None:
            applicator = SkillEffectApplicator(log)
        self.applicator = applicator

    @abc.abstractmethod
    def resolve(self, context: SkillContext) -> bool:
        """Roll for ``context`` and apply its effects on success."""
        pass

    def _apply(self, context: SkillContext) -> bool:
        self.applicator.apply_all(context)
        return True


class NoRollResolver(SkillResolver):
    """Effects always apply."""

    def resolve(self, context: SkillContext) -> bool:
        if not context.skill.has_effects:
            return False
        return self._apply(context)


class AttackResolver(SkillResolver):
    def resolve(self, context: SkillContext) -> bool:
        skill = context.skill
        attacker = context.acting_entity
        bonuses = gather_attack_bonuses(attacker, context.source_character)

        component = context.target_component
        if skill.allows_component_targeting and component is not None:
            return self._resolve_component_attack(context, component, bonuses)

        # Without precise targeting the chosen component is ignored and each
        # effect is routed.
        context = context.without_component_target()
        target = context.primary_target
        if target is None:
            return False

        roll = D20Calculator.roll(bonuses, armor_class_of(target))
        self._report(context, roll, target, is_chassis_fallback=False)
        if not roll.success:
            return False
        return self._apply(context.with_critical_hit(roll.is_critical_hit))

    def _resolve_component_attack(
        self, context: SkillContext, component: Entity, bonuses: list[RollBonus]
    ) -> bool:
        roll = D20Calculator.roll(bonuses, armor_class_of(component))
        self._report(context, roll, component, is_chassis_fallback=False)
        if roll.success:
            return self._apply(context.with_critical_hit(roll.is_critical_hit))

        vehicle = context.target_vehicle
        if vehicle is None:
            return False
        chassis = vehicle.chassis
        if chassis is component or chassis.is_destroyed:
            return False

        penalized = with_penalty(bonuses, context.skill.component_targeting_penalty)
        fallback = D20Calculator.roll(penalized, armor_class_of(chassis))
        self._report(context, fallback, chassis, is_chassis_fallback=True)
        if not fallback.success:
            return False
        return self._apply(
            context.with_target(chassis).with_critical_hit(fallback.is_critical_hit)
        )

    def _report(
        self,
        context: SkillContext,
        roll: D20RollOutcome,
        target: Entity,
        *,
        is_chassis_fallback: bool,
    ) -> None:
        logger.debug(
            "%s attack on %s: %s", context.skill.name, target.name, roll.describe()
        )
        if self.log is not None:
            self.log.emit_attack_roll(
                roll,
                context.acting_entity,
                target,
                context.skill,
                is_hit=roll.success,
                target_component_name=target.name,
                is_chassis_fallback=is_chassis_fallback,
            )


class SaveResolver(SkillResolver):
    """The target saves against the skill's DC. A successful save resists."""

    def resolve(self, context: SkillContext) -> bool:
        skill = context.skill
        saver = context.primary_target
        if saver is None:
            return False

        dc = self.save_dc(context)
        roll = roll_save(saver, skill.save_spec, dc)
        logger.debug("%s save by %s: %s", skill.name, saver.name, roll.describe())
        if self.log is not None:
            self.log.emit_saving_throw(
                roll, context.acting_entity, saver, skill, skill.save_spec.name
            )
        if roll.success:
            return False
        return self._apply(context)

    @staticmethod
    def save_dc(context: SkillContext) -> int:
        return context.skill.save_dc_base


class CheckResolver(SkillResolver):
    """The user must pass the skill's check."""

    def resolve(self, context: SkillContext) -> bool:
        skill = context.skill
        roller = context.acting_entity
        if roller is None:
            return False

        character = context.source_character
        roll = roll_check(roller, skill.check_spec, skill.check_dc, character)
        logger.debug("%s check by %s: %s", skill.name, roller.name, roll.describe())
        if self.log is not None:
            self.log.emit_skill_check(
                roll, roller, context.primary_target, skill, skill.check_spec.name
            )
        if not roll.success:
            return False
        return self._apply(context)


class OpposedCheckResolver(SkillResolver):
    """Both sides roll the skill's check. Higher total wins; the defender wins ties."""

    def resolve(self, context: SkillContext) -> bool:
        skill = context.skill
        attacker = context.acting_entity
        defender = context.primary_target
        if attacker is None or defender is None:
            return False

        character = context.source_character
        attacker_roll = roll_check(attacker, skill.check_spec, 0, character)
        defender_roll = roll_check(defender, skill.check_spec, 0)
        attacker_won = attacker_roll.total > defender_roll.total
        logger.debug(
            "%s opposed: %d vs %d", skill.name, attacker_roll.total, defender_roll.total
        )
        if self.log is not None:
            self.log.emit_opposed_check(
                attacker_roll, defender_roll, attacker_won, attacker, defender, skill
            )
        if not attacker_won:
            return False
        return self._apply(context)
