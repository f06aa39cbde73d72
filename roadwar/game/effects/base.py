"""
The effect type system.

An :class:`Effect` is the atomic unit of state change a skill carries: deal
damage, apply a status, add a modifier, restore a resource, move a vehicle,
or run a custom command. Effects are content. They hold only authored
configuration and never store per-call results; ``apply`` returns whatever
breakdown it produced (a DamageResult, a RestorationBreakdown, ...) so the
same effect can be applied to many targets in one skill use.

:class:`EffectInvocation` binds one effect to one targeting rule.
:class:`EffectContext` carries the per-application state every effect may
need: the combat log, whether the triggering roll was a critical hit, and the
skill context it came from.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from roadwar.game.enums import EffectTarget

if TYPE_CHECKING:
    from roadwar.events import CombatLog
    from roadwar.game.components import VehicleComponent
    from roadwar.game.entity import Entity
    from roadwar.game.skills.context import SkillContext


@dataclass
class EffectContext:
    """Per-application state shared by every effect in one skill use."""

    log: CombatLog | None = None
    is_critical_hit: bool = False
    skill_context: SkillContext | None = None

    @property
    def source_component(self) -> VehicleComponent | None:
        if self.skill_context is None:
            return None
        return self.skill_context.source_component

    def weapon_for(self, user: Entity | None) -> VehicleComponent | None:
        """The weapon component whose dice a weapon-based formula uses."""
        source = self.source_component
        if source is not None and source.weapon is not None:
            return source
        if getattr(user, "weapon", None) is not None:
            return user  # type: ignore[return-value]
        return None


class Effect(abc.ABC):
    """Base class for every effect variant."""

    @abc.abstractmethod
    def apply(
        self,
        user: Entity | None,
        target: Entity,
        context: EffectContext,
        source: Any = None,
    ) -> Any:
        """Apply this effect from ``user`` to ``target``.

        Args:
            user: The acting entity (usually the source component), if any.
            target: The concrete entity receiving the effect, already routed.
            context: Per-application state.
            source: What caused the application (normally the Skill).

        Returns:
            A breakdown of what happened, or ``None`` if nothing did.
        """
        raise NotImplementedError

    @property
    def display_name(self) -> str:
        return type(self).__name__.removesuffix("Effect")


@dataclass(frozen=True)
class EffectInvocation:
    """One effect plus the rule for choosing its targets."""

    effect: Effect
    target: EffectTarget = EffectTarget.SELECTED_TARGET
