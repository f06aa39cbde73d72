from __future__ import annotations

import abc
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from roadwar.game.enums import EventImportance, EventType

from .base import Effect, EffectContext

if TYPE_CHECKING:
    from roadwar.game.entity import Entity

logger = logging.getLogger(__name__)


class EffectCommand(abc.ABC):
    """A scripted action a :class:`CustomEffect` runs."""

    @abc.abstractmethod
    def execute(
        self,
        user: Entity | None,
        target: Entity,
        context: EffectContext,
        effect: CustomEffect,
    ) -> None:
        pass


@dataclass(frozen=True)
class SetSpeedCommand(EffectCommand):
    """Set a drive's proportional target speed.

    Uses the effect's ``float_parameter`` when it is non-negative, otherwise
    ``default_target_speed``.
    """

    default_target_speed: float = 1.0

    def execute(
        self,
        user: Entity | None,
        target: Entity,
        context: EffectContext,
        effect: CustomEffect,
    ) -> None:
        drive = getattr(target, "drive", None)
        if drive is None:
            logger.warning("SetSpeedCommand target %s is not a drive", target.name)
            return
        speed = self.default_target_speed
        if effect.float_parameter >= 0.0:
            speed = effect.float_parameter
        drive.set_target_speed(speed)


@dataclass(frozen=True)
class CustomEffect(Effect):
    """Run a named command against the target."""

    effect_name: str = "Custom Effect"
    command: EffectCommand | None = None
    float_parameter: float = -1.0

    def apply(
        self,
        user: Entity | None,
        target: Entity,
        context: EffectContext,
        source: Any = None,
    ) -> bool:
        if self.command is None:
            return False
        self.command.execute(user, target, context, self)

        if context.log is not None:
            user_name = getattr(user, "name", "Unknown")
            source_name = getattr(source, "name", "unknown source")
            vehicle = getattr(target, "vehicle", None)
            context.log.log(
                EventType.SKILL_USE,
                EventImportance.DEBUG,
                f"[CUSTOM] {self.effect_name} triggered by {user_name} on "
                f"{target.name} from {source_name}",
                getattr(vehicle, "current_stage", None),
                vehicle,
            ).with_metadata("effect_name", self.effect_name).with_metadata(
                "command", type(self.command).__name__
            )
        return True

    @property
    def display_name(self) -> str:
        return self.effect_name
