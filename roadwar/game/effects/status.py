from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from roadwar.game.status_effects import StatusApplication, StatusEffect

from .base import Effect, EffectContext

if TYPE_CHECKING:
    from roadwar.game.entity import Entity


@dataclass(frozen=True)
class ApplyStatusEffect(Effect):
    """Put a status template on the target, subject to stacking rules."""

    status: StatusEffect

    def apply(
        self,
        user: Entity | None,
        target: Entity,
        context: EffectContext,
        source: Any = None,
    ) -> StatusApplication:
        outcome = target.apply_status_effect(self.status, applier=user)
        if context.log is not None and not outcome.kept_existing:
            context.log.emit_status_effect(
                outcome.applied,
                user,
                target,
                source if source is not None else self.status,
                was_replacement=outcome.was_replacement,
                block_reason=outcome.block_reason,
            )
        return outcome

    @property
    def display_name(self) -> str:
        return self.status.name
