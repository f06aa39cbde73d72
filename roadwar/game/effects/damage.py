from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from roadwar.game.damage import (
    DamageApplicator,
    DamageCalculator,
    DamageFormula,
    DamageResult,
)
from roadwar.game.enums import DamageSource

from .base import Effect, EffectContext

if TYPE_CHECKING:
    from roadwar.game.entity import Entity


@dataclass(frozen=True)
class DamageEffect(Effect):
    """Roll a damage formula and deal it to the target."""

    formula: DamageFormula = DamageFormula()
    source_type: DamageSource = DamageSource.ABILITY

    def apply(
        self,
        user: Entity | None,
        target: Entity,
        context: EffectContext,
        source: Any = None,
    ) -> DamageResult:
        result = DamageCalculator.compute(
            self.formula,
            context.weapon_for(user),
            is_critical=context.is_critical_hit,
        )
        if result.is_empty:
            return result
        DamageApplicator(context.log).apply(
            result, target, user, source, self.source_type
        )
        return result
