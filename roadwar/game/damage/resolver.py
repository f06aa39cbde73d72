"""
Resistance algebra and damage packets.

``apply_resistance`` is a total function over :class:`ResistanceLevel`:

=========== ==========================
NORMAL      unchanged
VULNERABLE  doubled
RESISTANT   halved, rounded toward zero
IMMUNE      zero
=========== ==========================

The result is always clamped to a minimum of zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from roadwar.constants.combat import CombatConstants as Combat
from roadwar.game.enums import DamageSource, DamageType, ResistanceLevel

if TYPE_CHECKING:
    from roadwar.game.entity import Entity

    from .calculator import DamageResult


def apply_resistance(damage: int, resistance: ResistanceLevel) -> int:
    match resistance:
        case ResistanceLevel.VULNERABLE:
            damage = damage * Combat.VULNERABLE_MULTIPLIER
        case ResistanceLevel.RESISTANT:
            damage = int(damage / Combat.RESISTANT_DIVISOR)
        case ResistanceLevel.IMMUNE:
            damage = 0
        case ResistanceLevel.NORMAL:
            pass
    return max(0, damage)


@dataclass(frozen=True)
class DamagePacket:
    """A fixed amount of typed damage with attribution.

    Used for damage that does not come from a dice formula: periodic status
    ticks, hazards, collisions.
    """

    amount: int
    damage_type: DamageType
    attacker: Any = None
    causal_source: Any = None
    source_type: DamageSource = DamageSource.ABILITY
    ignores_resistance: bool = False
    is_critical: bool = False

    @classmethod
    def from_attacker(
        cls,
        amount: int,
        damage_type: DamageType,
        attacker: Any,
        causal_source: Any = None,
        source_type: DamageSource = DamageSource.WEAPON,
        is_critical: bool = False,
    ) -> DamagePacket:
        return cls(
            amount,
            damage_type,
            attacker=attacker,
            causal_source=causal_source,
            source_type=source_type,
            is_critical=is_critical,
        )

    @classmethod
    def environmental(
        cls,
        amount: int,
        damage_type: DamageType,
        causal_source: Any = None,
        ignores_resistance: bool = False,
        source_type: DamageSource = DamageSource.ENVIRONMENT,
    ) -> DamagePacket:
        return cls(
            amount,
            damage_type,
            causal_source=causal_source,
            source_type=source_type,
            ignores_resistance=ignores_resistance,
        )


class DamageResolver:
    """Applies a target's resistance to raw damage results."""

    @staticmethod
    def apply(
        result: DamageResult,
        resistance: ResistanceLevel,
        amplification: float = 1.0,
    ) -> DamageResult:
        """Set ``resistance`` and ``final_damage`` on ``result`` and return it."""
        final = apply_resistance(result.raw_total, resistance)
        if amplification != 1.0:
            final = max(0, int(final * amplification))
        result.resistance = resistance
        result.final_damage = final
        return result

    @classmethod
    def resolve(
        cls,
        result: DamageResult,
        target: Entity,
        *,
        ignores_resistance: bool = False,
    ) -> DamageResult:
        """Resolve ``result`` against ``target``'s resistances and statuses."""
        resistance = (
            ResistanceLevel.NORMAL
            if ignores_resistance
            else target.get_resistance(result.damage_type)
        )
        return cls.apply(result, resistance, target.damage_amplification)

