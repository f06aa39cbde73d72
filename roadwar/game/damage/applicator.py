from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from roadwar.game.enums import DamageSource, DamageType, ResistanceLevel
from roadwar.util import dice

from .calculator import DamageComponent, DamageResult
from .resolver import DamagePacket, DamageResolver

if TYPE_CHECKING:
    from roadwar.events import CombatLog
    from roadwar.game.entity import Entity

logger = logging.getLogger(__name__)


class DamageApplicator:
    """The single place where combat damage reduces health.

    Every damage path (skill formulas, status ticks, hazards) ends here, so
    resistance is applied exactly once and a damage event is emitted exactly
    once per hit that lands or is absorbed by immunity.
    """

    def __init__(self, log: CombatLog | None = None) -> None:
        self.log = log

    def apply(
        self,
        result: DamageResult,
        target: Entity | None,
        attacker: Any = None,
        causal_source: Any = None,
        source_type: DamageSource = DamageSource.ABILITY,
        *,
        ignores_resistance: bool = False,
    ) -> int:
        """Resolve resistance on ``result`` and deal it to ``target``.

        Returns the health actually removed. Nothing happens for a missing or
        already-destroyed target, or when the raw total is not positive.
        """
        if target is None or target.is_destroyed or result.raw_total <= 0:
            return 0

        DamageResolver.resolve(result, target, ignores_resistance=ignores_resistance)
        dealt = target.take_damage(result.final_damage)
        logger.debug(
            "%s takes %d %s damage (raw %d, %s)",
            target.name,
            result.final_damage,
            result.damage_type.name.lower(),
            result.raw_total,
            result.resistance.name.lower(),
        )

        absorbed = result.resistance is ResistanceLevel.IMMUNE
        if (result.final_damage > 0 or absorbed) and self.log is not None:
            self.log.emit_damage(result, attacker, target, causal_source, source_type)
        return dealt

    def apply_packet(self, packet: DamagePacket, target: Entity | None) -> int:
        result = DamageResult(
            packet.damage_type,
            [DamageComponent("Flat", 0, 0, packet.amount, 0)],
            is_critical=packet.is_critical,
        )
        return self.apply(
            result,
            target,
            packet.attacker,
            packet.causal_source,
            packet.source_type,
            ignores_resistance=packet.ignores_resistance,
        )

    def apply_flat(
        self,
        amount: int,
        damage_type: DamageType,
        target: Entity | None,
        attacker: Any = None,
        causal_source: Any = None,
        source_type: DamageSource = DamageSource.ABILITY,
    ) -> int:
        packet = DamagePacket(
            amount,
            damage_type,
            attacker=attacker,
            causal_source=causal_source,
            source_type=source_type,
        )
        return self.apply_packet(packet, target)

    def apply_environmental_flat(
        self,
        amount: int,
        damage_type: DamageType,
        target: Entity | None,
        causal_source: Any = None,
        source_type: DamageSource = DamageSource.ENVIRONMENT,
    ) -> int:
        """Deal ``amount`` with no attacker, still subject to resistance."""
        packet = DamagePacket.environmental(
            amount, damage_type, causal_source, source_type=source_type
        )
        return self.apply_packet(packet, target)

    def apply_environmental_dice(
        self,
        dice_count: int,
        die_size: int,
        bonus: int,
        damage_type: DamageType,
        target: Entity | None,
        causal_source: Any = None,
    ) -> int:
        rolled = dice.roll_dice(dice_count, die_size)
        result = DamageResult(
            damage_type,
            [
                DamageComponent(
                    "Hazard", dice_count, die_size, bonus, rolled, "environment"
                )
            ],
        )
        return self.apply(result, target, None, causal_source, DamageSource.ENVIRONMENT)
