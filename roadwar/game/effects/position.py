from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from roadwar.game.enums import EventImportance, EventType
from roadwar.types import LaneIndex

from .base import Effect, EffectContext

if TYPE_CHECKING:
    from roadwar.game.entity import Entity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionChangeEffect(Effect):
    """Move the target's vehicle to another lane of its stage.

    Either an absolute ``target_lane_index`` or, with
    ``use_relative_offset``, the current lane plus ``relative_offset``.
    Lanes outside the stage are ignored.
    """

    target_lane_index: LaneIndex = 0
    use_relative_offset: bool = False
    relative_offset: int = 1

    def apply(
        self,
        user: Entity | None,
        target: Entity,
        context: EffectContext,
        source: Any = None,
    ) -> bool:
        vehicle = getattr(target, "vehicle", None)
        if vehicle is None or vehicle.current_stage is None:
            return False

        if self.use_relative_offset:
            if vehicle.current_lane is None:
                return False
            lane = vehicle.current_lane + self.relative_offset
        else:
            lane = self.target_lane_index

        old_lane = vehicle.current_lane
        if not vehicle.current_stage.move_vehicle_to_lane(vehicle, lane):
            logger.debug("%s cannot move to lane %d", vehicle.name, lane)
            return False

        if context.log is not None:
            context.log.log(
                EventType.MOVEMENT,
                EventImportance.LOW,
                f"{vehicle.name} moves from lane {old_lane} to lane {lane}",
                vehicle.current_stage,
                vehicle,
            ).with_metadata("from_lane", old_lane).with_metadata("to_lane", lane)
        return True
