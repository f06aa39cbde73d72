from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from roadwar.game.enums import ResourceType
from roadwar.game.resources import RestorationBreakdown, change_resource

from .base import Effect, EffectContext

if TYPE_CHECKING:
    from roadwar.game.entity import Entity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceRestorationEffect(Effect):
    """Restore (positive ``amount``) or drain (negative) health or energy.

    The change is clamped to the pool's bounds; the returned breakdown keeps
    the requested amount alongside the amount actually applied.
    """

    resource_type: ResourceType = ResourceType.HEALTH
    amount: int = 0

    def apply(
        self,
        user: Entity | None,
        target: Entity,
        context: EffectContext,
        source: Any = None,
    ) -> RestorationBreakdown | None:
        label = getattr(source, "name", "") or self.display_name
        breakdown = change_resource(target, self.resource_type, self.amount, label)
        if breakdown is None:
            logger.debug(
                "%s has no %s pool to change",
                target.name,
                self.resource_type.name.lower(),
            )
            return None
        if context.log is not None:
            context.log.emit_restoration(breakdown, user, target, source)
        return breakdown
