from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from roadwar.game.enums import Attribute, ModifierCategory, ModifierType
from roadwar.game.modifiers import PERMANENT_DURATION, AttributeModifier

from .base import Effect, EffectContext

if TYPE_CHECKING:
    from roadwar.game.entity import Entity


@dataclass(frozen=True)
class AttributeModifierEffect(Effect):
    """Add a runtime modifier to the target.

    ``duration_turns`` of -1 makes the modifier permanent; a positive value
    removes it after that many turn-end updates.
    """

    attribute: Attribute
    type: ModifierType = ModifierType.FLAT
    value: float = 0.0
    duration_turns: int = PERMANENT_DURATION
    category: ModifierCategory = ModifierCategory.OTHER

    def apply(
        self,
        user: Entity | None,
        target: Entity,
        context: EffectContext,
        source: Any = None,
    ) -> AttributeModifier:
        modifier = AttributeModifier(
            attribute=self.attribute,
            type=self.type,
            value=self.value,
            source=source if source is not None else user,
            category=self.category,
            duration_turns=self.duration_turns,
        )
        return target.modifiers.add(modifier)
