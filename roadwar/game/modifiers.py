"""
Attribute modifiers and the stat aggregation that consumes them.

Every entity owns a :class:`ModifierCollection`. A modifier only affects the
entity whose collection holds it; there is no cached total anywhere, so an
entity's effective stats always recompute from the live list. Removing a
modifier is therefore enough to make it as if it never existed.

Aggregation for one attribute::

    value = round((base + sum(flat)) * prod(multipliers))

where a ``PERCENT`` modifier contributes ``1 + value / 100`` and a
``MULTIPLIER`` modifier contributes ``value``. Rounding happens once, at the
end.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from .enums import Attribute, ModifierCategory, ModifierType


PERMANENT_DURATION = -1


@dataclass(eq=False)
class AttributeModifier:
    """A single change to one attribute of one entity.

    Modifiers compare by identity so two modifiers with identical values from
    different sources can be removed independently.

    Attributes:
        attribute: The stat being changed.
        type: How ``value`` combines with the base stat.
        value: Flat amount, percentage, or multiplier depending on ``type``.
        source: Object that created the modifier (a component, a status
            effect instance, a skill). Used for removal by source.
        category: Grouping tag used for bulk removal.
        display_name_override: Label shown instead of the source's name.
        duration_turns: Turn-end updates remaining. ``-1`` is permanent.
    """

    attribute: Attribute
    type: ModifierType
    value: float
    source: Any = None
    category: ModifierCategory = ModifierCategory.OTHER
    display_name_override: str | None = None
    duration_turns: int = PERMANENT_DURATION

    @property
    def display_name(self) -> str:
        if self.display_name_override:
            return self.display_name_override
        name = getattr(self.source, "name", None)
        return name if name else "Unknown"

    @property
    def is_permanent(self) -> bool:
        return self.duration_turns == PERMANENT_DURATION

    @property
    def is_temporary(self) -> bool:
        return self.duration_turns > 0

    @property
    def is_dispellable(self) -> bool:
        return self.category in (ModifierCategory.STATUS_EFFECT, ModifierCategory.AURA)

    @property
    def factor(self) -> float:
        """Multiplicative factor for PERCENT and MULTIPLIER modifiers."""
        if self.type is ModifierType.PERCENT:
            return 1.0 + self.value / 100.0
        if self.type is ModifierType.MULTIPLIER:
            return self.value
        return 1.0

    def describe(self) -> str:
        if self.type is ModifierType.FLAT:
            amount = f"{self.value:+g}"
        elif self.type is ModifierType.PERCENT:
            amount = f"{self.value:+g}%"
        else:
            amount = f"x{self.value:g}"
        return f"{amount} {self.attribute.name.replace('_', ' ').title()}"


class ModifierCollection:
    """The modifier list owned by one entity.

    Removal operations are linear scans. Components carry a handful of
    modifiers at most, so a plain list is enough.
    """

    def __init__(self) -> None:
        self._modifiers: list[AttributeModifier] = []

    def __iter__(self) -> Iterator[AttributeModifier]:
        return iter(list(self._modifiers))

    def __len__(self) -> int:
        return len(self._modifiers)

    def __contains__(self, modifier: object) -> bool:
        return any(existing is modifier for existing in self._modifiers)

    def add(self, modifier: AttributeModifier) -> AttributeModifier:
        self._modifiers.append(modifier)
        return modifier

    def remove(self, modifier: AttributeModifier) -> bool:
        """Remove one modifier by reference. Returns ``True`` if it was present."""
        for index, existing in enumerate(self._modifiers):
            if existing is modifier:
                del self._modifiers[index]
                return True
        return False

    def remove_from_source(self, source: object) -> list[AttributeModifier]:
        """Remove every modifier created by ``source``."""
        return self._remove_where(lambda mod: mod.source is source)

    def remove_by_category(self, category: ModifierCategory) -> list[AttributeModifier]:
        return self._remove_where(lambda mod: mod.category is category)

    def for_attribute(self, attribute: Attribute) -> list[AttributeModifier]:
        return [mod for mod in self._modifiers if mod.attribute is attribute]

    def tick_durations(self) -> list[AttributeModifier]:
        """Advance one turn-end update and return the modifiers that expired.

        Temporary modifiers lose one turn; any at or below zero afterwards
        are removed. Permanent modifiers are never touched.
        """
        expired: list[AttributeModifier] = []
        for mod in self._modifiers:
            if mod.is_permanent:
                continue
            if mod.duration_turns > 0:
                mod.duration_turns -= 1
            if mod.duration_turns <= 0:
                expired.append(mod)
        for mod in expired:
            self.remove(mod)
        return expired

    def clear(self) -> None:
        self._modifiers.clear()

    def _remove_where(
        self, predicate: Callable[[AttributeModifier], bool]
    ) -> list[AttributeModifier]:
        removed = [mod for mod in self._modifiers if predicate(mod)]
        if removed:
            self._modifiers = [mod for mod in self._modifiers if not predicate(mod)]
        return removed


@dataclass
class StatBreakdown:
    """An attribute's effective value plus where it came from."""

    attribute: Attribute
    base_value: float
    total: int
    modifiers: list[AttributeModifier] = field(default_factory=list)

    @property
    def modifier_delta(self) -> int:
        return self.total - round(self.base_value)

    def __str__(self) -> str:
        parts = [f"{self.base_value:g} base"]
        parts.extend(f"{mod.describe()} ({mod.display_name})" for mod in self.modifiers)
        return f"{self.total} = " + ", ".join(parts)


class StatCalculator:
    """Aggregates modifiers onto base stats. Stateless."""

    @staticmethod
    def calculate_total(
        base_value: float, modifiers: Iterable[AttributeModifier]
    ) -> int:
        mods = list(modifiers)
        flat = [mod for mod in mods if mod.type is ModifierType.FLAT]
        scaling = [mod for mod in mods if mod.type is not ModifierType.FLAT]
        total = base_value + sum(mod.value for mod in flat)
        total *= math.prod(mod.factor for mod in scaling)
        return round(total)

    @classmethod
    def breakdown(
        cls,
        modifiers: Iterable[AttributeModifier],
        attribute: Attribute,
        base_value: float,
    ) -> StatBreakdown:
        """Aggregate ``modifiers`` for ``attribute``, skipping zero additive ones."""
        relevant = [
            mod
            for mod in modifiers
            if mod.attribute is attribute
            and (mod.value != 0 or mod.type is ModifierType.MULTIPLIER)
        ]
        total = cls.calculate_total(base_value, relevant)
        return StatBreakdown(attribute, base_value, total, relevant)

    @classmethod
    def calculate(
        cls,
        modifiers: Iterable[AttributeModifier],
        attribute: Attribute,
        base_value: float,
    ) -> int:
        return cls.breakdown(modifiers, attribute, base_value).total
