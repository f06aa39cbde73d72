"""
Health and energy pools, and the clamped change operation shared by
restoration effects and periodic status ticks.

A change never pushes a pool outside ``[0, max]``. The returned
:class:`RestorationBreakdown` reports both what was asked for and what
actually happened so callers can tell a full heal from a clamped one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .enums import Attribute, ResourceType

if TYPE_CHECKING:
    from .entity import Entity


@dataclass
class EnergyPool:
    """Stored energy on an entity that has one (normally the power core).

    ``max_energy`` is the base capacity; the effective capacity also counts
    ``MAX_ENERGY`` modifiers on the owning entity.
    """

    max_energy: int
    current_energy: int | None = None
    energy_regen: int = 0

    def __post_init__(self) -> None:
        if self.current_energy is None:
            self.current_energy = self.max_energy


@dataclass
class RestorationBreakdown:
    """The result of one clamped resource change."""

    resource_type: ResourceType
    old_value: int
    new_value: int
    max_value: int
    requested_change: int
    actual_change: int
    source: str = ""

    @property
    def was_clamped(self) -> bool:
        return self.actual_change != self.requested_change

    def to_formatted_string(self) -> str:
        resource = self.resource_type.name.lower()
        if self.actual_change >= 0:
            text = f"restores {self.actual_change} {resource}"
        else:
            text = f"drains {-self.actual_change} {resource}"
        if self.was_clamped:
            text += f" (requested {abs(self.requested_change)})"
        return f"{text} [{self.new_value}/{self.max_value}]"


def get_resource(entity: Entity, resource_type: ResourceType) -> tuple[int, int] | None:
    """Return ``(current, effective max)`` or ``None`` if the entity lacks the pool."""
    if resource_type is ResourceType.HEALTH:
        return entity.health, entity.effective_max_health

    pool = entity.energy
    if pool is None:
        return None
    max_energy = entity.get_stat(Attribute.MAX_ENERGY)
    return pool.current_energy or 0, max_energy


def change_resource(
    entity: Entity,
    resource_type: ResourceType,
    amount: int,
    source: str = "",
) -> RestorationBreakdown | None:
    """Add ``amount`` (negative drains) to a pool, clamped to ``[0, max]``.

    Returns ``None`` when the entity has no such pool or is destroyed.
    Health changes go through :meth:`Entity.set_health` so that draining to
    zero destroys the entity.
    """
    if entity.is_destroyed:
        return None

    current = get_resource(entity, resource_type)
    if current is None:
        return None

    old_value, max_value = current
    new_value = max(0, min(old_value + amount, max_value))

    if resource_type is ResourceType.HEALTH:
        entity.set_health(new_value)
    else:
        assert entity.energy is not None
        entity.energy.current_energy = new_value

    return RestorationBreakdown(
        resource_type=resource_type,
        old_value=old_value,
        new_value=new_value,
        max_value=max_value,
        requested_change=amount,
        actual_change=new_value - old_value,
        source=source,
    )
