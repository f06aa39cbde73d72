"""
Targetable entities.

An :class:`Entity` is anything that can be hit, healed, modified, or put
under a status effect: every vehicle component, and standalone targets such
as turrets or hazards that do not belong to a vehicle.

Health, armor class, and any other stat exposed through :meth:`get_stat` are
always computed from the base value plus the live modifier list. Nothing is
cached, so adding or removing a modifier is immediately visible.

Destruction is one-way. The first time health reaches zero the entity is
flagged destroyed and :meth:`on_destroyed` runs; further damage is ignored.
"""

from __future__ import annotations

import itertools
import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from roadwar.types import EntityId

from .enums import Attribute, DamageType, EntityFeature, ResistanceLevel
from .modifiers import ModifierCollection, StatBreakdown, StatCalculator
from .resources import EnergyPool
from .status_effects import AppliedStatusEffect, StatusApplication, StatusEffect

if TYPE_CHECKING:
    from roadwar.events import CombatLog

logger = logging.getLogger(__name__)

_entity_ids = itertools.count(1)


def _next_entity_id() -> EntityId:
    return EntityId(next(_entity_ids))


@dataclass(eq=False)
class Entity:
    """Base record for everything that can be targeted by an effect.

    Attributes:
        name: Display name used in history entries.
        max_health: Base maximum health before ``MAX_HEALTH`` modifiers.
        armor_class: Base armor class before ``ARMOR_CLASS`` modifiers.
        health: Current health. ``None`` starts the entity at full health.
        resistances: Per-type resistance levels. Missing types are NORMAL.
        features: Capability flags checked by status effect requirements.
        base_stats: Base values for any other attribute (mobility, etc.).
        energy: Energy pool, if this entity stores energy.
    """

    name: str
    max_health: int = 10
    armor_class: int = 10
    health: int | None = None
    resistances: dict[DamageType, ResistanceLevel] = field(default_factory=dict)
    features: EntityFeature = EntityFeature.NONE
    base_stats: dict[Attribute, float] = field(default_factory=dict)
    energy: EnergyPool | None = None
    is_destroyed: bool = False
    entity_id: EntityId = field(default_factory=_next_entity_id)
    modifiers: ModifierCollection = field(
        default_factory=ModifierCollection, repr=False
    )
    status_effects: list[AppliedStatusEffect] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.health is None:
            self.health = self.max_health

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_base_value(self, attribute: Attribute) -> float:
        if attribute is Attribute.MAX_HEALTH:
            return self.max_health
        if attribute is Attribute.ARMOR_CLASS:
            return self.armor_class
        if attribute is Attribute.MAX_ENERGY and self.energy is not None:
            return self.energy.max_energy
        if attribute is Attribute.ENERGY_REGEN and self.energy is not None:
            return self.energy.energy_regen
        return self.base_stats.get(attribute, 0)

    def get_stat_breakdown(self, attribute: Attribute) -> StatBreakdown:
        return StatCalculator.breakdown(
            self.modifiers, attribute, self.get_base_value(attribute)
        )

    def get_stat(self, attribute: Attribute) -> int:
        return self.get_stat_breakdown(attribute).total

    @property
    def effective_max_health(self) -> int:
        return max(1, self.get_stat(Attribute.MAX_HEALTH))

    @property
    def effective_armor_class(self) -> int:
        return self.get_stat(Attribute.ARMOR_CLASS)

    def get_resistance(self, damage_type: DamageType) -> ResistanceLevel:
        return self.resistances.get(damage_type, ResistanceLevel.NORMAL)

    def has_feature(self, features: EntityFeature) -> bool:
        """True if the entity has *all* of ``features``."""
        return (self.features & features) == features

    def has_any_feature(self, features: EntityFeature) -> bool:
        return bool(self.features & features)

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def take_damage(self, amount: int) -> int:
        """Reduce health by ``amount`` and return the damage actually taken.

        A destroyed entity ignores damage, so destruction logic can never
        run twice.
        """
        if self.is_destroyed or amount <= 0:
            return 0

        old_health = self.health or 0
        self.health = max(old_health - amount, 0)
        if self.health == 0:
            self._destroy()
        return old_health - self.health

    def heal(self, amount: int) -> int:
        """Restore up to ``amount`` health, clamped to max. Returns the gain."""
        if self.is_destroyed or amount <= 0:
            return 0
        old_health = self.health or 0
        self.health = min(old_health + amount, self.effective_max_health)
        return self.health - old_health

    def set_health(self, value: int) -> None:
        if self.is_destroyed:
            return
        self.health = max(0, min(value, self.effective_max_health))
        if self.health == 0:
            self._destroy()

    def _destroy(self) -> None:
        if self.is_destroyed:
            return
        self.is_destroyed = True
        logger.debug("%s destroyed", self.name)
        self.on_destroyed()

    def on_destroyed(self) -> None:
        """Hook run exactly once when the entity is destroyed."""

    # ------------------------------------------------------------------
    # Status effects
    # ------------------------------------------------------------------

    def can_apply_status_effect(self, template: StatusEffect) -> tuple[bool, str]:
        """Check feature requirements. Returns ``(allowed, reason)``."""
        required = template.required_features
        if required and not self.has_feature(required):
            return False, f"{self.name} lacks required features"
        excluded = template.excluded_features
        if excluded and self.has_any_feature(excluded):
            return False, f"{self.name} has excluded features"
        return True, ""

    def find_status_effect(self, name: str) -> AppliedStatusEffect | None:
        for applied in self.status_effects:
            if applied.template.name == name:
                return applied
        return None

    def has_status_effect(self, name: str) -> bool:
        return self.find_status_effect(name) is not None

    def apply_status_effect(
        self, template: StatusEffect, applier: object = None
    ) -> StatusApplication:
        """Apply ``template`` to this entity.

        Feature requirements can block the effect outright. If an effect with
        the same name is already active, the stacking rule in
        :func:`should_replace` decides whether the new one takes over; when it
        does not, the existing instance stays untouched.
        """
        allowed, reason = self.can_apply_status_effect(template)
        if not allowed:
            logger.debug("Cannot apply %s: %s", template.name, reason)
            return StatusApplication(None, block_reason=reason)

        existing = self.find_status_effect(template.name)
        was_replacement = False
        if existing is not None:
            if not should_replace(existing, template):
                return StatusApplication(existing, kept_existing=True)
            self.remove_status_effect(existing)
            was_replacement = True

        applied = AppliedStatusEffect(template, self, applier)
        applied.on_apply()
        self.status_effects.append(applied)
        return StatusApplication(applied, was_replacement=was_replacement)

    def remove_status_effect(self, applied: AppliedStatusEffect) -> bool:
        if applied not in self.status_effects:
            return False
        self.status_effects.remove(applied)
        applied.on_remove()
        return True

    def remove_status_effects_from_source(self, applier: object) -> int:
        if applier is None:
            return 0
        matching = [a for a in self.status_effects if a.applier is applier]
        for applied in matching:
            self.remove_status_effect(applied)
        return len(matching)

    def get_active_status_effects(self) -> list[AppliedStatusEffect]:
        return list(self.status_effects)

    def update_status_effects(self, log: CombatLog | None = None) -> None:
        """Tick, count down, and expire status effects for one turn end."""
        for applied in list(self.status_effects):
            if applied not in self.status_effects:
                continue
            applied.on_tick(log)
            applied.decrement_duration()
            if applied.is_expired:
                self.remove_status_effect(applied)
                if log is not None:
                    log.emit_status_expired(applied, self)

    def update_modifiers(self, log: CombatLog | None = None) -> None:
        """Count down temporary modifiers and drop the expired ones."""
        for modifier in self.modifiers.tick_durations():
            logger.debug("%s: %s expired", self.name, modifier.describe())
            if log is not None:
                log.emit_modifier_expired(modifier, self)

    @property
    def prevents_actions(self) -> bool:
        return any(a.prevents_actions for a in self.status_effects)

    @property
    def prevents_movement(self) -> bool:
        return any(a.prevents_movement for a in self.status_effects)

    @property
    def damage_amplification(self) -> float:
        """Product of incoming-damage multipliers from active status effects."""
        return math.prod(a.template.damage_amplification for a in self.status_effects)


def should_replace(existing: AppliedStatusEffect, incoming: StatusEffect) -> bool:
    """Stacking rule: higher magnitude wins, then longer remaining duration.

    Magnitude is the sum of absolute modifier values. Indefinite durations
    count as longer than any finite one.
    """
    existing_magnitude = existing.template.magnitude
    incoming_magnitude = incoming.magnitude
    if incoming_magnitude != existing_magnitude:
        return incoming_magnitude > existing_magnitude

    existing_turns = math.inf if existing.is_indefinite else existing.turns_remaining
    incoming_turns = math.inf if incoming.is_indefinite else incoming.base_duration
    return incoming_turns > existing_turns
