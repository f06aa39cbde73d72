from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeAlias

from roadwar.util import dice

from .enums import (
    Attribute,
    DamageSource,
    DamageType,
    EntityFeature,
    ModifierCategory,
    ModifierType,
    PeriodicEffectType,
    ResourceType,
)
from .modifiers import AttributeModifier
from .resources import change_resource

if TYPE_CHECKING:
    from roadwar.events import CombatLog

    from .entity import Entity

logger = logging.getLogger(__name__)

INDEFINITE_DURATION = -1

Color: TypeAlias = tuple[int, int, int]


@dataclass(frozen=True)
class ModifierData:
    """Authored description of one modifier a status effect installs."""

    attribute: Attribute
    type: ModifierType = ModifierType.FLAT
    value: float = 0.0


@dataclass(frozen=True)
class PeriodicEffectData:
    """Something that happens every turn while a status effect is active.

    The amount is ``dice_count``d``die_size`` + ``bonus``. A periodic effect
    with no dice is a fixed amount.
    """

    type: PeriodicEffectType
    dice_count: int = 0
    die_size: int = 6
    bonus: int = 0
    damage_type: DamageType = DamageType.PHYSICAL

    def roll_value(self) -> int:
        return dice.roll_dice(self.dice_count, self.die_size) + self.bonus

    @property
    def notation(self) -> str:
        return dice.format_notation(self.dice_count, self.die_size, self.bonus)


@dataclass(frozen=True)
class StatusEffect:
    """Authored template for a named, duration-bearing status.

    Templates are content: they are built once and shared by every
    application. Runtime state lives on :class:`AppliedStatusEffect`.

    Attributes
    ----------
    name:
        Human readable name. Two templates with the same name are the same
        status for stacking purposes.
    base_duration:
        Number of turn-end updates the status survives. ``-1`` is indefinite
        and must be removed explicitly (e.g. leaving a hazardous lane).
    modifiers:
        Modifiers installed on the target while the status is active. They
        are created on apply and all removed together on expiry.
    periodic_effects:
        Damage, healing, or energy changes applied on every turn tick.
    prevents_actions / prevents_movement:
        Behavioral flags. A component under an action-preventing status, or
        whose chassis is, cannot act.
    damage_amplification:
        Multiplier on incoming damage while active (1.0 = unchanged).
    required_features / excluded_features:
        The target must have all required features and none of the excluded
        ones, otherwise application is blocked.
    """

    name: str
    base_duration: int = 3
    description: str = ""
    icon: str | None = None
    display_color: Color = (200, 200, 200)
    modifiers: tuple[ModifierData, ...] = ()
    periodic_effects: tuple[PeriodicEffectData, ...] = ()
    prevents_actions: bool = False
    prevents_movement: bool = False
    damage_amplification: float = 1.0
    required_features: EntityFeature = EntityFeature.NONE
    excluded_features: EntityFeature = EntityFeature.NONE

    @property
    def magnitude(self) -> float:
        return sum(abs(mod.value) for mod in self.modifiers)

    @property
    def is_indefinite(self) -> bool:
        return self.base_duration == INDEFINITE_DURATION


@dataclass(eq=False)
class AppliedStatusEffect:
    """A status template bound to one target.

    Tracks the turns left and every modifier it installed, so removal can
    undo exactly what application did.
    """

    template: StatusEffect
    target: Entity
    applier: object = None
    turns_remaining: int = field(init=False)
    created_modifiers: list[AttributeModifier] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.turns_remaining = self.template.base_duration

    @property
    def is_indefinite(self) -> bool:
        return self.turns_remaining == INDEFINITE_DURATION

    @property
    def is_expired(self) -> bool:
        return not self.is_indefinite and self.turns_remaining <= 0

    @property
    def prevents_actions(self) -> bool:
        return self.template.prevents_actions

    @property
    def prevents_movement(self) -> bool:
        return self.template.prevents_movement

    def on_apply(self) -> None:
        """Install this status's modifiers on the target."""
        for data in self.template.modifiers:
            modifier = AttributeModifier(
                attribute=data.attribute,
                type=data.type,
                value=data.value,
                source=self,
                category=ModifierCategory.STATUS_EFFECT,
                display_name_override=self.template.name,
            )
            self.target.modifiers.add(modifier)
            self.created_modifiers.append(modifier)

    def on_tick(self, log: CombatLog | None = None) -> None:
        """Run every periodic effect once."""
        for periodic in self.template.periodic_effects:
            self._run_periodic(periodic, log)

    def on_remove(self) -> None:
        """Remove every modifier this status installed."""
        for modifier in self.created_modifiers:
            self.target.modifiers.remove(modifier)
        self.created_modifiers.clear()

    def decrement_duration(self) -> None:
        if self.turns_remaining > 0:
            self.turns_remaining -= 1

    def _run_periodic(
        self, periodic: PeriodicEffectData, log: CombatLog | None
    ) -> None:
        # Imported here: the damage pipeline depends on entities, which
        # depend on this module.
        from .damage.applicator import DamageApplicator
        from .damage.resolver import DamagePacket

        amount = periodic.roll_value()
        if amount <= 0 or self.target.is_destroyed:
            return

        match periodic.type:
            case PeriodicEffectType.DAMAGE:
                applicator = DamageApplicator(log)
                if self.applier is None:
                    applicator.apply_environmental_flat(
                        amount,
                        periodic.damage_type,
                        self.target,
                        self.template,
                        source_type=DamageSource.EFFECT,
                    )
                    return
                packet = DamagePacket.from_attacker(
                    amount,
                    periodic.damage_type,
                    self.applier,
                    self.template,
                    source_type=DamageSource.EFFECT,
                )
                applicator.apply_packet(packet, self.target)
            case PeriodicEffectType.HEALING:
                self._change(ResourceType.HEALTH, amount, log)
            case PeriodicEffectType.ENERGY_DRAIN:
                self._change(ResourceType.ENERGY, -amount, log)
            case PeriodicEffectType.ENERGY_RESTORE:
                self._change(ResourceType.ENERGY, amount, log)

    def _change(
        self, resource_type: ResourceType, amount: int, log: CombatLog | None
    ) -> None:
        breakdown = change_resource(
            self.target, resource_type, amount, self.template.name
        )
        if breakdown is None:
            logger.debug(
                "%s has no %s pool for %s",
                self.target.name,
                resource_type.name.lower(),
                self.template.name,
            )
            return
        if log is not None:
            log.emit_restoration(breakdown, self.applier, self.target, self.template)


@dataclass
class StatusApplication:
    """Outcome of one attempt to apply a status template to an entity."""

    applied: AppliedStatusEffect | None
    was_replacement: bool = False
    kept_existing: bool = False
    block_reason: str | None = None

    @property
    def was_blocked(self) -> bool:
        return self.applied is None
