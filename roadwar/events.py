"""Combat event reporting: event records, action scopes, and the history sink.

Resolution code never formats text for players. It emits small event records
describing what happened (damage dealt, a status applied, a roll made) into a
:class:`CombatLog`. The log is an ordinary object handed to the executor,
resolvers, applicators and turn updates; there is no module-level instance.

ACTION SCOPES:
A skill use is bracketed by ``begin_action`` / ``end_action`` (or the
``action_scope`` context manager). Events emitted inside the scope are
collected on one :class:`CombatAction` and written as a single aggregated
history entry when the scope closes ("Ram: 12 damage to Chassis, restores 5
health"). Events emitted outside any scope (damage over time, environmental
hazards) are written immediately as their own entry.

Nested scopes are flattened: opening a scope while one is already open reuses
the outer action, and only the outermost ``end_action`` completes it.

SUBSCRIBERS:
Each log owns an :class:`EventBus`. Completed actions, immediate events and
history entries are published on it so UI layers can listen without the core
knowing about them. The bus is fire-and-forget: handler exceptions are logged
and never propagate into resolution.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterator
from contextlib import contextmanager, suppress
from dataclasses import dataclass, field
from typing import Any, TypeVar

from roadwar import config
from roadwar.game.enums import (
    DamageSource,
    EventImportance,
    EventType,
    ResistanceLevel,
)
from roadwar.types import Metadata

logger = logging.getLogger(__name__)

EventT = TypeVar("EventT", bound="CombatEvent")


# =============================================================================
# EVENT RECORDS
# =============================================================================


@dataclass
class GameEvent:
    """Base class for everything published on an EventBus."""

    pass


@dataclass(kw_only=True)
class CombatEvent(GameEvent):
    """Base class for combat sub-results collected inside an action scope.

    Attributes:
        source: Entity that caused the event (attacker, caster), if any.
        target: Entity that received it.
        causal_source: What triggered it (a Skill, a status template, a hazard).
    """

    source: Any = None  # Avoid circular imports
    target: Any = None
    causal_source: Any = None


@dataclass(kw_only=True)
class DamageEvent(CombatEvent):
    """Damage was dealt. ``result`` is the full DamageResult breakdown."""

    result: Any
    source_type: DamageSource = DamageSource.ABILITY


@dataclass(kw_only=True)
class StatusEffectEvent(CombatEvent):
    """A status effect was applied, replaced an existing one, or was blocked."""

    applied: Any  # AppliedStatusEffect, or None when blocked
    was_replacement: bool = False
    block_reason: str | None = None

    @property
    def was_blocked(self) -> bool:
        return self.applied is None


@dataclass(kw_only=True)
class StatusEffectExpiredEvent(CombatEvent):
    expired: Any


@dataclass(kw_only=True)
class ModifierExpiredEvent(CombatEvent):
    modifier: Any


@dataclass(kw_only=True)
class RestorationEvent(CombatEvent):
    """Health or energy changed. ``breakdown`` is a RestorationBreakdown."""

    breakdown: Any


@dataclass(kw_only=True)
class AttackRollEvent(CombatEvent):
    roll: Any  # D20RollOutcome
    is_hit: bool
    target_component_name: str | None = None
    is_chassis_fallback: bool = False


@dataclass(kw_only=True)
class SavingThrowEvent(CombatEvent):
    roll: Any
    save_name: str = ""

    @property
    def succeeded(self) -> bool:
        return bool(self.roll.success)


@dataclass(kw_only=True)
class SkillCheckEvent(CombatEvent):
    roll: Any
    check_name: str = ""

    @property
    def succeeded(self) -> bool:
        return bool(self.roll.success)


@dataclass(kw_only=True)
class OpposedCheckEvent(CombatEvent):
    attacker_roll: Any
    defender_roll: Any
    attacker_won: bool


# =============================================================================
# HISTORY
# =============================================================================


@dataclass
class HistoryEntry:
    """One human-readable, queryable line of combat history."""

    event_type: EventType
    importance: EventImportance
    message: str
    location: Any = None
    participants: tuple[Any, ...] = ()
    metadata: Metadata = field(default_factory=dict)

    def with_metadata(self, key: str, value: object) -> HistoryEntry:
        """Attach a metadata value and return ``self`` for chaining."""
        self.metadata[key] = value
        return self

    def involves(self, participant: object) -> bool:
        return any(p is participant for p in self.participants)


@dataclass
class CombatAction:
    """All events emitted during one skill use."""

    actor: Any
    source: Any
    primary_target: Any = None
    events: list[CombatEvent] = field(default_factory=list)
    completed: bool = False

    def add_event(self, event: CombatEvent) -> None:
        self.events.append(event)

    def events_of(self, event_type: type[EventT]) -> list[EventT]:
        return [event for event in self.events if isinstance(event, event_type)]

    @property
    def total_damage(self) -> int:
        return sum(event.result.final_damage for event in self.events_of(DamageEvent))


@dataclass
class ActionCompletedEvent(GameEvent):
    action: CombatAction


@dataclass
class HistoryLoggedEvent(GameEvent):
    entry: HistoryEntry


# =============================================================================
# EVENT BUS
# =============================================================================


class EventBus:
    """Simple event bus for publish/subscribe pattern."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = {}

    def subscribe(self, event_type: type, handler: Callable) -> None:
        """Subscribe a handler to an event type."""
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type in self._handlers:
            with suppress(ValueError):
                self._handlers[event_type].remove(handler)

    def publish(self, event: GameEvent) -> None:
        """Publish an event to handlers of its type and of its base classes."""
        for event_type in type(event).__mro__:
            handlers = self._handlers.get(event_type)
            if not handlers:
                continue
            # Copy the handler list to allow safe subscribe/unsubscribe during dispatch
            for handler in list(handlers):
                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Error handling event {type(event).__name__}")


# =============================================================================
# COMBAT LOG
# =============================================================================


class CombatLog:
    """The event/log sink threaded through skill resolution."""

    def __init__(
        self,
        event_bus: EventBus | None = None,
        max_entries: int = config.MAX_HISTORY_ENTRIES,
    ) -> None:
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.history: deque[HistoryEntry] = deque(maxlen=max_entries)
        self.completed_actions: list[CombatAction] = []
        self._current: CombatAction | None = None
        self._depth = 0

    # ------------------------------------------------------------------
    # Action scoping
    # ------------------------------------------------------------------

    @property
    def has_active_action(self) -> bool:
        return self._current is not None

    @property
    def current_action(self) -> CombatAction | None:
        return self._current

    def begin_action(
        self, actor: Any, source: Any, primary_target: Any = None
    ) -> CombatAction:
        """Open an action scope, or join the one already open."""
        if self._current is not None:
            self._depth += 1
            logger.debug(
                "Flattening nested action for %s into the open scope",
                getattr(source, "name", source),
            )
            return self._current

        self._current = CombatAction(actor, source, primary_target)
        self._depth = 1
        return self._current

    def end_action(self) -> CombatAction | None:
        """Close the current scope. Only the outermost call completes the action."""
        if self._current is None:
            logger.warning("end_action called but no action is active")
            return None

        self._depth -= 1
        if self._depth > 0:
            return None

        action = self._current
        self._current = None
        action.completed = True
        self.completed_actions.append(action)
        self._write_action_entry(action)
        self.event_bus.publish(ActionCompletedEvent(action))
        return action

    @contextmanager
    def action_scope(
        self, actor: Any, source: Any, primary_target: Any = None
    ) -> Iterator[CombatAction]:
        action = self.begin_action(actor, source, primary_target)
        try:
            yield action
        finally:
            self.end_action()

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def emit(self, event: CombatEvent) -> None:
        if self._current is not None:
            self._current.add_event(event)
        else:
            self._write_immediate_entry(event)
        self.event_bus.publish(event)

    def emit_damage(
        self,
        result: Any,
        source: Any,
        target: Any,
        causal_source: Any,
        source_type: DamageSource = DamageSource.ABILITY,
    ) -> None:
        self.emit(
            DamageEvent(
                result=result,
                source=source,
                target=target,
                causal_source=causal_source,
                source_type=source_type,
            )
        )

    def emit_status_effect(
        self,
        applied: Any,
        source: Any,
        target: Any,
        causal_source: Any,
        was_replacement: bool = False,
        block_reason: str | None = None,
    ) -> None:
        self.emit(
            StatusEffectEvent(
                applied=applied,
                source=source,
                target=target,
                causal_source=causal_source,
                was_replacement=was_replacement,
                block_reason=block_reason,
            )
        )

    def emit_status_expired(self, expired: Any, target: Any) -> None:
        self.emit(
            StatusEffectExpiredEvent(
                expired=expired, target=target, causal_source=expired.template
            )
        )

    def emit_modifier_expired(self, modifier: Any, target: Any) -> None:
        self.emit(
            ModifierExpiredEvent(
                modifier=modifier, target=target, causal_source=modifier.source
            )
        )

    def emit_restoration(
        self, breakdown: Any, source: Any, target: Any, causal_source: Any
    ) -> None:
        self.emit(
            RestorationEvent(
                breakdown=breakdown,
                source=source,
                target=target,
                causal_source=causal_source,
            )
        )

    def emit_attack_roll(
        self,
        roll: Any,
        source: Any,
        target: Any,
        causal_source: Any,
        is_hit: bool,
        target_component_name: str | None = None,
        is_chassis_fallback: bool = False,
    ) -> None:
        self.emit(
            AttackRollEvent(
                roll=roll,
                source=source,
                target=target,
                causal_source=causal_source,
                is_hit=is_hit,
                target_component_name=target_component_name,
                is_chassis_fallback=is_chassis_fallback,
            )
        )

    def emit_saving_throw(
        self, roll: Any, source: Any, target: Any, causal_source: Any, save_name: str
    ) -> None:
        self.emit(
            SavingThrowEvent(
                roll=roll,
                source=source,
                target=target,
                causal_source=causal_source,
                save_name=save_name,
            )
        )

    def emit_skill_check(
        self, roll: Any, source: Any, target: Any, causal_source: Any, check_name: str
    ) -> None:
        self.emit(
            SkillCheckEvent(
                roll=roll,
                source=source,
                target=target,
                causal_source=causal_source,
                check_name=check_name,
            )
        )

    def emit_opposed_check(
        self,
        attacker_roll: Any,
        defender_roll: Any,
        attacker_won: bool,
        source: Any,
        target: Any,
        causal_source: Any,
    ) -> None:
        self.emit(
            OpposedCheckEvent(
                attacker_roll=attacker_roll,
                defender_roll=defender_roll,
                attacker_won=attacker_won,
                source=source,
                target=target,
                causal_source=causal_source,
            )
        )

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def log(
        self,
        event_type: EventType,
        importance: EventImportance,
        message: str,
        location: Any = None,
        *participants: Any,
    ) -> HistoryEntry:
        entry = HistoryEntry(event_type, importance, message, location, participants)
        self.history.append(entry)
        self.event_bus.publish(HistoryLoggedEvent(entry))
        return entry

    def entries_for(self, participant: object) -> list[HistoryEntry]:
        return [entry for entry in self.history if entry.involves(participant)]

    def clear(self) -> None:
        self.history.clear()
        self.completed_actions.clear()
        self._current = None
        self._depth = 0

    def _write_action_entry(self, action: CombatAction) -> None:
        source_name = _name_of(action.source)
        actor_name = _name_of(action.actor)
        parts = [describe_event(event) for event in action.events]
        parts = [part for part in parts if part]
        summary = ", ".join(parts) if parts else "no effect"

        vehicle = getattr(action.actor, "vehicle", None)
        location = getattr(vehicle, "current_stage", None)
        self.log(
            EventType.COMBAT,
            EventImportance.MEDIUM,
            f"{actor_name} uses {source_name}: {summary}",
            location,
            action.actor,
            action.primary_target,
        ).with_metadata("event_count", len(action.events)).with_metadata(
            "total_damage", action.total_damage
        )

    def _write_immediate_entry(self, event: CombatEvent) -> None:
        message = describe_event(event)
        if not message:
            return
        event_type = EventType.COMBAT
        if isinstance(event, StatusEffectEvent | StatusEffectExpiredEvent):
            event_type = EventType.STATUS_EFFECT
        elif isinstance(event, ModifierExpiredEvent):
            event_type = EventType.MODIFIER
        elif isinstance(event, RestorationEvent):
            event_type = EventType.RESOURCE
        self.log(
            event_type,
            EventImportance.LOW,
            f"{_name_of(event.target)}: {message}",
            None,
            event.source,
            event.target,
        )


def _name_of(obj: Any) -> str:
    if obj is None:
        return "Unknown"
    return str(getattr(obj, "name", obj))


def describe_event(event: CombatEvent) -> str:
    """Short phrase for one event, used when aggregating an action."""
    target_name = _name_of(event.target)
    match event:
        case DamageEvent(result=result) if (
            result.final_damage == 0 and result.resistance is ResistanceLevel.IMMUNE
        ):
            kind = result.damage_type.name.lower()
            return f"{target_name} is immune to {kind} damage"
        case DamageEvent(result=result):
            crit = " (critical)" if result.is_critical else ""
            return (
                f"{result.final_damage} {result.damage_type.name.lower()} damage "
                f"to {target_name}{crit}"
            )
        case StatusEffectEvent(applied=None, block_reason=reason):
            return f"status blocked on {target_name} ({reason or 'blocked'})"
        case StatusEffectEvent(applied=applied, was_replacement=replaced):
            verb = "refreshes" if replaced else "applies"
            return f"{verb} {applied.template.name} on {target_name}"
        case StatusEffectExpiredEvent(expired=expired):
            return f"{expired.template.name} expired"
        case ModifierExpiredEvent(modifier=modifier):
            return f"{modifier.describe()} from {modifier.display_name} expired"
        case RestorationEvent(breakdown=breakdown):
            return breakdown.to_formatted_string()
        case AttackRollEvent(roll=roll, is_hit=is_hit, is_chassis_fallback=fallback):
            outcome = "hit" if is_hit else "miss"
            suffix = " (chassis fallback)" if fallback else ""
            return f"{outcome} {roll.total} vs AC {roll.target_value}{suffix}"
        case SavingThrowEvent(roll=roll, save_name=name):
            outcome = "saves" if roll.success else "fails save"
            detail = f"{name} {roll.total} vs DC {roll.target_value}"
            return f"{target_name} {outcome} ({detail})"
        case SkillCheckEvent(roll=roll, check_name=name):
            outcome = "passes" if roll.success else "fails"
            return f"{outcome} {name} check ({roll.total} vs DC {roll.target_value})"
        case OpposedCheckEvent(attacker_roll=atk, defender_roll=dfn, attacker_won=won):
            outcome = "wins" if won else "loses"
            return f"{outcome} opposed check ({atk.total} vs {dfn.total})"
    return ""
