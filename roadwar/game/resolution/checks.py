"""
Saving throw and skill check rollers.

A check tests either the vehicle (a component's effective Mobility or
Stability) or a character (attribute modifier plus half level for saves,
attribute modifier plus proficiency for skills). Which character rolls is
decided here too: an explicit character wins, then the rolling component's
operator, then the crew member with the best modifier.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from roadwar.game.enums import CheckDomain

from .base import D20RollOutcome, RollBonus
from .d20_system import D20Calculator

if TYPE_CHECKING:
    from roadwar.game.character import Character
    from roadwar.game.entity import Entity
    from roadwar.game.skills.skill import CheckSpec, SaveSpec

logger = logging.getLogger(__name__)


def _vehicle_bonus(entity: Entity, spec: SaveSpec | CheckSpec) -> list[RollBonus]:
    attribute = spec.vehicle_attribute.to_attribute()
    value = entity.get_stat(attribute)
    return [RollBonus(attribute.name.title(), value)] if value else []


def save_bonuses(
    entity: Entity, spec: SaveSpec, character: Character | None = None
) -> list[RollBonus] | None:
    """Bonuses for a save, or ``None`` when no one can make it."""
    if spec.domain is CheckDomain.VEHICLE:
        return _vehicle_bonus(entity, spec)

    attribute = spec.character_attribute
    if character is None:
        character = getattr(entity, "operator", None)
    if character is None:
        vehicle = getattr(entity, "vehicle", None)
        if vehicle is not None:
            character = vehicle.best_crew_for_save(attribute)
    if character is None:
        return None
    return [RollBonus(character.name, character.save_modifier(attribute))]


def check_bonuses(
    entity: Entity, spec: CheckSpec, character: Character | None = None
) -> list[RollBonus] | None:
    """Bonuses for a skill check, or ``None`` when no one can make it."""
    if spec.domain is CheckDomain.VEHICLE:
        return _vehicle_bonus(entity, spec)

    skill = spec.character_skill
    if character is None:
        character = getattr(entity, "operator", None)
    if character is None:
        vehicle = getattr(entity, "vehicle", None)
        if vehicle is not None:
            character = vehicle.best_crew_for_skill(skill)
    if character is None:
        return None
    return [RollBonus(character.name, character.skill_modifier(skill))]


def roll_save(
    entity: Entity,
    spec: SaveSpec,
    dc: int,
    character: Character | None = None,
    extra: list[RollBonus] | None = None,
) -> D20RollOutcome:
    bonuses = save_bonuses(entity, spec, character)
    if bonuses is None:
        logger.debug("%s has no crew for a %s save", entity.name, spec.name)
        return D20RollOutcome.auto_fail(dc, "No crew")
    return D20Calculator.roll([*bonuses, *(extra or [])], dc)


def roll_check(
    entity: Entity,
    spec: CheckSpec,
    dc: int,
    character: Character | None = None,
) -> D20RollOutcome:
    bonuses = check_bonuses(entity, spec, character)
    if bonuses is None:
        logger.debug("%s has no crew for a %s check", entity.name, spec.name)
        return D20RollOutcome.auto_fail(dc, "No crew")
    return D20Calculator.roll(bonuses, dc)
