"""Attack roll bonuses and target numbers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from roadwar.game.enums import Attribute

from .base import RollBonus

if TYPE_CHECKING:
    from roadwar.game.character import Character
    from roadwar.game.entity import Entity


def gather_attack_bonuses(
    attacker: Entity | None, character: Character | None = None
) -> list[RollBonus]:
    """Labeled bonuses for an attack made with ``attacker``.

    The component's effective ``ATTACK_BONUS`` already includes its weapon's
    bonus plus any modifiers. The operating character adds their base
    attack bonus.
    """
    bonuses: list[RollBonus] = []
    if attacker is not None:
        breakdown = attacker.get_stat_breakdown(Attribute.ATTACK_BONUS)
        if breakdown.base_value:
            bonuses.append(RollBonus("Weapon", int(breakdown.base_value)))
        if breakdown.modifier_delta:
            bonuses.append(RollBonus("Modifiers", breakdown.modifier_delta))
        if character is None:
            character = getattr(attacker, "operator", None)
    if character is not None and character.base_attack_bonus:
        bonuses.append(RollBonus(character.name, character.base_attack_bonus))
    return bonuses


def with_penalty(bonuses: list[RollBonus], penalty: int) -> list[RollBonus]:
    if not penalty:
        return list(bonuses)
    return [*bonuses, RollBonus("Component targeting", -penalty)]


def armor_class_of(target: Entity) -> int:
    return target.effective_armor_class
