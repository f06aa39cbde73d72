"""
Dice composition for damage formulas.

The calculator turns a :class:`DamageFormula` (plus the acting weapon, when
the formula uses one) into a :class:`DamageResult` holding each dice source
that contributed, its rolled value, and the raw total. Resistance is not part
of the raw total; :class:`~roadwar.game.damage.resolver.DamageResolver` applies
it afterwards.

Critical hits roll every dice source a second time and add the rolls. Flat
bonuses are never doubled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from roadwar.game.enums import Attribute, DamageType, ResistanceLevel
from roadwar.util import dice

from .formula import DamageFormula, DamageMode
from .resolver import DamageResolver

if TYPE_CHECKING:
    from roadwar.game.components import VehicleComponent

logger = logging.getLogger(__name__)


@dataclass
class DamageComponent:
    """One dice source inside a damage roll."""

    label: str
    dice_count: int
    die_size: int
    bonus: int
    rolled: int
    source: str = ""

    @property
    def total(self) -> int:
        return self.rolled + self.bonus

    @property
    def notation(self) -> str:
        return dice.format_notation(self.dice_count, self.die_size, self.bonus)


@dataclass
class DamageResult:
    """Breakdown of one damage resolution.

    ``final_damage`` equals ``raw_total`` until a resolver applies
    resistance. Results are created fresh for every resolution.
    """

    damage_type: DamageType
    components: list[DamageComponent] = field(default_factory=list)
    is_critical: bool = False
    resistance: ResistanceLevel = ResistanceLevel.NORMAL
    final_damage: int = 0

    def __post_init__(self) -> None:
        if not self.final_damage:
            self.final_damage = self.raw_total

    @property
    def raw_total(self) -> int:
        return sum(component.total for component in self.components)

    @property
    def is_empty(self) -> bool:
        return not self.components

    @classmethod
    def empty(cls, damage_type: DamageType = DamageType.PHYSICAL) -> DamageResult:
        return cls(damage_type)

    @classmethod
    def flat(
        cls, amount: int, damage_type: DamageType, label: str = "Flat"
    ) -> DamageResult:
        return cls(damage_type, [DamageComponent(label, 0, 0, amount, 0)])

    def __str__(self) -> str:
        parts = " + ".join(
            f"{c.label} {c.notation} ({c.total})" for c in self.components
        )
        return f"{self.final_damage} {self.damage_type.name.lower()} [{parts}]"


@dataclass(frozen=True)
class _WeaponDice:
    name: str
    count: int
    size: int
    bonus: int
    damage_type: DamageType


class DamageCalculator:
    """Builds raw damage results from formulas. Stateless."""

    @classmethod
    def compute(
        cls,
        formula: DamageFormula,
        weapon: VehicleComponent | None = None,
        *,
        is_critical: bool = False,
        resistance: ResistanceLevel | None = None,
    ) -> DamageResult:
        """Roll ``formula`` and return the raw result.

        If ``resistance`` is given the resistance algebra is applied before
        returning; otherwise the result is left at its raw total.
        """
        weapon_dice = cls._weapon_dice(weapon)
        if formula.uses_weapon and weapon_dice is None:
            logger.warning(
                "Damage mode %s needs a weapon but none was provided",
                formula.mode.name,
            )
            return DamageResult.empty(formula.skill_damage_type)

        damage_type = cls._damage_type(formula, weapon_dice)
        result = DamageResult(damage_type, is_critical=is_critical)

        match formula.mode:
            case DamageMode.SKILL_ONLY:
                result.components.append(cls._roll_skill(formula, is_critical))
            case DamageMode.WEAPON_ONLY:
                assert weapon_dice is not None
                result.components.append(cls._roll_weapon(weapon_dice, is_critical))
            case DamageMode.WEAPON_PLUS_SKILL:
                assert weapon_dice is not None
                result.components.append(cls._roll_weapon(weapon_dice, is_critical))
                result.components.append(cls._roll_skill(formula, is_critical))
            case DamageMode.WEAPON_MULTIPLIED:
                assert weapon_dice is not None
                multiplied = _WeaponDice(
                    weapon_dice.name,
                    formula.multiplied_dice(weapon_dice.count),
                    weapon_dice.size,
                    weapon_dice.bonus,
                    weapon_dice.damage_type,
                )
                result.components.append(cls._roll_weapon(multiplied, is_critical))

        result.final_damage = result.raw_total
        if resistance is not None:
            DamageResolver.apply(result, resistance)
        return result

    @classmethod
    def expected_damage(
        cls, formula: DamageFormula, weapon: VehicleComponent | None = None
    ) -> float:
        """Mean raw damage of a non-critical roll, for previews."""
        weapon_dice = cls._weapon_dice(weapon)
        if formula.uses_weapon and weapon_dice is None:
            return 0.0

        skill_mean = dice.expected_value(
            formula.skill_dice, formula.skill_die_size, formula.skill_bonus
        )
        match formula.mode:
            case DamageMode.SKILL_ONLY:
                return skill_mean
            case DamageMode.WEAPON_ONLY:
                assert weapon_dice is not None
                return dice.expected_value(
                    weapon_dice.count, weapon_dice.size, weapon_dice.bonus
                )
            case DamageMode.WEAPON_PLUS_SKILL:
                assert weapon_dice is not None
                weapon_mean = dice.expected_value(
                    weapon_dice.count, weapon_dice.size, weapon_dice.bonus
                )
                return weapon_mean + skill_mean
            case DamageMode.WEAPON_MULTIPLIED:
                assert weapon_dice is not None
                return dice.expected_value(
                    formula.multiplied_dice(weapon_dice.count),
                    weapon_dice.size,
                    weapon_dice.bonus,
                )
        return 0.0

    @staticmethod
    def _weapon_dice(weapon: VehicleComponent | None) -> _WeaponDice | None:
        if weapon is None or weapon.weapon is None:
            return None
        return _WeaponDice(
            name=weapon.name,
            count=weapon.get_stat(Attribute.DAMAGE_DICE),
            size=weapon.get_stat(Attribute.DAMAGE_DIE_SIZE),
            bonus=weapon.get_stat(Attribute.DAMAGE_BONUS),
            damage_type=weapon.weapon.damage_type,
        )

    @staticmethod
    def _damage_type(
        formula: DamageFormula, weapon_dice: _WeaponDice | None
    ) -> DamageType:
        if formula.uses_weapon and formula.use_weapon_damage_type and weapon_dice:
            return weapon_dice.damage_type
        return formula.skill_damage_type

    @staticmethod
    def _roll_pool(count: int, size: int, is_critical: bool) -> int:
        rolled = dice.roll_dice(count, size)
        if is_critical:
            rolled += dice.roll_dice(count, size)
        return rolled

    @classmethod
    def _roll_weapon(
        cls, weapon_dice: _WeaponDice, is_critical: bool
    ) -> DamageComponent:
        rolled = cls._roll_pool(weapon_dice.count, weapon_dice.size, is_critical)
        return DamageComponent(
            label=weapon_dice.name,
            dice_count=weapon_dice.count,
            die_size=weapon_dice.size,
            bonus=weapon_dice.bonus,
            rolled=rolled,
            source="weapon",
        )

    @classmethod
    def _roll_skill(cls, formula: DamageFormula, is_critical: bool) -> DamageComponent:
        rolled = cls._roll_pool(formula.skill_dice, formula.skill_die_size, is_critical)
        return DamageComponent(
            label="Skill",
            dice_count=formula.skill_dice,
            die_size=formula.skill_die_size,
            bonus=formula.skill_bonus,
            rolled=rolled,
            source="skill",
        )
