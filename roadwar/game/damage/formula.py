from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from roadwar.game.enums import DamageType
from roadwar.util import dice


class DamageMode(Enum):
    """How a damage formula combines weapon dice with the skill's own dice."""

    SKILL_ONLY = auto()  # Only the skill's dice and bonus
    WEAPON_ONLY = auto()  # Only the acting weapon's dice and bonus
    WEAPON_PLUS_SKILL = auto()  # Weapon dice + skill dice + both bonuses
    WEAPON_MULTIPLIED = auto()  # Weapon dice count x multiplier, bonus unscaled


@dataclass(frozen=True)
class DamageFormula:
    """Authored description of the damage a skill deals.

    Attributes:
        mode: Which dice sources are combined.
        skill_dice / skill_die_size / skill_bonus: The skill's own dice.
        skill_damage_type: Damage type when no weapon supplies one.
        use_weapon_damage_type: Prefer the weapon's damage type when a weapon
            contributes dice.
        weapon_multiplier: Dice-count multiplier for WEAPON_MULTIPLIED.
    """

    mode: DamageMode = DamageMode.SKILL_ONLY
    skill_dice: int = 1
    skill_die_size: int = 6
    skill_bonus: int = 0
    skill_damage_type: DamageType = DamageType.PHYSICAL
    use_weapon_damage_type: bool = True
    weapon_multiplier: float = 2.0

    @property
    def uses_weapon(self) -> bool:
        return self.mode is not DamageMode.SKILL_ONLY

    @property
    def skill_notation(self) -> str:
        return dice.format_notation(
            self.skill_dice, self.skill_die_size, self.skill_bonus
        )

    def multiplied_dice(self, weapon_dice: int) -> int:
        """Weapon dice count after the multiplier, e.g. 1 x 2.0 -> 2."""
        return max(0, round(weapon_dice * self.weapon_multiplier))

    def describe(self) -> str:
        match self.mode:
            case DamageMode.SKILL_ONLY:
                return f"{self.skill_notation} {self.skill_damage_type.name.lower()}"
            case DamageMode.WEAPON_ONLY:
                return "Weapon"
            case DamageMode.WEAPON_PLUS_SKILL:
                return f"Weapon + {self.skill_notation}"
            case DamageMode.WEAPON_MULTIPLIED:
                return f"Weapon x{self.weapon_multiplier:g}"
