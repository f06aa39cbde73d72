"""
Dice rolling and dice-distribution helpers.

This module provides two areas of functionality:
1.  Rolling:
    The `Dice` class parses notations such as "2d10+5", "d6" or "7" and rolls
    them. `roll_d()` rolls a single die and `roll_dice()` rolls a pool of
    identical dice. Every roll goes through ``random.randint`` so tests can
    script results by patching it.

2.  Distributions:
    `dice_distribution()` builds the exact probability mass function of a
    dice pool with numpy convolutions. `expected_value()` reduces it to the
    mean, which damage previews use for tooltips.
"""

from __future__ import annotations

import random

import numpy as np

from roadwar.types import DiceCount, DieSize


class Dice:
    """A pool of identical dice plus a flat modifier.

    Parses strings like "d20", "2d6", "2d10+15" or "3d4-1". A bare number
    ("5") is a fixed value with no dice.
    """

    def __init__(self, dice_str: str) -> None:
        """Initialize a Dice object from a string representation.

        Raises:
            ValueError: If the dice string format is invalid
        """
        self.dice_str = dice_str
        self.num_dice, self.sides, self.modifier = self._parse_dice_str(dice_str)

    @classmethod
    def from_parts(cls, num_dice: DiceCount, sides: DieSize, modifier: int = 0) -> Dice:
        """Build a pool from its parts without going through notation."""
        return cls(format_notation(num_dice, sides, modifier))

    def _parse_dice_str(self, dice_str: str) -> tuple[int, int, int]:
        """Parse a dice string into (number of dice, sides, modifier)."""
        dice_str = dice_str.replace(" ", "").lower()
        if not dice_str:
            raise ValueError("Invalid dice format: empty string")

        modifier = 0
        dice_part = dice_str

        # Split off a trailing modifier ("2d10+15" or "d20-3")
        if "+" in dice_str:
            dice_part, mod_part = dice_str.split("+", 1)
            modifier = self._to_int(mod_part, dice_str)
        elif "-" in dice_str[1:]:
            split_at = dice_str.index("-", 1)
            dice_part, mod_part = dice_str[:split_at], dice_str[split_at + 1 :]
            modifier = -self._to_int(mod_part, dice_str)

        # Fixed values ("5")
        if dice_part.lstrip("-").isdigit():
            return 0, 0, int(dice_part) + modifier

        if "d" not in dice_part:
            raise ValueError(f"Invalid dice format: {dice_str}")

        count_part, sides_part = dice_part.split("d", 1)
        num_dice = 1 if count_part == "" else self._to_int(count_part, dice_str)
        sides = self._to_int(sides_part, dice_str)
        if sides <= 0:
            raise ValueError(f"Invalid dice format: {dice_str}")
        return num_dice, sides, modifier

    @staticmethod
    def _to_int(part: str, dice_str: str) -> int:
        if not part.isdigit():
            raise ValueError(f"Invalid dice format: {dice_str}")
        return int(part)

    def roll(self) -> int:
        """Roll the dice and return the total including the modifier."""
        return roll_dice(self.num_dice, self.sides) + self.modifier

    def expected_value(self) -> float:
        return expected_value(self.num_dice, self.sides, self.modifier)

    def __str__(self) -> str:
        return format_notation(self.num_dice, self.sides, self.modifier)


def roll_d(sides: DieSize) -> int:
    """Rolls a single die with the specified number of sides.

    Raises:
        ValueError: If `sides` is not a positive integer.
    """
    if not isinstance(sides, int) or sides <= 0:
        raise ValueError("Number of sides must be a positive integer.")

    return random.randint(1, sides)


def roll_dice(count: DiceCount, sides: DieSize) -> int:
    """Roll ``count`` dice of ``sides`` faces and return the sum.

    A pool with no dice (``count <= 0``) rolls nothing and returns 0.
    """
    if count <= 0:
        return 0
    return sum(roll_d(sides) for _ in range(count))


def format_notation(count: DiceCount, sides: DieSize, bonus: int = 0) -> str:
    """Render a dice pool as notation, e.g. ``2d6+3`` or ``1d8-1``."""
    if count <= 0 or sides <= 0:
        return str(bonus)
    notation = f"{count}d{sides}"
    if bonus > 0:
        notation += f"+{bonus}"
    elif bonus < 0:
        notation += f"{bonus}"
    return notation


def dice_distribution(count: DiceCount, sides: DieSize) -> np.ndarray:
    """Return the probability mass function of ``count``d``sides``.

    Index ``i`` of the returned array is the probability of rolling a total
    of exactly ``i``. An empty pool returns ``[1.0]`` (always 0).
    """
    pmf = np.array([1.0])
    if count <= 0 or sides <= 0:
        return pmf

    single = np.zeros(sides + 1)
    single[1:] = 1.0 / sides
    for _ in range(count):
        pmf = np.convolve(pmf, single)
    return pmf


def expected_value(count: DiceCount, sides: DieSize, bonus: int = 0) -> float:
    """Mean total of a dice pool plus a flat bonus."""
    pmf = dice_distribution(count, sides)
    faces = np.arange(pmf.size)
    return float(np.dot(faces, pmf)) + bonus
