from unittest.mock import patch

import numpy as np
import pytest

from roadwar.util import dice
from tests.helpers import FixedRandom


def test_dice_parsing() -> None:
    d = dice.Dice("2d10+5")
    assert (d.num_dice, d.sides, d.modifier) == (2, 10, 5)
    d = dice.Dice("d6")
    assert (d.num_dice, d.sides, d.modifier) == (1, 6, 0)
    d = dice.Dice("3d4-1")
    assert (d.num_dice, d.sides, d.modifier) == (3, 4, -1)
    d = dice.Dice("5")
    assert (d.num_dice, d.sides, d.modifier) == (0, 0, 5)


@pytest.mark.parametrize("notation", ["", "notadice", "2d0", "xd6", "2d6+x"])
def test_dice_parsing_rejects_malformed_notation(notation: str) -> None:
    with pytest.raises(ValueError):
        dice.Dice(notation)


def test_dice_roll_adds_modifier() -> None:
    with patch("random.randint", FixedRandom([4, 6])):
        assert dice.Dice("2d6+3").roll() == 13


def test_from_parts_round_trips_notation() -> None:
    assert str(dice.Dice.from_parts(2, 8, 1)) == "2d8+1"
    assert str(dice.Dice.from_parts(0, 6, 4)) == "4"


def test_roll_d_rejects_bad_sides() -> None:
    with pytest.raises(ValueError):
        dice.roll_d(0)


def test_roll_dice_empty_pool_rolls_nothing() -> None:
    fr = FixedRandom([])
    with patch("random.randint", fr):
        assert dice.roll_dice(0, 6) == 0
    assert fr.calls == 0


def test_format_notation() -> None:
    assert dice.format_notation(1, 8, 2) == "1d8+2"
    assert dice.format_notation(2, 6, -1) == "2d6-1"
    assert dice.format_notation(1, 6) == "1d6"


def test_dice_distribution_is_a_pmf() -> None:
    pmf = dice.dice_distribution(2, 6)
    assert pmf.size == 13
    assert np.isclose(pmf.sum(), 1.0)
    # 7 is the most likely total of 2d6
    assert int(np.argmax(pmf)) == 7
    assert np.isclose(pmf[7], 6 / 36)


def test_expected_value() -> None:
    assert dice.expected_value(1, 8, 2) == pytest.approx(6.5)
    assert dice.expected_value(2, 6) == pytest.approx(7.0)
    assert dice.expected_value(0, 6, 3) == pytest.approx(3.0)
