"""The d20 roll used by every resolver."""

from __future__ import annotations

import random

import numpy as np

from roadwar.constants.combat import CombatConstants as Combat

from .base import D20RollOutcome, RollBonus


class D20Calculator:
    """Rolls d20 + bonuses against a target number."""

    @staticmethod
    def roll(bonuses: list[RollBonus], target_value: int) -> D20RollOutcome:
        base_roll = random.randint(1, Combat.D20_SIDES)
        is_critical = base_roll == Combat.NATURAL_CRIT
        is_fumble = base_roll == Combat.NATURAL_FUMBLE

        outcome = D20RollOutcome(
            base_roll=base_roll,
            bonuses=list(bonuses),
            target_value=target_value,
            is_critical_hit=is_critical,
            is_fumble=is_fumble,
        )
        if is_critical:
            outcome.success = True
        elif is_fumble:
            outcome.success = False
        else:
            outcome.success = outcome.total >= target_value
        return outcome

    @staticmethod
    def success_probability(total_modifier: int, target_value: int) -> float:
        """Chance that d20 + ``total_modifier`` meets ``target_value``.

        Natural 20 always counts, natural 1 never does, so the result lies in
        ``[0.05, 0.95]``.
        """
        faces = np.arange(1, Combat.D20_SIDES + 1)
        succeeds = (faces + total_modifier) >= target_value
        succeeds[faces == Combat.NATURAL_CRIT] = True
        succeeds[faces == Combat.NATURAL_FUMBLE] = False
        return float(succeeds.mean())
