from .base import D20RollOutcome, RollBonus
from .d20_system import D20Calculator

__all__ = ["D20Calculator", "D20RollOutcome", "RollBonus"]
