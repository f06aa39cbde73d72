from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RollBonus:
    """One labeled contribution to a d20 roll ("Weapon", "Mobility", ...)."""

    label: str
    value: int

    def __str__(self) -> str:
        return f"{self.label} {self.value:+d}"


@dataclass
class D20RollOutcome:
    """The full breakdown of one d20 roll against a target number.

    A natural 20 always succeeds and counts as a critical hit. A natural 1
    always fails. Otherwise the roll succeeds when ``total >= target_value``.
    """

    base_roll: int
    bonuses: list[RollBonus] = field(default_factory=list)
    target_value: int = 0
    success: bool = False
    is_critical_hit: bool = False
    is_fumble: bool = False

    @property
    def total_modifier(self) -> int:
        return sum(bonus.value for bonus in self.bonuses)

    @property
    def total(self) -> int:
        return self.base_roll + self.total_modifier

    @classmethod
    def auto_fail(cls, target_value: int, reason: str = "") -> D20RollOutcome:
        """A failed outcome for a roll that could not be attempted."""
        bonuses = [RollBonus(reason, 0)] if reason else []
        return cls(base_roll=0, bonuses=bonuses, target_value=target_value)

    def describe(self) -> str:
        parts = [f"d20 {self.base_roll}"]
        parts.extend(str(bonus) for bonus in self.bonuses if bonus.value)
        verdict = "success" if self.success else "failure"
        return f"{' '.join(parts)} = {self.total} vs {self.target_value} ({verdict})"
