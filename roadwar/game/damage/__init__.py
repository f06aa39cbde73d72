from .applicator import DamageApplicator
from .calculator import DamageCalculator, DamageComponent, DamageResult
from .formula import DamageFormula, DamageMode
from .resolver import DamagePacket, DamageResolver, apply_resistance

__all__ = [
    "DamageApplicator",
    "DamageCalculator",
    "DamageComponent",
    "DamageFormula",
    "DamageMode",
    "DamagePacket",
    "DamageResolver",
    "DamageResult",
    "apply_resistance",
]
