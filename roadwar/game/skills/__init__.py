from .applicator import SkillEffectApplicator
from .context import SkillContext
from .executor import SkillExecutor
from .resolvers import (
    AttackResolver,
    CheckResolver,
    NoRollResolver,
    OpposedCheckResolver,
    SaveResolver,
    SkillResolver,
)
from .skill import CheckSpec, SaveSpec, Skill
from .validator import SkillValidator, ValidationResult

__all__ = [
    "AttackResolver",
    "CheckResolver",
    "CheckSpec",
    "NoRollResolver",
    "OpposedCheckResolver",
    "SaveResolver",
    "SaveSpec",
    "Skill",
    "SkillContext",
    "SkillEffectApplicator",
    "SkillExecutor",
    "SkillResolver",
    "SkillValidator",
    "ValidationResult",
]
