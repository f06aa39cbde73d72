"""
Crew members and the d20 formulas that read their sheets.

A :class:`Character` is a character sheet, not an entity: it has no health or
armor class and cannot be targeted. It contributes bonuses to attack rolls,
saving throws, and skill checks made by the vehicle it crews.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from roadwar.constants.combat import CombatConstants as Combat

from .enums import CharacterAttribute, CharacterSkill


def attribute_modifier(score: int) -> int:
    """Standard modifier: ``(score - 10) // 2``, rounded down."""
    return (score - 10) // 2


def proficiency_bonus(level: int) -> int:
    """+2 at levels 1-4, rising by one every four levels."""
    return (max(level, Combat.MIN_CHARACTER_LEVEL) - 1) // 4 + 2


def half_level_bonus(level: int) -> int:
    return level // 2


@dataclass(eq=False)
class Character:
    """A crew member's sheet.

    Attributes:
        name: Display name.
        level: Character level, drives proficiency and half-level bonuses.
        attributes: Raw scores. Missing attributes count as 10.
        proficient_skills: Skills that add the proficiency bonus.
        base_attack_bonus: Added to every attack roll this character makes.
    """

    name: str
    level: int = 1
    attributes: dict[CharacterAttribute, int] = field(default_factory=dict)
    proficient_skills: frozenset[CharacterSkill] = frozenset()
    base_attack_bonus: int = 0

    def get_attribute_score(self, attribute: CharacterAttribute) -> int:
        return self.attributes.get(attribute, Combat.DEFAULT_ATTRIBUTE_SCORE)

    def get_attribute_modifier(self, attribute: CharacterAttribute) -> int:
        return attribute_modifier(self.get_attribute_score(attribute))

    def is_proficient(self, skill: CharacterSkill) -> bool:
        return skill in self.proficient_skills

    def skill_modifier(self, skill: CharacterSkill) -> int:
        """Total check bonus for ``skill``."""
        modifier = self.get_attribute_modifier(skill.primary_attribute)
        if self.is_proficient(skill):
            modifier += proficiency_bonus(self.level)
        return modifier

    def save_modifier(self, attribute: CharacterAttribute) -> int:
        """Total saving throw bonus for ``attribute``."""
        return self.get_attribute_modifier(attribute) + half_level_bonus(self.level)
