"""
Skill descriptors.

A :class:`Skill` is authored content: what roll gates it, which effects it
carries and who they land on, and the numbers its roll uses. Skills are
never mutated at runtime; everything per-use lives on
:class:`~roadwar.game.skills.context.SkillContext`.
"""

from __future__ import annotations

from dataclasses import dataclass

from roadwar.constants.combat import CombatConstants as Combat
from roadwar.game.effects import EffectInvocation
from roadwar.game.enums import (
    CharacterAttribute,
    CharacterSkill,
    CheckDomain,
    SkillCategory,
    SkillRollType,
    TargetingMode,
    TargetPrecision,
    VehicleCheckAttribute,
)


@dataclass(frozen=True)
class SaveSpec:
    """What a saving throw tests: a vehicle stat or a character attribute."""

    domain: CheckDomain = CheckDomain.VEHICLE
    vehicle_attribute: VehicleCheckAttribute = VehicleCheckAttribute.MOBILITY
    character_attribute: CharacterAttribute = CharacterAttribute.DEXTERITY

    @classmethod
    def for_vehicle(cls, attribute: VehicleCheckAttribute) -> SaveSpec:
        return cls(CheckDomain.VEHICLE, vehicle_attribute=attribute)

    @classmethod
    def for_character(cls, attribute: CharacterAttribute) -> SaveSpec:
        return cls(CheckDomain.CHARACTER, character_attribute=attribute)

    @property
    def name(self) -> str:
        if self.domain is CheckDomain.CHARACTER:
            return self.character_attribute.name.title()
        return self.vehicle_attribute.name.title()


@dataclass(frozen=True)
class CheckSpec:
    """What a skill check tests: a vehicle stat or a character skill."""

    domain: CheckDomain = CheckDomain.VEHICLE
    vehicle_attribute: VehicleCheckAttribute = VehicleCheckAttribute.MOBILITY
    character_skill: CharacterSkill = CharacterSkill.PILOTING

    @classmethod
    def for_vehicle(cls, attribute: VehicleCheckAttribute) -> CheckSpec:
        return cls(CheckDomain.VEHICLE, vehicle_attribute=attribute)

    @classmethod
    def for_character(cls, skill: CharacterSkill) -> CheckSpec:
        return cls(CheckDomain.CHARACTER, character_skill=skill)

    @property
    def name(self) -> str:
        if self.domain is CheckDomain.CHARACTER:
            return self.character_skill.name.replace("_", " ").title()
        return self.vehicle_attribute.name.title()


@dataclass(frozen=True)
class Skill:
    """An action a vehicle component can take.

    Attributes:
        name: Display name, also used in combat history.
        roll_type: Which resolver gates the effects.
        effect_invocations: The effects and their targeting rules, applied in
            order.
        targeting_mode: Which selection flow the caller runs.
        target_precision: Whether attacks may aim at a specific component.
            Only PRECISE enables the two-stage component attack.
        save_spec / save_dc_base: The target's save for SAVING_THROW skills.
        check_spec / check_dc: The user's check for SKILL_CHECK skills, and
            both sides' check for OPPOSED_CHECK skills.
        component_targeting_penalty: Subtracted from the chassis fallback
            roll after a missed component attack.
    """

    name: str
    description: str = ""
    category: SkillCategory = SkillCategory.ATTACK
    roll_type: SkillRollType = SkillRollType.NONE
    effect_invocations: tuple[EffectInvocation, ...] = ()
    targeting_mode: TargetingMode = TargetingMode.ENEMY
    target_precision: TargetPrecision = TargetPrecision.AUTO
    save_spec: SaveSpec = SaveSpec()
    save_dc_base: int = Combat.DEFAULT_SAVE_DC
    check_spec: CheckSpec = CheckSpec()
    check_dc: int = Combat.DEFAULT_CHECK_DC
    component_targeting_penalty: int = Combat.DEFAULT_COMPONENT_TARGETING_PENALTY

    @property
    def allows_component_targeting(self) -> bool:
        return self.target_precision is TargetPrecision.PRECISE

    @property
    def has_effects(self) -> bool:
        return bool(self.effect_invocations)
