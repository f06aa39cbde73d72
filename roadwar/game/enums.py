from __future__ import annotations

from enum import Enum, Flag, auto

# =============================================================================
# ATTRIBUTES & MODIFIERS
# =============================================================================


class Attribute(Enum):
    """Every stat a modifier can target."""

    MAX_SPEED = auto()
    ARMOR_CLASS = auto()
    ATTACK_BONUS = auto()
    MOBILITY = auto()
    MAX_HEALTH = auto()
    MAX_ENERGY = auto()
    ENERGY_REGEN = auto()
    ACCELERATION = auto()
    STABILITY = auto()
    BASE_FRICTION = auto()
    DRAG_COEFFICIENT = auto()
    DAMAGE_DICE = auto()
    DAMAGE_DIE_SIZE = auto()
    DAMAGE_BONUS = auto()
    AMMO = auto()
    COMPONENT_SPACE = auto()
    POWER_DRAW = auto()
    MAGIC_RESISTANCE = auto()
    PHYSICAL_RESISTANCE = auto()


class ModifierType(Enum):
    """How a modifier's value combines with the base stat.

    FLAT values are summed onto the base. PERCENT values scale by
    ``1 + value / 100`` and MULTIPLIER values scale by ``value``; both
    compose multiplicatively after the flat sum.
    """

    FLAT = auto()
    PERCENT = auto()
    MULTIPLIER = auto()


class ModifierCategory(Enum):
    """Grouping tag used for bulk removal and display."""

    EQUIPMENT = auto()  # Provided by another component; lives while it does
    STATUS_EFFECT = auto()  # Owned by an AppliedStatusEffect
    DYNAMIC = auto()
    AURA = auto()
    SKILL = auto()
    OTHER = auto()


# =============================================================================
# DAMAGE
# =============================================================================


class DamageType(Enum):
    PHYSICAL = auto()
    BLUDGEONING = auto()
    PIERCING = auto()
    SLASHING = auto()
    FIRE = auto()
    COLD = auto()
    LIGHTNING = auto()
    ACID = auto()
    FORCE = auto()
    PSYCHIC = auto()
    NECROTIC = auto()
    RADIANT = auto()


class DamageSource(Enum):
    """Category of what dealt the damage, for history and display."""

    WEAPON = auto()
    ABILITY = auto()
    ENVIRONMENT = auto()
    EFFECT = auto()
    COLLISION = auto()


class ResistanceLevel(Enum):
    VULNERABLE = auto()
    NORMAL = auto()
    RESISTANT = auto()
    IMMUNE = auto()


# =============================================================================
# ENTITIES & COMPONENTS
# =============================================================================


class ComponentType(Enum):
    POWER_CORE = auto()
    POWER_ACCESSORY = auto()
    CHASSIS = auto()
    DRIVE = auto()
    WEAPON = auto()
    UTILITY_WEAPON = auto()
    ACTIVE_DEFENSE = auto()
    UTILITY = auto()
    SENSORS = auto()
    COMMUNICATIONS = auto()
    STORAGE = auto()
    ENTERTAINMENT = auto()
    CUSTOM = auto()


class ComponentExposure(Enum):
    """How reachable a component is for targeting. Independent of health."""

    EXTERNAL = auto()  # Always targetable
    PROTECTED = auto()  # Requires the shielding component destroyed
    INTERNAL = auto()  # Requires chassis damage past a threshold
    SHIELDED = auto()  # Inaccessible while the shielding component is alive


class VehicleStatus(Enum):
    ACTIVE = auto()
    DESTROYED = auto()


class EntityFeature(Flag):
    """Capability flags that status effects can require or exclude."""

    NONE = 0
    MECHANICAL = auto()
    ELECTRONIC = auto()
    ORGANIC = auto()
    MAGICAL = auto()
    FLAMMABLE = auto()
    POWERED = auto()


class ResourceType(Enum):
    HEALTH = auto()
    ENERGY = auto()


class PeriodicEffectType(Enum):
    DAMAGE = auto()
    HEALING = auto()
    ENERGY_DRAIN = auto()
    ENERGY_RESTORE = auto()


# =============================================================================
# SKILLS & TARGETING
# =============================================================================


class SkillRollType(Enum):
    """Which resolver a skill use goes through. Exactly one per skill."""

    NONE = auto()
    ATTACK_ROLL = auto()
    SAVING_THROW = auto()
    SKILL_CHECK = auto()
    OPPOSED_CHECK = auto()


class SkillCategory(Enum):
    """Descriptive only. Never restricts which effects a skill may carry."""

    ATTACK = auto()
    RESTORATION = auto()
    BUFF = auto()
    DEBUFF = auto()
    UTILITY = auto()
    SPECIAL = auto()
    CUSTOM = auto()


class EffectTarget(Enum):
    SOURCE_COMPONENT = auto()
    SOURCE_VEHICLE = auto()
    SELECTED_TARGET = auto()
    TARGET_VEHICLE = auto()
    BOTH = auto()
    ALL_ENEMIES_IN_STAGE = auto()
    ALL_ALLIES_IN_STAGE = auto()


class TargetingMode(Enum):
    """Which selection flow a skill needs from the caller."""

    SELF = auto()
    SOURCE_COMPONENT = auto()
    ENEMY = auto()
    ENEMY_COMPONENT = auto()


class TargetPrecision(Enum):
    """How precisely an attack may pick a component."""

    VEHICLE_ONLY = auto()  # Always resolves against the chassis
    AUTO = auto()  # Router picks the component per effect
    PRECISE = auto()  # Caller-selected component, two-stage attack


class CheckDomain(Enum):
    """Whether a d20 check tests the vehicle or a character."""

    VEHICLE = auto()
    CHARACTER = auto()


class VehicleCheckAttribute(Enum):
    MOBILITY = auto()
    STABILITY = auto()

    def to_attribute(self) -> Attribute:
        if self is VehicleCheckAttribute.STABILITY:
            return Attribute.STABILITY
        return Attribute.MOBILITY


class CharacterAttribute(Enum):
    STRENGTH = auto()
    DEXTERITY = auto()
    INTELLIGENCE = auto()
    WISDOM = auto()
    CONSTITUTION = auto()
    CHARISMA = auto()


class CharacterSkill(Enum):
    PILOTING = auto()
    DEFENSIVE_MANEUVERS = auto()
    STUNTS = auto()
    PERCEPTION = auto()
    SURVIVAL = auto()
    MECHANICS = auto()
    ARCANA = auto()
    STEALTH = auto()
    DECEPTION = auto()
    INTIMIDATION = auto()

    @property
    def primary_attribute(self) -> CharacterAttribute:
        return _SKILL_ATTRIBUTES.get(self, CharacterAttribute.DEXTERITY)


_SKILL_ATTRIBUTES: dict[CharacterSkill, CharacterAttribute] = {
    CharacterSkill.PILOTING: CharacterAttribute.DEXTERITY,
    CharacterSkill.DEFENSIVE_MANEUVERS: CharacterAttribute.DEXTERITY,
    CharacterSkill.STUNTS: CharacterAttribute.DEXTERITY,
    CharacterSkill.PERCEPTION: CharacterAttribute.WISDOM,
    CharacterSkill.SURVIVAL: CharacterAttribute.WISDOM,
    CharacterSkill.MECHANICS: CharacterAttribute.INTELLIGENCE,
    CharacterSkill.ARCANA: CharacterAttribute.INTELLIGENCE,
    CharacterSkill.STEALTH: CharacterAttribute.DEXTERITY,
    CharacterSkill.DECEPTION: CharacterAttribute.CHARISMA,
    CharacterSkill.INTIMIDATION: CharacterAttribute.CHARISMA,
}


# =============================================================================
# COMBAT HISTORY
# =============================================================================


class EventType(Enum):
    COMBAT = auto()
    MOVEMENT = auto()
    MODIFIER = auto()
    STATUS_EFFECT = auto()
    SKILL_USE = auto()
    DESTRUCTION = auto()
    RESOURCE = auto()
    SYSTEM = auto()


class EventImportance(Enum):
    """Lower value means more important."""

    CRITICAL = 0
    HIGH = 1
    MEDIUM = 2
    LOW = 3
    DEBUG = 4
