"""Constants for combat calculations and mechanics."""


class CombatConstants:
    """Constants for combat calculations and mechanics."""

    # --- d20 Resolution ---
    D20_SIDES = 20
    NATURAL_CRIT = 20  # Always succeeds, flags a critical hit
    NATURAL_FUMBLE = 1  # Always fails

    # --- Default difficulty classes ---
    DEFAULT_SAVE_DC = 15
    DEFAULT_CHECK_DC = 15

    # --- Component targeting ---
    # Subtracted from the chassis fallback roll when a component attack misses.
    DEFAULT_COMPONENT_TARGETING_PENALTY = 2
    # Fraction of chassis max health that must be lost before internal
    # components can be targeted.
    DEFAULT_INTERNAL_ACCESS_THRESHOLD = 0.5

    # --- Resistance algebra ---
    VULNERABLE_MULTIPLIER = 2
    RESISTANT_DIVISOR = 2

    # --- Character formulas ---
    DEFAULT_ATTRIBUTE_SCORE = 10
    MIN_CHARACTER_LEVEL = 1
