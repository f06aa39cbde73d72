"""
Configuration constants.

Centralizes the runtime switches used by the package. Combat tuning numbers
live in :mod:`roadwar.constants.combat`; content values (skill DCs, targeting
penalties, access thresholds) live on the content objects themselves and
default to those constants.
"""

# =============================================================================
# COMBAT HISTORY
# =============================================================================

# Maximum number of history entries a CombatLog keeps before dropping the
# oldest ones.
MAX_HISTORY_ENTRIES = 10_000
