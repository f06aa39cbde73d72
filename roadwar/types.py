from __future__ import annotations

from typing import NewType, TypeAlias

# =============================================================================
# IDENTITY TYPES
# =============================================================================

# Stable identifier for an entity (component or standalone target).
EntityId = NewType("EntityId", int)

# =============================================================================
# GAME-MECHANIC TYPES
# =============================================================================

DieSize: TypeAlias = int  # Example: 6 for a d6
DiceCount: TypeAlias = int  # Example: 2 for 2d6

# Lane index within a stage, 0 = leftmost lane
LaneIndex: TypeAlias = int

# Free-form key/value payload attached to combat history entries
Metadata: TypeAlias = dict[str, object]
