"""
Team balancing constants.

Positions are processed in a fixed order: the fixed roles first, so
defenders and attackers are spread evenly before the flexible
"everywhere" players fill the gaps.
"""

from kickabout.players.models import Position

POSITION_ORDER = (
    Position.DEFENSIVE,
    Position.MIDFIELD,
    Position.ATTACKING,
    Position.EVERYWHERE,
)

# Position given to names that don't match anyone on the roster
DEFAULT_POSITION = Position.EVERYWHERE

# Average rating gap per player, used to label a split
# Format: (upper bound inclusive, label); above every bound is "Unbalanced"
BALANCE_LABELS = (
    (5, "Perfectly balanced"),
    (10, "Slightly uneven"),
)
UNBALANCED_LABEL = "Unbalanced"
