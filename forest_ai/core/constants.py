"""
Constants for the forest game.

This module defines the game constants used throughout the implementation,
including board geometry, tree sizes, action costs and scoring tables.
"""
from typing import Dict, List, Final, Tuple


# Player seats (index into GameState.players and Tree.owner)
ME: Final[int] = 0
OPPONENT: Final[int] = 1
PLAYER_IDS: Final[List[int]] = [ME, OPPONENT]

# Board geometry
NUM_DIRECTIONS: Final[int] = 6
NO_NEIGHBOR: Final[int] = -1  # Sentinel for an off-board neighbour link
MAP_RING_COUNT: Final[int] = 3
NUM_CELLS: Final[int] = 37

# Cube coordinate offsets for the six hex directions, indexed by direction
DIRECTION_VECTORS: Final[List[Tuple[int, int, int]]] = [
    (1, -1, 0),
    (1, 0, -1),
    (0, 1, -1),
    (-1, 1, 0),
    (-1, 0, 1),
    (0, -1, 1),
]

# Richness of each ring of the standard board (ring 0 is the centre)
RICHNESS_BY_RING: Final[Dict[int, int]] = {
    0: 3,
    1: 3,
    2: 2,
    3: 1,
}

# Tree sizes
SEED_SIZE: Final[int] = 0
MAX_TREE_SIZE: Final[int] = 3

# Sun harvested by an unshadowed tree of each size
SUN_BY_SIZE: Final[Dict[int, int]] = {
    0: 0,
    1: 1,
    2: 2,
    3: 3,
}

# Sun cost of growing a tree, keyed by the size it grows *to*
GROW_COSTS: Final[Dict[int, int]] = {
    1: 1,
    2: 3,
    3: 7,
}

SEED_COST: Final[int] = 4
COMPLETE_COST: Final[int] = 4

# Extra score for completing a tree on a cell of each richness
RICHNESS_BONUS: Final[Dict[int, int]] = {
    0: 0,
    1: 0,
    2: 2,
    3: 4,
}

# Game length
MAX_DAY: Final[int] = 24  # Days 0-23 are played, day 24 means the game is over
STARTING_NUTRIENTS: Final[int] = 20
STARTING_TREES_PER_PLAYER: Final[int] = 2

# Evaluation
SUN_PER_POINT: Final[float] = 3.0  # Unconverted sun is worth a third of a point
CLEAR_LEAD: Final[float] = 5.0
