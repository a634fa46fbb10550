"""
Light and shadow model.

The sun moves to the next of the six hex directions every day. A tree is
shadowed when a tree at least as large stands within reach along the light
axis, in which case it earns no sun that day.
"""
from typing import Tuple

from forest_ai.core.constants import (
    NUM_DIRECTIONS, NO_NEIGHBOR, ME, OPPONENT, SUN_BY_SIZE
)


def sun_direction(day: int) -> int:
    """Direction walked from a tree to find the trees that can shadow it."""
    return ((day % NUM_DIRECTIONS) + 3) % NUM_DIRECTIONS


def is_shadowed(game_state, tree_size: int, cell_index: int) -> bool:
    """
    Check whether a tree of ``tree_size`` on ``cell_index`` is shadowed today.

    Walks up to ``tree_size`` cells along the sun direction. The walk stops at
    the board edge. Any tree on a visited cell with a size greater than or
    equal to ``tree_size`` shadows the origin tree; smaller trees do not.

    Args:
        game_state: State providing the board, the forest and the day
        tree_size: Size of the (possibly hypothetical) tree on the origin cell
        cell_index: Origin cell

    Returns:
        True if the tree is shadowed
    """
    board = game_state.board
    direction = sun_direction(game_state.day)

    current = cell_index
    for _ in range(tree_size):
        current = board.neighbor(current, direction)
        if current == NO_NEIGHBOR:
            return False

        blocker = game_state.trees.get(current)
        if blocker is not None and blocker.size >= tree_size:
            return True

    return False


def update_shadows(game_state) -> None:
    """Recompute the shadowed flag of every tree for the state's current day."""
    for tree in game_state.trees.values():
        tree.is_shadowed = is_shadowed(game_state, tree.size, tree.cell_index)


def calculate_sun_income(game_state) -> Tuple[int, int]:
    """
    Sun harvested today by each player.

    Uses the trees' shadowed flags, so update_shadows must have run for the
    current day.

    Returns:
        Tuple of (my income, opponent income)
    """
    income = {ME: 0, OPPONENT: 0}
    for tree in game_state.trees.values():
        if not tree.is_shadowed:
            income[tree.owner] += SUN_BY_SIZE[tree.size]
    return income[ME], income[OPPONENT]
