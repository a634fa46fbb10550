"""
Forest AI Core Package

This package contains the core game logic, including:
- Board topology
- Light and shadow model
- Game state representation and the day transition
- Player actions
- Host text protocol
- Constants and rule parameters

All core components can be imported directly from this package.
"""

# Board
from forest_ai.core.board import Board, Cell, create_standard_board

# Pieces and players
from forest_ai.core.tree import Tree
from forest_ai.core.player import Player

# Rules
from forest_ai.core.rules import Rules, DEFAULT_RULES

# Shadows
from forest_ai.core.shadow import (
    is_shadowed, update_shadows, calculate_sun_income, sun_direction
)

# Game and game state
from forest_ai.core.game import (
    Game, GameState, create_initial_state, simulate_random_game,
    random_agent_callback
)

# Actions
from forest_ai.core.actions import (
    Action, ActionType, Wait, Grow, Seed, Complete,
    InvalidActionError, parse_action, format_action, get_all_valid_actions
)

# Protocol
from forest_ai.core.protocol import read_board, read_turn, format_board, format_turn

# Constants
from forest_ai.core.constants import (
    ME, OPPONENT, MAX_DAY, NO_NEIGHBOR, NUM_DIRECTIONS, MAX_TREE_SIZE
)

__all__ = [
    # Board
    'Board', 'Cell', 'create_standard_board',

    # Pieces and players
    'Tree', 'Player',

    # Rules
    'Rules', 'DEFAULT_RULES',

    # Shadows
    'is_shadowed', 'update_shadows', 'calculate_sun_income', 'sun_direction',

    # Game
    'Game', 'GameState', 'create_initial_state', 'simulate_random_game',
    'random_agent_callback',

    # Actions
    'Action', 'ActionType', 'Wait', 'Grow', 'Seed', 'Complete',
    'InvalidActionError', 'parse_action', 'format_action', 'get_all_valid_actions',

    # Protocol
    'read_board', 'read_turn', 'format_board', 'format_turn',

    # Constants
    'ME', 'OPPONENT', 'MAX_DAY', 'NO_NEIGHBOR', 'NUM_DIRECTIONS', 'MAX_TREE_SIZE'
]
