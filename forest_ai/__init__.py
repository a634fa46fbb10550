"""
Forest AI - A Monte Carlo Tree Search bot for a hex-grid tree-growing game.

This package provides the game rules (board, light and shadows, the daily
state transition), an MCTS engine that picks one move per turn, and the
adapters needed to play against a host process over text lines.
"""

__version__ = "0.1.0"
__author__ = "Forest AI Team"

# Make key components available at package level
from forest_ai.core.game import Game, GameState
from forest_ai.core.board import Board, create_standard_board
from forest_ai.core.actions import Action, Wait, Grow, Seed, Complete

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))
