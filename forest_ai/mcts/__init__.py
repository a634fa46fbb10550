"""
Monte Carlo Tree Search (MCTS) implementation for the forest game.

This package provides a complete MCTS agent. The MCTS algorithm works by:

1. Selection: Starting from the root node, select child nodes using UCB1 until reaching
   a terminal node or a node that hasn't been fully expanded.
2. Expansion: Create a new child node by taking a previously untried action
   (the opponent's simultaneous action is sampled from the opponent model).
3. Simulation: From the new node, perform a playout to the last day.
4. Backpropagation: Update the statistics of all nodes in the path with the result.

The agent can be configured with different parameters to control the search budget,
exploration constant, and simulation strategy.
"""

from forest_ai.mcts.node import MCTSNode, SearchError
from forest_ai.mcts.agent import MCTSAgent, MCTSAgentFactory, RandomAgent
from forest_ai.mcts.search import (
    mcts_search,
    select_node,
    simulate_game,
    backpropagate,
    fallback_action
)
from forest_ai.mcts.policies import evaluate_state
from forest_ai.mcts.config import MCTSConfig

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    iterations=1000,          # Number of MCTS iterations per move
    exploration_weight=1.41,  # UCB1 exploration parameter (sqrt(2))
    max_depth=100,            # Maximum number of days per simulation
    time_limit=None,          # Optional time limit in seconds (None = no limit)
    use_heuristics=True,      # Whether to expand promising actions first
    simulation_policy="random"  # Policy for simulation phase ("random" or "heuristic")
)

__all__ = [
    'MCTSAgent',
    'MCTSAgentFactory',
    'RandomAgent',
    'MCTSNode',
    'MCTSConfig',
    'SearchError',
    'mcts_search',
    'select_node',
    'simulate_game',
    'backpropagate',
    'fallback_action',
    'evaluate_state',
    'DEFAULT_CONFIG'
]
