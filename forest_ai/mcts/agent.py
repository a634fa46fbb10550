"""
Monte Carlo Tree Search Agent for the forest game.

This module provides the MCTSAgent class, which is a ready-to-use AI player
that uses Monte Carlo Tree Search to select actions. The agent can be
configured with different parameters and provides statistics about its
search process.
"""
from typing import Any, Callable, Dict, List, Optional, TextIO, Tuple
import random
import sys

from forest_ai.core.constants import ME
from forest_ai.core.game import GameState, Game
from forest_ai.core.actions import Action
from forest_ai.mcts.node import MCTSNode
from forest_ai.mcts.config import MCTSConfig
from forest_ai.mcts.search import (
    mcts_search, fallback_action, get_action_statistics, get_principal_variation
)


class MCTSAgent:
    """
    Monte Carlo Tree Search agent.

    The search always runs from seat 0's point of view; when the agent plays
    seat 1 it searches a mirrored copy of the state. Actions name cells, so
    the chosen action is valid for the real seat as well.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        verbose: bool = False,
        output: Optional[TextIO] = None
    ):
        """
        Initialize an MCTS agent.

        Args:
            config: MCTS configuration parameters
            name: Name of the agent
            verbose: Whether to print a summary after each search
            output: Stream for verbose output (stderr by default, since stdout
                may carry the host protocol)
        """
        self.config = config or MCTSConfig()
        self.name = name
        self.verbose = verbose
        self.output = output or sys.stderr
        self.rng = random.Random(self.config.seed)

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all actions and their statistics
        self.action_history: List[Tuple[Action, Dict[str, Any]]] = []

        # Root node of the last search
        self.last_root: Optional[MCTSNode] = None

    def candidate_actions(self, state: GameState) -> List[Action]:
        """
        Legal actions that the search can simulate.

        Actions from the host list that our rules reject (for example a grow
        naming a cell without a tree) are dropped.
        """
        return [action for action in state.legal_actions() if action.validate(state, ME)]

    def select_action(self, state: GameState, player_id: int = ME) -> Action:
        """
        Select an action using Monte Carlo Tree Search.

        Args:
            state: Current game state
            player_id: Seat of the player making the decision

        Returns:
            Selected action (one of the state's legal actions, or Wait if there are none)
        """
        view = state if player_id == ME else state.mirrored()
        candidates = self.candidate_actions(view)
        self.last_root = None

        if not candidates:
            # Never answer with an action the host did not offer
            action = fallback_action(view.legal_actions())
            self.last_stats = {"iterations": 0, "used_fallback": True}
        elif len(candidates) == 1:
            # If there's only one valid action, no need to search
            action = candidates[0]
            self.last_stats = {"iterations": 0, "forced_move": True}
        else:
            search_state = view.clone()
            search_state.possible_actions = candidates
            action, stats, root = mcts_search(search_state, self.config, self.rng)
            self.last_stats = stats
            self.last_root = root

        self.action_history.append((action, self.last_stats))

        if self.verbose:
            self._print_search_info(action, self.last_stats)

        return action

    def _print_search_info(self, action: Action, stats: Dict[str, Any]) -> None:
        """
        Print information about the search.

        Args:
            action: Selected action
            stats: Search statistics
        """
        out = self.output
        print(f"{self.name} selected: {action}", file=out)

        if stats.get("iterations", 0) == 0:
            reason = "forced move" if stats.get("forced_move") else "fallback"
            print(f"No search ({reason})", file=out)
            return

        print(f"Iterations: {stats['iterations']}"
              f"{' (stopped early)' if stats.get('stopped_early') else ''}", file=out)
        print(f"Time: {stats['time_elapsed']:.3f}s ({stats['iterations_per_second']:.1f} it/s)", file=out)
        print(f"Nodes: {stats['node_count']}", file=out)
        print(f"Max depth: {stats['max_tree_depth']} in tree, {stats['max_depth']} simulated", file=out)

        if stats.get('action_visits'):
            print("Top actions:", file=out)
            actions_by_visits = sorted(
                stats['action_visits'].items(),
                key=lambda x: x[1],
                reverse=True
            )
            for i, (action_str, visits) in enumerate(actions_by_visits[:5]):
                value = stats['action_rewards'].get(action_str, 0.0)
                print(f"{i+1}. {action_str} - {visits} visits, {value:.3f} value", file=out)

    def get_action_callback(self) -> Callable[[GameState, int], Action]:
        """
        Get a callback function for selecting actions.

        This is useful for registering the agent with a Game object.

        Returns:
            Callback function that takes a game state and player ID and returns an action
        """
        return lambda state, player_id: self.select_action(state, player_id)

    def register_with_game(self, game: Game, player_id: int) -> None:
        """
        Register this agent with a game.

        Args:
            game: Game object
            player_id: ID of the player to register as
        """
        game.register_agent(player_id, self.get_action_callback())

    def get_last_statistics(self) -> Dict[str, Any]:
        return self.last_stats

    def get_principal_variation(self) -> List[Tuple[Action, float]]:
        """
        Get the principal variation (most visited path) from the last search.

        Returns:
            List of (action, value) pairs representing the principal variation
        """
        if self.last_root is None:
            return []

        return get_principal_variation(self.last_root)

    def get_action_statistics(self) -> Dict[str, Dict[str, float]]:
        """
        Get statistics for all actions from the last search.

        Returns:
            Dictionary mapping action strings to statistics
        """
        if self.last_root is None:
            return {}

        return get_action_statistics(self.last_root)

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.action_history = []
        self.last_root = None

    def __str__(self) -> str:
        return f"{self.name} (MCTS, {self.config.iterations} iterations)"


class RandomAgent:
    """Agent that plays a uniformly random valid action."""

    def __init__(self, name: str = "Random Agent", seed: Optional[int] = None):
        self.name = name
        self.rng = random.Random(seed)

    def select_action(self, state: GameState, player_id: int = ME) -> Action:
        valid_actions = state.get_valid_actions(player_id)
        return self.rng.choice(valid_actions)

    def get_action_callback(self) -> Callable[[GameState, int], Action]:
        return lambda state, player_id: self.select_action(state, player_id)

    def register_with_game(self, game: Game, player_id: int) -> None:
        game.register_agent(player_id, self.get_action_callback())

    def __str__(self) -> str:
        return self.name


class MCTSAgentFactory:
    """
    Factory for creating MCTS agents with different configurations.

    This class provides methods for creating MCTS agents with different
    strengths and configurations.
    """

    @staticmethod
    def create_fast() -> MCTSAgent:
        """
        Create a fast MCTS agent with fewer iterations.

        Returns:
            MCTSAgent
        """
        return MCTSAgent(config=MCTSConfig.fast(), name="Fast MCTS")

    @staticmethod
    def create_standard() -> MCTSAgent:
        """
        Create a standard MCTS agent with balanced parameters.

        Returns:
            MCTSAgent
        """
        return MCTSAgent(config=MCTSConfig.default(), name="Standard MCTS")

    @staticmethod
    def create_strong() -> MCTSAgent:
        """
        Create a strong MCTS agent with more iterations.

        Returns:
            MCTSAgent
        """
        return MCTSAgent(config=MCTSConfig.deep(), name="Strong MCTS")

    @staticmethod
    def create_custom(
        iterations: int = 1000,
        time_limit: Optional[float] = None,
        exploration_weight: float = 1.41,
        use_heuristics: bool = True,
        seed: Optional[int] = None,
        name: str = "Custom MCTS"
    ) -> MCTSAgent:
        """
        Create a custom MCTS agent.

        Args:
            iterations: Number of MCTS iterations
            time_limit: Optional time limit in seconds
            exploration_weight: UCB1 exploration parameter
            use_heuristics: Whether to expand promising actions first
            seed: Seed for the search's random generator
            name: Name of the agent

        Returns:
            MCTSAgent
        """
        config = MCTSConfig(
            iterations=iterations,
            time_limit=time_limit,
            exploration_weight=exploration_weight,
            use_heuristics=use_heuristics,
            seed=seed
        )
        return MCTSAgent(config=config, name=name)
