"""
Monte Carlo Tree Search Node for the forest game.

This module defines the MCTSNode class which represents a node in the MCTS tree.
Each node contains a game state, statistics (visits, total reward), and manages
child nodes. Every node is a decision point for me: the opponent's simultaneous
action is folded into the transition that produced the node's state.
"""
from __future__ import annotations
from typing import List, Optional, Tuple
import math
import random

from forest_ai.core.constants import ME
from forest_ai.core.game import GameState
from forest_ai.core.actions import Action
from forest_ai.mcts.config import MCTSConfig
from forest_ai.mcts.policies import (
    order_for_expansion, choose_action, opponent_action, evaluate_state
)


class SearchError(RuntimeError):
    """Raised when the search tree reaches a state it cannot handle."""


class MCTSNode:
    """
    A node in the Monte Carlo Tree Search.

    Each node represents a game state and tracks statistics about
    simulations that pass through it, including visit count and rewards.
    The parent reference is only followed for backpropagation and UCB1.
    """

    def __init__(
        self,
        state: GameState,
        parent: Optional['MCTSNode'] = None,
        action: Optional[Action] = None,
        config: Optional[MCTSConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize an MCTS node.

        Args:
            state: The game state this node represents
            parent: The parent node (None for root)
            action: The action that led to this state (None for root)
            config: MCTS configuration parameters
            rng: Random generator shared by the whole tree
        """
        self.state = state
        self.parent = parent
        self.action = action  # Action that led to this state
        self.config = config or MCTSConfig()
        self.rng = rng or random.Random(self.config.seed)

        # Node statistics
        self.visits = 0
        self.total_reward = 0.0
        self.children: List[MCTSNode] = []

        # Track which actions have been tried
        self._untried_actions: Optional[List[Action]] = None

    @property
    def untried_actions(self) -> List[Action]:
        """
        Get the list of untried actions from this node.

        This property lazily computes the legal actions the first time
        it's accessed, in expansion order (next action to try last).

        Returns:
            List of untried actions
        """
        if self._untried_actions is None:
            if self.is_terminal():
                self._untried_actions = []
            else:
                self._untried_actions = order_for_expansion(
                    self.state.legal_actions(), self.config.use_heuristics, self.rng
                )

        return self._untried_actions

    def has_untried_actions(self) -> bool:
        return bool(self.untried_actions)

    def is_terminal(self) -> bool:
        """
        Check if this node represents a terminal game state.

        Returns:
            True if the last day has been played, False otherwise
        """
        return self.state.game_over

    def is_fully_expanded(self) -> bool:
        return not self.has_untried_actions()

    @property
    def mean_reward(self) -> float:
        """Average simulation result (0 for an unvisited node)."""
        return self.total_reward / self.visits if self.visits else 0.0

    def ucb_score(self, child: 'MCTSNode', exploration_weight: Optional[float] = None) -> float:
        """
        Calculate the UCB1 score for a child node.

        UCB1 = average_reward + exploration_weight * sqrt(ln(parent_visits) / child_visits)

        Args:
            child: Child node to calculate score for
            exploration_weight: Override for the configured exploration weight

        Returns:
            UCB1 score
        """
        # If the child has never been visited, treat it as having infinite value
        if child.visits == 0:
            return MCTSConfig.INFINITE_VALUE

        if exploration_weight is None:
            exploration_weight = self.config.exploration_weight

        exploitation = child.total_reward / child.visits
        exploration = math.sqrt(math.log(self.visits) / child.visits) if self.visits > 0 else 0.0

        return exploitation + exploration_weight * exploration

    def select_child(self, exploration_weight: Optional[float] = None) -> 'MCTSNode':
        """
        Select the child with the highest UCB1 score.

        With an exploration weight of 0 this is the child with the highest
        average reward (once every child has been visited).

        Args:
            exploration_weight: Override for the configured exploration weight

        Returns:
            Selected child node
        """
        if not self.children:
            raise SearchError("Cannot select child from node with no children")

        return max(self.children, key=lambda child: self.ucb_score(child, exploration_weight))

    def expand(self) -> 'MCTSNode':
        """
        Expand the tree by adding a new child node.

        This implements the expansion phase of MCTS: the next untried action
        is applied together with the opponent model's response.

        Returns:
            The new child node

        Raises:
            SearchError: If the node is terminal or has no untried actions
        """
        if self.is_terminal() or not self.has_untried_actions():
            raise SearchError(f"Cannot expand node: {self}")

        action = self.untried_actions.pop()
        response = opponent_action(self.state, self.config, self.rng)
        new_state = self.state.apply(action, response)

        child = MCTSNode(
            state=new_state,
            parent=self,
            action=action,
            config=self.config,
            rng=self.rng,
        )
        self.children.append(child)
        return child

    def update(self, reward: float) -> None:
        """
        Update the node statistics with a simulation result.

        Args:
            reward: The simulation result, from my point of view
        """
        self.visits += 1
        self.total_reward += reward

    def best_child(self) -> Optional['MCTSNode']:
        """
        Get the most visited child, ties broken by average reward.

        Visit count is more robust than average reward, which is noisy for
        rarely visited children.

        Returns:
            The best child, or None if no children
        """
        if not self.children:
            return None
        return max(self.children, key=lambda c: (c.visits, c.mean_reward))

    def best_action(self) -> Optional[Action]:
        """
        Get the best action from this node based on visit counts.

        Returns:
            The best action, or None if no children
        """
        best = self.best_child()
        return best.action if best is not None else None

    def tree_policy(self) -> 'MCTSNode':
        """
        Execute the tree policy to select a node for simulation.

        This combines the selection and expansion phases of MCTS.

        Returns:
            Newly expanded node, or a terminal node

        Raises:
            SearchError: If a non-terminal node has no legal actions
        """
        current = self

        while not current.is_terminal():
            if not current.is_fully_expanded():
                return current.expand()

            if not current.children:
                raise SearchError(f"Non-terminal node has no legal actions: {current}")

            current = current.select_child()

        return current

    def simulate(self) -> Tuple[float, int]:
        """
        Run a simulation from this node to the end of the game.

        This implements the simulation phase of MCTS. The rollout works on a
        private copy of the state and creates no nodes.

        Returns:
            Tuple of (reward, number of simulated days)
        """
        if self.is_terminal():
            return evaluate_state(self.state), 0

        state = self.state.clone()

        steps = 0
        while not state.game_over and steps < self.config.max_depth:
            action = choose_action(state, ME, self.config.simulation_policy, self.rng)
            response = opponent_action(state, self.config, self.rng)
            state.step(action, response)
            steps += 1

        return evaluate_state(state), steps

    def depth(self) -> int:
        """Number of edges between this node and the root."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def __str__(self) -> str:
        """
        Get a string representation of the node.

        Returns:
            String representation
        """
        untried = len(self._untried_actions) if self._untried_actions is not None else 'unknown'
        return (f"MCTSNode(day={self.state.day}, "
                f"action={self.action}, "
                f"visits={self.visits}, "
                f"reward={self.total_reward:.2f}, "
                f"children={len(self.children)}, "
                f"untried={untried})")
