"""
Monte Carlo Tree Search (MCTS) algorithm for the forest game.

This module implements the core MCTS algorithm with the four standard phases:
1. Selection: Traverse the tree to find a promising node
2. Expansion: Create a new child node
3. Simulation: Run a playout to estimate the node's value
4. Backpropagation: Update statistics up the tree

The search runs for a fixed number of iterations, optionally cut short by a
time limit that is only checked between iterations.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Tuple, Any
import time
import random
from collections import defaultdict

from forest_ai.core.game import GameState
from forest_ai.core.actions import Action, Wait
from forest_ai.mcts.node import MCTSNode
from forest_ai.mcts.config import MCTSConfig


def mcts_search(
    state: GameState,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None
) -> Tuple[Action, Dict[str, Any], MCTSNode]:
    """
    Run Monte Carlo Tree Search to find the best action for me.

    This function runs the full MCTS algorithm:
    1. Create a root node from the current state
    2. Repeatedly run selection, expansion, simulation, and backpropagation
    3. Return the best action based on visit counts

    Args:
        state: Current game state (its legal actions are the candidates)
        config: MCTS configuration parameters
        rng: Random generator (seeded from config.seed if None)

    Returns:
        Tuple of (best action, search statistics, root node)
    """
    if config is None:
        config = MCTSConfig()
    if rng is None:
        rng = random.Random(config.seed)

    root = MCTSNode(state=state, config=config, rng=rng)

    stats: Dict[str, Any] = {
        "iterations": 0,
        "max_depth": 0,
        "max_tree_depth": 0,
        "total_simulation_steps": 0,
        "time_elapsed": 0,
        "node_count": 1,  # Start with the root
        "stopped_early": False,
        "used_fallback": False,
        "action_visits": defaultdict(int),
        "action_rewards": defaultdict(float),
    }

    start_time = time.time()

    for _ in range(config.iterations):
        # Deadline is only checked between iterations, never mid-transition
        if config.time_limit is not None and time.time() - start_time > config.time_limit:
            stats["stopped_early"] = True
            break

        # 1. Selection & Expansion: Find a node to simulate from
        selected_node = select_node(root)

        # 2. Simulation: Run a playout from the selected node
        simulation_result, simulation_steps = simulate_game(selected_node)

        # 3. Backpropagation: Update statistics up the tree
        backpropagate(selected_node, simulation_result)

        stats["iterations"] += 1
        stats["total_simulation_steps"] += simulation_steps
        stats["max_depth"] = max(stats["max_depth"], simulation_steps)
        stats["max_tree_depth"] = max(stats["max_tree_depth"], selected_node.depth())

    best_action = root.best_action()

    for child in root.children:
        action_str = str(child.action)
        stats["action_visits"][action_str] = child.visits
        if child.visits > 0:
            stats["action_rewards"][action_str] = child.mean_reward

    stats["node_count"] = count_nodes(root)
    stats["time_elapsed"] = time.time() - start_time
    stats["iterations_per_second"] = stats["iterations"] / max(0.001, stats["time_elapsed"])
    stats["average_simulation_steps"] = stats["total_simulation_steps"] / max(1, stats["iterations"])

    if best_action is None:
        best_action = fallback_action(state.legal_actions())
        stats["used_fallback"] = True

    return best_action, stats, root


def fallback_action(candidates: List[Action]) -> Action:
    """
    Action to play when the search produced no children.

    Waiting is preferred when it is a candidate, then the first candidate.
    An empty candidate list yields Wait.
    """
    wait = Wait()
    if not candidates or wait in candidates:
        return wait
    return candidates[0]


def select_node(root: MCTSNode) -> MCTSNode:
    """
    Select a node for simulation.

    This function implements the selection and expansion phases of MCTS.
    It traverses the tree using the UCB1 formula until it finds a node
    that hasn't been fully expanded, then expands it.

    Args:
        root: Root node of the MCTS tree

    Returns:
        Node selected for simulation
    """
    return root.tree_policy()


def simulate_game(node: MCTSNode) -> Tuple[float, int]:
    """
    Run a simulation from a node to estimate its value.

    Args:
        node: Node to simulate from

    Returns:
        Tuple of (simulation result, number of steps)
    """
    return node.simulate()


def backpropagate(node: MCTSNode, result: float) -> None:
    """
    Update statistics up the tree.

    This function implements the backpropagation phase of MCTS.
    It updates the visit count and reward for each node in the path
    from the simulated node to the root.

    Args:
        node: Node to start backpropagation from
        result: Simulation result
    """
    current = node
    while current is not None:
        current.update(result)
        current = current.parent


def count_nodes(node: MCTSNode) -> int:
    """
    Count the total number of nodes in the tree.

    Args:
        node: Root node of the tree

    Returns:
        Total number of nodes
    """
    count = 0
    stack = [node]
    while stack:
        current = stack.pop()
        count += 1
        stack.extend(current.children)
    return count


def get_principal_variation(root: MCTSNode, max_depth: int = 10) -> List[Tuple[Action, float]]:
    """
    Get the principal variation (most visited path) from the root.

    This is useful for analysis and debugging.

    Args:
        root: Root node of the MCTS tree
        max_depth: Maximum depth to explore

    Returns:
        List of (action, value) pairs representing the principal variation
    """
    result = []
    current = root
    depth = 0

    while current.children and depth < max_depth:
        best_child = current.best_child()
        result.append((best_child.action, best_child.mean_reward))
        current = best_child
        depth += 1

    return result


def get_action_statistics(root: MCTSNode) -> Dict[str, Dict[str, float]]:
    """
    Get statistics for all actions from the root.

    Args:
        root: Root node of the MCTS tree

    Returns:
        Dictionary mapping action strings to statistics
    """
    result = {}

    for child in root.children:
        result[str(child.action)] = {
            "visits": child.visits,
            "reward": child.total_reward,
            "value": child.mean_reward,
            "exploration": root.ucb_score(child),
        }

    return result
