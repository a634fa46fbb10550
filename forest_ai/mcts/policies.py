"""
Action policies and state evaluation used by the search.

The simulation policy picks actions during rollouts (for both players when the
opponent is modelled symmetrically). The expansion order decides which untried
action a node expands next. evaluate_state scores a position from my point of
view.
"""
from typing import List, Optional
import random

from forest_ai.core.constants import ME, OPPONENT, CLEAR_LEAD
from forest_ai.core.actions import Action, ActionType
from forest_ai.core.game import GameState
from forest_ai.mcts.config import MCTSConfig


# Expansion priority by action type (higher is expanded first)
EXPANSION_PRIORITY = {
    ActionType.WAIT: 0,
    ActionType.SEED: 1,
    ActionType.GROW: 2,
    ActionType.COMPLETE: 3,
}

# Days before the end when the heuristic policy starts harvesting
HARVEST_WINDOW = 8

# Days before the end after which new seeds can no longer pay off
SEEDING_CUTOFF = 6


def order_for_expansion(actions: List[Action], use_heuristics: bool, rng: random.Random) -> List[Action]:
    """
    Order untried actions so that the next one to expand is at the end.

    Actions are shuffled; with heuristics enabled they are then stably sorted
    by EXPANSION_PRIORITY, so ties stay in random order.

    Args:
        actions: Untried actions
        use_heuristics: Whether to put promising action types last
        rng: Random generator

    Returns:
        New list of actions
    """
    ordered = list(actions)
    rng.shuffle(ordered)
    if use_heuristics:
        ordered.sort(key=lambda action: EXPANSION_PRIORITY[action.action_type])
    return ordered


def heuristic_action(state: GameState, actions: List[Action], rng: random.Random) -> Action:
    """
    Pick an action with simple domain knowledge.

    Prioritize:
    1. Completing mature trees near the end of the game
    2. Growing trees while there is time left for them to pay off
    3. Occasionally planting a seed early in the game
    4. Random action as fallback
    """
    days_left = state.rules.max_day - state.day

    by_type = {action_type: [] for action_type in ActionType}
    for action in actions:
        by_type[action.action_type].append(action)

    if by_type[ActionType.COMPLETE] and days_left <= HARVEST_WINDOW:
        return rng.choice(by_type[ActionType.COMPLETE])

    if by_type[ActionType.GROW] and days_left > 1 and rng.random() < 0.7:
        # Largest trees first: they are closest to being harvestable
        largest = max(state.trees[action.target].size for action in by_type[ActionType.GROW])
        candidates = [
            action for action in by_type[ActionType.GROW]
            if state.trees[action.target].size == largest
        ]
        return rng.choice(candidates)

    if by_type[ActionType.SEED] and days_left > SEEDING_CUTOFF and rng.random() < 0.3:
        return rng.choice(by_type[ActionType.SEED])

    return rng.choice(actions)


def choose_action(state: GameState, player_id: int, policy: str, rng: random.Random) -> Action:
    """
    Select an action for the simulation phase.

    Args:
        state: Current game state
        player_id: Seat of the acting player
        policy: 'random' or 'heuristic'
        rng: Random generator

    Returns:
        Selected action
    """
    valid_actions = state.get_valid_actions(player_id)

    if policy == "heuristic":
        return heuristic_action(state, valid_actions, rng)

    return rng.choice(valid_actions)


def opponent_action(state: GameState, config: MCTSConfig, rng: random.Random) -> Optional[Action]:
    """
    The opponent's simultaneous action for the day.

    A waiting or inert opponent does not act.
    """
    if config.opponent_policy == "inert" or state.opponent.is_waiting:
        return None
    return choose_action(state, OPPONENT, config.simulation_policy, rng)


def evaluate_state(state: GameState) -> float:
    """
    Evaluate a state from my point of view.

    Unconverted sun counts for a third of a point. A lead of more than
    CLEAR_LEAD points is worth about 1.0 with a small slope so that bigger
    leads still rank higher; smaller leads map linearly into (0.5, 1.0].
    Deficits mirror this. Exact ties are broken by standing tree count and
    then by raw value.

    Args:
        state: Game state to evaluate

    Returns:
        Value roughly in [-1, 1]
    """
    my_value = state.me.total_value
    opponent_value = state.opponent.total_value

    if my_value > opponent_value:
        diff = my_value - opponent_value
        if diff > CLEAR_LEAD:
            return 1.0 + (diff - CLEAR_LEAD) * 0.001
        return 0.5 + (0.5 * diff) / CLEAR_LEAD

    if my_value < opponent_value:
        diff = opponent_value - my_value
        if diff > CLEAR_LEAD:
            return -1.0 - (diff - CLEAR_LEAD) * 0.001
        return -0.5 - (0.5 * diff) / CLEAR_LEAD

    my_trees = state.tree_count(ME)
    opponent_trees = state.tree_count(OPPONENT)
    if my_trees > opponent_trees:
        return 0.25 + my_value * 0.001
    if my_trees < opponent_trees:
        return -0.25 + my_value * 0.001
    return my_value * 0.001
