"""
Game state and flow management for the forest game.

This module defines the core game mechanics, including:
- GameState: Snapshot of a day (resources, forest, legal actions)
- Game: Manager that plays a full match between two agents
- Helper functions for setting up and simulating games

Every call to GameState.apply resolves one day: my action and the opponent's
simultaneous action are executed, then the day advances and the sun income of
the new day is collected.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple
import copy
import random

from forest_ai.core.constants import (
    ME, OPPONENT, PLAYER_IDS, MAP_RING_COUNT, STARTING_NUTRIENTS,
    STARTING_TREES_PER_PLAYER
)
from forest_ai.core.board import Board, create_standard_board
from forest_ai.core.player import Player
from forest_ai.core.tree import Tree
from forest_ai.core.rules import Rules, DEFAULT_RULES
from forest_ai.core.shadow import update_shadows, calculate_sun_income
from forest_ai.core.actions import (
    Action, Wait, Seed, InvalidActionError, get_all_valid_actions
)


@dataclass
class GameState:
    """
    Snapshot of the game at the start of a player decision.

    The board is shared between snapshots; players, trees and the legal-action
    list are owned by each snapshot.
    """
    board: Board
    day: int = 0
    nutrients: int = STARTING_NUTRIENTS
    players: List[Player] = field(default_factory=list)
    trees: Dict[int, Tree] = field(default_factory=dict)

    # Legal actions supplied by the host for this turn (None = generate them)
    possible_actions: Optional[List[Action]] = None

    rules: Rules = DEFAULT_RULES

    def __post_init__(self):
        """Fill in missing players and compute today's shadows."""
        if not self.players:
            self.players = [Player(id=player_id) for player_id in PLAYER_IDS]
        update_shadows(self)

    @property
    def me(self) -> Player:
        return self.players[ME]

    @property
    def opponent(self) -> Player:
        return self.players[OPPONENT]

    @property
    def game_over(self) -> bool:
        """Whether the last day has been played."""
        return self.day >= self.rules.max_day

    def get_player(self, player_id: int) -> Player:
        return self.players[player_id]

    def trees_of(self, player_id: int) -> List[Tree]:
        """Trees owned by a player, ordered by cell."""
        return [self.trees[cell] for cell in sorted(self.trees) if self.trees[cell].owner == player_id]

    def tree_count(self, player_id: int) -> int:
        return sum(1 for tree in self.trees.values() if tree.owner == player_id)

    def get_valid_actions(self, player_id: int) -> List[Action]:
        """
        Get all valid actions for a player.

        Args:
            player_id: ID of the player

        Returns:
            List of valid actions
        """
        return get_all_valid_actions(self, player_id)

    def legal_actions(self) -> List[Action]:
        """
        Actions available to me in this snapshot.

        The host's list is used when one was supplied, otherwise the list is
        generated from the rules.
        """
        if self.possible_actions is not None:
            return list(self.possible_actions)
        return self.get_valid_actions(ME)

    def apply(self, action: Action, opponent_action: Optional[Action] = None) -> 'GameState':
        """
        Resolve one day and return the resulting state.

        This state is left untouched.

        Args:
            action: My action
            opponent_action: The opponent's simultaneous action (None = the
                opponent does nothing)

        Returns:
            New game state
        """
        new_state = self.clone()
        new_state.step(action, opponent_action)
        return new_state

    def step(self, action: Action, opponent_action: Optional[Action] = None) -> None:
        """
        Resolve one day in place.

        Only call this on a state nobody else holds (see apply).

        Raises:
            InvalidActionError: If the game is over or an action cannot be executed
        """
        if self.game_over:
            raise InvalidActionError("The game is over")

        moves = {ME: action, OPPONENT: opponent_action}

        if isinstance(action, Seed) and isinstance(opponent_action, Seed) \
                and action.target == opponent_action.target:
            self._cancel_seeds(action, opponent_action)
        else:
            for player_id in PLAYER_IDS:
                move = moves[player_id]
                if move is None:
                    continue
                if self.players[player_id].is_waiting and not isinstance(move, Wait):
                    raise InvalidActionError(f"Player {player_id} is waiting and cannot play {move}")
                move.execute(self, player_id)

        self._end_day()

    def _cancel_seeds(self, action: Seed, opponent_action: Seed) -> None:
        # Both players seeded the same cell: nothing is planted or paid,
        # but the source trees have still acted today.
        for player_id, seed in ((ME, action), (OPPONENT, opponent_action)):
            source = self.trees.get(seed.source)
            if source is None or source.owner != player_id:
                raise InvalidActionError(f"Player {player_id} has no tree on cell {seed.source}")
            source.is_dormant = True

    def _end_day(self) -> None:
        self.day += 1
        self.possible_actions = None

        if self.game_over:
            return

        for tree in self.trees.values():
            tree.is_dormant = False
        for player in self.players:
            player.is_waiting = False

        update_shadows(self)
        my_income, opponent_income = calculate_sun_income(self)
        self.me.sun += my_income
        self.opponent.sun += opponent_income

    def clone(self) -> 'GameState':
        """
        Create a copy of the game state.

        The board and rules are shared; everything mutable is copied.

        Returns:
            Copy of the game state
        """
        new_state = copy.copy(self)
        new_state.players = [player.copy() for player in self.players]
        new_state.trees = {cell: tree.copy() for cell, tree in self.trees.items()}
        if self.possible_actions is not None:
            new_state.possible_actions = list(self.possible_actions)
        return new_state

    def mirrored(self) -> 'GameState':
        """
        Copy of the state seen from the opponent's seat.

        Players are swapped and every tree changes owner. The host action list
        belongs to the other seat, so it is dropped.
        """
        new_state = self.clone()
        new_state.players = [self.players[OPPONENT].copy(), self.players[ME].copy()]
        new_state.players[ME].id = ME
        new_state.players[OPPONENT].id = OPPONENT
        for tree in new_state.trees.values():
            tree.owner = OPPONENT if tree.owner == ME else ME
        new_state.possible_actions = None
        return new_state

    def __str__(self) -> str:
        result = f"Day {self.day}, nutrients {self.nutrients}\n"
        for player in self.players:
            result += f"  {player}\n"
        for cell in sorted(self.trees):
            result += f"  {self.trees[cell]}\n"
        return result


def _outer_ring(ring_count: int) -> Tuple[int, int]:
    """First index and size of the outermost ring of a standard board."""
    start = 1 + 3 * (ring_count - 1) * ring_count
    return start, 6 * ring_count


def create_initial_state(
    board: Optional[Board] = None,
    rng: Optional[random.Random] = None,
    rules: Rules = DEFAULT_RULES,
    ring_count: int = MAP_RING_COUNT,
    trees_per_player: int = STARTING_TREES_PER_PLAYER,
) -> GameState:
    """
    Create the day-0 state of a match on a standard board.

    Each player starts with small trees on the outer ring, placed point
    symmetrically so that neither side has an advantage.

    Args:
        board: Standard board (created if None)
        rng: Random generator for tree placement
        rules: Rule parameters
        ring_count: Number of rings of the board
        trees_per_player: Starting trees per player

    Returns:
        Initial game state with day-0 income already collected
    """
    board = board or create_standard_board(ring_count)
    rng = rng or random.Random()

    start, size = _outer_ring(ring_count)
    half = size // 2
    if trees_per_player > half:
        raise ValueError(f"Cannot place {trees_per_player} trees per player on a ring of {size} cells")

    trees = {}
    for offset in rng.sample(range(half), trees_per_player):
        mine = start + offset
        theirs = start + (offset + half) % size
        trees[mine] = Tree(cell_index=mine, size=1, owner=ME)
        trees[theirs] = Tree(cell_index=theirs, size=1, owner=OPPONENT)

    state = GameState(board=board, trees=trees, rules=rules)
    my_income, opponent_income = calculate_sun_income(state)
    state.me.sun += my_income
    state.opponent.sun += opponent_income
    return state


AgentCallback = Callable[[GameState, int], Action]


class Game:
    """
    Manager for a full match between two agents.

    Agent callbacks take the current state and a seat and return an action.
    Both agents are asked for their action on the same state, then the day is
    resolved.
    """

    def __init__(
        self,
        board: Optional[Board] = None,
        rules: Rules = DEFAULT_RULES,
        random_seed: Optional[int] = None
    ):
        """
        Initialize a new match.

        Args:
            board: Board to play on (standard board if None)
            rules: Rule parameters
            random_seed: Random seed for the starting position
        """
        self.board = board or create_standard_board()
        self.rules = rules
        self.rng = random.Random(random_seed)
        self.state = create_initial_state(self.board, self.rng, rules)
        self.agent_callbacks: Dict[int, AgentCallback] = {}
        self.history: List[Tuple[int, Action, Action]] = []

    def reset(self) -> GameState:
        """Reset the match to a new initial state."""
        self.state = create_initial_state(self.board, self.rng, self.rules)
        self.history = []
        return self.state

    def register_agent(self, player_id: int, agent_callback: AgentCallback) -> None:
        """
        Register an agent for a seat.

        Args:
            player_id: Seat of the agent
            agent_callback: Function that selects an action given the state and seat
        """
        self.agent_callbacks[player_id] = agent_callback

    def step(self) -> Tuple[GameState, bool]:
        """
        Play one day.

        Returns:
            Tuple of (new game state, whether the game is over)
        """
        if self.state.game_over:
            return self.state, True

        for player_id in PLAYER_IDS:
            if player_id not in self.agent_callbacks:
                raise ValueError(f"No agent callback registered for player {player_id}")

        moves = {}
        for player_id in PLAYER_IDS:
            action = self.agent_callbacks[player_id](self.state, player_id)
            if not action.validate(self.state, player_id):
                raise ValueError(f"Invalid action for player {player_id}: {action}")
            moves[player_id] = action

        self.history.append((self.state.day, moves[ME], moves[OPPONENT]))
        self.state = self.state.apply(moves[ME], moves[OPPONENT])
        return self.state, self.state.game_over

    def run_game(self) -> GameState:
        """
        Play until the last day.

        Returns:
            Final game state
        """
        while not self.state.game_over:
            self.step()
        return self.state

    def get_scores(self) -> List[int]:
        return [player.score for player in self.state.players]

    def get_winner(self) -> Optional[int]:
        """
        Seat of the winner, or None if the game is running or drawn.

        Ties on score are broken by the number of standing trees.
        """
        if not self.state.game_over:
            return None

        me, opponent = self.state.me, self.state.opponent
        if me.score != opponent.score:
            return ME if me.score > opponent.score else OPPONENT

        my_trees, opponent_trees = self.state.tree_count(ME), self.state.tree_count(OPPONENT)
        if my_trees != opponent_trees:
            return ME if my_trees > opponent_trees else OPPONENT
        return None


def random_agent_callback(rng: random.Random) -> AgentCallback:
    """Callback that plays uniformly random valid actions."""
    return lambda state, player_id: rng.choice(state.get_valid_actions(player_id))


def simulate_random_game(random_seed: Optional[int] = None) -> Tuple[GameState, List[int]]:
    """
    Simulate a match between two random agents.

    Args:
        random_seed: Random seed for reproducibility

    Returns:
        Tuple of (final game state, scores)
    """
    game = Game(random_seed=random_seed)
    for player_id in PLAYER_IDS:
        game.register_agent(player_id, random_agent_callback(game.rng))

    final_state = game.run_game()
    return final_state, game.get_scores()
