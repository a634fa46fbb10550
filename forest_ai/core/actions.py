"""
Actions for the forest game.

This module defines the four possible actions:
- Waiting until the next day
- Growing a tree by one size
- Planting a seed from one of the player's trees
- Completing (harvesting) a mature tree

Actions are immutable values compared by their fields. Each action knows how
to validate itself against a game state, how to execute itself on a private
copy of a state, and how to render itself in the host's text format.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, List

from forest_ai.core.constants import MAX_TREE_SIZE, SEED_SIZE
from forest_ai.core.tree import Tree


class InvalidActionError(ValueError):
    """Raised when an action cannot be executed on a game state."""


class ActionType(Enum):
    """Enum representing the different types of actions."""
    WAIT = auto()
    GROW = auto()
    SEED = auto()
    COMPLETE = auto()


class Action(ABC):
    """
    Abstract base class for all forest actions.

    All specific action types inherit from this class and implement
    the required abstract methods.
    """
    action_type: ClassVar[ActionType]

    @abstractmethod
    def validate(self, game_state, player_id: int) -> bool:
        """
        Validate if the action is legal in the current game state.

        Args:
            game_state: Current state of the game
            player_id: ID of the player performing the action

        Returns:
            True if the action is valid, False otherwise
        """

    @abstractmethod
    def execute(self, game_state, player_id: int) -> None:
        """
        Execute the action, modifying the game state.

        Args:
            game_state: State to modify (must be a private copy)
            player_id: ID of the player performing the action

        Raises:
            InvalidActionError: If the action refers to a missing or foreign tree
        """

    @abstractmethod
    def __str__(self) -> str:
        """Return the host text form of the action."""


@dataclass(frozen=True)
class Wait(Action):
    """Go to sleep until the next day."""
    action_type: ClassVar[ActionType] = ActionType.WAIT

    def validate(self, game_state, player_id: int) -> bool:
        return True

    def execute(self, game_state, player_id: int) -> None:
        game_state.players[player_id].is_waiting = True

    def __str__(self) -> str:
        return "WAIT"


def _own_active_tree(game_state, player_id: int, cell_index: int) -> Tree:
    tree = game_state.trees.get(cell_index)
    if tree is None:
        raise InvalidActionError(f"No tree on cell {cell_index}")
    if tree.owner != player_id:
        raise InvalidActionError(f"Tree on cell {cell_index} does not belong to player {player_id}")
    if tree.is_dormant:
        raise InvalidActionError(f"Tree on cell {cell_index} is dormant")
    return tree


@dataclass(frozen=True)
class Grow(Action):
    """Grow a tree by one size."""
    action_type: ClassVar[ActionType] = ActionType.GROW
    target: int

    def cost(self, game_state) -> int:
        tree = game_state.trees[self.target]
        return game_state.rules.grow_cost(tree.size + 1)

    def validate(self, game_state, player_id: int) -> bool:
        tree = game_state.trees.get(self.target)
        if tree is None or tree.owner != player_id or tree.is_dormant:
            return False
        if tree.size >= MAX_TREE_SIZE:
            return False
        return game_state.players[player_id].can_afford(self.cost(game_state))

    def execute(self, game_state, player_id: int) -> None:
        tree = _own_active_tree(game_state, player_id, self.target)
        if tree.size >= MAX_TREE_SIZE:
            raise InvalidActionError(f"Tree on cell {self.target} is already fully grown")
        game_state.players[player_id].spend(self.cost(game_state))
        tree.size += 1
        tree.is_dormant = True

    def __str__(self) -> str:
        return f"GROW {self.target}"


@dataclass(frozen=True)
class Seed(Action):
    """Plant a seed on an empty cell within reach of one of the player's trees."""
    action_type: ClassVar[ActionType] = ActionType.SEED
    source: int
    target: int

    def cost(self, game_state, player_id: int) -> int:
        seeds_owned = sum(
            1 for tree in game_state.trees.values()
            if tree.owner == player_id and tree.size == SEED_SIZE
        )
        return game_state.rules.seed_cost_for(seeds_owned)

    def validate(self, game_state, player_id: int) -> bool:
        source = game_state.trees.get(self.source)
        if source is None or source.owner != player_id or source.is_dormant:
            return False
        if source.size == SEED_SIZE:
            return False

        board = game_state.board
        if self.target not in board or not board.cell(self.target).is_usable:
            return False
        if self.target in game_state.trees:
            return False

        distance = board.distance(self.source, self.target)
        if distance is None or distance > source.size:
            return False

        return game_state.players[player_id].can_afford(self.cost(game_state, player_id))

    def execute(self, game_state, player_id: int) -> None:
        source = _own_active_tree(game_state, player_id, self.source)
        if self.target not in game_state.board:
            raise InvalidActionError(f"Cell {self.target} is not on the board")
        if self.target in game_state.trees:
            raise InvalidActionError(f"Cell {self.target} is already occupied")

        game_state.players[player_id].spend(self.cost(game_state, player_id))
        source.is_dormant = True
        game_state.trees[self.target] = Tree(
            cell_index=self.target,
            size=SEED_SIZE,
            owner=player_id,
            is_dormant=True,
        )

    def __str__(self) -> str:
        return f"SEED {self.source} {self.target}"


@dataclass(frozen=True)
class Complete(Action):
    """Harvest a mature tree for score."""
    action_type: ClassVar[ActionType] = ActionType.COMPLETE
    target: int

    def validate(self, game_state, player_id: int) -> bool:
        tree = game_state.trees.get(self.target)
        if tree is None or tree.owner != player_id or tree.is_dormant:
            return False
        if tree.size != MAX_TREE_SIZE:
            return False
        return game_state.players[player_id].can_afford(game_state.rules.complete_cost)

    def execute(self, game_state, player_id: int) -> None:
        tree = _own_active_tree(game_state, player_id, self.target)
        if tree.size != MAX_TREE_SIZE:
            raise InvalidActionError(f"Tree on cell {self.target} is not mature")

        player = game_state.players[player_id]
        player.spend(game_state.rules.complete_cost)

        richness = game_state.board.cell(self.target).richness
        player.score += game_state.rules.completion_score(game_state.nutrients, richness)
        game_state.nutrients = max(0, game_state.nutrients - 1)
        del game_state.trees[self.target]

    def __str__(self) -> str:
        return f"COMPLETE {self.target}"


def parse_action(text: str) -> Action:
    """
    Parse an action from its host text form.

    ``WAIT`` may be followed by a free-form message, which is ignored.

    Args:
        text: One of ``WAIT``, ``GROW <cell>``, ``SEED <source> <target>``,
            ``COMPLETE <cell>``

    Returns:
        Action object

    Raises:
        ValueError: If the text is not a valid action
    """
    parts = text.split()
    if not parts:
        raise ValueError("Empty action line")

    keyword = parts[0].upper()
    try:
        if keyword == "WAIT":
            return Wait()
        if keyword == "GROW" and len(parts) == 2:
            return Grow(target=int(parts[1]))
        if keyword == "COMPLETE" and len(parts) == 2:
            return Complete(target=int(parts[1]))
        if keyword == "SEED" and len(parts) == 3:
            return Seed(source=int(parts[1]), target=int(parts[2]))
    except ValueError as e:
        raise ValueError(f"Invalid action: {text!r}") from e

    raise ValueError(f"Invalid action: {text!r}")


def format_action(action: Action) -> str:
    """Render an action in the host text form."""
    return str(action)


def get_all_valid_actions(game_state, player_id: int) -> List[Action]:
    """
    Get all valid actions for a player.

    Waiting is always valid. A waiting player can do nothing else until the
    next day. Actions are listed in a deterministic order: wait first, then
    per tree (by cell) grow, complete and seeds by target cell.

    Args:
        game_state: Current state of the game
        player_id: ID of the player

    Returns:
        List of valid actions
    """
    actions: List[Action] = [Wait()]
    player = game_state.players[player_id]
    if player.is_waiting:
        return actions

    board = game_state.board
    seeds_owned = sum(
        1 for tree in game_state.trees.values()
        if tree.owner == player_id and tree.size == SEED_SIZE
    )
    can_seed = player.can_afford(game_state.rules.seed_cost_for(seeds_owned))

    for cell_index in sorted(game_state.trees):
        tree = game_state.trees[cell_index]
        if tree.owner != player_id or tree.is_dormant:
            continue

        if tree.size < MAX_TREE_SIZE:
            grow = Grow(target=cell_index)
            if grow.validate(game_state, player_id):
                actions.append(grow)
        else:
            complete = Complete(target=cell_index)
            if complete.validate(game_state, player_id):
                actions.append(complete)

        if can_seed and tree.size > SEED_SIZE:
            for target in board.cells_within(cell_index, tree.size):
                if board.cell(target).is_usable and target not in game_state.trees:
                    actions.append(Seed(source=cell_index, target=target))

    return actions
