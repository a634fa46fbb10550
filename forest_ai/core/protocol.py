"""
Host text protocol.

The host sends the board once, then one block per turn, and expects one
action line back. Functions here read from any callable returning the next
line, so they work the same on sys.stdin.readline and on lists of strings in
tests.
"""
from typing import Callable, Iterable, Iterator, List, Union

from forest_ai.core.constants import ME, OPPONENT, NUM_DIRECTIONS
from forest_ai.core.board import Board, Cell
from forest_ai.core.player import Player
from forest_ai.core.tree import Tree
from forest_ai.core.rules import Rules, DEFAULT_RULES
from forest_ai.core.actions import Action, parse_action
from forest_ai.core.game import GameState

LineSource = Union[Callable[[], str], Iterable[str]]


def _line_reader(source: LineSource) -> Callable[[], str]:
    if callable(source):
        return source
    iterator: Iterator[str] = iter(source)
    return lambda: next(iterator)


def _read_line(readline: Callable[[], str]) -> str:
    try:
        line = readline()
    except StopIteration:
        line = ""
    if not line:
        raise EOFError("Unexpected end of input")
    return line.strip()


def _read_ints(readline: Callable[[], str], count: int) -> List[int]:
    line = _read_line(readline)
    parts = line.split()
    if len(parts) < count:
        raise ValueError(f"Expected {count} integers, got {line!r}")
    try:
        return [int(part) for part in parts[:count]]
    except ValueError as e:
        raise ValueError(f"Expected {count} integers, got {line!r}") from e


def read_board(source: LineSource) -> Board:
    """
    Read the board block.

    Format: the number of cells, then one line per cell with
    ``index richness n0 n1 n2 n3 n4 n5``.

    Args:
        source: Line source (readline callable or iterable of lines)

    Returns:
        Board object
    """
    readline = _line_reader(source)
    (number_of_cells,) = _read_ints(readline, 1)

    cells = []
    for _ in range(number_of_cells):
        values = _read_ints(readline, 2 + NUM_DIRECTIONS)
        cells.append(Cell(index=values[0], richness=values[1], neighbors=tuple(values[2:])))

    return Board(cells)


def read_turn(source: LineSource, board: Board, rules: Rules = DEFAULT_RULES) -> GameState:
    """
    Read one turn block.

    Format::

        day
        nutrients
        sun score
        opp_sun opp_score opp_is_waiting
        number_of_trees
        cell_index size is_mine is_dormant   (one line per tree)
        number_of_possible_actions
        action                               (one line per action)

    Args:
        source: Line source (readline callable or iterable of lines)
        board: Board read at the start of the match
        rules: Rule parameters

    Returns:
        Game state holding the host's legal actions
    """
    readline = _line_reader(source)

    (day,) = _read_ints(readline, 1)
    (nutrients,) = _read_ints(readline, 1)
    sun, score = _read_ints(readline, 2)
    opp_sun, opp_score, opp_is_waiting = _read_ints(readline, 3)

    (number_of_trees,) = _read_ints(readline, 1)
    trees = {}
    for _ in range(number_of_trees):
        cell_index, size, is_mine, is_dormant = _read_ints(readline, 4)
        if cell_index in trees:
            raise ValueError(f"Two trees on cell {cell_index}")
        trees[cell_index] = Tree(
            cell_index=cell_index,
            size=size,
            owner=ME if is_mine == 1 else OPPONENT,
            is_dormant=is_dormant == 1,
        )

    (number_of_actions,) = _read_ints(readline, 1)
    possible_actions: List[Action] = [
        parse_action(_read_line(readline)) for _ in range(number_of_actions)
    ]

    players = [
        Player(id=ME, sun=sun, score=score),
        Player(id=OPPONENT, sun=opp_sun, score=opp_score, is_waiting=opp_is_waiting == 1),
    ]

    return GameState(
        board=board,
        day=day,
        nutrients=nutrients,
        players=players,
        trees=trees,
        possible_actions=possible_actions,
        rules=rules,
    )


def format_board(board: Board) -> List[str]:
    """Render a board block as host lines."""
    return [str(len(board))] + [str(cell) for cell in board.cells]


def format_turn(state: GameState) -> List[str]:
    """Render a turn block as host lines (inverse of read_turn)."""
    lines = [
        str(state.day),
        str(state.nutrients),
        f"{state.me.sun} {state.me.score}",
        f"{state.opponent.sun} {state.opponent.score} {int(state.opponent.is_waiting)}",
        str(len(state.trees)),
    ]
    for cell in sorted(state.trees):
        tree = state.trees[cell]
        lines.append(f"{tree.cell_index} {tree.size} {int(tree.is_mine)} {int(tree.is_dormant)}")

    actions = state.legal_actions()
    lines.append(str(len(actions)))
    lines.extend(str(action) for action in actions)
    return lines
