"""
Bot loop for playing against a host process.

Reads the board once from stdin, then for every turn reads the turn block,
searches, and writes exactly one action line to stdout. Diagnostics go to
stderr because stdout carries the protocol.

Example usage:
    # Default search budget
    forest-bot

    # Time-limited search with diagnostics
    forest-bot --time-limit 0.09 --verbose
"""
import argparse
import sys
from typing import Callable, List, Optional, TextIO

from forest_ai.core.actions import Action
from forest_ai.core.protocol import read_board, read_turn
from forest_ai.mcts.agent import MCTSAgent
from forest_ai.mcts.config import MCTSConfig


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Play the forest game over stdin/stdout")

    parser.add_argument("--iterations", type=int, default=1000,
                        help="Number of MCTS iterations per turn")
    parser.add_argument("--time-limit", type=float, default=None,
                        help="Time limit per turn in seconds")
    parser.add_argument("--exploration-weight", type=float, default=None,
                        help="UCB1 exploration constant")
    parser.add_argument("--simulation-policy", type=str, default=None,
                        choices=["random", "heuristic"],
                        help="Rollout policy")
    parser.add_argument("--opponent-policy", type=str, default=None,
                        choices=["symmetric", "inert"],
                        help="How the opponent is modelled during search")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducible searches")
    parser.add_argument("--verbose", action="store_true",
                        help="Print search statistics to stderr")

    return parser.parse_args(argv)


def create_agent(args: argparse.Namespace, output: TextIO) -> MCTSAgent:
    """Build the agent described by the command line."""
    config = MCTSConfig.from_dict(vars(args))
    return MCTSAgent(config=config, name="Forest Bot", verbose=args.verbose, output=output)


def run_bot(
    readline: Callable[[], str],
    write: Callable[[str], None],
    agent: MCTSAgent,
    max_turns: Optional[int] = None
) -> List[Action]:
    """
    Run the protocol loop until the input ends.

    Args:
        readline: Returns the next input line ('' at end of input)
        write: Receives each output line
        agent: Agent choosing the actions
        max_turns: Stop after this many turns (None = until end of input)

    Returns:
        Actions played, in order
    """
    board = read_board(readline)
    played: List[Action] = []

    while max_turns is None or len(played) < max_turns:
        try:
            state = read_turn(readline, board)
        except EOFError:
            break

        if agent.verbose:
            print(state, file=agent.output)
            print("Possible actions: " + ", ".join(str(a) for a in state.legal_actions()), file=agent.output)

        action = agent.select_action(state)
        write(str(action))
        played.append(action)

    return played


def main(argv: Optional[List[str]] = None) -> None:
    """Main function."""
    args = parse_args(argv)
    agent = create_agent(args, sys.stderr)

    def write(line: str) -> None:
        print(line, flush=True)

    run_bot(sys.stdin.readline, write, agent)


if __name__ == "__main__":
    main()
