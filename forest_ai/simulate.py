"""
Command line entry point for local agent comparisons.

Example usage:
    # MCTS against a random opponent
    forest-simulate --games 20 --opponent random

    # Two MCTS settings against each other
    forest-simulate --games 10 --iterations 500 --opponent mcts --opponent-iterations 100
"""
import argparse
from typing import List, Optional

from forest_ai.arena import evaluate_agents
from forest_ai.mcts.agent import MCTSAgent, RandomAgent
from forest_ai.mcts.config import MCTSConfig


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Play local games between forest agents")

    parser.add_argument("--games", type=int, default=10,
                        help="Number of games to play")
    parser.add_argument("--iterations", type=int, default=200,
                        help="MCTS iterations per turn for the evaluated agent")
    parser.add_argument("--simulation-policy", type=str, default="random",
                        choices=["random", "heuristic"],
                        help="Rollout policy of the evaluated agent")
    parser.add_argument("--opponent", type=str, default="random",
                        choices=["random", "mcts"],
                        help="Type of opponent")
    parser.add_argument("--opponent-iterations", type=int, default=100,
                        help="MCTS iterations per turn for an MCTS opponent")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed")
    parser.add_argument("--no-swap", action="store_true",
                        help="Always play the evaluated agent in seat 0")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main function."""
    args = parse_args(argv)

    agent = MCTSAgent(
        config=MCTSConfig(
            iterations=args.iterations,
            simulation_policy=args.simulation_policy,
            seed=args.seed
        ),
        name=f"MCTS ({args.iterations})"
    )

    if args.opponent == "mcts":
        opponent_seed = None if args.seed is None else args.seed + 1
        opponent = MCTSAgent(
            config=MCTSConfig(iterations=args.opponent_iterations, seed=opponent_seed),
            name=f"MCTS ({args.opponent_iterations})"
        )
    else:
        opponent = RandomAgent(seed=args.seed)

    print(f"{agent} vs {opponent}, {args.games} games")
    stats = evaluate_agents(
        agent, opponent,
        num_games=args.games,
        random_seed=args.seed,
        swap_seats=not args.no_swap
    )

    print(f"Wins: {stats['wins']}  Losses: {stats['losses']}  Draws: {stats['draws']}")
    print(f"Win rate: {stats['win_rate']:.1%}")
    print(f"Mean score: {stats['mean_score']:.1f}")
    print(f"Score margin: {stats['mean_margin']:+.1f} ± {stats['std_margin']:.1f}")


if __name__ == "__main__":
    main()
