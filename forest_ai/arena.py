"""
Local matches between agents.

Plays full games with the Game manager and summarises the results. This is
used to compare search settings offline, without a host process.
"""
from typing import Any, Dict, List, Optional

import numpy as np
from tqdm import tqdm

from forest_ai.core.constants import ME, OPPONENT
from forest_ai.core.game import Game


def play_match(agent, opponent, random_seed: Optional[int] = None, agent_seat: int = ME) -> Dict[str, Any]:
    """
    Play one full game.

    Args:
        agent: Agent under evaluation (anything with register_with_game)
        opponent: Opposing agent
        random_seed: Seed for the starting position
        agent_seat: Seat played by ``agent``

    Returns:
        Dictionary with the agent's score, the opponent's score, the margin
        and the result ('win', 'loss' or 'draw') from the agent's point of view
    """
    opponent_seat = OPPONENT if agent_seat == ME else ME

    game = Game(random_seed=random_seed)
    agent.register_with_game(game, agent_seat)
    opponent.register_with_game(game, opponent_seat)
    game.run_game()

    scores = game.get_scores()
    winner = game.get_winner()
    if winner is None:
        result = "draw"
    elif winner == agent_seat:
        result = "win"
    else:
        result = "loss"

    return {
        "agent_score": scores[agent_seat],
        "opponent_score": scores[opponent_seat],
        "margin": scores[agent_seat] - scores[opponent_seat],
        "result": result,
        "days": game.state.day,
    }


def evaluate_agents(
    agent,
    opponent,
    num_games: int = 10,
    random_seed: Optional[int] = None,
    swap_seats: bool = True,
    show_progress: bool = True
) -> Dict[str, Any]:
    """
    Play a series of games and summarise them.

    Args:
        agent: Agent under evaluation
        opponent: Opposing agent
        num_games: Number of games to play
        random_seed: Base seed; game i uses random_seed + i
        swap_seats: Alternate seats between games
        show_progress: Display a progress bar

    Returns:
        Dictionary of statistics (win rate, mean and standard deviation of the
        score margin, per-game results)
    """
    if num_games <= 0:
        raise ValueError("num_games must be positive")

    results: List[Dict[str, Any]] = []

    pbar = tqdm(total=num_games, desc="Evaluating", disable=not show_progress)
    for i in range(num_games):
        seat = OPPONENT if swap_seats and i % 2 == 1 else ME
        seed = None if random_seed is None else random_seed + i
        results.append(play_match(agent, opponent, random_seed=seed, agent_seat=seat))
        pbar.update(1)
        pbar.set_postfix(wins=sum(1 for r in results if r["result"] == "win"))
    pbar.close()

    margins = np.array([r["margin"] for r in results], dtype=float)
    scores = np.array([r["agent_score"] for r in results], dtype=float)

    wins = sum(1 for r in results if r["result"] == "win")
    losses = sum(1 for r in results if r["result"] == "loss")
    draws = num_games - wins - losses

    return {
        "num_games": num_games,
        "wins": wins,
        "losses": losses,
        "draws": draws,
        "win_rate": wins / num_games,
        "mean_score": float(np.mean(scores)),
        "mean_margin": float(np.mean(margins)),
        "std_margin": float(np.std(margins)),
        "results": results,
    }
