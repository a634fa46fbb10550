"""
Player representation for the forest game.

This module defines the Player class which tracks a player's resources
(sun and score) and whether the player is asleep until the next day.
"""
from dataclasses import dataclass

from forest_ai.core.constants import SUN_PER_POINT


@dataclass
class Player:
    """
    Represents one of the two players.

    Trees are not stored here: the forest belongs to the game state and each
    tree records its owner.
    """
    id: int  # Player seat (0 = me, 1 = opponent)
    sun: int = 0  # Spendable sun points
    score: int = 0  # Score points
    is_waiting: bool = False  # Asleep until the next day

    def can_afford(self, cost: int) -> bool:
        """Whether the player has at least ``cost`` sun."""
        return self.sun >= cost

    def spend(self, cost: int) -> None:
        """
        Spend sun.

        Raises:
            ValueError: If the player cannot afford the cost
        """
        if cost > self.sun:
            raise ValueError(f"Player {self.id} cannot afford {cost} sun (has {self.sun})")
        self.sun -= cost

    @property
    def total_value(self) -> float:
        """Score plus the fractional value of unconverted sun."""
        return self.score + self.sun / SUN_PER_POINT

    def copy(self) -> 'Player':
        return Player(id=self.id, sun=self.sun, score=self.score, is_waiting=self.is_waiting)

    def __str__(self) -> str:
        status = " (waiting)" if self.is_waiting else ""
        return f"Player {self.id}: {self.sun} sun, {self.score} points{status}"
