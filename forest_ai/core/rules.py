"""
Rule parameters for the forest game.

The costs and game length used by the state transition are collected in a
single frozen dataclass so that variants (for example seed costs that grow
with the number of seeds a player already has) can be simulated without
touching the transition code.
"""
from dataclasses import dataclass, field
from typing import Dict

from forest_ai.core.constants import (
    GROW_COSTS, SEED_COST, COMPLETE_COST, RICHNESS_BONUS, MAX_DAY,
    MAX_TREE_SIZE
)


@dataclass(frozen=True)
class Rules:
    """
    Rule parameters used when applying actions.

    The default values reproduce the standard cost schedule.
    """
    grow_costs: Dict[int, int] = field(default_factory=lambda: dict(GROW_COSTS))
    """Sun cost of growing a tree, keyed by destination size"""

    seed_cost: int = SEED_COST
    """Base sun cost of planting a seed"""

    seed_cost_per_seed: int = 0
    """Extra sun per seed the player already has on the board"""

    complete_cost: int = COMPLETE_COST
    """Sun cost of completing a mature tree"""

    richness_bonus: Dict[int, int] = field(default_factory=lambda: dict(RICHNESS_BONUS))
    """Score bonus for completing a tree, keyed by cell richness"""

    max_day: int = MAX_DAY
    """First day number at which the game is over"""

    def __post_init__(self):
        """Validate rule parameters."""
        if sorted(self.grow_costs) != list(range(1, MAX_TREE_SIZE + 1)):
            raise ValueError(f"grow_costs must define sizes 1..{MAX_TREE_SIZE}")

        if any(cost < 0 for cost in self.grow_costs.values()):
            raise ValueError("grow costs must be non-negative")

        if self.seed_cost < 0 or self.seed_cost_per_seed < 0:
            raise ValueError("seed costs must be non-negative")

        if self.complete_cost < 0:
            raise ValueError("complete_cost must be non-negative")

        if self.max_day <= 0:
            raise ValueError("max_day must be positive")

    def grow_cost(self, target_size: int) -> int:
        """Sun needed to grow a tree to ``target_size``."""
        return self.grow_costs[target_size]

    def seed_cost_for(self, seeds_owned: int) -> int:
        """
        Sun needed to plant a seed.

        Args:
            seeds_owned: Number of size-0 trees the player already has

        Returns:
            Seed cost
        """
        return self.seed_cost + self.seed_cost_per_seed * seeds_owned

    def completion_score(self, nutrients: int, richness: int) -> int:
        """Score earned by completing a tree on a cell of ``richness``."""
        return nutrients + self.richness_bonus.get(richness, 0)


DEFAULT_RULES = Rules()
