"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the configuration parameters for the MCTS algorithm,
including the search budget, exploration constant, and the expansion,
simulation and opponent policies.
"""
from dataclasses import dataclass, fields
from typing import Optional, Literal, ClassVar
import math


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    This class defines all tunable parameters for the MCTS algorithm,
    with validation and sensible defaults.
    """
    # Search parameters
    iterations: int = 1000
    """Number of MCTS iterations to perform per move decision"""

    exploration_weight: float = math.sqrt(2)
    """UCB1 exploration parameter (0 = pure exploitation)"""

    max_depth: int = 100
    """Maximum number of days simulated in a single rollout"""

    time_limit: Optional[float] = None
    """Optional time limit in seconds (None = no limit)"""

    # Strategy parameters
    use_heuristics: bool = True
    """Whether to try promising actions first when expanding a node"""

    simulation_policy: Literal["random", "heuristic"] = "random"
    """Policy for the simulation phase ('random' or 'heuristic')"""

    opponent_policy: Literal["symmetric", "inert"] = "symmetric"
    """Opponent model: 'symmetric' plays the simulation policy, 'inert' never acts"""

    # Reproducibility
    seed: Optional[int] = None
    """Seed for the search's random generator (None = nondeterministic)"""

    # Constants
    INFINITE_VALUE: ClassVar[float] = float('inf')
    """Value representing infinity in the algorithm"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.iterations <= 0:
            raise ValueError("iterations must be positive")

        if self.exploration_weight < 0:
            raise ValueError("exploration_weight must be non-negative")

        if self.max_depth <= 0:
            raise ValueError("max_depth must be positive")

        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError("time_limit must be positive or None")

        if self.simulation_policy not in ["random", "heuristic"]:
            raise ValueError("simulation_policy must be 'random' or 'heuristic'")

        if self.opponent_policy not in ["symmetric", "inert"]:
            raise ValueError("opponent_policy must be 'symmetric' or 'inert'")

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed (fewer iterations).

        Returns:
            Fast MCTSConfig object
        """
        return cls(
            iterations=100,
            use_heuristics=True,
            simulation_policy="heuristic"
        )

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for deep search.

        Returns:
            Deep MCTSConfig object
        """
        return cls(
            iterations=5000,
            exploration_weight=1.2,  # Slightly less exploration
            use_heuristics=True,
            simulation_policy="heuristic"
        )

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Keys that are not configuration parameters, and keys set to None, are
        ignored.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        valid_params = {k: v for k, v in config_dict.items()
                        if k in cls.__dataclass_fields__ and v is not None}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = ", ".join(f"{name}={value}" for name, value in self.to_dict().items())
        return f"MCTSConfig({params})"
