"""
Tree pieces for the forest game.
"""
from dataclasses import dataclass

from forest_ai.core.constants import ME, MAX_TREE_SIZE, SEED_SIZE


@dataclass
class Tree:
    """
    A tree standing on the board.

    The shadowed flag is never read from input: it is recomputed for the
    current day by the shadow model whenever the day changes.
    """
    cell_index: int
    size: int
    owner: int
    is_dormant: bool = False
    is_shadowed: bool = False

    def __post_init__(self):
        if not SEED_SIZE <= self.size <= MAX_TREE_SIZE:
            raise ValueError(f"Invalid tree size {self.size} on cell {self.cell_index}")

    @property
    def is_mine(self) -> bool:
        return self.owner == ME

    @property
    def is_seed(self) -> bool:
        return self.size == SEED_SIZE

    @property
    def is_mature(self) -> bool:
        return self.size == MAX_TREE_SIZE

    def copy(self) -> 'Tree':
        return Tree(
            cell_index=self.cell_index,
            size=self.size,
            owner=self.owner,
            is_dormant=self.is_dormant,
            is_shadowed=self.is_shadowed,
        )

    def __str__(self) -> str:
        flags = []
        if self.is_dormant:
            flags.append("dormant")
        if self.is_shadowed:
            flags.append("shadowed")
        suffix = f" ({', '.join(flags)})" if flags else ""
        return f"Tree(cell={self.cell_index}, size={self.size}, owner={self.owner}){suffix}"
