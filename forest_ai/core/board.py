"""
Static board topology for the forest game.

This module defines the Cell and Board classes. The board is built once at the
start of a match (either from host input or with create_standard_board) and is
shared, read-only, by every game state of the match.
"""
from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from forest_ai.core.constants import (
    NUM_DIRECTIONS, NO_NEIGHBOR, MAP_RING_COUNT, DIRECTION_VECTORS,
    RICHNESS_BY_RING
)


@dataclass(frozen=True)
class Cell:
    """
    A single hex cell.

    Attributes:
        index: Cell index (0 is the centre, others spiral outwards)
        richness: Soil richness (0 = unusable, 1-3 = usable)
        neighbors: Six neighbour indices, one per direction, NO_NEIGHBOR if off board
    """
    index: int
    richness: int
    neighbors: Tuple[int, ...]

    def __post_init__(self):
        if len(self.neighbors) != NUM_DIRECTIONS:
            raise ValueError(f"Cell {self.index} must have exactly {NUM_DIRECTIONS} neighbour links")

    @property
    def is_usable(self) -> bool:
        """Whether trees can grow on this cell."""
        return self.richness > 0

    def __str__(self) -> str:
        links = " ".join(str(n) for n in self.neighbors)
        return f"{self.index} {self.richness} {links}"


class Board:
    """
    Immutable hex board.

    Cells are stored by index. Distances between cells are computed lazily by
    breadth-first search over neighbour links and cached per source cell.
    """

    def __init__(self, cells: Iterable[Cell]):
        """
        Initialize a board.

        Args:
            cells: Cells of the board, in any order
        """
        self._cells: Dict[int, Cell] = {cell.index: cell for cell in cells}
        self._distances: Dict[int, Dict[int, int]] = {}

    @property
    def cells(self) -> List[Cell]:
        """All cells ordered by index."""
        return [self._cells[index] for index in sorted(self._cells)]

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, index: int) -> bool:
        return index in self._cells

    def cell(self, index: int) -> Cell:
        """
        Get a cell by index.

        Raises:
            KeyError: If the board has no such cell
        """
        return self._cells[index]

    def neighbor(self, index: int, direction: int) -> int:
        """Index of the neighbour of ``index`` in ``direction`` (NO_NEIGHBOR if off board)."""
        neighbor = self._cells[index].neighbors[direction % NUM_DIRECTIONS]
        if neighbor != NO_NEIGHBOR and neighbor not in self._cells:
            return NO_NEIGHBOR
        return neighbor

    def _distances_from(self, index: int) -> Dict[int, int]:
        if index not in self._distances:
            distances = {index: 0}
            queue = deque([index])
            while queue:
                current = queue.popleft()
                for direction in range(NUM_DIRECTIONS):
                    neighbor = self.neighbor(current, direction)
                    if neighbor != NO_NEIGHBOR and neighbor not in distances:
                        distances[neighbor] = distances[current] + 1
                        queue.append(neighbor)
            self._distances[index] = distances
        return self._distances[index]

    def distance(self, a: int, b: int) -> Optional[int]:
        """
        Hex distance between two cells.

        Returns:
            Number of steps, or None if the cells are not connected
        """
        return self._distances_from(a).get(b)

    def cells_within(self, index: int, radius: int) -> List[int]:
        """
        Indices of all cells at distance 1..radius from ``index``.

        Args:
            index: Origin cell
            radius: Maximum distance

        Returns:
            Sorted list of cell indices (the origin itself is excluded)
        """
        return sorted(
            other for other, dist in self._distances_from(index).items()
            if 0 < dist <= radius
        )

    def __str__(self) -> str:
        return "\n".join(str(cell) for cell in self.cells)


def _cube_add(coord: Tuple[int, int, int], direction: int, distance: int = 1) -> Tuple[int, int, int]:
    dx, dy, dz = DIRECTION_VECTORS[direction]
    return (coord[0] + dx * distance, coord[1] + dy * distance, coord[2] + dz * distance)


def create_standard_board(ring_count: int = MAP_RING_COUNT) -> Board:
    """
    Create the standard hexagonal board.

    Cells are numbered from the centre outwards. Each ring starts at the
    centre's direction-0 neighbour at that distance and walks counter-clockwise.
    Inner rings are richer than outer rings.

    Args:
        ring_count: Number of rings around the centre cell

    Returns:
        Board with 1 + 3 * ring_count * (ring_count + 1) cells
    """
    centre = (0, 0, 0)
    coords: List[Tuple[int, int, int]] = [centre]
    rings: List[int] = [0]

    for ring in range(1, ring_count + 1):
        coord = _cube_add(centre, 0, ring)
        for orientation in range(NUM_DIRECTIONS):
            for _ in range(ring):
                coords.append(coord)
                rings.append(ring)
                coord = _cube_add(coord, (orientation + 2) % NUM_DIRECTIONS)

    index_by_coord = {coord: index for index, coord in enumerate(coords)}

    cells = []
    for index, coord in enumerate(coords):
        neighbors = tuple(
            index_by_coord.get(_cube_add(coord, direction), NO_NEIGHBOR)
            for direction in range(NUM_DIRECTIONS)
        )
        richness = RICHNESS_BY_RING.get(rings[index], 1)
        cells.append(Cell(index=index, richness=richness, neighbors=neighbors))

    return Board(cells)
