#!/usr/bin/env python
"""
Tests for the board topology.
"""
import unittest

from forest_ai.core.board import Board, Cell, create_standard_board
from forest_ai.core.constants import NO_NEIGHBOR, NUM_DIRECTIONS, NUM_CELLS


class TestStandardBoard(unittest.TestCase):
    """Test case for the standard 37-cell board."""

    def setUp(self):
        self.board = create_standard_board()

    def test_cell_count(self):
        self.assertEqual(len(self.board), NUM_CELLS)
        self.assertEqual([cell.index for cell in self.board.cells], list(range(NUM_CELLS)))

    def test_centre_neighbors_spiral_outwards(self):
        self.assertEqual(self.board.cell(0).neighbors, (1, 2, 3, 4, 5, 6))

    def test_second_ring_starts_beyond_first(self):
        # Cell 7 is two steps from the centre in direction 0
        self.assertEqual(self.board.neighbor(1, 0), 7)
        self.assertEqual(self.board.neighbor(7, 3), 1)

    def test_richness_by_ring(self):
        self.assertEqual(self.board.cell(0).richness, 3)
        for index in range(1, 7):
            self.assertEqual(self.board.cell(index).richness, 3)
        for index in range(7, 19):
            self.assertEqual(self.board.cell(index).richness, 2)
        for index in range(19, 37):
            self.assertEqual(self.board.cell(index).richness, 1)

    def test_neighbor_symmetry(self):
        """Walking in a direction and back returns to the start."""
        for cell in self.board.cells:
            for direction in range(NUM_DIRECTIONS):
                neighbor = self.board.neighbor(cell.index, direction)
                if neighbor == NO_NEIGHBOR:
                    continue
                back = self.board.neighbor(neighbor, (direction + 3) % NUM_DIRECTIONS)
                self.assertEqual(back, cell.index, f"cell {cell.index} direction {direction}")

    def test_outer_ring_has_off_board_links(self):
        for index in range(19, 37):
            self.assertIn(NO_NEIGHBOR, self.board.cell(index).neighbors)
        for index in range(0, 19):
            self.assertNotIn(NO_NEIGHBOR, self.board.cell(index).neighbors)

    def test_distances(self):
        self.assertEqual(self.board.distance(0, 0), 0)
        self.assertEqual(self.board.distance(0, 4), 1)
        self.assertEqual(self.board.distance(0, 12), 2)
        self.assertEqual(self.board.distance(0, 30), 3)
        self.assertEqual(self.board.distance(19, 28), 6)

    def test_cells_within(self):
        self.assertEqual(self.board.cells_within(0, 1), [1, 2, 3, 4, 5, 6])
        self.assertEqual(len(self.board.cells_within(0, 2)), 18)
        self.assertEqual(len(self.board.cells_within(0, 3)), 36)
        self.assertNotIn(0, self.board.cells_within(0, 3))


class TestCustomBoard(unittest.TestCase):
    """Test case for boards built from cell lists."""

    def test_single_isolated_cell(self):
        board = Board([Cell(index=0, richness=1, neighbors=(NO_NEIGHBOR,) * 6)])
        for direction in range(NUM_DIRECTIONS):
            self.assertEqual(board.neighbor(0, direction), NO_NEIGHBOR)
        self.assertEqual(board.cells_within(0, 3), [])

    def test_links_to_missing_cells_are_off_board(self):
        board = Board([Cell(index=0, richness=1, neighbors=(5, -1, -1, -1, -1, -1))])
        self.assertEqual(board.neighbor(0, 0), NO_NEIGHBOR)

    def test_disconnected_distance(self):
        board = Board([
            Cell(index=0, richness=1, neighbors=(NO_NEIGHBOR,) * 6),
            Cell(index=1, richness=1, neighbors=(NO_NEIGHBOR,) * 6),
        ])
        self.assertIsNone(board.distance(0, 1))

    def test_cell_requires_six_links(self):
        with self.assertRaises(ValueError):
            Cell(index=0, richness=1, neighbors=(1, 2, 3))

    def test_unusable_cell(self):
        self.assertFalse(Cell(index=0, richness=0, neighbors=(NO_NEIGHBOR,) * 6).is_usable)
        self.assertTrue(Cell(index=0, richness=2, neighbors=(NO_NEIGHBOR,) * 6).is_usable)


if __name__ == "__main__":
    unittest.main()
