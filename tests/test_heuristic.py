"""Tests for the zig-zag heuristic seed."""

import pytest

from py_lho.core import Grid, TileKind, get_landscape, heuristic_grid, score, zigzag_path


class TestZigzagPath:
    """Test the shape of the zig-zag river."""

    def test_three_by_four(self):
        # (0,0) (0,1) (1,1) (1,2) (2,2) (2,3)
        assert zigzag_path(3, 4) == [0, 1, 5, 6, 10, 11]

    def test_bounces_off_bottom_edge(self):
        # Down to row 2, bounce back up to row 1, then on to row 0
        assert zigzag_path(3, 7) == [0, 1, 8, 9, 16, 17, 10, 11, 4, 5, 12, 13]

    def test_two_rows(self):
        assert zigzag_path(2, 4) == [0, 1, 5, 6, 2, 3]

    def test_single_row_is_straight(self):
        assert zigzag_path(1, 5) == [0, 1, 2, 3, 4]

    def test_single_column(self):
        assert zigzag_path(4, 1) == [0]

    def test_stops_at_first_tile_in_last_column(self):
        for rows, cols in [(2, 2), (3, 3), (4, 5), (5, 4)]:
            path = zigzag_path(rows, cols)
            assert path[-1] % cols == cols - 1
            assert all(index % cols != cols - 1 for index in path[:-1])

    @pytest.mark.parametrize("rows,cols", [(1, 1), (1, 6), (2, 5), (3, 3), (4, 6), (6, 4)])
    def test_path_is_a_legal_river(self, rows, cols):
        grid = Grid.allocate(rows, cols)
        for index in zigzag_path(rows, cols):
            assert grid.place_river(index)


class TestHeuristicGrid:
    """Test the full seed grid."""

    @pytest.mark.parametrize("rows,cols", [(1, 1), (1, 4), (3, 3), (4, 5)])
    def test_is_full_and_consistent(self, rows, cols):
        grid = heuristic_grid(rows, cols)

        assert grid.is_full
        assert grid.river_cells() == sorted(zigzag_path(rows, cols))
        assert grid.count(TileKind.TERRAIN) == grid.capacity - len(zigzag_path(rows, cols))
        grid.verify()

    def test_seed_value(self):
        # R R M / M R R / M M M with meadows
        grid = heuristic_grid(3, 3)
        assert grid.rows_of_kinds()[0] == [TileKind.RIVER, TileKind.RIVER, TileKind.TERRAIN]
        assert score(grid, get_landscape("meadow")) == 39
