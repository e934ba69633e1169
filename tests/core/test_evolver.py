"""Tests for next-generation computation."""

import copy
import importlib
from unittest.mock import patch

import numpy as np
import pytest
from lifegrid.core import evolver
from lifegrid.core.evolver import compute_next, compute_next_batch, count_neighbors, neighbor_count
from lifegrid.core.grid import Grid, GridShapeError


def _expected_next(grid: Grid) -> Grid:
    """Next generation derived cell by cell from direct neighbor counts."""
    cells = np.zeros(grid.shape, dtype=bool)
    for r in range(grid.height):
        for c in range(grid.width):
            n = neighbor_count(grid, r, c)
            cells[r, c] = n == 3 or (grid.get_cell(r, c) and n == 2)
    return Grid(grid.height, grid.width, cells)


class TestNeighborCounting:
    """Test cases for neighbor counting."""

    def test_neighbor_count(self):
        """Test neighbor counting for individual cells."""
        grid = Grid.from_cells(5, 5, [(1, 1), (1, 2), (2, 1)])

        assert neighbor_count(grid, 0, 0) == 1
        assert neighbor_count(grid, 2, 2) == 3
        assert neighbor_count(grid, 1, 1) == 2  # the cell itself doesn't count
        assert neighbor_count(grid, 3, 3) == 0

    def test_corners_do_not_wrap(self):
        """Test that opposite corners are not neighbors."""
        grid = Grid.from_cells(3, 3, [(0, 0), (2, 2)])

        assert neighbor_count(grid, 0, 0) == 0
        assert neighbor_count(grid, 2, 2) == 0
        assert count_neighbors(grid)[0, 0] == 0

    def test_neighbor_count_out_of_bounds(self):
        """Test that off-grid cells can't be queried."""
        with pytest.raises(IndexError):
            neighbor_count(Grid(3, 3), 3, 0)

    def test_count_neighbors(self):
        """Test vectorized neighbor counting."""
        # Vertical line in column 2
        grid = Grid.from_cells(5, 5, [(1, 2), (2, 2), (3, 2)])
        counts = count_neighbors(grid)

        assert counts.shape == (5, 5)
        assert counts[2, 2] == 2
        assert counts[2, 1] == 3
        assert counts[2, 3] == 3
        assert counts[0, 0] == 0

    def test_count_neighbors_matches_direct_count(self):
        """Test the convolution agrees with the per-cell loop."""
        grid = Grid.random(9, 13, 0.4, seed=3)
        counts = count_neighbors(grid)

        for r in range(grid.height):
            for c in range(grid.width):
                assert counts[r, c] == neighbor_count(grid, r, c)

    def test_count_neighbors_full_grid(self):
        """Test counts on a fully alive grid reflect the dead border."""
        counts = count_neighbors(Grid.random(4, 4, 1.0))

        assert counts[0, 0] == 3
        assert counts[0, 1] == 5
        assert counts[1, 1] == 8


class TestComputeNext:
    """Test cases for compute_next."""

    @pytest.mark.parametrize("shape", [(0, 0), (0, 5), (5, 0), (1, 1), (1, 7), (7, 3), (12, 12)])
    def test_shape_preserved(self, shape):
        """Test the output always has the input's dimensions."""
        grid = Grid.random(shape[0], shape[1], 0.5, seed=1)
        assert compute_next(grid).shape == shape

    def test_empty_grid_returns_empty(self):
        """Test a zero-sized grid is not an error."""
        result = compute_next([])
        assert result.shape == (0, 0)
        assert result.to_rows() == []

        result = compute_next([[], [], []])
        assert result.shape == (3, 0)

    def test_dead_grid_stays_dead(self):
        """Test there is no spontaneous generation."""
        assert compute_next(Grid(6, 8)).population == 0

    def test_isolated_cell_dies(self):
        """Test a lone cell does not survive."""
        grid = Grid.from_cells(5, 5, [(2, 2)])
        assert compute_next(grid).population == 0

        single = Grid.from_cells(1, 1, [(0, 0)])
        assert compute_next(single).population == 0

    def test_l_triomino_completes_block(self):
        """Test three cells of a block corner grow into the full block."""
        grid = Grid.from_cells(3, 3, [(0, 0), (0, 1), (1, 0)])

        # (1, 1) sees all three live cells; each live cell sees two
        assert neighbor_count(grid, 1, 1) == 3
        assert neighbor_count(grid, 0, 0) == 2
        assert neighbor_count(grid, 0, 2) == 1

        result = compute_next(grid)
        assert result == _expected_next(grid)
        assert result == Grid.from_cells(3, 3, [(0, 0), (0, 1), (1, 0), (1, 1)])

    def test_block_still_life(self):
        """Test a 2x2 block is unchanged."""
        grid = Grid.from_cells(4, 4, [(1, 1), (1, 2), (2, 1), (2, 2)])
        assert compute_next(grid) == grid

    def test_block_in_corner(self):
        """Test a block against the edges is still stable."""
        grid = Grid.from_cells(2, 2, [(0, 0), (0, 1), (1, 0), (1, 1)])
        assert compute_next(grid) == grid

    def test_blinker_near_edge(self):
        """Test blinker oscillation next to the top and left edges."""
        grid = Grid.from_cells(5, 5, [(1, 0), (1, 1), (1, 2)])

        first = compute_next(grid)
        assert first == Grid.from_cells(5, 5, [(0, 1), (1, 1), (2, 1)])

        second = compute_next(first)
        assert second == grid

    def test_blinker_on_edge_dies_out(self):
        """Test a blinker on the boundary loses its off-grid half."""
        # Vertical phase would need row -1, which doesn't exist
        grid = Grid.from_cells(3, 3, [(0, 0), (0, 1), (0, 2)])

        result = compute_next(grid)
        assert result == Grid.from_cells(3, 3, [(0, 1), (1, 1)])

    def test_matches_rule_on_random_grids(self):
        """Test compute_next against the rule applied cell by cell."""
        for seed in range(5):
            grid = Grid.random(8, 11, 0.35, seed=seed)
            assert compute_next(grid) == _expected_next(grid)

    def test_overcrowding(self):
        """Test a cell with more than three neighbors dies."""
        grid = Grid.from_cells(3, 3, [(0, 1), (1, 0), (1, 1), (1, 2), (2, 1)])

        assert neighbor_count(grid, 1, 1) == 4
        assert not compute_next(grid).get_cell(1, 1)

    def test_input_not_mutated(self):
        """Test compute_next leaves its input untouched."""
        rows = [[False, True, False], [False, True, False], [False, True, False]]
        original = copy.deepcopy(rows)
        grid = Grid.from_rows(rows)
        before = grid.cells.copy()

        compute_next(rows)
        result = compute_next(grid)

        assert rows == original
        assert np.array_equal(grid.cells, before)
        assert result is not grid

    def test_deterministic(self):
        """Test repeated calls give the same result."""
        grid = Grid.random(10, 10, 0.3, seed=11)
        assert compute_next(grid) == compute_next(grid)

    def test_accepts_nested_rows(self):
        """Test nested lists are accepted as input."""
        result = compute_next([[False, True, False], [False, True, False], [False, True, False]])
        assert result.to_rows() == [[False, False, False], [True, True, True], [False, False, False]]

    def test_accepts_numpy_array(self):
        """Test a 2D array is accepted as input."""
        result = compute_next(np.ones((2, 2), dtype=bool))
        assert result.population == 4

    def test_rejects_ragged_rows(self):
        """Test non-rectangular input fails fast."""
        with pytest.raises(GridShapeError):
            compute_next([[True, True, True], [True, True]])

    def test_rejects_non_boolean_cells(self):
        """Test strings and numbers are not read as cell states."""
        with pytest.raises(TypeError):
            compute_next([["false"] * 3] * 3)

        with pytest.raises(TypeError):
            compute_next(["000", "000", "000"])

        with pytest.raises(TypeError):
            compute_next([[0, 1], [1, 0]])

    def test_accepts_numpy_bool_cells(self):
        """Test rows holding numpy bools are accepted."""
        row = [np.bool_(False), np.bool_(True), np.bool_(False)]
        result = compute_next([row, list(row), list(row)])
        assert result.to_rows()[1] == [True, True, True]

    def test_rejects_wrong_dimensions(self):
        """Test arrays that aren't 2D are rejected."""
        with pytest.raises(GridShapeError):
            compute_next(np.zeros((2, 2, 2), dtype=bool))

    def test_rejects_unknown_type(self):
        """Test unsupported input types raise TypeError."""
        with pytest.raises(TypeError):
            compute_next("not a grid")


class TestComputeNextBatch:
    """Test cases for batched evolution."""

    def test_batch_matches_single(self):
        """Test each batch result equals the single-grid result."""
        grids = [Grid.random(7, 9, 0.4, seed=s) for s in range(6)]
        results = compute_next_batch(grids)

        assert len(results) == len(grids)
        for grid, result in zip(grids, results):
            assert result == compute_next(grid)

    def test_batch_empty_sequence(self):
        """Test an empty batch returns an empty list."""
        assert compute_next_batch([]) == []

    def test_batch_zero_sized_grids(self):
        """Test a batch of zero-sized grids."""
        results = compute_next_batch([Grid(0, 3), Grid(0, 3)])
        assert [r.shape for r in results] == [(0, 3), (0, 3)]

    def test_batch_mixed_shapes(self):
        """Test grids of different shapes can't be batched."""
        with pytest.raises(GridShapeError):
            compute_next_batch([Grid(3, 3), Grid(4, 3)])

    def test_batch_cuda_fallback(self):
        """Test requesting CUDA still works when it isn't available."""
        grid = Grid.from_cells(5, 5, [(2, 1), (2, 2), (2, 3)])
        results = compute_next_batch([grid], device="cuda")
        assert results[0] == compute_next(grid)


class TestImport:
    """Test cases for module import behavior."""

    def test_import_leaves_torch_threads_alone(self):
        """Test importing the evolver doesn't change torch's thread count."""
        with patch("torch.set_num_threads") as mock_set_threads:
            importlib.reload(evolver)

        mock_set_threads.assert_not_called()
