"""Next-generation computation for Conway's Game of Life grids.

Rules, applied simultaneously to every cell:
- Live cell with 2-3 live neighbors survives
- Dead cell with exactly 3 live neighbors becomes alive
- All other cells die or stay dead

Neighbors are the 8 surrounding cells. Positions off the grid count as
dead: edges neither wrap nor get padded with live cells.
"""

from typing import List, Sequence, Union
import numpy as np
import torch
import torch.nn.functional as F

from .grid import Grid, GridShapeError

_KERNEL = torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)

GridLike = Union[Grid, Sequence[Sequence[bool]], np.ndarray]


def _as_grid(grid: GridLike) -> Grid:
    """Coerce input to a Grid, rejecting malformed data up front."""
    if isinstance(grid, Grid):
        return grid
    if isinstance(grid, np.ndarray):
        if grid.ndim != 2:
            raise GridShapeError(f"Expected a 2D cell array, got {grid.ndim} dimensions")
        return Grid(grid.shape[0], grid.shape[1], grid)
    if isinstance(grid, (list, tuple)):
        return Grid.from_rows(grid)
    raise TypeError(f"Expected a Grid or nested rows, got {type(grid).__name__}")


def count_neighbors(grid: GridLike) -> np.ndarray:
    """Count live neighbors for all cells using a PyTorch convolution.

    Args:
        grid: Source grid

    Returns:
        Integer array of shape (height, width) with counts from 0 to 8
    """
    grid = _as_grid(grid)
    if grid.is_empty:
        return np.zeros(grid.shape, dtype=np.int8)

    source = torch.from_numpy(grid.cells.astype(np.float32)).unsqueeze(0).unsqueeze(0)
    # Zero padding: off-grid neighbors are dead
    neighbors = F.conv2d(source, _KERNEL, padding=1)

    return neighbors[0, 0].round().to(torch.int8).numpy()


def neighbor_count(grid: GridLike, row: int, col: int) -> int:
    """Count live neighbors of a single cell by direct inspection.

    Args:
        grid: Source grid
        row: Row coordinate
        col: Column coordinate

    Returns:
        Number of living neighbors (0-8)

    Raises:
        IndexError: If coordinates are out of bounds
    """
    grid = _as_grid(grid)
    if not (0 <= row < grid.height and 0 <= col < grid.width):
        raise IndexError(f"Coordinates ({row}, {col}) out of bounds")

    count = 0
    for dr in [-1, 0, 1]:
        for dc in [-1, 0, 1]:
            if dr == 0 and dc == 0:
                continue

            nr, nc = row + dr, col + dc
            if 0 <= nr < grid.height and 0 <= nc < grid.width:
                count += int(grid.cells[nr, nc])

    return count


def _apply_rules(cells, counts):
    # Birth on exactly 3; survival on 2 or 3
    return (counts == 3) | (cells & (counts == 2))


def compute_next(grid: GridLike) -> Grid:
    """Compute the next generation of a grid.

    The input is left untouched; a new grid of identical dimensions is
    returned. A grid with a zero dimension yields an empty grid of the
    same shape.

    Args:
        grid: Current generation, as a Grid or nested row sequences

    Returns:
        New Grid holding the next generation

    Raises:
        GridShapeError: If nested rows are not rectangular
        TypeError: If grid is neither a Grid nor nested rows, or a cell is not a bool
    """
    grid = _as_grid(grid)
    if grid.is_empty:
        return Grid(grid.height, grid.width)

    counts = count_neighbors(grid)
    return Grid(grid.height, grid.width, _apply_rules(grid.cells, counts))


def compute_next_batch(grids: Sequence[GridLike], device: str = "cpu") -> List[Grid]:
    """Compute the next generation for many same-shaped grids at once.

    All grids are stacked into one (batch, 1, height, width) tensor so a
    single convolution counts every neighbor in the batch.

    Args:
        grids: Grids to evolve; all must share one shape
        device: Device to run on ('cpu' or 'cuda')

    Returns:
        List of next-generation grids in input order

    Raises:
        GridShapeError: If the grids do not all have the same shape
    """
    grids = [_as_grid(g) for g in grids]
    if not grids:
        return []

    shape = grids[0].shape
    for index, g in enumerate(grids):
        if g.shape != shape:
            raise GridShapeError(f"Grid {index} has shape {g.shape}, expected {shape}")

    height, width = shape
    if grids[0].is_empty:
        return [Grid(height, width) for _ in grids]

    if device == "cuda" and not torch.cuda.is_available():
        device = "cpu"
    target = torch.device(device)

    stacked = np.stack([g.cells for g in grids])
    cells = torch.from_numpy(stacked).to(target)
    source = cells.to(torch.float32).unsqueeze(1)
    counts = F.conv2d(source, _KERNEL.to(target), padding=1).squeeze(1).round().to(torch.int8)

    next_cells = _apply_rules(cells, counts).cpu().numpy()
    return [Grid(height, width, next_cells[i]) for i in range(len(grids))]
