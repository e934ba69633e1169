"""Immutable grid data structure for Game of Life generations."""

from typing import Iterable, Iterator, List, Optional, Sequence, Tuple
import numpy as np


class GridShapeError(ValueError):
    """Raised when cell data does not form a rectangle of the expected shape."""


class Grid:
    """Represents a rectangular 2D grid of alive/dead cells.

    Cells are addressed by (row, col), 0-indexed, and stored row-major in a
    read-only numpy boolean array of shape (height, width). A grid never
    changes after construction; operations that alter cells return a new grid.
    Positions outside the grid are not part of it: there is no wraparound.
    """

    def __init__(self, height: int, width: int, cells: Optional[np.ndarray] = None) -> None:
        """Initialize a new grid.

        Args:
            height: Number of rows
            width: Number of columns
            cells: Optional array-like of shape (height, width); all dead if omitted

        Raises:
            ValueError: If a dimension is negative
            GridShapeError: If cells does not have shape (height, width)
        """
        if height < 0 or width < 0:
            raise ValueError(f"Grid dimensions must be non-negative, got {height}x{width}")

        self._height = int(height)
        self._width = int(width)

        if cells is None:
            arr = np.zeros((self._height, self._width), dtype=bool)
        else:
            try:
                arr = np.array(cells, dtype=bool)
            except ValueError as e:
                raise GridShapeError(f"Cell data is not rectangular: {e}") from e
            if arr.shape != (self._height, self._width):
                raise GridShapeError(
                    f"Cell data shape {arr.shape} doesn't match grid {(self._height, self._width)}"
                )

        arr.flags.writeable = False
        self._cells = arr

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[bool]]) -> "Grid":
        """Build a grid from nested row sequences.

        Args:
            rows: Row-major sequence of rows, each a sequence of cell states

        Returns:
            New Grid with len(rows) rows

        Raises:
            GridShapeError: If the rows are not all the same length
            TypeError: If a row is a string or a cell is not a bool
        """
        if isinstance(rows, (str, bytes)):
            raise TypeError("Grid rows must be a sequence of rows, not a string")
        rows = list(rows)
        for index, row in enumerate(rows):
            if isinstance(row, (str, bytes)):
                raise TypeError(f"Row {index} must be a sequence of bools, not a string")

        rows = [list(row) for row in rows]
        height = len(rows)
        width = len(rows[0]) if rows else 0

        for index, row in enumerate(rows):
            if len(row) != width:
                raise GridShapeError(
                    f"Grid is not rectangular: row {index} has {len(row)} cells, expected {width}"
                )

        cells = np.zeros((height, width), dtype=bool)
        for r, row in enumerate(rows):
            for c, value in enumerate(row):
                if not isinstance(value, (bool, np.bool_)):
                    raise TypeError(f"Cell ({r}, {c}) must be a bool, got {value!r}")
                cells[r, c] = value

        return cls(height, width, cells)

    @classmethod
    def from_cells(cls, height: int, width: int, live: Iterable[Tuple[int, int]]) -> "Grid":
        """Build a grid with the given (row, col) coordinates alive.

        Raises:
            IndexError: If a coordinate lies outside the grid
        """
        cells = np.zeros((height, width), dtype=bool)
        for row, col in live:
            if not (0 <= row < height and 0 <= col < width):
                raise IndexError(f"Coordinates ({row}, {col}) out of bounds")
            cells[row, col] = True
        return cls(height, width, cells)

    @classmethod
    def random(
        cls, height: int, width: int, probability: float = 0.1, seed: Optional[int] = None
    ) -> "Grid":
        """Create a randomly populated grid.

        Args:
            height: Number of rows
            width: Number of columns
            probability: Chance each cell will be alive (0.0 to 1.0)
            seed: Optional seed for reproducible grids

        Returns:
            New randomly filled Grid
        """
        rng = np.random.default_rng(seed)
        return cls(height, width, rng.random((height, width)) < probability)

    @property
    def height(self) -> int:
        """Number of rows."""
        return self._height

    @property
    def width(self) -> int:
        """Number of columns."""
        return self._width

    @property
    def shape(self) -> Tuple[int, int]:
        """Get grid dimensions as (height, width)."""
        return (self._height, self._width)

    @property
    def cells(self) -> np.ndarray:
        """Get the read-only cell array."""
        return self._cells

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return int(np.count_nonzero(self._cells))

    @property
    def is_empty(self) -> bool:
        """Whether the grid has no cells at all (a zero dimension)."""
        return self._height == 0 or self._width == 0

    def get_cell(self, row: int, col: int) -> bool:
        """Get the state of a cell.

        Args:
            row: Row coordinate
            col: Column coordinate

        Returns:
            True if cell is alive, False if dead

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise IndexError(f"Coordinates ({row}, {col}) out of bounds")

        return bool(self._cells[row, col])

    def with_cell(self, row: int, col: int, alive: bool) -> "Grid":
        """Return a copy of this grid with one cell set.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise IndexError(f"Coordinates ({row}, {col}) out of bounds")

        cells = self._cells.copy()
        cells[row, col] = alive
        return Grid(self._height, self._width, cells)

    def live_cells(self) -> Iterator[Tuple[int, int]]:
        """Yield (row, col) coordinates of living cells in row-major order."""
        rows, cols = np.nonzero(self._cells)
        for r, c in zip(rows, cols):
            yield (int(r), int(c))

    def get_bounding_box(self) -> Optional[Tuple[int, int, int, int]]:
        """Get bounding box of living cells.

        Returns:
            Tuple of (min_row, min_col, max_row, max_col) or None if no living cells
        """
        rows, cols = np.nonzero(self._cells)
        if len(rows) == 0:
            return None

        return (int(rows.min()), int(cols.min()), int(rows.max()), int(cols.max()))

    def to_rows(self) -> List[List[bool]]:
        """Convert grid to nested lists of bools for serialization."""
        return self._cells.tolist()

    def to_bytes(self) -> bytes:
        """Compact state key, equal for grids of equal shape and cells."""
        return self._cells.tobytes()

    def __eq__(self, other: object) -> bool:
        """Check if two grids are equal."""
        if not isinstance(other, Grid):
            return False
        return self.shape == other.shape and np.array_equal(self._cells, other._cells)

    def __hash__(self) -> int:
        return hash((self.shape, self.to_bytes()))

    def __repr__(self) -> str:
        return f"Grid(height={self._height}, width={self._width}, population={self.population})"

    def __str__(self) -> str:
        """String representation showing living cells as '*' and dead as '.'."""
        return "\n".join("".join("*" if alive else "." for alive in row) for row in self._cells)
