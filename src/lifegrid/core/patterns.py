"""Classic Game of Life patterns and an in-memory pattern library.

Built-in patterns are drawn as pictures, one string per row, with '*'
for a live cell and '.' for a dead one.
"""

from typing import Any, Dict, List, Optional, Tuple

from .grid import Grid

# (category, name, picture, description)
BUILTIN_PATTERNS = [
    ("Still Life", "Block", ["**", "**"], "2x2 still life block"),
    ("Still Life", "Beehive", [".**.", "*..*", ".**."], "Beehive still life"),
    ("Still Life", "Loaf", [".**.", "*..*", ".*.*", "..*."], "Loaf still life"),
    ("Oscillators", "Blinker", ["...", "***", "..."], "Period-2 oscillator"),
    ("Oscillators", "Toad", [".***", "***."], "Period-2 oscillator"),
    ("Oscillators", "Beacon", ["**..", "*...", "...*", "..**"], "Period-2 oscillator"),
    (
        "Oscillators",
        "Pulsar",
        [
            "..***...***..",
            ".............",
            "*....*.*....*",
            "*....*.*....*",
            "*....*.*....*",
            "..***...***..",
            ".............",
            "..***...***..",
            "*....*.*....*",
            "*....*.*....*",
            "*....*.*....*",
            ".............",
            "..***...***..",
        ],
        "Period-3 oscillator",
    ),
    ("Spaceships", "Glider", [".*.", "..*", "***"], "Smallest spaceship, period-4"),
    (
        "Spaceships",
        "Lightweight Spaceship",
        ["*..*.", "....*", "*...*", ".****"],
        "LWSS - Period-4 spaceship",
    ),
    (
        "Methuselahs",
        "R-pentomino",
        [".**", "**.", ".*."],
        "Famous methuselah that stabilizes after 1103 generations",
    ),
    ("Methuselahs", "Diehard", ["......*.", "**......", ".*...***"], "Dies after exactly 130 generations"),
    ("Methuselahs", "Acorn", [".*.....", "...*...", "**..***"], "Takes 5206 generations to stabilize"),
]


class Pattern:
    """A named arrangement of live cells, independent of any grid size."""

    def __init__(
        self,
        name: str,
        cells: List[Tuple[int, int]],
        description: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize a pattern.

        Args:
            name: Pattern name
            cells: (row, col) coordinates of living cells
            description: Optional description
            metadata: Optional metadata dictionary
        """
        self.name = name
        self.cells = cells
        self.description = description
        self.metadata = metadata or {}

    @classmethod
    def from_picture(cls, name: str, picture: List[str], description: str = "") -> "Pattern":
        """Create a pattern from rows drawn with '*' (alive) and '.' (dead).

        Raises:
            ValueError: If the picture contains any other character
        """
        cells = []
        for r, line in enumerate(picture):
            for c, char in enumerate(line):
                if char == "*":
                    cells.append((r, c))
                elif char != ".":
                    raise ValueError(f"Unexpected character {char!r} in pattern '{name}'")
        return cls(name, cells, description)

    @classmethod
    def from_grid(cls, grid: Grid, name: str, description: str = "") -> "Pattern":
        """Create pattern from the living cells of a grid."""
        cells = list(grid.live_cells())
        metadata = {"source_grid_size": grid.shape, "population": len(cells)}

        return cls(name, cells, description, metadata)

    def get_bounding_box(self) -> Tuple[int, int, int, int]:
        """Get bounding box as (min_row, min_col, max_row, max_col)."""
        if not self.cells:
            return (0, 0, 0, 0)

        rows, cols = zip(*self.cells)
        return (min(rows), min(cols), max(rows), max(cols))

    def get_size(self) -> Tuple[int, int]:
        """Get pattern size as (height, width)."""
        return self.to_grid().shape if self.cells else (1, 1)

    def normalize(self) -> "Pattern":
        """Return a copy shifted so the bounding box starts at (0, 0)."""
        min_row, min_col, _, _ = self.get_bounding_box()
        shifted = [(r - min_row, c - min_col) for r, c in self.cells]
        return Pattern(self.name, shifted, self.description, self.metadata.copy())

    def to_grid(self) -> Grid:
        """Smallest grid holding the normalized pattern."""
        cells = self.normalize().cells
        if not cells:
            return Grid(0, 0)
        height = max(r for r, _ in cells) + 1
        width = max(c for _, c in cells) + 1
        return Grid.from_cells(height, width, cells)

    def place(self, height: int, width: int, row_offset: int = 0, col_offset: int = 0) -> Grid:
        """Place this pattern on a fresh, otherwise dead grid.

        Cells landing outside the grid are dropped.
        """
        shifted = ((r + row_offset, c + col_offset) for r, c in self.cells)
        return Grid.from_cells(height, width, [(r, c) for r, c in shifted if 0 <= r < height and 0 <= c < width])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "name": self.name,
            "cells": [list(cell) for cell in self.cells],
            "description": self.description,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pattern":
        """Create a pattern from a dictionary made by to_dict()."""
        return cls(
            name=data["name"],
            cells=[tuple(cell) for cell in data["cells"]],
            description=data.get("description", ""),
            metadata=data.get("metadata", {}),
        )

    def __str__(self) -> str:
        return str(self.to_grid())


class PatternLibrary:
    """Collection of named patterns kept in memory."""

    def __init__(self) -> None:
        self._patterns: Dict[str, Pattern] = {}
        self._categories: Dict[str, List[str]] = {}

        for category, name, picture, description in BUILTIN_PATTERNS:
            self.add_pattern(Pattern.from_picture(name, picture, description))
            self._categories.setdefault(category, []).append(name)

    def add_pattern(self, pattern: Pattern) -> None:
        """Add a pattern, replacing any with the same name."""
        self._patterns[pattern.name] = pattern

    def get_pattern(self, name: str) -> Optional[Pattern]:
        """Get a pattern by name, or None if not found."""
        return self._patterns.get(name)

    def list_patterns(self) -> List[str]:
        """Get list of all pattern names."""
        return list(self._patterns.keys())

    def get_patterns_by_category(self) -> Dict[str, List[str]]:
        """Map categories to pattern names; patterns added later go under "Custom"."""
        categorized = {name for names in self._categories.values() for name in names}
        custom = [name for name in self._patterns if name not in categorized]

        result = {category: list(names) for category, names in self._categories.items()}
        if custom:
            result["Custom"] = custom
        return result
