"""Conway's Game of Life grid evolution with dead (non-wrapping) edges."""

__version__ = "0.1.0"

from .core.grid import Grid, GridShapeError
from .core.evolver import compute_next, compute_next_batch
from .core.codec import GridFormatError, decode_grid, encode_grid
from .core.game import Simulation, SimulationConfig
from .core.patterns import Pattern, PatternLibrary

__all__ = [
    "Grid",
    "GridShapeError",
    "GridFormatError",
    "compute_next",
    "compute_next_batch",
    "decode_grid",
    "encode_grid",
    "Simulation",
    "SimulationConfig",
    "Pattern",
    "PatternLibrary",
]
