"""Core grid evolution logic."""

from .grid import Grid, GridShapeError
from .evolver import compute_next, compute_next_batch, count_neighbors, neighbor_count
from .codec import GridFormatError, decode_grid, encode_grid, grid_from_payload
from .game import Simulation, SimulationConfig
from .patterns import Pattern, PatternLibrary

__all__ = [
    "Grid",
    "GridShapeError",
    "compute_next",
    "compute_next_batch",
    "count_neighbors",
    "neighbor_count",
    "GridFormatError",
    "decode_grid",
    "encode_grid",
    "grid_from_payload",
    "Simulation",
    "SimulationConfig",
    "Pattern",
    "PatternLibrary",
]
