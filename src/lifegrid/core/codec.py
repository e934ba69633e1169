"""JSON encoding of grids as row-major arrays of boolean arrays."""

import json
from typing import Any, Union

from .grid import Grid


class GridFormatError(ValueError):
    """Raised when a payload is not a JSON array of boolean arrays."""


def grid_from_payload(data: Any) -> Grid:
    """Build a grid from an already-parsed JSON value.

    Accepts either the row array itself or a board object carrying it
    under a "grid" key.

    Args:
        data: Parsed JSON value

    Returns:
        Decoded Grid

    Raises:
        GridFormatError: If the value is not an array of boolean arrays
        GridShapeError: If the rows differ in length
    """
    if isinstance(data, dict):
        if "grid" not in data:
            raise GridFormatError("Board object has no 'grid' field")
        data = data["grid"]

    if not isinstance(data, list):
        raise GridFormatError(f"Grid must be an array of rows, got {type(data).__name__}")

    for r, row in enumerate(data):
        if not isinstance(row, list):
            raise GridFormatError(f"Row {r} must be an array, got {type(row).__name__}")
        for c, value in enumerate(row):
            # bool only: JSON 0/1 are not accepted as cell states
            if not isinstance(value, bool):
                raise GridFormatError(f"Cell ({r}, {c}) must be true or false, got {value!r}")

    return Grid.from_rows(data)


def decode_grid(payload: Union[str, bytes]) -> Grid:
    """Decode a JSON request payload into a grid.

    Raises:
        GridFormatError: If the payload is not valid JSON or has the wrong structure
        GridShapeError: If the rows differ in length
    """
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise GridFormatError(f"Invalid JSON: {e}") from e

    return grid_from_payload(data)


def encode_grid(grid: Grid) -> str:
    """Encode a grid as a compact JSON array of boolean arrays."""
    return json.dumps(grid.to_rows(), separators=(",", ":"))
