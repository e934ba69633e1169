"""Frontend interfaces for grid evolution."""

from .cli import CLIGridEvolver

__all__ = ["CLIGridEvolver"]
