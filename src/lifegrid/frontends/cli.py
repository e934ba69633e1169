"""Command-line interface for Game of Life grid evolution."""

import argparse
import sys
import time
import torch
from typing import List, Optional, Tuple

from ..core.codec import decode_grid, encode_grid
from ..core.evolver import compute_next
from ..core.game import Simulation, SimulationConfig
from ..core.grid import Grid
from ..core.patterns import PatternLibrary


class CLIGridEvolver:
    """Command-line interface for evolving grids and running simulations."""

    def __init__(self):
        """Initialize CLI interface."""
        # Single-threaded torch for CLI runs
        torch.set_num_threads(1)
        self.pattern_library = PatternLibrary()

    def evolve_payload(self, payload: str, steps: int = 1, verbose: bool = False) -> str:
        """Decode a JSON grid, evolve it and encode the result.

        Args:
            payload: JSON array of boolean arrays
            steps: Number of generations to advance
            verbose: Print progress updates

        Returns:
            JSON encoding of the grid after the given number of steps
        """
        grid = decode_grid(payload)

        if verbose:
            print(f"Decoded {grid.height}x{grid.width} grid, population {grid.population}", file=sys.stderr)

        for _ in range(steps):
            grid = compute_next(grid)

        if verbose:
            print(f"After {steps} step(s): population {grid.population}", file=sys.stderr)

        return encode_grid(grid)

    def run_simulation(
        self,
        config: SimulationConfig,
        verbose: bool = False,
        show_grid: bool = False,
    ) -> Tuple[int, str, dict]:
        """Run a simulation until it dies out, cycles or hits the limit.

        Args:
            config: Grid size, initial state and generation limit
            verbose: Print progress updates
            show_grid: Show initial and final grid states

        Returns:
            Tuple of (final_generation, finish_reason, statistics)

        Raises:
            KeyError: If the configured pattern does not exist
        """
        if verbose:
            print(f"Initializing {config.height}x{config.width} grid")
            if config.pattern:
                print(f"Loading pattern '{config.pattern}' at ({config.pattern_row}, {config.pattern_col})")
            else:
                print(f"Generating random population (rate: {config.population_rate:.2%})")

        simulation = Simulation.from_config(config, self.pattern_library)
        initial_population = simulation.population

        if verbose:
            print(f"Initial population: {initial_population} cells")

        if show_grid:
            print("\nInitial grid:")
            print(self._format_grid(simulation.grid))

        start_time = time.time()

        if verbose:
            print(f"\nRunning simulation (max {config.max_generations} generations)...")

        final_generation, reason = simulation.run_until_stable(config.max_generations)

        duration = time.time() - start_time

        stats = simulation.get_statistics()
        stats["duration_seconds"] = duration
        stats["generations_per_second"] = final_generation / duration if duration > 0 else 0
        stats["initial_population"] = initial_population

        if show_grid and reason != "extinction":
            print(f"\nFinal grid (generation {final_generation}):")
            print(self._format_grid(simulation.grid))

        return final_generation, reason, stats

    def _format_grid(self, grid: Grid, max_size: int = 50) -> str:
        """Format grid for display, truncating if too large.

        Args:
            grid: Grid to format
            max_size: Maximum dimension to display

        Returns:
            Formatted grid string
        """
        if grid.width > max_size or grid.height > max_size:
            return f"Grid too large to display ({grid.height}x{grid.width})"

        return str(grid)

    def list_patterns(self) -> None:
        """List available patterns by category."""
        categories = self.pattern_library.get_patterns_by_category()

        print("Available patterns:")
        for category, patterns in categories.items():
            print(f"\n{category}:")
            for pattern_name in patterns:
                pattern = self.pattern_library.get_pattern(pattern_name)
                size = pattern.get_size()
                print(f"  {pattern_name}: {size[0]}x{size[1]}, {len(pattern.cells)} cells")
                if pattern.description:
                    print(f"    {pattern.description}")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Evolve Conway's Game of Life grids from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compute the next generation of a JSON grid
  echo '[[false,true,false],[false,true,false],[false,true,false]]' | lifegrid-cli --input -

  # Advance a grid file by 10 generations
  lifegrid-cli --input board.json --steps 10

  # Run a random 50x50 simulation with 10% population
  lifegrid-cli --width 50 --height 50 --population 0.1 --seed 42

  # Run a glider on a 20x20 grid and show the grids
  lifegrid-cli -W 20 -H 20 --pattern Glider --show-grid

  # List available patterns
  lifegrid-cli --list-patterns
        """,
    )

    # Grid input
    parser.add_argument(
        "-i",
        "--input",
        type=str,
        help="JSON grid file to evolve ('-' reads stdin); prints the result as JSON",
    )

    parser.add_argument(
        "-s",
        "--steps",
        type=int,
        default=1,
        help="Generations to advance the input grid (default: 1)",
    )

    # Grid configuration
    parser.add_argument("-W", "--width", type=int, default=50, help="Grid width (default: 50)")

    parser.add_argument("-H", "--height", type=int, default=50, help="Grid height (default: 50)")

    parser.add_argument(
        "-p",
        "--population",
        type=float,
        default=0.1,
        help="Initial random population rate 0.0-1.0 (default: 0.1)",
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for a reproducible initial population",
    )

    # Pattern configuration
    parser.add_argument(
        "--pattern",
        type=str,
        help="Load a specific pattern instead of random population",
    )

    parser.add_argument(
        "--pattern-row",
        type=int,
        default=0,
        help="Row offset for pattern placement (default: 0)",
    )

    parser.add_argument(
        "--pattern-col",
        type=int,
        default=0,
        help="Column offset for pattern placement (default: 0)",
    )

    # Simulation configuration
    parser.add_argument(
        "-m",
        "--max-generations",
        type=int,
        default=10000,
        help="Maximum generations to simulate (default: 10000)",
    )

    # Output configuration
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print detailed progress information",
    )

    parser.add_argument(
        "-g",
        "--show-grid",
        action="store_true",
        help="Display initial and final grid states (small grids only)",
    )

    parser.add_argument(
        "--list-patterns",
        action="store_true",
        help="List all available patterns and exit",
    )

    return parser


def format_finish_reason(reason: str, stats: dict) -> str:
    """Format the simulation finish reason for display.

    Args:
        reason: Finish reason from Simulation.run_until_stable
        stats: Statistics dictionary

    Returns:
        Formatted reason string
    """
    if reason == "extinction":
        return "Extinction - all cells died"
    elif reason == "cycle":
        cycle_len = stats.get("cycle_length", 0)
        cycle_start = stats.get("cycle_start_generation", 0)
        if cycle_len == 1:
            return f"Still life - stable since generation {cycle_start}"
        return f"Cycle detected - length {cycle_len}, started at generation {cycle_start}"
    elif reason == "max_generations":
        return f"Maximum generations reached ({stats.get('generation', 0)})"
    else:
        return f"Unknown reason: {reason}"


def print_results(final_generation: int, reason: str, stats: dict, verbose: bool) -> None:
    """Print simulation results.

    Args:
        final_generation: Final generation number
        reason: Finish reason
        stats: Statistics dictionary
        verbose: Whether to show detailed statistics
    """
    print(f"\nSimulation completed after {final_generation} generations")
    print(f"Finish reason: {format_finish_reason(reason, stats)}")

    if verbose:
        print("\nDetailed Statistics:")
        print(f"  Grid size: {stats['grid_size'][0]}x{stats['grid_size'][1]}")
        print(f"  Initial population: {stats['initial_population']}")
        print(f"  Final population: {stats['population']}")
        print(f"  Population density: {stats['population_density']:.2%}")
        print(f"  Population change rate: {stats['population_change_rate']:.2f}")
        if "duration_seconds" in stats:
            print(f"  Duration: {stats['duration_seconds']:.3f} seconds")
            print(f"  Speed: {stats['generations_per_second']:.0f} generations/second")

        if stats["bounding_box"]:
            bbox = stats["bounding_box"]
            bbox_size = stats["bounding_box_size"]
            print(
                f"  Bounding box: ({bbox[0]}, {bbox[1]}) to ({bbox[2]}, {bbox[3]}) [{bbox_size[0]}x{bbox_size[1]}]"
            )
    else:
        print(
            "Population: {} -> {}, Duration: {:.3f}s".format(
                stats["initial_population"], stats["population"], stats.get("duration_seconds", 0)
            )
        )


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if args.steps < 0:
        errors.append("Steps must be non-negative")

    if args.input is None:
        if args.width <= 0:
            errors.append("Width must be positive")

        if args.height <= 0:
            errors.append("Height must be positive")

        if not 0.0 <= args.population <= 1.0:
            errors.append("Population rate must be between 0.0 and 1.0")

        if args.max_generations <= 0:
            errors.append("Max generations must be positive")

        if args.pattern_row < 0:
            errors.append("Pattern row offset must be non-negative")

        if args.pattern_col < 0:
            errors.append("Pattern column offset must be non-negative")

    if errors:
        out = sys.stderr if args.input is not None else sys.stdout
        print("Error: Invalid arguments:", file=out)
        for error in errors:
            print(f"  - {error}", file=out)
        return False

    return True


def read_input(path: str) -> str:
    """Read a grid payload from a file path, or stdin for '-'."""
    if path == "-":
        return sys.stdin.read()

    with open(path, "r") as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI interface.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    cli = CLIGridEvolver()

    if args.list_patterns:
        cli.list_patterns()
        return 0

    if not validate_args(args):
        return 1

    if args.input is None and args.pattern and cli.pattern_library.get_pattern(args.pattern) is None:
        available = cli.pattern_library.list_patterns()
        print(f"Error: Pattern '{args.pattern}' not found")
        print(f"Available patterns: {', '.join(available)}")
        print("Use --list-patterns to see detailed information")
        return 1

    try:
        if args.input is not None:
            payload = read_input(args.input)
            print(cli.evolve_payload(payload, args.steps, args.verbose))
            return 0

        config = SimulationConfig(
            width=args.width,
            height=args.height,
            population_rate=args.population,
            max_generations=args.max_generations,
            pattern=args.pattern,
            pattern_row=args.pattern_row,
            pattern_col=args.pattern_col,
            seed=args.seed,
        )
        final_generation, reason, stats = cli.run_simulation(
            config, verbose=args.verbose, show_grid=args.show_grid
        )

        print_results(final_generation, reason, stats, args.verbose)
        return 0

    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        return 1
    except (ValueError, TypeError, KeyError, OSError) as e:
        # Keep stdout clean for JSON output in --input mode
        out = sys.stderr if args.input is not None else sys.stdout
        print(f"Error: {e}", file=out)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
