"""Multi-generation Game of Life simulation built on the grid evolver."""

from typing import Deque, Dict, Optional, Tuple
from collections import deque
from dataclasses import dataclass
import numpy as np

from .evolver import compute_next
from .grid import Grid, GridShapeError
from .patterns import PatternLibrary

STATE_HISTORY_LIMIT = 1000


@dataclass
class SimulationConfig:
    """Configuration for a simulation run."""
    width: int = 50
    height: int = 50
    population_rate: float = 0.1
    max_generations: int = 10000
    pattern: Optional[str] = None
    pattern_row: int = 0
    pattern_col: int = 0
    seed: Optional[int] = None


class Simulation:
    """Drives a grid through successive generations.

    Each step re-invokes compute_next on the previous generation's grid.
    Tracks generation count, recent population and previously seen states
    so that cycles (including still lifes, period 1) can be detected.
    """

    def __init__(self, grid: Grid) -> None:
        """Initialize the simulation with a starting grid.

        Args:
            grid: Generation 0
        """
        self.grid = grid
        self._generation = 0
        self._population_history: Deque[int] = deque(maxlen=100)
        self._state_history: Deque[bytes] = deque()
        self._seen_states: Dict[bytes, int] = {}
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._update_population_history()
        self._record_state()

    @classmethod
    def from_config(cls, config: SimulationConfig, library: Optional[PatternLibrary] = None) -> "Simulation":
        """Create a simulation from a configuration.

        Places the named pattern at the configured offset, or fills the grid
        randomly when no pattern is given.

        Raises:
            KeyError: If the named pattern is not in the library
        """
        if config.pattern:
            library = library or PatternLibrary()
            pattern = library.get_pattern(config.pattern)
            if pattern is None:
                raise KeyError(f"Pattern '{config.pattern}' not found")
            grid = pattern.place(config.height, config.width, config.pattern_row, config.pattern_col)
        else:
            grid = Grid.random(config.height, config.width, config.population_rate, config.seed)

        return cls(grid)

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.grid.population

    @property
    def population_history(self) -> list:
        """History of population counts."""
        return list(self._population_history)

    @property
    def cycle_detected(self) -> bool:
        """Whether a cycle has been detected."""
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of detected cycle (0 if no cycle)."""
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        """Generation where cycle started (0 if no cycle)."""
        return self._cycle_start_generation

    def step(self) -> Grid:
        """Advance the simulation by one generation.

        Returns:
            The new current grid
        """
        self.grid = compute_next(self.grid)
        self._generation += 1
        self._update_population_history()
        self._record_state()
        return self.grid

    def run(self, generations: int) -> Grid:
        """Advance a fixed number of generations and return the final grid."""
        for _ in range(generations):
            self.step()
        return self.grid

    def _update_population_history(self) -> None:
        self._population_history.append(self.population)

    def _record_state(self) -> None:
        """Record the current state, flagging a cycle if it was seen before."""
        if self._cycle_detected:
            return

        current_state = self.grid.to_bytes()

        if current_state in self._seen_states:
            first_occurrence = self._seen_states[current_state]
            self._cycle_detected = True
            self._cycle_length = self._generation - first_occurrence
            self._cycle_start_generation = first_occurrence
            return

        # Forget the oldest state to bound memory
        if len(self._state_history) >= STATE_HISTORY_LIMIT:
            oldest = self._state_history.popleft()
            del self._seen_states[oldest]

        self._seen_states[current_state] = self._generation
        self._state_history.append(current_state)

    def _clear_tracking(self) -> None:
        self._population_history.clear()
        self._state_history.clear()
        self._seen_states.clear()
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

    def reset(self, grid: Optional[Grid] = None) -> None:
        """Reset the simulation to generation 0.

        Args:
            grid: Optional new starting grid; keeps the current grid if omitted
        """
        if grid is not None:
            self.grid = grid

        self._generation = 0
        self._clear_tracking()
        self._update_population_history()
        self._record_state()

    def run_until_stable(self, max_generations: int = 10000) -> Tuple[int, str]:
        """Run simulation until it dies out, cycles or hits the generation limit.

        Args:
            max_generations: Maximum generations to run

        Returns:
            Tuple of (final_generation, reason) where reason is one of:
            'cycle', 'extinction', 'max_generations'
        """
        for _ in range(max_generations):
            self.step()

            if self.population == 0:
                return self._generation, "extinction"

            if self._cycle_detected:
                return self._generation, "cycle"

        return self._generation, "max_generations"

    def get_population_change_rate(self, window_size: int = 10) -> float:
        """Calculate recent population change rate.

        Args:
            window_size: Number of recent generations to consider

        Returns:
            Average population change per generation
        """
        recent_history = list(self._population_history)[-window_size:]
        if len(recent_history) < 2:
            return 0.0

        changes = np.diff(recent_history)
        return float(np.mean(changes))

    def save_state(self) -> Dict:
        """Save the simulation state as a plain dictionary.

        Seen-state tracking is not included; cycle detection restarts
        from the loaded grid.
        """
        return {
            "generation": self._generation,
            "grid": self.grid.to_rows(),
            "height": self.grid.height,
            "width": self.grid.width,
            "population_history": list(self._population_history),
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
        }

    def load_state(self, state: Dict) -> None:
        """Load simulation state produced by save_state().

        Raises:
            GridShapeError: If the grid rows are malformed or disagree with
                the recorded dimensions
        """
        grid = Grid.from_rows(state["grid"])
        height, width = state.get("height", grid.height), state.get("width", grid.width)
        # No rows carry no width: a 0xW grid saves as []
        if grid.shape == (0, 0) and height == 0:
            grid = Grid(0, width)
        elif grid.shape != (height, width):
            raise GridShapeError(f"Saved grid shape {grid.shape} doesn't match {(height, width)}")

        self.grid = grid
        self._clear_tracking()
        self._generation = state["generation"]
        self._population_history.extend(state["population_history"])
        self._cycle_detected = state["cycle_detected"]
        self._cycle_length = state["cycle_length"]
        self._cycle_start_generation = state["cycle_start_generation"]
        self._record_state()

    def get_statistics(self) -> Dict:
        """Get comprehensive simulation statistics."""
        bbox = self.grid.get_bounding_box()
        area = self.grid.height * self.grid.width

        stats = {
            "generation": self._generation,
            "population": self.population,
            "population_change_rate": self.get_population_change_rate(),
            "population_history": list(self._population_history),
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "grid_size": self.grid.shape,
            "population_density": self.population / area if area else 0.0,
        }

        if bbox:
            stats["bounding_box"] = bbox
            box_height = bbox[2] - bbox[0] + 1
            box_width = bbox[3] - bbox[1] + 1
            stats["bounding_box_size"] = (box_height, box_width)
            stats["bounding_box_area"] = box_height * box_width
        else:
            stats["bounding_box"] = None
            stats["bounding_box_size"] = (0, 0)
            stats["bounding_box_area"] = 0

        return stats
