#!/usr/bin/env python3
"""
Example usage of the lifegrid package.
"""

from lifegrid import Grid, PatternLibrary, Simulation, compute_next, decode_grid, encode_grid


def main():
    """Demonstrate programmatic usage of the lifegrid package."""
    # One step from a JSON request body
    request = '{"grid": [[false, true, false], [false, true, false], [false, true, false]]}'
    print("Next generation:", encode_grid(compute_next(decode_grid(request))))
    print()

    # Place a glider and drive it through several generations
    library = PatternLibrary()
    glider = library.get_pattern("Glider")
    simulation = Simulation(glider.place(12, 12, row_offset=2, col_offset=2))

    print("Initial state:")
    print(simulation.grid)
    print(f"Population: {simulation.population}")
    print()

    for _ in range(8):
        simulation.step()
        print(f"Generation {simulation.generation}:")
        print(simulation.grid)
        print(f"Population: {simulation.population}")

        if simulation.cycle_detected:
            print(f"Cycle detected! Length: {simulation.cycle_length}")
            break

        print()

    stats = simulation.get_statistics()
    print("Final statistics:")
    for key, value in stats.items():
        print(f"  {key}: {value}")

    # Grids are plain values; building one by hand
    grid = Grid.from_rows([[True, True], [True, True]])
    print("\nBlock is a still life:", compute_next(grid) == grid)


if __name__ == "__main__":
    main()
