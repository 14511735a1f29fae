"""
Value functions for each landscape family.

Only terrain tiles contribute value. Contributions are computed from the
grid's cached adjacency counts:

- Meadow / Thicket: base value with no adjacent river, otherwise
  2 * base per adjacent river tile.
- Suburb: 2 * base when surrounded by terrain on all four sides, otherwise
  as Meadow.
- Mountain: t * base + t * r * base, where t counts terrain in the
  8-neighborhood and r counts rivers in the 4-neighborhood.

All rules are monotone: placing a tile on an empty cell never lowers the
value of the grid.
"""

import numpy as np

from .adjacency import Neighborhood, TileKind, degree_table
from .grid import Grid
from .landscape import LandscapeSpec, TerrainFamily


def _meadow_thicket_values(grid: Grid, base: int) -> np.ndarray:
    rivers = grid.adjacent_rivers.astype(np.int64)
    return np.where(rivers == 0, base, 2 * base * rivers)


def _suburb_values(grid: Grid, base: int) -> np.ndarray:
    rivers = grid.adjacent_rivers.astype(np.int64)
    surrounded = grid.adjacent_terrain == 4
    return np.where(
        surrounded, 2 * base, np.where(rivers != 0, 2 * base * rivers, base)
    )


def _mountain_values(grid: Grid, base: int) -> np.ndarray:
    rivers = grid.adjacent_rivers.astype(np.int64)
    mountains = grid.adjacent_terrain_diagonal.astype(np.int64)
    return mountains * base + mountains * rivers * base


_VALUE_RULES = {
    TerrainFamily.MEADOW: _meadow_thicket_values,
    TerrainFamily.THICKET: _meadow_thicket_values,
    TerrainFamily.SUBURB: _suburb_values,
    TerrainFamily.MOUNTAIN: _mountain_values,
}


def tile_values(grid: Grid, spec: LandscapeSpec) -> np.ndarray:
    """
    Per-tile value contributions.

    Args:
        grid: Grid to evaluate
        spec: Active landscape family

    Returns:
        int64 array indexed by linear index; zero for river and empty tiles
    """
    values = _VALUE_RULES[spec.family](grid, spec.base_value)
    return np.where(grid.kinds == TileKind.TERRAIN, values, 0)


def score(grid: Grid, spec: LandscapeSpec) -> int:
    """Total value of a (possibly partial) grid."""
    return int(tile_values(grid, spec).sum())


def _mountain_gain(neighborhood: Neighborhood, base: int) -> int:
    degrees = degree_table(neighborhood)
    best = 0

    for cell, (d4, d8) in enumerate(degrees):
        # Own value: t <= d8 - r since rivers take up orthogonal slots
        own = max((d8 - r) * (1 + r) for r in range(d4 + 1))

        # Each terrain neighbor gains base * (1 + its river count)
        orthogonal = set(neighborhood.orthogonal[cell].tolist())
        boosted = 0
        for other in neighborhood.surrounding[cell].tolist():
            other_d4 = degrees[other][0]
            boosted += 1 + other_d4 - (1 if other in orthogonal else 0)
        terrain_gain = own + boosted

        # A river adds t to every orthogonal terrain neighbor, t <= d8 - 1
        river_gain = sum(degrees[other][1] - 1 for other in orthogonal)

        best = max(best, terrain_gain, river_gain)

    return best * base


def max_placement_gain(spec: LandscapeSpec, neighborhood: Neighborhood) -> int:
    """
    Upper bound on how much a single placement can raise the grid value.

    The bound covers the new tile's own contribution plus what it adds to
    tiles already on the board, so score + gain * empty_cells never falls
    below the best value reachable from a partial grid.

    Args:
        spec: Active landscape family
        neighborhood: Neighbor tables for the grid shape

    Returns:
        Maximum value one placement can add on this grid shape
    """
    base = spec.base_value
    if spec.family == TerrainFamily.MOUNTAIN:
        return _mountain_gain(neighborhood, base)

    max_degree = max(len(cells) for cells in neighborhood.orthogonal)
    # Meadow/Thicket/Suburb: at most 2 * base per river neighbor, and a
    # suburb completing its neighbors' surround adds base each
    return max(base, 2 * base * max_degree)
