"""
Neighborhood tables and adjacency counting for rectangular tile grids.

Tiles are addressed by linear index in row-major order:

     0 |  1 |  2 |  3
     4 |  5 |  6 |  7
     8 |  9 | 10 | 11 ...

River adjacency and most terrain adjacency use the orthogonal
4-neighborhood. Mountain terrain adjacency uses the 8-neighborhood, which
adds the four diagonal cells.
"""

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from typing import List, Tuple

import numpy as np

ORTHOGONAL_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONAL_OFFSETS = ((-1, -1), (-1, 1), (1, -1), (1, 1))


class TileKind(IntEnum):
    """Content of a single tile, stored as int8 codes in Grid.kinds."""

    EMPTY = -1
    RIVER = 0
    TERRAIN = 1


def _neighbors(rows: int, cols: int, index: int, offsets) -> np.ndarray:
    row, col = divmod(index, cols)
    cells = [
        (row + dr) * cols + (col + dc)
        for dr, dc in offsets
        if 0 <= row + dr < rows and 0 <= col + dc < cols
    ]
    return np.array(cells, dtype=np.intp)


@dataclass(frozen=True)
class Neighborhood:
    """Precomputed neighbor indices for one grid shape.

    Shared by every grid of the same shape, so clones copy only tile data.
    """

    rows: int
    cols: int
    orthogonal: Tuple[np.ndarray, ...]  # 4-neighborhood per linear index
    surrounding: Tuple[np.ndarray, ...]  # 8-neighborhood per linear index
    border: np.ndarray  # True where the cell touches the grid edge

    def are_orthogonal(self, a: int, b: int) -> bool:
        """True if two in-range indices are 4-neighbors."""
        row_a, col_a = divmod(a, self.cols)
        row_b, col_b = divmod(b, self.cols)
        return abs(row_a - row_b) + abs(col_a - col_b) == 1


@lru_cache(maxsize=64)
def neighborhood_for(rows: int, cols: int) -> Neighborhood:
    """Build (or reuse) the neighbor tables for a rows x cols grid."""
    capacity = rows * cols
    orthogonal = tuple(
        _neighbors(rows, cols, i, ORTHOGONAL_OFFSETS) for i in range(capacity)
    )
    surrounding = tuple(
        _neighbors(rows, cols, i, ORTHOGONAL_OFFSETS + DIAGONAL_OFFSETS)
        for i in range(capacity)
    )

    border = np.zeros(capacity, dtype=bool)
    for i in range(capacity):
        row, col = divmod(i, cols)
        border[i] = row == 0 or col == 0 or row == rows - 1 or col == cols - 1

    for table in (orthogonal, surrounding):
        for cells in table:
            cells.flags.writeable = False
    border.flags.writeable = False

    return Neighborhood(rows, cols, orthogonal, surrounding, border)


def rescan_counts(
    kinds: np.ndarray, neighborhood: Neighborhood
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Recompute adjacency counts from tile kinds alone.

    Args:
        kinds: Tile kind per linear index
        neighborhood: Neighbor tables for the grid shape

    Returns:
        (adjacent rivers, adjacent terrain, adjacent terrain incl. diagonals)
    """
    is_river = kinds == TileKind.RIVER
    is_terrain = kinds == TileKind.TERRAIN

    rivers = np.array(
        [is_river[cells].sum() for cells in neighborhood.orthogonal], dtype=np.int16
    )
    terrain = np.array(
        [is_terrain[cells].sum() for cells in neighborhood.orthogonal], dtype=np.int16
    )
    terrain_diagonal = np.array(
        [is_terrain[cells].sum() for cells in neighborhood.surrounding],
        dtype=np.int16,
    )
    return rivers, terrain, terrain_diagonal


def degree_table(neighborhood: Neighborhood) -> List[Tuple[int, int]]:
    """(4-neighbor count, 8-neighbor count) for every cell."""
    return [
        (len(orth), len(around))
        for orth, around in zip(neighborhood.orthogonal, neighborhood.surrounding)
    ]
