"""
Grid state and placement mutators.

A Grid is the mutable board the search works on. Tiles are stored as
parallel numpy arrays indexed by linear index (row-major), with adjacency
counts maintained incrementally by every placement and removal so scoring
never has to rescan neighborhoods.

The river is a single simple path grown one orthogonal step at a time from
a border cell. Only the most recent extension can be undone, which is all
the search needs: a working grid never has more than one pending placement
before it is copied for the next recursion level.
"""

from typing import List, Optional, Tuple

import numpy as np
import structlog

from .adjacency import Neighborhood, TileKind, neighborhood_for, rescan_counts
from .errors import GridInvariantError

logger = structlog.get_logger()


class Grid:
    """Rectangular board of Empty, River and Terrain tiles."""

    def __init__(self, rows: int, cols: int, neighborhood: Optional[Neighborhood] = None):
        """
        Initialize an empty grid. Prefer Grid.allocate().

        Args:
            rows: Number of rows
            cols: Number of columns
            neighborhood: Shared neighbor tables for this shape
        """
        self.rows = rows
        self.cols = cols
        self.neighborhood = neighborhood or neighborhood_for(rows, cols)
        self.capacity = rows * cols

        self.kinds = np.full(self.capacity, TileKind.EMPTY, dtype=np.int8)
        self.adjacent_rivers = np.zeros(self.capacity, dtype=np.int16)
        self.adjacent_terrain = np.zeros(self.capacity, dtype=np.int16)
        self.adjacent_terrain_diagonal = np.zeros(self.capacity, dtype=np.int16)
        self.filled_count = 0

        # River state
        self.head_index = -1
        self.previous_head_index = -1
        self.is_unstarted = True
        self._head_undo_available = False

    @classmethod
    def allocate(cls, rows: int, cols: int) -> "Grid":
        """Create a rows x cols grid with every tile Empty."""
        return cls(rows, cols)

    @property
    def is_full(self) -> bool:
        return self.filled_count == self.capacity

    def clone(self) -> "Grid":
        """Deep copy. The copy shares only the read-only neighbor tables."""
        duplicate = Grid(self.rows, self.cols, self.neighborhood)
        duplicate.copy_from(self)
        return duplicate

    def copy_from(self, other: "Grid") -> None:
        """Overwrite this grid's contents with another grid of the same shape."""
        if (other.rows, other.cols) != (self.rows, self.cols):
            raise ValueError(
                f"Cannot copy a {other.rows}x{other.cols} grid "
                f"into a {self.rows}x{self.cols} grid"
            )
        np.copyto(self.kinds, other.kinds)
        np.copyto(self.adjacent_rivers, other.adjacent_rivers)
        np.copyto(self.adjacent_terrain, other.adjacent_terrain)
        np.copyto(self.adjacent_terrain_diagonal, other.adjacent_terrain_diagonal)
        self.filled_count = other.filled_count
        self.head_index = other.head_index
        self.previous_head_index = other.previous_head_index
        self.is_unstarted = other.is_unstarted
        self._head_undo_available = other._head_undo_available

    # Index helpers

    def row_col(self, index: int) -> Tuple[int, int]:
        """Convert a linear index to (row, col)."""
        return divmod(index, self.cols)

    def in_range(self, index: int) -> bool:
        return 0 <= index < self.capacity

    def is_occupied(self, index: int) -> bool:
        """
        Check whether a tile can NOT be placed at an index.

        Returns:
            False if the index is on the grid and the tile there is Empty,
            True for out-of-range indices and non-Empty tiles
        """
        if not self.in_range(index):
            return True
        return bool(self.kinds[index] != TileKind.EMPTY)

    # Placement mutators

    def place_river(self, index: int) -> bool:
        """
        Extend the river to an index.

        A new river must start on the grid border; after that every river
        tile must be orthogonally adjacent to the current head.

        Returns:
            True if the river tile was placed, False (no mutation) otherwise
        """
        if not self.in_range(index):
            return False

        if self.is_unstarted:
            if not self.neighborhood.border[index]:
                return False
        elif not self.neighborhood.are_orthogonal(self.head_index, index):
            return False

        if self.kinds[index] != TileKind.EMPTY:
            return False

        self.kinds[index] = TileKind.RIVER
        self.filled_count += 1
        self.adjacent_rivers[self.neighborhood.orthogonal[index]] += 1

        self.previous_head_index = self.head_index
        self.head_index = index
        self.is_unstarted = False
        self._head_undo_available = True
        return True

    def place_terrain(self, index: int) -> bool:
        """
        Place a terrain tile at an index.

        Returns:
            True if placed, False (no mutation) if out of range or occupied
        """
        if self.is_occupied(index):
            return False

        self.kinds[index] = TileKind.TERRAIN
        self.filled_count += 1
        self.adjacent_terrain[self.neighborhood.orthogonal[index]] += 1
        self.adjacent_terrain_diagonal[self.neighborhood.surrounding[index]] += 1
        return True

    def remove_tile(self, index: int) -> None:
        """
        Empty a tile, undoing whichever placement created it.

        Removing the river head rolls the head back one step; removing the
        only river tile re-arms the border rule for a new river.
        Tile kinds, adjacency counts, the head and the start flag are restored
        exactly. The one-step undo history is not: after undoing a river
        extension, `previous_head_index` still points at the restored head
        and a second head removal is refused until the river is extended.

        Raises:
            GridInvariantError: If the head is removed a second time without
                an extension in between (only one step of history is kept)
        """
        if not self.in_range(index):
            return

        old_kind = self.kinds[index]
        if old_kind == TileKind.EMPTY:
            return

        if index == self.head_index:
            if not self._head_undo_available:
                raise GridInvariantError(
                    f"River head {index} has no undo history left"
                )
            self.head_index = self.previous_head_index
            self._head_undo_available = False
            if self.head_index == -1:
                self.is_unstarted = True

        self.kinds[index] = TileKind.EMPTY
        self.filled_count -= 1

        if old_kind == TileKind.RIVER:
            self.adjacent_rivers[self.neighborhood.orthogonal[index]] -= 1
        else:
            self.adjacent_terrain[self.neighborhood.orthogonal[index]] -= 1
            self.adjacent_terrain_diagonal[self.neighborhood.surrounding[index]] -= 1

    # Read-only views

    def kind_at(self, index: int) -> TileKind:
        return TileKind(int(self.kinds[index]))

    def count(self, kind: TileKind) -> int:
        return int(np.count_nonzero(self.kinds == kind))

    def rows_of_kinds(self) -> List[List[TileKind]]:
        """Tile kinds as a list of rows, for renderers and serializers."""
        return [
            [TileKind(int(code)) for code in self.kinds[r * self.cols:(r + 1) * self.cols]]
            for r in range(self.rows)
        ]

    def river_cells(self) -> List[int]:
        return [int(i) for i in np.flatnonzero(self.kinds == TileKind.RIVER)]

    def state_key(self) -> Tuple[bytes, int]:
        """Everything that determines which placements are legal from here."""
        return self.kinds.tobytes(), self.head_index

    def verify(self) -> None:
        """
        Check cached bookkeeping against a full rescan.

        Raises:
            GridInvariantError: On any mismatch
        """
        filled = int(np.count_nonzero(self.kinds != TileKind.EMPTY))
        if filled != self.filled_count:
            raise GridInvariantError(
                f"filled_count is {self.filled_count} but {filled} tiles are filled"
            )

        rivers, terrain, terrain_diagonal = rescan_counts(self.kinds, self.neighborhood)
        for name, cached, expected in (
            ("adjacent_rivers", self.adjacent_rivers, rivers),
            ("adjacent_terrain", self.adjacent_terrain, terrain),
            ("adjacent_terrain_diagonal", self.adjacent_terrain_diagonal, terrain_diagonal),
        ):
            if not np.array_equal(cached, expected):
                bad = np.flatnonzero(cached != expected).tolist()
                logger.error("Adjacency cache mismatch", counts=name, cells=bad)
                raise GridInvariantError(f"{name} cache is stale at cells {bad}")

        if (self.head_index == -1) != self.is_unstarted:
            raise GridInvariantError(
                f"River head {self.head_index} disagrees with "
                f"is_unstarted={self.is_unstarted}"
            )
        if self.head_index != -1 and self.kinds[self.head_index] != TileKind.RIVER:
            raise GridInvariantError(f"River head {self.head_index} is not a river tile")

    def __eq__(self, other) -> bool:
        # previous_head_index is one-step undo scratch, not board state
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            (self.rows, self.cols) == (other.rows, other.cols)
            and self.filled_count == other.filled_count
            and self.head_index == other.head_index
            and self.is_unstarted == other.is_unstarted
            and np.array_equal(self.kinds, other.kinds)
            and np.array_equal(self.adjacent_rivers, other.adjacent_rivers)
            and np.array_equal(self.adjacent_terrain, other.adjacent_terrain)
            and np.array_equal(
                self.adjacent_terrain_diagonal, other.adjacent_terrain_diagonal
            )
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"Grid({self.rows}x{self.cols}, filled={self.filled_count}, "
            f"head={self.head_index})"
        )
