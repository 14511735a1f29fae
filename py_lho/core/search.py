"""
Branch-and-bound search for the highest-value full grid.

The search walks every sequence of placements. At each grid state it tries,
for every linear index in ascending order, extending the river and then
placing terrain. Each successful placement is copied into a scratch grid,
undone on the working grid and recursed on. A branch is abandoned when its
current value plus the most the remaining empty tiles could add cannot beat
the incumbent.

Ties keep the first solution found: incumbents are replaced only by strictly
better grids, and enumeration order is fixed, so results are deterministic.
"""

import sys
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple, Union

import structlog

from .grid import Grid
from .heuristic import heuristic_grid
from .landscape import LandscapeSpec, TerrainFamily, get_landscape, validate_dimensions
from .scoring import max_placement_gain, score

logger = structlog.get_logger()

RECURSION_HEADROOM = 200


@dataclass
class SearchStats:
    """Counters collected during one search."""

    nodes: int = 0
    pruned: int = 0
    table_hits: int = 0
    incumbent_updates: int = 0
    max_depth: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "nodes": self.nodes,
            "pruned": self.pruned,
            "table_hits": self.table_hits,
            "incumbent_updates": self.incumbent_updates,
            "max_depth": self.max_depth,
        }


@dataclass
class SearchResult:
    """Best full grid found by a search, with its value."""

    grid: Grid
    value: int
    landscape: LandscapeSpec
    stats: SearchStats
    elapsed_seconds: float = 0.0

    @property
    def family(self) -> TerrainFamily:
        return self.landscape.family


@dataclass
class SearchFrame:
    """Reusable grids owned by one recursion depth."""

    working: Grid  # mutated and restored in place
    scratch: Grid  # handed to the next depth
    best: Grid  # best grid found at this depth


class GridPool:
    """Preallocated search frames, one per recursion depth.

    Frames are created the first time a depth is reached and reused by every
    later call at that depth, so the search allocates at most
    capacity + 1 frames in total.
    """

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        self._frames: List[SearchFrame] = []

    def frame(self, depth: int) -> SearchFrame:
        while len(self._frames) <= depth:
            self._frames.append(
                SearchFrame(
                    working=Grid.allocate(self.rows, self.cols),
                    scratch=Grid.allocate(self.rows, self.cols),
                    best=Grid.allocate(self.rows, self.cols),
                )
            )
        return self._frames[depth]

    def __len__(self) -> int:
        return len(self._frames)


@dataclass
class SearchContext:
    """State threaded through one search."""

    landscape: LandscapeSpec
    max_tile_value: int
    best_value: int = -1
    best_grid: Optional[Grid] = None
    seeded: bool = False
    use_transposition_table: bool = True
    explored: Set[Tuple[bytes, int]] = field(default_factory=set)
    stats: SearchStats = field(default_factory=SearchStats)

    def adopt(self, grid: Grid, value: int) -> None:
        """Record a new incumbent."""
        self.best_value = value
        self.best_grid = grid.clone()
        self.stats.incumbent_updates += 1


class BranchAndBoundSearch:
    """Exhaustive search with admissible-bound pruning over one grid shape."""

    def __init__(
        self,
        rows: int,
        cols: int,
        landscape: LandscapeSpec,
        use_transposition_table: bool = True,
    ):
        """
        Initialize a search.

        Args:
            rows: Grid rows
            cols: Grid columns
            landscape: Family to optimize for
            use_transposition_table: Skip states that were already fully
                explored. Scores are monotone and the incumbent never
                decreases, so a revisit can never produce a better grid.
        """
        validate_dimensions(rows, cols)
        self.rows = rows
        self.cols = cols
        self.landscape = landscape
        self.pool = GridPool(rows, cols)

        neighborhood = self.pool.frame(0).working.neighborhood
        self.context = SearchContext(
            landscape=landscape,
            max_tile_value=max_placement_gain(landscape, neighborhood),
            use_transposition_table=use_transposition_table,
        )

    def run(self) -> SearchResult:
        """Search from an empty grid and return the best full grid."""
        start = time.perf_counter()
        grid = Grid.allocate(self.rows, self.cols)

        needed = grid.capacity + RECURSION_HEADROOM
        if sys.getrecursionlimit() < needed:
            sys.setrecursionlimit(needed)

        logger.info(
            "Starting search",
            rows=self.rows,
            cols=self.cols,
            terrain=self.landscape.name,
            max_tile_value=self.context.max_tile_value,
        )

        best = self.search(grid, depth=0)
        value = score(best, self.landscape)
        elapsed = time.perf_counter() - start

        logger.info(
            "Search complete",
            value=value,
            elapsed_seconds=round(elapsed, 3),
            **self.context.stats.as_dict(),
        )
        return SearchResult(
            grid=best,
            value=value,
            landscape=self.landscape,
            stats=self.context.stats,
            elapsed_seconds=elapsed,
        )

    def _seed(self, frame: SearchFrame) -> int:
        """Score the heuristic grid and adopt it if it beats the incumbent."""
        context = self.context
        context.seeded = True

        seed = heuristic_grid(self.rows, self.cols)
        value = score(seed, self.landscape)
        logger.debug("Heuristic seed", value=value)

        if value > context.best_value:
            context.adopt(seed, value)
            frame.best.copy_from(seed)
        return context.best_value

    def search(self, grid: Grid, depth: int) -> Grid:
        """
        Fill the rest of a grid as well as possible.

        The best grid found below this state is copied into `grid`, which is
        also returned. If nothing beat the incumbent, `grid` is returned
        unchanged.

        Args:
            grid: Grid state to expand (overwritten with the result)
            depth: Recursion depth, used to pick the pooled frame

        Returns:
            The input grid object
        """
        context = self.context
        stats = context.stats
        stats.nodes += 1
        stats.max_depth = max(stats.max_depth, depth)

        if grid.is_full:
            return grid

        key = None
        if context.use_transposition_table:
            key = grid.state_key()
            if key in context.explored:
                stats.table_hits += 1
                return grid

        value = score(grid, self.landscape)
        upper_bound = value + context.max_tile_value * (grid.capacity - grid.filled_count)
        if upper_bound <= context.best_value:
            stats.pruned += 1
            return grid

        frame = self.pool.frame(depth)
        frame.best.copy_from(grid)
        current_best = context.best_value

        if not context.seeded:
            current_best = self._seed(frame)

        working = frame.working
        scratch = frame.scratch
        working.copy_from(grid)
        pending = grid.filled_count + 1

        for index in range(grid.capacity):
            if working.is_occupied(index):
                continue

            for place in (working.place_river, working.place_terrain):
                if not place(index):
                    continue

                assert working.filled_count == pending, "more than one pending placement"
                scratch.copy_from(working)
                working.remove_tile(index)

                result = self.search(scratch, depth + 1)
                value = score(result, self.landscape)
                if value > current_best:
                    current_best = value
                    frame.best.copy_from(result)
                    # Deeper levels already recorded improvements found below
                    if value > context.best_value:
                        context.adopt(result, value)

        if key is not None:
            context.explored.add(key)

        grid.copy_from(frame.best)
        return grid


def optimize(
    rows: int,
    cols: int,
    terrain: Union[str, int, TerrainFamily],
    use_transposition_table: bool = True,
) -> SearchResult:
    """
    Find the highest-value full grid for a terrain family.

    Args:
        rows: Grid rows (positive)
        cols: Grid columns (positive)
        terrain: Family member, name or numeric code
        use_transposition_table: Skip already explored states

    Returns:
        SearchResult with the best full grid and its value

    Raises:
        ConfigurationError: On invalid dimensions or an unknown family
    """
    validate_dimensions(rows, cols)
    landscape = get_landscape(terrain)
    search = BranchAndBoundSearch(
        rows, cols, landscape, use_transposition_table=use_transposition_table
    )
    return search.run()
