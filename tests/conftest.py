"""Shared fixtures: independent reference implementations used as oracles."""

import random
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from py_lho.core import Grid, LandscapeSpec, TileKind, get_landscape, score


def rescan_score(grid: Grid, spec: LandscapeSpec, order: Optional[List[int]] = None) -> int:
    """Score a grid by scanning neighbors directly, without the adjacency caches."""
    rows, cols = grid.rows, grid.cols
    base = spec.base_value
    cells = order if order is not None else list(range(grid.capacity))
    total = 0

    for index in cells:
        if grid.kinds[index] != TileKind.TERRAIN:
            continue
        row, col = divmod(index, cols)
        rivers = terrain = around = 0
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                r, c = row + dr, col + dc
                if not (0 <= r < rows and 0 <= c < cols):
                    continue
                kind = grid.kinds[r * cols + c]
                orthogonal = dr == 0 or dc == 0
                if kind == TileKind.TERRAIN:
                    around += 1
                    if orthogonal:
                        terrain += 1
                elif kind == TileKind.RIVER and orthogonal:
                    rivers += 1

        name = spec.name
        if name in ("meadow", "thicket"):
            total += base if rivers == 0 else 2 * base * rivers
        elif name == "suburb":
            if terrain == 4:
                total += 2 * base
            elif rivers != 0:
                total += 2 * base * rivers
            else:
                total += base
        else:
            total += around * base + around * rivers * base

    return total


def best_completion(grid: Grid, spec: LandscapeSpec) -> int:
    """Exhaustive best full-grid value reachable from a grid state."""
    memo: Dict[Tuple[bytes, int], int] = {}

    def explore(state: Grid) -> int:
        if state.is_full:
            return score(state, spec)
        key = state.state_key()
        if key in memo:
            return memo[key]
        best = -1
        for index in range(state.capacity):
            if state.is_occupied(index):
                continue
            for place in ("place_river", "place_terrain"):
                child = state.clone()
                if getattr(child, place)(index):
                    best = max(best, explore(child))
        memo[key] = best
        return best

    return explore(grid.clone())


def enumerate_layouts(rows: int, cols: int) -> List[Grid]:
    """Every full grid the mutators can build: one simple river path (or none), terrain elsewhere."""
    layouts = []

    def fill(grid: Grid) -> Grid:
        full = grid.clone()
        for index in range(full.capacity):
            if not full.is_occupied(index):
                full.place_terrain(index)
        return full

    def extend(grid: Grid) -> None:
        layouts.append(fill(grid))
        for index in range(grid.capacity):
            child = grid.clone()
            if child.place_river(index):
                extend(child)

    extend(Grid.allocate(rows, cols))
    return layouts


@pytest.fixture
def reference_score() -> Callable:
    return rescan_score


@pytest.fixture
def reference_optimum() -> Callable[[int, int, str], int]:
    def optimum(rows: int, cols: int, terrain: str) -> int:
        spec = get_landscape(terrain)
        return max(score(layout, spec) for layout in enumerate_layouts(rows, cols))

    return optimum


@pytest.fixture
def completion_oracle() -> Callable:
    return best_completion


@pytest.fixture
def rng() -> random.Random:
    return random.Random(20210304)


def random_walk(grid: Grid, rng: random.Random, steps: int) -> List[Tuple[str, int, bool]]:
    """Apply random placements and single-step removals, verifying after each call."""
    history = []
    placed: List[int] = []
    for _ in range(steps):
        roll = rng.random()
        index = rng.randrange(-1, grid.capacity + 1)
        if roll < 0.35:
            ok = grid.place_river(index)
            history.append(("river", index, ok))
            if ok:
                placed.append(index)
        elif roll < 0.75:
            ok = grid.place_terrain(index)
            history.append(("terrain", index, ok))
            if ok:
                placed.append(index)
        elif placed:
            last = placed.pop()
            grid.remove_tile(last)
            history.append(("remove", last, True))
            # Only one step of river history exists; stop undoing past it
            placed = [i for i in placed if grid.kinds[i] != TileKind.RIVER]
        grid.verify()
    return history


@pytest.fixture
def walker() -> Callable:
    return random_walk
