"""
Text rendering of finished grids.

Boards are drawn as ASCII tables:

      -------------
      | R | M | M |
      -------------
      | M | R | R |
      -------------
"""

from typing import List

from .core.adjacency import TileKind
from .core.grid import Grid
from .core.landscape import LandscapeSpec
from .core.scoring import tile_values
from .core.search import SearchResult

RIVER_LABEL = "R"


def cell_label(kind: TileKind, landscape: LandscapeSpec) -> str:
    """Single-character label for a tile kind."""
    if kind == TileKind.RIVER:
        return RIVER_LABEL
    if kind == TileKind.TERRAIN:
        return landscape.label
    return " "


def render_grid(grid: Grid, landscape: LandscapeSpec, indent: str = "  ") -> str:
    """
    Draw a grid as an ASCII board.

    Args:
        grid: Grid to draw (may be partial; empty tiles are blank)
        landscape: Family whose label marks terrain tiles
        indent: Prefix for every line

    Returns:
        Multi-line string without a trailing newline
    """
    rule = indent + "----" * grid.cols + "-"
    lines = [rule]
    for row in grid.rows_of_kinds():
        cells = "".join(f"| {cell_label(kind, landscape)} " for kind in row)
        lines.append(f"{indent}{cells}|")
        lines.append(rule)
    return "\n".join(lines)


def render_values(grid: Grid, landscape: LandscapeSpec, indent: str = "  ") -> str:
    """Draw the per-tile value of every terrain tile, rivers as R."""
    values = tile_values(grid, landscape).reshape(grid.rows, grid.cols)
    kinds = grid.kinds.reshape(grid.rows, grid.cols)
    width = max(3, len(str(int(values.max()))))

    lines = []
    for value_row, kind_row in zip(values, kinds):
        cells: List[str] = []
        for value, kind in zip(value_row, kind_row):
            if kind == TileKind.TERRAIN:
                cells.append(str(int(value)).rjust(width))
            elif kind == TileKind.RIVER:
                cells.append(RIVER_LABEL.rjust(width))
            else:
                cells.append(" " * width)
        lines.append(indent + " ".join(cells))
    return "\n".join(lines)


def render_result(result: SearchResult, show_values: bool = False) -> str:
    """Board, optional value overlay and total value of a search result."""
    parts = [render_grid(result.grid, result.landscape)]
    if show_values:
        parts.append(render_values(result.grid, result.landscape))
    parts.append(f"  Value of grid: {result.value}")
    return "\n\n".join(parts)


def layout_names(grid: Grid) -> List[List[str]]:
    """Tile kinds as lowercase names, row by row."""
    return [[kind.name.lower() for kind in row] for row in grid.rows_of_kinds()]

