#!/usr/bin/env python3
"""Command line entry point: read a grid description, optimize, print the board."""

import argparse
import json
import sys
from typing import Callable, List, Optional

import structlog

from .config import settings
from .core.errors import ConfigurationError
from .core.landscape import get_landscape, validate_dimensions
from .core.search import optimize
from .render import layout_names, render_result
from .utils.logging import configure_logging

logger = structlog.get_logger()

FAMILY_MENU = "(0 = meadow, 1 = thicket, 2 = mountain, 3 = suburb)"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-lho",
        description="Find the highest-value river and landscape layout for a Loop Hero grid",
    )
    parser.add_argument("--rows", type=int, help="Number of rows (prompted if omitted)")
    parser.add_argument("--cols", type=int, help="Number of columns (prompted if omitted)")
    parser.add_argument(
        "--terrain",
        help=f"Landscape family name or code {FAMILY_MENU} (prompted if omitted)",
    )
    parser.add_argument(
        "--no-table",
        action="store_true",
        help="Disable the explored-state table (slower, same result)",
    )
    parser.add_argument("--values", action="store_true", help="Also print per-tile values")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    return parser


def _prompt_int(question: str, ask: Callable[[str], str]) -> int:
    answer = ask(f" {question}\n  ").strip()
    try:
        return int(answer)
    except ValueError:
        raise ConfigurationError(f"Expected a whole number, got {answer!r}") from None


def main(argv: Optional[List[str]] = None, ask: Callable[[str], str] = input) -> int:
    """
    Run the optimizer from the command line.

    Args:
        argv: Arguments (defaults to sys.argv[1:])
        ask: Prompt function used for missing arguments

    Returns:
        Process exit status: 0 on success, 2 on invalid configuration
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or settings.log_level, settings.log_format)

    try:
        if args.rows is None or args.cols is None or args.terrain is None:
            print(" Enter information about the grid to optimize...\n")
        rows = args.rows if args.rows is not None else _prompt_int("How many rows?", ask)
        cols = args.cols if args.cols is not None else _prompt_int("How many columns?", ask)
        terrain = args.terrain
        if terrain is None:
            terrain = ask(f" What type of landscape tile?\n {FAMILY_MENU}:\n  ").strip()

        validate_dimensions(rows, cols)
        landscape = get_landscape(terrain)
        if rows * cols > settings.max_cells:
            raise ConfigurationError(
                f"A {rows}x{cols} grid has {rows * cols} tiles; "
                f"the limit is {settings.max_cells} (LHO_MAX_CELLS)"
            )
    except ConfigurationError as e:
        logger.error("Invalid configuration", error=str(e))
        print(f" Error: {e}", file=sys.stderr)
        return 2

    if not args.json:
        print("\n starting recursion...")
    result = optimize(
        rows,
        cols,
        landscape.family,
        use_transposition_table=settings.use_transposition_table and not args.no_table,
    )

    if args.json:
        print(json.dumps({
            "rows": rows,
            "cols": cols,
            "terrain": landscape.name,
            "value": result.value,
            "layout": layout_names(result.grid),
            "stats": result.stats.as_dict(),
        }, indent=2))
    else:
        print()
        print(render_result(result, show_values=args.values))

    return 0


if __name__ == "__main__":
    sys.exit(main())
