"""
Landscape (terrain family) definitions.

Each run optimizes a single family of Loop Hero landscape tiles. The family
fixes the base value of a tile and the label used when rendering a board.
The value rule for each family lives in scoring.py.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Tuple, Union

from .errors import ConfigurationError


class TerrainFamily(IntEnum):
    """Landscape families, numbered as in the interactive input menu."""

    MEADOW = 0
    THICKET = 1
    MOUNTAIN = 2
    SUBURB = 3


@dataclass(frozen=True)
class LandscapeSpec:
    """Immutable configuration for one terrain family."""

    family: TerrainFamily
    base_value: int
    label: str

    @property
    def name(self) -> str:
        return self.family.name.lower()


# Assumes the upgraded tiles (blooming meadows, thickets, mountains)
LANDSCAPES: Dict[TerrainFamily, LandscapeSpec] = {
    TerrainFamily.MEADOW: LandscapeSpec(TerrainFamily.MEADOW, 3, "M"),
    TerrainFamily.THICKET: LandscapeSpec(TerrainFamily.THICKET, 2, "T"),
    TerrainFamily.MOUNTAIN: LandscapeSpec(TerrainFamily.MOUNTAIN, 6, "^"),
    TerrainFamily.SUBURB: LandscapeSpec(TerrainFamily.SUBURB, 1, "S"),
}


def parse_family(value: Union[str, int, TerrainFamily]) -> TerrainFamily:
    """
    Resolve a terrain family from a name or the numeric menu code.

    Args:
        value: Family member, name ("meadow", case-insensitive) or code (0-3)

    Returns:
        The matching TerrainFamily

    Raises:
        ConfigurationError: If the value names no known family
    """
    if isinstance(value, TerrainFamily):
        return value

    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return TerrainFamily(value)
        except ValueError:
            raise ConfigurationError(f"Unknown terrain family code: {value}") from None

    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return parse_family(int(text))
        try:
            return TerrainFamily[text.upper()]
        except KeyError:
            raise ConfigurationError(f"Unknown terrain family: {value!r}") from None

    raise ConfigurationError(f"Unknown terrain family: {value!r}")


def get_landscape(value: Union[str, int, TerrainFamily]) -> LandscapeSpec:
    """Look up the LandscapeSpec for a family name, code or member."""
    return LANDSCAPES[parse_family(value)]


def validate_dimensions(rows: int, cols: int) -> Tuple[int, int]:
    """
    Check that grid dimensions are positive integers.

    Raises:
        ConfigurationError: On non-integer or non-positive dimensions
    """
    for label, value in (("rows", rows), ("cols", cols)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"{label} must be an integer, got {value!r}")
        if value < 1:
            raise ConfigurationError(f"{label} must be positive, got {value}")
    return rows, cols
