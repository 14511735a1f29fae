"""
Core optimization functionality.
"""

from .adjacency import Neighborhood, TileKind, neighborhood_for
from .errors import ConfigurationError, GridInvariantError
from .grid import Grid
from .heuristic import heuristic_grid, zigzag_path
from .landscape import (
    LANDSCAPES,
    LandscapeSpec,
    TerrainFamily,
    get_landscape,
    parse_family,
    validate_dimensions,
)
from .scoring import max_placement_gain, score, tile_values
from .search import BranchAndBoundSearch, SearchResult, SearchStats, optimize

__all__ = ['Neighborhood', 'TileKind', 'neighborhood_for',
           'ConfigurationError', 'GridInvariantError', 'Grid',
           'heuristic_grid', 'zigzag_path',
           'LANDSCAPES', 'LandscapeSpec', 'TerrainFamily', 'get_landscape',
           'parse_family', 'validate_dimensions',
           'max_placement_gain', 'score', 'tile_values',
           'BranchAndBoundSearch', 'SearchResult', 'SearchStats', 'optimize']
