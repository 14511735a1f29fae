"""Exceptions raised by the optimizer core."""


class ConfigurationError(ValueError):
    """Invalid grid dimensions or an unrecognised terrain family."""


class GridInvariantError(RuntimeError):
    """Grid bookkeeping no longer matches the tiles it describes."""
