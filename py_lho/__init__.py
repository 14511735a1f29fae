"""Loop Hero river and landscape layout optimizer."""

__version__ = "0.1.0"
