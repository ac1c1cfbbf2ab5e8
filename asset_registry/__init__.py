"""Asset record store with duplicate detection and soft deletion."""

__version__ = "0.1.0"
