"""contactctl — local contact manager with duplicate detection and merging."""

__version__ = "0.1.0"
