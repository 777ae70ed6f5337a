"""Basins of attraction of Newton's method for cubics with explicit roots."""
__version__ = "1.0.0"
