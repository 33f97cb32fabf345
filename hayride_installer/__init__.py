"""Hayride installer — sets up the Hayride platform under ~/.hayride."""

__version__ = "0.1.0"
