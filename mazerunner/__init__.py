"""Decode PNG maze images, find a path through them and draw it."""

__version__ = "0.1.0"