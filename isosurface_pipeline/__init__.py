"""Iso-surface extraction pipeline built on Marching Cubes 33."""

__version__ = "0.1.0"
