"""Scalar field sources."""

from isosurface_pipeline.fields.grid import ScalarGrid
from isosurface_pipeline.fields.implicit import SURFACE_REGISTRY, get_surface

__all__ = ["SURFACE_REGISTRY", "ScalarGrid", "get_surface"]
