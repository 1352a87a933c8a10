"""Marching Cubes 33 iso-surface extraction."""

from isosurface_pipeline.extraction.errors import TopologyError, UnresolvedVertexError
from isosurface_pipeline.extraction.marching_cubes import MarchingCubes, marching_cubes

__all__ = ["MarchingCubes", "TopologyError", "UnresolvedVertexError", "marching_cubes"]
