"""Shared test fixtures for the isosurface pipeline."""

from __future__ import annotations

import numpy as np
import pytest

from isosurface_pipeline.extraction.classifier import CORNER_OFFSETS
from isosurface_pipeline.extraction.tables import get_tables
from isosurface_pipeline.fields.grid import ScalarGrid
from isosurface_pipeline.fields.implicit import sphere
from isosurface_pipeline.utils.config import (
    ExportConfig,
    GridConfig,
    LoggingConfig,
    PipelineConfig,
)
from isosurface_pipeline.utils.types import Mesh


def _cube_grid(mask: int, magnitudes=None) -> np.ndarray:
    """2x2x2 grid whose single cell has the given sign mask.

    Corner p is positive iff bit p of ``mask`` is set; ``magnitudes``
    (8 positive values) default to 1.
    """
    if magnitudes is None:
        magnitudes = np.ones(8)
    data = np.zeros((2, 2, 2))
    for p, offset in enumerate(CORNER_OFFSETS):
        sign = 1.0 if mask >> p & 1 else -1.0
        data[offset] = sign * magnitudes[p]
    return data


@pytest.fixture
def cube_grid():
    """Factory for single-cell grids with a chosen sign mask."""
    return _cube_grid


@pytest.fixture
def tables():
    return get_tables()


@pytest.fixture
def rng():
    return np.random.RandomState(1234)


@pytest.fixture
def sphere_grid():
    """Sphere of radius 0.7 sampled on a 24^3 grid over [-1, 1]^3."""
    return ScalarGrid.from_function(sphere, (24, 24, 24))


@pytest.fixture
def tetrahedron():
    """Closed, consistently oriented tetrahedron."""
    vertices = np.array(
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]
    )
    faces = np.array([[0, 2, 1], [0, 1, 3], [1, 2, 3], [0, 3, 2]])
    return Mesh(vertices=vertices, normals=vertices.copy(), faces=faces)


@pytest.fixture
def pipeline_config(tmp_path):
    """Small implicit-sphere config writing into tmp_path."""
    return PipelineConfig(
        grid=GridConfig(size=(16, 16, 16)),
        export=ExportConfig(
            formats=["ply", "obj", "iso", "csv", "json"],
            output_dir=str(tmp_path / "output"),
        ),
        logging=LoggingConfig(level="WARNING", file="", console=False),
    )
