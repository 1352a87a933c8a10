"""Marching Cubes 33 driver."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

import numpy as np

from isosurface_pipeline.extraction.classifier import cell_sign_masks
from isosurface_pipeline.extraction.context import RunContext, check_grid
from isosurface_pipeline.extraction.intersection import compute_intersections
from isosurface_pipeline.extraction.store import ALLOC_SIZE
from isosurface_pipeline.extraction.tables import LookupTables
from isosurface_pipeline.extraction.triangulation import process_cube
from isosurface_pipeline.utils.logging import get_logger, log_duration
from isosurface_pipeline.utils.types import Mesh

logger = get_logger("extraction.marching_cubes")


class MarchingCubes:
    """Extract a triangulated iso-surface from a dense scalar grid.

    The grid is indexed ``[i, j, k]`` with shape ``(size_x, size_y,
    size_z)``. Output positions are in grid-index space.

    Args:
        data: Sample grid.
        classic: Use the single non-disambiguated table. Faster, but cells
            in ambiguous cases may leave cracks in the surface.
        initial_capacity: Initial vertex and triangle allocation.
        tables: Lookup tables; the shared ones when omitted.
    """

    def __init__(
        self,
        data: np.ndarray,
        classic: bool = False,
        initial_capacity: int = ALLOC_SIZE,
        tables: Optional[LookupTables] = None,
    ):
        self.data = check_grid(data)
        self.classic = classic
        self.initial_capacity = initial_capacity
        self.tables = tables
        self.context: Optional[RunContext] = None

    @property
    def size(self) -> Tuple[int, int, int]:
        return self.data.shape

    @property
    def nverts(self) -> int:
        return self.context.store.nverts if self.context else 0

    @property
    def ntrigs(self) -> int:
        return self.context.store.ntrigs if self.context else 0

    @property
    def tiling_counts(self) -> Dict[str, int]:
        return dict(self.context.tiling_counts) if self.context else {}

    def run(self, iso: float = 0.0) -> Mesh:
        """Extract the surface ``sample == iso``.

        Each call starts from a fresh cache and store; the previous run's
        context is replaced.

        Raises:
            TopologyError: If a cell resolves outside the lookup tables.
        """
        mode = "classic" if self.classic else "disambiguated"
        logger.info("Extracting iso=%g from grid %s (%s mode)", iso, self.size, mode)
        ctx = RunContext.create(
            self.data,
            iso=iso,
            classic=self.classic,
            initial_capacity=self.initial_capacity,
            tables=self.tables,
        )
        self.context = ctx

        with log_duration(logger, "Intersection pass", logging.DEBUG):
            compute_intersections(ctx)

        with log_duration(logger, "Triangulation pass", logging.DEBUG):
            masks = cell_sign_masks(ctx.values)
            active = (masks != 0) & (masks != 255)
            # transpose so that nonzero walks k outermost and i innermost
            ks, js, is_ = np.nonzero(active.T)
            for i, j, k in zip(is_.tolist(), js.tolist(), ks.tolist()):
                process_cube(ctx, i, j, k)

        logger.info("Extracted %d vertices, %d triangles", ctx.store.nverts, ctx.store.ntrigs)
        logger.debug("Tilings used: %s", dict(sorted(ctx.tiling_counts.items())))

        mesh = ctx.store.to_mesh()
        mesh.tiling_counts = dict(ctx.tiling_counts)
        return mesh


def marching_cubes(
    data: np.ndarray,
    iso: float = 0.0,
    classic: bool = False,
    initial_capacity: int = ALLOC_SIZE,
) -> Mesh:
    """One-shot helper around :class:`MarchingCubes`."""
    return MarchingCubes(data, classic=classic, initial_capacity=initial_capacity).run(iso)
