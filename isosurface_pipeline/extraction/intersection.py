"""First pass: one vertex per sign-changing grid edge."""

from __future__ import annotations

import numpy as np

from isosurface_pipeline.extraction.context import RunContext
from isosurface_pipeline.utils.logging import get_logger
from isosurface_pipeline.utils.spatial import normalize_rows

logger = get_logger("extraction.intersection")


def edge_crossings(values: np.ndarray, axis: int) -> np.ndarray:
    """Boolean grid marking points whose forward edge along ``axis`` crosses zero.

    The last layer along ``axis`` has no forward edge and is always False.
    """
    positive = values > 0
    crossing = np.zeros(values.shape, dtype=bool)
    base = [slice(None)] * 3
    ahead = [slice(None)] * 3
    base[axis] = slice(0, -1)
    ahead[axis] = slice(1, None)
    crossing[tuple(base)] = positive[tuple(base)] != positive[tuple(ahead)]
    return crossing


def compute_intersections(ctx: RunContext) -> int:
    """Create the vertex of every crossing edge and record it in the cache.

    Vertex ids follow the grid scan order: k outermost, then j, then i, and
    at each grid point the x edge before the y edge before the z edge.

    Returns:
        Number of vertices created.
    """
    values, gradients = ctx.values, ctx.gradients
    keys, points, axes, positions, normals = [], [], [], [], []

    for axis in range(3):
        idx = np.nonzero(edge_crossings(values, axis))
        if len(idx[0]) == 0:
            continue
        ahead = tuple(c + 1 if a == axis else c for a, c in enumerate(idx))
        v0, v1 = values[idx], values[ahead]
        u = v0 / (v0 - v1)

        pos = np.stack(idx, axis=1).astype(float)
        pos[:, axis] += u
        nrm = (1.0 - u)[:, None] * gradients[idx] + u[:, None] * gradients[ahead]

        keys.append(np.ravel_multi_index(idx, values.shape, order="F") * 3 + axis)
        points.append(np.stack(idx, axis=1))
        axes.append(np.full(len(u), axis))
        positions.append(pos)
        normals.append(normalize_rows(nrm))

    if not keys:
        logger.debug("No edge crosses the iso-level")
        return 0

    order = np.argsort(np.concatenate(keys), kind="stable")
    points_sorted = np.concatenate(points)[order]
    axes_sorted = np.concatenate(axes)[order]
    ids = ctx.store.add_vertices(
        np.concatenate(positions)[order],
        np.concatenate(normals)[order],
    )
    for axis in range(3):
        on_axis = axes_sorted == axis
        i, j, k = points_sorted[on_axis].T
        ctx.cache.set(axis, i, j, k, ids[on_axis])

    logger.debug("Created %d edge vertices", len(ids))
    return len(ids)
