"""Second pass: turn a cube's template into triangles."""

from __future__ import annotations

from typing import List

import numpy as np

from isosurface_pipeline.extraction.classifier import Cube, build_cube
from isosurface_pipeline.extraction.context import RunContext
from isosurface_pipeline.extraction.edge_cache import NO_VERTEX
from isosurface_pipeline.extraction.errors import TopologyError, UnresolvedVertexError
from isosurface_pipeline.extraction.tables import CENTROID_EDGE
from isosurface_pipeline.extraction.tiling import Tiling, select_tiling
from isosurface_pipeline.utils.spatial import normalize


def process_cube(ctx: RunContext, i: int, j: int, k: int) -> Tiling:
    """Classify cell (i, j, k), pick its template and emit its triangles."""
    cube = build_cube(ctx.values, i, j, k, ctx.tables)
    tiling = select_tiling(cube, ctx.tables, ctx.classic)
    if tiling.num_triangles:
        add_triangles(ctx, cube, tiling)
    ctx.tiling_counts[tiling.name] += 1
    return tiling


def add_centroid_vertex(ctx: RunContext, cube: Cube) -> int:
    """Append the averaged vertex of the cube's crossing edges.

    With no crossing edge the vertex stays at the origin with a zero normal.
    """
    ids = [v for v in ctx.cache.cell_vertices(cube.i, cube.j, cube.k) if v != NO_VERTEX]
    if not ids:
        return ctx.store.add_vertex((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
    position = ctx.store.positions[ids].mean(axis=0)
    normal = normalize(ctx.store.normals[ids].mean(axis=0))
    return ctx.store.add_vertex(position, normal)


def resolve_edges(ctx: RunContext, cube: Cube, edges: np.ndarray) -> List[int]:
    """Map template edge ids 0-11 to vertex ids; the centroid stays NO_VERTEX.

    Raises:
        TopologyError: On an edge id outside 0-12.
        UnresolvedVertexError: When an edge has no vertex in the cache.
    """
    resolved = []
    for n, edge in enumerate(int(e) for e in edges):
        if edge == CENTROID_EDGE:
            resolved.append(NO_VERTEX)
            continue
        if not 0 <= edge < CENTROID_EDGE:
            raise TopologyError(f"Invalid edge id {edge}", cube.cell, cube.lut_entry)
        vid = ctx.cache.edge_vertex(edge, cube.i, cube.j, cube.k)
        if vid == NO_VERTEX:
            raise UnresolvedVertexError(cube.cell, cube.lut_entry, edge, triangle=n // 3)
        resolved.append(vid)
    return resolved


def add_triangles(ctx: RunContext, cube: Cube, tiling: Tiling) -> int:
    """Append the triangles of ``tiling`` for ``cube``.

    Every edge is resolved before the first triangle is written, so a
    failing cell leaves no partial output in the triangle store.

    Returns:
        Number of triangles appended.
    """
    edges = tiling.triangles
    if len(edges) % 3:
        raise TopologyError(
            f"Template {tiling.name} has {len(edges)} edge ids", cube.cell, cube.lut_entry
        )
    resolved = resolve_edges(ctx, cube, edges)

    if tiling.centroid:
        centroid = add_centroid_vertex(ctx, cube)
        resolved = [centroid if v == NO_VERTEX else v for v in resolved]
    elif NO_VERTEX in resolved:
        n = resolved.index(NO_VERTEX)
        raise UnresolvedVertexError(cube.cell, cube.lut_entry, CENTROID_EDGE, triangle=n // 3)

    for t in range(0, len(resolved), 3):
        ctx.store.add_triangle(resolved[t], resolved[t + 1], resolved[t + 2])
    return len(resolved) // 3
