"""Per-axis index grids mapping grid edges to their surface vertex."""

from __future__ import annotations

from typing import List, Tuple

import numpy as np

# Sentinel for "no crossing on this edge".
NO_VERTEX = -1

X_AXIS, Y_AXIS, Z_AXIS = 0, 1, 2

# Local cube edge id -> (axis, di, dj, dk) of the grid point owning it.
EDGE_OWNERS: Tuple[Tuple[int, int, int, int], ...] = (
    (X_AXIS, 0, 0, 0),
    (Y_AXIS, 1, 0, 0),
    (X_AXIS, 0, 1, 0),
    (Y_AXIS, 0, 0, 0),
    (X_AXIS, 0, 0, 1),
    (Y_AXIS, 1, 0, 1),
    (X_AXIS, 0, 1, 1),
    (Y_AXIS, 0, 0, 1),
    (Z_AXIS, 0, 0, 0),
    (Z_AXIS, 1, 0, 0),
    (Z_AXIS, 1, 1, 0),
    (Z_AXIS, 0, 1, 0),
)


class EdgeVertexCache:
    """Three dense grids of vertex ids, one per edge direction.

    Slot (i, j, k) of axis ``a`` holds the vertex on the edge from grid
    point (i, j, k) one step along ``a``, or NO_VERTEX.
    """

    def __init__(self, shape: Tuple[int, int, int]):
        self.shape = tuple(shape)
        self._verts = [np.full(self.shape, NO_VERTEX, dtype=np.int64) for _ in range(3)]

    @property
    def x_verts(self) -> np.ndarray:
        return self._verts[X_AXIS]

    @property
    def y_verts(self) -> np.ndarray:
        return self._verts[Y_AXIS]

    @property
    def z_verts(self) -> np.ndarray:
        return self._verts[Z_AXIS]

    def get(self, axis: int, i: int, j: int, k: int) -> int:
        return int(self._verts[axis][i, j, k])

    def set(self, axis: int, i, j, k, vertex_ids) -> None:
        """Record vertex ids; indices may be scalars or matching arrays."""
        self._verts[axis][i, j, k] = vertex_ids

    def clear(self, axis: int, i: int, j: int, k: int) -> None:
        self._verts[axis][i, j, k] = NO_VERTEX

    def edge_vertex(self, edge: int, i: int, j: int, k: int) -> int:
        """Vertex on local edge ``edge`` (0-11) of cell (i, j, k)."""
        axis, di, dj, dk = EDGE_OWNERS[edge]
        return int(self._verts[axis][i + di, j + dj, k + dk])

    def cell_vertices(self, i: int, j: int, k: int) -> List[int]:
        """Vertex ids (or NO_VERTEX) of the 12 edges of cell (i, j, k)."""
        return [self.edge_vertex(edge, i, j, k) for edge in range(12)]

    def count(self) -> int:
        return int(sum(np.count_nonzero(v != NO_VERTEX) for v in self._verts))
