"""Growable vertex and triangle storage for one extraction run."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from isosurface_pipeline.utils.logging import get_logger
from isosurface_pipeline.utils.types import Mesh, Triangle, Vertex

logger = get_logger("extraction.store")

# Default allocation step of the vertex and triangle arrays.
ALLOC_SIZE = 65536


class MeshStore:
    """Vertex (position + normal) and triangle arrays with doubling growth.

    ``nverts`` and ``ntrigs`` count what has been written; the capacities
    are what is allocated. Arrays are reallocated on growth, so callers
    must index by id and never hold on to views across additions.
    """

    def __init__(self, initial_capacity: int = ALLOC_SIZE) -> None:
        if initial_capacity < 1:
            raise ValueError(f"initial_capacity must be positive, got {initial_capacity}")
        self._positions = np.zeros((initial_capacity, 3))
        self._normals = np.zeros((initial_capacity, 3))
        self._triangles = np.zeros((initial_capacity, 3), dtype=np.int64)
        self._nverts = 0
        self._ntrigs = 0

    @property
    def nverts(self) -> int:
        return self._nverts

    @property
    def ntrigs(self) -> int:
        return self._ntrigs

    @property
    def vertex_capacity(self) -> int:
        return len(self._positions)

    @property
    def triangle_capacity(self) -> int:
        return len(self._triangles)

    @property
    def positions(self) -> np.ndarray:
        return self._positions[: self._nverts]

    @property
    def normals(self) -> np.ndarray:
        return self._normals[: self._nverts]

    @property
    def triangles(self) -> np.ndarray:
        return self._triangles[: self._ntrigs]

    def add_vertex(self, position: Sequence[float], normal: Sequence[float]) -> int:
        """Append one vertex and return its id."""
        self._reserve_vertices(self._nverts + 1)
        vid = self._nverts
        self._positions[vid] = position
        self._normals[vid] = normal
        self._nverts += 1
        return vid

    def add_vertices(self, positions: np.ndarray, normals: np.ndarray) -> np.ndarray:
        """Append a block of vertices.

        Returns:
            int64 array with the ids of the new vertices, in order.
        """
        count = len(positions)
        if len(normals) != count:
            raise ValueError(f"Got {count} positions but {len(normals)} normals")
        self._reserve_vertices(self._nverts + count)
        start = self._nverts
        self._positions[start : start + count] = positions
        self._normals[start : start + count] = normals
        self._nverts += count
        return np.arange(start, start + count, dtype=np.int64)

    def add_triangle(self, v1: int, v2: int, v3: int) -> int:
        """Append one triangle and return its id."""
        if self._ntrigs >= len(self._triangles):
            new_capacity = 2 * len(self._triangles)
            logger.debug("Growing triangle storage to %d", new_capacity)
            self._triangles = _grow(self._triangles, self._ntrigs, new_capacity)
        tid = self._ntrigs
        self._triangles[tid] = (v1, v2, v3)
        self._ntrigs += 1
        return tid

    def vertex(self, vid: int) -> Vertex:
        if not 0 <= vid < self._nverts:
            raise IndexError(f"Vertex {vid} out of range [0, {self._nverts})")
        (x, y, z), (nx, ny, nz) = self._positions[vid], self._normals[vid]
        return Vertex(float(x), float(y), float(z), float(nx), float(ny), float(nz))

    def triangle(self, tid: int) -> Triangle:
        if not 0 <= tid < self._ntrigs:
            raise IndexError(f"Triangle {tid} out of range [0, {self._ntrigs})")
        v1, v2, v3 = self._triangles[tid]
        return Triangle(int(v1), int(v2), int(v3))

    def to_mesh(self) -> Mesh:
        """Copy the populated part of the store into a Mesh."""
        return Mesh(
            vertices=self.positions.copy(),
            normals=self.normals.copy(),
            faces=self.triangles.copy(),
        )

    def _reserve_vertices(self, needed: int) -> None:
        capacity = len(self._positions)
        if needed <= capacity:
            return
        while capacity < needed:
            capacity *= 2
        logger.debug("Growing vertex storage to %d", capacity)
        self._positions = _grow(self._positions, self._nverts, capacity)
        self._normals = _grow(self._normals, self._nverts, capacity)


def _grow(array: np.ndarray, used: int, capacity: int) -> np.ndarray:
    grown = np.zeros((capacity,) + array.shape[1:], dtype=array.dtype)
    grown[:used] = array[:used]
    return grown
