"""Core data types shared across the isosurface pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Sequence, Tuple

import numpy as np


@dataclass
class Vertex:
    """Surface vertex in grid-index space with its unit normal."""
    x: float
    y: float
    z: float
    nx: float = 0.0
    ny: float = 0.0
    nz: float = 0.0

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    @property
    def normal(self) -> np.ndarray:
        return np.array([self.nx, self.ny, self.nz])


@dataclass(frozen=True)
class Triangle:
    """Three 0-based indices into the vertex sequence."""
    v1: int
    v2: int
    v3: int

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.v1, self.v2, self.v3)


@dataclass
class Mesh:
    """Indexed triangle mesh with per-vertex normals."""
    vertices: np.ndarray  # (N, 3)
    normals: np.ndarray  # (N, 3)
    faces: np.ndarray  # (M, 3) int
    tiling_counts: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.vertices.shape != self.normals.shape:
            raise ValueError(
                f"Vertex and normal arrays differ in shape: "
                f"{self.vertices.shape} vs {self.normals.shape}"
            )

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)

    @property
    def num_faces(self) -> int:
        return len(self.faces)

    @property
    def is_empty(self) -> bool:
        return self.num_faces == 0

    @classmethod
    def empty(cls) -> "Mesh":
        return cls(
            vertices=np.zeros((0, 3)),
            normals=np.zeros((0, 3)),
            faces=np.zeros((0, 3), dtype=np.int64),
        )

    def to_world(self, lower: Sequence[float], spacing: Sequence[float]) -> "Mesh":
        """Map grid-index positions to world space.

        Normals are gradients in index space, so they are divided by the
        spacing before re-normalising. Zero normals stay zero.
        """
        lower = np.asarray(lower, dtype=float)
        spacing = np.asarray(spacing, dtype=float)
        normals = self.normals / spacing
        lengths = np.linalg.norm(normals, axis=1)
        nonzero = lengths > 0
        normals[nonzero] /= lengths[nonzero, None]
        return Mesh(
            vertices=lower + self.vertices * spacing,
            normals=normals,
            faces=self.faces.copy(),
            tiling_counts=dict(self.tiling_counts),
        )
