"""Dense scalar grid with world-space bounds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import numpy as np

from isosurface_pipeline.extraction.context import check_grid
from isosurface_pipeline.extraction.marching_cubes import MarchingCubes
from isosurface_pipeline.fields.implicit import ImplicitFunction
from isosurface_pipeline.utils.types import Mesh

Sampler = Callable[[int, int, int], float]


def _as_size(size: Sequence[int]) -> Tuple[int, int, int]:
    size = tuple(int(s) for s in size)
    if len(size) != 3:
        raise ValueError(f"Expected 3 grid sizes, got {len(size)}")
    if min(size) < 2:
        raise ValueError(f"Every grid axis needs at least 2 samples, got {size}")
    return size


@dataclass
class ScalarGrid:
    """Samples indexed ``[i, j, k]`` plus the box they span.

    Grid point (i, j, k) sits at ``lower + (i, j, k) * spacing``. Without
    bounds the grid spans its own index space.
    """
    data: np.ndarray
    lower: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    upper: Optional[Tuple[float, float, float]] = None

    def __post_init__(self) -> None:
        self.data = check_grid(self.data)
        self.lower = tuple(float(v) for v in self.lower)
        if self.upper is None:
            self.upper = tuple(lo + s - 1 for lo, s in zip(self.lower, self.data.shape))
        else:
            self.upper = tuple(float(v) for v in self.upper)
        if len(self.lower) != 3 or len(self.upper) != 3:
            raise ValueError("Grid bounds need 3 coordinates each")
        if any(hi <= lo for lo, hi in zip(self.lower, self.upper)):
            raise ValueError(f"Grid upper bounds must exceed lower bounds, got {self.lower} .. {self.upper}")

    @property
    def size(self) -> Tuple[int, int, int]:
        return self.data.shape

    @property
    def spacing(self) -> np.ndarray:
        return (np.asarray(self.upper) - np.asarray(self.lower)) / (np.asarray(self.size) - 1)

    @classmethod
    def from_function(
        cls,
        func: ImplicitFunction,
        size: Sequence[int] = (50, 50, 50),
        lower: Sequence[float] = (-1.0, -1.0, -1.0),
        upper: Sequence[float] = (1.0, 1.0, 1.0),
    ) -> "ScalarGrid":
        """Sample a vectorised ``func(x, y, z)`` on a regular grid."""
        size = _as_size(size)
        axes = [np.linspace(lo, hi, n) for lo, hi, n in zip(lower, upper, size)]
        x, y, z = np.meshgrid(*axes, indexing="ij")
        data = np.broadcast_to(np.asarray(func(x, y, z), dtype=float), size).copy()
        return cls(data, tuple(lower), tuple(upper))

    @classmethod
    def from_sampler(
        cls,
        sample: Sampler,
        size: Sequence[int],
        lower: Sequence[float] = (0.0, 0.0, 0.0),
        upper: Optional[Sequence[float]] = None,
    ) -> "ScalarGrid":
        """Fill the grid by calling ``sample(i, j, k)`` once per grid point."""
        size = _as_size(size)
        data = np.empty(size)
        for i in range(size[0]):
            for j in range(size[1]):
                for k in range(size[2]):
                    data[i, j, k] = sample(i, j, k)
        return cls(data, tuple(lower), None if upper is None else tuple(upper))

    @classmethod
    def from_flat(
        cls,
        values: Sequence[float],
        size: Sequence[int],
        lower: Sequence[float] = (0.0, 0.0, 0.0),
        upper: Optional[Sequence[float]] = None,
    ) -> "ScalarGrid":
        """Wrap a flat array laid out as ``i + size_x * (j + size_y * k)``."""
        size = _as_size(size)
        values = np.asarray(values, dtype=float).ravel()
        expected = size[0] * size[1] * size[2]
        if len(values) != expected:
            raise ValueError(f"Expected {expected} samples for grid {size}, got {len(values)}")
        return cls(values.reshape(size, order="F"), tuple(lower), None if upper is None else tuple(upper))

    def sample(self, i: int, j: int, k: int) -> float:
        return float(self.data[i, j, k])

    def to_world(self, points: np.ndarray) -> np.ndarray:
        """Map grid-index positions of shape (..., 3) into world space."""
        return np.asarray(self.lower) + np.asarray(points, dtype=float) * self.spacing

    def extract(self, iso: float = 0.0, classic: bool = False, world_space: bool = True) -> Mesh:
        """Run Marching Cubes on this grid."""
        mesh = MarchingCubes(self.data, classic=classic).run(iso)
        if world_space:
            mesh = mesh.to_world(self.lower, self.spacing)
        return mesh
