"""Volume reader protocol and base class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np

from isosurface_pipeline.fields.grid import ScalarGrid

AXIS_ORDERS = ("xyz", "zyx")

Bounds = Tuple[Tuple[float, float, float], Tuple[float, float, float]]


@runtime_checkable
class VolumeReader(Protocol):
    """Protocol for reading scalar volumes into a sample grid."""

    @property
    def shape(self) -> Tuple[int, ...]: ...
    @property
    def dtype(self) -> np.dtype: ...
    @property
    def bounds(self) -> Optional[Bounds]: ...

    def read_chunk(
        self,
        offset: Tuple[int, ...],
        size: Tuple[int, ...],
    ) -> np.ndarray: ...

    def read_volume(self) -> np.ndarray: ...

    def to_grid(self) -> ScalarGrid: ...


class BaseVolumeReader(ABC):
    """Base class turning a stored volume into an ``[i, j, k]`` sample grid.

    ``shape`` and ``read_chunk`` use the stored axis order. With
    ``axis_order="zyx"`` the stored array is transposed on the way into
    a grid.
    """

    def __init__(
        self,
        axis_order: str = "xyz",
        lower: Optional[Sequence[float]] = None,
        upper: Optional[Sequence[float]] = None,
    ):
        if axis_order not in AXIS_ORDERS:
            raise ValueError(f"Unknown axis order: {axis_order}. Expected one of {AXIS_ORDERS}")
        if (lower is None) != (upper is None):
            raise ValueError("Give both lower and upper bounds, or neither")
        self.axis_order = axis_order
        self._bounds: Optional[Bounds] = (
            None if lower is None else (tuple(map(float, lower)), tuple(map(float, upper)))
        )

    @property
    @abstractmethod
    def shape(self) -> Tuple[int, ...]: ...

    @property
    @abstractmethod
    def dtype(self) -> np.dtype: ...

    @property
    def bounds(self) -> Optional[Bounds]:
        """World box (lower, upper) of the grid, or None for index space."""
        return self._bounds

    @abstractmethod
    def read_chunk(
        self,
        offset: Tuple[int, ...],
        size: Tuple[int, ...],
    ) -> np.ndarray: ...

    @property
    def grid_shape(self) -> Tuple[int, int, int]:
        """Shape of the sample grid in (x, y, z) order."""
        shape = tuple(self.shape)
        return shape[::-1] if self.axis_order == "zyx" else shape

    def read_volume(self) -> np.ndarray:
        """Read the whole volume as a float64 ``[i, j, k]`` array."""
        data = np.asarray(self.read_chunk((0, 0, 0), tuple(self.shape)), dtype=float)
        if self.axis_order == "zyx":
            data = np.ascontiguousarray(data.transpose(2, 1, 0))
        return data

    def to_grid(self) -> ScalarGrid:
        data = self.read_volume()
        if self._bounds is None:
            return ScalarGrid(data)
        lower, upper = self._bounds
        return ScalarGrid(data, lower, upper)
