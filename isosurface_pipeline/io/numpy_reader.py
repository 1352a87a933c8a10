"""NumPy array-backed volume reader."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from isosurface_pipeline.io.volume_reader import BaseVolumeReader


class NumpyReader(BaseVolumeReader):
    """Volume reader wrapping an in-memory NumPy array.

    Useful for testing and for ``.npy`` files loaded up front.
    """

    def __init__(
        self,
        data: np.ndarray,
        axis_order: str = "xyz",
        lower: Optional[Sequence[float]] = None,
        upper: Optional[Sequence[float]] = None,
    ):
        super().__init__(axis_order, lower, upper)
        if data.ndim != 3:
            raise ValueError(f"Expected 3D array, got {data.ndim}D")
        self._data = data

    @classmethod
    def from_file(cls, path: str, **kwargs) -> "NumpyReader":
        return cls(np.load(path), **kwargs)

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._data.shape

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    def read_chunk(
        self,
        offset: Tuple[int, ...],
        size: Tuple[int, ...],
    ) -> np.ndarray:
        slices = tuple(slice(o, o + s) for o, s in zip(offset, size))
        return self._data[slices].copy()
