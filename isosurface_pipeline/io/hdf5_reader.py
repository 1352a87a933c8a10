"""HDF5 volume reader."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import h5py
import numpy as np

from isosurface_pipeline.io.volume_reader import BaseVolumeReader


class HDF5Reader(BaseVolumeReader):
    """Read scalar volumes from HDF5 files."""

    def __init__(
        self,
        path: str,
        dataset: str = "volume",
        axis_order: str = "xyz",
        lower: Optional[Sequence[float]] = None,
        upper: Optional[Sequence[float]] = None,
    ):
        super().__init__(axis_order, lower, upper)
        self._path = path
        self._dataset = dataset
        with h5py.File(self._path, "r") as f:
            ds = f[self._dataset]
            if ds.ndim != 3:
                raise ValueError(f"Expected 3D dataset '{dataset}', got {ds.ndim}D")
            self._shape = ds.shape
            self._dtype = ds.dtype

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    def read_chunk(
        self,
        offset: Tuple[int, ...],
        size: Tuple[int, ...],
    ) -> np.ndarray:
        slices = tuple(slice(o, o + s) for o, s in zip(offset, size))
        with h5py.File(self._path, "r") as f:
            return f[self._dataset][slices]
