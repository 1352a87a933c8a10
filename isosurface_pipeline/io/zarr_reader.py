"""Zarr volume reader."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np
import zarr

from isosurface_pipeline.io.volume_reader import BaseVolumeReader


def _open_zarr_array(path: str, dataset: str) -> zarr.Array:
    """Open a Zarr array, navigating into a group dataset if needed."""
    if dataset:
        group = zarr.open_group(path, mode="r")
        arr = group[dataset]
    else:
        arr = zarr.open_array(path, mode="r")
    if not isinstance(arr, zarr.Array):
        raise TypeError(f"Expected zarr.Array at '{dataset}', got {type(arr).__name__}")
    return arr


class ZarrReader(BaseVolumeReader):
    """Read scalar volumes from Zarr arrays."""

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
        arr = _open_zarr_array(self._path, self._dataset)
        if arr.ndim != 3:
            raise ValueError(f"Expected 3D array, got {arr.ndim}D")
        self._shape: Tuple[int, ...] = arr.shape
        self._dtype: np.dtype = arr.dtype

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
        arr = _open_zarr_array(self._path, self._dataset)
        return np.array(arr[slices])
