"""Binary ISO grid files.

Layout (little endian): three int32 grid sizes, six float32 bounds
``xmin, xmax, ymin, ymax, zmin, zmax``, then ``size_x * size_y * size_z``
float32 samples with k varying fastest, then j, then i.
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple, Union

import numpy as np

from isosurface_pipeline.fields.grid import ScalarGrid
from isosurface_pipeline.io.volume_reader import BaseVolumeReader
from isosurface_pipeline.utils.logging import get_logger

logger = get_logger("io.iso_format")

HEADER_DTYPE = np.dtype([("size", "<i4", (3,)), ("bounds", "<f4", (6,))])
SAMPLE_DTYPE = np.dtype("<f4")


def read_header(path: Union[str, Path]) -> Tuple[Tuple[int, int, int], np.ndarray]:
    """Return the grid size and the six bounds stored in an ISO file."""
    header = np.fromfile(str(path), dtype=HEADER_DTYPE, count=1)
    if len(header) != 1:
        raise ValueError(f"{path} is too short for an ISO header")
    size = tuple(int(s) for s in header["size"][0])
    if min(size) < 2:
        raise ValueError(f"{path} declares an invalid grid size {size}")
    return size, header["bounds"][0].astype(float)


def _bounds_to_box(bounds: np.ndarray):
    lower = (bounds[0], bounds[2], bounds[4])
    upper = (bounds[1], bounds[3], bounds[5])
    return lower, upper


def read_iso(path: Union[str, Path]) -> ScalarGrid:
    """Load an ISO file into a :class:`ScalarGrid`."""
    size, bounds = read_header(path)
    count = size[0] * size[1] * size[2]
    data = np.fromfile(str(path), dtype=SAMPLE_DTYPE, count=count, offset=HEADER_DTYPE.itemsize)
    if len(data) != count:
        raise ValueError(f"{path} holds {len(data)} samples, expected {count}")
    lower, upper = _bounds_to_box(bounds)
    logger.debug("Read ISO grid %s from %s", size, path)
    return ScalarGrid(data.reshape(size).astype(float), lower, upper)


def write_iso(grid: ScalarGrid, path: Union[str, Path]) -> None:
    """Write a grid as an ISO file, samples stored as float32."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    header = np.zeros(1, dtype=HEADER_DTYPE)
    header["size"][0] = grid.size
    lower, upper = grid.lower, grid.upper
    header["bounds"][0] = (lower[0], upper[0], lower[1], upper[1], lower[2], upper[2])
    with open(path, "wb") as f:
        header.tofile(f)
        np.ascontiguousarray(grid.data, dtype=SAMPLE_DTYPE).tofile(f)
    logger.info("Wrote ISO grid %s to %s", grid.size, path)


class IsoReader(BaseVolumeReader):
    """Read an ISO file lazily through a memory map."""

    def __init__(self, path: str):
        self._path = path
        self._shape, bounds = read_header(path)
        super().__init__("xyz", *_bounds_to_box(bounds))

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    @property
    def dtype(self) -> np.dtype:
        return SAMPLE_DTYPE

    def read_chunk(
        self,
        offset: Tuple[int, ...],
        size: Tuple[int, ...],
    ) -> np.ndarray:
        samples = np.memmap(
            self._path, dtype=SAMPLE_DTYPE, mode="r",
            offset=HEADER_DTYPE.itemsize, shape=self._shape,
        )
        slices = tuple(slice(o, o + s) for o, s in zip(offset, size))
        return np.array(samples[slices])
