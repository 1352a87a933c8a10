"""Volume I/O readers for scalar grids."""

from isosurface_pipeline.io.iso_format import IsoReader, read_iso, write_iso
from isosurface_pipeline.io.numpy_reader import NumpyReader
from isosurface_pipeline.io.volume_reader import BaseVolumeReader, VolumeReader

__all__ = ["BaseVolumeReader", "IsoReader", "NumpyReader", "VolumeReader", "read_iso", "write_iso"]
