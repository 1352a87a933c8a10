"""Cube classification: corner signs, 8-bit masks and (case, config) lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from isosurface_pipeline.extraction.tables import LookupTables, get_tables

# Single-precision machine epsilon, used for every sign and tie-break test.
EPSILON = float(np.finfo(np.float32).eps)

# Corner p sits at (i, j, k) + CORNER_OFFSETS[p]. The p ^ (p >> 1) order
# walks each face of the cube cyclically.
CORNER_OFFSETS: Tuple[Tuple[int, int, int], ...] = tuple(
    ((p ^ (p >> 1)) & 1, (p >> 1) & 1, (p >> 2) & 1) for p in range(8)
)


@dataclass
class Cube:
    """Transient state of the grid cell being triangulated."""
    i: int
    j: int
    k: int
    values: np.ndarray  # (8,) snapped scalar-minus-iso corner values
    lut_entry: int
    case: int = 0
    config: int = 0
    subconfig: int = 0

    @property
    def cell(self) -> Tuple[int, int, int]:
        return (self.i, self.j, self.k)


def snap_to_epsilon(values: np.ndarray, eps: float = EPSILON) -> np.ndarray:
    """Push values with ``|v| < eps`` out to ``+-eps``, keeping their sign.

    Exact zeros become ``+eps``.
    """
    values = np.asarray(values, dtype=float)
    small = np.abs(values) < eps
    return np.where(small, np.where(values < 0, -eps, eps), values)


def sign_mask(values: np.ndarray) -> int:
    """8-bit mask with bit p set iff corner p is positive."""
    mask = 0
    for p in range(8):
        if values[p] > 0:
            mask |= 1 << p
    return mask


def corner_values(field: np.ndarray, i: int, j: int, k: int) -> np.ndarray:
    """Read the 8 corner values of cell (i, j, k) in corner order."""
    return np.array([field[i + di, j + dj, k + dk] for di, dj, dk in CORNER_OFFSETS])


def classify(values: np.ndarray, tables: Optional[LookupTables] = None) -> Tuple[int, int, int]:
    """Classify one cube.

    Args:
        values: 8 snapped corner values.
        tables: Lookup tables; the shared ones when omitted.

    Returns:
        (lut_entry, case, config)
    """
    tables = tables or get_tables()
    lut_entry = sign_mask(values)
    case, config = tables.classify(lut_entry)
    return lut_entry, case, config


def build_cube(
    field: np.ndarray,
    i: int,
    j: int,
    k: int,
    tables: Optional[LookupTables] = None,
) -> Cube:
    """Gather and classify the cube whose lowest corner is (i, j, k)."""
    values = corner_values(field, i, j, k)
    lut_entry, case, config = classify(values, tables)
    return Cube(i=i, j=j, k=k, values=values, lut_entry=lut_entry, case=case, config=config)


def cell_sign_masks(field: np.ndarray) -> np.ndarray:
    """Sign masks of every cell of a snapped grid at once.

    Returns:
        uint8 array of shape (size_x - 1, size_y - 1, size_z - 1).
    """
    positive = field > 0
    masks = np.zeros(tuple(s - 1 for s in field.shape), dtype=np.uint8)
    for p, (di, dj, dk) in enumerate(CORNER_OFFSETS):
        corner = positive[
            di : di + masks.shape[0],
            dj : dj + masks.shape[1],
            dk : dk + masks.shape[2],
        ]
        masks |= corner.astype(np.uint8) << p
    return masks
