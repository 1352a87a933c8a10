"""Working state of a single extraction run."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from isosurface_pipeline.extraction.classifier import snap_to_epsilon
from isosurface_pipeline.extraction.edge_cache import EdgeVertexCache
from isosurface_pipeline.extraction.store import ALLOC_SIZE, MeshStore
from isosurface_pipeline.extraction.tables import LookupTables, get_tables


def check_grid(data) -> np.ndarray:
    """Validate a sample grid and return it as a float64 array."""
    data = np.asarray(data, dtype=float)
    if data.ndim != 3:
        raise ValueError(f"Expected 3D array, got {data.ndim}D")
    if min(data.shape) < 2:
        raise ValueError(f"Every grid axis needs at least 2 samples, got shape {data.shape}")
    return data


@dataclass
class RunContext:
    """Grid, cache and store owned by one ``run`` call."""
    values: np.ndarray  # snapped sample - iso, indexed [i, j, k]
    gradients: np.ndarray  # (size_x, size_y, size_z, 3)
    cache: EdgeVertexCache
    store: MeshStore
    tables: LookupTables
    classic: bool = False
    tiling_counts: Counter = field(default_factory=Counter)

    @classmethod
    def create(
        cls,
        data: np.ndarray,
        iso: float = 0.0,
        classic: bool = False,
        initial_capacity: int = ALLOC_SIZE,
        tables: Optional[LookupTables] = None,
    ) -> "RunContext":
        data = check_grid(data)
        return cls(
            values=snap_to_epsilon(data - iso),
            gradients=np.stack(np.gradient(data, edge_order=1), axis=-1),
            cache=EdgeVertexCache(data.shape),
            store=MeshStore(initial_capacity),
            tables=tables or get_tables(),
            classic=classic,
        )

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self.values.shape
