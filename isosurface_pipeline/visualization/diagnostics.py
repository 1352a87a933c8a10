"""Diagnostic summary statistics for extracted meshes."""

from __future__ import annotations

from typing import Dict

import numpy as np

from isosurface_pipeline.analysis.topology import (
    boundary_edges,
    connected_components,
    euler_characteristic,
    is_consistently_oriented,
    non_manifold_edges,
)
from isosurface_pipeline.extraction.tiling import case_of
from isosurface_pipeline.utils.spatial import edge_lengths
from isosurface_pipeline.utils.types import Mesh


def mesh_statistics(mesh: Mesh) -> Dict:
    """Compute summary statistics for a mesh.

    Returns:
        Dict with counts, bounds, edge lengths and topology figures.
    """
    if mesh.is_empty:
        return {"num_vertices": mesh.num_vertices, "num_faces": 0}

    lengths = edge_lengths(mesh.vertices, mesh.faces)
    return {
        "num_vertices": mesh.num_vertices,
        "num_faces": mesh.num_faces,
        "bounds_min": mesh.vertices.min(axis=0).tolist(),
        "bounds_max": mesh.vertices.max(axis=0).tolist(),
        "mean_edge_length": float(lengths.mean()),
        "max_edge_length": float(lengths.max()),
        "boundary_edges": len(boundary_edges(mesh.faces)),
        "non_manifold_edges": len(non_manifold_edges(mesh.faces)),
        "consistently_oriented": is_consistently_oriented(mesh.faces),
        "components": connected_components(mesh),
        "euler_characteristic": euler_characteristic(mesh),
    }


def tiling_statistics(tiling_counts: Dict[str, int]) -> Dict:
    """Summarise which sub-cases a run went through.

    Returns:
        Dict with the number of active cells, per-case totals and how many
        cells fell into a case with an ambiguity test.
    """
    if not tiling_counts:
        return {"active_cells": 0}

    per_case: Dict[int, int] = {}
    for name, count in tiling_counts.items():
        case = case_of(name)
        per_case[case] = per_case.get(case, 0) + count

    total = sum(per_case.values())
    ambiguous = sum(per_case.get(c, 0) for c in (3, 4, 6, 7, 10, 12, 13))
    counts = np.array(list(tiling_counts.values()))
    return {
        "active_cells": total,
        "per_case": dict(sorted(per_case.items())),
        "ambiguous_cells": ambiguous,
        "ambiguous_fraction": ambiguous / total,
        "distinct_tilings": int(np.count_nonzero(counts)),
    }
