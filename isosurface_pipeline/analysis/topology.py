"""Topology checks for extracted meshes."""

from __future__ import annotations

from typing import List, Tuple

import networkx as nx
import numpy as np

from isosurface_pipeline.utils.spatial import coincident_pairs
from isosurface_pipeline.utils.types import Mesh


def directed_edges(faces: np.ndarray) -> np.ndarray:
    """The three directed edges (a->b, b->c, c->a) of every face, shape (3M, 2)."""
    faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    return np.concatenate([faces[:, [0, 1]], faces[:, [1, 2]], faces[:, [2, 0]]])


def edge_use_counts(faces: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Undirected edges and how many faces use each.

    Returns:
        (edges, counts): (E, 2) edges with the smaller index first, and (E,)
        use counts.
    """
    edges = np.sort(directed_edges(faces), axis=1)
    if len(edges) == 0:
        return np.zeros((0, 2), dtype=np.int64), np.zeros(0, dtype=np.int64)
    return np.unique(edges, axis=0, return_counts=True)


def boundary_edges(faces: np.ndarray) -> np.ndarray:
    """Edges used by exactly one face."""
    edges, counts = edge_use_counts(faces)
    return edges[counts == 1]


def non_manifold_edges(faces: np.ndarray) -> np.ndarray:
    """Edges shared by more than two faces."""
    edges, counts = edge_use_counts(faces)
    return edges[counts > 2]


def is_closed(faces: np.ndarray) -> bool:
    """True when every edge is shared by exactly two faces."""
    _, counts = edge_use_counts(faces)
    return bool(np.all(counts == 2))


def is_consistently_oriented(faces: np.ndarray) -> bool:
    """True when no directed edge is used twice.

    Two neighbouring faces with compatible winding traverse their shared
    edge in opposite directions.
    """
    edges = directed_edges(faces)
    if len(edges) == 0:
        return True
    return len(np.unique(edges, axis=0)) == len(edges)


def degenerate_faces(faces: np.ndarray) -> np.ndarray:
    """Indices of faces that repeat a vertex."""
    faces = np.asarray(faces).reshape(-1, 3)
    repeated = (faces[:, 0] == faces[:, 1]) | (faces[:, 1] == faces[:, 2]) | (faces[:, 0] == faces[:, 2])
    return np.flatnonzero(repeated)


def coincident_vertices(mesh: Mesh, tolerance: float = 1e-9) -> np.ndarray:
    """Pairs of distinct vertices closer than ``tolerance``."""
    return coincident_pairs(mesh.vertices, tolerance)


def mesh_graph(mesh: Mesh) -> nx.Graph:
    """Vertex adjacency graph over the vertices referenced by faces."""
    graph = nx.Graph()
    graph.add_nodes_from(np.unique(mesh.faces).tolist())
    edges, _ = edge_use_counts(mesh.faces)
    graph.add_edges_from(map(tuple, edges.tolist()))
    return graph


def connected_components(mesh: Mesh) -> int:
    """Number of connected surface pieces."""
    return nx.number_connected_components(mesh_graph(mesh))


def euler_characteristic(mesh: Mesh) -> int:
    """V - E + F over the referenced vertices.

    A closed genus-g surface piece contributes ``2 - 2g``.
    """
    if mesh.num_faces == 0:
        return 0
    num_vertices = len(np.unique(mesh.faces))
    edges, _ = edge_use_counts(mesh.faces)
    return num_vertices - len(edges) + mesh.num_faces


def check_topology(mesh: Mesh, tolerance: float = 1e-9) -> List[str]:
    """Check an extracted mesh for cracks and other defects.

    Args:
        mesh: Mesh to check.
        tolerance: Distance under which two vertices count as duplicates.

    Returns:
        List of human-readable warnings, empty for a clean mesh.
    """
    warnings: List[str] = []

    n_boundary = len(boundary_edges(mesh.faces))
    if n_boundary:
        warnings.append(f"Contains {n_boundary} boundary edge(s)")

    n_non_manifold = len(non_manifold_edges(mesh.faces))
    if n_non_manifold:
        warnings.append(f"Contains {n_non_manifold} non-manifold edge(s)")

    if not is_consistently_oriented(mesh.faces):
        warnings.append("Face orientation is inconsistent")

    n_degenerate = len(degenerate_faces(mesh.faces))
    if n_degenerate:
        warnings.append(f"Contains {n_degenerate} degenerate face(s)")

    n_coincident = len(coincident_vertices(mesh, tolerance))
    if n_coincident:
        warnings.append(f"Contains {n_coincident} coincident vertex pair(s)")

    return warnings
