"""Vector helpers for the isosurface pipeline."""

from __future__ import annotations

import numpy as np
from scipy.spatial import cKDTree


def normalize_rows(vectors: np.ndarray) -> np.ndarray:
    """Normalise each row to unit length in place.

    Rows of zero length are left untouched.

    Returns:
        The same array, for chaining.
    """
    lengths = np.linalg.norm(vectors, axis=1)
    nonzero = lengths > 0
    vectors[nonzero] /= lengths[nonzero, None]
    return vectors


def normalize(vector: np.ndarray) -> np.ndarray:
    """Unit vector in the direction of ``vector`` (zero stays zero)."""
    vector = np.asarray(vector, dtype=float)
    length = np.linalg.norm(vector)
    if length > 0:
        return vector / length
    return vector.copy()


def coincident_pairs(points: np.ndarray, tolerance: float = 1e-9) -> np.ndarray:
    """Find pairs of points closer than ``tolerance``.

    Args:
        points: (N, 3) array of points.
        tolerance: Distance under which two points count as coincident.

    Returns:
        (K, 2) int array of index pairs with i < j.
    """
    points = np.asarray(points, dtype=float)
    if len(points) < 2:
        return np.zeros((0, 2), dtype=int)
    tree = cKDTree(points)
    return tree.query_pairs(tolerance, output_type="ndarray")


def edge_lengths(vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """Lengths of the three edges of every triangle, shape (M, 3)."""
    if len(faces) == 0:
        return np.zeros((0, 3))
    a = vertices[faces[:, 0]]
    b = vertices[faces[:, 1]]
    c = vertices[faces[:, 2]]
    return np.stack(
        [
            np.linalg.norm(b - a, axis=1),
            np.linalg.norm(c - b, axis=1),
            np.linalg.norm(a - c, axis=1),
        ],
        axis=1,
    )
