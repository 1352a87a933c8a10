"""Tests for core types and vector helpers."""

from __future__ import annotations

import numpy as np
import pytest

from isosurface_pipeline.utils.spatial import (
    coincident_pairs,
    edge_lengths,
    normalize,
    normalize_rows,
)
from isosurface_pipeline.utils.types import Mesh, Triangle, Vertex

# ---------------------------------------------------------------------------
# normalize / normalize_rows
# ---------------------------------------------------------------------------


class TestNormalize:
    def test_unit_length(self):
        np.testing.assert_allclose(normalize([3.0, 0.0, 4.0]), [0.6, 0.0, 0.8])

    def test_zero_stays_zero(self):
        result = normalize(np.zeros(3))
        np.testing.assert_array_equal(result, 0.0)

    def test_rows_in_place(self):
        vectors = np.array([[2.0, 0.0, 0.0], [0.0, 0.0, 0.0], [1.0, 1.0, 0.0]])
        result = normalize_rows(vectors)
        assert result is vectors
        np.testing.assert_allclose(vectors[0], [1, 0, 0])
        np.testing.assert_array_equal(vectors[1], 0.0)
        assert np.linalg.norm(vectors[2]) == pytest.approx(1.0)


# ---------------------------------------------------------------------------
# coincident_pairs / edge_lengths
# ---------------------------------------------------------------------------


class TestCoincidentPairs:
    def test_finds_close_points(self):
        points = np.array([[0, 0, 0], [1, 1, 1], [0, 0, 1e-3]], dtype=float)
        np.testing.assert_array_equal(coincident_pairs(points, 1e-2), [[0, 2]])

    def test_single_point(self):
        assert coincident_pairs(np.zeros((1, 3))).shape == (0, 2)


class TestEdgeLengths:
    def test_right_triangle(self):
        vertices = np.array([[0, 0, 0], [3, 0, 0], [3, 4, 0]], dtype=float)
        np.testing.assert_allclose(edge_lengths(vertices, np.array([[0, 1, 2]])), [[3, 4, 5]])

    def test_no_faces(self):
        assert edge_lengths(np.zeros((3, 3)), np.zeros((0, 3), dtype=int)).shape == (0, 3)


# ---------------------------------------------------------------------------
# Vertex / Triangle / Mesh
# ---------------------------------------------------------------------------


class TestTypes:
    def test_vertex_vectors(self):
        v = Vertex(1.0, 2.0, 3.0, 0.0, 0.0, 1.0)
        np.testing.assert_array_equal(v.position, [1, 2, 3])
        np.testing.assert_array_equal(v.normal, [0, 0, 1])

    def test_triangle_tuple(self):
        assert Triangle(4, 5, 6).as_tuple() == (4, 5, 6)

    def test_empty_mesh(self):
        mesh = Mesh.empty()
        assert mesh.is_empty
        assert mesh.num_vertices == 0
        assert mesh.tiling_counts == {}

    def test_mismatched_normals(self):
        with pytest.raises(ValueError, match="differ in shape"):
            Mesh(vertices=np.zeros((3, 3)), normals=np.zeros((2, 3)), faces=np.zeros((0, 3)))

    def test_to_world(self):
        mesh = Mesh(
            vertices=np.array([[0.0, 0.0, 0.0], [2.0, 1.0, 4.0]]),
            normals=np.array([[1.0, 1.0, 0.0], [0.0, 0.0, 0.0]]),
            faces=np.zeros((0, 3), dtype=int),
            tiling_counts={"1": 1},
        )
        world = mesh.to_world((-1.0, 0.0, 10.0), (0.5, 2.0, 1.0))
        np.testing.assert_allclose(world.vertices, [[-1, 0, 10], [0, 2, 14]])
        # index-space gradient (1, 1, 0) over spacing (0.5, 2) -> (2, 0.5, 0)
        np.testing.assert_allclose(world.normals[0], np.array([2.0, 0.5, 0.0]) / np.hypot(2.0, 0.5))
        np.testing.assert_array_equal(world.normals[1], 0.0)
        assert world.tiling_counts == {"1": 1}
        # source untouched
        np.testing.assert_array_equal(mesh.vertices[1], [2.0, 1.0, 4.0])
