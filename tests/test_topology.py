"""Tests for mesh topology checks."""

from __future__ import annotations

import numpy as np

from isosurface_pipeline.analysis.topology import (
    boundary_edges,
    check_topology,
    coincident_vertices,
    connected_components,
    degenerate_faces,
    directed_edges,
    edge_use_counts,
    euler_characteristic,
    is_closed,
    is_consistently_oriented,
    mesh_graph,
    non_manifold_edges,
)
from isosurface_pipeline.utils.types import Mesh


def _mesh(vertices, faces) -> Mesh:
    vertices = np.asarray(vertices, dtype=float)
    return Mesh(vertices=vertices, normals=np.zeros_like(vertices), faces=np.asarray(faces))


class TestEdges:
    def test_directed_edges(self):
        edges = directed_edges(np.array([[0, 1, 2]]))
        np.testing.assert_array_equal(edges, [[0, 1], [1, 2], [2, 0]])

    def test_edge_use_counts(self, tetrahedron):
        edges, counts = edge_use_counts(tetrahedron.faces)
        assert len(edges) == 6
        assert np.all(counts == 2)
        assert np.all(edges[:, 0] < edges[:, 1])

    def test_empty_faces(self):
        edges, counts = edge_use_counts(np.zeros((0, 3), dtype=int))
        assert edges.shape == (0, 2)
        assert len(counts) == 0


class TestClosedness:
    def test_tetrahedron_is_closed(self, tetrahedron):
        assert is_closed(tetrahedron.faces)
        assert len(boundary_edges(tetrahedron.faces)) == 0

    def test_open_surface(self, tetrahedron):
        faces = tetrahedron.faces[:3]
        assert not is_closed(faces)
        assert len(boundary_edges(faces)) == 3

    def test_non_manifold_edge(self):
        faces = np.array([[0, 1, 2], [1, 0, 3], [0, 1, 4]])
        np.testing.assert_array_equal(non_manifold_edges(faces), [[0, 1]])


class TestOrientation:
    def test_consistent(self, tetrahedron):
        assert is_consistently_oriented(tetrahedron.faces)

    def test_flipped_face(self, tetrahedron):
        faces = tetrahedron.faces.copy()
        faces[0] = faces[0][::-1]
        assert not is_consistently_oriented(faces)

    def test_empty(self):
        assert is_consistently_oriented(np.zeros((0, 3), dtype=int))


class TestDefects:
    def test_degenerate_faces(self):
        faces = np.array([[0, 1, 2], [0, 0, 1], [2, 1, 2]])
        np.testing.assert_array_equal(degenerate_faces(faces), [1, 2])

    def test_coincident_vertices(self):
        mesh = _mesh([[0, 0, 0], [1, 0, 0], [1, 0, 1e-12]], [[0, 1, 2]])
        np.testing.assert_array_equal(coincident_vertices(mesh), [[1, 2]])


class TestGraph:
    def test_mesh_graph(self, tetrahedron):
        graph = mesh_graph(tetrahedron)
        assert graph.number_of_nodes() == 4
        assert graph.number_of_edges() == 6

    def test_two_components(self, tetrahedron):
        faces = np.vstack([tetrahedron.faces, tetrahedron.faces + 4])
        mesh = _mesh(np.vstack([tetrahedron.vertices, tetrahedron.vertices + 5]), faces)
        assert connected_components(mesh) == 2
        assert euler_characteristic(mesh) == 4

    def test_euler_of_empty_mesh(self):
        assert euler_characteristic(Mesh.empty()) == 0


class TestCheckTopology:
    def test_clean_mesh(self, tetrahedron):
        assert check_topology(tetrahedron) == []

    def test_reports_defects(self, tetrahedron):
        faces = tetrahedron.faces.copy()
        faces[0] = faces[0][::-1]
        mesh = _mesh(tetrahedron.vertices, np.vstack([faces[:3], [[0, 0, 1]]]))
        warnings = check_topology(mesh)
        assert any("boundary edge" in w for w in warnings)
        assert any("orientation" in w for w in warnings)
        assert any("degenerate" in w for w in warnings)
