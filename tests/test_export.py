"""Tests for mesh and metadata export."""

from __future__ import annotations

import json

import numpy as np
import pandas as pd
import trimesh

from isosurface_pipeline.export.mesh_export import export_obj, export_ply, to_trimesh
from isosurface_pipeline.export.metadata_export import (
    export_summary,
    export_tiling_counts,
    tiling_table,
)
from isosurface_pipeline.utils.types import Mesh


class TestExportPly:
    def test_header_and_body(self, tmp_path, tetrahedron):
        path = tmp_path / "out" / "mesh.ply"
        assert export_ply(tetrahedron, path)
        lines = path.read_text().splitlines()

        assert lines[0] == "ply"
        assert lines[1] == "format ascii 1.0"
        assert "element vertex 4" in lines
        assert "element face 4" in lines
        header = lines[: lines.index("end_header")]
        for name in ("x", "y", "z", "nx", "ny", "nz"):
            assert any(line.startswith("property") and line.split()[-1] == name for line in header)

        body = lines[lines.index("end_header") + 1 :]
        rows = [[float(v) for v in line.split()] for line in body[:4]]
        np.testing.assert_allclose(np.array(rows)[:, :3], tetrahedron.vertices)
        np.testing.assert_allclose(np.array(rows)[:, 3:6], tetrahedron.normals)
        faces = [[int(v) for v in line.split()] for line in body[4:8]]
        assert all(face[0] == 3 for face in faces)
        np.testing.assert_array_equal(np.array(faces)[:, 1:4], tetrahedron.faces)

    def test_reloads_with_same_topology(self, tmp_path, tetrahedron):
        path = tmp_path / "mesh.ply"
        export_ply(tetrahedron, path)
        loaded = trimesh.load(str(path), process=False)
        np.testing.assert_allclose(loaded.vertices, tetrahedron.vertices)
        np.testing.assert_array_equal(loaded.faces, tetrahedron.faces)

    def test_wrapper_keeps_gradient_normals(self, tetrahedron):
        tm = to_trimesh(tetrahedron)
        assert len(tm.vertices) == 4
        np.testing.assert_array_equal(tm.faces, tetrahedron.faces)
        np.testing.assert_allclose(tm.vertex_normals[1:], tetrahedron.normals[1:])

    def test_empty_mesh_is_skipped(self, tmp_path):
        path = tmp_path / "empty.ply"
        assert not export_ply(Mesh.empty(), path)
        assert not path.exists()


class TestExportObj:
    def test_one_based_faces_with_normals(self, tmp_path, tetrahedron):
        path = tmp_path / "mesh.obj"
        assert export_obj(tetrahedron, path)
        lines = path.read_text().splitlines()

        vertices = [[float(v) for v in line.split()[1:4]] for line in lines if line.startswith("v ")]
        normals = [[float(v) for v in line.split()[1:4]] for line in lines if line.startswith("vn ")]
        np.testing.assert_allclose(vertices, tetrahedron.vertices)
        assert len(normals) == 4
        np.testing.assert_allclose(np.array(normals)[1:], tetrahedron.normals[1:])

        faces = [line.split()[1:] for line in lines if line.startswith("f ")]
        assert len(faces) == 4
        vertex_ids = [[int(token.split("/")[0]) for token in face] for face in faces]
        normal_ids = [[int(token.split("/")[-1]) for token in face] for face in faces]
        np.testing.assert_array_equal(vertex_ids, tetrahedron.faces + 1)
        assert normal_ids == vertex_ids

    def test_empty_mesh_is_skipped(self, tmp_path):
        path = tmp_path / "empty.obj"
        assert not export_obj(Mesh.empty(), path)
        assert not path.exists()


class TestTilingTable:
    def test_sorted_by_case(self):
        df = tiling_table({"13.1": 1, "1": 5, "3.2": 2, "3.1": 4})
        assert list(df.columns) == ["case", "tiling", "cells"]
        assert list(df["tiling"]) == ["1", "3.1", "3.2", "13.1"]
        assert list(df["case"]) == [1, 3, 3, 13]

    def test_empty(self):
        df = tiling_table({})
        assert df.empty
        assert list(df.columns) == ["case", "tiling", "cells"]

    def test_export_csv(self, tmp_path):
        path = tmp_path / "tilings.csv"
        export_tiling_counts({"1": 5, "6.1.2": 1}, path)
        df = pd.read_csv(path, dtype={"tiling": str})
        assert len(df) == 2
        assert df.loc[df["tiling"] == "6.1.2", "cells"].item() == 1


class TestExportSummary:
    def test_numpy_values(self, tmp_path):
        path = tmp_path / "summary.json"
        export_summary(
            {
                "count": np.int64(3),
                "ratio": np.float32(0.5),
                "closed": np.bool_(True),
                "bounds": np.array([1.0, 2.0]),
            },
            path,
        )
        data = json.loads(path.read_text())
        assert data == {"count": 3, "ratio": 0.5, "closed": True, "bounds": [1.0, 2.0]}
