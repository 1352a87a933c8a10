"""End-to-end pipeline tests with synthetic fields."""

from __future__ import annotations

import json
from pathlib import Path

import h5py
import numpy as np
import pytest
import yaml

from isosurface_pipeline.fields.grid import ScalarGrid
from isosurface_pipeline.fields.implicit import sphere
from isosurface_pipeline.io.iso_format import IsoReader, read_iso, write_iso
from isosurface_pipeline.io.numpy_reader import NumpyReader
from isosurface_pipeline.pipeline import Pipeline


class TestPipeline:
    def test_implicit_surface(self, pipeline_config):
        pipeline = Pipeline(pipeline_config)
        mesh = pipeline.run()

        assert mesh.num_faces > 0
        assert pipeline.warnings == []
        assert pipeline.grid.size == (16, 16, 16)
        # world space: the radius-0.7 sphere
        np.testing.assert_allclose(np.linalg.norm(mesh.vertices, axis=1), 0.7, atol=0.05)

        out = Path(pipeline_config.export.output_dir)
        for name in ("mesh.ply", "mesh.obj", "mesh.iso", "tilings.csv", "summary.json",
                     "pipeline_config.yaml"):
            assert (out / name).exists(), name

    def test_summary_contents(self, pipeline_config):
        pipeline = Pipeline(pipeline_config)
        mesh = pipeline.run()
        out = Path(pipeline_config.export.output_dir)

        summary = json.loads((out / "summary.json").read_text())
        assert summary["grid_size"] == [16, 16, 16]
        assert summary["mesh"]["num_faces"] == mesh.num_faces
        assert summary["mesh"]["euler_characteristic"] == 2
        assert summary["tilings"]["active_cells"] == sum(mesh.tiling_counts.values())
        assert summary["tiling_counts"] == mesh.tiling_counts

        saved = yaml.safe_load((out / "pipeline_config.yaml").read_text())
        assert saved["grid"]["size"] == [16, 16, 16]

    def test_index_space_output(self, pipeline_config):
        pipeline_config.export.world_space = False
        mesh = Pipeline(pipeline_config).run()
        assert mesh.vertices.min() >= 0.0
        assert mesh.vertices.max() <= 15.0

    def test_reader_input(self, pipeline_config, sphere_grid):
        reader = NumpyReader(sphere_grid.data, lower=(-1, -1, -1), upper=(1, 1, 1))
        pipeline = Pipeline(pipeline_config)
        mesh = pipeline.run(reader)
        assert pipeline.grid.size == (24, 24, 24)
        assert mesh.num_faces == sphere_grid.extract().num_faces

    def test_iso_file_input(self, pipeline_config, tmp_path):
        path = tmp_path / "sphere.iso"
        write_iso(ScalarGrid.from_function(sphere, (12, 12, 12)), path)
        pipeline_config.input.format = "iso"
        pipeline_config.input.path = str(path)
        pipeline = Pipeline(pipeline_config)
        mesh = pipeline.run()
        assert pipeline.grid.size == (12, 12, 12)
        assert pipeline.grid.lower == (-1.0, -1.0, -1.0)
        assert pipeline.grid.upper == (1.0, 1.0, 1.0)
        np.testing.assert_array_equal(pipeline.grid.data, read_iso(path).data)
        assert mesh.num_faces > 0

    def test_iso_reader_input(self, pipeline_config, tmp_path):
        path = tmp_path / "sphere.iso"
        write_iso(ScalarGrid.from_function(sphere, (12, 12, 12)), path)
        from_file = Pipeline(pipeline_config)
        pipeline_config.input.format = "iso"
        pipeline_config.input.path = str(path)
        mesh = from_file.run()
        reader_mesh = Pipeline(pipeline_config).run(IsoReader(str(path)))
        np.testing.assert_array_equal(mesh.faces, reader_mesh.faces)

    def test_rejects_non_reader(self, pipeline_config, sphere_grid):
        with pytest.raises(TypeError, match="Not a volume reader: ndarray"):
            Pipeline(pipeline_config).run(sphere_grid.data)

    def test_hdf5_input(self, pipeline_config, tmp_path, sphere_grid):
        path = tmp_path / "sphere.h5"
        with h5py.File(path, "w") as f:
            f.create_dataset("volume", data=sphere_grid.data.transpose(2, 1, 0))
        pipeline_config.input.format = "hdf5"
        pipeline_config.input.path = str(path)
        pipeline_config.input.axis_order = "zyx"
        pipeline = Pipeline(pipeline_config)
        pipeline.run()
        np.testing.assert_allclose(pipeline.grid.data, sphere_grid.data)

    def test_numpy_file_input(self, pipeline_config, tmp_path, sphere_grid):
        path = tmp_path / "sphere.npy"
        np.save(path, sphere_grid.data)
        pipeline_config.input.format = "numpy"
        pipeline_config.input.path = str(path)
        mesh = Pipeline(pipeline_config).run()
        assert mesh.num_faces > 0

    def test_iso_level_and_classic_mode(self, pipeline_config):
        pipeline_config.extraction.iso = -0.2
        pipeline_config.extraction.classic = True
        mesh = Pipeline(pipeline_config).run()
        radii = np.linalg.norm(mesh.vertices, axis=1)
        # x^2 + y^2 + z^2 - 0.49 = -0.2
        np.testing.assert_allclose(radii, np.sqrt(0.29), atol=0.05)
        assert all(name.startswith("classic.") for name in mesh.tiling_counts)

    def test_empty_surface(self, pipeline_config):
        pipeline_config.extraction.iso = 10.0
        pipeline = Pipeline(pipeline_config)
        mesh = pipeline.run()
        assert mesh.is_empty
        assert pipeline.statistics["tilings"] == {"active_cells": 0}

    def test_unknown_export_format(self, pipeline_config):
        pipeline_config.export.formats = ["ply", "stl"]
        with pytest.raises(ValueError, match="Unknown export format"):
            Pipeline(pipeline_config).run()

    def test_unknown_input_format(self, pipeline_config):
        pipeline_config.input.format = "dicom"
        with pytest.raises(ValueError, match="Unknown input format"):
            Pipeline(pipeline_config).run()

    def test_unknown_surface(self, pipeline_config):
        pipeline_config.input.surface = "teapot"
        with pytest.raises(ValueError, match="Unknown surface"):
            Pipeline(pipeline_config).run()
