"""Tests for the CLI entry point (isosurface_pipeline.cli)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from isosurface_pipeline.cli import main


def _mock_config(output_dir="/tmp/out"):
    config = MagicMock()
    config.export.output_dir = output_dir
    config.extraction.iso = 0.0
    config.extraction.classic = False
    return config


def _run(argv, config):
    with patch("isosurface_pipeline.cli.load_config", return_value=config) as mock_load:
        with patch("isosurface_pipeline.cli.Pipeline") as MockPipeline:
            MockPipeline.return_value.run.return_value = MagicMock(num_vertices=6, num_faces=8)
            MockPipeline.return_value.warnings = []
            main(argv)
    return mock_load, MockPipeline


class TestCLI:
    def test_basic_invocation(self, capsys):
        """main() loads config, runs pipeline, and prints summary."""
        config = _mock_config()
        mock_load, MockPipeline = _run(["--config", "test.yaml"], config)

        mock_load.assert_called_once_with("test.yaml")
        MockPipeline.assert_called_once_with(config)
        MockPipeline.return_value.run.assert_called_once()
        assert "6 vertices, 8 triangles" in capsys.readouterr().out

    def test_output_dir_override(self, tmp_path):
        config = _mock_config(str(tmp_path / "orig"))
        _run(["--config", "test.yaml", "--output-dir", "/new/out"], config)
        assert config.export.output_dir == "/new/out"

    def test_no_output_dir_override_when_not_passed(self, tmp_path):
        initial_dir = str(tmp_path / "initial")
        config = _mock_config(initial_dir)
        _run(["--config", "test.yaml"], config)
        assert config.export.output_dir == initial_dir

    def test_iso_override(self):
        config = _mock_config()
        _run(["--config", "test.yaml", "--iso", "0.25"], config)
        assert config.extraction.iso == 0.25

    def test_iso_kept_when_not_passed(self):
        config = _mock_config()
        config.extraction.iso = 1.5
        _run(["--config", "test.yaml"], config)
        assert config.extraction.iso == 1.5

    def test_classic_flag(self):
        config = _mock_config()
        _run(["--config", "test.yaml", "--classic"], config)
        assert config.extraction.classic is True

    def test_verbose_flag_sets_debug_level(self):
        config = _mock_config()
        _run(["--config", "test.yaml", "--verbose"], config)
        assert config.logging.level == "DEBUG"

    def test_prints_mesh_warnings(self, capsys):
        config = _mock_config()
        with patch("isosurface_pipeline.cli.load_config", return_value=config):
            with patch("isosurface_pipeline.cli.Pipeline") as MockPipeline:
                MockPipeline.return_value.run.return_value = MagicMock(num_vertices=3, num_faces=1)
                MockPipeline.return_value.warnings = ["3 boundary edges"]
                main(["--config", "test.yaml"])
        assert "3 boundary edges" in capsys.readouterr().out

    def test_missing_config_arg_exits(self):
        """Omitting required --config argument raises SystemExit."""
        with pytest.raises(SystemExit):
            main([])

    def test_invalid_iso_exits(self):
        with pytest.raises(SystemExit):
            main(["--config", "test.yaml", "--iso", "high"])
