"""Main pipeline orchestrator."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Dict, List, Optional

from isosurface_pipeline.analysis.topology import check_topology
from isosurface_pipeline.export.mesh_export import export_obj, export_ply
from isosurface_pipeline.export.metadata_export import export_summary, export_tiling_counts
from isosurface_pipeline.extraction.marching_cubes import MarchingCubes
from isosurface_pipeline.fields.grid import ScalarGrid
from isosurface_pipeline.fields.implicit import get_surface
from isosurface_pipeline.io.iso_format import write_iso
from isosurface_pipeline.io.volume_reader import VolumeReader
from isosurface_pipeline.utils.config import PipelineConfig, save_config
from isosurface_pipeline.utils.logging import get_logger, setup_logging
from isosurface_pipeline.utils.types import Mesh
from isosurface_pipeline.visualization.diagnostics import mesh_statistics, tiling_statistics
from isosurface_pipeline.visualization.plot_mesh import plot_mesh

logger = get_logger("pipeline")

EXPORT_FORMATS = ("ply", "obj", "iso", "csv", "json", "png")


class Pipeline:
    """Orchestrates grid construction, extraction, checks and export."""

    def __init__(self, config: PipelineConfig):
        self.config = config
        self.grid: Optional[ScalarGrid] = None
        self.mesh: Optional[Mesh] = None
        self.warnings: List[str] = []
        self.statistics: Dict = {}

    def run(self, reader: Optional[VolumeReader] = None) -> Mesh:
        """Run the full pipeline.

        Args:
            reader: Anything satisfying ``VolumeReader``. If None, the grid
                comes from config.

        Returns:
            The extracted mesh, in world space when configured so.

        Raises:
            TypeError: If ``reader`` does not satisfy ``VolumeReader``.
        """
        if reader is not None and not isinstance(reader, VolumeReader):
            raise TypeError(f"Not a volume reader: {type(reader).__name__}")

        setup_logging(self.config.logging)
        logger.info("Starting pipeline: %s v%s", self.config.name, self.config.version)
        start_time = time.time()

        unknown = set(self.config.export.formats) - set(EXPORT_FORMATS)
        if unknown:
            raise ValueError(f"Unknown export format(s): {sorted(unknown)}. Available: {list(EXPORT_FORMATS)}")

        output_dir = Path(self.config.export.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        # Save config for reproducibility
        save_config(self.config, output_dir / "pipeline_config.yaml")

        # 1. Build the sample grid
        self.grid = reader.to_grid() if reader is not None else self._create_grid()
        logger.info(
            "Grid size: %s, bounds: %s .. %s", self.grid.size, self.grid.lower, self.grid.upper
        )

        # 2. Extract
        extraction = self.config.extraction
        mc = MarchingCubes(
            self.grid.data,
            classic=extraction.classic,
            initial_capacity=extraction.initial_capacity,
        )
        mesh = mc.run(extraction.iso)

        # 3. Check topology
        self.warnings = check_topology(mesh)
        for warning in self.warnings:
            logger.warning("Mesh check: %s", warning)

        # 4. Rescale
        if self.config.export.world_space:
            mesh = mesh.to_world(self.grid.lower, self.grid.spacing)
        self.mesh = mesh

        # 5. Export
        self.statistics = {
            "mesh": mesh_statistics(mesh),
            "tilings": tiling_statistics(mesh.tiling_counts),
        }
        self._export(output_dir)

        # 6. Summary
        elapsed = time.time() - start_time
        self._log_summary(elapsed)

        return mesh

    def _create_grid(self) -> ScalarGrid:
        """Create the sample grid from config."""
        fmt = self.config.input.format
        path = self.config.input.path
        dataset = self.config.input.dataset
        axis_order = self.config.input.axis_order
        grid = self.config.grid

        if fmt == "implicit":
            func = get_surface(self.config.input.surface)
            return ScalarGrid.from_function(func, grid.size, grid.lower, grid.upper)
        if fmt == "iso":
            from isosurface_pipeline.io.iso_format import IsoReader

            reader = IsoReader(path)
        elif fmt == "hdf5":
            from isosurface_pipeline.io.hdf5_reader import HDF5Reader

            reader = HDF5Reader(path, dataset, axis_order, grid.lower, grid.upper)
        elif fmt == "zarr":
            from isosurface_pipeline.io.zarr_reader import ZarrReader

            reader = ZarrReader(path, dataset, axis_order, grid.lower, grid.upper)
        elif fmt == "numpy":
            from isosurface_pipeline.io.numpy_reader import NumpyReader

            reader = NumpyReader.from_file(
                path, axis_order=axis_order, lower=grid.lower, upper=grid.upper
            )
        else:
            raise ValueError(f"Unknown input format: {fmt}")
        return reader.to_grid()

    def _export(self, output_dir: Path) -> None:
        """Export all results."""
        logger.info("Exporting results to %s", output_dir)

        formats = self.config.export.formats
        base = output_dir / self.config.export.basename

        if "ply" in formats:
            export_ply(self.mesh, base.with_suffix(".ply"))

        if "obj" in formats:
            export_obj(self.mesh, base.with_suffix(".obj"))

        if "iso" in formats:
            write_iso(self.grid, base.with_suffix(".iso"))

        if "csv" in formats:
            export_tiling_counts(self.mesh.tiling_counts, output_dir / "tilings.csv")

        if "json" in formats:
            summary = {
                "name": self.config.name,
                "version": self.config.version,
                "grid_size": list(self.grid.size),
                "iso": self.config.extraction.iso,
                "classic": self.config.extraction.classic,
                "warnings": self.warnings,
                **self.statistics,
                "tiling_counts": self.mesh.tiling_counts,
            }
            export_summary(summary, output_dir / "summary.json")

        if "png" in formats:
            plot_mesh(self.mesh, base.with_suffix(".png"), title=self.config.name)

    def _log_summary(self, elapsed: float) -> None:
        """Log pipeline summary statistics."""
        logger.info("=" * 60)
        logger.info("Pipeline complete in %.1f seconds", elapsed)

        stats = self.statistics["mesh"]
        logger.info("Mesh: %d vertices, %d faces", stats["num_vertices"], stats["num_faces"])
        if "components" in stats:
            logger.info(
                "Components: %d, Euler characteristic: %d",
                stats["components"],
                stats["euler_characteristic"],
            )

        tilings = self.statistics["tilings"]
        logger.info(
            "Active cells: %d (%d ambiguous)",
            tilings["active_cells"],
            tilings.get("ambiguous_cells", 0),
        )
        logger.info("=" * 60)
