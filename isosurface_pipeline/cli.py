"""Command-line interface for the isosurface pipeline."""

from __future__ import annotations

import argparse

from isosurface_pipeline.pipeline import Pipeline
from isosurface_pipeline.utils.config import load_config


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the isosurface pipeline."""
    parser = argparse.ArgumentParser(
        prog="isosurface-pipeline",
        description="Topologically consistent iso-surface extraction (Marching Cubes 33)",
    )
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Override output directory from config",
    )
    parser.add_argument(
        "--iso",
        type=float,
        default=None,
        help="Override iso-level from config",
    )
    parser.add_argument(
        "--classic",
        action="store_true",
        help="Use the classic non-disambiguated triangulation",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    args = parser.parse_args(argv)

    config = load_config(args.config)

    if args.output_dir:
        config.export.output_dir = args.output_dir

    if args.iso is not None:
        config.extraction.iso = args.iso

    if args.classic:
        config.extraction.classic = True

    if args.verbose:
        config.logging.level = "DEBUG"

    pipeline = Pipeline(config)
    mesh = pipeline.run()

    print(f"\nPipeline complete. {mesh.num_vertices} vertices, {mesh.num_faces} triangles.")
    if pipeline.warnings:
        print(f"Mesh warnings: {'; '.join(pipeline.warnings)}")
    print(f"Results saved to: {config.export.output_dir}")


if __name__ == "__main__":
    main()
