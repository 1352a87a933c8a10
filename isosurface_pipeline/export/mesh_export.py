"""Export extracted meshes to PLY and Wavefront OBJ through trimesh."""

from __future__ import annotations

from pathlib import Path

import trimesh

from isosurface_pipeline.utils.logging import get_logger
from isosurface_pipeline.utils.types import Mesh

logger = get_logger("export.mesh")


def to_trimesh(mesh: Mesh) -> trimesh.Trimesh:
    """Wrap a mesh as a ``trimesh.Trimesh`` carrying the gradient normals.

    ``process=False`` keeps vertex order and the shared-vertex indexing
    exactly as extracted.
    """
    return trimesh.Trimesh(
        vertices=mesh.vertices,
        faces=mesh.faces,
        vertex_normals=mesh.normals,
        process=False,
    )


def export_ply(mesh: Mesh, path: str | Path) -> bool:
    """Export a mesh to ASCII PLY with per-vertex normals.

    Args:
        mesh: Mesh to export.
        path: Output file path.

    Returns:
        False when the mesh is empty and nothing was written.
    """
    if mesh.is_empty:
        logger.warning("Empty mesh, skipping PLY export to %s", path)
        return False

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    to_trimesh(mesh).export(str(path), file_type="ply", encoding="ascii", vertex_normal=True)

    logger.info("Exported %d vertices, %d faces to %s", mesh.num_vertices, mesh.num_faces, path)
    return True


def export_obj(mesh: Mesh, path: str | Path) -> bool:
    """Export a mesh to Wavefront OBJ with vertex normals."""
    if mesh.is_empty:
        logger.warning("Empty mesh, skipping OBJ export to %s", path)
        return False

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    to_trimesh(mesh).export(str(path), file_type="obj", include_normals=True)

    logger.info("Exported mesh to %s", path)
    return True
