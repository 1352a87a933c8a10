"""3D preview rendering of extracted meshes."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np

from isosurface_pipeline.utils.logging import get_logger
from isosurface_pipeline.utils.types import Mesh

logger = get_logger("visualization.plot_mesh")

try:
    import matplotlib.pyplot as plt
    from mpl_toolkits.mplot3d.art3d import Poly3DCollection

    _HAS_MPL = True
except ImportError:
    _HAS_MPL = False


def plot_mesh(
    mesh: Mesh,
    output_path: Optional[str | Path] = None,
    title: str = "Iso-surface",
    color: str = "steelblue",
) -> bool:
    """Render a mesh with flat shading from its face normals.

    Args:
        mesh: Mesh to render.
        output_path: If provided, save figure to this path.
        title: Plot title.
        color: Base face color.

    Returns:
        True if a figure was produced.
    """
    if not _HAS_MPL:
        logger.warning("matplotlib not available, skipping plot")
        return False
    if mesh.is_empty:
        logger.warning("Mesh has no faces, skipping plot")
        return False

    fig = plt.figure(figsize=(8, 8))
    ax = fig.add_subplot(111, projection="3d")

    triangles = mesh.vertices[mesh.faces]
    collection = Poly3DCollection(triangles, alpha=0.9, linewidths=0.1, edgecolor="k")
    collection.set_facecolor(_shade(triangles, color))
    ax.add_collection3d(collection)

    lower, upper = mesh.vertices.min(axis=0), mesh.vertices.max(axis=0)
    center, radius = (lower + upper) / 2, max(float((upper - lower).max()) / 2, 1e-6)
    ax.set_xlim(center[0] - radius, center[0] + radius)
    ax.set_ylim(center[1] - radius, center[1] + radius)
    ax.set_zlim(center[2] - radius, center[2] + radius)
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_zlabel("Z")
    ax.set_title(f"{title} ({mesh.num_faces} triangles)")

    if output_path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(str(path), dpi=150, bbox_inches="tight")
        logger.info("Saved mesh preview to %s", path)
    else:
        plt.show()

    plt.close(fig)
    return True


def _shade(triangles: np.ndarray, color: str) -> np.ndarray:
    """Lambert shading against a fixed light direction."""
    from matplotlib.colors import to_rgba

    normals = np.cross(triangles[:, 1] - triangles[:, 0], triangles[:, 2] - triangles[:, 0])
    lengths = np.linalg.norm(normals, axis=1)
    lengths[lengths == 0] = 1.0
    light = np.array([0.3, 0.4, 0.85])
    light /= np.linalg.norm(light)
    intensity = 0.35 + 0.65 * np.abs(normals @ light) / lengths
    rgba = np.tile(to_rgba(color), (len(triangles), 1))
    rgba[:, :3] *= intensity[:, None]
    return rgba
