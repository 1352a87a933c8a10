"""Catalogue of named implicit surfaces.

Every function takes broadcastable coordinate arrays ``x, y, z`` and
returns the field value; the surface is its zero set. Positive values lie
outside for the closed surfaces.
"""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np

ImplicitFunction = Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]


def sphere(x, y, z):
    return x**2 + y**2 + z**2 - 0.49


def ellipsoid(x, y, z):
    return 2 * x**2 + y**2 + z**2 - 0.49


def hyperboloid(x, y, z):
    return 2 * x**2 - y**2 - z**2 - 0.49


def plane(x, y, z):
    return x + y + z


def cubic(x, y, z):
    return 4 * y**2 - 8 * x**3 + 2 * x


def cushin(x, y, z):
    x, y, z = 1.5 * x, 1.5 * y, 1.5 * z
    return (
        z**2 * x**2 - z**4 - 2 * z * x**2 + 2 * z**3 + x**2 - z**2
        - (x**2 - z) ** 2
        - y**4 - 2 * x**2 * y**2 - y**2 * z**2 + 2 * y**2 * z + y**2
    )


def cassini(x, y, z):
    x, y, z = 1.7 * x, 1.7 * y, 1.7 * z
    s = x**2 + y**2 + z**2 + 0.45**2
    return s * s - 16 * 0.45**2 * (x**2 + z**2) - 0.25


def blooby(x, y, z):
    return (3 * x) ** 4 - 45 * x**2 + (3 * y) ** 4 - 45 * y**2 + (3 * z) ** 4 - 45 * z**2 + 11.8


def chair(x, y, z):
    x, y, z = 5 * x, 5 * y, 5 * z
    s = x**2 + y**2 + z**2 - 0.95 * 25
    return s * s - 0.8 * ((z - 5) ** 2 - 2 * x**2) * ((z + 5) ** 2 - 2 * y**2)


def cyclide(x, y, z):
    x, y, z = 10 * x + 4, 10 * y, 10 * z
    ab = (25 - 6.9**2) * (25 - 2.9**2)
    return (
        ab * (x**4 + y**4 + z**4)
        + 2 * ab * (x**2 * y**2 + x**2 * z**2 + y**2 * z**2)
        + 18 * (21 + 4.9**2) * (4 * x + 9) * (x**2 + y**2 + z**2)
        + 4 * 3**4 * (2 * x) * (-9 + 2 * x)
        + 4 * 3**4 * 4.9**2 * y**2
        + 3**8
    )


def two_spheres(x, y, z):
    first = (x - 0.31) ** 2 + (y - 0.31) ** 2 + (z - 0.31) ** 2 - 0.263
    second = (x + 0.3) ** 2 + (y + 0.3) ** 2 + (z + 0.3) ** 2 - 0.263
    return first * second


def two_torii(x, y, z):
    x, y, z = 8 * x, 8 * y - 2, 8 * z
    r2 = 1.85 * 1.85
    a = x**2 + y**2 + z**2 + 16 - r2
    first = a * a - 64 * (x**2 + y**2)
    y = y + 4
    b = x**2 + y**2 + z**2 + 16 - r2
    second = b * b - 64 * (y**2 + z**2)
    return first * second + 1025


def heart(x, y, z):
    x, y, z = 1.3 * x, 1.3 * y, 1.3 * z
    return (2 * x**2 + y**2 + z**2 - 1) ** 3 - 0.1 * x**2 * z**3 - y**2 * z**3


SURFACE_REGISTRY: Dict[str, ImplicitFunction] = {
    "sphere": sphere,
    "ellipsoid": ellipsoid,
    "hyperboloid": hyperboloid,
    "plane": plane,
    "cubic": cubic,
    "cushin": cushin,
    "cassini": cassini,
    "blooby": blooby,
    "chair": chair,
    "cyclide": cyclide,
    "two_spheres": two_spheres,
    "two_torii": two_torii,
    "heart": heart,
}


def get_surface(name: str) -> ImplicitFunction:
    """Look up a named implicit surface.

    Raises:
        ValueError: If no surface has that name.
    """
    if name not in SURFACE_REGISTRY:
        raise ValueError(f"Unknown surface: {name}. Available: {list(SURFACE_REGISTRY.keys())}")
    return SURFACE_REGISTRY[name]
