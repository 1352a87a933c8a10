"""Face and interior tests for the ambiguous Marching Cubes cases.

Both tests are pure functions of the 8 corner values of the current cube.
Signed face ids come straight from the ``test*`` tables: the sign says
which answer counts as "the surface crosses this face".
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from isosurface_pipeline.extraction.classifier import EPSILON, Cube
from isosurface_pipeline.extraction.errors import TopologyError
from isosurface_pipeline.extraction.tables import LookupTables, get_tables

# Corners (A, B, C, D) of faces 1..6 in cyclic order.
FACE_CORNERS: Tuple[Tuple[int, int, int, int], ...] = (
    (0, 4, 5, 1),
    (1, 5, 6, 2),
    (2, 6, 7, 3),
    (3, 7, 4, 0),
    (0, 3, 2, 1),
    (4, 7, 6, 5),
)

# For reference edge e: the corners (a, b) whose zero crossing gives t, then
# the corner pairs interpolated at t for B, C and D (A is the crossing itself).
REFERENCE_EDGE_PLANES: Tuple[Tuple[Tuple[int, int], ...], ...] = (
    ((0, 1), (3, 2), (7, 6), (4, 5)),
    ((1, 2), (0, 3), (4, 7), (5, 6)),
    ((2, 3), (1, 0), (5, 4), (6, 7)),
    ((3, 0), (2, 1), (6, 5), (7, 4)),
    ((4, 5), (7, 6), (3, 2), (0, 1)),
    ((5, 6), (4, 7), (0, 3), (1, 2)),
    ((6, 7), (5, 4), (1, 0), (2, 3)),
    ((7, 4), (6, 5), (2, 1), (3, 0)),
    ((0, 4), (3, 7), (2, 6), (1, 5)),
    ((1, 5), (0, 4), (3, 7), (2, 6)),
    ((2, 6), (1, 5), (0, 4), (3, 7)),
    ((3, 7), (2, 6), (1, 5), (0, 4)),
)

# Sign codes (bit set when A, B, C, D >= 0) whose interior is empty.
_EMPTY_INTERIOR_CODES = frozenset({0, 1, 2, 3, 4, 6, 8, 9, 12})


def face_test(values: np.ndarray, face: int) -> bool:
    """Return True if the surface crosses ``face`` in the queried direction.

    Args:
        values: 8 corner values of the cube.
        face: Signed face id in +-1..+-6.
    """
    a, b, c, d = (values[p] for p in FACE_CORNERS[abs(face) - 1])
    bilinear = a * c - b * d
    if abs(bilinear) < EPSILON:
        return face >= 0
    # face and A invert signs
    return face * a * bilinear >= 0.0


def interior_test(
    cube: Cube,
    s: int,
    subconfig: int = 0,
    tables: Optional[LookupTables] = None,
) -> bool:
    """Asymptotic decider for the inside of a cube.

    Args:
        cube: Classified cube; only cases 4, 6, 7, 10, 12 and 13 are valid.
        s: Query sign from the tables (7 or -7). With ``s > 0`` the result is
            True when the interior is empty, with ``s < 0`` it is False then.
        subconfig: Sub-case index, read only for case 13.
        tables: Lookup tables; the shared ones when omitted.

    Raises:
        TopologyError: For any other case or an invalid reference edge.
    """
    values = cube.values
    if cube.case in (4, 10):
        corners = _bilinear_section(values)
        if corners is None:
            return s > 0
    elif cube.case in (6, 7, 12, 13):
        edge = _reference_edge(cube, subconfig, tables or get_tables())
        corners = _edge_section(values, edge, cube)
    else:
        raise TopologyError(f"Invalid ambiguous case {cube.case}", cube.cell, cube.lut_entry)
    return _decide(corners, s)


def _bilinear_section(values: np.ndarray) -> Optional[Tuple[float, float, float, float]]:
    """Slice of the cube at the extremum of the trilinear saddle (cases 4, 10).

    Returns None when that slice falls outside the cube.
    """
    v = values
    a = (v[4] - v[0]) * (v[6] - v[2]) - (v[7] - v[3]) * (v[5] - v[1])
    b = (v[2] * (v[4] - v[0]) + v[0] * (v[6] - v[2])
         - v[1] * (v[7] - v[3]) - v[3] * (v[5] - v[1]))
    if a == 0:
        return None
    t = -b / (2 * a)
    if t < 0 or t > 1:
        return None
    return (
        v[0] + (v[4] - v[0]) * t,
        v[3] + (v[7] - v[3]) * t,
        v[2] + (v[6] - v[2]) * t,
        v[1] + (v[5] - v[1]) * t,
    )


def _reference_edge(cube: Cube, subconfig: int, tables: LookupTables) -> int:
    if cube.case == 6:
        return int(tables.test6[cube.config][2])
    if cube.case == 7:
        return int(tables.test7[cube.config][4])
    if cube.case == 12:
        return int(tables.test12[cube.config][3])
    return int(tables.tiling13_5_1[cube.config][subconfig][0])


def _edge_section(values: np.ndarray, edge: int, cube: Cube) -> Tuple[float, float, float, float]:
    if not 0 <= edge < len(REFERENCE_EDGE_PLANES):
        raise TopologyError(f"Invalid reference edge {edge}", cube.cell, cube.lut_entry)
    (a0, a1), (b0, b1), (c0, c1), (d0, d1) = REFERENCE_EDGE_PLANES[edge]
    t = values[a0] / (values[a0] - values[a1])
    return (
        0.0,
        values[b0] + (values[b1] - values[b0]) * t,
        values[c0] + (values[c1] - values[c0]) * t,
        values[d0] + (values[d1] - values[d0]) * t,
    )


def _decide(corners: Tuple[float, float, float, float], s: int) -> bool:
    at, bt, ct, dt = corners
    code = int(at >= 0) | int(bt >= 0) << 1 | int(ct >= 0) << 2 | int(dt >= 0) << 3
    if code in _EMPTY_INTERIOR_CODES:
        return s > 0
    if code == 5 and at * ct - bt * dt < EPSILON:
        return s > 0
    if code == 10 and at * ct - bt * dt >= EPSILON:
        return s > 0
    return s < 0
