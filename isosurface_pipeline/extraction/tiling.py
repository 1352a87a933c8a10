"""Case dispatch: pick the triangle template of a classified cube.

Each handler maps a cube and the lookup tables to a :class:`Tiling`. The
handlers only read the cube; the driver turns the template into vertices
and triangles.
"""

from __future__ import annotations

from typing import Callable, Dict, NamedTuple

import numpy as np

from isosurface_pipeline.extraction.ambiguity import face_test, interior_test
from isosurface_pipeline.extraction.classifier import Cube
from isosurface_pipeline.extraction.errors import TopologyError
from isosurface_pipeline.extraction.tables import LookupTables

_NO_TRIANGLES = np.zeros(0, dtype=np.int8)


class Tiling(NamedTuple):
    """A selected template.

    ``triangles`` is a flat sequence of edge ids, three per triangle.
    ``centroid`` tells whether edge id 12 (the cell centroid) is used.
    """
    name: str
    triangles: np.ndarray
    centroid: bool = False
    subconfig: int = 0

    @property
    def num_triangles(self) -> int:
        return len(self.triangles) // 3


TilingHandler = Callable[[Cube, LookupTables], Tiling]


def _single(case: int) -> TilingHandler:
    def handler(cube: Cube, tables: LookupTables) -> Tiling:
        return Tiling(str(case), getattr(tables, f"tiling{case}")[cube.config])

    handler.__name__ = f"tile_case{case}"
    return handler


def _face(cube: Cube, face) -> bool:
    return face_test(cube.values, int(face))


def _interior(cube: Cube, s, tables: LookupTables, subconfig: int = 0) -> bool:
    return interior_test(cube, int(s), subconfig, tables)


def tile_empty(cube: Cube, tables: LookupTables) -> Tiling:
    return Tiling("0", _NO_TRIANGLES)


def tile_case3(cube: Cube, tables: LookupTables) -> Tiling:
    c = cube.config
    if _face(cube, tables.test3[c]):
        return Tiling("3.2", tables.tiling3_2[c])
    return Tiling("3.1", tables.tiling3_1[c])


def tile_case4(cube: Cube, tables: LookupTables) -> Tiling:
    c = cube.config
    if _interior(cube, tables.test4[c], tables):
        return Tiling("4.1.1", tables.tiling4_1[c])
    return Tiling("4.1.2", tables.tiling4_2[c])


def tile_case6(cube: Cube, tables: LookupTables) -> Tiling:
    c = cube.config
    if _face(cube, tables.test6[c][0]):
        return Tiling("6.2", tables.tiling6_2[c])
    if _interior(cube, tables.test6[c][1], tables):
        return Tiling("6.1.1", tables.tiling6_1_1[c])
    return Tiling("6.1.2", tables.tiling6_1_2[c], centroid=True)


def tile_case7(cube: Cube, tables: LookupTables) -> Tiling:
    c = cube.config
    sub = 0
    for bit in range(3):
        if _face(cube, tables.test7[c][bit]):
            sub |= 1 << bit
    cube.subconfig = sub

    if sub == 0:
        return Tiling("7.1", tables.tiling7_1[c], subconfig=sub)
    if sub in (1, 2, 4):
        return Tiling("7.2", tables.tiling7_2[c][sub.bit_length() - 1], subconfig=sub)
    if sub in (3, 5, 6):
        return Tiling("7.3", tables.tiling7_3[c][(3, 5, 6).index(sub)], centroid=True, subconfig=sub)
    if _interior(cube, tables.test7[c][3], tables):
        return Tiling("7.4.2", tables.tiling7_4_2[c], subconfig=sub)
    return Tiling("7.4.1", tables.tiling7_4_1[c], subconfig=sub)


def _two_face_case(case: int) -> TilingHandler:
    """Cases 10 and 12 share the same decision tree."""

    def handler(cube: Cube, tables: LookupTables) -> Tiling:
        c = cube.config
        test = getattr(tables, f"test{case}")[c]

        def tiling(suffix: str) -> np.ndarray:
            return getattr(tables, f"tiling{case}_{suffix}")[c]

        first, second = _face(cube, test[0]), _face(cube, test[1])
        if first and second:
            return Tiling(f"{case}.1.1_", tiling("1_1_"))
        if first:
            return Tiling(f"{case}.2", tiling("2"), centroid=True)
        if second:
            return Tiling(f"{case}.2_", tiling("2_"), centroid=True)
        if _interior(cube, test[2], tables):
            return Tiling(f"{case}.1.1", tiling("1_1"))
        return Tiling(f"{case}.1.2", tiling("1_2"))

    handler.__name__ = f"tile_case{case}"
    return handler


def tile_case13(cube: Cube, tables: LookupTables) -> Tiling:
    c = cube.config
    raw = 0
    for bit in range(6):
        if _face(cube, tables.test13[c][bit]):
            raw |= 1 << bit
    sub = int(tables.subconfig13[raw])
    cube.subconfig = sub

    if sub == 0:
        return Tiling("13.1", tables.tiling13_1[c], subconfig=sub)
    if 1 <= sub <= 6:
        return Tiling("13.2", tables.tiling13_2[c][sub - 1], subconfig=sub)
    if 7 <= sub <= 18:
        return Tiling("13.3", tables.tiling13_3[c][sub - 7], centroid=True, subconfig=sub)
    if 19 <= sub <= 22:
        return Tiling("13.4", tables.tiling13_4[c][sub - 19], centroid=True, subconfig=sub)
    if 23 <= sub <= 26:
        edge_set = sub - 23
        if _interior(cube, tables.test13[c][6], tables, subconfig=edge_set):
            return Tiling("13.5.1", tables.tiling13_5_1[c][edge_set], subconfig=sub)
        return Tiling("13.5.2", tables.tiling13_5_2[c][edge_set], subconfig=sub)
    if 27 <= sub <= 38:
        return Tiling("13.3_", tables.tiling13_3_[c][sub - 27], centroid=True, subconfig=sub)
    if 39 <= sub <= 44:
        return Tiling("13.2_", tables.tiling13_2_[c][sub - 39], subconfig=sub)
    if sub == 45:
        return Tiling("13.1_", tables.tiling13_1_[c], subconfig=sub)
    raise TopologyError(
        f"Impossible case 13 sub-case {sub} (face bits {raw:06b})", cube.cell, cube.lut_entry
    )


CASE_HANDLERS: Dict[int, TilingHandler] = {
    0: tile_empty,
    1: _single(1),
    2: _single(2),
    3: tile_case3,
    4: tile_case4,
    5: _single(5),
    6: tile_case6,
    7: tile_case7,
    8: _single(8),
    9: _single(9),
    10: _two_face_case(10),
    11: _single(11),
    12: _two_face_case(12),
    13: tile_case13,
    14: _single(14),
}


def classic_tiling(cube: Cube, tables: LookupTables) -> Tiling:
    """Template of the classic 256-entry table, without disambiguation."""
    return Tiling(f"classic.{cube.case}", tables.classic_template(cube.lut_entry))


def select_tiling(cube: Cube, tables: LookupTables, classic: bool = False) -> Tiling:
    """Resolve a classified cube to its template.

    Raises:
        TopologyError: If the cube's case has no handler or an ambiguity
            test lands outside the tables.
    """
    if classic:
        return classic_tiling(cube, tables)
    handler = CASE_HANDLERS.get(cube.case)
    if handler is None:
        raise TopologyError(f"Unknown case {cube.case}", cube.cell, cube.lut_entry)
    return handler(cube, tables)


def case_of(tiling_name: str) -> int:
    """Case number of a tiling name, e.g. ``"13.5.1"`` -> 13, ``"classic.7"`` -> 7."""
    parts = tiling_name.split(".")
    return int(parts[1] if parts[0] == "classic" else parts[0])
