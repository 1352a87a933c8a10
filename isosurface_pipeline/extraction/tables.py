"""Marching Cubes 33 lookup tables.

The tables are the published ones from Lewiner et al., "Efficient
implementation of Marching Cubes' cases with topological guarantees"
(Journal of Graphics Tools, 2003). scikit-image ships them verbatim with
its own Lewiner implementation, each entry stored as ``(shape, base64)``
of an int8 array. They are decoded once per process and frozen.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, fields
from functools import lru_cache

import numpy as np
from skimage.measure import _marching_cubes_lewiner_luts as _luts

# Cube edge ids used by the templates; 12 refers to the cell centroid.
CENTROID_EDGE = 12


def decode_table(entry) -> np.ndarray:
    """Decode one ``(shape, base64_text)`` table entry into a frozen array."""
    shape, text = entry
    raw = base64.b64decode(text.encode("ascii"))
    table = np.frombuffer(raw, dtype=np.int8).reshape(shape).copy()
    table.setflags(write=False)
    return table


@dataclass(frozen=True)
class LookupTables:
    """Read-only view of the 33-case dataset.

    Field names follow the published C identifiers in lower case.
    """
    cases: np.ndarray
    casesclassic: np.ndarray
    tiling1: np.ndarray
    tiling2: np.ndarray
    test3: np.ndarray
    tiling3_1: np.ndarray
    tiling3_2: np.ndarray
    test4: np.ndarray
    tiling4_1: np.ndarray
    tiling4_2: np.ndarray
    tiling5: np.ndarray
    test6: np.ndarray
    tiling6_1_1: np.ndarray
    tiling6_1_2: np.ndarray
    tiling6_2: np.ndarray
    test7: np.ndarray
    tiling7_1: np.ndarray
    tiling7_2: np.ndarray
    tiling7_3: np.ndarray
    tiling7_4_1: np.ndarray
    tiling7_4_2: np.ndarray
    tiling8: np.ndarray
    tiling9: np.ndarray
    test10: np.ndarray
    tiling10_1_1: np.ndarray
    tiling10_1_1_: np.ndarray
    tiling10_1_2: np.ndarray
    tiling10_2: np.ndarray
    tiling10_2_: np.ndarray
    tiling11: np.ndarray
    test12: np.ndarray
    tiling12_1_1: np.ndarray
    tiling12_1_1_: np.ndarray
    tiling12_1_2: np.ndarray
    tiling12_2: np.ndarray
    tiling12_2_: np.ndarray
    test13: np.ndarray
    subconfig13: np.ndarray
    tiling13_1: np.ndarray
    tiling13_1_: np.ndarray
    tiling13_2: np.ndarray
    tiling13_2_: np.ndarray
    tiling13_3: np.ndarray
    tiling13_3_: np.ndarray
    tiling13_4: np.ndarray
    tiling13_5_1: np.ndarray
    tiling13_5_2: np.ndarray
    tiling14: np.ndarray

    def classify(self, lut_entry: int) -> tuple[int, int]:
        """Map an 8-bit sign mask to its ``(case, config)`` pair."""
        case, config = self.cases[lut_entry]
        return int(case), int(config)

    def classic_template(self, lut_entry: int) -> np.ndarray:
        """Edge ids of the classic (non-disambiguated) triangulation."""
        row = self.casesclassic[lut_entry]
        end = np.flatnonzero(row == -1)
        return row[: end[0]] if len(end) else row


@lru_cache(maxsize=None)
def get_tables() -> LookupTables:
    """Load the lookup tables, decoding them on first use only."""
    return LookupTables(
        **{f.name: decode_table(getattr(_luts, f.name.upper())) for f in fields(LookupTables)}
    )
