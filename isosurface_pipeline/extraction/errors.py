"""Internal-consistency failures raised while triangulating a cell."""

from __future__ import annotations

from typing import Optional, Tuple


class TopologyError(RuntimeError):
    """A cell resolved to a configuration the lookup tables do not define.

    This points at a corrupted or incompatible lookup dataset, never at the
    input field, so it is not recoverable.
    """

    def __init__(self, message: str, cell: Tuple[int, int, int], lut_entry: int):
        self.cell = tuple(cell)
        self.lut_entry = lut_entry
        super().__init__(f"{message} (cell={self.cell}, lut_entry={lut_entry})")


class UnresolvedVertexError(TopologyError):
    """A triangle template referenced an edge without a surface vertex."""

    def __init__(self, cell: Tuple[int, int, int], lut_entry: int, edge: int,
                 triangle: Optional[int] = None):
        self.edge = edge
        self.triangle = triangle
        super().__init__(f"Edge {edge} has no vertex for triangle {triangle}", cell, lut_entry)
