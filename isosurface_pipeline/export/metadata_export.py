"""CSV and JSON export of extraction statistics."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd

from isosurface_pipeline.extraction.tiling import case_of
from isosurface_pipeline.utils.logging import get_logger

logger = get_logger("export.metadata")


def tiling_table(tiling_counts: Dict[str, int]) -> pd.DataFrame:
    """Tiling histogram as a DataFrame with ``case``, ``tiling`` and ``cells``.

    Rows are sorted by case, then tiling name.
    """
    rows = [
        {"case": case_of(name), "tiling": name, "cells": count}
        for name, count in tiling_counts.items()
    ]
    df = pd.DataFrame(rows, columns=["case", "tiling", "cells"])
    if not df.empty:
        df = df.sort_values(["case", "tiling"]).reset_index(drop=True)
    return df


def export_tiling_counts(tiling_counts: Dict[str, int], path: str | Path) -> None:
    """Export the per-tiling cell counts of a run to CSV.

    Args:
        tiling_counts: Tiling name to number of cells.
        path: Output CSV file path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    df = tiling_table(tiling_counts)
    df.to_csv(path, index=False)
    logger.info("Exported %d tiling records to %s", len(df), path)


def export_summary(summary: Dict[str, Any], path: str | Path) -> None:
    """Export a run summary dictionary to JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(summary, f, indent=2, default=_json_default)
    logger.info("Exported run summary to %s", path)


def _json_default(obj):
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        return float(obj)
    if isinstance(obj, (np.bool_,)):
        return bool(obj)
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
