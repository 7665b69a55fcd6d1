"""
History Module

Collect per-step bearing results into a pandas DataFrame and write them out.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Sequence, Union

import pandas as pd


def history_to_frame(rows: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    """
    Build a DataFrame from a list of per-step records.

    Args:
        rows: One dict per committed step (same keys in every dict)

    Returns:
        pd.DataFrame: One row per step; an empty frame for no rows
    """
    df = pd.DataFrame.from_records(list(rows))
    if "step" in df.columns:
        df["step"] = df["step"].astype(int)
    return df


def export_csv(df: pd.DataFrame, path: Union[str, Path]) -> Path:
    """
    Write a history frame to CSV (no index column).

    Args:
        df: History frame from :func:`history_to_frame`
        path: Output file; parent directories are created

    Returns:
        Path: The written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path
