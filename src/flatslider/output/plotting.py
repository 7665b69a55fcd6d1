"""
Plotting Module

Force-displacement loops for the flat slider.
"""

from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd


def plot_hysteresis(
    df: pd.DataFrame,
    x: str = "uy",
    y: str = "Vy",
    ax=None,
    label: Optional[str] = None,
    style: Optional[dict] = None,
):
    """
    Plot one hysteresis loop from a displacement-history frame.

    Args:
        df: Frame returned by ``run_displacement_history``
        x: Displacement column
        y: Force column
        ax: Existing axes to draw on (a new figure is created otherwise)
        label: Legend label
        style: Optional line style dictionary

    Returns:
        The matplotlib axes
    """
    for col in (x, y):
        if col not in df.columns:
            raise KeyError(f"Column '{col}' not in history frame")
    if style is None:
        style = {"color": "#1f77b4", "linewidth": 1.2}
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 4.5))

    ax.plot(df[x].to_numpy(), df[y].to_numpy(), label=label, **style)
    ax.axhline(0.0, color="0.6", linewidth=0.6)
    ax.axvline(0.0, color="0.6", linewidth=0.6)
    ax.set_xlabel(f"{x} [disp]")
    ax.set_ylabel(f"{y} [force]")
    ax.set_title("Flat slider hysteresis")
    ax.grid(True, alpha=0.3)
    if label is not None:
        ax.legend()
    return ax
