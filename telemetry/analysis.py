"""Offline helpers for move logs written by ``TelemetryLogger``."""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


def load_telemetry(path: str, max_rows: Optional[int] = None) -> pd.DataFrame:
    """Load a JSONL move log into a DataFrame.

    ``origin`` / ``target`` pairs are split into ``origin_x``, ``origin_y``,
    ``target_x`` and ``target_y`` columns (NaN where the move failed).
    Blank or truncated lines are skipped.
    """
    if not os.path.exists(path):
        return pd.DataFrame()
    records: List[Dict[str, Any]] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError:
                continue
    if not records:
        return pd.DataFrame()
    df = pd.DataFrame.from_records(records)
    for col in ("origin", "target"):
        if col in df.columns:
            xy = np.array(
                [p if isinstance(p, list) and len(p) == 2 else [np.nan, np.nan] for p in df[col]],
                dtype=float,
            )
            df[f"{col}_x"] = xy[:, 0]
            df[f"{col}_y"] = xy[:, 1]
    if max_rows is not None:
        df = df.tail(max_rows)
    return df


def summarize(df: pd.DataFrame) -> Dict[str, Any]:
    """Move counts, success rate, failure breakdown and mean path length."""
    if df.empty:
        return {"moves": 0, "successes": 0, "success_rate": 0.0, "failures": {}, "mean_length": 0.0}
    moved = df[df["moved"]]
    lengths = np.hypot(moved["target_x"] - moved["origin_x"], moved["target_y"] - moved["origin_y"])
    failures = df.loc[~df["moved"], "failure"].value_counts().to_dict()
    return {
        "moves": int(len(df)),
        "successes": int(len(moved)),
        "success_rate": float(len(moved)) / float(len(df)),
        "failures": {str(k): int(v) for k, v in failures.items()},
        "mean_length": float(lengths.mean()) if len(moved) else 0.0,
    }


def plot_trajectory(
    df: pd.DataFrame,
    wall_points: Optional[Sequence[Tuple[float, float]]] = None,
    ax=None,
):
    """Plot the bounce trajectory (successful moves only), optionally over the wall."""
    if ax is None:
        _, ax = plt.subplots()
    if wall_points:
        xs = [p[0] for p in wall_points] + [wall_points[0][0]]
        ys = [p[1] for p in wall_points] + [wall_points[0][1]]
        ax.plot(xs, ys, color="black", linewidth=2, label="wall")
    if not df.empty:
        moved = df[df["moved"]]
        for _, row in moved.iterrows():
            ax.plot([row["origin_x"], row["target_x"]], [row["origin_y"], row["target_y"]], color="tab:blue", alpha=0.6)
        if len(moved):
            ax.scatter(moved["target_x"], moved["target_y"], s=8, color="tab:orange", label="landings")
    ax.set_aspect("equal")
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_title("Robot trajectory")
    return ax
