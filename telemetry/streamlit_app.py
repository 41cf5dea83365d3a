from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path

import matplotlib.pyplot as plt
import streamlit as st

# Ensure project root is on path when launched with `streamlit run`
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from burst_sim.world import WallSpace
from telemetry.analysis import load_telemetry, plot_trajectory, summarize


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "--log-path",
        type=str,
        default="telemetry_logs/bounce.jsonl",
        help="Path to telemetry JSONL log file.",
    )
    parser.add_argument(
        "--map",
        type=str,
        default=None,
        help="Optional JSON map file drawn under the trajectory.",
    )
    args, _ = parser.parse_known_args()
    return args


def main() -> None:
    args = parse_args()

    st.set_page_config(page_title="Bouncing Robot Telemetry", layout="wide")
    st.title("Bouncing Robot Telemetry Dashboard")

    wall_points = None
    if args.map and os.path.exists(args.map):
        wall = WallSpace.from_map_file(args.map)
        if wall:
            wall_points = wall.value.points

    status_placeholder = st.empty()
    col1, col2 = st.columns(2)
    traj_fig = col1.empty()
    heading_fig = col2.empty()
    stats_placeholder = st.empty()

    refresh_interval = st.sidebar.slider("Refresh interval (s)", 0.5, 5.0, 1.0, 0.5)
    max_rows = st.sidebar.number_input("Rows shown", min_value=10, max_value=100000, value=2000, step=100)

    while True:
        df = load_telemetry(args.log_path, max_rows=int(max_rows))
        if df.empty:
            status_placeholder.info(f"Waiting for telemetry at '{args.log_path}'...")
            time.sleep(refresh_interval)
            continue

        status_placeholder.success(f"Streaming from '{args.log_path}' ({len(df)} records)")

        with traj_fig.container():
            fig, ax = plt.subplots()
            plot_trajectory(df, wall_points=wall_points, ax=ax)
            traj_fig.pyplot(fig)
            plt.close(fig)

        with heading_fig.container():
            fig2, ax2 = plt.subplots()
            ax2.plot(df["step"].values, df["heading"].values, label="heading")
            ax2.plot(df["step"].values, df["noisy_heading"].values, label="noisy heading", alpha=0.7)
            ax2.set_xlabel("Step")
            ax2.set_ylabel("Heading [rad]")
            ax2.legend(loc="upper right")
            heading_fig.pyplot(fig2)
            plt.close(fig2)

        stats = summarize(df)
        stats_text = "Run stats:\n"
        stats_text += f"- Moves: {stats['moves']}\n"
        stats_text += f"- Success rate: {stats['success_rate']:.2%}\n"
        stats_text += f"- Mean path length: {stats['mean_length']:.3f}\n"
        for reason, count in stats["failures"].items():
            stats_text += f"- {reason}: {count}\n"
        stats_placeholder.text(stats_text)

        time.sleep(refresh_interval)


if __name__ == "__main__":
    main()
