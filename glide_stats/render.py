from __future__ import annotations
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .domain import GlideConfig


def _not_gliding_spans(t: np.ndarray, gliding: np.ndarray) -> list[tuple[float, float]]:
    """Time spans where the tracker was not gliding."""
    spans: list[tuple[float, float]] = []
    i = 0
    n = len(gliding)
    while i < n:
        if gliding[i]:
            i += 1
            continue
        j = i
        while j < n and not gliding[j]:
            j += 1
        t_end = t[j] if j < n else t[-1]
        spans.append((float(t[i]), float(t_end)))
        i = j
    return spans


def make_replay_figure(out: pd.DataFrame, config: GlideConfig):
    t = out["t"].to_numpy(float)
    ratio = out["ratio"].to_numpy(float)
    descent = out["descent_speed"].to_numpy(float)
    delta_pct = 100.0 * out["speed_delta"].to_numpy(float)
    completeness_pct = 100.0 * out["completeness"].to_numpy(float)
    gliding = (out["state"] == "tracking").to_numpy()

    fig, axes = plt.subplots(
        nrows=4,
        ncols=1,
        figsize=(14, 10),
        sharex=True,
        gridspec_kw={"height_ratios": [1.2, 1.2, 1.0, 0.8]},
    )
    ax_ratio, ax_desc, ax_delta, ax_comp = axes

    # --- Glide ratio ---
    ax_ratio.plot(t, ratio, linewidth=2.0, label="Glide ratio (window min)")
    ax_ratio.set_ylabel("Ratio")
    ax_ratio.grid(True, alpha=0.2)
    ax_ratio.legend(loc="upper right")

    # --- Descent speed ---
    ax_desc.plot(t, descent, linewidth=2.0, label="Descent (window max, m/s)")
    ax_desc.set_ylabel("Descent (m/s)")
    ax_desc.grid(True, alpha=0.2)
    ax_desc.legend(loc="upper right")

    # --- Speed stability ---
    ax_delta.plot(t, delta_pct, linewidth=2.0, linestyle="-.", label="Speed delta (%)")
    ax_delta.axhline(
        100.0 * config.stabilization_threshold, linestyle=":", linewidth=1.5, label="Stabilization threshold"
    )
    ax_delta.set_ylabel("Speed delta (%)")
    ax_delta.grid(True, alpha=0.2)
    ax_delta.legend(loc="upper right")

    # --- Window completeness ---
    ax_comp.plot(t, completeness_pct, linewidth=2.0, linestyle="--", label="Window complete (%)")
    ax_comp.set_ylim(-5, 105)
    ax_comp.set_ylabel("Complete (%)")
    ax_comp.set_xlabel("Time (s)")
    ax_comp.grid(True, alpha=0.2)
    ax_comp.legend(loc="lower right")

    # Shade every panel where the tracker dropped out
    if len(t):
        for t_start, t_end in _not_gliding_spans(t, gliding):
            for ax in axes:
                ax.axvspan(t_start, t_end, alpha=0.18, color="grey")

    fig.suptitle(f"Glide Stats: {config.sampling_window_s:.0f} s window ({config.name})", y=0.995)
    fig.tight_layout(rect=(0.0, 0.0, 1.0, 0.98))
    return fig
