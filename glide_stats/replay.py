from __future__ import annotations
from pathlib import Path
from typing import IO, Optional, Union
import math

import numpy as np
import pandas as pd

from .display import format_status
from .domain import GlideConfig, GlideSummary, TickInput
from .tracker import GlideTracker

CSVSource = Union[str, Path, IO[bytes], IO[str]]

FPM_TO_MPS = 0.00508

# Optional control columns and their value when absent
OPTIONAL_COLUMNS = {
    "flying": True,
    "throttle": 0.0,
    "trim": False,
    "sas": False,
    "ctrl_input": False,
}

REPLAY_COLUMNS = [
    "t", "state", "reason", "completeness", "ratio",
    "descent_speed", "speed_delta", "stabilizing", "controlled", "status",
]


# -----------------------------
# Helpers
# -----------------------------

def _normalize_col(c: str) -> str:
    return c.strip().lower().replace(" ", "").replace("_", "")


def _pick_col(df: pd.DataFrame, candidates: list[str]) -> str | None:
    # match by normalized name
    norm_map = {_normalize_col(c): c for c in df.columns}
    for cand in candidates:
        key = _normalize_col(cand)
        if key in norm_map:
            return norm_map[key]
    return None


def _as_bool(s: pd.Series, default: bool = False) -> pd.Series:
    """CSV booleans come in as 0/1, True/False or yes/no. Empty cells take `default`."""
    if s.dtype == bool:
        return s
    missing = s.isna()
    if pd.api.types.is_numeric_dtype(s):
        values = s.fillna(0).astype(float) != 0
    else:
        values = s.astype(str).str.strip().str.lower().isin(["1", "true", "yes", "y", "on"])
    return values.mask(missing, default)


# -----------------------------
# Loading
# -----------------------------
def load_ticks(csv_source: CSVSource) -> pd.DataFrame:
    """
    Load a telemetry CSV into one row per tick.

    Expected CSV columns:
      t (or Time), vs_mps (or vs_fpm), hspeed_mps, speed_mps
    Optional:
      flying, throttle, trim, sas, ctrl_input

    Returns a DataFrame with columns
      t, vs_mps, hspeed_mps, speed_mps, flying, throttle, trim, sas, ctrl_input
    sorted by time, with duplicate timestamps dropped.
    """
    raw = pd.read_csv(csv_source)
    found = list(raw.columns)

    t_col = _pick_col(raw, ["t", "Time"])
    if t_col is None:
        raise ValueError(f"No time column found. Expected 't' or 'Time'. Found: {found}")

    df = pd.DataFrame({"t": pd.to_numeric(raw[t_col], errors="coerce").astype(float)})

    # vertical speed can be m/s (vs_mps) or feet per minute (vs_fpm)
    vs_col = _pick_col(raw, ["vs_mps"])
    if vs_col is not None:
        df["vs_mps"] = pd.to_numeric(raw[vs_col], errors="coerce").astype(float)
    else:
        fpm_col = _pick_col(raw, ["vs_fpm"])
        if fpm_col is None:
            raise ValueError(
                f"No vertical speed column found. Expected 'vs_mps' or 'vs_fpm'. Found: {found}"
            )
        df["vs_mps"] = pd.to_numeric(raw[fpm_col], errors="coerce").astype(float) * FPM_TO_MPS

    missing = []
    for name in ["hspeed_mps", "speed_mps"]:
        col = _pick_col(raw, [name])
        if col is None:
            missing.append(name)
        else:
            df[name] = pd.to_numeric(raw[col], errors="coerce").astype(float)
    if missing:
        raise ValueError(f"Missing required columns: {missing}. Found columns: {found}")

    for name, default in OPTIONAL_COLUMNS.items():
        col = _pick_col(raw, [name])
        if col is None:
            df[name] = default
        elif isinstance(default, bool):
            df[name] = _as_bool(raw[col], default)
        else:
            df[name] = pd.to_numeric(raw[col], errors="coerce").fillna(default).astype(float)

    # Rows without a usable timestamp can't be placed on the simulation clock
    df = df.loc[df["t"].notna()]
    df = df.sort_values("t", kind="stable").reset_index(drop=True)
    df = df.loc[df["t"].diff().fillna(1.0) > 0].reset_index(drop=True)

    if len(df) == 0:
        raise ValueError("Telemetry contains no rows with a valid time stamp.")

    return df


# -----------------------------
# Replay
# -----------------------------
def replay(ticks: pd.DataFrame, config: GlideConfig, tracker: GlideTracker | None = None) -> pd.DataFrame:
    """
    Feed every row of `ticks` through a GlideTracker and record the summary after each tick.

    Speed columns may contain NaN; the accumulators drop those samples.
    """
    tracker = tracker if tracker is not None else GlideTracker(config)
    rows = []

    for r in ticks.itertuples(index=False):
        tracker.tick(
            TickInput(
                now=float(r.t),
                vertical_speed=float(r.vs_mps),
                horizontal_speed=float(r.hspeed_mps),
                total_speed=float(r.speed_mps),
                situation_eligible=bool(r.flying),
                throttle=float(r.throttle),
                trim_present=bool(r.trim),
                autopilot_enabled=bool(r.sas),
                manual_input_present=bool(r.ctrl_input),
            )
        )
        result = tracker.summary()
        if isinstance(result, GlideSummary):
            rows.append({
                "t": float(r.t),
                "state": tracker.state,
                "reason": "",
                "completeness": result.completeness,
                "ratio": result.ratio,
                "descent_speed": result.descent_speed,
                "speed_delta": result.speed_delta,
                "stabilizing": result.stabilizing,
                "controlled": result.controlled,
                "status": format_status(result),
            })
        else:
            rows.append({
                "t": float(r.t),
                "state": tracker.state,
                "reason": result.reason,
                "completeness": 0.0,
                "ratio": math.nan,
                "descent_speed": math.nan,
                "speed_delta": math.nan,
                "stabilizing": False,
                "controlled": False,
                "status": format_status(result),
            })

    out = pd.DataFrame(rows, columns=REPLAY_COLUMNS)
    out.attrs["config"] = config
    return out


def replay_metrics(out: pd.DataFrame) -> dict[str, float]:
    """Summary numbers over a replay, based on ticks with a full window."""
    gliding = out["state"] == "tracking"
    full = gliding & (out["completeness"] >= 1.0)

    metrics = {
        "ticks": float(len(out)),
        "pct_gliding": float(100 * np.mean(gliding)) if len(out) else 0.0,
        "pct_full_window": float(100 * np.mean(full)) if len(out) else 0.0,
    }
    if np.any(full):
        settled = full & ~out["stabilizing"].astype(bool)
        metrics["best_ratio"] = float(out.loc[full, "ratio"].max())
        metrics["worst_descent_mps"] = float(out.loc[full, "descent_speed"].max())
        metrics["pct_settled"] = float(100 * np.mean(settled[full]))
        if np.any(settled):
            metrics["settled_ratio"] = float(out.loc[settled, "ratio"].iloc[-1])
            metrics["settled_descent_mps"] = float(out.loc[settled, "descent_speed"].iloc[-1])
    return metrics


def replay_csv(
    csv_source: CSVSource,
    config: GlideConfig,
) -> tuple[Optional[pd.DataFrame], Optional[str]]:
    """
    Load a telemetry CSV and replay it.

    Returns:
        - On success: (replay_df, None)
        - On failure: (None, error_message)
    """
    try:
        ticks = load_ticks(csv_source)
        return replay(ticks, config), None
    except (ValueError, OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        return None, str(e)
