"""
File: glide_replay.py

What this script does:
- Loads a flight telemetry CSV (one row per simulation frame)
- Replays it tick by tick through the glide tracker
- Prints the final status line and summary metrics
- Saves a plot of glide ratio, descent speed, speed stability and window fill

How to run:
python glide_replay.py --input data/samples/glide.csv --out outputs/glide

With a config file (created with defaults if it doesn't exist):
python glide_replay.py --input data/samples/glide.csv --config glide_stats.yaml
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import matplotlib
import yaml

matplotlib.use("Agg")

from glide_stats.config import load_config
from glide_stats.domain import GlideConfig
from glide_stats.log import setup_logging
from glide_stats.render import make_replay_figure
from glide_stats.replay import replay_csv, replay_metrics

logger = logging.getLogger("glide_replay")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Replay flight telemetry through the glide tracker.")
    ap.add_argument("--input", required=True, help="Telemetry CSV path")
    ap.add_argument("--config", default=None, help="YAML config path (defaults used if omitted)")
    ap.add_argument("--out", default="outputs/glide_report", help="Output prefix for the plot")
    ap.add_argument("--log-level", default="INFO")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = load_config(args.config) if args.config else GlideConfig()
    except (ValueError, OSError, yaml.YAMLError) as e:
        logger.error("Bad config %s: %s", args.config, e)
        return 1

    out, err = replay_csv(args.input, config)
    if err or out is None:
        logger.error("Replay failed: %s", err)
        return 1

    metrics = replay_metrics(out)

    print("\n=== GLIDE REPLAY ===")
    print(f"Config: {config.name} ({config.sampling_window_s:.1f} s window)")
    print(f"Final status: {out['status'].iloc[-1] if len(out) else 'N/A'}")
    for k, v in metrics.items():
        print(f"  {k}: {v:.3f}")

    out_prefix = Path(args.out)
    out_prefix.parent.mkdir(parents=True, exist_ok=True)
    fig = make_replay_figure(out, config)
    png_path = out_prefix.with_suffix(".png")
    fig.savefig(png_path, dpi=150)
    print(f"\nSaved plot: {png_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
