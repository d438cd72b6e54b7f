"""
Glider Stats - Glide Ratio and Descent Speed Tracker

Watches per-frame flight telemetry, decides whether the aircraft is in a
stable unpowered glide, and reports the worst glide ratio, worst descent
speed and speed stability over a trailing time window.
"""

from .domain import FLUSH_INTERVAL_S, GlideConfig, GlideSummary, NotGliding, TickInput, PRESET_CONFIGS
from .extremes import ExtremesAccumulator
from .window import SlidingExtremesWindow
from .tracker import GlideTracker
from .config import load_config, save_config
from .display import StatusDisplay, format_status
from .replay import load_ticks, replay, replay_csv, replay_metrics
from .render import make_replay_figure
from .log import setup_logging

__all__ = [
    # Domain models
    "FLUSH_INTERVAL_S",
    "GlideConfig",
    "GlideSummary",
    "NotGliding",
    "TickInput",
    "PRESET_CONFIGS",
    # Statistics core
    "ExtremesAccumulator",
    "SlidingExtremesWindow",
    "GlideTracker",
    # Configuration
    "load_config",
    "save_config",
    # Status text
    "StatusDisplay",
    "format_status",
    # Replay
    "load_ticks",
    "replay",
    "replay_csv",
    "replay_metrics",
    # Visualization
    "make_replay_figure",
    "setup_logging",
]

__version__ = "0.1.0"
