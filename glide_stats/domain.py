from __future__ import annotations
from dataclasses import dataclass
import math


# Fixed cadence at which running extremes are committed into the windows.
FLUSH_INTERVAL_S = 0.25

# Vertical speed must be below this (m/s) to count as descending.
DESCENT_EPSILON_MPS = -0.001


# -----------------------------
# Configuration
# -----------------------------
@dataclass(frozen=True)
class GlideConfig:
    name: str = "Default"
    sampling_window_s: float = 10.0  # trailing window the stats are reported over
    stabilization_threshold: float = 0.01  # (max speed / min speed) - 1 above this = still stabilizing
    allow_trim: bool = True
    allow_control_input: bool = True  # SAS or stick input still counts as gliding

    def __post_init__(self):
        if not self.sampling_window_s > 0:
            raise ValueError(f"sampling_window_s must be positive, got {self.sampling_window_s}")
        if self.sampling_window_s < FLUSH_INTERVAL_S:
            raise ValueError(
                f"sampling_window_s must be at least one flush interval ({FLUSH_INTERVAL_S} s), "
                f"got {self.sampling_window_s}"
            )
        if self.stabilization_threshold < 0:
            raise ValueError(
                f"stabilization_threshold must be >= 0, got {self.stabilization_threshold}"
            )

    @property
    def capacity(self) -> int:
        """Number of interval snapshots retained per window."""
        return int(self.sampling_window_s / FLUSH_INTERVAL_S)


PRESET_CONFIGS: dict[str, GlideConfig] = {
    "Default": GlideConfig(),
    "Strict (hands off)": GlideConfig(
        name="Strict (hands off)",
        sampling_window_s=10.0,
        stabilization_threshold=0.01,
        allow_trim=False,
        allow_control_input=False,
    ),
    "Quick look": GlideConfig(
        name="Quick look",
        sampling_window_s=5.0,
        stabilization_threshold=0.02,
    ),
}


# -----------------------------
# Per-tick input
# -----------------------------
@dataclass(frozen=True)
class TickInput:
    now: float  # simulation time (s), monotonic
    vertical_speed: float  # m/s, negative = descending
    horizontal_speed: float  # m/s
    total_speed: float  # m/s
    situation_eligible: bool = True  # airborne and controllable
    throttle: float = 0.0
    trim_present: bool = False
    autopilot_enabled: bool = False
    manual_input_present: bool = False

    @property
    def controlled(self) -> bool:
        return self.autopilot_enabled or self.manual_input_present


# -----------------------------
# Output
# -----------------------------
@dataclass(frozen=True)
class NotGliding:
    reason: str  # short human readable disqualification, e.g. "Throttle > 0"


@dataclass(frozen=True)
class GlideSummary:
    completeness: float  # 0..1, fraction of the trailing window populated
    ratio: float = math.nan  # worst (minimum) glide ratio in the window
    descent_speed: float = math.nan  # worst (maximum) descent speed in the window, m/s
    stabilizing: bool = False
    speed_delta: float = math.nan  # (max speed / min speed) - 1 over the window
    controlled: bool = False

    @property
    def is_complete(self) -> bool:
        return self.completeness >= 1.0
