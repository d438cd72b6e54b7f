"""Glide detection state machine and windowed glide statistics."""

from __future__ import annotations

import logging
import math
from typing import Union

from .domain import (
    DESCENT_EPSILON_MPS,
    FLUSH_INTERVAL_S,
    GlideConfig,
    GlideSummary,
    NotGliding,
    TickInput,
)
from .extremes import ExtremesAccumulator
from .window import SlidingExtremesWindow

logger = logging.getLogger(__name__)


# Signal names, one accumulator + window pair each
GLIDE_RATIO = "glide_ratio"
DESCENT_SPEED = "descent_speed"
SPEED = "speed"
SIGNALS = (GLIDE_RATIO, DESCENT_SPEED, SPEED)

# Tracker states
INVALID = "invalid"
TRACKING = "tracking"

# Disqualification reasons
REASON_NO_DATA = "No data"
REASON_NOT_FLYING = "Not flying"
REASON_THROTTLE = "Throttle > 0"
REASON_TRIM = "Trim detected"
REASON_SAS = "SAS is active"
REASON_CONTROL_INPUT = "Control input detected"
REASON_NOT_DESCENDING = "Not descending"

StatusResult = Union[GlideSummary, NotGliding]


class GlideTracker:
    """
    Decides tick by tick whether the body is gliding and keeps the trailing-window stats.

    Call `tick()` once per simulation frame. While the tick passes every check,
    glide ratio, descent speed and total speed feed their running extremes;
    every FLUSH_INTERVAL_S of simulation time those extremes are committed into
    the sliding windows. Losing (or gaining) glide eligibility throws all
    collected statistics away.

    `summary()` can be polled at any rate; it only reads the windows.
    """

    def __init__(self, config: GlideConfig | None = None) -> None:
        self.config = config if config is not None else GlideConfig()
        capacity = self.config.capacity
        self.accumulators: dict[str, ExtremesAccumulator] = {
            name: ExtremesAccumulator() for name in SIGNALS
        }
        self.windows: dict[str, SlidingExtremesWindow] = {
            name: SlidingExtremesWindow(capacity) for name in SIGNALS
        }
        self.reset()

    # -----------------------------
    # State
    # -----------------------------
    @property
    def state(self) -> str:
        return TRACKING if self.was_tracking else INVALID

    @property
    def is_tracking(self) -> bool:
        return self.was_tracking

    def reset(self) -> None:
        """Back to a freshly constructed tracker (new flight / session restart)."""
        self.was_valid_situation = False
        self.was_tracking = False
        self.tracking_start_time = math.nan
        self.next_sample_time = -math.inf
        self.reason = REASON_NO_DATA
        self.controlled = False
        self._reset_stats()

    def _reset_stats(self) -> None:
        for name in SIGNALS:
            self.accumulators[name].reset()
            self.windows[name].reset()

    def _set_tracking(self, value: bool, now: float) -> None:
        if value == self.was_tracking:
            return
        if value:
            logger.info("Start tracking")
            self.tracking_start_time = now
        else:
            logger.info("Stop tracking (%s)", self.reason)
            self.tracking_start_time = math.nan
        self.was_tracking = value
        self._reset_stats()

    # -----------------------------
    # Validity checks
    # -----------------------------
    def disqualification(self, tick: TickInput) -> str | None:
        """Return why this tick can't count as gliding, or None if it can."""
        if not tick.situation_eligible:
            return REASON_NOT_FLYING

        if tick.throttle != 0:
            return REASON_THROTTLE
        if not self.config.allow_trim and tick.trim_present:
            return REASON_TRIM
        if not self.config.allow_control_input:
            if tick.autopilot_enabled:
                return REASON_SAS
            if tick.manual_input_present:
                return REASON_CONTROL_INPUT

        if tick.vertical_speed > DESCENT_EPSILON_MPS:
            return REASON_NOT_DESCENDING

        return None

    # -----------------------------
    # Per-tick update
    # -----------------------------
    def tick(self, tick: TickInput) -> bool:
        """
        Process one frame of telemetry.

        Returns True if the tick was tracked as gliding. When it returns False,
        `reason` holds the disqualification.
        """
        if tick.situation_eligible and not self.was_valid_situation:
            logger.info("Flying!")
            self.was_valid_situation = True

        reason = self.disqualification(tick)
        if reason is not None:
            self.reason = reason
            self._set_tracking(False, tick.now)
            return False

        self.reason = None
        self.controlled = tick.controlled
        self._set_tracking(True, tick.now)

        descent_speed = abs(tick.vertical_speed)
        self.accumulators[GLIDE_RATIO].update(tick.horizontal_speed / descent_speed)
        self.accumulators[DESCENT_SPEED].update(descent_speed)
        self.accumulators[SPEED].update(tick.total_speed)

        # Inclusive: ticks exactly one flush interval apart must flush every tick.
        if tick.now >= self.next_sample_time:
            self.next_sample_time = tick.now + FLUSH_INTERVAL_S
            for name in SIGNALS:
                self.windows[name].record(self.accumulators[name])
                self.accumulators[name].reset()

        return True

    # -----------------------------
    # Summary
    # -----------------------------
    @property
    def completeness(self) -> float:
        # The windows move in lockstep, but don't rely on it.
        return min(
            self.windows[GLIDE_RATIO].fraction_complete,
            self.windows[DESCENT_SPEED].fraction_complete,
        )

    def summary(self) -> StatusResult:
        if not self.was_tracking:
            return NotGliding(reason=self.reason or REASON_NO_DATA)

        completeness = self.completeness
        if completeness < 1.0:
            return GlideSummary(completeness=completeness, controlled=self.controlled)

        speed = self.windows[SPEED]
        if not speed.has_values:
            speed_delta = math.nan  # every speed sample in the window was NaN
        elif speed.aggregate_min > 0:
            speed_delta = (speed.aggregate_max / speed.aggregate_min) - 1.0
        else:
            speed_delta = math.inf  # stalled sample in the window, never "settled"
        return GlideSummary(
            completeness=completeness,
            ratio=self.windows[GLIDE_RATIO].aggregate_min,
            descent_speed=self.windows[DESCENT_SPEED].aggregate_max,
            stabilizing=bool(speed_delta > self.config.stabilization_threshold),
            speed_delta=speed_delta,
            controlled=self.controlled,
        )
