"""Status text for the glide tracker, refreshed at a fixed wall-clock cadence."""

from __future__ import annotations

import math
import time
from typing import Callable, Optional

from .domain import GlideSummary, NotGliding
from .tracker import REASON_NOT_FLYING, GlideTracker, StatusResult

# How often the status text is rebuilt (s of wall clock)
STATUS_UPDATE_INTERVAL_S = 0.25


def format_status(result: StatusResult) -> str:
    """Render a tracker summary as the one-line status shown to the pilot."""
    if isinstance(result, NotGliding):
        return result.reason

    if not result.is_complete:
        return f"Gliding ({100.0 * result.completeness:.0f}%)..."

    control_label = " (controlled)" if result.controlled else " (free)"
    if result.stabilizing:
        return (
            f"Gliding{control_label}: stabilizing (±{100.0 * result.speed_delta:.2f}%), "
            f"ratio {result.ratio:.3f}, descent {result.descent_speed:.3f} m/s"
        )
    return f"Gliding{control_label}: ratio {result.ratio:.3f}, descent {result.descent_speed:.3f} m/s"


class StatusDisplay:
    """
    Polls a GlideTracker and keeps the formatted status text.

    Formatting is throttled to one rebuild per `interval_s`; the tracker itself
    keeps updating every tick regardless. The display is hidden while the body
    isn't flying at all.
    """

    def __init__(
        self,
        tracker: GlideTracker,
        interval_s: float = STATUS_UPDATE_INTERVAL_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.tracker = tracker
        self.interval_s = interval_s
        self.clock = clock
        self.text = ""
        self.enabled = False
        self.next_update = -math.inf

    def poll(self, wall_clock_now: Optional[float] = None) -> Optional[str]:
        """
        Refresh the status if the interval has passed.

        Returns the new text when it was rebuilt, None otherwise.
        """
        now = self.clock() if wall_clock_now is None else wall_clock_now
        result = self.tracker.summary()

        self.enabled = not (isinstance(result, NotGliding) and result.reason == REASON_NOT_FLYING)
        if not self.enabled:
            return None

        # Disqualifications show up immediately, only the gliding text is paced.
        if isinstance(result, GlideSummary) and now <= self.next_update:
            return None
        self.next_update = now + self.interval_s
        self.text = format_status(result)
        return self.text
