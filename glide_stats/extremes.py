"""Running minimum/maximum of a stream of scalar samples."""

from __future__ import annotations

import math


class ExtremesAccumulator:
    """
    Remembers the minimum and maximum of the values fed to it since the last reset.

    Both extremes are NaN while nothing has been recorded. NaN samples are
    ignored, so one malformed tick can't poison the running extremes.
    """

    def __init__(self) -> None:
        self._min = math.nan
        self._max = math.nan

    @property
    def min(self) -> float:
        return self._min

    @property
    def max(self) -> float:
        return self._max

    @property
    def has_value(self) -> bool:
        return not math.isnan(self._min)

    def update(self, value: float) -> None:
        if math.isnan(value):
            return
        if math.isnan(self._min) or value < self._min:
            self._min = value
        if math.isnan(self._max) or value > self._max:
            self._max = value

    def reset(self) -> None:
        self._min = math.nan
        self._max = math.nan

    def __repr__(self) -> str:
        return f"ExtremesAccumulator(min={self._min}, max={self._max})"
