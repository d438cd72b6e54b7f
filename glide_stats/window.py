"""Sliding window of per-interval extremes."""

from __future__ import annotations

import numpy as np

from .extremes import ExtremesAccumulator


class SlidingExtremesWindow:
    """
    Keeps the (min, max) of the last `capacity` intervals in a circular store.

    `count` grows by one per recorded interval until it reaches `capacity`;
    after that each new record overwrites the oldest slot. Storage is
    allocated once, so a reset is just two integer writes (plus a NaN fill
    to keep the slots deterministic).
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = int(capacity)
        self._mins = np.full(self._capacity, np.nan, dtype=float)
        self._maxs = np.full(self._capacity, np.nan, dtype=float)
        self._count = 0
        self._write_index = -1  # last written slot, -1 when empty

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        return self._count

    @property
    def write_index(self) -> int:
        return self._write_index

    @property
    def has_values(self) -> bool:
        return self._count > 0

    @property
    def is_complete(self) -> bool:
        return self._count == self._capacity

    @property
    def fraction_complete(self) -> float:
        return self._count / self._capacity

    def record(self, extremes: ExtremesAccumulator) -> None:
        """Commit one interval. Empty intervals don't take a slot."""
        if not extremes.has_value:
            return

        self._write_index += 1
        if self._write_index >= self._capacity:
            self._write_index = 0
        if self._count < self._capacity:
            self._count += 1

        self._mins[self._write_index] = extremes.min
        self._maxs[self._write_index] = extremes.max

    def reset(self) -> None:
        self._count = 0
        self._write_index = -1
        self._mins.fill(np.nan)
        self._maxs.fill(np.nan)

    @property
    def aggregate_min(self) -> float:
        """Minimum over the populated slots, NaN if there are none."""
        if self._count < 1:
            return float("nan")
        return float(np.min(self._mins[: self._count]))

    @property
    def aggregate_max(self) -> float:
        """Maximum over the populated slots, NaN if there are none."""
        if self._count < 1:
            return float("nan")
        return float(np.max(self._maxs[: self._count]))
