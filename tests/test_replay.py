"""Tests for CSV loading and tick replay in replay.py"""

from io import StringIO

import numpy as np
import pandas as pd
import pytest

from glide_stats.domain import GlideConfig
from glide_stats.replay import REPLAY_COLUMNS, load_ticks, replay, replay_csv, replay_metrics


def _glide_csv(n=60, dt=0.25, throttle_at=None, extra_cols=None):
    t = np.arange(n) * dt
    df = pd.DataFrame({
        "t": t,
        "vs_mps": np.full(n, -2.0),
        "hspeed_mps": np.full(n, 30.0),
        "speed_mps": np.full(n, 30.07),
    })
    if throttle_at is not None:
        df["throttle"] = 0.0
        df.loc[throttle_at, "throttle"] = 1.0
    for k, v in (extra_cols or {}).items():
        df[k] = v
    return StringIO(df.to_csv(index=False))


class TestLoadTicks:
    """Tests for the load_ticks function."""

    def test_defaults_for_optional_columns(self):
        """Missing control columns get neutral defaults."""
        ticks = load_ticks(_glide_csv(n=5))
        assert ticks["flying"].all()
        assert (ticks["throttle"] == 0.0).all()
        assert not ticks["trim"].any()
        assert not ticks["sas"].any()
        assert not ticks["ctrl_input"].any()

    def test_time_column_alias(self):
        """'Time' is accepted in place of 't'."""
        csv = StringIO("Time,vs_mps,hspeed_mps,speed_mps\n0.0,-1,10,10\n0.25,-1,10,10\n")
        ticks = load_ticks(csv)
        assert list(ticks["t"]) == [0.0, 0.25]

    def test_vs_fpm_converted(self):
        """Feet per minute vertical speed is converted to m/s."""
        csv = StringIO("t,vs_fpm,hspeed_mps,speed_mps\n0.0,-1000,40,40\n")
        ticks = load_ticks(csv)
        assert ticks["vs_mps"].iloc[0] == pytest.approx(-5.08)

    def test_sorts_and_drops_duplicate_times(self):
        """Rows come out in time order with unique timestamps."""
        csv = StringIO(
            "t,vs_mps,hspeed_mps,speed_mps\n"
            "0.5,-1,10,10\n0.0,-1,10,10\n0.25,-1,10,10\n0.25,-2,10,10\n"
        )
        ticks = load_ticks(csv)
        assert list(ticks["t"]) == [0.0, 0.25, 0.5]

    def test_boolean_text_columns(self):
        """yes/no style booleans are understood."""
        csv = StringIO("t,vs_mps,hspeed_mps,speed_mps,sas\n0,-1,10,10,yes\n1,-1,10,10,no\n")
        ticks = load_ticks(csv)
        assert list(ticks["sas"]) == [True, False]

    def test_empty_flag_cells_take_default(self):
        """Blank cells in a flag column fall back to the column default."""
        csv = StringIO(
            "t,vs_mps,hspeed_mps,speed_mps,flying,sas\n"
            "0,-1,10,10,1,\n0.25,-1,10,10,,1\n0.5,-1,10,10,0,0\n"
        )
        ticks = load_ticks(csv)
        assert list(ticks["flying"]) == [True, True, False]
        assert list(ticks["sas"]) == [False, True, False]

    def test_missing_time_column_raises(self):
        """No time column is a ValueError naming the columns found."""
        csv = StringIO("vs_mps,hspeed_mps,speed_mps\n-1,10,10\n")
        with pytest.raises(ValueError, match="No time column"):
            load_ticks(csv)

    def test_missing_vertical_speed_raises(self):
        """No vertical speed column is a ValueError."""
        csv = StringIO("t,hspeed_mps,speed_mps\n0,10,10\n")
        with pytest.raises(ValueError, match="vertical speed"):
            load_ticks(csv)

    def test_missing_speed_columns_raise(self):
        """Missing speed columns are listed."""
        csv = StringIO("t,vs_mps\n0,-1\n")
        with pytest.raises(ValueError, match="hspeed_mps"):
            load_ticks(csv)


class TestReplay:
    """Tests for replay and replay_csv."""

    def test_one_row_per_tick(self):
        """Replay output has one row per tick with the expected columns."""
        out = replay(load_ticks(_glide_csv(n=10)), GlideConfig())
        assert len(out) == 10
        assert list(out.columns) == REPLAY_COLUMNS

    def test_steady_glide_reaches_full_window(self):
        """A steady 15:1 glide fills the window and reports its ratio."""
        out = replay(load_ticks(_glide_csv(n=60)), GlideConfig())
        last = out.iloc[-1]
        assert last["state"] == "tracking"
        assert last["completeness"] == 1.0
        assert last["ratio"] == pytest.approx(15.0)
        assert last["descent_speed"] == pytest.approx(2.0)
        assert last["status"] == "Gliding (free): ratio 15.000, descent 2.000 m/s"

    def test_window_fills_at_tick_40(self):
        """With 0.25 s ticks the default window is complete on the 40th tick."""
        out = replay(load_ticks(_glide_csv(n=45)), GlideConfig())
        assert out["completeness"].iloc[38] < 1.0
        assert out["completeness"].iloc[39] == 1.0

    def test_throttle_row_resets(self):
        """A throttle row shows its reason and restarts the window."""
        out = replay(load_ticks(_glide_csv(n=60, throttle_at=30)), GlideConfig())
        assert out.loc[30, "state"] == "invalid"
        assert out.loc[30, "reason"] == "Throttle > 0"
        assert out.loc[30, "status"] == "Throttle > 0"
        assert out.loc[31, "completeness"] == pytest.approx(1 / 40)
        assert out["completeness"].iloc[-1] < 1.0

    def test_replay_csv_success(self):
        """replay_csv returns the replay and no error."""
        out, err = replay_csv(_glide_csv(n=5), GlideConfig())
        assert err is None
        assert len(out) == 5

    def test_replay_csv_failure(self):
        """replay_csv reports load errors instead of raising."""
        out, err = replay_csv(StringIO("a,b\n1,2\n"), GlideConfig())
        assert out is None
        assert "No time column" in err


class TestReplayMetrics:
    """Tests for the replay_metrics function."""

    def test_full_glide_metrics(self):
        """Metrics include settled ratio once the window is full."""
        out = replay(load_ticks(_glide_csv(n=60)), GlideConfig())
        m = replay_metrics(out)
        assert m["ticks"] == 60.0
        assert m["pct_gliding"] == pytest.approx(100.0)
        assert m["pct_full_window"] == pytest.approx(100.0 * 21 / 60)
        assert m["settled_ratio"] == pytest.approx(15.0)
        assert m["settled_descent_mps"] == pytest.approx(2.0)

    def test_short_glide_has_no_ratio(self):
        """Without a full window there is no ratio to report."""
        out = replay(load_ticks(_glide_csv(n=10)), GlideConfig())
        m = replay_metrics(out)
        assert "best_ratio" not in m
        assert m["pct_full_window"] == 0.0
