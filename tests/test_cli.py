"""Tests for the glide_replay command line"""

import logging

import numpy as np
import pandas as pd
import pytest

import glide_replay


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """main() installs its own handler on the root logger; put the old ones back."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _write_csv(path, n=50):
    pd.DataFrame({
        "t": np.arange(n) * 0.25,
        "vs_fpm": np.full(n, -400.0),
        "hspeed_mps": np.full(n, 25.0),
        "speed_mps": np.full(n, 25.1),
    }).to_csv(path, index=False)


class TestMain:
    """Tests for glide_replay.main."""

    def test_writes_plot_and_config(self, tmp_path, capsys):
        """A good CSV prints a report, saves the plot and creates the config file."""
        csv = tmp_path / "glide.csv"
        _write_csv(csv)
        cfg = tmp_path / "glide_stats.yaml"

        rc = glide_replay.main(["--input", str(csv), "--config", str(cfg), "--out", str(tmp_path / "out" / "report")])

        assert rc == 0
        assert (tmp_path / "out" / "report.png").exists()
        assert cfg.exists()
        printed = capsys.readouterr().out
        assert "Final status: Gliding (free): ratio" in printed

    def test_bad_csv_returns_error(self, tmp_path):
        """A CSV without the required columns exits non-zero."""
        csv = tmp_path / "bad.csv"
        csv.write_text("a,b\n1,2\n")
        rc = glide_replay.main(["--input", str(csv), "--out", str(tmp_path / "report")])
        assert rc == 1

    def test_bad_config_returns_error(self, tmp_path):
        """An invalid config file is reported and exits non-zero."""
        csv = tmp_path / "glide.csv"
        _write_csv(csv)
        cfg = tmp_path / "glide_stats.yaml"
        cfg.write_text("SamplingWindowSeconds: 0\n")
        rc = glide_replay.main(["--input", str(csv), "--config", str(cfg), "--out", str(tmp_path / "report")])
        assert rc == 1
        assert not (tmp_path / "report.png").exists()
