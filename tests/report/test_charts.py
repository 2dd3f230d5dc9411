"""Tests for chart rendering.

Charts are checked for being written as PNG files; their pixels are not
compared.
"""

from pathlib import Path

import pytest

from upload_bench.report.charts import Series, StackedBars, plt, render_line_chart, render_stacked_bar_chart

PNG_MAGIC = b"\x89PNG"


def is_png(path: Path) -> bool:
    return path.exists() and path.read_bytes()[:4] == PNG_MAGIC


class TestLineChart:
    def test_writes_png(self, tmp_path: Path):
        series = [
            Series("Traditional", [10.0, 20.0, 40.0], "black", linewidth=4),
            Series("Multipart (5m chunks)", [15.0, None, 35.0], "red"),
        ]

        path = render_line_chart(series, ["5m", "10m", "20m"], "Upload Time", tmp_path / "upload.png")

        assert path == tmp_path / "upload.png"
        assert is_png(path)

    def test_series_without_values(self, tmp_path: Path):
        series = [
            Series("Traditional", [10.0, 20.0], "black"),
            Series("Multipart (1g chunks)", [None, None], "red"),
        ]

        assert is_png(render_line_chart(series, ["5m", "10m"], "Upload Time", tmp_path / "c.png"))

    def test_accepts_string_path(self, tmp_path: Path):
        path = render_line_chart([Series("a", [1.0], "black")], ["5m"], "t", str(tmp_path / "s.png"))
        assert isinstance(path, Path)


class TestStackedBarChart:
    def test_writes_png(self, tmp_path: Path):
        stacks = [
            StackedBars("5m chunks", [100.0, 200.0], [5.0, 6.0], "red"),
            StackedBars("10m chunks", [90.0, None], [4.0, None], "orange"),
        ]

        path = render_stacked_bar_chart(stacks, ["10m", "20m"], "Upload Time By Chunk Size", tmp_path / "bars.png")

        assert is_png(path)

    def test_upper_without_lower_is_skipped(self, tmp_path: Path):
        stacks = [StackedBars("5m chunks", [None, 10.0], [3.0, 0.0], "red")]

        assert is_png(render_stacked_bar_chart(stacks, ["5m", "10m"], "t", tmp_path / "b.png"))


class TestFigureCleanup:
    def test_figures_closed_after_save(self, tmp_path: Path):
        before = plt.get_fignums()
        render_line_chart([Series("a", [1.0], "black")], ["5m"], "t", tmp_path / "a.png")
        assert plt.get_fignums() == before

    def test_figure_closed_when_save_fails(self, tmp_path: Path):
        before = plt.get_fignums()

        with pytest.raises(OSError):
            render_line_chart([Series("a", [1.0], "black")], ["5m"], "t", tmp_path / "missing" / "a.png")

        assert plt.get_fignums() == before
