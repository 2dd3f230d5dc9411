"""Report builder that assembles all report artifacts.

Reads a persisted measurement store and writes, into one output directory:
- basic-stats.md: micro-benchmark means and deviations
- upload-stats.md/.png and upload-stats-detailed.png: total upload time by
  upload type and file size
- multipart-chunk-size-comparison.md/.png: part-upload vs. reconcile time
  by chunk size

Each table is also printed to the console.
"""

from pathlib import Path
from typing import Iterable, Optional, Union

from rich.console import Console

from upload_bench.measurements import MeasurementStore
from upload_bench.models import ScenarioId, ScenarioKind
from upload_bench.report.charts import Series, StackedBars, render_line_chart, render_stacked_bar_chart
from upload_bench.report.stats import mean_or_none, summarize
from upload_bench.report.tables import Cell, render_console, render_markdown
from upload_bench.scenarios import DEFAULT_PLAN, SweepPlan
from upload_bench.sizes import InvalidSizeFormat, parse_size

TIMES_NOTE = "*Times are in milliseconds, lower is better.*"

# One color per upload type, in row order
SERIES_COLORS = ["black", "red", "orange", "gold", "green", "blue", "purple", "brown", "gray"]

MICRO_LABELS = {
    ScenarioKind.PRESIGN_PUT: "Get traditional presigned URL",
    ScenarioKind.PRESIGN_PART: "Get multipart presigned URL",
    ScenarioKind.INITIATE_MULTIPART: "Initiate multipart upload",
}


class ReportError(Exception):
    """Raised when report generation fails."""
    pass


def load_results(path: Union[str, Path]) -> MeasurementStore:
    """Load a results file written by a sweep.

    Raises:
        ReportError: If the file is missing, unreadable or malformed.
    """
    if not Path(path).exists():
        raise ReportError(f"Results file not found: {path}")
    try:
        return MeasurementStore.load(path)
    except ValueError as e:
        raise ReportError(f"Invalid results file {path}: {e}") from e
    except OSError as e:
        raise ReportError(f"Cannot read results file {path}: {e}") from e


def _sort_sizes(sizes: Iterable[str]) -> list[str]:
    valid = []
    for size in set(sizes):
        try:
            valid.append((parse_size(size), size))
        except InvalidSizeFormat:
            continue
    return [size for _, size in sorted(valid)]


def _parsed_ids(store: MeasurementStore) -> list[ScenarioId]:
    return [sid for sid in (ScenarioId.parse(name) for name in store) if sid is not None]


class ReportBuilder:
    """Computes report tables and charts from one measurement store.

    Args:
        store: The loaded measurements
        output_dir: Directory receiving all artifacts
        console: Console for the printed tables
        plan: Sweep plan supplying the expected sizes and chunk sizes
    """

    def __init__(
        self,
        store: MeasurementStore,
        output_dir: Union[str, Path],
        console: Optional[Console] = None,
        plan: SweepPlan = DEFAULT_PLAN,
    ):
        self.store = store
        self.output_dir = Path(output_dir)
        self.console = console or Console(legacy_windows=True)
        self.plan = plan
        self._ids = _parsed_ids(store)

    def _mean(self, scenario_id: ScenarioId) -> Optional[float]:
        return mean_or_none(self.store.samples(scenario_id.name))

    def _store_values(self, kinds: tuple, attr: str) -> list[str]:
        return [getattr(sid, attr) for sid in self._ids if sid.kind in kinds]

    # Column and row axes

    def upload_sizes(self) -> list[str]:
        """All file sizes with a traditional or multipart total series."""
        return _sort_sizes(
            list(self.plan.traditional_sizes)
            + list(self.plan.multipart_small_sizes)
            + list(self.plan.multipart_large_sizes)
            + self._store_values((ScenarioKind.TRADITIONAL_UPLOAD, ScenarioKind.MULTIPART_TOTAL), "size")
        )

    def multipart_sizes(self) -> list[str]:
        return _sort_sizes(
            list(self.plan.multipart_small_sizes)
            + list(self.plan.multipart_large_sizes)
            + self._store_values((ScenarioKind.MULTIPART_UPLOAD, ScenarioKind.MULTIPART_COMPLETE), "size")
        )

    def chunk_sizes(self) -> list[str]:
        return _sort_sizes(
            list(self.plan.multipart_small_chunks)
            + list(self.plan.multipart_large_chunks)
            + self._store_values((ScenarioKind.MULTIPART_TOTAL,), "chunk")
        )

    def small_sizes(self, sizes: list[str]) -> list[str]:
        threshold = parse_size(self.plan.large_threshold)
        return [s for s in sizes if parse_size(s) < threshold]

    # Report 1: micro-benchmarks

    def basic_stats(self) -> tuple[list[str], list[list[Cell]]]:
        headers = ["Test name", "Mean (ms)", "± (ms)"]
        rows: list[list[Cell]] = []
        for kind, label in MICRO_LABELS.items():
            summary = summarize(self.store.samples(ScenarioId(kind).name))
            rows.append([
                label,
                summary.mean if summary else None,
                summary.stddev if summary else None,
            ])
        return headers, rows

    def write_basic_stats(self) -> list[Path]:
        headers, rows = self.basic_stats()

        self.console.print("Presigned URL statistics:")
        render_console(self.console, headers, rows)

        path = self.output_dir / "basic-stats.md"
        path.write_text(render_markdown(headers, rows) + "\n", encoding="utf-8")
        return [path]

    # Report 2: upload type comparison

    def upload_series(self, sizes: list[str]) -> list[Series]:
        """One series per upload type, one value per size."""
        series = [
            Series(
                label="Traditional",
                values=[self._mean(ScenarioId(ScenarioKind.TRADITIONAL_UPLOAD, s)) for s in sizes],
                color=SERIES_COLORS[0],
                linewidth=4,
            )
        ]
        for index, chunk in enumerate(self.chunk_sizes(), start=1):
            series.append(
                Series(
                    label=f"Multipart ({chunk} chunks)",
                    values=[self._mean(ScenarioId(ScenarioKind.MULTIPART_TOTAL, s, chunk)) for s in sizes],
                    color=SERIES_COLORS[index % len(SERIES_COLORS)],
                )
            )
        return series

    def write_upload_stats(self) -> list[Path]:
        sizes = self.upload_sizes()
        series = self.upload_series(sizes)

        headers = ["Upload type"] + sizes
        rows: list[list[Cell]] = [[s.label] + s.values for s in series]

        self.console.print("Upload type statistics:")
        render_console(self.console, headers, rows)

        full_chart = render_line_chart(
            series,
            sizes,
            "Upload Time By Upload Type",
            self.output_dir / "upload-stats.png",
        )

        small = self.small_sizes(sizes)
        truncated = [
            Series(s.label, s.values[:len(small)], s.color, s.linewidth)
            for s in series
            if any(v is not None for v in s.values[:len(small)])
        ]
        detailed_chart = render_line_chart(
            truncated,
            small,
            "Upload Time By Upload Type (Truncated)",
            self.output_dir / "upload-stats-detailed.png",
        )

        path = self.output_dir / "upload-stats.md"
        path.write_text(
            "\n\n".join([
                render_markdown(headers, rows),
                TIMES_NOTE,
                f"![Chart]({full_chart.name})",
                f"![Chart]({detailed_chart.name})",
            ]) + "\n",
            encoding="utf-8",
        )
        return [path, full_chart, detailed_chart]

    # Report 3: multipart phase breakdown

    def phase_stacks(self, sizes: list[str]) -> list[StackedBars]:
        stacks = []
        for index, chunk in enumerate(self.chunk_sizes(), start=1):
            stacks.append(
                StackedBars(
                    label=f"{chunk} chunks",
                    lower=[self._mean(ScenarioId(ScenarioKind.MULTIPART_UPLOAD, s, chunk)) for s in sizes],
                    upper=[self._mean(ScenarioId(ScenarioKind.MULTIPART_COMPLETE, s, chunk)) for s in sizes],
                    color=SERIES_COLORS[index % len(SERIES_COLORS)],
                )
            )
        return stacks

    def write_chunk_comparison(self) -> list[Path]:
        sizes = self.multipart_sizes()
        stacks = self.phase_stacks(sizes)

        headers = ["Chunk size", "Stage"] + sizes
        align = ["left", "left"] + ["right"] * len(sizes)
        rows: list[list[Cell]] = []
        for stack in stacks:
            chunk = stack.label.split(" ")[0]
            rows.append([chunk, "Upload"] + stack.lower)
            rows.append([chunk, "Reconcile"] + stack.upper)

        self.console.print("Upload vs reconcile times by chunk size:")
        render_console(self.console, headers, rows, align=align)

        chart = render_stacked_bar_chart(
            stacks,
            sizes,
            "Upload Time By Chunk Size",
            self.output_dir / "multipart-chunk-size-comparison.png",
        )

        path = self.output_dir / "multipart-chunk-size-comparison.md"
        path.write_text(
            "\n\n".join([
                render_markdown(headers, rows, align=align),
                TIMES_NOTE,
                f"![Chart]({chart.name})",
            ]) + "\n",
            encoding="utf-8",
        )
        return [path, chart]

    def build(self) -> list[Path]:
        """Write every report artifact.

        Returns:
            Paths of all files written.
        """
        self.console.print(f"Making results directory {self.output_dir.resolve()}")
        self.output_dir.mkdir(parents=True, exist_ok=True)

        written = []
        written += self.write_basic_stats()
        written += self.write_upload_stats()
        written += self.write_chunk_comparison()
        return written


def build_reports(
    store: MeasurementStore,
    output_dir: Union[str, Path],
    console: Optional[Console] = None,
    plan: SweepPlan = DEFAULT_PLAN,
) -> list[Path]:
    """Build all report artifacts from ``store`` into ``output_dir``.

    Returns:
        Paths of all files written.

    Raises:
        ReportError: If an artifact cannot be written.
    """
    try:
        return ReportBuilder(store, output_dir, console=console, plan=plan).build()
    except OSError as e:
        raise ReportError(f"Failed to write reports to {output_dir}: {e}") from e
