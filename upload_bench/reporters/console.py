"""Console progress reporter using the Rich library.

Shows, while a sweep runs:
- A header with the bucket and scenario count
- A live, overwritten status line per scenario (sample count, last time)
- One summary line per finished scenario (approximate mean, sample count)
- A closing rule with the total duration
"""

from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.live import Live
from rich.rule import Rule
from rich.text import Text

from upload_bench.reporters.base import ProgressReporter

if TYPE_CHECKING:
    from upload_bench.runner import SweepResult


class ConsoleProgress(ProgressReporter):
    """Rich-based progress output for the sweep.

    Args:
        console: Console to write to (defaults to a new stdout console)
        quiet: If True, suppress the live status line
    """

    def __init__(self, console: Optional[Console] = None, quiet: bool = False):
        # Use legacy_windows=True for ASCII-safe output on Windows consoles
        self.console = console or Console(legacy_windows=True)
        self.quiet = quiet
        self._live: Optional[Live] = None

    def on_sweep_start(self, bucket: str, scenario_count: int) -> None:
        self.console.print(
            Rule(f"[bold cyan]Benchmarking into '{bucket}'[/bold cyan]", style="cyan", characters="-")
        )
        self.console.print(f"[dim]{scenario_count} scenarios queued[/dim]")

    def on_scenario_start(self, name: str) -> None:
        if self.quiet:
            return
        self._live = Live(
            Text(f"{name}: starting"),
            console=self.console,
            transient=True,
            auto_refresh=False,
        )
        self._live.start(refresh=True)

    def on_sample(self, name: str, count: int, last_ms: int) -> None:
        if self._live is None:
            return
        self._live.update(Text(f"{name}: {count} samples, last {last_ms}ms"), refresh=True)

    def on_scenario_complete(self, name: str, count: int, mean_ms: Optional[float]) -> None:
        self._stop_live()
        mean_str = f"{mean_ms:.2f}ms" if mean_ms is not None else "n/a"
        self.console.print(f"{name}: approx [bold]{mean_str}[/bold] ({count} samples)")

    def on_cleanup(self, message: str) -> None:
        self._stop_live()
        self.console.print(f"[dim]{message}[/dim]")

    def on_sweep_complete(self, result: "SweepResult") -> None:
        self.console.print()
        self.console.print(
            Rule(
                f"[bold]{result.scenario_count} scenarios in {result.duration_seconds:.1f}s[/bold]",
                style="magenta",
                characters="-",
            )
        )

    def _stop_live(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def close(self) -> None:
        self._stop_live()
