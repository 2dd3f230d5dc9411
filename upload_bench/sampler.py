"""Adaptive-duration sampler.

Runs a scenario repeatedly, timing each iteration, until both:
- at least MIN_SAMPLES samples have been collected, and
- the scenario's time budget has elapsed.

After sampling, the summary is reported, the measurement store is written
to disk in full, and the bucket is emptied so the next scenario starts from
a clean slate. Exceptions from setup or the action abort the sweep.
"""

import time
from pathlib import Path
from typing import Callable, Optional, Union

from upload_bench.measurements import MeasurementStore
from upload_bench.models import Scenario
from upload_bench.reporters.base import ProgressReporter

# Statistical floor regardless of how slow an iteration is
MIN_SAMPLES = 3


def now_ms() -> int:
    """Monotonic wall-clock time in whole milliseconds."""
    return time.monotonic_ns() // 1_000_000


class Sampler:
    """Drives a scenario through Setup -> Sampling -> Flush.

    Args:
        store: Measurement store receiving the samples
        results_path: Where the store is persisted after each scenario
        cleanup: Called after persisting, e.g. StorageFacade.empty_bucket
        reporter: Optional progress reporter
        clock: Millisecond clock, injectable for tests
    """

    def __init__(
        self,
        store: MeasurementStore,
        results_path: Union[str, Path],
        cleanup: Optional[Callable[[], object]] = None,
        reporter: Optional[ProgressReporter] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.store = store
        self.results_path = results_path
        self.cleanup = cleanup
        self.reporter = reporter
        self.clock = clock

    def run(self, scenario: Scenario) -> list[int]:
        """Sample one scenario.

        Args:
            scenario: The scenario to measure.

        Returns:
            The samples recorded for the scenario's name.
        """
        name = scenario.name
        self.store.ensure(name)

        overall_start = self.clock()

        if self.reporter:
            self.reporter.on_scenario_start(name)

        fixture = scenario.setup() if scenario.setup is not None else None

        while self.store.count(name) < MIN_SAMPLES or self.clock() - overall_start < scenario.budget_ms:
            start = self.clock()
            scenario.action(fixture)
            elapsed = self.clock() - start

            self.store.record(name, elapsed)

            if self.reporter:
                self.reporter.on_sample(name, self.store.count(name), elapsed)

        self._flush(name)
        return self.store.samples(name)

    def _flush(self, name: str) -> None:
        if self.reporter:
            self.reporter.on_scenario_complete(name, self.store.count(name), self.store.mean(name))

        self.store.save(self.results_path)

        if self.cleanup is not None:
            self.cleanup()
