"""Sweep orchestrator.

Coordinates one benchmark sweep:
- Bucket creation and deletion
- Sequential scenario execution through the Sampler
- Cleanup between scenarios and at sweep end
- Final persistence of the measurement store
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from upload_bench.measurements import MeasurementStore
from upload_bench.models import Scenario
from upload_bench.reporters.base import ProgressReporter
from upload_bench.sampler import Sampler
from upload_bench.storage import StorageFacade


@dataclass
class SweepResult:
    """Result of one complete sweep."""

    bucket: str
    scenario_count: int
    duration_seconds: float
    store: MeasurementStore


class BenchmarkRunner:
    """Runs every scenario against one scratch bucket.

    Scenarios run strictly one after another. The first exception aborts
    the sweep; whatever was persisted up to that point stays on disk.
    """

    def __init__(
        self,
        facade: StorageFacade,
        scenarios: list[Scenario],
        store: MeasurementStore,
        results_path: Union[str, Path],
        reporter: Optional[ProgressReporter] = None,
        sampler: Optional[Sampler] = None,
    ):
        """Initialize the runner.

        Args:
            facade: Storage facade bound to the run's bucket
            scenarios: Scenarios to run, in order
            store: Measurement store shared with the scenarios
            results_path: Where the store is persisted
            reporter: Optional reporter for progress callbacks
            sampler: Sampler override (defaults to one that empties the
                bucket after every scenario)
        """
        self.facade = facade
        self.scenarios = scenarios
        self.store = store
        self.results_path = results_path
        self.reporter = reporter
        self.sampler = sampler or Sampler(
            store,
            results_path,
            cleanup=facade.empty_bucket,
            reporter=reporter,
        )

    def run(self) -> SweepResult:
        """Run the sweep.

        Returns:
            SweepResult with the populated store.
        """
        start_time = time.time()

        self.facade.create_bucket()

        if self.reporter:
            self.reporter.on_sweep_start(self.facade.bucket, len(self.scenarios))

        for scenario in self.scenarios:
            self.sampler.run(scenario)

        if self.reporter:
            self.reporter.on_cleanup("Deleting temporary S3 files...")
        self.facade.empty_bucket()

        if self.reporter:
            self.reporter.on_cleanup(f"Deleting bucket '{self.facade.bucket}'")
        self.facade.delete_bucket()

        self.store.save(self.results_path)

        result = SweepResult(
            bucket=self.facade.bucket,
            scenario_count=len(self.scenarios),
            duration_seconds=time.time() - start_time,
            store=self.store,
        )

        if self.reporter:
            self.reporter.on_sweep_complete(result)

        return result
