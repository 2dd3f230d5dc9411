"""Scenario registry for the upload benchmark.

This module contains:
- SweepPlan / DEFAULT_PLAN: the fixed sizes and chunk sizes to measure
- ScenarioFactory: builds the setup/action pair for each scenario kind
- build_scenarios: the full, ordered scenario list for a sweep
- filter_scenarios: name-based selection for partial runs

Order of a sweep: micro-benchmarks, traditional uploads, small multipart
uploads, large multipart uploads.
"""

from dataclasses import dataclass
from functools import partial
from typing import Callable

from upload_bench.measurements import MeasurementStore
from upload_bench.models import Scenario, ScenarioId, ScenarioKind, UploadSession
from upload_bench.multipart import MultipartUpload, make_payload, part_sizes
from upload_bench.sampler import now_ms
from upload_bench.sizes import parse_size
from upload_bench.storage import StorageFacade


@dataclass(frozen=True)
class SweepPlan:
    """Sizes, chunk sizes and time budgets for one sweep."""

    traditional_sizes: tuple[str, ...]
    multipart_small_sizes: tuple[str, ...]
    multipart_small_chunks: tuple[str, ...]
    multipart_large_sizes: tuple[str, ...]
    multipart_large_chunks: tuple[str, ...]
    micro_budget_ms: int = 1000
    upload_budget_ms: int = 2000
    large_threshold: str = "1g"
    large_budget_factor: int = 5

    def all_sizes(self) -> set[str]:
        return set(
            self.traditional_sizes
            + self.multipart_small_sizes
            + self.multipart_small_chunks
            + self.multipart_large_sizes
            + self.multipart_large_chunks
            + (self.large_threshold,)
        )

    def multipart_pairs(self) -> list[tuple[str, str]]:
        """(size, chunk) pairs in sweep order: small grid, then large grid."""
        pairs = [
            (size, chunk)
            for size in self.multipart_small_sizes
            for chunk in self.multipart_small_chunks
        ]
        pairs += [
            (size, chunk)
            for size in self.multipart_large_sizes
            for chunk in self.multipart_large_chunks
        ]
        return pairs

    def budget_for(self, size_bytes: int) -> int:
        """Time budget for an upload of ``size_bytes``."""
        if size_bytes >= parse_size(self.large_threshold):
            return self.upload_budget_ms * self.large_budget_factor
        return self.upload_budget_ms


DEFAULT_PLAN = SweepPlan(
    # 2g and above hit OS limits as a single in-memory PUT
    traditional_sizes=("512k", "5m", "10m", "25m", "50m", "100m", "1g", "1.5g"),
    multipart_small_sizes=("512k", "5m", "10m", "25m", "50m", "100m"),
    multipart_small_chunks=("5m", "25m", "50m", "100m"),
    multipart_large_sizes=("1g", "2g", "5g"),
    multipart_large_chunks=("5m", "25m", "50m", "100m", "200m", "500m"),
)


@dataclass
class MultipartFixture:
    """Buffers reused by every iteration of one multipart scenario."""

    chunk_data: bytes
    last_data: bytes


class ScenarioFactory:
    """Builds scenarios bound to one storage facade and measurement store.

    Args:
        facade: Storage facade for the run's bucket
        store: Store receiving the multipart phase samples
        plan: Sweep plan supplying the time budgets
        clock: Millisecond clock used for the phase timings
    """

    def __init__(
        self,
        facade: StorageFacade,
        store: MeasurementStore,
        plan: SweepPlan = DEFAULT_PLAN,
        clock: Callable[[], int] = now_ms,
    ):
        self.facade = facade
        self.store = store
        self.plan = plan
        self.clock = clock

    # Micro-benchmarks

    def presign_put(self) -> Scenario:
        return Scenario(
            id=ScenarioId(ScenarioKind.PRESIGN_PUT),
            action=lambda _: self.facade.presigned_put_url(
                self.facade.make_key("traditional-presigned-url-only")
            ),
            budget_ms=self.plan.micro_budget_ms,
        )

    def initiate_multipart(self) -> Scenario:
        return Scenario(
            id=ScenarioId(ScenarioKind.INITIATE_MULTIPART),
            action=lambda _: self.facade.initiate_multipart(
                self.facade.make_key("initiate-multipart-only")
            ),
            budget_ms=self.plan.micro_budget_ms,
        )

    def presign_part(self) -> Scenario:
        return Scenario(
            id=ScenarioId(ScenarioKind.PRESIGN_PART),
            setup=lambda: self.facade.initiate_multipart(
                self.facade.make_key("multipart-presigned-url-only")
            ),
            action=self._presign_part_action,
            budget_ms=self.plan.micro_budget_ms,
        )

    def _presign_part_action(self, session: UploadSession) -> str:
        return self.facade.presigned_upload_part_url(session.key, session.upload_id, 1)

    # Uploads

    def traditional_upload(self, size: str) -> Scenario:
        size_bytes = parse_size(size)
        scenario_id = ScenarioId(ScenarioKind.TRADITIONAL_UPLOAD, size)
        return Scenario(
            id=scenario_id,
            setup=partial(make_payload, size_bytes),
            action=partial(self._traditional_action, scenario_id.name),
            budget_ms=self.plan.budget_for(size_bytes),
            size_bytes=size_bytes,
        )

    def _traditional_action(self, prefix: str, payload: bytes) -> str:
        url = self.facade.presigned_put_url(self.facade.make_key(prefix))
        return self.facade.put(url, payload)

    def multipart_upload(self, size: str, chunk: str) -> Scenario:
        """Scenario timing initiate + parts + complete.

        Also fills the sibling ``upload`` and ``complete`` buckets with
        the part-upload and finalize phase of every iteration.
        """
        size_bytes = parse_size(size)
        chunk_bytes = parse_size(chunk)
        scenario_id = ScenarioId(ScenarioKind.MULTIPART_TOTAL, size, chunk)
        return Scenario(
            id=scenario_id,
            setup=partial(self._multipart_setup, scenario_id, size_bytes, chunk_bytes),
            action=partial(self._multipart_action, scenario_id, size_bytes),
            budget_ms=self.plan.budget_for(size_bytes),
            size_bytes=size_bytes,
            chunk_bytes=chunk_bytes,
        )

    def _multipart_setup(
        self,
        scenario_id: ScenarioId,
        size_bytes: int,
        chunk_bytes: int,
    ) -> MultipartFixture:
        chunk_data = make_payload(chunk_bytes)
        last_size = part_sizes(size_bytes, chunk_bytes)[-1]
        last_data = chunk_data if last_size == chunk_bytes else make_payload(last_size)

        self.store.reset(scenario_id.with_kind(ScenarioKind.MULTIPART_UPLOAD).name)
        self.store.reset(scenario_id.with_kind(ScenarioKind.MULTIPART_COMPLETE).name)

        return MultipartFixture(chunk_data=chunk_data, last_data=last_data)

    def _multipart_action(
        self,
        scenario_id: ScenarioId,
        size_bytes: int,
        fixture: MultipartFixture,
    ) -> None:
        upload = MultipartUpload(self.facade, f"multipart-upload-{scenario_id.size}-{scenario_id.chunk}")
        upload.initiate()

        start = self.clock()
        upload.upload_parts(size_bytes, fixture.chunk_data, fixture.last_data)
        self.store.record(
            scenario_id.with_kind(ScenarioKind.MULTIPART_UPLOAD).name,
            self.clock() - start,
        )

        start = self.clock()
        upload.complete()
        self.store.record(
            scenario_id.with_kind(ScenarioKind.MULTIPART_COMPLETE).name,
            self.clock() - start,
        )


def build_scenarios(
    facade: StorageFacade,
    store: MeasurementStore,
    plan: SweepPlan = DEFAULT_PLAN,
    clock: Callable[[], int] = now_ms,
) -> list[Scenario]:
    """Build the full, ordered scenario list for a sweep.

    Every size string in the plan is parsed up front, so a malformed size
    fails before any network activity.

    Raises:
        InvalidSizeFormat: If any size in the plan is malformed.
    """
    for size in sorted(plan.all_sizes()):
        parse_size(size)

    factory = ScenarioFactory(facade, store, plan, clock)

    scenarios = [
        factory.presign_put(),
        factory.initiate_multipart(),
        factory.presign_part(),
    ]
    scenarios += [factory.traditional_upload(size) for size in plan.traditional_sizes]
    scenarios += [factory.multipart_upload(size, chunk) for size, chunk in plan.multipart_pairs()]
    return scenarios


def filter_scenarios(scenarios: list[Scenario], filter_str: str) -> list[Scenario]:
    """Keep scenarios whose name contains any comma-separated pattern.

    Args:
        scenarios: All registered scenarios
        filter_str: Comma-separated substrings, e.g. ``"presigned,10m"``

    Returns:
        Matching scenarios, in their original order
    """
    patterns = [p.strip() for p in filter_str.split(",") if p.strip()]
    return [s for s in scenarios if any(p in s.name for p in patterns)]
