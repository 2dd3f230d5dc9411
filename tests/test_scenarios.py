"""Tests for the scenario registry."""

from unittest.mock import Mock

import pytest

from conftest import FakeClock
from upload_bench.models import ScenarioKind
from upload_bench.sampler import Sampler
from upload_bench.scenarios import (
    DEFAULT_PLAN,
    ScenarioFactory,
    SweepPlan,
    build_scenarios,
    filter_scenarios,
)
from upload_bench.sizes import InvalidSizeFormat, parse_size

TINY_PLAN = SweepPlan(
    traditional_sizes=("1k", "4k"),
    multipart_small_sizes=("1k", "2k"),
    multipart_small_chunks=("1k",),
    multipart_large_sizes=("8k",),
    multipart_large_chunks=("2k", "4k"),
    micro_budget_ms=0,
    upload_budget_ms=0,
    large_threshold="8k",
)


class TestSweepPlan:
    def test_default_budgets(self):
        assert DEFAULT_PLAN.budget_for(parse_size("100m")) == 2000
        assert DEFAULT_PLAN.budget_for(parse_size("1g")) == 10000
        assert DEFAULT_PLAN.budget_for(parse_size("1.5g")) == 10000

    def test_multipart_pairs_order(self):
        assert TINY_PLAN.multipart_pairs() == [
            ("1k", "1k"),
            ("2k", "1k"),
            ("8k", "2k"),
            ("8k", "4k"),
        ]


class TestBuildScenarios:
    """Tests for build_scenarios function."""

    @pytest.fixture
    def scenarios(self, facade, store):
        return build_scenarios(facade, store)

    def test_default_count(self, scenarios):
        # 3 micro + 8 traditional + 6*4 small multipart + 3*6 large multipart
        assert len(scenarios) == 3 + 8 + 24 + 18

    def test_names_are_unique(self, scenarios):
        names = [s.name for s in scenarios]
        assert len(names) == len(set(names))

    def test_order(self, scenarios):
        assert [s.name for s in scenarios[:4]] == [
            "get-traditional-presigned-url",
            "initiate-multipart-only",
            "get-multipart-presigned-url-only",
            "traditional-upload-512k",
        ]
        assert scenarios[11].name == "upload-multipart-total-512k-5m"
        assert scenarios[-1].name == "upload-multipart-total-5g-500m"

    def test_budgets(self, scenarios):
        by_name = {s.name: s for s in scenarios}
        assert by_name["get-traditional-presigned-url"].budget_ms == 1000
        assert by_name["traditional-upload-100m"].budget_ms == 2000
        assert by_name["traditional-upload-1g"].budget_ms == 10000
        assert by_name["upload-multipart-total-100m-5m"].budget_ms == 2000
        assert by_name["upload-multipart-total-2g-200m"].budget_ms == 10000

    def test_multipart_sizes_recorded(self, scenarios):
        scenario = next(s for s in scenarios if s.name == "upload-multipart-total-10m-5m")
        assert scenario.size_bytes == 10 * 1024 * 1024
        assert scenario.chunk_bytes == 5 * 1024 * 1024

    def test_invalid_size_fails_before_network(self, store):
        facade = Mock()
        plan = SweepPlan(
            traditional_sizes=("5mb",),
            multipart_small_sizes=(),
            multipart_small_chunks=(),
            multipart_large_sizes=(),
            multipart_large_chunks=(),
        )

        with pytest.raises(InvalidSizeFormat):
            build_scenarios(facade, store, plan)

        assert facade.mock_calls == []


class TestFilterScenarios:
    def test_matches_any_pattern(self, facade, store):
        scenarios = build_scenarios(facade, store, TINY_PLAN)
        names = [s.name for s in filter_scenarios(scenarios, "presigned, 8k-4k")]
        assert names == [
            "get-traditional-presigned-url",
            "get-multipart-presigned-url-only",
            "upload-multipart-total-8k-4k",
        ]

    def test_no_match(self, facade, store):
        scenarios = build_scenarios(facade, store, TINY_PLAN)
        assert filter_scenarios(scenarios, "nothing") == []


class TestScenarioActions:
    """Run scenarios against the fake backend."""

    def _run(self, scenario, store, tmp_path, clock=None):
        sampler = Sampler(store, tmp_path / "r.json", clock=clock or FakeClock(step=0))
        return sampler.run(scenario)

    def test_presign_put(self, facade, store, fake_s3, tmp_path):
        factory = ScenarioFactory(facade, store, TINY_PLAN)
        self._run(factory.presign_put(), store, tmp_path)
        assert store.count("get-traditional-presigned-url") == 3

    def test_initiate_multipart(self, facade, store, fake_s3, tmp_path):
        factory = ScenarioFactory(facade, store, TINY_PLAN)
        self._run(factory.initiate_multipart(), store, tmp_path)
        assert len(fake_s3.uploads) == 3
        assert all(key.startswith("initiate-multipart-only/") for key in fake_s3.uploads.values())

    def test_presign_part_initiates_once(self, facade, store, fake_s3, tmp_path):
        factory = ScenarioFactory(facade, store, TINY_PLAN)
        self._run(factory.presign_part(), store, tmp_path)
        assert len(fake_s3.uploads) == 1
        assert store.count("get-multipart-presigned-url-only") == 3

    def test_traditional_upload(self, facade, store, fake_http, fake_s3, tmp_path):
        factory = ScenarioFactory(facade, store, TINY_PLAN)
        self._run(factory.traditional_upload("4k"), store, tmp_path)

        assert [p["size"] for p in fake_http.puts] == [4096] * 3
        assert all(p["op"] == "put_object" for p in fake_http.puts)
        objects = fake_s3.buckets["bench-bucket"]
        assert len(objects) == 3
        assert all(key.startswith("traditional-upload-4k/") for key in objects)

    def test_multipart_records_three_buckets(self, facade, store, fake_http, fake_s3, tmp_path):
        clock = FakeClock(step=1)
        factory = ScenarioFactory(facade, store, TINY_PLAN, clock=clock)

        self._run(factory.multipart_upload("8k", "2k"), store, tmp_path, clock=clock)

        assert store.count("upload-multipart-total-8k-2k") == 3
        assert store.count("upload-multipart-upload-8k-2k") == 3
        assert store.count("upload-multipart-complete-8k-2k") == 3
        assert len(fake_s3.completed) == 3
        assert all(len(c["Parts"]) == 4 for c in fake_s3.completed)
        assert all(p["size"] == 2048 for p in fake_http.puts)

    def test_multipart_remainder_part(self, facade, store, fake_http, tmp_path):
        plan = SweepPlan(
            traditional_sizes=(),
            multipart_small_sizes=("5k",),
            multipart_small_chunks=("2k",),
            multipart_large_sizes=(),
            multipart_large_chunks=(),
            upload_budget_ms=0,
        )
        factory = ScenarioFactory(facade, store, plan)
        self._run(factory.multipart_upload("5k", "2k"), store, tmp_path)

        assert [p["size"] for p in fake_http.puts[:3]] == [2048, 2048, 1024]

    def test_multipart_setup_resets_phase_buckets(self, facade, store, tmp_path):
        store.record("upload-multipart-upload-1k-1k", 999)
        factory = ScenarioFactory(facade, store, TINY_PLAN)

        self._run(factory.multipart_upload("1k", "1k"), store, tmp_path)

        assert 999 not in store.samples("upload-multipart-upload-1k-1k")
        assert store.count("upload-multipart-upload-1k-1k") == 3

    def test_multipart_kinds(self, facade, store):
        scenario = ScenarioFactory(facade, store, TINY_PLAN).multipart_upload("1k", "1k")
        assert scenario.id.kind == ScenarioKind.MULTIPART_TOTAL
