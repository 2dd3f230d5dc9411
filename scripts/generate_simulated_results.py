#!/usr/bin/env python3
"""Generate a simulated results file for visual testing of the reports."""

import random
import sys

from upload_bench.measurements import MeasurementStore
from upload_bench.models import ScenarioId, ScenarioKind
from upload_bench.scenarios import DEFAULT_PLAN
from upload_bench.sizes import parse_size

# Rough shape of a local MinIO: ~400 MiB/s, a few ms per request
THROUGHPUT_BYTES_PER_MS = 400 * 1024 * 1024 / 1000
REQUEST_OVERHEAD_MS = 4
SAMPLES = 5


def jitter(value):
    """Spread a nominal duration by +/-10%, never below 1ms."""
    return max(1, round(value * random.uniform(0.9, 1.1)))


def simulate_upload(size_bytes, parts=1):
    return jitter(size_bytes / THROUGHPUT_BYTES_PER_MS + REQUEST_OVERHEAD_MS * parts)


def main():
    random.seed(42)
    store = MeasurementStore()

    # Presigning is local signing work; initiating is one round trip
    for _ in range(SAMPLES * 100):
        store.record(ScenarioId(ScenarioKind.PRESIGN_PUT).name, random.choice([0, 0, 0, 1]))
        store.record(ScenarioId(ScenarioKind.PRESIGN_PART).name, random.choice([0, 0, 0, 1]))
    for _ in range(SAMPLES * 20):
        store.record(ScenarioId(ScenarioKind.INITIATE_MULTIPART).name, jitter(REQUEST_OVERHEAD_MS))

    for size in DEFAULT_PLAN.traditional_sizes:
        name = ScenarioId(ScenarioKind.TRADITIONAL_UPLOAD, size).name
        for _ in range(SAMPLES):
            store.record(name, simulate_upload(parse_size(size)))

    for size, chunk in DEFAULT_PLAN.multipart_pairs():
        size_bytes = parse_size(size)
        parts = max(1, -(-size_bytes // parse_size(chunk)))
        total_id = ScenarioId(ScenarioKind.MULTIPART_TOTAL, size, chunk)
        for _ in range(SAMPLES):
            upload = simulate_upload(size_bytes, parts)
            complete = jitter(REQUEST_OVERHEAD_MS * 2 + parts * 0.5)
            store.record(total_id.name, upload + complete)
            store.record(total_id.with_kind(ScenarioKind.MULTIPART_UPLOAD).name, upload)
            store.record(total_id.with_kind(ScenarioKind.MULTIPART_COMPLETE).name, complete)

    output = sys.argv[1] if len(sys.argv) > 1 else 'results.json'
    store.save(output)

    print('Generated simulated results:')
    print(f'  - {len(store)} scenarios')
    print(f'  - written to {output}')
    print()
    print(f'Render them with: upload-bench-report {output}')


if __name__ == '__main__':
    main()
