"""Measurement store: scenario name -> ordered latency samples.

One store is created per sweep and handed to everything that records
samples. It is persisted as a flat JSON object::

    {"traditional-upload-5m": [41, 38, 40], ...}
"""

import json
import math
from pathlib import Path
from typing import Iterator, Optional, Union


class MeasurementStore:
    """Ordered millisecond samples keyed by scenario name.

    Samples are append-only; insertion order is sample order.
    """

    def __init__(self, data: Optional[dict[str, list[int]]] = None):
        self._data: dict[str, list[int]] = {}
        for name, samples in (data or {}).items():
            self._data[name] = list(samples)

    def record(self, name: str, duration_ms: int) -> None:
        """Append one sample to ``name``, creating the entry if needed."""
        if duration_ms < 0:
            raise ValueError(f"Negative duration for {name}: {duration_ms}")
        self._data.setdefault(name, []).append(duration_ms)

    def reset(self, name: str) -> None:
        """Ensure ``name`` exists with no samples."""
        self._data[name] = []

    def ensure(self, name: str) -> None:
        """Ensure ``name`` exists, keeping any samples already recorded."""
        self._data.setdefault(name, [])

    def samples(self, name: str) -> list[int]:
        """Copy of the samples for ``name`` (empty if unknown)."""
        return list(self._data.get(name, []))

    def count(self, name: str) -> int:
        return len(self._data.get(name, []))

    def mean(self, name: str) -> Optional[float]:
        """Arithmetic mean for ``name``, or None without samples."""
        samples = self._data.get(name)
        if not samples:
            return None
        return sum(samples) / len(samples)

    def names(self) -> list[str]:
        return list(self._data)

    def to_dict(self) -> dict[str, list[int]]:
        return {name: list(samples) for name, samples in self._data.items()}

    def save(self, path: Union[str, Path]) -> None:
        """Write the whole store to ``path`` as JSON, replacing the file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path = path.with_name(path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f)
        tmp_path.replace(path)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "MeasurementStore":
        """Read a store written by ``save``.

        Raises:
            OSError: If the file cannot be read.
            ValueError: If the file is not a JSON object of lists of
                finite, non-negative numbers.
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError("Results file must contain a JSON object")
        for name, samples in data.items():
            if not isinstance(samples, list) or not all(
                isinstance(s, (int, float)) and not isinstance(s, bool) and math.isfinite(s) and s >= 0
                for s in samples
            ):
                raise ValueError(f"Samples for '{name}' must be a list of non-negative numbers")

        return cls(data)

    def __contains__(self, name: str) -> bool:
        return name in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MeasurementStore):
            return NotImplemented
        return self._data == other._data
