"""Summary statistics over latency samples."""

import statistics
from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class Summary:
    """Mean and population standard deviation of a sample sequence."""

    mean: float
    stddev: float
    count: int


def summarize(samples: Optional[Sequence[float]]) -> Optional[Summary]:
    """Summarize ``samples``; None when there are none to summarize."""
    if not samples:
        return None
    return Summary(
        mean=statistics.fmean(samples),
        stddev=statistics.pstdev(samples),
        count=len(samples),
    )


def mean_or_none(samples: Optional[Sequence[float]]) -> Optional[float]:
    summary = summarize(samples)
    return summary.mean if summary else None
