"""Report generation from persisted measurements.

Exports:
- build_reports: Main function to generate all report artifacts
- load_results: Load a results file written by a sweep
- ReportError: Exception for report failures
"""

from upload_bench.report.build import ReportError, build_reports, load_results
from upload_bench.report.stats import Summary, summarize

__all__ = [
    "build_reports",
    "load_results",
    "ReportError",
    "Summary",
    "summarize",
]
