"""
S3 Upload Strategy Benchmark.

Measures single-PUT versus multipart uploads through presigned URLs against
an S3-compatible endpoint, then renders tables and charts from the results.
"""

__version__ = "1.0.0"

from upload_bench.cli import main, report_main

__all__ = ["main", "report_main", "__version__"]
