#!/usr/bin/env python3
"""
Render tables and charts from a benchmark results file.

Usage:
    python report.py results.json             # Writes into ./results
    python report.py results.json -o reports  # Custom output directory
"""

import sys
from upload_bench.cli import report_main

if __name__ == "__main__":
    sys.exit(report_main())
