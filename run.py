#!/usr/bin/env python3
"""
S3 Upload Strategy Benchmark

Run this script to benchmark single-PUT vs. multipart presigned uploads
against an S3-compatible endpoint (a local MinIO by default).

Usage:
    python run.py                     # Full sweep, writes results.json
    python run.py -o out/results.json # Custom results path
    python run.py -s presigned,10m    # Only matching scenarios
    python run.py -c config.json      # Settings from a JSON file
"""

import sys
from upload_bench.cli import main

if __name__ == "__main__":
    sys.exit(main())
