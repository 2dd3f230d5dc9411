"""Command-line interface for the upload benchmark.

Two entry points:
- main: run the benchmark sweep and write the results file
- report_main: turn a results file into tables and charts
"""

import argparse
import secrets
import sys
from typing import Optional

import httpx
from rich.console import Console

from upload_bench.config import ConfigError, load_config
from upload_bench.measurements import MeasurementStore
from upload_bench.report import ReportError, build_reports, load_results
from upload_bench.reporters import ConsoleProgress
from upload_bench.runner import BenchmarkRunner
from upload_bench.s3_client import build_s3_client
from upload_bench.scenarios import build_scenarios, filter_scenarios
from upload_bench.sizes import InvalidSizeFormat
from upload_bench.storage import StorageFacade


def make_bucket_name() -> str:
    """Random scratch bucket name, e.g. ``benchmark-1a2b3c4d5e``."""
    return f"benchmark-{secrets.token_hex(5)}"


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse benchmark command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="upload-bench",
        description="Benchmark single-PUT vs. multipart presigned uploads against S3",
    )

    parser.add_argument(
        "-c", "--config",
        metavar="PATH",
        help="Optional JSON config file (environment variables take priority)",
    )

    parser.add_argument(
        "-o", "--output",
        metavar="PATH",
        default="results.json",
        help="Where to write measurements (default: results.json)",
    )

    parser.add_argument(
        "-b", "--bucket",
        metavar="NAME",
        help="Scratch bucket name (default: benchmark-<random>)",
    )

    parser.add_argument(
        "-s", "--only",
        metavar="LIST",
        help="Comma-separated substrings; run only scenarios whose name matches one",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress the live progress line",
    )

    parser.add_argument(
        "--strict-etags",
        action="store_true",
        help="Fail when a part upload response has no ETag header",
    )

    return parser.parse_args(argv)


def parse_report_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse report command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="upload-bench-report",
        description="Render tables and charts from a benchmark results file",
    )

    parser.add_argument(
        "results",
        metavar="RESULTS",
        help="Path to a results file written by upload-bench",
    )

    parser.add_argument(
        "-o", "--output-dir",
        metavar="DIR",
        default="results",
        help="Output directory for tables and charts (default: results)",
    )

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Benchmark entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 for success, 1 for benchmark failures, 2 for
        configuration errors
    """
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    store = MeasurementStore()
    bucket = args.bucket or make_bucket_name()

    s3_client = build_s3_client(config)
    http_client = httpx.Client(timeout=None)
    reporter = ConsoleProgress(quiet=args.quiet)

    try:
        facade = StorageFacade(
            s3_client,
            http_client,
            bucket,
            presign_expiry=config.presign_expiry,
            strict_etags=args.strict_etags,
        )

        try:
            scenarios = build_scenarios(facade, store)
        except InvalidSizeFormat as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return 2

        if args.only:
            scenarios = filter_scenarios(scenarios, args.only)
            if not scenarios:
                print("No matching scenarios found", file=sys.stderr)
                return 2

        print(f"Creating bucket '{bucket}'")
        runner = BenchmarkRunner(facade, scenarios, store, args.output, reporter=reporter)
        runner.run()

    except Exception as e:
        reporter.close()
        err_console = Console(stderr=True)
        err_console.print_exception()
        print(f"Benchmark failed: {e}", file=sys.stderr)
        return 1

    finally:
        http_client.close()

    print(f"Results written to: {args.output}")
    return 0


def report_main(argv: Optional[list[str]] = None) -> int:
    """Report entry point.

    Returns:
        Exit code: 0 for success, 1 for report errors
    """
    args = parse_report_args(argv)

    try:
        store = load_results(args.results)
        written = build_reports(store, args.output_dir)
    except ReportError as e:
        print(f"Report error: {e}", file=sys.stderr)
        return 1

    print(f"{len(written)} report files written to: {args.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
