"""
Command-line interface for procmon.

Two modes are supported:

- live sampling (default): print sar/mpstat style tables every interval,
  optionally archiving history to disk and writing charts on exit;
- replay (``--read``): load archive files, report which ones could be
  read, then write charts and optionally Parquet exports.
"""

import argparse
import dataclasses
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path, validate_archive_cadence
from ..errors import ArchiveReadFailure
from ..models.config import AppConfig
from ..orchestration import Sampler, SignalHandler
from ..renderers import RENDERERS, ChartWriter
from ..sources import PsutilCounterSource
from ..storage import ArchiveReader, ParquetExporter, ReplayResult
from ..validation import (
    ValidationError,
    handle_cli_error,
    validate_directory,
    validate_positive_float,
    validate_positive_integer,
)

# --- Logging Setup ---
# Tables go to stdout, so log records go to stderr.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procmon",
        description="Collect Linux performance counters and print sar-style reports.",
    )
    parser.add_argument("--config", type=Path, help="Path to config.toml.")
    parser.add_argument("-i", "--interval", type=str, help="Seconds between samples.")
    parser.add_argument("-u", "--until", type=str, help="Stop after this many samples.")
    parser.add_argument(
        "-o", "--output", choices=list(RENDERERS), help="Report to print every interval."
    )
    parser.add_argument("--header", type=str, help="Reprint the column header every N reports.")
    parser.add_argument("--history", type=str, help="Samples kept in memory per history category.")
    parser.add_argument(
        "-r", "--read", type=str,
        help="Comma-separated archive files to replay instead of sampling.",
    )
    parser.add_argument(
        "--replay-minutes", type=str,
        help="Replay the last N minutes from the archive directory instead of sampling.",
    )
    parser.add_argument("--archive", action="store_true", help="Archive history to disk.")
    parser.add_argument("--archive-dir", type=str, help="Directory of the archive files.")
    parser.add_argument("-d", "--daemon", action="store_true", help="Do not print reports.")
    parser.add_argument("--charts", type=str, help="Write HTML charts to this directory.")
    parser.add_argument("--export", type=str, help="Write replayed samples as Parquet to this directory.")
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """
    Return a copy of ``config`` with command-line values applied.

    Raises:
        ValidationError: If a command-line value is invalid
    """
    sampler = config.sampler
    archive = config.archive
    charts = config.charts

    if args.interval is not None:
        sampler = dataclasses.replace(sampler, interval_seconds=validate_positive_float(
            args.interval, min_value=0.0, exclusive_min=True, field_name="--interval"))
    if args.until is not None:
        sampler = dataclasses.replace(sampler, max_cycles=validate_positive_integer(
            args.until, field_name="--until"))
    if args.output is not None:
        sampler = dataclasses.replace(sampler, output=args.output)
    if args.header is not None:
        sampler = dataclasses.replace(sampler, header_interval=validate_positive_integer(
            args.header, field_name="--header"))
    if args.history is not None:
        sampler = dataclasses.replace(sampler, history_capacity=validate_positive_integer(
            args.history, field_name="--history"))
    if args.daemon:
        sampler = dataclasses.replace(sampler, daemon=True)
    if args.archive:
        archive = dataclasses.replace(archive, enabled=True)
    if args.archive_dir is not None:
        archive = dataclasses.replace(archive, directory=validate_directory(
            args.archive_dir, field_name="--archive-dir"))
    if args.charts is not None:
        charts = dataclasses.replace(charts, enabled=True, output_dir=validate_directory(
            args.charts, field_name="--charts"))

    return validate_archive_cadence(AppConfig(sampler=sampler, archive=archive, charts=charts))


def report_replay(result: ReplayResult, paths: List[Path]) -> None:
    """Print one ✔/✘ line per requested archive file."""
    failed = {Path(failure.path): failure for failure in result.failures}
    for path in paths:
        if path in failed:
            print(f"✘ {path}: {failed[path].cause}")
        else:
            print(f"✔ {path}")
    if result.corrupt_records:
        print(f"{len(result.corrupt_records)} corrupt records skipped")


def run_replay(config: AppConfig, args: argparse.Namespace) -> int:
    """Replay archives and produce charts and exports. Returns the exit code."""
    reader = ArchiveReader(config.archive.directory)
    if args.read:
        paths = [Path(part.strip()) for part in args.read.split(",") if part.strip()]
        result = reader.read_files(paths)
        report_replay(result, paths)
        if paths and len(result.failures) == len(paths):
            return 1
    else:
        minutes = validate_positive_float(args.replay_minutes, min_value=0.0, exclusive_min=True,
                                          field_name="--replay-minutes")
        end = time.time()
        result = reader.read_window(end - minutes * 60.0, end)
        print(f"Replayed {result.record_count} records from {len(result.files_read)} files")

    chart_config = config.charts
    if not chart_config.enabled:
        chart_config = dataclasses.replace(chart_config, enabled=True)
    written = ChartWriter(chart_config).write_all(result.samples)
    for path in written:
        print(f"chart: {path}")

    if args.export:
        for category, path in ParquetExporter().export(result, Path(args.export)).items():
            print(f"{category}: {path}")
    return 0


def run_live(config: AppConfig) -> int:
    """Sample until done or interrupted. Returns the exit code."""
    sampler = Sampler(config, PsutilCounterSource())
    with SignalHandler(sampler.state):
        exit_code = sampler.run()

    if config.charts.enabled:
        ChartWriter(config.charts).write_all(sampler.history.snapshot())
    return exit_code


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line entry point.

    Raises:
        SystemExit: Always, with the exit status of the run.
    """
    args = build_parser().parse_args(argv)

    if args.config is not None:
        set_config_path(args.config)

    try:
        config = apply_overrides(get_config(), args)
    except (ValidationError, FileNotFoundError) as e:
        handle_cli_error(error=e, context="configuration", exit_code=1, logger=logger)

    try:
        if args.read or args.replay_minutes:
            exit_code = run_replay(config, args)
        else:
            exit_code = run_live(config)
    except (ValidationError, ArchiveReadFailure) as e:
        handle_cli_error(error=e, context="run", exit_code=1, logger=logger)

    sys.exit(exit_code)


if __name__ == "__main__":
    main_cli()
