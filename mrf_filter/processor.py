#!/usr/bin/env python3
"""Command-line entry point: fetch the index, filter it, write matches."""
import argparse, contextlib, logging, pathlib, sys, time
from typing import List, Optional

from mrf_filter import metrics
from mrf_filter.config import Settings
from mrf_filter.errors import PipelineError, SourceError
from mrf_filter.pipeline import PipelineResult, run_pipeline
from mrf_filter.progress import format_elapsed
from mrf_filter.source import open_index

logger = logging.getLogger(__name__)


def process(settings: Settings) -> PipelineResult:
    """Run one pass from ``settings.source`` into ``settings.output_path``."""
    start = time.monotonic()
    with contextlib.ExitStack() as stack:
        index = stack.enter_context(open_index(settings.source, timeout=settings.http_timeout))

        logger.info("Creating output file: %s", settings.output_path)
        try:
            out = stack.enter_context(open(settings.output_path, "w", encoding="utf-8"))
        except OSError as e:
            raise SourceError(f"Failed to create file: {e}") from e

        result = run_pipeline(index.stream, out, settings=settings, counter=index.counter,
                              total_bytes=index.total_bytes, started=start)
    logger.info("Success! Found %d unique URLs. Saved to %s.", result.found, settings.output_path)
    return result


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="mrf-filter",
        description="Stream a gzip price-transparency index and keep Anthem PPO / New York file URLs.")
    ap.add_argument("source", nargs="?", help="index URL or local path (default: $MRF_SOURCE_URL or built-in URL)")
    ap.add_argument("-o", "--output", type=pathlib.Path, help="output file, one URL per line")
    ap.add_argument("--interval", type=int, help="records between progress lines")
    ap.add_argument("--timeout", type=float, help="HTTP connect/read timeout in seconds")
    ap.add_argument("--metrics-file", type=pathlib.Path, help="write Prometheus metrics here on exit")
    ap.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return ap


def cli(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env().with_overrides(
            source=args.source, output_path=args.output, progress_interval=args.interval,
            http_timeout=args.timeout, metrics_file=args.metrics_file,
            log_level=args.log_level.upper() if args.log_level else None)
        logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    except ValueError as e:
        print(f"mrf-filter: {e}", file=sys.stderr)
        return 2

    start = time.monotonic()
    try:
        process(settings)
    except (PipelineError, OSError) as e:
        logger.error("%s", e)
        return 1
    finally:
        logger.info("Total execution time: %s", format_elapsed(time.monotonic() - start))
        if settings.metrics_file:
            metrics.write_textfile(settings.metrics_file)
    return 0


def main():
    sys.exit(cli())


if __name__ == "__main__":
    main()
