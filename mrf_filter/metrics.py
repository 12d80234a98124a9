#!/usr/bin/env python3
"""Prometheus counters for pipeline runs."""
import logging
from prometheus_client import REGISTRY, Counter, Histogram, write_to_textfile

logger = logging.getLogger(__name__)

records_scanned = Counter("mrf_records_scanned_total", "Records decoded from the index")
records_skipped = Counter("mrf_records_skipped_total", "Malformed records skipped")
locations_matched = Counter("mrf_locations_matched_total", "Unique locations written")
pipeline_duration = Histogram("mrf_pipeline_seconds", "Time spent in one pipeline run")


def write_textfile(path) -> None:
    """Dump the default registry in node-exporter textfile format."""
    write_to_textfile(str(path), REGISTRY)
    logger.info("Metrics written to %s", path)
