#!/usr/bin/env python3
"""Single-pass decode, filter, dedup and write over a reporting-structure index."""
import ijson, logging, time, zlib
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from mrf_filter import metrics
from mrf_filter.config import Settings
from mrf_filter.errors import SourceError, StructureNotFoundError
from mrf_filter.json_worker.streaming_parser import StreamingJSONParser
from mrf_filter.ledger import DedupLedger
from mrf_filter.models import Record, RecordDecodeError
from mrf_filter.progress import ByteCounter, ProgressState, format_elapsed, log_status

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    records: int
    skipped: int
    found: int
    elapsed: float
    locations: List[str] = field(default_factory=list)


def run_pipeline(stream, out: TextIO, settings: Optional[Settings] = None,
                 counter: Optional[ByteCounter] = None, total_bytes: Optional[int] = None,
                 started: Optional[float] = None) -> PipelineResult:
    """Stream ``stream`` (decompressed JSON bytes) and write accepted locations to ``out``.

    Each new location is written as one line and flushed immediately, so a
    failed run still leaves every line accepted before the failure.

    Raises:
        StructureNotFoundError: the target array is missing.
        SourceError: the byte stream is corrupt or ends early.
    """
    settings = settings or Settings()
    policy = settings.policy
    parser = StreamingJSONParser(settings.target_field, buf_size=settings.chunk_size)
    state = ProgressState(started=time.monotonic() if started is None else started,
                          total_bytes=total_bytes, counter=counter)
    ledger = DedupLedger()
    skipped = 0

    try:
        events = parser.locate_array(parser.events(stream))
        if events is None:
            raise StructureNotFoundError(settings.target_field)

        logger.info("Pipeline started. Scanning records...")
        for element in parser.iter_elements(events):
            try:
                record = Record.from_json(element)
            except RecordDecodeError as e:
                skipped += 1
                metrics.records_skipped.inc()
                logger.warning("Skipping malformed record: %s", e)
                continue

            state.records += 1
            metrics.records_scanned.inc()
            if state.records % settings.progress_interval == 0:
                log_status(state)

            if not policy.is_target_plan(record):
                continue
            for f in record.files:
                if not policy.is_target_location(f.location, f.description):
                    continue
                if ledger.add(f.location):
                    state.found += 1
                    metrics.locations_matched.inc()
                    out.write(f.location + "\n")
                    out.flush()
    except ijson.JSONError as e:
        raise SourceError(f"Corrupt JSON stream after {state.records} records: {e}") from e
    except (EOFError, zlib.error) as e:
        raise SourceError(f"Input stream ended or is not valid gzip: {e}") from e
    except OSError as e:
        raise SourceError(f"I/O error while streaming: {e}") from e

    elapsed = time.monotonic() - state.started
    metrics.pipeline_duration.observe(elapsed)
    logger.info("Pipeline complete! Processed %d records in %s (%d skipped). Found %d URLs.",
                state.records, format_elapsed(elapsed), skipped, state.found)
    return PipelineResult(records=state.records, skipped=skipped, found=state.found,
                          elapsed=elapsed, locations=list(ledger))
