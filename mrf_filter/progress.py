#!/usr/bin/env python3
"""Byte counting and periodic progress lines."""
import logging, time
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

MB = 1024 * 1024


class ByteCounter:
    """Read-through wrapper that counts the bytes pulled from ``reader``."""

    def __init__(self, reader):
        self.reader = reader
        self.count = 0

    def read(self, size: int = -1) -> bytes:
        data = self.reader.read(size)
        self.count += len(data)
        return data

    def readable(self) -> bool:
        return True

    def close(self):
        self.reader.close()


@dataclass
class ProgressState:
    started: float
    total_bytes: Optional[int] = None
    counter: Optional[ByteCounter] = None
    records: int = 0
    found: int = 0

    @property
    def bytes_read(self) -> int:
        return self.counter.count if self.counter is not None else 0


def format_elapsed(seconds: float) -> str:
    """Whole-second duration as ``1h2m3s`` / ``2m3s`` / ``3s``."""
    total = int(round(max(seconds, 0)))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


def format_status(records: int, found: int, bytes_read: int, total_bytes: Optional[int],
                  started: float, now: Optional[float] = None) -> str:
    if now is None:
        now = time.monotonic()
    percent = "Unknown%"
    if total_bytes and total_bytes > 0:
        percent = f"{bytes_read / total_bytes * 100:.1f}%"
    return (f"Scan: {records} | Found: {found} | Progress: {bytes_read / MB:.0f}MB ({percent}) "
            f"| Time: {format_elapsed(now - started)}")


def log_status(state: ProgressState, now: Optional[float] = None) -> str:
    line = format_status(state.records, state.found, state.bytes_read, state.total_bytes,
                         state.started, now=now)
    logger.info(line)
    return line
