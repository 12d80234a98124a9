#!/usr/bin/env python3
"""Open the compressed index over HTTP or from disk."""
import contextlib, gzip, logging, os, pathlib
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional

import requests
import urllib3

from mrf_filter.errors import SourceError
from mrf_filter.progress import ByteCounter

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


@dataclass
class IndexStream:
    """Decompressed byte stream plus the counter over the raw bytes behind it."""
    stream: Any
    counter: ByteCounter
    total_bytes: Optional[int]


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def content_length(headers: Mapping[str, str]) -> Optional[int]:
    """Declared body size, or None for chunked / missing / bogus headers."""
    try:
        value = int(headers.get("Content-Length", ""))
    except ValueError:
        return None
    return value if value > 0 else None


@contextlib.contextmanager
def open_index(source: str, timeout: float = 60.0) -> Iterator[IndexStream]:
    """Yield an :class:`IndexStream` for ``source``; everything is closed on exit."""
    if is_url(source):
        opener = _open_url(source, timeout)
    else:
        opener = _open_file(pathlib.Path(source))
    with opener as index:
        yield index


@contextlib.contextmanager
def _open_url(url: str, timeout: float) -> Iterator[IndexStream]:
    logger.info("Connecting to stream: %s", url)
    try:
        response = requests.get(url, stream=True, timeout=timeout)
    except requests.RequestException as e:
        raise SourceError(f"Failed to fetch URL: {e}") from e
    with contextlib.closing(response):
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise SourceError(f"Server returned error: {response.status_code}") from e
        total = content_length(response.headers)
        if total is None:
            logger.info("No Content-Length; progress percentage will be unknown")
        # raw keeps the gzip bytes as sent; decompression happens here
        counter = ByteCounter(response.raw)
        with gzip.GzipFile(fileobj=counter, mode="rb") as gz:
            try:
                yield IndexStream(stream=gz, counter=counter, total_bytes=total)
            except (urllib3.exceptions.HTTPError, requests.RequestException) as e:
                raise SourceError(f"Connection lost while streaming: {e}") from e


@contextlib.contextmanager
def _open_file(path: pathlib.Path) -> Iterator[IndexStream]:
    logger.info("Opening index file: %s", path)
    try:
        fh = open(path, "rb")
    except OSError as e:
        raise SourceError(f"Failed to open {path}: {e}") from e
    with fh:
        total = os.fstat(fh.fileno()).st_size or None
        compressed = fh.read(2) == GZIP_MAGIC
        fh.seek(0)
        counter = ByteCounter(fh)
        if compressed:
            with gzip.GzipFile(fileobj=counter, mode="rb") as gz:
                yield IndexStream(stream=gz, counter=counter, total_bytes=total)
        else:
            yield IndexStream(stream=counter, counter=counter, total_bytes=total)
