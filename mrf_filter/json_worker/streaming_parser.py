#!/usr/bin/env python3
"""Constant-memory navigation of a JSON token stream."""
import ijson, logging
from ijson.common import ObjectBuilder
from typing import Any, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

Event = Tuple[str, Any]

_OPEN = ("start_map", "start_array")
_CLOSE = ("end_map", "end_array")


class StreamingJSONParser:
    def __init__(self, target_field: str = "reporting_structure", buf_size: int = 64 * 1024):
        self.target_field = target_field
        self.buf_size = buf_size

    def events(self, stream) -> Iterator[Event]:
        """Low-level ``(event, value)`` pairs read lazily from a binary stream."""
        return ijson.basic_parse(stream, buf_size=self.buf_size)

    def locate_array(self, events: Iterator[Event]) -> Optional[Iterator[Event]]:
        """Advance ``events`` past the opening of the target array.

        Returns the same iterator, positioned on the first element, or None
        when the stream ends, fails to tokenize, or the key does not hold an
        array.
        """
        try:
            for event, value in events:
                if event == "map_key" and value == self.target_field:
                    event, _ = next(events, (None, None))
                    if event == "start_array":
                        return events
                    logger.error(f"'{self.target_field}' is not an array (got {event})")
                    return None
        except ijson.JSONError as e:
            logger.error(f"Failed to read JSON token: {e}")
            return None
        return None

    def iter_elements(self, events: Iterator[Event]) -> Iterator[Any]:
        """Yield array elements one at a time until the array closes.

        Only the element being built is held in memory.
        """
        for event, value in events:
            if event == "end_array":
                return
            if event not in _OPEN:
                yield value
                continue
            builder = ObjectBuilder()
            builder.event(event, value)
            depth = 1
            for event, value in events:
                builder.event(event, value)
                if event in _OPEN:
                    depth += 1
                elif event in _CLOSE:
                    depth -= 1
                    if depth == 0:
                        break
            yield builder.value
