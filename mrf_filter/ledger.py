#!/usr/bin/env python3
"""Insertion-ordered set of locations already written in this run."""
from typing import Dict, Iterator


class DedupLedger:
    def __init__(self):
        # dict keeps first-seen order
        self._seen: Dict[str, None] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._seen

    def add(self, key: str) -> bool:
        """Insert ``key``; return False if it was already present."""
        if key in self._seen:
            return False
        self._seen[key] = None
        return True

    def __len__(self) -> int:
        return len(self._seen)

    def __iter__(self) -> Iterator[str]:
        return iter(self._seen)
