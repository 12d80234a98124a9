#!/usr/bin/env python3
"""Predicates deciding which plans and file locations are in scope."""
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from mrf_filter.models import Record

# Network IDs for New York / PPO products, found through EIN lookup
TARGET_CODES = frozenset({"72A0", "71A0", "39B0", "42B0"})
PLAN_KEYWORDS = ("PPO", "ANTHEM")
FALLBACK_TOKENS = ("NY", "NEW YORK")


@dataclass(frozen=True)
class MatchPolicy:
    """Plan and location filters.

    Matching is plain substring matching. The text fallback is loose on
    purpose: "NY" also matches tokens such as "ANYTOWN" or "COMPANY".
    """
    target_codes: FrozenSet[str] = TARGET_CODES
    plan_keywords: Tuple[str, ...] = PLAN_KEYWORDS
    fallback_tokens: Tuple[str, ...] = FALLBACK_TOKENS
    _code_tokens: Tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_code_tokens", tuple(f"_{code}_" for code in self.target_codes))

    def is_target_plan(self, record: Record) -> bool:
        """True if a single plan name carries every plan keyword."""
        for plan in record.plans:
            name = (plan.name or "").upper()
            if all(keyword in name for keyword in self.plan_keywords):
                return True
        return False

    def is_target_location(self, location: Optional[str], description: Optional[str]) -> bool:
        location = location or ""
        # Exact network codes first, case-sensitive
        if any(token in location for token in self._code_tokens):
            return True
        # Text fallback (discovery)
        return self.is_ny(location) or self.is_ny(description)

    def is_ny(self, text: Optional[str]) -> bool:
        upper = (text or "").upper()
        return any(token in upper for token in self.fallback_tokens)


DEFAULT_POLICY = MatchPolicy()


def is_target_plan(record: Record) -> bool:
    return DEFAULT_POLICY.is_target_plan(record)


def is_target_location(location: Optional[str], description: Optional[str]) -> bool:
    return DEFAULT_POLICY.is_target_location(location, description)


def is_ny(text: Optional[str]) -> bool:
    return DEFAULT_POLICY.is_ny(text)
