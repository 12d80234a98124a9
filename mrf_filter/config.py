#!/usr/bin/env python3
"""Run settings with environment overrides."""
import os, pathlib
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Mapping, Optional, Tuple

from mrf_filter.match_policy import FALLBACK_TOKENS, PLAN_KEYWORDS, TARGET_CODES, MatchPolicy

INDEX_FILE_URL = "https://antm-pt-prod-dataz-nogbd-nophi-us-east1.s3.amazonaws.com/anthem/2026-01-01_anthem_index.json.gz"
OUTPUT_FILE_NAME = "output.txt"


@dataclass(frozen=True)
class Settings:
    source: str = INDEX_FILE_URL
    output_path: pathlib.Path = pathlib.Path(OUTPUT_FILE_NAME)
    progress_interval: int = 1000
    target_field: str = "reporting_structure"
    target_codes: FrozenSet[str] = TARGET_CODES
    plan_keywords: Tuple[str, ...] = PLAN_KEYWORDS
    fallback_tokens: Tuple[str, ...] = FALLBACK_TOKENS
    http_timeout: float = 60.0
    chunk_size: int = 64 * 1024
    log_level: str = "INFO"
    metrics_file: Optional[pathlib.Path] = field(default=None)

    def __post_init__(self):
        if self.progress_interval <= 0:
            raise ValueError("progress_interval must be positive")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

    @property
    def policy(self) -> MatchPolicy:
        return MatchPolicy(target_codes=self.target_codes, plan_keywords=self.plan_keywords,
                           fallback_tokens=self.fallback_tokens)

    def with_overrides(self, **changes) -> "Settings":
        """Copy with every non-None value in ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        changes = {}
        if env.get("MRF_SOURCE_URL"):
            changes["source"] = env["MRF_SOURCE_URL"]
        if env.get("MRF_OUTPUT"):
            changes["output_path"] = pathlib.Path(env["MRF_OUTPUT"])
        if env.get("MRF_PROGRESS_INTERVAL"):
            changes["progress_interval"] = _number(env, "MRF_PROGRESS_INTERVAL", int)
        if env.get("MRF_HTTP_TIMEOUT"):
            changes["http_timeout"] = _number(env, "MRF_HTTP_TIMEOUT", float)
        if env.get("MRF_CHUNK_SIZE"):
            changes["chunk_size"] = _number(env, "MRF_CHUNK_SIZE", int)
        if env.get("MRF_TARGET_CODES"):
            codes = frozenset(c.strip() for c in env["MRF_TARGET_CODES"].split(",") if c.strip())
            changes["target_codes"] = codes
        if env.get("MRF_LOG_LEVEL"):
            changes["log_level"] = env["MRF_LOG_LEVEL"].upper()
        if env.get("MRF_METRICS_FILE"):
            changes["metrics_file"] = pathlib.Path(env["MRF_METRICS_FILE"])
        return cls(**changes)


def _number(env: Mapping[str, str], name: str, kind):
    try:
        return kind(env[name])
    except ValueError:
        raise ValueError(f"{name} must be a {kind.__name__}, got {env[name]!r}") from None
