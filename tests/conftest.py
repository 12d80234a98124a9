#!/usr/bin/env python3
"""Shared pytest fixtures for mrf-filter test suite."""

import io
import pathlib
import sys
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from urllib3.exceptions import ProtocolError

from tests.fixtures.generate_test_data import build_index, generate_large_index, make_record, write_index


class DroppingStream(io.BytesIO):
    """BytesIO whose reads fail once ``fail_after`` bytes have been served."""

    def __init__(self, data: bytes, fail_after: int):
        super().__init__(data)
        self.fail_after = fail_after

    def read(self, size=-1):
        if self.tell() >= self.fail_after:
            raise ProtocolError("Connection broken: IncompleteRead")
        return super().read(size)


# ============================================================================
# Record Fixtures
# ============================================================================

@pytest.fixture
def sample_records() -> List[Dict[str, Any]]:
    """A small index: two matching records, one off-plan, one duplicate."""
    return [
        make_record(["Anthem Blue Cross PPO Gold"], [
            ("Network 72A0", "https://example.com/2026-01_72A0_in-network.json.gz"),
            ("Los Angeles", "https://example.com/2026-01_CA_in-network.json.gz"),
        ]),
        make_record(["Empire HMO"], [
            ("New York HMO", "https://example.com/2026-01_NY_hmo.json.gz"),
        ]),
        make_record(["PPO Basic", "ANTHEM PPO Silver"], [
            ("New York PPO", "https://example.com/2026-01_state_ppo.json.gz"),
            ("Network 72A0", "https://example.com/2026-01_72A0_in-network.json.gz"),
        ]),
    ]


@pytest.fixture
def expected_locations() -> List[str]:
    return [
        "https://example.com/2026-01_72A0_in-network.json.gz",
        "https://example.com/2026-01_state_ppo.json.gz",
    ]


# ============================================================================
# File Fixtures
# ============================================================================

@pytest.fixture
def index_file(tmp_path, sample_records) -> pathlib.Path:
    """Gzip-compressed index on disk."""
    return write_index(tmp_path / "index.json.gz", sample_records)


@pytest.fixture
def plain_index_file(tmp_path, sample_records) -> pathlib.Path:
    """Uncompressed index on disk."""
    return write_index(tmp_path / "index.json", sample_records, compress=False)


@pytest.fixture
def output_file(tmp_path) -> pathlib.Path:
    return tmp_path / "output.txt"


# ============================================================================
# HTTP Mock Fixtures
# ============================================================================

@pytest.fixture
def http_response(sample_records):
    """Fake streaming requests.Response carrying a gzip index."""
    payload = build_index(sample_records)
    response = MagicMock()
    response.status_code = 200
    response.raw = io.BytesIO(payload)
    response.headers = {"Content-Length": str(len(payload))}
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def dropped_response():
    """Streaming response whose connection breaks halfway through a large gzip index."""
    payload = generate_large_index(3000, match_every=10)
    response = MagicMock()
    response.status_code = 200
    response.raw = DroppingStream(payload, len(payload) // 2)
    response.headers = {"Content-Length": str(len(payload))}
    response.raise_for_status.return_value = None
    return response


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep MRF_* variables from the caller's shell out of the tests."""
    for var in ("MRF_SOURCE_URL", "MRF_OUTPUT", "MRF_PROGRESS_INTERVAL", "MRF_TARGET_CODES",
                "MRF_HTTP_TIMEOUT", "MRF_CHUNK_SIZE", "MRF_LOG_LEVEL", "MRF_METRICS_FILE"):
        monkeypatch.delenv(var, raising=False)
    yield


# ============================================================================
# FastAPI Test Client
# ============================================================================

@pytest.fixture
def fastapi_client():
    """Create a FastAPI test client for the upload service."""
    from fastapi.testclient import TestClient
    from mrf_filter.app.simple_main import app

    return TestClient(app)


# ============================================================================
# Performance Testing Fixtures
# ============================================================================

@pytest.fixture
def memory_profiler():
    """Setup memory profiling for tests."""
    try:
        from memory_profiler import memory_usage
    except ImportError:
        pytest.skip("memory_profiler not installed")

    def profile_memory(func, *args, **kwargs):
        """Return peak memory (MiB) while running func."""
        return max(memory_usage((func, args, kwargs)))

    return profile_memory


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "benchmark: marks benchmark tests")
