"""Shared fixtures for neocities-sync tests."""

import hashlib
import json
import sys
from pathlib import Path

import pytest

# Add project root to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Config
from errors import NetworkError

EMPTY_SHA1 = "da39a3ee5e6b4b0d3255bfef95601890afd80709"


class FakeGateway:
    """Stands in for NeocitiesClient.list_all with queued bodies or errors."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = 0

    def list_all(self) -> str:
        self.calls += 1
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def sample_records():
    """Raw listing records as the list endpoint returns them."""
    return [
        {
            "path": "index.html",
            "is_directory": False,
            "size": 0,
            "updated_at": "Mon, 01 Jan 2024 00:00:00 +0000",
            "sha1_hash": EMPTY_SHA1,
        },
        {
            "path": "images",
            "is_directory": True,
            "updated_at": "Tue, 02 Jan 2024 10:30:00 +0000",
        },
        {
            "path": "images/cat.png",
            "is_directory": False,
            "size": 5,
            "updated_at": "Tue, 02 Jan 2024 10:30:00 +0000",
            "sha1_hash": hashlib.sha1(b"Hello").hexdigest(),
        },
    ]


@pytest.fixture
def sample_listing(sample_records):
    """A full list response body."""
    return json.dumps({"result": "success", "files": sample_records})


@pytest.fixture
def fake_gateway_factory():
    return FakeGateway


@pytest.fixture
def network_error():
    return NetworkError("GET list failed: connection refused")


@pytest.fixture
def sample_config(tmp_path):
    """Pre-configured Config instance for testing."""
    return Config(
        api_url="https://neocities.org/api/",
        api_key="test-key",
        username=None,
        password=None,
        site_dir=tmp_path / "site",
        timeout=30.0,
        batch_size=20,
    )


@pytest.fixture
def config_toml_content():
    """Sample neocities.toml content."""
    return """
api_key = "file-key"
site_dir = "/tmp/custom-site"
timeout = 10
batch_size = 5
"""
