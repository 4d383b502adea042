"""Shared test utilities and fixtures for the KBSeqUpload test suite.

This module provides common fixtures for temporary sequence files, fake
HTTP responses and isolated configuration, so that no test touches the
real Shock or handle services or the user's token files.
"""

import json
import logging
import shutil
import sys
import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

SHOCK_URL = "https://test.kbase.us/services/shock-api"
HANDLE_URL = "https://test.kbase.us/services/handle_service"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files that gets cleaned up automatically."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, temp_dir):
    """Keep the user's token variable and config file out of every test."""
    monkeypatch.delenv("KB_AUTH_TOKEN", raising=False)
    monkeypatch.setattr(
        "kbsequpload.shared_env_utils.DEFAULT_CONFIG_FILE",
        Path(temp_dir) / "no_such_config.yaml",
    )


@pytest.fixture
def make_seq_file(temp_dir):
    """Factory writing a small non-empty file with the given name."""

    def _make(name, content=">contig_1\nACGTACGT\n"):
        path = Path(temp_dir) / name
        path.write_text(content)
        return str(path)

    return _make


@pytest.fixture
def sample_config_file(temp_dir):
    """Create a sample YAML configuration file for testing."""
    config_file = Path(temp_dir) / "config.yaml"
    config_file.write_text(
        "shock:\n"
        "  url: https://config.kbase.us/services/shock-api\n"
        "handle_service:\n"
        "  url: https://config.kbase.us/services/handle_service\n"
        "sra:\n"
        "  converter: /opt/sratoolkit/bin/fastq-dump\n"
        "upload:\n"
        "  connect_timeout: 30\n"
    )
    return config_file


@pytest.fixture
def util_kwargs():
    """Constructor arguments that avoid reading tokens from the user's home."""
    return {
        "token": "test-token",
        "token_file": None,
        "kbase_token_file": None,
        "shock_url": SHOCK_URL,
        "handle_service_url": HANDLE_URL,
    }


def fake_response(json_data=None, content=None, status_code=200):
    """Build a Mock standing in for a requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    if content is None:
        content = json.dumps(json_data).encode() if json_data is not None else b""
    response.content = content

    def _json():
        return json.loads(content)

    response.json = Mock(side_effect=_json)
    return response


class FakeKBase:
    """Routes mocked requests.post calls to fake Shock and handle services."""

    def __init__(self):
        self.shock_calls = []
        self.handle_calls = []
        self.next_node = 0

    def __call__(self, url, **kwargs):
        if url.endswith("/node"):
            self.shock_calls.append((url, kwargs))
            self.next_node += 1
            return fake_response(
                {"status": 200, "data": {"id": f"node-{self.next_node}"}, "error": None}
            )
        self.handle_calls.append((url, kwargs))
        return fake_response({"version": "1.1", "result": [f"KBH_{len(self.handle_calls)}"]})


@pytest.fixture
def fake_kbase():
    return FakeKBase()


# Configure logging for tests
@pytest.fixture(autouse=True)
def configure_test_logging():
    """Configure logging for all tests."""
    logging.basicConfig(level=logging.DEBUG, force=True)
    yield
    logging.getLogger().handlers.clear()
    # Utility loggers bind sys.stderr when created; CliRunner swaps it per invocation
    for name, logger in logging.root.manager.loggerDict.items():
        if name.startswith("kbsequpload") and isinstance(logger, logging.Logger):
            logger.handlers.clear()


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
