"""Pytest configuration and fixtures for Cube client tests.

All HTTP traffic is mocked (respx or httpx.MockTransport); no test talks to
a live Cube service.
"""

from pathlib import Path

import pytest
import structlog

from cube.client import CubeClient
from cube.config import CubeConfig, clear_settings_cache
from tests.helpers import API_KEY, BASE_URL, BUCKET, SAMPLE_CONTENT


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Keep host CUBE_* variables and cached settings out of tests."""
    for name in (
        "CUBE_ENABLE",
        "CUBE_BASE_URL",
        "CUBE_API_KEY",
        "CUBE_DEFAULT_BUCKET_KEY",
        "CUBE_DEFAULT_BUCKET_NAME",
        "CUBE_TIMEOUT_S",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def cube_config() -> CubeConfig:
    """Fully populated config; base URL has a trailing slash on purpose."""
    return CubeConfig(
        enabled=True,
        base_url=f"{BASE_URL}/",
        api_key=API_KEY,
        default_bucket_key="biz-assets",
        default_bucket_name=BUCKET,
        timeout_s=5.0,
    )


@pytest.fixture
def cube_client(cube_config):
    """CubeClient owning its own httpx transport."""
    client = CubeClient(cube_config)
    yield client
    client.close()


@pytest.fixture
def sample_file(tmp_path) -> Path:
    """A small file on disk to upload."""
    path = tmp_path / "photo.png"
    path.write_bytes(SAMPLE_CONTENT)
    return path


@pytest.fixture
def log_sink():
    """Configure structlog to capture events into a list.

    Returns a list that will contain all emitted log event dicts.
    After the test, structlog is reset to normal.
    """
    events: list[dict] = []
    original_config = structlog.get_config()

    def capture_processor(logger, method_name, event_dict):
        events.append(event_dict.copy())
        raise structlog.DropEvent

    structlog.configure(
        processors=[capture_processor],
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    yield events

    structlog.configure(**original_config)
