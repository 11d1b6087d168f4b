"""Unit tests for structured logging configuration."""

import io
import json

import pytest
import structlog

from redis_auth_adapter.observability.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore structlog defaults after each test."""
    yield
    structlog.reset_defaults()


def test_json_output():
    """JSON mode renders one object per event with level and timestamp."""
    stream = io.StringIO()
    configure_logging(level="DEBUG", json_output=True, stream=stream)

    get_logger("tests").info("index.repaired", index="email", key="user:email:a@b.com")

    event = json.loads(stream.getvalue().strip())
    assert event["event"] == "index.repaired"
    assert event["index"] == "email"
    assert event["key"] == "user:email:a@b.com"
    assert event["level"] == "info"
    assert "timestamp" in event


def test_level_filtering():
    """Events below the configured level are dropped."""
    stream = io.StringIO()
    configure_logging(level="WARNING", json_output=True, stream=stream)

    logger = get_logger("tests")
    logger.info("adapter.created")
    logger.warning("ttl_refresh.failed", key="user:1")

    lines = stream.getvalue().strip().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["event"] == "ttl_refresh.failed"


def test_console_output():
    """Console mode renders readable text."""
    stream = io.StringIO()
    configure_logging(level="INFO", json_output=False, stream=stream)

    get_logger("tests").info("user.deleted", user_id="u1")

    output = stream.getvalue()
    assert "user.deleted" in output
    assert "user_id=u1" in output


def test_get_logger_binds_initial_values():
    """Initial values are attached to every event."""
    stream = io.StringIO()
    configure_logging(level="INFO", json_output=True, stream=stream)

    get_logger("tests", key_prefix="tenant-a:").info("adapter.created")

    assert json.loads(stream.getvalue().strip())["key_prefix"] == "tenant-a:"
