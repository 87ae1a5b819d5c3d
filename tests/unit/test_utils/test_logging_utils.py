"""
Tests for logging and async helpers.
"""

import asyncio
import json
import logging
import logging.handlers

import pytest

from clientbench.core.config import LoggingConfig
from clientbench.utils.async_helpers import close_event_loop, timeout_after
from clientbench.utils.logging import (
    ActionLoggerAdapter, JSONFormatter, PerformanceTimer, _parse_size,
    get_action_logger, setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize("size,expected", [
    ("10MB", 10 * 1024 ** 2),
    ("1gb", 1024 ** 3),
    ("512KB", 512 * 1024),
    ("100B", 100),
    ("garbage", 10 * 1024 ** 2),
])
def test_parse_size(size, expected):
    assert _parse_size(size) == expected


def test_action_logger_carries_context():
    adapter = get_action_logger("ping", build_id="build-42")

    assert isinstance(adapter, ActionLoggerAdapter)
    msg, kwargs = adapter.process("hello", {})
    assert msg == "hello"
    assert kwargs["extra"] == {"action": "ping", "build_id": "build-42"}


def test_json_formatter_includes_action():
    record = logging.LogRecord("clientbench.action", logging.INFO, __file__, 1,
                               "Completed %d repetition(s)", (3,), None)
    record.action = "ping"

    entry = json.loads(JSONFormatter().format(record))

    assert entry["message"] == "Completed 3 repetition(s)"
    assert entry["level"] == "INFO"
    assert entry["action"] == "ping"


def test_setup_logging_with_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "bench.log"

    setup_logging(LoggingConfig(level="DEBUG", file=str(log_file)), console_level="ERROR")

    handlers = restore_root_logger.handlers
    assert len(handlers) == 2
    assert handlers[0].level == logging.ERROR
    assert isinstance(handlers[1], logging.handlers.RotatingFileHandler)
    assert log_file.parent.exists()


def test_setup_logging_console_only(restore_root_logger):
    setup_logging(LoggingConfig(json=True))

    handlers = restore_root_logger.handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, JSONFormatter)


def test_performance_timer_logs_failure(caplog):
    logger = logging.getLogger("clientbench.test")

    with caplog.at_level(logging.DEBUG, logger="clientbench.test"):
        with pytest.raises(RuntimeError):
            with PerformanceTimer("setup of index", logger):
                raise RuntimeError("boom")

    assert "Failed setup of index" in caplog.text


def test_timeout_after_raises_with_message():
    async def slow():
        await asyncio.sleep(10)

    with pytest.raises(asyncio.TimeoutError, match="ping run 0"):
        asyncio.run(timeout_after(slow(), 0.01, "ping run 0"))


def test_timeout_after_returns_result():
    async def fast():
        return 42

    assert asyncio.run(timeout_after(fast(), 1.0)) == 42


def test_close_event_loop_cancels_pending_tasks():
    loop = asyncio.new_event_loop()
    task = loop.create_task(asyncio.sleep(10))

    close_event_loop(loop)

    assert loop.is_closed()
    assert task.cancelled()
    close_event_loop(loop)
