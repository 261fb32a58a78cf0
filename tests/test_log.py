"""
Tests for logging helpers.
"""
import logging
import sys

import pytest

from s3_uploader import log


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def fresh_logger_name(monkeypatch, request):
    """Point default_logger at an unconfigured logger for this test."""
    name = f"s3_uploader.tests.{request.node.name}"
    monkeypatch.setattr(log, "LOGGER_NAME", name)
    monkeypatch.setattr(log, "_configured", False)
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def test_default_logger_writes_to_stdout(fresh_logger_name):
    """Test that the default logger has one stdout handler at INFO."""
    logger = log.default_logger()

    assert logger.name == fresh_logger_name
    assert logger.getEffectiveLevel() <= logging.INFO
    stdout_handlers = [h for h in logger.handlers
                       if isinstance(h, logging.StreamHandler) and h.stream is sys.stdout]
    assert len(stdout_handlers) == 1
    assert logger.propagate is False


def test_default_logger_does_not_duplicate_into_root(fresh_logger_name):
    """Test that a caller's root handler does not see the package lines again."""
    root_handler = ListHandler()
    logging.getLogger().addHandler(root_handler)
    try:
        log.default_logger().info("Uploaded 1 (0 KB) in 0:0.01")
    finally:
        logging.getLogger().removeHandler(root_handler)

    assert root_handler.records == []


def test_existing_handlers_are_left_alone(fresh_logger_name):
    """Test that a logger the caller already configured keeps propagating."""
    existing = ListHandler()
    logging.getLogger(fresh_logger_name).addHandler(existing)

    logger = log.default_logger()

    assert logger.handlers == [existing]
    assert logger.propagate is True


def test_default_logger_is_configured_once(fresh_logger_name):
    """Test that repeated calls do not stack handlers."""
    first = log.default_logger()
    count = len(first.handlers)

    second = log.default_logger()

    assert second is first
    assert len(second.handlers) == count
