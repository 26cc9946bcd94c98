"""
Tests for structured log rendering.
"""

import io
import json
import logging

import pytest
import structlog

from tempbox.core.logging import _json_formatter, _structlog_processors, _text_formatter


@pytest.fixture
def stream_logger(request):
    """A private stdlib logger writing to a buffer, plus its structlog wrapper factory."""
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    std_logger = logging.getLogger(f"tempbox.tests.{request.node.name}")
    std_logger.handlers = [handler]
    std_logger.setLevel(logging.INFO)
    std_logger.propagate = False

    def build(log_format):
        handler.setFormatter(_json_formatter() if log_format == "json" else _text_formatter())
        return structlog.wrap_logger(
            std_logger,
            processors=_structlog_processors(log_format),
            wrapper_class=structlog.stdlib.BoundLogger,
        )

    yield build, stream
    std_logger.handlers = []


def test_json_lines_carry_bound_fields(stream_logger):
    build, stream = stream_logger
    logger = build("json")

    logger.info("sweep_finished", trigger="manual", successful=7, failed=5)

    record = json.loads(stream.getvalue())
    assert record["event"] == "sweep_finished"
    assert record["level"] == "INFO"
    assert record["trigger"] == "manual"
    assert record["successful"] == 7
    assert record["failed"] == 5


def test_json_lines_include_exceptions(stream_logger):
    build, stream = stream_logger
    logger = build("json")

    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logger.error("sweep_failed", exc_info=True)

    record = json.loads(stream.getvalue())
    assert "RuntimeError: boom" in record["exception"]


def test_text_lines_render_key_values(stream_logger):
    build, stream = stream_logger
    logger = build("text")

    logger.warning("sweep_batch_failed", batch_range="5-10")

    line = stream.getvalue()
    assert "sweep_batch_failed" in line
    assert "batch_range=5-10" in line
    assert "warning" in line


def test_debug_is_filtered_below_level(stream_logger):
    build, stream = stream_logger
    logger = build("json")

    logger.debug("sweep_batch_deleted", batch_range="0-5")

    assert stream.getvalue() == ""
