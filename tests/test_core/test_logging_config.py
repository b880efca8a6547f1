"""Tests for core.logging_config module."""

import json
import logging
import sys

from core.logging_config import StructuredFormatter


def make_record(msg="Fetched matches", **extra):
    record = logging.LogRecord(
        name="core.scoreboard.sources",
        level=logging.WARNING,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_format_is_json():
    """Test that records are rendered as JSON objects."""
    data = json.loads(StructuredFormatter().format(make_record()))

    assert data["level"] == "WARNING"
    assert data["logger"] == "core.scoreboard.sources"
    assert data["message"] == "Fetched matches"
    assert "timestamp" in data


def test_league_fields_included():
    """Test that per-league diagnostics are kept as fields."""
    record = make_record(league="PL", status_code=429, provider="football-data")

    data = json.loads(StructuredFormatter().format(record))

    assert data["league"] == "PL"
    assert data["status_code"] == 429
    assert data["provider"] == "football-data"
    assert "outcome" not in data


def test_non_ascii_preserved():
    """Test that accented names are not escaped."""
    output = StructuredFormatter().format(make_record("Brasileirão"))

    assert "Brasileirão" in output


def test_exception_included():
    """Test that tracebacks are attached."""
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = make_record()
        record.exc_info = sys.exc_info()

    data = json.loads(StructuredFormatter().format(record))

    assert "RuntimeError: boom" in data["exception"]
