"""Structured logging configuration for better log analysis."""

import json
import logging
from datetime import UTC, datetime

# Diagnostic fields the scoreboard passes through ``extra=``
EXTRA_FIELDS = ("league", "status_code", "provider", "outcome")


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Formats log records as JSON so per-league failures can be filtered by
    league or status code with jq or a log aggregator.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON-formatted log string.
        """
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field in EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        return json.dumps(log_data, ensure_ascii=False)
