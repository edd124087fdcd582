"""Logging configuration for the referral API.

Log lines go to stdout, either human-readable or as one JSON object per
line. Referral records carry patient and referrer contact details, so every
record passes through ``PIIRedactionFilter`` before it is formatted: code
should log referral ids only, and anything that slips through (an email
address or a phone/medicare number inside an error message) is masked.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict

# Attributes LoggingMiddleware attaches via ``extra=``
REQUEST_CONTEXT_FIELDS = ("request_id", "client_ip", "endpoint", "status_code")

PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
PLAIN_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class PIIRedactionFilter(logging.Filter):
    """Masks contact details and identifying numbers in log messages.

    The message is rendered (``msg % args``) before masking, so values passed
    as arguments are covered too. Never drops a record.
    """

    EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
    # Phone and medicare numbers: 8+ digits, optionally grouped by spaces, dashes or brackets
    NUMBER_PATTERN = re.compile(r'(?<![\w.])\+?\(?\d[\d\s()-]{6,}\d(?![\w.])')

    EMAIL_MASK = "***@***.***"
    NUMBER_MASK = "[REDACTED]"

    @classmethod
    def redact(cls, text: str) -> str:
        text = cls.EMAIL_PATTERN.sub(cls.EMAIL_MASK, text)
        return cls.NUMBER_PATTERN.sub(cls.NUMBER_MASK, text)

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self.redact(record.getMessage())
        record.args = None

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            record.extra_fields = {
                key: self.redact(value) if isinstance(value, str) else value
                for key, value in extra_fields.items()
            }
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per log line, with request context when present."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(getattr(record, "extra_fields", None) or {})
        log_data.update({
            field: getattr(record, field)
            for field in REQUEST_CONTEXT_FIELDS
            if hasattr(record, field)
        })

        return json.dumps(log_data, default=str)


class RegistryLogHandler(logging.StreamHandler):
    """Stdout handler installed by ``setup_logging``; replaced on each call."""

    def __init__(self, use_json: bool = False):
        super().__init__(sys.stdout)
        self.addFilter(PIIRedactionFilter())
        if use_json:
            self.setFormatter(StructuredFormatter())
        else:
            self.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATE_FORMAT))


def setup_logging(use_json: bool = False, log_level: str = "INFO") -> RegistryLogHandler:
    """Install the registry's log handler on the root logger.

    Calling it again (reload, a second ``create_app``) replaces the previous
    handler instead of stacking another one.

    Parameters:
        use_json: Use JSON formatting (for production)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        The installed handler
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in list(root_logger.handlers):
        if isinstance(existing, RegistryLogHandler):
            root_logger.removeHandler(existing)

    handler = RegistryLogHandler(use_json=use_json)
    handler.setLevel(level)
    root_logger.addHandler(handler)

    # Request logging is done by LoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("fastapi").setLevel(logging.WARNING)

    return handler
