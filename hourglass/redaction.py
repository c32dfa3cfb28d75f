"""Log redaction utilities that keep Jira credentials out of logs.

Covers:
- Basic and Bearer values in Authorization headers
- api_key / apikey / api_token assignments
- Credentials embedded in URLs (user:token@host)

Usage:
    Structlog: Add `redact_secrets` processor to the processor chain.
    Stdlib: Use `SecretRedactionFilter` as a logging filter.
"""

from __future__ import annotations

import logging
import re
from collections.abc import MutableMapping
from typing import Any


# Regex patterns for credentials that show up around Jira calls
SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # Basic (mail:api key) and Bearer values in Authorization headers
    (re.compile(r"\b(Basic|Bearer)\s+[A-Za-z0-9_\-./+=]{8,}", re.IGNORECASE), r"\1 [REDACTED]"),
    # api_key=..., apikey: ..., api_token=... assignments
    (
        re.compile(
            r'(["\']?(?:api[_-]?key|apikey|api[_-]?token)["\']?\s*[:=]\s*)["\']?[A-Za-z0-9_\-./+=]{6,}["\']?',
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
    # Credentials embedded in URLs (user:token@host)
    (re.compile(r"(://[^:/@\s]+:)[^@\s]+(@)"), r"\1[REDACTED]\2"),
]

# Fields that should always be fully redacted if present
SENSITIVE_FIELD_NAMES = frozenset(
    {
        "api_key",
        "apikey",
        "api_token",
        "password",
        "token",
        "authorization",
        "auth",
    }
)


def redact_string(value: str) -> str:
    """Apply all secret patterns to redact credentials from a string.

    Args:
        value: The string to redact.

    Returns:
        The redacted string with sensitive patterns replaced.
    """
    result = value
    for pattern, replacement in SECRET_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def _is_sensitive_key(key: str) -> bool:
    """Check if a key name indicates a sensitive field."""
    return key.lower().replace("-", "_") in SENSITIVE_FIELD_NAMES


def _redact_value(key: str, value: Any) -> Any:
    """Redact a value based on its key name and content."""
    # Fully redact known sensitive field names
    if _is_sensitive_key(key):
        if isinstance(value, str) and value:
            return "[REDACTED]"
        return value

    # Apply pattern-based redaction for string values
    if isinstance(value, str):
        return redact_string(value)

    # Recursively handle dicts
    if isinstance(value, dict):
        return {k: _redact_value(k, v) for k, v in value.items()}

    # Recursively handle lists and tuples
    if isinstance(value, (list, tuple)):
        return type(value)(_redact_value("", item) for item in value)

    return value


def redact_secrets(
    logger: Any,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor to redact credentials from log events.

    This processor should be added to the structlog processor chain
    before the final renderer (JSONRenderer, etc.).

    Args:
        logger: The wrapped logger object.
        method_name: The name of the wrapped method (info, warning, etc.).
        event_dict: The event dictionary to process.

    Returns:
        The event dictionary with credentials redacted.
    """

    return {key: _redact_value(key, value) for key, value in event_dict.items()}


class SecretRedactionFilter(logging.Filter):
    """Stdlib logging filter that redacts credentials from log records.

    Usage:
        logger = logging.getLogger(__name__)
        logger.addFilter(SecretRedactionFilter())
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Apply redaction to the log record.

        Args:
            record: The log record to filter.

        Returns:
            True (always allow the record, after redaction).
        """
        if isinstance(record.msg, str):
            record.msg = redact_string(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: _redact_value(k, v) for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(_redact_value("", arg) if isinstance(arg, str) else arg for arg in record.args)

        if record.exc_text:
            record.exc_text = redact_string(record.exc_text)

        return True


def install_stdlib_redaction(logger_name: str | None = None) -> None:
    """Install the redaction filter on a stdlib logger.

    Args:
        logger_name: The logger name to add the filter to. If None,
            adds to the root logger.
    """

    target_logger = logging.getLogger(logger_name)
    # Avoid adding duplicate filters
    for f in target_logger.filters:
        if isinstance(f, SecretRedactionFilter):
            return
    target_logger.addFilter(SecretRedactionFilter())
