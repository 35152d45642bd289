"""
Structured logging for nap.

Loggers accept keyword fields alongside the message and mask credentials
before anything is written.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import time
from enum import Enum
from typing import Any, ClassVar


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_logging_level(self) -> int:
        """Convert to standard logging level."""
        return getattr(logging, self.value)


class SensitiveDataMasker:
    """Masks sensitive data in log messages."""

    DEFAULT_PATTERNS: ClassVar[list[tuple[str, str]]] = [
        # Bearer/basic tokens
        (r"(Bearer\s+)([^\s\"']+)", r"\1***REDACTED***"),
        (r"(Basic\s+)([^\s\"']+)", r"\1***REDACTED***"),
        # Authorization headers
        (r"(Authorization[\"']?\s*[:=]\s*[\"']?)([^\"'\s,}]+)", r"\1***REDACTED***"),
        # Credentials embedded in URLs (proxies mostly)
        (r"(://[^/\s:@]+:)([^/\s@]+)(@)", r"\1***REDACTED***\3"),
        # Key-like query parameters
        (r"([?&](?:api[_-]?key|token|secret|password)=)([^&\s]+)", r"\1***REDACTED***"),
    ]

    SENSITIVE_KEYS: ClassVar[tuple[str, ...]] = (
        "authorization",
        "cookie",
        "key",
        "password",
        "secret",
        "token",
    )

    def __init__(self, patterns: list[tuple[str, str]] | None = None) -> None:
        """Initialize masker with patterns.

        Args:
            patterns: List of (pattern, replacement) tuples
        """
        self._patterns = [
            (re.compile(p, re.IGNORECASE), r)
            for p, r in (patterns or self.DEFAULT_PATTERNS)
        ]

    def mask(self, text: str) -> str:
        """Mask sensitive data in text."""
        result = text
        for pattern, replacement in self._patterns:
            result = pattern.sub(replacement, result)
        return result

    def mask_dict(self, data: dict[str, Any]) -> dict[str, Any]:
        """Mask sensitive data in dictionary.

        Values under sensitive keys are replaced outright; strings are
        pattern-masked and nested dicts are walked.
        """
        result: dict[str, Any] = {}
        for key, value in data.items():
            if any(s in key.lower() for s in self.SENSITIVE_KEYS):
                result[key] = "***REDACTED***"
            elif isinstance(value, str):
                result[key] = self.mask(value)
            elif isinstance(value, dict):
                result[key] = self.mask_dict(value)
            else:
                result[key] = value
        return result


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    def __init__(
        self,
        masker: SensitiveDataMasker | None = None,
        include_timestamp: bool = True,
    ) -> None:
        super().__init__()
        self._masker = masker or SensitiveDataMasker()
        self._include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": self._masker.mask(record.getMessage()),
        }

        if self._include_timestamp:
            log_data["timestamp"] = time.strftime(
                "%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)
            ) + f".{int(record.msecs):03d}Z"

        if hasattr(record, "extra_fields"):
            log_data.update(self._masker.mask_dict(record.extra_fields))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter.

    Keyword fields are appended as ``key=value``.
    """

    def __init__(self, masker: SensitiveDataMasker | None = None) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self._masker = masker or SensitiveDataMasker()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as text."""
        original_msg = record.msg
        record.msg = self._masker.mask(str(record.msg))
        result = super().format(record)
        record.msg = original_msg

        if fields := getattr(record, "extra_fields", None):
            masked = self._masker.mask_dict(fields)
            result = f"{result} | " + " ".join(f"{k}={v}" for k, v in masked.items())

        return result


ROOT_LOGGER = "nap"


def _install_handler(handler: logging.Handler, level: LogLevel) -> None:
    root = logging.getLogger(ROOT_LOGGER)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.to_logging_level())
    root.propagate = False


class NapLogger:
    """Logger with structured keyword fields.

    Wraps a stdlib logger under the ``nap`` hierarchy. Handlers live on the
    ``nap`` logger only; each NapLogger is a lightweight view that can carry
    its own bound fields, so two clients never share context.

    Example:
        >>> logger = get_logger("nap.client").bind(base_host="https://h")
        >>> logger.error("failed to close body", err="connection reset")
    """

    def __init__(
        self, logger: logging.Logger, fields: dict[str, Any] | None = None
    ) -> None:
        """Initialize with underlying logger and bound fields."""
        self._logger = logger
        self._fields = dict(fields or {})

    @staticmethod
    def configure(
        level: LogLevel = LogLevel.INFO,
        format: str = "json",
        stream: Any = None,
        masker: SensitiveDataMasker | None = None,
    ) -> None:
        """Configure output for every nap logger.

        Replaces the handler on the ``nap`` logger; child loggers pick it up
        through propagation.

        Args:
            level: Log level
            format: Output format ('json' or 'text')
            stream: Output stream (default: stderr)
            masker: Sensitive data masker
        """
        formatter: logging.Formatter
        if format == "json":
            formatter = JsonFormatter(masker=masker)
        else:
            formatter = TextFormatter(masker=masker)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(formatter)
        _install_handler(handler, level)

    @classmethod
    def get_logger(cls, name: str) -> NapLogger:
        """Get a logger.

        The ``nap`` logger gets a text handler on stderr the first time any
        logger is requested, unless ``configure`` ran before.

        Args:
            name: Logger name (``nap.*``)

        Returns:
            Logger instance
        """
        if not logging.getLogger(ROOT_LOGGER).handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(TextFormatter())
            _install_handler(handler, LogLevel.INFO)
        return cls(logging.getLogger(name))

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def fields(self) -> dict[str, Any]:
        """Fields attached to every record from this logger."""
        return dict(self._fields)

    def bind(self, **fields: Any) -> NapLogger:
        """Return a logger that adds ``fields`` to every record."""
        return type(self)(self._logger, {**self._fields, **fields})

    def _log(
        self, level: int, msg: str, exc_info: bool = False, **kwargs: Any
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        fields = {**self._fields, **kwargs}
        extra = {"extra_fields": fields} if fields else {}
        self._logger.log(level, msg, exc_info=exc_info, extra=extra)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log info message."""
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, exc_info: bool = False, **kwargs: Any) -> None:
        """Log error message."""
        self._log(logging.ERROR, msg, exc_info=exc_info, **kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._log(logging.ERROR, msg, exc_info=True, **kwargs)


def get_logger(name: str) -> NapLogger:
    """Get a logger instance."""
    return NapLogger.get_logger(name)
