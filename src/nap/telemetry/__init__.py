"""
Telemetry - structured logging with credential masking.
"""

from nap.telemetry.logger import (
    JsonFormatter,
    LogLevel,
    NapLogger,
    SensitiveDataMasker,
    TextFormatter,
    get_logger,
)

__all__ = [
    "JsonFormatter",
    "LogLevel",
    "NapLogger",
    "SensitiveDataMasker",
    "TextFormatter",
    "get_logger",
]
