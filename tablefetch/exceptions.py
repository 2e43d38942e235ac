"""Exception hierarchy for tablefetch operations.

A small tree rooted at ``TableFetchError``. Every error carries an
``ErrorContext`` so log lines can say which fetch source, URL or note path
was involved.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels for proper handling."""
    LOW = "low"           # Warnings, can continue
    MEDIUM = "medium"     # Errors, current record or page is skipped
    HIGH = "high"         # Current fetch source is abandoned


class ErrorCategory(Enum):
    """Error categories for proper classification."""
    NETWORK = "network"
    DATA = "data"
    STORAGE = "storage"
    CONFIGURATION = "configuration"


@dataclass
class ErrorContext:
    """Structured information attached to an error."""
    source_name: Optional[str] = None
    operation: Optional[str] = None
    file_path: Optional[str] = None
    url: Optional[str] = None
    timestamp: float = field(default_factory=time.time)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "source_name": self.source_name,
            "operation": self.operation,
            "file_path": self.file_path,
            "url": self.url,
            "timestamp": self.timestamp,
            "metadata": self.metadata,
        }


class TableFetchError(Exception):
    """Base exception for all tablefetch errors."""

    def __init__(
        self,
        message: str,
        *,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.DATA,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.category = category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        parts = [self.message]

        if self.context.source_name:
            parts.append(f"[source: {self.context.source_name}]")

        if self.context.operation:
            parts.append(f"[operation: {self.context.operation}]")

        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


class NetworkError(TableFetchError):
    """HTTP, connection and timeout problems while talking to a provider."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", None) or ErrorContext()
        context.url = url
        if status_code:
            context.metadata["status_code"] = status_code

        severity = ErrorSeverity.MEDIUM
        if status_code and 400 <= status_code < 500:
            # bad key or unknown table; retrying the same request is pointless
            severity = ErrorSeverity.HIGH

        super().__init__(
            message,
            severity=severity,
            category=ErrorCategory.NETWORK,
            context=context,
            **kwargs,
        )
        self.status_code = status_code
        self.url = url


class DataError(TableFetchError):
    """Malformed payloads or records."""

    def __init__(self, message: str, *, field_name: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", None) or ErrorContext()
        if field_name:
            context.metadata["field_name"] = field_name

        super().__init__(
            message,
            category=ErrorCategory.DATA,
            context=context,
            **kwargs,
        )
        self.field_name = field_name


class ValidationError(DataError):
    """A configuration or settings value failed validation."""


class StorageError(TableFetchError):
    """Reading or writing a note or settings file failed."""

    def __init__(self, message: str, *, file_path: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", None) or ErrorContext()
        context.file_path = file_path

        super().__init__(
            message,
            category=ErrorCategory.STORAGE,
            context=context,
            **kwargs,
        )
        self.file_path = file_path


class ConfigurationError(TableFetchError):
    """Configuration file missing, unreadable or inconsistent."""

    def __init__(self, message: str, *, config_file: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", None) or ErrorContext()
        if config_file:
            context.file_path = config_file

        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.CONFIGURATION,
            context=context,
            **kwargs,
        )
        self.config_file = config_file


def format_error_for_logging(error: Exception) -> Dict[str, Any]:
    """Return a dict describing *error*, structured when it is one of ours."""
    if isinstance(error, TableFetchError):
        return error.to_dict()
    return {
        "error_type": error.__class__.__name__,
        "message": str(error),
        "severity": ErrorSeverity.MEDIUM.value,
        "category": ErrorCategory.DATA.value,
    }


__all__ = [
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorContext",
    "TableFetchError",
    "NetworkError",
    "DataError",
    "ValidationError",
    "StorageError",
    "ConfigurationError",
    "format_error_for_logging",
]
