"""
Basic exception classes for the i18n extractor.

This module contains the error taxonomy used throughout the extraction
pipeline. Every error carries a category, a severity and a ``recoverable``
flag: recoverable errors are handled locally (one message or one file is
skipped with a warning), non-recoverable errors abort the run.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    VALIDATION = "validation"
    FILESYSTEM = "filesystem"
    CATALOG = "catalog"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class ExtractorError(Exception):
    """Base exception class for i18n extractor specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.context: object | None = context
        self.recoverable: bool = recoverable


class FormatError(ExtractorError):
    """A single message failed structural validation."""

    def __init__(self, message: str, context: object | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            context=context,
            recoverable=True,
        )


class MessageTypeError(FormatError):
    """The message is not a string."""


class MessageTooLongError(FormatError):
    """The message exceeds the maximum allowed length."""


class UnbalancedBracesError(FormatError):
    """Curly braces in the message are not balanced."""


class InvalidVariableNameError(FormatError):
    """An interpolation variable name is not a safe identifier."""


class FileReadError(ExtractorError):
    """A source file could not be read or resolved."""

    def __init__(self, message: str, context: object | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.FILESYSTEM,
            severity=ErrorSeverity.MEDIUM,
            context=context,
            recoverable=True,
        )


class CatalogLoadError(ExtractorError):
    """An existing catalog file could not be parsed."""

    def __init__(self, message: str, context: object | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CATALOG,
            severity=ErrorSeverity.MEDIUM,
            context=context,
            recoverable=True,
        )


class ConfigurationError(ExtractorError):
    """Configuration-related errors."""

    def __init__(self, message: str, context: object | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            context=context,
            recoverable=False,
        )


class PathTraversalError(ConfigurationError):
    """A path resolves outside of the project root."""


class WriteError(ExtractorError):
    """An output file or directory could not be written."""

    def __init__(self, message: str, context: object | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.FILESYSTEM,
            severity=ErrorSeverity.CRITICAL,
            context=context,
            recoverable=False,
        )
