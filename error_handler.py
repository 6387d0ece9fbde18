"""
Standardized error handling utilities for the table grapher.
Provides the exception taxonomy and consistent logging helpers used at the
command and service boundaries.
"""

import logging
from typing import Optional

logger = logging.getLogger('table_grapher.error_handler')

class ErrorSeverity:
    """Error severity levels for consistent logging and handling."""
    CRITICAL = "critical"  # Process exit required
    HIGH = "error"        # Request failed
    MEDIUM = "warning"    # Request impacted but recoverable
    LOW = "info"          # Minor issues or expected behavior


class GraphGenerationError(Exception):
    """Base class for every failure of a single graph request."""
    pass


class ConfigurationError(GraphGenerationError):
    """Custom exception for configuration-related errors."""
    pass


class InvalidSourceURL(GraphGenerationError):
    """The source URL is malformed or not an accepted host."""
    pass


class FetchError(GraphGenerationError):
    """The page could not be fetched (network failure or non-200 status)."""
    pass


class NoTableFound(GraphGenerationError):
    """The parser returned zero tables."""
    pass


class NoNumericColumn(GraphGenerationError):
    """No candidate table has a column classified as numeric."""
    pass


class EmptyExtraction(GraphGenerationError):
    """A numeric column was found but no usable values could be extracted."""
    pass


class EmptyDataError(GraphGenerationError):
    """Render was called with an empty series."""
    pass


class OutputError(GraphGenerationError):
    """The image destination cannot be prepared or written."""
    pass


def log_error_with_context(
    error: Exception,
    context: str,
    severity: str = ErrorSeverity.MEDIUM,
    additional_info: Optional[dict] = None
) -> None:
    """
    Log an error with consistent formatting and context information.

    Args:
        error: The exception that occurred
        context: Description of where/when the error occurred
        severity: Error severity level
        additional_info: Additional context information to log
    """
    error_msg = f"{context}: {str(error)}"

    if additional_info:
        error_msg += f" | Context: {additional_info}"

    log_func = getattr(logger, severity, logger.error)

    if severity in (ErrorSeverity.CRITICAL, ErrorSeverity.HIGH):
        log_func(error_msg, exc_info=error)
    else:
        log_func(error_msg)


def describe_error(error: Exception) -> str:
    """Return a human-readable reason for a failed graph request."""
    if isinstance(error, GraphGenerationError):
        return str(error)
    return f"Unexpected error: {error}"


class ErrorContext:
    """Context manager for error handling with automatic logging."""

    def __init__(self, context: str, severity: str = ErrorSeverity.MEDIUM,
                 reraise: bool = True):
        self.context = context
        self.severity = severity
        self.reraise = reraise
        self.error = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_val:
            self.error = exc_val
            log_error_with_context(exc_val, self.context, self.severity)
            if not self.reraise:
                return True  # Suppress the exception
        return False
