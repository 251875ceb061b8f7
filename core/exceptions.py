"""
Custom exceptions for the export pipeline with structured error context.

This module provides the exception hierarchy used when driving a topic
through the geodienste.ch export cycle. Each exception includes context
information for debugging and monitoring.

The API client itself never raises these: start and status exchanges
always return the terminal HTTP response. The exporter and the downloader
translate unusable terminal responses into the exceptions below.

Exception Hierarchy:
    GeodatenbezugException (base)
    ├── ExportError
    │   ├── ExportStartError
    │   ├── ExportStatusError
    │   ├── ExportFailedError
    │   └── ExportTimeoutError
    ├── DownloadError
    └── ConfigurationError
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class GeodatenbezugException(Exception):
    """
    Base exception for all export-pipeline errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (topic, canton, status code, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        # Add timestamp to context
        self.context["error_timestamp"] = self.timestamp.isoformat()

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/reporting."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Export Errors
# ============================================================================

class ExportError(GeodatenbezugException):
    """Base exception for failures of the export/status exchange."""
    pass


class ExportStartError(ExportError):
    """
    Exception raised when the export could not be started.

    Context should include:
        - topic: Title of the topic
        - canton: Canton of the topic
        - status_code: HTTP status code of the terminal response
        - response_body: Response body (truncated if large)
    """
    pass


class ExportStatusError(ExportError):
    """
    Exception raised when the status check returns a non-success HTTP code.

    Context should include:
        - topic: Title of the topic
        - canton: Canton of the topic
        - status_code: HTTP status code of the terminal response
    """
    pass


class ExportFailedError(ExportError):
    """
    Exception raised when the job reached the terminal status ``error``.

    Context should include:
        - topic: Title of the topic
        - canton: Canton of the topic
        - info: Info message reported by geodienste.ch
    """
    pass


class ExportTimeoutError(ExportError):
    """
    Exception raised when the attempt limit was reached without a terminal result.

    Raised both for a start that stayed conflicted and for a job that was
    still queued or working after the last status check.

    Context should include:
        - topic: Title of the topic
        - canton: Canton of the topic
        - phase: "start" or "status"
        - last_status: Last observed job status (status phase only)
    """
    pass


# ============================================================================
# Download Errors
# ============================================================================

class DownloadError(GeodatenbezugException):
    """
    Exception raised when downloading or extracting an export fails.

    Context should include:
        - download_url: URL of the export artifact
        - destination: Target directory
        - status_code: HTTP status code (if applicable)
    """
    pass


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigurationError(GeodatenbezugException):
    """
    Exception raised when required configuration is missing.

    Context should include:
        - setting: Name of the missing or invalid setting
        - canton: Canton the setting was looked up for (if applicable)
    """
    pass
