"""
Core utilities and configuration for the geodatenbezug export client.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Application configuration and environment variable management
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.exceptions import ExportError, DownloadError
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Look up the access token of a canton
    token = settings.GEODIENSTE_TOKENS.get("ZG")
"""

__all__ = [
    "settings",
    "setup_logging",
    # Exceptions
    "GeodatenbezugException",
    "ExportError",
    "ExportStartError",
    "ExportStatusError",
    "ExportFailedError",
    "ExportTimeoutError",
    "DownloadError",
    "ConfigurationError",
]
