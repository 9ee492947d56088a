"""
Core utilities and configuration for the document export job.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Application configuration and environment variable management
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities

Usage:
    from core.config import get_settings
    from core.exceptions import NoDataError, ContainerNotFoundError
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Check configuration before a run
    settings = get_settings()
    if settings.missing_required():
        ...
"""

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    # Exceptions
    "ErrorKind",
    "ExportException",
    "ConfigurationError",
    "ExtractionError",
    "SourceConnectionError",
    "NoDataError",
    "LoadError",
    "ContainerNotFoundError",
    "UploadError",
    "DisconnectError",
]
