"""
Custom exceptions for the export pipeline with structured error context.

Every exception carries a ``kind`` tag so the runner can classify failures
without caring about the concrete class, plus context information for
debugging and monitoring.

Exception Hierarchy:
    ExportException (base)
    ├── ConfigurationError          kind=CONFIG_MISSING
    ├── ExtractionError
    │   ├── SourceConnectionError   kind=CONNECTIVITY
    │   └── NoDataError             kind=NO_DATA
    ├── LoadError
    │   ├── ContainerNotFoundError  kind=CONTAINER_NOT_FOUND
    │   └── UploadError             kind=TRANSPORT
    └── DisconnectError             kind=DISCONNECT
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone
import enum


class ErrorKind(str, enum.Enum):
    """Classification label attached to every export error"""
    CONFIG_MISSING = "ConfigMissing"
    CONNECTIVITY = "ConnectivityError"
    NO_DATA = "NoDataError"
    CONTAINER_NOT_FOUND = "ContainerNotFoundError"
    TRANSPORT = "TransportError"
    DISCONNECT = "DisconnectError"
    UNEXPECTED = "UnexpectedError"


class ExportException(Exception):
    """
    Base exception for all export-related errors.

    Attributes:
        kind: Classification label (see ErrorKind)
        message: Human-readable error message
        context: Additional context information (database, container, etc.)
        original_exception: The original exception that was caught (if any)
    """

    kind: ErrorKind = ErrorKind.UNEXPECTED

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
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "kind": self.kind.value,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigurationError(ExportException):
    """
    Raised when required settings are missing or blank.

    Context should include:
        - missing: Names of the missing settings
    """
    kind = ErrorKind.CONFIG_MISSING


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(ExportException):
    """Base exception for source-side failures."""
    pass


class SourceConnectionError(ExtractionError):
    """
    Raised when the document store cannot be reached or drops mid-fetch.

    Context should include:
        - database: Source database name
        - collection: Source collection name
    """
    kind = ErrorKind.CONNECTIVITY


class NoDataError(ExtractionError):
    """Raised when the source collection holds no documents."""
    kind = ErrorKind.NO_DATA


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(ExportException):
    """Base exception for sink-side failures."""
    pass


class ContainerNotFoundError(LoadError):
    """
    Raised when the target blob container does not exist.

    Containers are never created by the exporter.
    """
    kind = ErrorKind.CONTAINER_NOT_FOUND


class UploadError(LoadError):
    """
    Raised when Blob Storage fails during a probe or upload.

    Context should include:
        - container: Target container name
        - blob_name: Blob being written (uploads only)
        - operation: "exists" or "upload"
    """
    kind = ErrorKind.TRANSPORT


# ============================================================================
# Cleanup Errors
# ============================================================================

class DisconnectError(ExportException):
    """
    Failure while closing the source connection.

    Only ever logged; it must not replace the outcome of the run.
    """
    kind = ErrorKind.DISCONNECT
