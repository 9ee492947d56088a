"""
Pydantic schemas for export runs: resolved configuration, target naming and results
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, timezone
import enum

from core.config import Settings
from core.exceptions import ConfigurationError


# ============================================================================
# ENUMS
# ============================================================================

class RunState(str, enum.Enum):
    """Stages an export run moves through, in order"""
    INIT = "init"
    VALIDATED = "validated"
    CONNECTED = "connected"
    FETCHED = "fetched"
    ENCODED = "encoded"
    UPLOADED = "uploaded"
    DISCONNECTED = "disconnected"
    TERMINAL = "terminal"


class RunStatus(str, enum.Enum):
    """Outcome of a finished export run"""
    SUCCESS = "success"
    FAILED = "failed"


# ============================================================================
# RUN CONTEXT
# ============================================================================

class RunContext(BaseModel):
    """
    Configuration resolved once at the start of a run.

    Read-only for the duration of the run; components receive the values
    they need from here instead of reading the environment themselves.
    """

    mongo_connection_string: str = Field(..., min_length=1)
    database_name: str = Field(..., min_length=1)
    collection_name: str = Field(..., min_length=1)
    blob_connection_string: str = Field(..., min_length=1)
    container_name: str = Field(..., min_length=1)

    server_selection_timeout_ms: int = 5000
    connect_timeout_ms: int = 10000
    max_retries: int = Field(3, ge=1)
    retry_delay_ms: int = Field(1000, ge=0)
    blob_prefix: str = "data-export"
    content_type: str = "text/csv"

    class Config:
        frozen = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "RunContext":
        """
        Build a run context from settings.

        Raises:
            ConfigurationError: If any required setting is missing or blank
        """
        missing = settings.missing_required()
        if missing:
            raise ConfigurationError(
                "Missing required environment variables",
                context={"missing": missing}
            )

        return cls(
            mongo_connection_string=settings.MongoDBAtlasConnectionString,
            database_name=settings.DatabaseName,
            collection_name=settings.CollectionName,
            blob_connection_string=settings.AzureBlobStorageConnectionString,
            container_name=settings.BlobContainerName,
            server_selection_timeout_ms=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
            connect_timeout_ms=settings.MONGO_CONNECT_TIMEOUT_MS,
            max_retries=settings.MAX_RETRIES,
            retry_delay_ms=settings.RETRY_DELAY_MS,
            blob_prefix=settings.EXPORT_BLOB_PREFIX,
            content_type=settings.EXPORT_CONTENT_TYPE,
        )


# ============================================================================
# EXPORT TARGET
# ============================================================================

def format_timestamp(timestamp: datetime) -> str:
    """Render a timestamp as UTC ISO-8601 with millisecond precision and a Z suffix"""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    timestamp = timestamp.astimezone(timezone.utc)
    return timestamp.strftime("%Y-%m-%dT%H:%M:%S.") + f"{timestamp.microsecond // 1000:03d}Z"


class ExportTarget(BaseModel):
    """Container and blob name for one run's output"""

    container_name: str
    timestamp: datetime
    prefix: str = "data-export"

    class Config:
        frozen = True

    @property
    def iso_timestamp(self) -> str:
        return format_timestamp(self.timestamp)

    @property
    def blob_name(self) -> str:
        return f"{self.prefix}-{self.iso_timestamp}.csv"


# ============================================================================
# RUN RESULT
# ============================================================================

class ExportRunResult(BaseModel):
    """Summary of a finished export run"""

    status: RunStatus
    state: RunState = RunState.TERMINAL
    transitions: List[RunState] = Field(default_factory=list)
    started_at: datetime
    blob_name: Optional[str] = None
    records_exported: int = 0
    bytes_written: int = 0
    error_kind: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == RunStatus.SUCCESS
