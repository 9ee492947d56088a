# ============================================================================
# File: exporter/runner.py
# Description: Export orchestrator with failure classification and cleanup
# ============================================================================
"""
Export Runner - Orchestrates Connect, Fetch, Encode, Upload.

One call to ``ExportRunner.run`` is one export run:

    Init -> Validated -> Connected -> Fetched -> Encoded -> Uploaded
         -> Disconnected -> Terminal

Only the connect step is retried. Any failure ends the run; the source
connection is closed on every path once it was opened. Failures are
classified and logged here and never propagate to the caller, so the
trigger always sees a normal return.
"""

from typing import Any, Callable, List, Optional
from datetime import datetime, timezone
from pydantic import ValidationError
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from azure.core.exceptions import AzureError
import logging

from core.config import Settings, get_settings
from core.exceptions import (
    ConfigurationError,
    DisconnectError,
    ErrorKind,
    ExportException
)
from exporter.base import DataSource
from exporter.retry import RetryPolicy
from exporter.extractors.mongo_extractor import MongoExtractor
from exporter.transformers.csv_encoder import CSVEncoder
from exporter.loaders.blob_loader import BlobLoader
from schemas.export import (
    ExportRunResult,
    ExportTarget,
    RunContext,
    RunState,
    RunStatus,
    format_timestamp
)

logger = logging.getLogger(__name__)


SERVER_SELECTION_GUIDANCE = (
    "Failed to select a MongoDB server. Check your network settings and connection string."
)
NETWORK_GUIDANCE = (
    "MongoDB network error. Ensure your MongoDB Atlas IP access list "
    "includes this host's outbound IP address."
)


def default_source_factory(context: RunContext) -> DataSource:
    return MongoExtractor(
        connection_string=context.mongo_connection_string,
        database_name=context.database_name,
        collection_name=context.collection_name,
        server_selection_timeout_ms=context.server_selection_timeout_ms,
        connect_timeout_ms=context.connect_timeout_ms
    )


def default_sink_factory(context: RunContext) -> BlobLoader:
    return BlobLoader(
        connection_string=context.blob_connection_string,
        container_name=context.container_name,
        content_type=context.content_type
    )


def classify_error(error: BaseException) -> ErrorKind:
    """Map any failure raised during a run to its ErrorKind"""
    if isinstance(error, ExportException):
        return error.kind
    if isinstance(error, ConnectionFailure):
        return ErrorKind.CONNECTIVITY
    if isinstance(error, AzureError):
        return ErrorKind.TRANSPORT
    return ErrorKind.UNEXPECTED


class ExportRunner:
    """
    Export Orchestrator

    Responsibilities:
    - Resolve and validate configuration before any I/O
    - Orchestrate Connect (retried) -> Fetch -> Encode -> Upload
    - Always release the source connection
    - Classify and log failures without raising them
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        source_factory: Optional[Callable[[RunContext], DataSource]] = None,
        sink_factory: Optional[Callable[[RunContext], Any]] = None,
        encoder: Optional[CSVEncoder] = None,
        retry_policy: Optional[RetryPolicy] = None
    ):
        self.settings = settings
        self.source_factory = source_factory or default_source_factory
        self.sink_factory = sink_factory or default_sink_factory
        self.encoder = encoder or CSVEncoder()
        self.retry_policy = retry_policy

    async def run(self, trigger_time: Optional[datetime] = None) -> ExportRunResult:
        """
        Run one export.

        Args:
            trigger_time: Time the trigger fired (defaults to now, UTC). Used
                for both logging and the blob name.

        Returns:
            ExportRunResult with status SUCCESS or FAILED; never raises for
            failures inside the run.
        """
        started_at = trigger_time or datetime.now(timezone.utc)
        transitions: List[RunState] = [RunState.INIT]
        logger.info(f"Export run started: {format_timestamp(started_at)}")

        # --------------------------------------------------
        # PHASE 1: VALIDATE CONFIGURATION
        # --------------------------------------------------
        try:
            context = self._resolve_context()
        except ConfigurationError as e:
            logger.error(
                f"Missing required environment variables: {e.context.get('missing', [])}",
                extra={"error_context": e.to_dict()}
            )
            transitions.append(RunState.TERMINAL)
            return ExportRunResult(
                status=RunStatus.FAILED,
                transitions=transitions,
                started_at=started_at,
                error_kind=e.kind.value,
                error_message=e.message
            )

        transitions.append(RunState.VALIDATED)
        target = ExportTarget(
            container_name=context.container_name,
            timestamp=started_at,
            prefix=context.blob_prefix
        )
        retry_policy = self.retry_policy or RetryPolicy(
            max_attempts=context.max_retries,
            delay_ms=context.retry_delay_ms
        )

        source: Optional[DataSource] = None
        connected = False
        records_exported = 0
        bytes_written = 0
        failure: Optional[Exception] = None

        try:
            source = self.source_factory(context)

            # --------------------------------------------------
            # PHASE 2: CONNECT (RETRIED)
            # --------------------------------------------------
            await retry_policy.execute(source.connect)
            connected = True
            transitions.append(RunState.CONNECTED)
            logger.info("Connected to MongoDB successfully")

            # --------------------------------------------------
            # PHASE 3: FETCH
            # --------------------------------------------------
            documents = await source.fetch_all(source.get_collection())
            records_exported = len(documents)
            transitions.append(RunState.FETCHED)
            logger.info(f"Retrieved {records_exported} documents from MongoDB")

            # --------------------------------------------------
            # PHASE 4: ENCODE
            # --------------------------------------------------
            payload = self.encoder.encode(documents)
            transitions.append(RunState.ENCODED)
            logger.info(f"Generated CSV with size: {len(payload)} bytes")

            # --------------------------------------------------
            # PHASE 5: UPLOAD (NOT RETRIED)
            # --------------------------------------------------
            async with self.sink_factory(context) as sink:
                await sink.ensure_container()
                await sink.write(target.blob_name, payload)
            bytes_written = len(payload)
            transitions.append(RunState.UPLOADED)
            logger.info(f"CSV file uploaded successfully to Blob Storage: {target.blob_name}")

        except Exception as e:
            failure = e
            self._log_failure(e)

        finally:
            # --------------------------------------------------
            # PHASE 6: DISCONNECT (ALWAYS, ONCE CONNECTED)
            # --------------------------------------------------
            if connected:
                await self._disconnect(source)
                transitions.append(RunState.DISCONNECTED)

        transitions.append(RunState.TERMINAL)

        if failure is None:
            logger.info("Export run completed successfully")
            return ExportRunResult(
                status=RunStatus.SUCCESS,
                transitions=transitions,
                started_at=started_at,
                blob_name=target.blob_name,
                records_exported=records_exported,
                bytes_written=bytes_written
            )

        logger.error(f"Export run failed: {target.blob_name} was not written")
        return ExportRunResult(
            status=RunStatus.FAILED,
            transitions=transitions,
            started_at=started_at,
            records_exported=records_exported,
            error_kind=classify_error(failure).value,
            error_message=failure.message if isinstance(failure, ExportException) else str(failure)
        )

    def _resolve_context(self) -> RunContext:
        try:
            settings = self.settings or get_settings()
            return RunContext.from_settings(settings)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid configuration values",
                context={"errors": e.errors()},
                original_exception=e
            )

    async def _disconnect(self, source: DataSource) -> None:
        try:
            await source.disconnect()
        except Exception as e:
            # Sources swallow their own close errors; this covers ones that don't
            error = DisconnectError(
                "Error occurred while closing source connection",
                context={"source_name": getattr(source, "source_name", None)},
                original_exception=e
            )
            logger.error(
                f"Error occurred while closing source connection: {str(e)}",
                extra={"error_context": error.to_dict()}
            )

    def _log_failure(self, error: Exception) -> None:
        """Log a run failure with its message, stack and classification"""
        kind = classify_error(error)
        message = error.message if isinstance(error, ExportException) else str(error)

        logger.error(f"Error occurred: {message}", exc_info=error)

        if isinstance(error, ExportException):
            logger.error(
                f"Custom error type: {kind.value}",
                extra={"error_context": error.to_dict()}
            )

        cause = error.original_exception if isinstance(error, ExportException) else error

        if kind == ErrorKind.CONNECTIVITY:
            if isinstance(cause, ServerSelectionTimeoutError):
                logger.error(SERVER_SELECTION_GUIDANCE)
            else:
                logger.error(NETWORK_GUIDANCE)
        elif kind == ErrorKind.NO_DATA:
            logger.error("Source collection is empty; nothing was exported.")
        elif kind == ErrorKind.CONTAINER_NOT_FOUND:
            logger.error("Target container is missing. Containers are never created by the exporter.")
        elif kind == ErrorKind.TRANSPORT:
            logger.error("Azure Blob Storage transport error. The upload is not retried.")
        else:
            logger.error("An unexpected error occurred.")
