"""
Azure Functions entry point for the scheduled collection export.

Trigger  : Timer, NCRONTAB taken from the EXPORT_SCHEDULE app setting
           (e.g. "0 0 * * * *" = top of every hour).

Each firing runs one export: MongoDB collection -> CSV -> Blob Storage.
Failures are logged by the runner and never fail the invocation, so the
Functions host always records a normal completion; the next firing
performs a full export again.

Configuration (app settings):
    MongoDBAtlasConnectionString, DatabaseName, CollectionName,
    AzureBlobStorageConnectionString, BlobContainerName, EXPORT_SCHEDULE
"""

import asyncio
import logging

import azure.functions as func

from exporter.runner import ExportRunner

logger = logging.getLogger(__name__)

app = func.FunctionApp()


@app.timer_trigger(
    schedule="%EXPORT_SCHEDULE%",
    arg_name="timer",
    run_on_startup=False
)
def scheduled_export(timer: func.TimerRequest) -> None:
    """Export the configured collection to Blob Storage."""
    if timer.past_due:
        logger.warning("Timer is past due, running now to catch up.")

    result = asyncio.run(ExportRunner().run())

    logger.info(f"Scheduled export finished: {result.status.value}")
