"""
Script to run a single export of the configured collection
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, exporter, etc.
sys.path.append(os.getcwd())

from core.config import get_settings
from core.logging import setup_logging
from exporter.runner import ExportRunner

logger = logging.getLogger(__name__)


async def run_export() -> int:
    """Run one export; returns a process exit code"""
    settings = get_settings()
    setup_logging(settings)

    result = await ExportRunner(settings=settings).run()

    if result.succeeded:
        logger.info(
            f"Export completed: {result.records_exported} documents, "
            f"{result.bytes_written} bytes -> {result.blob_name}"
        )
        return 0

    logger.error(f"Export failed ({result.error_kind}): {result.error_message}")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(run_export()))
