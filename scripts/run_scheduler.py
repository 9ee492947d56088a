"""
Run the export on a fixed interval in a long-lived process
"""

import asyncio
import sys
import os
import logging

sys.path.append(os.getcwd())

from core.config import get_settings
from core.logging import setup_logging
from exporter.scheduler import ExportScheduler

logger = logging.getLogger(__name__)


async def main():
    settings = get_settings()
    setup_logging(settings)

    scheduler = ExportScheduler(settings)
    scheduler.start()
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    try:
        # Runs until the process is interrupted
        await asyncio.Event().wait()
    finally:
        scheduler.stop()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
