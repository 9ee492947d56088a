import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from core.config import Settings, get_settings
from exporter.runner import ExportRunner

logger = logging.getLogger(__name__)

class ExportScheduler:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.scheduler = AsyncIOScheduler()

    async def run_export_job(self):
        """Job to run one export"""
        logger.info("Scheduler: Starting export job")
        # Settings are resolved again inside the run so each firing sees the current environment
        result = await ExportRunner().run()
        logger.info(f"Scheduler: Export job finished with status {result.status.value}")
        return result

    def start(self):
        """Start the scheduler"""
        self.scheduler.add_job(
            self.run_export_job,
            trigger=IntervalTrigger(minutes=self.settings.EXPORT_INTERVAL_MINUTES),
            id="export_job",
            replace_existing=True
        )
        self.scheduler.start()
        logger.info(
            f"Export Scheduler started (every {self.settings.EXPORT_INTERVAL_MINUTES} minutes)"
        )

    def stop(self):
        self.scheduler.shutdown()
        logger.info("Export Scheduler stopped")
