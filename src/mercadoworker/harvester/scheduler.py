"""
Scheduler for periodic catalog imports.

Uses APScheduler to re-run the full import at a fixed interval. Each run
is independent: nothing is carried over between runs.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..config import WorkerConfig
from .host import NodeStore
from .orchestrator import run_import
from .reporter import Reporter

logger = logging.getLogger(__name__)

JOB_ID = "catalog_import"


class HarvesterScheduler:
    """Runs the catalog import every config.schedule_interval seconds."""

    def __init__(
        self,
        config: WorkerConfig,
        store: Optional[NodeStore] = None,
        reporter: Optional[Reporter] = None,
    ):
        self.config = config
        self.store = store
        self.reporter = reporter
        self.scheduler = AsyncIOScheduler()
        self.last_result: Optional[Dict[str, Any]] = None

    def start(self):
        """Start the scheduler. Must be called with a running event loop."""
        interval = self.config.schedule_interval
        if interval <= 0:
            raise ValueError("schedule_interval must be positive to schedule imports")

        self.scheduler.add_job(
            self._import_catalog,
            trigger=IntervalTrigger(seconds=interval),
            id=JOB_ID,
            name="Mercado Libre Catalog Import",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now(timezone.utc),
        )

        self.scheduler.start()
        logger.info(f"Catalog import scheduler started. Running every {interval}s")

    async def stop(self):
        """Stop the scheduler."""
        self.scheduler.shutdown(wait=False)
        logger.info("Catalog import scheduler stopped")

    async def _import_catalog(self):
        """Run one full import."""
        try:
            self.last_result = await run_import(
                self.config.source,
                store=self.store,
                reporter=self.reporter,
                cache_dir=self.config.cache_dir,
            )
        except Exception as e:
            logger.exception(f"Scheduled import failed: {e}")
