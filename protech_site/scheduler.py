"""APScheduler — purges stale tracking state every TRACKING_CLEANUP_MINUTES."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from protech_site.config import TRACKING_CLEANUP_MINUTES
from protech_site.services.tracking import TrackingRegistry

logger = logging.getLogger(__name__)


def build_scheduler(registry: TrackingRegistry, minutes: int = TRACKING_CLEANUP_MINUTES) -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler()

    async def purge_tracking():
        """Drop throttle entries past retention and idle visitor sessions."""
        try:
            registry.purge_expired()
        except Exception as e:
            logger.error("Tracking purge failed: %s", e)

    scheduler.add_job(purge_tracking, "interval", minutes=minutes, id="purge_tracking")
    return scheduler
