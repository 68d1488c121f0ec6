"""APScheduler setup for periodic tasks."""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from campavail.config import section
from campavail.services import Services

logger = logging.getLogger(__name__)


def create_scheduler(services: Services) -> BackgroundScheduler:
    """Create and configure the background scheduler."""
    scheduler = BackgroundScheduler(timezone=section("availability").get("timezone", "UTC"))
    sched_config = section("scheduler")

    # Post-stay completion (daily, after the early-morning departures)
    scheduler.add_job(
        services.bookings.complete_past_stays,
        "cron",
        hour=sched_config.get("complete_stays_hour", 4),
        minute=0,
        id="complete_stays",
        name="Complete Past Stays",
    )

    logger.info("Scheduler configured with %d jobs", len(scheduler.get_jobs()))
    return scheduler
