"""
app/scheduler/jobs.py

APScheduler-based scheduler for the weekly death registry sync.

Schedule (UTC, configurable through REGISTRY_SYNC_* variables)
--------------------------------------------------------------
  weekly_registry_sync: 03:00 every Sunday, syncs the current month

Lifecycle
----------
Call ``build_scheduler()`` once to get a configured ``BackgroundScheduler``.
Start it on app boot after crash recovery; shut it down on app shutdown.
The scheduler is wired into FastAPI via the ``lifespan`` context in main.py.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from app.config import RegistrySyncSettings, get_registry_sync_settings
from app.services.registry_sync_service import get_registry_sync_service

logger = logging.getLogger(__name__)

WEEKLY_REGISTRY_SYNC_JOB_ID = "weekly_registry_sync"


def run_weekly_registry_sync() -> None:
    """
    Sync the current month. The service logs and swallows failures.
    """
    logger.info("Scheduler: weekly_registry_sync starting")
    result = get_registry_sync_service().run_weekly_sync()
    if result is None:
        logger.warning("Scheduler: weekly_registry_sync finished without a result")
        return
    logger.info(
        "Scheduler: weekly_registry_sync complete job_id=%s processed=%s new=%s",
        result.job_id,
        result.records_processed,
        result.new_profiles,
    )


def build_scheduler(settings: RegistrySyncSettings | None = None) -> BackgroundScheduler:
    """
    Build the scheduler and register the weekly sync when enabled.

    Returns a configured but *not yet started* ``BackgroundScheduler``.
    """
    settings = settings or get_registry_sync_settings()
    scheduler = BackgroundScheduler(timezone="UTC")

    if not settings.enabled:
        logger.info("Scheduler: weekly_registry_sync disabled by REGISTRY_SYNC_ENABLED")
        return scheduler

    scheduler.add_job(
        run_weekly_registry_sync,
        trigger="cron",
        day_of_week=settings.day_of_week,
        hour=settings.hour,
        minute=settings.minute,
        id=WEEKLY_REGISTRY_SYNC_JOB_ID,
        name="Weekly death registry sync",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=7200,
    )
    return scheduler
