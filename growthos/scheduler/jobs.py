"""Growth OS — Scheduler Jobs.

APScheduler interval job that replays cached funnel and metrics snapshots
into the database after failed saves.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from growthos.config import settings
from growthos.services.funnel_store import get_funnel_service
from growthos.services.metrics_store import get_metrics_service
from growthos.core.logging import get_logger

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler()


async def snapshot_sync_job():
    """Drain each write-ahead cache, oldest entry first."""
    for service in (get_funnel_service(), get_metrics_service()):
        pending = service.cache.pending()
        if not pending:
            continue
        logger.info(f"{service.name} sync starting: {pending} cached snapshots")
        try:
            written = service.sync()
            logger.info(f"{service.name} sync complete: {written}/{pending} written")
        except Exception as e:
            logger.error(f"{service.name} sync failed: {e}")


def start_scheduler():
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return

    scheduler.add_job(
        snapshot_sync_job,
        "interval",
        seconds=settings.funnel_sync_interval_seconds,
        id="snapshot_sync",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started. Snapshot sync every {settings.funnel_sync_interval_seconds}s"
    )


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
