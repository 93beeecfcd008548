"""
Offer Background Jobs

Daily expiration sweep: sends the 2-day and 1-day warnings and the expiry
notice for each offer exactly once (see lifecycle.py).

Schedule:
- Runs at midnight in the configured time zone (settings.timezone)
- Can also be triggered manually via /debug/jobs/{job_id}/trigger in development
"""

import logging
from typing import Any

from apscheduler.triggers.cron import CronTrigger

from hr_portal.core.clock import SystemClock
from hr_portal.core.config import settings
from hr_portal.core.database import async_session_maker
from hr_portal.core.email import EmailNotifier
from hr_portal.core.scheduler import register_job
from hr_portal.modules.audit.service import SqlAuditTrail
from hr_portal.modules.offers.lifecycle import OfferLifecycleEngine
from hr_portal.modules.offers.store import SqlLifecycleStore

logger = logging.getLogger(__name__)

JOB_ID_EXPIRATION_SWEEP = "offers_expiration_sweep"


async def run_expiration_sweep() -> dict[str, Any]:
    """
    Run the offer expiration sweep for today.

    Returns:
        The sweep report as a dict (per-stage counts and errors)
    """
    clock = SystemClock()

    async with async_session_maker() as db:
        engine = OfferLifecycleEngine(
            store=SqlLifecycleStore(db),
            notifier=EmailNotifier(),
            audit=SqlAuditTrail(db),
            clock=clock,
        )
        report = await engine.run_expiration_sweep(clock.today())

    result = report.as_dict()
    for stage in result["stages"]:
        logger.info(
            f"Stage {stage['stage']}: selected={stage['offers_selected']}, "
            f"notified={stage['offers_notified']}, failed_sends={stage['sends_failed']}, "
            f"error={stage['error']}"
        )
    return result


def register_offer_jobs() -> None:
    """
    Register offer background jobs with the scheduler.

    Call during application startup, before the scheduler is started.
    """
    logger.info("Registering offer background jobs...")

    register_job(
        job_id=JOB_ID_EXPIRATION_SWEEP,
        func=run_expiration_sweep,
        trigger=CronTrigger(hour=0, minute=0, timezone=settings.timezone),
    )
    logger.info(f"Registered job: {JOB_ID_EXPIRATION_SWEEP} (daily at 00:00 {settings.timezone})")
