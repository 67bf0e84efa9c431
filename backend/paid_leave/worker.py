"""Worker process for scheduled leave grants.

Runs an asyncio loop that grants due leave to every employee once per
configured interval, so milestones land on their calendar date without a
manual trigger.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from paid_leave.config import get_settings
from paid_leave.db import get_session_factory

logger = logging.getLogger(__name__)


async def run_grant_loop() -> None:
    """Main worker loop that grants due leave for all employees."""
    from paid_leave.services.accrual import run_scheduled_grants

    settings = get_settings()
    logger.info("Grant worker started (interval=%ds)", settings.grant_worker_interval_seconds)
    session_factory = get_session_factory()

    while True:
        today = date.today()
        logger.info("Running scheduled grants for %s", today)
        try:
            async with session_factory() as session:
                result = await run_scheduled_grants(session, today)
            logger.info(
                "Grant run complete for %s: processed=%d granted=%d errors=%d",
                today,
                result.processed,
                result.granted,
                result.errors,
            )
        except Exception:
            logger.exception("Grant run failed for %s", today)

        await asyncio.sleep(settings.grant_worker_interval_seconds)


def main() -> None:
    """Entry point for the worker process."""
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    asyncio.run(run_grant_loop())


if __name__ == "__main__":
    main()
