import asyncio
import logging
from contextlib import suppress
from datetime import datetime, timedelta

from finmate.core import clock
from finmate.services.recurring import materialize_due

logger = logging.getLogger(__name__)


def seconds_until(now: datetime, run_hour: int) -> float:
    target = now.replace(hour=run_hour, minute=0, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class RecurringScheduler:
    """Runs the recurring-transaction materializer once a day at run_hour:00."""

    def __init__(self, session_factory, run_hour: int = 0):
        self.session_factory = session_factory
        self.run_hour = run_hour
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("Recurring scheduler started (daily at %02d:00)", self.run_hour)

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Recurring scheduler stopped")

    async def run_once(self) -> int:
        async with self.session_factory() as session:
            return await materialize_due(session)

    async def _loop(self):
        while True:
            delay = seconds_until(clock.now(), self.run_hour)
            logger.debug("Next recurring run in %.0f seconds", delay)
            await asyncio.sleep(delay)
            try:
                await self.run_once()
            except Exception:
                # Unprocessed templates stay due and are retried next run
                logger.exception("Recurring run failed")
