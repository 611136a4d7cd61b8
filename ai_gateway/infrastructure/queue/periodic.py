"""Fixed-interval background task."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import suppress

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Run an async callable every ``interval`` seconds until stopped.

    The first run happens one interval after ``start``. Failures are logged
    and the next cycle runs on schedule.
    """

    def __init__(self, name: str, interval: float, func: Callable[[], Awaitable[object]]):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.name = name
        self.interval = interval
        self._func = func
        self._task: asyncio.Task[None] | None = None

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self._func()
            except Exception as e:
                logger.error("Periodic task '%s' failed: %s", self.name, e, exc_info=True)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=self.name)
        logger.info("Periodic task '%s' scheduled every %.0f seconds", self.name, self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
