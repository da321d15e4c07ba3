"""
Fixed-interval polling loop
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class Poller:
    """Runs `callback` immediately, then every `interval` seconds, until stopped.

    `trigger()` wakes the loop early for an out-of-band refresh.
    """

    def __init__(self, name: str, interval: float, callback: Callable[[], Awaitable[object]]):
        self.name = name
        self.interval = interval
        self.callback = callback
        self._wakeup = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._stopping = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        if self.running:
            return
        self._stopping = False
        self._task = asyncio.create_task(self._run(), name=f"poller:{self.name}")
        logger.debug(f"Poller {self.name} started (every {self.interval}s)")

    def trigger(self):
        self._wakeup.set()

    async def stop(self):
        """Cancel the loop along with any tick in flight"""
        if self._task is None:
            return
        task, self._task = self._task, None
        self._stopping = True
        task.cancel()
        # asyncio.wait never raises the task's own cancellation, only the caller's
        await asyncio.wait({task})
        logger.debug(f"Poller {self.name} stopped")

    async def _run(self):
        while not self._stopping:
            self._wakeup.clear()
            try:
                await self.callback()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # Reads degrade on their own; the next tick is the retry
                logger.error(f"Poller {self.name} tick failed: {e}")

            if self._stopping:
                break
            wakeup = asyncio.ensure_future(self._wakeup.wait())
            try:
                await asyncio.wait({wakeup}, timeout=self.interval)
            finally:
                wakeup.cancel()
