import asyncio
import os
from typing import Awaitable, Callable, Optional

from dotenv import load_dotenv

from dancewithme.log import get_logger

load_dotenv()

POLL_INTERVAL_SECONDS = float(os.getenv("POLL_INTERVAL_SECONDS", "3"))

logger = get_logger("client.poller")


class Poller:
    """
    Cancellable handle around a fixed-interval polling task.

    start() schedules the loop on the running event loop; the callback first
    fires one interval later. cancel() stops the loop and waits for it to
    exit. Both are safe to call more than once.
    """

    def __init__(self, callback: Callable[[], Awaitable[None]], interval: float = POLL_INTERVAL_SECONDS):
        self.callback = callback
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def cancel(self):
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.callback()
            except Exception:
                logger.exception("Poll callback failed; keeping previous state")
