import asyncio
import logging
from typing import Iterable, Optional

from app.services.verification_store import VerificationCodeStore

logger = logging.getLogger(__name__)


class VerificationReaper:
    """Periodically drops expired entries so abandoned codes do not pile up."""

    def __init__(self, stores: Iterable[VerificationCodeStore], interval_seconds: float):
        self.stores = list(stores)
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    def sweep(self) -> int:
        total = 0
        for store in self.stores:
            try:
                removed = store.purge_expired()
            except Exception as e:
                logger.error(f"Failed to purge expired {store.purpose} codes: {str(e)}")
                continue
            if removed:
                logger.info(f"Purged {removed} expired {store.purpose} code(s)")
            total += removed
        return total

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            # Database sweeps block; keep them off the event loop
            await asyncio.to_thread(self.sweep)

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            logger.info(f"Verification reaper started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Verification reaper stopped")
