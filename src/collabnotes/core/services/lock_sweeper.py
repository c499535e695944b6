"""Periodic purge of expired edit locks."""

import asyncio
import contextlib
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from ...database import session_scope
from ..logging import get_logger
from ..repositories.lock_repository import LockRepository

logger = get_logger("sweeper")


class LockSweeper:
    """Background task calling ``LockRepository.sweep_expired`` on a fixed interval.

    Expired locks already read as unlocked everywhere; sweeping only keeps
    the table from growing.
    """

    def __init__(self, session_factory: async_sessionmaker, interval_seconds: float):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.task: Optional[asyncio.Task] = None
        self._running = False
        self._stop_requested = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._running

    async def run_once(self, now: Optional[datetime] = None) -> int:
        """Sweep once in a fresh session. Returns the number of locks removed."""
        async with session_scope(self.session_factory) as session:
            removed = await LockRepository(session).sweep_expired(now)
        if removed:
            logger.info("Expired locks swept", extra={"removed": removed})
        else:
            logger.debug("No expired locks to sweep")
        return removed

    async def start(self) -> None:
        if self._running:
            logger.warning("Lock sweeper already running")
            return

        self._running = True
        self._stop_requested.clear()
        self.task = asyncio.create_task(self._loop())
        logger.info("Lock sweeper started", extra={"interval_seconds": self.interval_seconds})

    async def stop(self) -> None:
        if not self._running:
            return

        self._running = False
        self._stop_requested.set()
        if self.task:
            # an in-flight sweep finishes its commit before the loop exits
            with contextlib.suppress(asyncio.CancelledError):
                await self.task
            self.task = None
        logger.info("Lock sweeper stopped")

    async def _loop(self) -> None:
        while await self._wait_for_tick():
            try:
                await self.run_once()
            except SQLAlchemyError as e:
                # next tick retries; a failed sweep never affects lock correctness
                logger.error("Lock sweep failed", extra={"error": str(e)})

    async def _wait_for_tick(self) -> bool:
        """True once the interval elapses, False as soon as a stop is requested."""
        try:
            await asyncio.wait_for(self._stop_requested.wait(), timeout=self.interval_seconds)
        except asyncio.TimeoutError:
            return self._running
        return False
