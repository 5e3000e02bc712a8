# SPDX-License-Identifier: MIT

import asyncio
import logging
from typing import Callable, Optional

from todosync.model.sync_report import SyncReport
from todosync.sync.full_sync import FullSync

logger = logging.getLogger(__name__)

type ReportCallback = Callable[[Optional[SyncReport]], None]


class SyncScheduler:
    """
    Runs a full sync pass right away and then every interval_seconds.

    stop() only prevents further passes. A pass that is already running,
    and any remote call inside it, is left to finish.
    """

    def __init__(
        self,
        full_sync: FullSync,
        interval_seconds: float,
        on_report: Optional[ReportCallback] = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.full_sync = full_sync
        self.interval_seconds = interval_seconds
        self._on_report = on_report
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task[None]] = None
        self.passes = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self.__run(), name="todosync-full-sync")

    def request_stop(self) -> None:
        self._stop_event.set()

    async def stop(self) -> None:
        self.request_stop()
        if self._task is not None:
            await self._task
            self._task = None

    async def wait(self) -> None:
        """Block until stop() is called."""
        if self._task is not None:
            await self._task

    async def __run(self) -> None:
        while not self._stop_event.is_set():
            report = await self.full_sync.run()
            self.passes += 1
            if self._on_report is not None:
                self._on_report(report)
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except TimeoutError:
                continue
        logger.debug("sync scheduler stopped after %d pass(es)", self.passes)
