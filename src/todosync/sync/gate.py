# SPDX-License-Identifier: MIT

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class SyncGate:
    """
    Keeps full reconciliation passes apart from optimistic remote calls.

    Any number of remote calls may run together. A pass waits until none is
    in flight and, while it runs, new remote calls wait for it to finish.
    Local changes are applied before entering the gate and never wait.
    """

    def __init__(self) -> None:
        self._condition = asyncio.Condition()
        self._inflight = 0
        self._syncing = False

    @property
    def inflight(self) -> int:
        return self._inflight

    @property
    def syncing(self) -> bool:
        return self._syncing

    @asynccontextmanager
    async def remote_call(self) -> AsyncIterator[None]:
        async with self._condition:
            await self._condition.wait_for(lambda: not self._syncing)
            self._inflight += 1
        try:
            yield
        finally:
            async with self._condition:
                self._inflight -= 1
                self._condition.notify_all()

    @asynccontextmanager
    async def full_sync(self) -> AsyncIterator[None]:
        async with self._condition:
            await self._condition.wait_for(
                lambda: not self._syncing and self._inflight == 0
            )
            self._syncing = True
        try:
            yield
        finally:
            async with self._condition:
                self._syncing = False
                self._condition.notify_all()
