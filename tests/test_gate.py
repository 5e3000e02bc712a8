"""Unit tests for todosync.sync.gate and todosync.sync.scheduler."""

import asyncio

import pytest

from conftest import FakeTodoService, make_todo
from todosync.sync.full_sync import FullSync
from todosync.sync.gate import SyncGate
from todosync.sync.scheduler import SyncScheduler
from todosync.sync.store import TodoStore


class TestSyncGate:
    @pytest.mark.asyncio
    async def test_remote_calls_run_together(self):
        gate = SyncGate()
        async with gate.remote_call():
            async with gate.remote_call():
                assert gate.inflight == 2
        assert gate.inflight == 0

    @pytest.mark.asyncio
    async def test_full_sync_waits_for_in_flight_calls(self):
        gate = SyncGate()
        release = asyncio.Event()
        order: list[str] = []

        async def remote_call() -> None:
            async with gate.remote_call():
                await release.wait()
                order.append("call")

        async def full_sync() -> None:
            async with gate.full_sync():
                order.append("sync")

        call_task = asyncio.create_task(remote_call())
        await asyncio.sleep(0)
        sync_task = asyncio.create_task(full_sync())
        await asyncio.sleep(0)
        assert order == []

        release.set()
        await asyncio.gather(call_task, sync_task)
        assert order == ["call", "sync"]

    @pytest.mark.asyncio
    async def test_remote_calls_wait_for_a_running_sync(self):
        gate = SyncGate()
        release = asyncio.Event()
        order: list[str] = []

        async def full_sync() -> None:
            async with gate.full_sync():
                await release.wait()
                order.append("sync")

        async def remote_call() -> None:
            async with gate.remote_call():
                order.append("call")

        sync_task = asyncio.create_task(full_sync())
        await asyncio.sleep(0)
        assert gate.syncing
        call_task = asyncio.create_task(remote_call())
        await asyncio.sleep(0)
        assert order == []

        release.set()
        await asyncio.gather(sync_task, call_task)
        assert order == ["sync", "call"]

    @pytest.mark.asyncio
    async def test_gate_is_released_on_error(self):
        gate = SyncGate()
        with pytest.raises(RuntimeError):
            async with gate.full_sync():
                raise RuntimeError("boom")
        assert not gate.syncing
        async with gate.remote_call():
            assert gate.inflight == 1


class TestSyncScheduler:
    def test_interval_must_be_positive(self):
        full_sync = FullSync(TodoStore(), FakeTodoService(), SyncGate())
        with pytest.raises(ValueError):
            SyncScheduler(full_sync, 0)

    @pytest.mark.asyncio
    async def test_runs_immediately_and_periodically_until_stopped(self):
        service = FakeTodoService([make_todo("r1", "Dentist")])
        store = TodoStore()
        reports = []
        scheduler = SyncScheduler(
            FullSync(store, service, SyncGate()), 0.01, on_report=reports.append
        )

        scheduler.start()
        while scheduler.passes < 2:
            await asyncio.sleep(0.01)
        await scheduler.stop()

        assert not scheduler.is_running
        passes = scheduler.passes
        assert len(reports) == passes
        assert [todo["id"]["value"] for todo in store.todos] == ["r1"]

        await asyncio.sleep(0.05)
        assert scheduler.passes == passes

    @pytest.mark.asyncio
    async def test_stop_lets_the_running_pass_finish(self):
        service = FakeTodoService([make_todo("r1", "Dentist")])
        service.gates["list_todos"] = asyncio.Event()
        store = TodoStore()
        scheduler = SyncScheduler(FullSync(store, service, SyncGate()), 60)

        scheduler.start()
        while not service.calls_to("list_todos"):
            await asyncio.sleep(0)
        scheduler.request_stop()
        service.gates["list_todos"].set()
        await scheduler.wait()

        assert scheduler.passes == 1
        assert [todo["id"]["value"] for todo in store.todos] == ["r1"]
