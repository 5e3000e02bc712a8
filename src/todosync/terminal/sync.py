# SPDX-License-Identifier: MIT

import asyncio
import signal
from typing import Annotated, Optional

import typer

from todosync.model.sync_report import SyncReport
from todosync.repository.configuration import CONFIGURATION_REPO
from todosync.service.runtime import open_runtime
from todosync.terminal.common import fail, handle_errors, require_authenticated
from todosync.terminal.validate import validate_positive_interval
from todosync.view.sync_report import sync_report_view


@handle_errors
def sync() -> None:
    """Run one full sync pass."""

    async def _sync() -> Optional[SyncReport]:
        async with open_runtime() as runtime:
            require_authenticated(runtime)
            assert runtime.full_sync is not None
            return await runtime.full_sync.run()

    report = asyncio.run(_sync())
    sync_report_view(report)
    if report is None:
        fail("sync failed")


@handle_errors
def watch(
    interval: Annotated[
        Optional[int],
        typer.Option(
            "--interval",
            "-i",
            callback=validate_positive_interval,
            help="seconds between passes, defaults to sync_interval_seconds",
        ),
    ] = None,
) -> None:
    """Sync now and then periodically until interrupted."""
    interval_seconds = interval or CONFIGURATION_REPO.get_config()["sync_interval_seconds"]

    async def _watch() -> int:
        async with open_runtime() as runtime:
            require_authenticated(runtime)
            scheduler = runtime.create_scheduler(interval_seconds, sync_report_view)
            assert scheduler is not None
            loop = asyncio.get_running_loop()
            for signum in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(signum, scheduler.request_stop)
            scheduler.start()
            await scheduler.wait()
            return scheduler.passes

    passes = asyncio.run(_watch())
    typer.echo(f"stopped after {passes} pass(es)")
