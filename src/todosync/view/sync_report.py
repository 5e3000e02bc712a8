# SPDX-License-Identifier: MIT

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from todosync.color import ERROR_COLOR
from todosync.model.sync_report import SyncReport
from todosync.time import datetime_to_display_local_datetime_str, now_utc


def sync_report_view(report: Optional[SyncReport], console: Optional[Console] = None) -> None:
    if console is None:
        console = Console()

    stamp = datetime_to_display_local_datetime_str(now_utc())
    if report is None:
        console.print(
            f"[{ERROR_COLOR}]{stamp} sync failed, the remote could not be reached[/{ERROR_COLOR}]"
        )
        return

    report_table = Table(box=box.SIMPLE, title=f"sync {stamp}")
    report_table.add_column("patched")
    report_table.add_column("uploaded")
    report_table.add_column("failed")
    report_table.add_column("kept local")
    report_table.add_column("duplicates removed")
    report_table.add_column("total")
    failed = str(report["failed"])
    if report["failed"] > 0:
        failed = f"[{ERROR_COLOR}]{failed}[/{ERROR_COLOR}]"
    report_table.add_row(
        str(report["patched"]),
        str(report["uploaded"]),
        failed,
        str(report["retained"]),
        str(report["duplicates_removed"]),
        str(report["total"]),
    )
    console.print(report_table)
