# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from todosync import configuration
from todosync.repository.configuration import CONFIGURATION_REPO
from todosync.repository.session import SESSION_REPO
from todosync.terminal.custom_typer import AliasedTyperGroup
from todosync.terminal.validate import validate_log_level, validate_positive_interval

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("show, v")
def show() -> None:
    """Display current configuration settings."""
    config = CONFIGURATION_REPO.get_config()
    api_base_url = CONFIGURATION_REPO.get_api_base_url()
    if configuration.api_base_url_override() is not None:
        api_base_url += f" (from {configuration.API_BASE_URL_ENV})"

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("api_base_url", api_base_url)
    table.add_row("sync_interval_seconds", str(config["sync_interval_seconds"]))
    table.add_row("request_timeout_seconds", f"{config['request_timeout_seconds']:g}")
    table.add_row("data_path", str(configuration.DATA_PATH))
    table.add_row(
        "clear_ids_on_view",
        "✓ Enabled" if config["clear_ids_on_view"] else "✗ Disabled",
    )
    table.add_row("log_level", config["log_level"])

    session = SESSION_REPO.get_session()
    table.add_row("signed in as", session["name"] if session is not None else "-")

    console.print(table)


@app.command("set, s")
def set(
    api_base_url: Annotated[
        Optional[str],
        typer.Option("--api-base-url", help="Base URL of the todo API"),
    ] = None,
    sync_interval_seconds: Annotated[
        Optional[int],
        typer.Option(
            "--sync-interval-seconds",
            callback=validate_positive_interval,
            help="Seconds between passes of `todosync watch`",
        ),
    ] = None,
    request_timeout_seconds: Annotated[
        Optional[float],
        typer.Option("--request-timeout-seconds", help="Timeout of a single API request"),
    ] = None,
    data_path: Annotated[
        Optional[str],
        typer.Option("--data-path", help="Custom data directory path"),
    ] = None,
    remove_data_path: Annotated[
        bool,
        typer.Option("--remove-data-path", help="Go back to the default data directory"),
    ] = False,
    clear_ids_on_view: Annotated[
        Optional[bool],
        typer.Option(
            "--clear-ids-on-view/--no-clear-ids-on-view",
            help="Renumber displayed ids on every listing",
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", callback=validate_log_level, help="DEBUG, INFO, WARNING or ERROR"),
    ] = None,
) -> None:
    """Change configuration settings."""
    if request_timeout_seconds is not None and request_timeout_seconds <= 0:
        raise typer.BadParameter("--request-timeout-seconds must be positive")

    CONFIGURATION_REPO.update_config(
        api_base_url=api_base_url,
        sync_interval_seconds=sync_interval_seconds,
        request_timeout_seconds=request_timeout_seconds,
        data_path=data_path,
        remove_data_path=remove_data_path,
        clear_ids_on_view=clear_ids_on_view,
        log_level=log_level,
    )
    CONFIGURATION_REPO.flush()

    show()
