# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer

from todosync import state as app_state
from todosync.logger import configure_logging
from todosync.terminal import comment, configuration, session, sync, todo, workspace
from todosync.terminal.custom_typer import OrderedTyperGroup
from todosync.terminal.validate import validate_log_level
from todosync.terminal.view import view
from todosync.view import state as view_state

app = typer.Typer(
    cls=OrderedTyperGroup,
    help="todosync - todos that work offline and sync when you are signed in",
    no_args_is_help=True,
)
app.command(name="add, a", no_args_is_help=True)(todo.add)
app.command(name="list, ls")(todo.list_todos)
app.command(name="done, d", no_args_is_help=True)(todo.done)
app.command(name="reschedule, r", no_args_is_help=True)(todo.reschedule)
app.command(name="delete, rm", no_args_is_help=True)(todo.delete)
app.add_typer(comment.app, name="comment, cm")
app.add_typer(workspace.app, name="workspace, ws")
app.command(name="sync, s")(sync.sync)
app.command(name="watch, w")(sync.watch)
app.command(name="login", no_args_is_help=True)(session.login)
app.command(name="logout")(session.logout)
app.command(name="view, v")(view)
app.add_typer(configuration.app, name="config, c")


@app.callback()
def main_callback(
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output",
        ),
    ] = False,
    clear_ids: Annotated[
        Optional[bool],
        typer.Option(
            "--clear-ids/--no-clear-ids",
            help="Renumber displayed ids on this listing",
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option(
            "--log-level",
            callback=validate_log_level,
            help="Override the configured log level for this run",
        ),
    ] = None,
) -> None:
    """
    todosync - todos that work offline and sync when you are signed in

    Global options that apply to all commands.
    """
    if no_header:
        view_state.set_show_header(False)
    if clear_ids is not None:
        app_state.set_clear_ids(clear_ids)
    if log_level is not None:
        configure_logging(log_level)


def run() -> None:
    app()
