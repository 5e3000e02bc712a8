# SPDX-License-Identifier: MIT

import asyncio
from typing import Annotated, Optional

import typer

from todosync.model.session import Session
from todosync.service import session as session_service
from todosync.terminal.common import handle_errors
from todosync.view.sync_report import sync_report_view


@handle_errors
def login(
    token: Annotated[str, typer.Argument(help="API bearer token")],
    user_id: Annotated[str, typer.Option("--user-id", help="id of the account")],
    name: Annotated[str, typer.Option("--name", help="display name used on comments")],
    email: Annotated[Optional[str], typer.Option("--email")] = None,
) -> None:
    """Sign in, then upload todos created while signed out."""
    session: Session = {"user_id": user_id, "name": name, "email": email, "token": token}
    report = asyncio.run(session_service.sign_in(session))
    typer.echo(f"signed in as {name}")
    sync_report_view(report)


@handle_errors
def logout() -> None:
    """Sign out and remove every cached todo and workspace from this device."""
    asyncio.run(session_service.sign_out())
    typer.echo("signed out")
