"""Shared helpers for CLI commands."""

import asyncio
from typing import Any, Awaitable, Callable

import click
from rich.console import Console
from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.db import init_db, close_db, get_session
from printtrack.db.repositories import UserRepository
from printtrack.errors import PrintTrackError
from printtrack.maintenance import DueStatus

console = Console()

DEFAULT_CLI_USER = "local"

STATUS_STYLES = {
    DueStatus.OK: "green",
    DueStatus.DUE_SOON: "yellow",
    DueStatus.OVERDUE: "red",
}

Handler = Callable[[AsyncSession, str], Awaitable[Any]]


def current_owner(ctx: click.Context) -> str:
    """Owner id selected with the top-level --user option."""
    return (ctx.find_root().obj or {}).get("user") or DEFAULT_CLI_USER


def styled_status(status: DueStatus) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status.value}[/{style}]"


def run_with_session(ctx: click.Context, handler: Handler) -> Any:
    """
    Run ``handler(session, owner)`` in a single database session.

    The owner account is created on first use. PrintTrack errors are
    printed and end the command with exit status 1.
    """
    owner = current_owner(ctx)

    async def _main():
        await init_db()
        try:
            async with get_session() as session:
                await UserRepository(session).ensure_user(owner)
                return await handler(session, owner)
        finally:
            await close_db()

    try:
        return asyncio.run(_main())
    except PrintTrackError as e:
        console.print(f"[red]Error: {e}[/red]")
        ctx.exit(1)
