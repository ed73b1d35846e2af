"""CLI commands for CSV export."""

import sys
from typing import Optional

import click

from printtrack.analytics import export_jobs_csv, export_logs_csv
from printtrack.cli.common import console, run_with_session
from printtrack.db.repositories import (
    MaintenanceLogRepository,
    PrinterRepository,
    PrintJobRepository,
)


@click.group()
def export():
    """Export records as CSV."""
    pass


def _write(output: Optional[str], writer, rows, names) -> int:
    if output:
        with open(output, "w", newline="", encoding="utf-8") as f:
            count = writer(rows, f, names)
        console.print(f"[green]Wrote {count} rows to {output}[/green]")
        return count
    return writer(rows, sys.stdout, names)


@export.command("jobs")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (default stdout)")
@click.pass_context
def export_jobs(ctx: click.Context, output: Optional[str]) -> None:
    """Export print jobs."""
    async def handler(session, owner):
        names = await PrinterRepository(session, owner).names()
        rows = await PrintJobRepository(session, owner).get_all()
        return names, [j.to_entity() for j in rows]

    names, rows = run_with_session(ctx, handler)
    _write(output, export_jobs_csv, rows, names)


@export.command("logs")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (default stdout)")
@click.pass_context
def export_logs(ctx: click.Context, output: Optional[str]) -> None:
    """Export maintenance logs."""
    async def handler(session, owner):
        names = await PrinterRepository(session, owner).names()
        rows = await MaintenanceLogRepository(session, owner).get_all()
        return names, [log.to_entity() for log in rows]

    names, rows = run_with_session(ctx, handler)
    _write(output, export_logs_csv, rows, names)
