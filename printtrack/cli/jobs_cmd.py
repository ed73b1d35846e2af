"""CLI commands for print jobs."""

from typing import Optional

import click
from rich.table import Table

from printtrack.cli.common import console, run_with_session
from printtrack.db.repositories import JOB_STATUSES, PrinterRepository, PrintJobRepository
from printtrack.utils import format_duration


@click.group()
def jobs():
    """Record and list print jobs."""
    pass


@jobs.command("add")
@click.argument("printer")
@click.argument("name")
@click.option("--start", help="Start time (ISO 8601)")
@click.option("--end", help="End time (ISO 8601)")
@click.option("--hours", type=int, help="Duration hours (job ends now)")
@click.option("--minutes", type=int, help="Duration minutes (job ends now)")
@click.option("--status", "-s", type=click.Choice(JOB_STATUSES), default="Success", help="Job status")
@click.option("--material", "-m", help="Material, e.g. PLA")
@click.option("--grams", "-g", type=float, help="Filament used in grams")
@click.option("--notes", "-n", help="Optional notes")
@click.pass_context
def add(
    ctx: click.Context,
    printer: str,
    name: str,
    start: Optional[str],
    end: Optional[str],
    hours: Optional[int],
    minutes: Optional[int],
    status: str,
    material: Optional[str],
    grams: Optional[float],
    notes: Optional[str],
) -> None:
    """Record a print job.

    Examples:
        printtrack jobs add "Prusa MK4" Benchy --hours 1 --minutes 30 -m PLA -g 12
        printtrack jobs add Ender Bracket --start 2024-05-01T10:00 --end 2024-05-01T12:00
    """
    fields = dict(status=status, material=material, grams_used=grams, notes=notes)

    async def handler(session, owner):
        found = await PrinterRepository(session, owner).find(printer)
        repo = PrintJobRepository(session, owner)
        if hours is not None or minutes is not None:
            return await repo.record_duration(found.id, name, hours=hours or 0, minutes=minutes or 0, **fields)
        return await repo.create_job(found.id, name, start_time=start, end_time=end, **fields)

    job = run_with_session(ctx, handler)
    console.print(f"[green]Recorded job {job.name}[/green] ({job.id})")


@jobs.command("list")
@click.option("--printer", "-p", help="Printer name or id")
@click.option("--limit", "-l", type=int, default=20, help="Number of jobs to show")
@click.pass_context
def list_jobs(ctx: click.Context, printer: Optional[str], limit: int) -> None:
    """List recent print jobs."""
    async def handler(session, owner):
        printer_repo = PrinterRepository(session, owner)
        printer_id = (await printer_repo.find(printer)).id if printer else None
        names = await printer_repo.names()
        rows = await PrintJobRepository(session, owner).get_all(limit=limit, printer_id=printer_id)
        return names, [j.to_entity() for j in rows]

    names, rows = run_with_session(ctx, handler)
    if not rows:
        console.print("[yellow]No print jobs recorded[/yellow]")
        return

    table = Table(title="Print Jobs")
    table.add_column("Started")
    table.add_column("Printer")
    table.add_column("Name", style="bold")
    table.add_column("Duration")
    table.add_column("Material")
    table.add_column("Grams", justify="right")
    table.add_column("Status")

    for job in rows:
        started = job.started_at
        table.add_row(
            started.strftime("%Y-%m-%d %H:%M") if started else "-",
            names.get(job.printer_id, job.printer_id),
            job.name or "-",
            format_duration(job.duration_hours * 3600) if job.duration_hours else "-",
            job.material or "-",
            f"{job.grams_used:.0f}" if job.grams_used is not None else "-",
            job.status or "-",
        )

    console.print(table)
