"""Dashboard CLI command."""

import click
from rich.panel import Panel
from rich.table import Table

from printtrack.analytics import ReportGenerator, ReportPeriod
from printtrack.cli.common import console, run_with_session, styled_status
from printtrack.config import get_settings
from printtrack.db.repositories import PrinterRepository
from printtrack.db.snapshot import load_snapshot
from printtrack.maintenance import describe_remaining
from printtrack.maintenance.calculator import PRINTER_OK


@click.command()
@click.option(
    "--view",
    type=click.Choice([p.value for p in ReportPeriod]),
    default=ReportPeriod.DAY.value,
    help="Bucket print time per day or per week",
)
@click.pass_context
def dashboard(ctx: click.Context, view: str) -> None:
    """Show printers, recent jobs, usage and maintenance due.

    Examples:

        printtrack dashboard

        printtrack dashboard --view week
    """
    async def handler(session, owner):
        printers = await PrinterRepository(session, owner).get_all()
        snapshot = await load_snapshot(session, owner)
        report = ReportGenerator(get_settings().remaining_policy).generate_report(
            snapshot,
            printers=[p.to_dict() for p in printers],
            period=ReportPeriod(view),
        )
        return {p.id: p.name for p in printers}, report

    names, report = run_with_session(ctx, handler)

    console.print(Panel("[bold]PrintTrack Dashboard[/bold]"))

    if report.printers:
        table = Table(title="Printers")
        table.add_column("Name", style="bold")
        table.add_column("Model")
        table.add_column("Status")
        for p in report.printers:
            style = "green" if p.status == PRINTER_OK else "red"
            table.add_row(p.name, p.model or "-", f"[{style}]{p.status}[/{style}]")
        console.print(table)
    else:
        console.print("[yellow]No printers yet[/yellow]")

    if report.due_maintenance:
        table = Table(title="Maintenance Due")
        table.add_column("Printer", style="bold")
        table.add_column("Type")
        table.add_column("Status")
        table.add_column("Remaining")
        for due in report.due_maintenance:
            table.add_row(
                names.get(due.interval.printer_id, due.interval.printer_id),
                due.interval.type,
                styled_status(due.status),
                describe_remaining(due) or "-",
            )
        console.print(table)
    else:
        console.print("[green]No maintenance due[/green]")

    if not report.has_data:
        console.print("\n[dim]No print or maintenance data yet[/dim]")
        return

    if report.recent_jobs:
        console.print("\n[bold]Recent Jobs:[/bold]")
        for job in report.recent_jobs:
            started = job.started_at
            when = started.strftime("%Y-%m-%d %H:%M") if started else "-"
            console.print(f"  {when}  {job.name or '-'} ({names.get(job.printer_id, '-')})")
        if report.has_more_jobs:
            console.print("  [dim]... more with: printtrack jobs list[/dim]")

    console.print("\n[bold]Usage:[/bold]")
    console.print(f"  Average Print Time: {report.avg_print_minutes:.0f} min")
    console.print(f"  Jobs: {report.manual_jobs} manual, {report.octoprint_jobs} OctoPrint")
    for material, grams in report.grams_by_material.items():
        console.print(f"  {material}: {grams:.0f} g")

    if report.print_minutes_by_period:
        console.print(f"\n[bold]Print Time per {view}:[/bold]")
        for period, minutes in report.print_minutes_by_period.items():
            console.print(f"  {period}: {minutes:.0f} min")

    if report.maintenance_by_type:
        console.print("\n[bold]Maintenance Logged:[/bold]")
        for maintenance_type, count in report.maintenance_by_type.items():
            console.print(f"  {maintenance_type}: {count}")
