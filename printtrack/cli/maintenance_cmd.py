"""CLI commands for maintenance tracking."""

from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from printtrack.cli.common import console, run_with_session, styled_status
from printtrack.config import get_settings
from printtrack.db.repositories import (
    MaintenanceIntervalRepository,
    MaintenanceLogRepository,
    PrinterRepository,
)
from printtrack.db.snapshot import load_snapshot
from printtrack.errors import NotFoundError
from printtrack.maintenance import (
    MAINTENANCE_TYPES,
    DueStatus,
    MaintenanceDueCalculator,
    RemainingPolicy,
    describe_remaining,
    get_type_info,
    maintenance_type_names,
)

TYPE_CHOICE = click.Choice(maintenance_type_names(), case_sensitive=False)
POLICY_CHOICE = click.Choice([p.value for p in RemainingPolicy])


@click.group()
def maintenance():
    """Maintenance tracking commands."""
    pass


@maintenance.command()
@click.option("--printer", "-p", help="Printer name or id")
@click.option("--policy", type=POLICY_CHOICE, help="Remaining usage policy")
@click.option("--due-only", is_flag=True, help="Only show due soon and overdue items")
@click.pass_context
def status(ctx: click.Context, printer: Optional[str], policy: Optional[str], due_only: bool) -> None:
    """Show due status for every maintenance interval.

    Examples:
        printtrack maintenance status
        printtrack maintenance status --printer "Prusa MK4" --due-only
    """
    calculator = MaintenanceDueCalculator(policy or get_settings().remaining_policy)

    async def handler(session, owner):
        printer_repo = PrinterRepository(session, owner)
        printer_id = (await printer_repo.find(printer)).id if printer else None
        names = await printer_repo.names()
        snapshot = await load_snapshot(session, owner)
        return names, calculator.evaluate_snapshot(snapshot, printer_id=printer_id)

    names, results = run_with_session(ctx, handler)
    if due_only:
        results = [d for d in results if d.status != DueStatus.OK]

    if not results:
        console.print("[green]No maintenance due[/green]" if due_only else
                      "[yellow]No maintenance intervals set. Add one with: "
                      "printtrack maintenance set-interval PRINTER TYPE[/yellow]")
        return

    overdue = sum(1 for d in results if d.status == DueStatus.OVERDUE)
    due_soon = sum(1 for d in results if d.status == DueStatus.DUE_SOON)
    if overdue:
        headline = f"[bold red]{overdue} OVERDUE[/bold red]"
    elif due_soon:
        headline = f"[bold yellow]{due_soon} DUE SOON[/bold yellow]"
    else:
        headline = "[bold green]ALL OK[/bold green]"
    console.print(Panel(headline, title="Maintenance Status"))

    table = Table(title="Maintenance Intervals")
    table.add_column("Printer", style="bold")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Since Service")
    table.add_column("Remaining")
    table.add_column("Last Service")

    for due in results:
        table.add_row(
            names.get(due.interval.printer_id, due.interval.printer_id),
            due.interval.type,
            styled_status(due.status),
            f"{due.jobs_since} prints, {due.hours_since:.1f} h",
            describe_remaining(due) or "-",
            (due.last_service_date or "never")[:10],
        )

    console.print(table)


@maintenance.command()
@click.argument("printer")
@click.argument("maintenance_type", metavar="TYPE", type=TYPE_CHOICE)
@click.option("--date", "-d", help="When it was done (ISO 8601), default now")
@click.option("--notes", "-n", help="Optional notes")
@click.pass_context
def log(ctx: click.Context, printer: str, maintenance_type: str, date: Optional[str], notes: Optional[str]) -> None:
    """Record maintenance performed on a printer.

    Examples:
        printtrack maintenance log "Prusa MK4" "Nozzle Clean"
        printtrack maintenance log Ender "Bed Level" --date 2024-05-01 --notes "Used IPA"
    """
    async def handler(session, owner):
        found = await PrinterRepository(session, owner).find(printer)
        entry = await MaintenanceLogRepository(session, owner).create_log(
            found.id, maintenance_type, date=date, notes=notes
        )
        return found.name, entry

    name, entry = run_with_session(ctx, handler)
    console.print(f"[green]Logged {entry.type} on {name}[/green] ({entry.date:%Y-%m-%d %H:%M})")


@maintenance.command()
@click.option("--printer", "-p", help="Printer name or id")
@click.option("--type", "-t", "maintenance_type", type=TYPE_CHOICE, help="Maintenance type")
@click.option("--limit", "-l", type=int, default=20, help="Number of entries to show")
@click.pass_context
def history(ctx: click.Context, printer: Optional[str], maintenance_type: Optional[str], limit: int) -> None:
    """Show maintenance history, newest first."""
    async def handler(session, owner):
        printer_repo = PrinterRepository(session, owner)
        printer_id = (await printer_repo.find(printer)).id if printer else None
        names = await printer_repo.names()
        rows = await MaintenanceLogRepository(session, owner).get_all(
            limit=limit, printer_id=printer_id, type=maintenance_type
        )
        return names, rows

    names, rows = run_with_session(ctx, handler)
    if not rows:
        console.print("[yellow]No maintenance logged[/yellow]")
        return

    table = Table(title="Maintenance History")
    table.add_column("Date")
    table.add_column("Printer", style="bold")
    table.add_column("Type")
    table.add_column("Notes")

    for entry in rows:
        table.add_row(
            entry.date.strftime("%Y-%m-%d %H:%M"),
            names.get(entry.printer_id, entry.printer_id),
            entry.type,
            entry.notes or "-",
        )

    console.print(table)


@maintenance.command("set-interval")
@click.argument("printer")
@click.argument("maintenance_type", metavar="TYPE", type=TYPE_CHOICE)
@click.option("--prints", type=int, help="Service every N prints")
@click.option("--hours", type=float, help="Service every N print hours")
@click.option("--suggested", is_flag=True, help="Use the suggested cadence for the type")
@click.pass_context
def set_interval(
    ctx: click.Context,
    printer: str,
    maintenance_type: str,
    prints: Optional[int],
    hours: Optional[float],
    suggested: bool,
) -> None:
    """Set how often a maintenance type is due on a printer.

    Examples:
        printtrack maintenance set-interval "Prusa MK4" "Nozzle Clean" --prints 20 --hours 50
        printtrack maintenance set-interval Ender Lubrication --suggested
    """
    if suggested:
        info = get_type_info(maintenance_type)
        if not info.has_suggestion:
            raise click.UsageError(f"No suggested interval for '{maintenance_type}'")
        prints = prints if prints is not None else info.suggested_prints
        hours = hours if hours is not None else info.suggested_hours

    async def handler(session, owner):
        found = await PrinterRepository(session, owner).find(printer)
        interval = await MaintenanceIntervalRepository(session, owner).set_interval(
            found.id, maintenance_type, interval_prints=prints, interval_hours=hours
        )
        return found.name, interval

    name, interval = run_with_session(ctx, handler)
    parts = []
    if interval.interval_prints:
        parts.append(f"every {interval.interval_prints} prints")
    if interval.interval_hours:
        parts.append(f"every {interval.interval_hours:g} hours")
    console.print(f"[green]{maintenance_type} on {name}: {' or '.join(parts)}[/green]")


@maintenance.command("remove-interval")
@click.argument("printer")
@click.argument("maintenance_type", metavar="TYPE", type=TYPE_CHOICE)
@click.pass_context
def remove_interval(ctx: click.Context, printer: str, maintenance_type: str) -> None:
    """Stop tracking a maintenance type on a printer."""
    async def handler(session, owner):
        found = await PrinterRepository(session, owner).find(printer)
        repo = MaintenanceIntervalRepository(session, owner)
        interval = await repo.get_for(found.id, maintenance_type)
        if interval is None:
            raise NotFoundError("Maintenance interval", f"{found.name}/{maintenance_type}")
        await repo.delete(interval.id)
        return found.name

    name = run_with_session(ctx, handler)
    console.print(f"[green]Removed {maintenance_type} interval from {name}[/green]")


@maintenance.command()
@click.argument("maintenance_type", metavar="TYPE", required=False, type=TYPE_CHOICE)
def types(maintenance_type: Optional[str]) -> None:
    """List maintenance types, or show instructions for one."""
    if maintenance_type:
        info = get_type_info(maintenance_type)
        console.print(f"\n[bold]{info.name}[/bold]")
        console.print(f"[dim]{info.description}[/dim]")
        if info.instructions:
            console.print("\n[bold]Steps:[/bold]")
            for i, step in enumerate(info.instructions, 1):
                console.print(f"  {i}. {step}")
        return

    table = Table(title="Maintenance Types")
    table.add_column("Type", style="bold")
    table.add_column("Suggested Interval")
    table.add_column("Description")

    for info in MAINTENANCE_TYPES:
        parts = []
        if info.suggested_prints:
            parts.append(f"{info.suggested_prints} prints")
        if info.suggested_hours:
            parts.append(f"{info.suggested_hours:g} h")
        table.add_row(info.name, " / ".join(parts) or "-", info.description)

    console.print(table)
