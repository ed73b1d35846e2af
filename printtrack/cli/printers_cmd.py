"""CLI commands for printers."""

from typing import Optional

import click
from rich.table import Table

from printtrack.cli.common import console, run_with_session
from printtrack.db.repositories import PrinterRepository
from printtrack.db.snapshot import load_snapshot
from printtrack.maintenance import printer_status
from printtrack.maintenance.calculator import PRINTER_OK


@click.group()
def printers():
    """Manage printers."""
    pass


@printers.command("add")
@click.argument("name")
@click.option("--model", "-m", help="Printer model")
@click.option("--notes", "-n", help="Optional notes")
@click.option("--octoprint-url", help="OctoPrint base URL")
@click.option("--api-key", help="OctoPrint API key")
@click.pass_context
def add(
    ctx: click.Context,
    name: str,
    model: Optional[str],
    notes: Optional[str],
    octoprint_url: Optional[str],
    api_key: Optional[str],
) -> None:
    """Add a printer.

    Examples:
        printtrack printers add "Prusa MK4" --model MK4
        printtrack printers add Ender --octoprint-url http://octopi.local --api-key KEY
    """
    async def handler(session, owner):
        return await PrinterRepository(session, owner).create(
            name=name,
            model=model,
            notes=notes,
            octoprint_url=octoprint_url,
            octoprint_api_key=api_key,
        )

    printer = run_with_session(ctx, handler)
    console.print(f"[green]Added printer {printer.name}[/green] ({printer.id})")


@printers.command("list")
@click.pass_context
def list_printers(ctx: click.Context) -> None:
    """List printers with maintenance status."""
    async def handler(session, owner):
        rows = await PrinterRepository(session, owner).get_all()
        snapshot = await load_snapshot(session, owner)
        return [(p, printer_status(snapshot, p.id)) for p in rows]

    rows = run_with_session(ctx, handler)
    if not rows:
        console.print("[yellow]No printers yet. Add one with: printtrack printers add NAME[/yellow]")
        return

    table = Table(title="Printers")
    table.add_column("Name", style="bold")
    table.add_column("Model")
    table.add_column("OctoPrint")
    table.add_column("Status")
    table.add_column("ID", style="dim")

    for printer, status in rows:
        style = "green" if status == PRINTER_OK else "red"
        table.add_row(
            printer.name,
            printer.model or "-",
            "yes" if printer.has_octoprint else "-",
            f"[{style}]{status}[/{style}]",
            printer.id,
        )

    console.print(table)


@printers.command("remove")
@click.argument("printer")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def remove(ctx: click.Context, printer: str, yes: bool) -> None:
    """Remove a printer with its jobs, logs and intervals."""
    if not yes and not click.confirm(f"Remove printer '{printer}' and all its records?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    async def handler(session, owner):
        repo = PrinterRepository(session, owner)
        found = await repo.find(printer)
        await repo.delete(found.id)
        return found.name

    name = run_with_session(ctx, handler)
    console.print(f"[green]Removed printer {name}[/green]")
