"""CLI commands for OctoPrint-connected printers."""

import asyncio

import click
from rich.panel import Panel

from printtrack.cli.common import console, run_with_session
from printtrack.db.repositories import PrinterRepository
from printtrack.errors import PrintTrackError
from printtrack.octoprint import OctoPrintClient


@click.group()
def octoprint():
    """OctoPrint status and job control."""
    pass


def _printer_link(ctx: click.Context, printer: str):
    async def handler(session, owner):
        repo = PrinterRepository(session, owner)
        found = await repo.find(printer)
        return await repo.get_octoprint_link(found.id)

    return run_with_session(ctx, handler)


def _run(ctx: click.Context, coro):
    try:
        return asyncio.run(coro)
    except PrintTrackError as e:
        console.print(f"[red]Error: {e}[/red]")
        ctx.exit(1)


def _temp(actual, target) -> str:
    if actual is None:
        return "-"
    return f"{actual:.0f}°C / {target or 0:.0f}°C"


@octoprint.command()
@click.argument("printer")
@click.pass_context
def status(ctx: click.Context, printer: str) -> None:
    """Show printer state, current job and webcam URL."""
    link = _printer_link(ctx, printer)
    result = _run(ctx, OctoPrintClient.for_printer(link).get_status())

    lines = []
    if result.printer:
        lines.append(f"State: [bold]{result.printer.state}[/bold]")
        lines.append(f"Nozzle: {_temp(result.printer.tool_actual, result.printer.tool_target)}")
        lines.append(f"Bed: {_temp(result.printer.bed_actual, result.printer.bed_target)}")
    if result.job:
        lines.append(f"Job: {result.job.file_name or '-'} ({result.job.state})")
        if result.job.completion is not None:
            lines.append(f"Progress: {result.job.completion:.1f}%")
        if result.job.time_left_minutes is not None:
            lines.append(f"Time Left: {result.job.time_left_minutes} min")
    if result.webcam_url:
        lines.append(f"Webcam: {result.webcam_url}")

    console.print(Panel("\n".join(lines) or "No data", title=f"OctoPrint: {link.name}"))
    for section, message in result.errors.items():
        console.print(f"[yellow]{section}: {message}[/yellow]")


@octoprint.command()
@click.argument("printer")
@click.pass_context
def files(ctx: click.Context, printer: str) -> None:
    """List files stored on OctoPrint."""
    link = _printer_link(ctx, printer)
    names = _run(ctx, OctoPrintClient.for_printer(link).list_files())
    if not names:
        console.print("[yellow]No files[/yellow]")
        return
    for name in names:
        console.print(f"  {name}")


@octoprint.command()
@click.argument("printer")
@click.argument("command", type=click.Choice(list(OctoPrintClient.JOB_COMMANDS)))
@click.pass_context
def command(ctx: click.Context, printer: str, command: str) -> None:
    """Send start, cancel, pause or resume to the current job."""
    link = _printer_link(ctx, printer)
    _run(ctx, OctoPrintClient.for_printer(link).send_job_command(command))
    console.print(f"[green]Sent {command} to {link.name}[/green]")
