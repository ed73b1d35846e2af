"""Main CLI entry point for PrintTrack."""

from typing import Optional

import click

from printtrack import __version__
from printtrack.cli.common import DEFAULT_CLI_USER, console
from printtrack.config import get_settings
from printtrack.utils import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="PrintTrack")
@click.option("--user", "-u", help="Owner id for records (default: settings or 'local')")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, user: Optional[str], verbose: bool) -> None:
    """PrintTrack - 3D printer, print job and maintenance tracking.

    Keeps a log of printers, prints and maintenance and tells you which
    maintenance is due soon or overdue.
    """
    settings = get_settings()
    setup_logging("DEBUG" if verbose else settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["user"] = user or settings.default_user or DEFAULT_CLI_USER


# Import and register command groups
from printtrack.cli.printers_cmd import printers
from printtrack.cli.jobs_cmd import jobs
from printtrack.cli.maintenance_cmd import maintenance
from printtrack.cli.dashboard import dashboard
from printtrack.cli.export_cmd import export
from printtrack.cli.octoprint_cmd import octoprint

cli.add_command(printers)
cli.add_command(jobs)
cli.add_command(maintenance)
cli.add_command(dashboard)
cli.add_command(export)
cli.add_command(octoprint)


@cli.command()
@click.option("--host", "-h", help="Host to bind to (default from settings)")
@click.option("--port", "-p", type=int, help="Port to bind to (default from settings)")
def serve(host: Optional[str], port: Optional[int]) -> None:
    """Start the HTTP API server."""
    import uvicorn
    from printtrack.api import create_app

    settings = get_settings()
    host = host or settings.web_host
    port = port or settings.web_port

    console.print(f"[green]PrintTrack API running at http://{host}:{port}/api/v1/docs[/green]")
    uvicorn.run(create_app(), host=host, port=port, log_level=settings.log_level.lower())


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show system status and configuration."""
    settings = get_settings()

    console.print("[bold]PrintTrack Status[/bold]")
    console.print(f"Version: {__version__}")
    console.print()
    console.print("[bold]Configuration:[/bold]")
    console.print(f"  Database: {settings.database_url}")
    console.print(f"  Data Directory: {settings.data_dir}")
    console.print(f"  CLI User: {ctx.obj['user']}")
    console.print(f"  Remaining Policy: {settings.remaining_policy.value}")
    console.print()
    console.print("[bold]API Server:[/bold]")
    console.print(f"  Address: http://{settings.web_host}:{settings.web_port}")
    console.print(f"  OctoPrint Timeout: {settings.octoprint_timeout:g}s")


if __name__ == "__main__":
    cli()
