"""Command-line interface for PrintTrack."""

from printtrack.cli.main import cli

__all__ = ["cli"]
