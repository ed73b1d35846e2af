"""Shared utilities for PrintTrack."""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

# Rich console for pretty output
console = Console()


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Set up logging with Rich handler."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    return logging.getLogger("printtrack")


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module."""
    return logging.getLogger(f"printtrack.{name}")


def ensure_dir(path: Union[str, Path]) -> Path:
    """Ensure a directory exists and return the Path."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# Python < 3.11 only accepts 3 or 6 fractional digits
_FRACTION = re.compile(r"(\d{2}:\d{2}:\d{2})[.,](\d+)")


def _normalize_fraction(text: str) -> str:
    return _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO instant into an aware UTC datetime.

    Accepts datetimes and ISO 8601 strings (a trailing ``Z`` is allowed, and
    fractional seconds of any length are cut or padded to microseconds).
    Naive values are taken as UTC. Anything else yields None.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        try:
            dt = datetime.fromisoformat(_normalize_fraction(value.strip().replace("Z", "+00:00")))
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """Format a datetime as an ISO string, UTC when naive."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def format_duration(seconds: float) -> str:
    """Format duration in seconds as human-readable string."""
    if seconds < 60:
        return f"{seconds:.0f}s"
    elif seconds < 3600:
        minutes = seconds // 60
        secs = seconds % 60
        return f"{minutes:.0f}m {secs:.0f}s"
    else:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        return f"{hours:.0f}h {minutes:.0f}m"
