"""OctoPrint integration."""

from printtrack.octoprint.client import (
    OFFLINE,
    JobProgress,
    OctoPrintClient,
    OctoPrintStatus,
    PrinterState,
)

__all__ = [
    "OFFLINE",
    "JobProgress",
    "OctoPrintClient",
    "OctoPrintStatus",
    "PrinterState",
]
