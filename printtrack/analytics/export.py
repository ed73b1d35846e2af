"""CSV export of print jobs and maintenance logs."""

import csv
import io
from typing import Dict, Iterable, Optional, TextIO

from printtrack.maintenance.models import MaintenanceLogEntry, PrintJob

JOB_FIELDS = [
    "id", "printer", "name", "status", "material", "grams_used",
    "start_time", "end_time", "duration_minutes", "source", "notes",
]

LOG_FIELDS = ["id", "printer", "type", "date", "notes"]


def _blank(value) -> str:
    return "" if value is None else value


def export_jobs_csv(
    jobs: Iterable[PrintJob],
    out: TextIO,
    printer_names: Optional[Dict[str, str]] = None,
) -> int:
    """
    Write print jobs as CSV.

    Args:
        jobs: Jobs to export
        out: Text stream to write to
        printer_names: Map of printer id to display name

    Returns:
        Number of rows written
    """
    names = printer_names or {}
    writer = csv.DictWriter(out, fieldnames=JOB_FIELDS)
    writer.writeheader()

    count = 0
    for job in jobs:
        writer.writerow({
            "id": job.id,
            "printer": names.get(job.printer_id, job.printer_id),
            "name": _blank(job.name),
            "status": _blank(job.status),
            "material": _blank(job.material),
            "grams_used": _blank(job.grams_used),
            "start_time": _blank(job.start_time),
            "end_time": _blank(job.end_time),
            "duration_minutes": round(job.duration_hours * 60, 1),
            "source": job.source,
            "notes": _blank(job.notes),
        })
        count += 1
    return count


def export_logs_csv(
    logs: Iterable[MaintenanceLogEntry],
    out: TextIO,
    printer_names: Optional[Dict[str, str]] = None,
) -> int:
    """Write maintenance logs as CSV, returning the row count."""
    names = printer_names or {}
    writer = csv.DictWriter(out, fieldnames=LOG_FIELDS)
    writer.writeheader()

    count = 0
    for log in logs:
        writer.writerow({
            "id": log.id,
            "printer": names.get(log.printer_id, log.printer_id),
            "type": log.type,
            "date": _blank(log.date),
            "notes": _blank(log.notes),
        })
        count += 1
    return count


def jobs_csv_text(jobs: Iterable[PrintJob], printer_names: Optional[Dict[str, str]] = None) -> str:
    """Jobs CSV as a string."""
    output = io.StringIO()
    export_jobs_csv(jobs, output, printer_names)
    return output.getvalue()


def logs_csv_text(logs: Iterable[MaintenanceLogEntry], printer_names: Optional[Dict[str, str]] = None) -> str:
    """Maintenance logs CSV as a string."""
    output = io.StringIO()
    export_logs_csv(logs, output, printer_names)
    return output.getvalue()
