"""Maintenance data model.

Plain immutable records handed to the due calculator. They mirror the rows
kept in the record store but carry no database state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from printtrack.utils import parse_timestamp


class DueStatus(str, Enum):
    """Maintenance due status for one interval."""
    OK = "OK"
    DUE_SOON = "Due Soon"
    OVERDUE = "Overdue"


class RemainingPolicy(str, Enum):
    """How remaining usage is reported once an interval has been serviced."""
    TRUE_REMAINING = "true_remaining"  # Always from accumulated usage
    RESET_ON_LOG = "reset_on_log"  # Full interval whenever any log exists


class JobSource(str, Enum):
    """Where a print job record came from."""
    MANUAL = "manual"
    OCTOPRINT = "octoprint"


def _optional_number(value: Any, cast=float) -> Optional[Any]:
    """Coerce a stored threshold to a number, keeping absence as None."""
    if value is None or value == "":
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class MaintenanceInterval:
    """Service cadence for one (printer, maintenance type) pair."""
    printer_id: str
    type: str
    interval_prints: Optional[int] = None
    interval_hours: Optional[float] = None
    id: Optional[str] = None

    @property
    def prints_threshold(self) -> Optional[int]:
        """Print-count threshold, or None when that axis is not configured."""
        prints = _optional_number(self.interval_prints, int)
        if prints is None or prints <= 0:
            return None
        return prints

    @property
    def hours_threshold(self) -> Optional[float]:
        """Hour threshold, or None when that axis is not configured."""
        hours = _optional_number(self.interval_hours, float)
        if hours is None or hours <= 0:
            return None
        return hours

    @property
    def is_actionable(self) -> bool:
        """True when at least one threshold is configured."""
        return self.prints_threshold is not None or self.hours_threshold is not None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "printer_id": self.printer_id,
            "type": self.type,
            "interval_prints": self.interval_prints,
            "interval_hours": self.interval_hours,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MaintenanceInterval":
        """Create from a store row."""
        return cls(
            id=data.get("id"),
            printer_id=data["printer_id"],
            type=data["type"],
            interval_prints=_optional_number(data.get("interval_prints"), int),
            interval_hours=_optional_number(data.get("interval_hours"), float),
        )


@dataclass(frozen=True)
class MaintenanceLogEntry:
    """Record that a maintenance type was performed on a printer."""
    printer_id: str
    type: str
    date: Optional[str]
    id: Optional[str] = None
    notes: Optional[str] = None

    @property
    def performed_at(self):
        """Parsed service instant, or None when the date is unusable."""
        return parse_timestamp(self.date)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "printer_id": self.printer_id,
            "type": self.type,
            "date": self.date,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MaintenanceLogEntry":
        """Create from a store row."""
        return cls(
            id=data.get("id"),
            printer_id=data["printer_id"],
            type=data["type"],
            date=data.get("date"),
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class PrintJob:
    """A print recorded against a printer."""
    printer_id: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    id: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    material: Optional[str] = None
    grams_used: Optional[float] = None
    source: str = JobSource.MANUAL.value
    notes: Optional[str] = None

    @property
    def started_at(self):
        """Parsed start instant, or None."""
        return parse_timestamp(self.start_time)

    @property
    def duration_hours(self) -> float:
        """Elapsed hours, zero unless both ends parse and end > start."""
        start = parse_timestamp(self.start_time)
        end = parse_timestamp(self.end_time)
        if start is None or end is None or end <= start:
            return 0.0
        return (end - start).total_seconds() / 3600

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "printer_id": self.printer_id,
            "name": self.name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "status": self.status,
            "material": self.material,
            "grams_used": self.grams_used,
            "source": self.source,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PrintJob":
        """Create from a store row."""
        return cls(
            id=data.get("id"),
            printer_id=data["printer_id"],
            name=data.get("name"),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            status=data.get("status"),
            material=data.get("material"),
            grams_used=_optional_number(data.get("grams_used"), float),
            source=data.get("source") or JobSource.MANUAL.value,
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class MaintenanceSnapshot:
    """Consistent view of intervals, logs and jobs from one refresh."""
    intervals: Tuple[MaintenanceInterval, ...] = ()
    logs: Tuple[MaintenanceLogEntry, ...] = ()
    jobs: Tuple[PrintJob, ...] = ()

    @classmethod
    def of(
        cls,
        intervals: Iterable[MaintenanceInterval] = (),
        logs: Iterable[MaintenanceLogEntry] = (),
        jobs: Iterable[PrintJob] = (),
    ) -> "MaintenanceSnapshot":
        """Build a snapshot, copying the inputs into tuples."""
        return cls(intervals=tuple(intervals), logs=tuple(logs), jobs=tuple(jobs))

    def for_printer(self, printer_id: str) -> "MaintenanceSnapshot":
        """Restrict the snapshot to one printer."""
        return MaintenanceSnapshot(
            intervals=tuple(i for i in self.intervals if i.printer_id == printer_id),
            logs=tuple(log for log in self.logs if log.printer_id == printer_id),
            jobs=tuple(j for j in self.jobs if j.printer_id == printer_id),
        )


@dataclass(frozen=True)
class MaintenanceUsage:
    """Usage accumulated since the baseline."""
    jobs_since: int
    hours_since: float
    last_service: Optional[MaintenanceLogEntry] = None


@dataclass(frozen=True)
class Remaining:
    """Remaining usage on each axis; None when the axis is not configured."""
    prints_remaining: Optional[int] = None
    hours_remaining: Optional[float] = None


@dataclass
class MaintenanceDue:
    """Due status and remaining usage for one interval."""
    interval: MaintenanceInterval
    status: DueStatus
    jobs_since: int
    hours_since: float
    prints_remaining: Optional[int] = None
    hours_remaining: Optional[float] = None
    last_service_date: Optional[str] = None
    messages: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "interval": self.interval.to_dict(),
            "printer_id": self.interval.printer_id,
            "type": self.interval.type,
            "status": self.status.value,
            "jobs_since": self.jobs_since,
            "hours_since": round(self.hours_since, 2),
            "prints_remaining": self.prints_remaining,
            "hours_remaining": self.hours_remaining,
            "last_service_date": self.last_service_date,
            "messages": self.messages,
        }
