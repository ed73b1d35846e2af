"""Dashboard analytics.

Aggregates print jobs and maintenance logs into the figures shown on the
dashboard: material usage, print time, maintenance counts and per-printer
maintenance status.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from printtrack.utils import get_logger
from printtrack.maintenance.calculator import MaintenanceDueCalculator, printer_status
from printtrack.maintenance.models import (
    JobSource,
    MaintenanceDue,
    MaintenanceSnapshot,
    PrintJob,
    RemainingPolicy,
)

logger = get_logger("analytics.reports")

RECENT_JOBS = 3
UNKNOWN_MATERIAL = "Unknown"


class ReportPeriod(str, Enum):
    """Buckets for print time per period."""
    DAY = "day"
    WEEK = "week"


@dataclass
class PrinterSummary:
    """Printer card on the dashboard."""
    printer_id: str
    name: str
    model: Optional[str]
    status: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "printer_id": self.printer_id,
            "name": self.name,
            "model": self.model,
            "status": self.status,
        }


@dataclass
class DashboardReport:
    """
    Everything the dashboard renders for one owner.

    All figures are derived from a single snapshot.
    """

    period: ReportPeriod
    grams_by_material: Dict[str, float] = field(default_factory=dict)
    avg_print_minutes: float = 0.0
    print_minutes_by_period: Dict[str, float] = field(default_factory=dict)
    maintenance_by_type: Dict[str, int] = field(default_factory=dict)
    manual_jobs: int = 0
    octoprint_jobs: int = 0
    recent_jobs: List[PrintJob] = field(default_factory=list)
    has_more_jobs: bool = False
    printers: List[PrinterSummary] = field(default_factory=list)
    due_maintenance: List[MaintenanceDue] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        """False when there is nothing to chart yet."""
        return bool(
            self.grams_by_material
            or self.avg_print_minutes > 0
            or self.manual_jobs
            or self.octoprint_jobs
            or self.print_minutes_by_period
            or self.maintenance_by_type
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "period": self.period.value,
            "has_data": self.has_data,
            "grams_by_material": [
                {"material": m, "grams": g} for m, g in self.grams_by_material.items()
            ],
            "avg_print_minutes": round(self.avg_print_minutes, 1),
            "print_minutes_by_period": [
                {"period": p, "minutes": round(m, 1)} for p, m in self.print_minutes_by_period.items()
            ],
            "maintenance_by_type": [
                {"type": t, "count": c} for t, c in self.maintenance_by_type.items()
            ],
            "manual_jobs": self.manual_jobs,
            "octoprint_jobs": self.octoprint_jobs,
            "recent_jobs": [j.to_dict() for j in self.recent_jobs],
            "has_more_jobs": self.has_more_jobs,
            "printers": [p.to_dict() for p in self.printers],
            "due_maintenance": [d.to_dict() for d in self.due_maintenance],
        }


def _job_minutes(job: PrintJob) -> float:
    return job.duration_hours * 60


def period_key(job: PrintJob, period: ReportPeriod) -> Optional[str]:
    """Bucket label for a job's start: YYYY-MM-DD or ISO week YYYY-Www."""
    started = job.started_at
    if started is None:
        return None
    if period == ReportPeriod.WEEK:
        year, week, _ = started.isocalendar()
        return f"{year}-W{week:02d}"
    return started.strftime("%Y-%m-%d")


def grams_by_material(jobs: Iterable[PrintJob]) -> Dict[str, float]:
    """Total grams per material; missing material counts as Unknown."""
    totals: Dict[str, float] = {}
    for job in jobs:
        material = job.material or UNKNOWN_MATERIAL
        totals[material] = totals.get(material, 0.0) + (job.grams_used or 0.0)
    return totals


def average_print_minutes(jobs: Iterable[PrintJob]) -> float:
    """Mean duration over jobs with a positive duration."""
    minutes = [m for m in (_job_minutes(j) for j in jobs) if m > 0]
    return sum(minutes) / len(minutes) if minutes else 0.0


def print_minutes_by_period(jobs: Iterable[PrintJob], period: ReportPeriod) -> Dict[str, float]:
    """Print minutes per day or ISO week, oldest bucket first."""
    totals: Dict[str, float] = {}
    for job in jobs:
        minutes = _job_minutes(job)
        key = period_key(job, period)
        if key is None or minutes <= 0:
            continue
        totals[key] = totals.get(key, 0.0) + minutes
    return dict(sorted(totals.items()))


def maintenance_counts(snapshot: MaintenanceSnapshot) -> Dict[str, int]:
    """Number of maintenance logs per type."""
    counts: Dict[str, int] = {}
    for log in snapshot.logs:
        counts[log.type] = counts.get(log.type, 0) + 1
    return counts


def _recent_first(jobs: Iterable[PrintJob]) -> List[PrintJob]:
    dated = [j for j in jobs if j.started_at is not None]
    undated = [j for j in jobs if j.started_at is None]
    return sorted(dated, key=lambda j: j.started_at, reverse=True) + undated


class ReportGenerator:
    """
    Builds dashboard reports.

    Works on plain snapshots so it can run anywhere a snapshot is available.
    """

    def __init__(self, policy: RemainingPolicy = RemainingPolicy.TRUE_REMAINING):
        """
        Initialize report generator.

        Args:
            policy: Remaining usage policy passed to the maintenance calculator
        """
        self.calculator = MaintenanceDueCalculator(policy)

    def generate_report(
        self,
        snapshot: MaintenanceSnapshot,
        printers: Optional[List[Dict[str, Any]]] = None,
        period: ReportPeriod = ReportPeriod.DAY,
    ) -> DashboardReport:
        """
        Generate the dashboard report.

        Args:
            snapshot: Intervals, logs and jobs for one owner
            printers: Printer rows (id, name, model)
            period: Bucket size for print time

        Returns:
            DashboardReport
        """
        jobs = list(snapshot.jobs)
        recent = _recent_first(jobs)

        octoprint_jobs = sum(1 for j in jobs if j.source == JobSource.OCTOPRINT.value)

        summaries = [
            PrinterSummary(
                printer_id=p["id"],
                name=p.get("name") or "-",
                model=p.get("model"),
                status=printer_status(snapshot, p["id"]),
            )
            for p in printers or []
        ]

        report = DashboardReport(
            period=period,
            grams_by_material=grams_by_material(jobs),
            avg_print_minutes=average_print_minutes(jobs),
            print_minutes_by_period=print_minutes_by_period(jobs, period),
            maintenance_by_type=maintenance_counts(snapshot),
            manual_jobs=len(jobs) - octoprint_jobs,
            octoprint_jobs=octoprint_jobs,
            recent_jobs=recent[:RECENT_JOBS],
            has_more_jobs=len(recent) > RECENT_JOBS,
            printers=summaries,
            due_maintenance=self.calculator.due_items(snapshot),
        )
        logger.debug(f"Dashboard report: {len(jobs)} jobs, {len(report.due_maintenance)} due items")
        return report


def generate_report(
    snapshot: MaintenanceSnapshot,
    printers: Optional[List[Dict[str, Any]]] = None,
    period: ReportPeriod = ReportPeriod.DAY,
) -> DashboardReport:
    """Convenience function to generate a dashboard report."""
    return ReportGenerator().generate_report(snapshot, printers, period)
