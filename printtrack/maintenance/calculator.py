"""Maintenance due calculator.

Works out, for each configured maintenance interval, how much a printer has
been used since it was last serviced and whether service is due. Every
function here is pure: inputs are read-only snapshots, nothing is mutated,
and malformed data degrades to zero usage instead of raising.
"""

import math
from typing import Iterable, List, Optional, Sequence, Union

from printtrack.utils import get_logger, parse_timestamp
from printtrack.maintenance.models import (
    DueStatus,
    MaintenanceDue,
    MaintenanceInterval,
    MaintenanceLogEntry,
    MaintenanceSnapshot,
    MaintenanceUsage,
    PrintJob,
    Remaining,
    RemainingPolicy,
)

logger = get_logger("maintenance.calculator")

PRINTER_OK = "OK"
PRINTER_MAINTENANCE_DUE = "Maintenance Due"


def find_last_service(
    interval: MaintenanceInterval,
    logs: Iterable[MaintenanceLogEntry],
) -> Optional[MaintenanceLogEntry]:
    """
    Find the most recent log for the interval's printer and type.

    Logs with unparsable dates are not candidates. Ties on date go to the
    highest entry id so the choice is deterministic.
    """
    latest = None
    latest_key = None
    for log in logs:
        if log.printer_id != interval.printer_id or log.type != interval.type:
            continue
        performed = parse_timestamp(log.date)
        if performed is None:
            continue
        key = (performed, str(log.id or ""))
        if latest_key is None or key > latest_key:
            latest, latest_key = log, key
    return latest


def compute_usage_since(
    interval: MaintenanceInterval,
    logs: Iterable[MaintenanceLogEntry],
    jobs: Iterable[PrintJob],
) -> MaintenanceUsage:
    """
    Count prints and print hours since the interval was last serviced.

    Args:
        interval: Interval identifying the printer and maintenance type
        logs: Maintenance log entries (any printer/type)
        jobs: Print jobs (any printer)

    Returns:
        MaintenanceUsage with jobs_since, hours_since and the baseline log
    """
    last_service = find_last_service(interval, logs)
    baseline = parse_timestamp(last_service.date) if last_service else None

    jobs_since = 0
    hours_since = 0.0
    for job in jobs:
        if job.printer_id != interval.printer_id:
            continue
        if baseline is not None:
            started = parse_timestamp(job.start_time)
            # Without a usable start time a job cannot be placed after the baseline
            if started is None or started <= baseline:
                continue
        jobs_since += 1
        hours_since += job.duration_hours

    return MaintenanceUsage(
        jobs_since=jobs_since,
        hours_since=hours_since,
        last_service=last_service,
    )


def compute_status(
    interval: MaintenanceInterval,
    jobs_since: int,
    hours_since: float,
) -> DueStatus:
    """
    Classify usage against the interval thresholds.

    Either axis reaching its threshold makes the interval overdue; being
    within one unit of a threshold makes it due soon. An axis without a
    threshold is never evaluated.
    """
    prints = interval.prints_threshold
    hours = interval.hours_threshold

    if (prints is not None and jobs_since >= prints) or (
        hours is not None and hours_since >= hours
    ):
        return DueStatus.OVERDUE

    if (prints is not None and jobs_since >= prints - 1) or (
        hours is not None and hours_since >= hours - 1
    ):
        return DueStatus.DUE_SOON

    return DueStatus.OK


def compute_remaining(
    interval: MaintenanceInterval,
    jobs_since: int,
    hours_since: float,
    policy: RemainingPolicy = RemainingPolicy.TRUE_REMAINING,
    serviced: bool = False,
) -> Remaining:
    """
    Remaining prints and hours before service is due.

    Negative values mean overdue by that amount. Hours are rounded to one
    decimal. With RESET_ON_LOG the full interval is reported whenever the
    interval has been serviced at least once.
    """
    prints = interval.prints_threshold
    hours = interval.hours_threshold

    if policy == RemainingPolicy.RESET_ON_LOG and serviced:
        return Remaining(
            prints_remaining=prints,
            hours_remaining=round(float(hours), 1) if hours is not None else None,
        )

    return Remaining(
        prints_remaining=prints - jobs_since if prints is not None else None,
        hours_remaining=round(hours - hours_since, 1) if hours is not None else None,
    )


def urgency_key(due: MaintenanceDue) -> float:
    """Smaller is more urgent; hours are compared as whole days."""
    candidates = []
    if due.prints_remaining is not None:
        candidates.append(due.prints_remaining)
    if due.hours_remaining is not None:
        candidates.append(math.floor(due.hours_remaining / 24))
    return min(candidates) if candidates else math.inf


def rank_by_urgency(due_list: Iterable[MaintenanceDue]) -> List[MaintenanceDue]:
    """Sort due entries, most urgent first, unconfigured intervals last."""
    return sorted(due_list, key=urgency_key)


def describe_remaining(due: Union[MaintenanceDue, Remaining]) -> str:
    """Human readable remaining/overdue amounts, e.g. "3 prints left, 1.5 hours left"."""
    return ", ".join(remaining_messages(due))


def remaining_messages(due: Union[MaintenanceDue, Remaining]) -> List[str]:
    """One message per configured axis."""
    parts = []
    if due.prints_remaining is not None:
        left = due.prints_remaining
        if left < 0:
            parts.append(f"Overdue by {abs(left)} prints")
        elif left == 0:
            parts.append("Due now (prints)")
        else:
            parts.append(f"{left} prints left")
    if due.hours_remaining is not None:
        left = due.hours_remaining
        if left < 0:
            parts.append(f"Overdue by {abs(left):.1f} hours")
        elif left == 0:
            parts.append("Due now (hours)")
        else:
            parts.append(f"{left:.1f} hours left")
    return parts


def evaluate_interval(
    interval: MaintenanceInterval,
    logs: Sequence[MaintenanceLogEntry],
    jobs: Sequence[PrintJob],
    policy: RemainingPolicy = RemainingPolicy.TRUE_REMAINING,
) -> MaintenanceDue:
    """Usage, status and remaining amounts for one interval."""
    usage = compute_usage_since(interval, logs, jobs)
    status = compute_status(interval, usage.jobs_since, usage.hours_since)
    remaining = compute_remaining(
        interval,
        usage.jobs_since,
        usage.hours_since,
        policy=policy,
        serviced=usage.last_service is not None,
    )
    due = MaintenanceDue(
        interval=interval,
        status=status,
        jobs_since=usage.jobs_since,
        hours_since=usage.hours_since,
        prints_remaining=remaining.prints_remaining,
        hours_remaining=remaining.hours_remaining,
        last_service_date=usage.last_service.date if usage.last_service else None,
    )
    due.messages = remaining_messages(due)
    return due


def evaluate_snapshot(
    snapshot: MaintenanceSnapshot,
    policy: RemainingPolicy = RemainingPolicy.TRUE_REMAINING,
    printer_id: Optional[str] = None,
) -> List[MaintenanceDue]:
    """Evaluate every interval in the snapshot, ranked by urgency."""
    intervals = snapshot.intervals
    if printer_id is not None:
        intervals = tuple(i for i in intervals if i.printer_id == printer_id)

    results = [
        evaluate_interval(interval, snapshot.logs, snapshot.jobs, policy=policy)
        for interval in intervals
    ]
    logger.debug(f"Evaluated {len(results)} maintenance intervals")
    return rank_by_urgency(results)


def printer_status(snapshot: MaintenanceSnapshot, printer_id: str) -> str:
    """Summary status for a printer: "Maintenance Due" when any interval is overdue."""
    for due in evaluate_snapshot(snapshot, printer_id=printer_id):
        if due.status == DueStatus.OVERDUE:
            return PRINTER_MAINTENANCE_DUE
    return PRINTER_OK


class MaintenanceDueCalculator:
    """
    Maintenance due calculator bound to a remaining-usage policy.

    Stateless apart from the policy; safe to share between requests.
    """

    def __init__(self, policy: RemainingPolicy = RemainingPolicy.TRUE_REMAINING):
        """
        Initialize calculator.

        Args:
            policy: How remaining usage is reported after a service
        """
        self.policy = RemainingPolicy(policy)

    def usage_since(self, interval, logs, jobs) -> MaintenanceUsage:
        return compute_usage_since(interval, logs, jobs)

    def status(self, interval, jobs_since: int, hours_since: float) -> DueStatus:
        return compute_status(interval, jobs_since, hours_since)

    def remaining(self, interval, jobs_since: int, hours_since: float, serviced: bool = False) -> Remaining:
        return compute_remaining(interval, jobs_since, hours_since, policy=self.policy, serviced=serviced)

    def evaluate(self, interval, logs, jobs) -> MaintenanceDue:
        return evaluate_interval(interval, logs, jobs, policy=self.policy)

    def evaluate_snapshot(
        self,
        snapshot: MaintenanceSnapshot,
        printer_id: Optional[str] = None,
    ) -> List[MaintenanceDue]:
        return evaluate_snapshot(snapshot, policy=self.policy, printer_id=printer_id)

    def due_items(self, snapshot: MaintenanceSnapshot) -> List[MaintenanceDue]:
        """Only entries that are due soon or overdue, most urgent first."""
        return [d for d in self.evaluate_snapshot(snapshot) if d.status != DueStatus.OK]

    def rank(self, due_list: Iterable[MaintenanceDue]) -> List[MaintenanceDue]:
        return rank_by_urgency(due_list)


def evaluate_maintenance(
    intervals: Iterable[MaintenanceInterval],
    logs: Iterable[MaintenanceLogEntry],
    jobs: Iterable[PrintJob],
    policy: RemainingPolicy = RemainingPolicy.TRUE_REMAINING,
) -> List[MaintenanceDue]:
    """
    Convenience function to evaluate plain collections.

    Args:
        intervals: Maintenance intervals
        logs: Maintenance log entries
        jobs: Print jobs
        policy: Remaining usage policy

    Returns:
        Due entries ranked by urgency
    """
    snapshot = MaintenanceSnapshot.of(intervals, logs, jobs)
    return MaintenanceDueCalculator(policy).evaluate_snapshot(snapshot)
