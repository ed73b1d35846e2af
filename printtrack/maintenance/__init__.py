"""Maintenance module for PrintTrack.

Computes due/overdue status and remaining usage for maintenance intervals.
"""

from printtrack.maintenance.models import (
    DueStatus,
    JobSource,
    MaintenanceDue,
    MaintenanceInterval,
    MaintenanceLogEntry,
    MaintenanceSnapshot,
    MaintenanceUsage,
    PrintJob,
    Remaining,
    RemainingPolicy,
)
from printtrack.maintenance.calculator import (
    MaintenanceDueCalculator,
    compute_usage_since,
    compute_status,
    compute_remaining,
    rank_by_urgency,
    describe_remaining,
    evaluate_interval,
    evaluate_snapshot,
    evaluate_maintenance,
    printer_status,
)
from printtrack.maintenance.catalog import (
    MAINTENANCE_TYPES,
    MaintenanceTypeInfo,
    get_type_info,
    is_known_type,
    maintenance_type_names,
)

__all__ = [
    "DueStatus",
    "JobSource",
    "MaintenanceDue",
    "MaintenanceInterval",
    "MaintenanceLogEntry",
    "MaintenanceSnapshot",
    "MaintenanceUsage",
    "PrintJob",
    "Remaining",
    "RemainingPolicy",
    "MaintenanceDueCalculator",
    "compute_usage_since",
    "compute_status",
    "compute_remaining",
    "rank_by_urgency",
    "describe_remaining",
    "evaluate_interval",
    "evaluate_snapshot",
    "evaluate_maintenance",
    "printer_status",
    "MAINTENANCE_TYPES",
    "MaintenanceTypeInfo",
    "get_type_info",
    "is_known_type",
    "maintenance_type_names",
]
