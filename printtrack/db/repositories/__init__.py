"""Repository classes for database access.

Every repository except UserRepository is bound to one owner.
"""

from printtrack.db.repositories.base import OwnedRepository
from printtrack.db.repositories.users import UserRepository
from printtrack.db.repositories.printers import PrinterRepository
from printtrack.db.repositories.jobs import PrintJobRepository, JOB_STATUSES
from printtrack.db.repositories.maintenance import (
    MaintenanceLogRepository,
    MaintenanceIntervalRepository,
    validate_thresholds,
)

__all__ = [
    "OwnedRepository",
    "UserRepository",
    "PrinterRepository",
    "PrintJobRepository",
    "JOB_STATUSES",
    "MaintenanceLogRepository",
    "MaintenanceIntervalRepository",
    "validate_thresholds",
]
