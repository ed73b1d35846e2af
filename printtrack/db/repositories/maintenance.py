"""Maintenance log and interval repositories."""

from datetime import datetime
from typing import Optional, List, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.db.models import MaintenanceLog, MaintenanceInterval, utcnow_naive
from printtrack.db.repositories.base import OwnedRepository, as_db_datetime
from printtrack.errors import DuplicateIntervalError, ValidationError
from printtrack.maintenance.catalog import is_known_type
from printtrack.utils import get_logger

logger = get_logger("db.maintenance")


def _require_known_type(maintenance_type: str) -> str:
    if not maintenance_type or not is_known_type(maintenance_type):
        raise ValidationError(f"Unknown maintenance type: {maintenance_type!r}")
    return maintenance_type


def validate_thresholds(
    interval_prints: Optional[int],
    interval_hours: Optional[float],
) -> None:
    """Thresholds are optional but positive, and at least one must be set."""
    if interval_prints is None and interval_hours is None:
        raise ValidationError("Set interval_prints, interval_hours or both")
    if interval_prints is not None and interval_prints <= 0:
        raise ValidationError("interval_prints must be a positive integer")
    if interval_hours is not None and interval_hours <= 0:
        raise ValidationError("interval_hours must be positive")


class MaintenanceLogRepository(OwnedRepository[MaintenanceLog]):
    """Repository for MaintenanceLog entities."""

    kind = "Maintenance log"

    def __init__(self, session: AsyncSession, user_id: str):
        super().__init__(session, MaintenanceLog, user_id)

    def _default_order(self) -> tuple:
        return (MaintenanceLog.date.desc(), MaintenanceLog.created_at.desc())

    async def create_log(
        self,
        printer_id: str,
        maintenance_type: str,
        date: Union[str, datetime, None] = None,
        notes: Optional[str] = None,
    ) -> MaintenanceLog:
        """Record maintenance on an owned printer; date defaults to now."""
        _require_known_type(maintenance_type)
        await self.require_printer(printer_id)
        log = await self.create(
            printer_id=printer_id,
            type=maintenance_type,
            date=as_db_datetime(date, "date") or utcnow_naive(),
            notes=notes,
        )
        logger.info(f"Logged maintenance: {maintenance_type} on printer {printer_id}")
        return log

    async def log_now(self, printer_id: str, maintenance_type: str) -> MaintenanceLog:
        """Quick log: maintenance performed right now."""
        return await self.create_log(printer_id, maintenance_type)

    async def update_log(self, log_id: str, **updates) -> MaintenanceLog:
        """Correct notes, type, date or printer of a log."""
        if "type" in updates:
            _require_known_type(updates["type"])
        if updates.get("printer_id"):
            await self.require_printer(updates["printer_id"])
        if "date" in updates:
            date = as_db_datetime(updates["date"], "date")
            if date is None:
                raise ValidationError("Log date cannot be empty")
            updates["date"] = date
        return await self.update(log_id, **updates)

    async def get_for(self, printer_id: str, maintenance_type: Optional[str] = None) -> List[MaintenanceLog]:
        """Logs for a printer, optionally one type, newest first."""
        return await self.get_all(printer_id=printer_id, type=maintenance_type)


class MaintenanceIntervalRepository(OwnedRepository[MaintenanceInterval]):
    """Repository for MaintenanceInterval entities."""

    kind = "Maintenance interval"

    def __init__(self, session: AsyncSession, user_id: str):
        super().__init__(session, MaintenanceInterval, user_id)

    async def get_for(self, printer_id: str, maintenance_type: str) -> Optional[MaintenanceInterval]:
        """The interval for a printer and type, if any."""
        result = await self.session.execute(
            self._owned().where(
                MaintenanceInterval.printer_id == printer_id,
                MaintenanceInterval.type == maintenance_type,
            )
        )
        return result.scalar_one_or_none()

    async def set_interval(
        self,
        printer_id: str,
        maintenance_type: str,
        interval_prints: Optional[int] = None,
        interval_hours: Optional[float] = None,
    ) -> MaintenanceInterval:
        """Create the interval for a printer and type.

        Raises DuplicateIntervalError when one already exists.
        """
        _require_known_type(maintenance_type)
        validate_thresholds(interval_prints, interval_hours)
        await self.require_printer(printer_id)

        if await self.get_for(printer_id, maintenance_type) is not None:
            raise DuplicateIntervalError(printer_id, maintenance_type)

        try:
            interval = await self.create(
                printer_id=printer_id,
                type=maintenance_type,
                interval_prints=interval_prints,
                interval_hours=interval_hours,
            )
        except IntegrityError as e:
            # A failed flush leaves the session unusable until rolled back
            await self.session.rollback()
            raise DuplicateIntervalError(printer_id, maintenance_type) from e

        logger.info(f"Interval set: {maintenance_type} on printer {printer_id}")
        return interval

    async def update_thresholds(
        self,
        interval_id: str,
        interval_prints: Optional[int] = None,
        interval_hours: Optional[float] = None,
    ) -> MaintenanceInterval:
        """Replace both thresholds of an interval."""
        validate_thresholds(interval_prints, interval_hours)
        return await self.update(
            interval_id,
            interval_prints=interval_prints,
            interval_hours=interval_hours,
        )
