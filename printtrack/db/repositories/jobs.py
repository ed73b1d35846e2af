"""Print job repository for job-related database operations."""

from datetime import datetime, timedelta
from typing import Optional, List, Union

from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.db.models import PrintJob, utcnow_naive
from printtrack.db.repositories.base import OwnedRepository, as_db_datetime
from printtrack.errors import ValidationError
from printtrack.maintenance.models import JobSource

JOB_STATUSES = ["Success", "Failed", "In Progress"]

Timestamp = Union[str, datetime, None]


def _job_source(value: str) -> str:
    try:
        return JobSource(value).value
    except ValueError:
        raise ValidationError(f"Unknown job source: {value!r}")


class PrintJobRepository(OwnedRepository[PrintJob]):
    """Repository for PrintJob entities."""

    kind = "Print job"

    def __init__(self, session: AsyncSession, user_id: str):
        super().__init__(session, PrintJob, user_id)

    def _default_order(self) -> tuple:
        return (PrintJob.start_time.desc(), PrintJob.created_at.desc())

    async def create_job(
        self,
        printer_id: str,
        name: str,
        start_time: Timestamp = None,
        end_time: Timestamp = None,
        status: Optional[str] = None,
        material: Optional[str] = None,
        grams_used: Optional[float] = None,
        source: str = JobSource.MANUAL.value,
        notes: Optional[str] = None,
    ) -> PrintJob:
        """Create a job on an owned printer."""
        if not name or not name.strip():
            raise ValidationError("Job name is required")
        await self.require_printer(printer_id)
        return await self.create(
            printer_id=printer_id,
            name=name.strip(),
            start_time=as_db_datetime(start_time, "start_time"),
            end_time=as_db_datetime(end_time, "end_time"),
            status=status,
            material=material,
            grams_used=grams_used,
            source=_job_source(source),
            notes=notes,
        )

    async def record_duration(
        self,
        printer_id: str,
        name: str,
        hours: int = 0,
        minutes: int = 0,
        ended_at: Optional[datetime] = None,
        **fields,
    ) -> PrintJob:
        """
        Create a job that ended now (or at ended_at) and lasted hours:minutes.

        Args:
            printer_id: Owned printer ID
            name: Job name
            hours: Duration hours
            minutes: Duration minutes
            ended_at: End instant, defaults to now
            **fields: Other job fields (status, material, grams_used, notes)

        Returns:
            Created PrintJob
        """
        if hours < 0 or minutes < 0:
            raise ValidationError("Duration cannot be negative")
        end = as_db_datetime(ended_at) if ended_at else utcnow_naive()
        start = end - timedelta(hours=hours, minutes=minutes)
        return await self.create_job(printer_id, name, start_time=start, end_time=end, **fields)

    async def update_job(self, job_id: str, **updates) -> PrintJob:
        """Update a job, validating printer ownership and timestamps."""
        if updates.get("printer_id"):
            await self.require_printer(updates["printer_id"])
        for key in ("start_time", "end_time"):
            if key in updates:
                updates[key] = as_db_datetime(updates[key], key)
        if "source" in updates and updates["source"] is not None:
            updates["source"] = _job_source(updates["source"])
        return await self.update(job_id, **updates)

    async def get_by_printer(self, printer_id: str) -> List[PrintJob]:
        """Get jobs for one printer, newest first."""
        return await self.get_all(printer_id=printer_id)

    async def get_recent(self, limit: int = 3) -> List[PrintJob]:
        """Most recent jobs by start time."""
        return await self.get_all(limit=limit)
