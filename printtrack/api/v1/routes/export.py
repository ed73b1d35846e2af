"""CSV export routes."""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.analytics import jobs_csv_text, logs_csv_text
from printtrack.auth import CurrentOwner
from printtrack.db import get_db
from printtrack.db.repositories import (
    MaintenanceLogRepository,
    PrinterRepository,
    PrintJobRepository,
)

router = APIRouter()


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/jobs.csv")
async def export_jobs(
    owner: CurrentOwner,
    printer_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """Download print jobs as CSV."""
    names = await PrinterRepository(db, owner).names()
    jobs = await PrintJobRepository(db, owner).get_all(printer_id=printer_id)
    return _csv_response(jobs_csv_text([j.to_entity() for j in jobs], names), "print_jobs.csv")


@router.get("/maintenance.csv")
async def export_maintenance(
    owner: CurrentOwner,
    printer_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """Download maintenance logs as CSV."""
    names = await PrinterRepository(db, owner).names()
    logs = await MaintenanceLogRepository(db, owner).get_all(printer_id=printer_id)
    return _csv_response(logs_csv_text([log.to_entity() for log in logs], names), "maintenance_logs.csv")
