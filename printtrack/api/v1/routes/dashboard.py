"""Dashboard route."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.analytics import ReportGenerator, ReportPeriod
from printtrack.auth import CurrentOwner
from printtrack.config import get_settings
from printtrack.db import get_db
from printtrack.db.repositories import PrinterRepository
from printtrack.db.snapshot import load_snapshot

router = APIRouter()


@router.get("")
async def get_dashboard(
    owner: CurrentOwner,
    view: ReportPeriod = ReportPeriod.DAY,
    db: AsyncSession = Depends(get_db)
):
    """Material usage, print time, maintenance counts and printer status."""
    printers = await PrinterRepository(db, owner).get_all()
    snapshot = await load_snapshot(db, owner)

    report = ReportGenerator(get_settings().remaining_policy).generate_report(
        snapshot,
        printers=[p.to_dict() for p in printers],
        period=view,
    )
    return report.to_dict()
