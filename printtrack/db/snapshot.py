"""Load a consistent maintenance snapshot for one owner."""

from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.db.repositories import (
    MaintenanceIntervalRepository,
    MaintenanceLogRepository,
    PrintJobRepository,
)
from printtrack.maintenance.models import MaintenanceSnapshot
from printtrack.utils import get_logger

logger = get_logger("db.snapshot")


async def load_snapshot(session: AsyncSession, user_id: str) -> MaintenanceSnapshot:
    """
    Read intervals, logs and jobs for an owner within one session.

    Args:
        session: Open database session
        user_id: Owner ID

    Returns:
        Immutable MaintenanceSnapshot detached from the session
    """
    intervals = await MaintenanceIntervalRepository(session, user_id).get_all()
    logs = await MaintenanceLogRepository(session, user_id).get_all()
    jobs = await PrintJobRepository(session, user_id).get_all()

    snapshot = MaintenanceSnapshot.of(
        intervals=[i.to_entity() for i in intervals],
        logs=[log.to_entity() for log in logs],
        jobs=[j.to_entity() for j in jobs],
    )
    logger.debug(
        f"Loaded snapshot for {user_id}: {len(snapshot.intervals)} intervals, "
        f"{len(snapshot.logs)} logs, {len(snapshot.jobs)} jobs"
    )
    return snapshot
