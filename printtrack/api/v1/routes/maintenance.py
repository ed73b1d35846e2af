"""Maintenance log, interval and due-status routes."""

from datetime import datetime
from typing import Optional, List
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.auth import CurrentOwner
from printtrack.config import get_settings
from printtrack.db import get_db
from printtrack.db.repositories import MaintenanceIntervalRepository, MaintenanceLogRepository
from printtrack.db.snapshot import load_snapshot
from printtrack.maintenance import (
    MAINTENANCE_TYPES,
    DueStatus,
    MaintenanceDueCalculator,
    RemainingPolicy,
)
from printtrack.utils import get_logger

logger = get_logger("api.maintenance")
router = APIRouter()


class LogCreate(BaseModel):
    printer_id: str
    type: str
    date: Optional[datetime] = None
    notes: Optional[str] = None


class LogNow(BaseModel):
    printer_id: str
    type: str


class LogUpdate(BaseModel):
    printer_id: Optional[str] = None
    type: Optional[str] = None
    date: Optional[datetime] = None
    notes: Optional[str] = None


class LogResponse(BaseModel):
    id: str
    printer_id: str
    type: str
    date: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class IntervalCreate(BaseModel):
    printer_id: str
    type: str
    interval_prints: Optional[int] = Field(None, gt=0)
    interval_hours: Optional[float] = Field(None, gt=0)


class IntervalUpdate(BaseModel):
    interval_prints: Optional[int] = Field(None, gt=0)
    interval_hours: Optional[float] = Field(None, gt=0)


class IntervalResponse(BaseModel):
    id: str
    printer_id: str
    type: str
    interval_prints: Optional[int] = None
    interval_hours: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class DueResponse(BaseModel):
    printer_id: str
    type: str
    status: str
    jobs_since: int
    hours_since: float
    prints_remaining: Optional[int] = None
    hours_remaining: Optional[float] = None
    last_service_date: Optional[str] = None
    messages: List[str] = []
    interval: dict


class TypeResponse(BaseModel):
    name: str
    description: str
    suggested_prints: Optional[int] = None
    suggested_hours: Optional[float] = None
    instructions: List[str] = []


@router.get("/types", response_model=List[TypeResponse])
async def list_types():
    """Maintenance type catalog with suggested intervals."""
    return [TypeResponse(**t.to_dict()) for t in MAINTENANCE_TYPES]


# Logs

@router.get("/logs", response_model=List[LogResponse])
async def list_logs(
    owner: CurrentOwner,
    printer_id: Optional[str] = None,
    type: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """Maintenance history, newest first."""
    logs = await MaintenanceLogRepository(db, owner).get_all(printer_id=printer_id, type=type)
    return [LogResponse(**log.to_dict()) for log in logs]


@router.post("/logs", response_model=LogResponse, status_code=status.HTTP_201_CREATED)
async def create_log(
    request: LogCreate,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Record maintenance; date defaults to now."""
    log = await MaintenanceLogRepository(db, owner).create_log(
        request.printer_id,
        request.type,
        date=request.date,
        notes=request.notes,
    )
    await db.commit()
    return LogResponse(**log.to_dict())


@router.post("/logs/now", response_model=LogResponse, status_code=status.HTTP_201_CREATED)
async def log_now(
    request: LogNow,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Quick log: maintenance performed right now."""
    log = await MaintenanceLogRepository(db, owner).log_now(request.printer_id, request.type)
    await db.commit()
    return LogResponse(**log.to_dict())


@router.get("/logs/{log_id}", response_model=LogResponse)
async def get_log(
    log_id: str,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Get a maintenance log."""
    log = await MaintenanceLogRepository(db, owner).get(log_id)
    return LogResponse(**log.to_dict())


@router.patch("/logs/{log_id}", response_model=LogResponse)
async def update_log(
    log_id: str,
    request: LogUpdate,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Correct a maintenance log."""
    updates = request.model_dump(exclude_unset=True)
    log = await MaintenanceLogRepository(db, owner).update_log(log_id, **updates)
    await db.commit()
    return LogResponse(**log.to_dict())


@router.delete("/logs/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_log(
    log_id: str,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Delete a maintenance log."""
    repo = MaintenanceLogRepository(db, owner)
    await repo.get(log_id)
    await repo.delete(log_id)
    await db.commit()


# Intervals

@router.get("/intervals", response_model=List[IntervalResponse])
async def list_intervals(
    owner: CurrentOwner,
    printer_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """Configured maintenance intervals."""
    intervals = await MaintenanceIntervalRepository(db, owner).get_all(printer_id=printer_id)
    return [IntervalResponse(**i.to_dict()) for i in intervals]


@router.post("/intervals", response_model=IntervalResponse, status_code=status.HTTP_201_CREATED)
async def create_interval(
    request: IntervalCreate,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Set the interval for a printer and maintenance type."""
    interval = await MaintenanceIntervalRepository(db, owner).set_interval(
        request.printer_id,
        request.type,
        interval_prints=request.interval_prints,
        interval_hours=request.interval_hours,
    )
    await db.commit()
    return IntervalResponse(**interval.to_dict())


@router.patch("/intervals/{interval_id}", response_model=IntervalResponse)
async def update_interval(
    interval_id: str,
    request: IntervalUpdate,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Replace the thresholds of an interval."""
    interval = await MaintenanceIntervalRepository(db, owner).update_thresholds(
        interval_id,
        interval_prints=request.interval_prints,
        interval_hours=request.interval_hours,
    )
    await db.commit()
    return IntervalResponse(**interval.to_dict())


@router.delete("/intervals/{interval_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_interval(
    interval_id: str,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Remove an interval."""
    repo = MaintenanceIntervalRepository(db, owner)
    await repo.get(interval_id)
    await repo.delete(interval_id)
    await db.commit()


# Due status

@router.get("/due", response_model=List[DueResponse])
async def maintenance_due(
    owner: CurrentOwner,
    printer_id: Optional[str] = None,
    policy: Optional[RemainingPolicy] = None,
    include_ok: bool = True,
    db: AsyncSession = Depends(get_db)
):
    """Due status and remaining usage for every interval, most urgent first."""
    snapshot = await load_snapshot(db, owner)
    calculator = MaintenanceDueCalculator(policy or get_settings().remaining_policy)
    results = calculator.evaluate_snapshot(snapshot, printer_id=printer_id)
    if not include_ok:
        results = [d for d in results if d.status != DueStatus.OK]
    return [DueResponse(**d.to_dict()) for d in results]
