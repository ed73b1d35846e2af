"""Print job routes."""

from datetime import datetime
from typing import Optional, List
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.auth import CurrentOwner
from printtrack.db import get_db
from printtrack.db.repositories import PrintJobRepository
from printtrack.maintenance import JobSource
from printtrack.utils import get_logger

logger = get_logger("api.jobs")
router = APIRouter()


class JobCreate(BaseModel):
    """New job, either with explicit start/end times or with a duration ending now."""
    printer_id: str
    name: str = Field(min_length=1, max_length=255)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration_hours: Optional[int] = Field(None, ge=0)
    duration_minutes: Optional[int] = Field(None, ge=0, lt=60)
    status: Optional[str] = None
    material: Optional[str] = None
    grams_used: Optional[float] = Field(None, ge=0)
    source: JobSource = JobSource.MANUAL
    notes: Optional[str] = None

    @property
    def has_duration(self) -> bool:
        return self.duration_hours is not None or self.duration_minutes is not None


class JobUpdate(BaseModel):
    printer_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: Optional[str] = None
    material: Optional[str] = None
    grams_used: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class JobResponse(BaseModel):
    id: str
    printer_id: str
    name: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    status: Optional[str] = None
    material: Optional[str] = None
    grams_used: Optional[float] = None
    source: str
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@router.get("", response_model=List[JobResponse])
async def list_jobs(
    owner: CurrentOwner,
    printer_id: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: AsyncSession = Depends(get_db)
):
    """List print jobs, newest first."""
    jobs = await PrintJobRepository(db, owner).get_all(skip=skip, limit=limit, printer_id=printer_id)
    return [JobResponse(**j.to_dict()) for j in jobs]


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    request: JobCreate,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Record a print job."""
    repo = PrintJobRepository(db, owner)
    fields = dict(
        status=request.status,
        material=request.material,
        grams_used=request.grams_used,
        source=request.source.value,
        notes=request.notes,
    )

    if request.has_duration:
        job = await repo.record_duration(
            request.printer_id,
            request.name,
            hours=request.duration_hours or 0,
            minutes=request.duration_minutes or 0,
            **fields,
        )
    else:
        job = await repo.create_job(
            request.printer_id,
            request.name,
            start_time=request.start_time,
            end_time=request.end_time,
            **fields,
        )

    await db.commit()
    logger.info(f"Print job recorded: {job.id}")
    return JobResponse(**job.to_dict())


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: str,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Get a print job."""
    job = await PrintJobRepository(db, owner).get(job_id)
    return JobResponse(**job.to_dict())


@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: str,
    request: JobUpdate,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Update a print job."""
    updates = request.model_dump(exclude_unset=True)
    job = await PrintJobRepository(db, owner).update_job(job_id, **updates)
    await db.commit()
    return JobResponse(**job.to_dict())


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(
    job_id: str,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Delete a print job."""
    repo = PrintJobRepository(db, owner)
    await repo.get(job_id)
    await repo.delete(job_id)
    await db.commit()
