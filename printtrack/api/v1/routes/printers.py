"""Printer management routes."""

from typing import Optional, List
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.auth import CurrentOwner
from printtrack.db import get_db
from printtrack.db.repositories import PrinterRepository
from printtrack.db.snapshot import load_snapshot
from printtrack.maintenance import printer_status
from printtrack.utils import get_logger

logger = get_logger("api.printers")
router = APIRouter()


class PrinterCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    model: Optional[str] = None
    notes: Optional[str] = None
    octoprint_url: Optional[str] = None
    octoprint_api_key: Optional[str] = None


class PrinterUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    model: Optional[str] = None
    notes: Optional[str] = None
    octoprint_url: Optional[str] = None
    octoprint_api_key: Optional[str] = None


class PrinterResponse(BaseModel):
    id: str
    name: str
    model: Optional[str] = None
    notes: Optional[str] = None
    octoprint_url: Optional[str] = None
    has_octoprint: bool = False
    status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@router.get("", response_model=List[PrinterResponse])
async def list_printers(
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """List printers with their maintenance status."""
    printers = await PrinterRepository(db, owner).get_all()
    snapshot = await load_snapshot(db, owner)
    return [
        PrinterResponse(**p.to_dict(), status=printer_status(snapshot, p.id))
        for p in printers
    ]


@router.post("", response_model=PrinterResponse, status_code=status.HTTP_201_CREATED)
async def create_printer(
    request: PrinterCreate,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Add a printer."""
    printer = await PrinterRepository(db, owner).create(**request.model_dump())
    await db.commit()
    logger.info(f"Printer created: {printer.id}")
    return PrinterResponse(**printer.to_dict())


@router.get("/{printer_id}", response_model=PrinterResponse)
async def get_printer(
    printer_id: str,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Get printer details."""
    printer = await PrinterRepository(db, owner).get(printer_id)
    snapshot = await load_snapshot(db, owner)
    return PrinterResponse(**printer.to_dict(), status=printer_status(snapshot, printer_id))


@router.patch("/{printer_id}", response_model=PrinterResponse)
async def update_printer(
    printer_id: str,
    request: PrinterUpdate,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Update printer settings."""
    updates = request.model_dump(exclude_unset=True)
    printer = await PrinterRepository(db, owner).update(printer_id, **updates)
    await db.commit()
    return PrinterResponse(**printer.to_dict())


@router.delete("/{printer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_printer(
    printer_id: str,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Remove a printer and its jobs, logs and intervals."""
    repo = PrinterRepository(db, owner)
    await repo.get(printer_id)
    await repo.delete(printer_id)
    await db.commit()
    logger.info(f"Printer deleted: {printer_id}")
