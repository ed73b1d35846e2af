"""OctoPrint status and control routes for a printer."""

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.auth import CurrentOwner
from printtrack.db import get_db
from printtrack.db.repositories import PrinterRepository
from printtrack.octoprint import OctoPrintClient
from printtrack.utils import get_logger

logger = get_logger("api.octoprint")
router = APIRouter()


class CommandRequest(BaseModel):
    command: str


async def _client(db: AsyncSession, owner: str, printer_id: str) -> OctoPrintClient:
    printer = await PrinterRepository(db, owner).get_octoprint_link(printer_id)
    return OctoPrintClient.for_printer(printer)


@router.get("/{printer_id}/octoprint")
async def octoprint_status(
    printer_id: str,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Printer state, current job and webcam URL from OctoPrint."""
    client = await _client(db, owner, printer_id)
    status = await client.get_status()
    return status.to_dict()


@router.get("/{printer_id}/octoprint/files", response_model=List[str])
async def octoprint_files(
    printer_id: str,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Files stored on the OctoPrint server."""
    client = await _client(db, owner, printer_id)
    return await client.list_files()


@router.post("/{printer_id}/octoprint/command")
async def octoprint_command(
    printer_id: str,
    request: CommandRequest,
    owner: CurrentOwner,
    db: AsyncSession = Depends(get_db)
):
    """Send start, cancel, pause or resume to the current job."""
    client = await _client(db, owner, printer_id)
    await client.send_job_command(request.command)
    logger.info(f"OctoPrint command {request.command} sent to printer {printer_id}")
    return {"status": "ok", "command": request.command}
