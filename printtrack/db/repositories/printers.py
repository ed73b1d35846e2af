"""Printer repository for printer-related database operations."""

from typing import List
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.db.models import Printer, PrintJob, MaintenanceLog, MaintenanceInterval
from printtrack.db.repositories.base import OwnedRepository
from printtrack.errors import NotFoundError, OctoPrintNotConfigured, ValidationError
from printtrack.utils import get_logger

logger = get_logger("db.printers")


class PrinterRepository(OwnedRepository[Printer]):
    """Repository for Printer entities."""

    kind = "Printer"

    def __init__(self, session: AsyncSession, user_id: str):
        super().__init__(session, Printer, user_id)

    async def get_with_octoprint(self) -> List[Printer]:
        """Printers that have an OctoPrint URL and API key."""
        return [p for p in await self.get_all() if p.has_octoprint]

    async def get_octoprint_link(self, printer_id: str) -> Printer:
        """Load a printer and require its OctoPrint settings."""
        printer = await self.get(printer_id)
        if not printer.has_octoprint:
            raise OctoPrintNotConfigured(
                f"No OctoPrint URL/API key set for printer '{printer.name}'"
            )
        return printer

    async def find(self, ref: str) -> Printer:
        """Look up a printer by id, then by name (case-insensitive)."""
        printer = await self.get_by_id(ref)
        if printer is not None:
            return printer
        matches = [p for p in await self.get_all() if p.name.lower() == ref.strip().lower()]
        if not matches:
            raise NotFoundError(self.kind, ref)
        if len(matches) > 1:
            raise ValidationError(f"Several printers are named '{ref}', use the printer id")
        return matches[0]

    async def names(self) -> dict:
        """Map of printer id to name."""
        return {p.id: p.name for p in await self.get_all()}

    async def delete(self, printer_id: str) -> bool:
        """Delete a printer together with its jobs, logs and intervals."""
        printer = await self.get_by_id(printer_id)
        if printer is None:
            return False

        for model in (PrintJob, MaintenanceLog, MaintenanceInterval):
            await self.session.execute(
                delete(model).where(
                    model.printer_id == printer_id,
                    model.user_id == self.user_id,
                )
            )
        deleted = await super().delete(printer_id)
        logger.info(f"Deleted printer {printer_id} and its records")
        return deleted
