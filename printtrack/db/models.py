"""SQLAlchemy ORM models for PrintTrack.

Every record except the user itself carries the owning ``user_id``; the
repositories filter on it so one owner never sees another owner's rows.
"""

from datetime import datetime, timezone
from typing import Optional, List
from uuid import uuid4

from sqlalchemy import (
    String, Integer, Float, DateTime, Text, ForeignKey, Index, UniqueConstraint
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column

from printtrack.maintenance import models as entities
from printtrack.utils import isoformat


def generate_uuid() -> str:
    """Generate a UUID string."""
    return str(uuid4())


def utcnow_naive() -> datetime:
    """Current UTC time without tzinfo, as stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class User(Base):
    """User account owning printers, jobs and maintenance records."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "created_at": isoformat(self.created_at),
        }


class Printer(Base):
    """3D printer owned by a user."""
    __tablename__ = "printers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    model: Mapped[Optional[str]] = mapped_column(String(100))
    notes: Mapped[Optional[str]] = mapped_column(Text)

    # OctoPrint link
    octoprint_url: Mapped[Optional[str]] = mapped_column(String(500))
    octoprint_api_key: Mapped[Optional[str]] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    # Relationships
    print_jobs: Mapped[List["PrintJob"]] = relationship("PrintJob", back_populates="printer")

    @property
    def has_octoprint(self) -> bool:
        return bool(self.octoprint_url and self.octoprint_api_key)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "model": self.model,
            "notes": self.notes,
            "octoprint_url": self.octoprint_url,
            "has_octoprint": self.has_octoprint,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }


class PrintJob(Base):
    """A print recorded manually or imported from OctoPrint."""
    __tablename__ = "print_jobs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    printer_id: Mapped[str] = mapped_column(String(36), ForeignKey("printers.id"), index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[Optional[str]] = mapped_column(String(50))  # Success, Failed, In Progress
    material: Mapped[Optional[str]] = mapped_column(String(100))
    grams_used: Mapped[Optional[float]] = mapped_column(Float)
    start_time: Mapped[Optional[datetime]] = mapped_column(DateTime)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime)
    source: Mapped[str] = mapped_column(String(20), default=entities.JobSource.MANUAL.value)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    # Relationships
    printer: Mapped["Printer"] = relationship("Printer", back_populates="print_jobs")

    __table_args__ = (
        Index("ix_print_jobs_user_start", "user_id", "start_time"),
    )

    def to_entity(self) -> entities.PrintJob:
        """Detached record for the maintenance calculator."""
        return entities.PrintJob(
            id=self.id,
            printer_id=self.printer_id,
            name=self.name,
            start_time=isoformat(self.start_time),
            end_time=isoformat(self.end_time),
            status=self.status,
            material=self.material,
            grams_used=self.grams_used,
            source=self.source or entities.JobSource.MANUAL.value,
            notes=self.notes,
        )

    def to_dict(self) -> dict:
        data = self.to_entity().to_dict()
        data["created_at"] = isoformat(self.created_at)
        data["updated_at"] = isoformat(self.updated_at)
        return data


class MaintenanceLog(Base):
    """Maintenance performed on a printer."""
    __tablename__ = "maintenance_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    printer_id: Mapped[str] = mapped_column(String(36), ForeignKey("printers.id"), index=True)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    __table_args__ = (
        Index("ix_maintenance_logs_printer_type", "printer_id", "type"),
    )

    def to_entity(self) -> entities.MaintenanceLogEntry:
        """Detached record for the maintenance calculator."""
        return entities.MaintenanceLogEntry(
            id=self.id,
            printer_id=self.printer_id,
            type=self.type,
            date=isoformat(self.date),
            notes=self.notes,
        )

    def to_dict(self) -> dict:
        data = self.to_entity().to_dict()
        data["created_at"] = isoformat(self.created_at)
        data["updated_at"] = isoformat(self.updated_at)
        return data


class MaintenanceInterval(Base):
    """Service cadence for a printer and maintenance type."""
    __tablename__ = "maintenance_intervals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), index=True)
    printer_id: Mapped[str] = mapped_column(String(36), ForeignKey("printers.id"), index=True)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    interval_prints: Mapped[Optional[int]] = mapped_column(Integer)
    interval_hours: Mapped[Optional[float]] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    __table_args__ = (
        UniqueConstraint("user_id", "printer_id", "type", name="uq_interval_printer_type"),
    )

    def to_entity(self) -> entities.MaintenanceInterval:
        """Detached record for the maintenance calculator."""
        return entities.MaintenanceInterval(
            id=self.id,
            printer_id=self.printer_id,
            type=self.type,
            interval_prints=self.interval_prints,
            interval_hours=self.interval_hours,
        )

    def to_dict(self) -> dict:
        data = self.to_entity().to_dict()
        data["created_at"] = isoformat(self.created_at)
        data["updated_at"] = isoformat(self.updated_at)
        return data
