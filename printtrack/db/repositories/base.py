"""Base repository with owner-scoped CRUD operations."""

from datetime import datetime
from typing import Generic, TypeVar, Type, Optional, List, Any, Union
from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from printtrack.db.models import Base, Printer
from printtrack.errors import NotFoundError, ValidationError
from printtrack.utils import parse_timestamp

T = TypeVar("T", bound=Base)


def as_db_datetime(value: Union[str, datetime, None], field_name: str = "timestamp") -> Optional[datetime]:
    """Convert an ISO string or datetime into the naive UTC form stored in the database."""
    if value is None or value == "":
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    return parsed.replace(tzinfo=None)


class OwnedRepository(Generic[T]):
    """Repository whose every query is restricted to one owner."""

    kind = "Record"

    def __init__(self, session: AsyncSession, model: Type[T], user_id: str):
        self.session = session
        self.model = model
        self.user_id = user_id

    def _owned(self):
        """Select statement limited to the owner's rows."""
        return select(self.model).where(self.model.user_id == self.user_id)

    def _apply_filters(self, query, filters: dict):
        for key, value in filters.items():
            if hasattr(self.model, key) and value is not None:
                query = query.where(getattr(self.model, key) == value)
        return query

    async def require_printer(self, printer_id: str) -> Printer:
        """Load a printer owned by the same user or raise NotFoundError."""
        result = await self.session.execute(
            select(Printer).where(Printer.id == printer_id, Printer.user_id == self.user_id)
        )
        printer = result.scalar_one_or_none()
        if printer is None:
            raise NotFoundError("Printer", printer_id)
        return printer

    async def create(self, **kwargs) -> T:
        """Create a new entity owned by the current user."""
        entity = self.model(user_id=self.user_id, **kwargs)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: str) -> Optional[T]:
        """Get entity by ID, None when missing or owned by someone else."""
        result = await self.session.execute(
            self._owned().where(self.model.id == entity_id)
        )
        return result.scalar_one_or_none()

    async def get(self, entity_id: str) -> T:
        """Get entity by ID or raise NotFoundError."""
        entity = await self.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.kind, entity_id)
        return entity

    async def get_all(
        self,
        skip: int = 0,
        limit: Optional[int] = None,
        **filters
    ) -> List[T]:
        """Get all owned entities with optional filtering."""
        query = self._apply_filters(self._owned(), filters)
        query = query.order_by(*self._default_order()).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    def _default_order(self) -> tuple:
        return (self.model.created_at.desc(),)

    async def update(self, entity_id: str, **kwargs: Any) -> T:
        """Update fields on an owned entity."""
        entity = await self.get(entity_id)
        for key, value in kwargs.items():
            if key in ("id", "user_id"):
                continue
            setattr(entity, key, value)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity_id: str) -> bool:
        """Delete an owned entity."""
        result = await self.session.execute(
            delete(self.model).where(
                self.model.id == entity_id,
                self.model.user_id == self.user_id,
            )
        )
        return result.rowcount > 0

    async def count(self, **filters) -> int:
        """Count owned entities with optional filtering."""
        query = select(func.count(self.model.id)).where(self.model.user_id == self.user_id)
        query = self._apply_filters(query, filters)
        result = await self.session.execute(query)
        return result.scalar() or 0
