"""Shared persistence helpers for the blog and user repositories."""

from datetime import datetime
from typing import Any, ClassVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from app.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DuplicateEntryError,
    RecordNotFoundError,
)
from app.utils.helpers import utc_now

type FilterValue = str | int | float | bool | UUID | datetime | None


class BaseRepository[ModelT: SQLModel]:
    """
    Lookups and writes shared by every table repository.

    Subclasses set ``model`` and may map unique column names to the
    conflict message raised when a flush collides on that column.

    Attributes:
        model: The SQLModel table class.
        id_field: Primary key column name.
        conflict_messages: Unique column name to ``DuplicateEntryError`` detail.
    """

    model: type[ModelT]
    id_field: str = "id"
    conflict_messages: ClassVar[dict[str, str]] = {}

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, record_id: UUID) -> ModelT | None:
        id_column = getattr(self.model, self.id_field)
        result = await self.session.execute(select(self.model).where(id_column == record_id))
        return result.scalar_one_or_none()

    async def get_by_field(self, field_name: str, value: FilterValue) -> ModelT | None:
        """
        Fetch the single row whose ``field_name`` equals ``value``.

        Only meant for unique columns such as ``slug``, ``username`` or ``email``.
        """
        column = getattr(self.model, field_name)
        result = await self.session.execute(select(self.model).where(column == value))
        return result.scalar_one_or_none()

    async def get_or_raise(self, record_id: UUID, detail: str | None = None) -> ModelT:
        """
        Fetch a row by primary key.

        Raises:
            RecordNotFoundError: When no row has that id
        """
        record = await self.get_by_id(record_id)
        if not record:
            raise RecordNotFoundError(
                detail=detail or f"{self.model.__name__} with ID {record_id} not found",
            )
        return record

    async def update(self, record: ModelT, **values: Any) -> ModelT:
        """
        Set column values on a loaded row and flush it.

        ``updated_at`` is refreshed when the table has one.
        """
        for key, value in values.items():
            setattr(record, key, value)
        if hasattr(record, "updated_at"):
            record.updated_at = utc_now()

        return await self._add_and_refresh(record)

    async def delete(self, record: ModelT) -> None:
        await self.session.delete(record)
        await self.session.flush()

    def _conflict_detail(self, error_msg: str) -> str:
        lowered = error_msg.lower()
        for field_name, message in self.conflict_messages.items():
            if field_name in lowered:
                return message
        return error_msg

    async def _add_and_refresh(self, record: ModelT) -> ModelT:
        """
        Flush a new or changed row and reload its server-side values.

        Raises:
            DuplicateEntryError: A unique constraint rejected the write
            DatabaseError: Any other integrity failure
            DatabaseConnectionError: The flush failed for a non-integrity reason
        """
        try:
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
        except IntegrityError as e:
            await self.session.rollback()
            error_msg = str(e.orig) if e.orig else str(e)
            if "unique" in error_msg.lower() or "duplicate" in error_msg.lower():
                raise DuplicateEntryError(detail=self._conflict_detail(error_msg)) from e
            raise DatabaseError(detail=f"Database integrity error: {error_msg}") from e
        except DatabaseError:
            raise
        except Exception as e:
            await self.session.rollback()
            raise DatabaseConnectionError(detail=f"Failed to save record: {e}") from e
        return record

    async def _check_exists_by_field(
        self,
        field_name: str,
        value: FilterValue,
        exclude_id: UUID | None = None,
    ) -> bool:
        """
        Tell whether any row other than ``exclude_id`` holds ``value`` in ``field_name``.

        Args:
            field_name: Column to probe
            value: Value to look for
            exclude_id: Row allowed to hold the value already, used on updates

        Returns:
            bool: True when another row holds the value
        """
        statement = select(1).where(getattr(self.model, field_name) == value)
        if exclude_id is not None:
            statement = statement.where(getattr(self.model, self.id_field) != exclude_id)

        result = await self.session.execute(statement.limit(1))
        return result.scalar_one_or_none() is not None
