"""
Base Repository for ScriptFlow

Generic async repository for owner-scoped tables. Every query takes the
owner id explicitly and filters on it; there is no ambient "current user".
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel


# Type variable for generic repository
ModelType = TypeVar("ModelType", bound=SQLModel)


class IReadRepository(ABC, Generic[ModelType]):
    """Interface for owner-scoped read operations."""

    @abstractmethod
    async def get_for_user(self, user_id: str, id: int) -> Optional[ModelType]:
        """Get one of the owner's records by ID."""
        pass

    @abstractmethod
    async def list_for_user(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 100
    ) -> List[ModelType]:
        """Get the owner's records with pagination."""
        pass


class IWriteRepository(ABC, Generic[ModelType]):
    """Interface for owner-scoped write operations."""

    @abstractmethod
    async def add(self, obj: ModelType) -> ModelType:
        """Persist a new record."""
        pass

    @abstractmethod
    async def update_fields(
        self,
        user_id: str,
        id: int,
        values: Dict[str, Any]
    ) -> Optional[ModelType]:
        """Update columns on one of the owner's records."""
        pass

    @abstractmethod
    async def delete_for_user(self, user_id: str, id: int) -> bool:
        """Delete one of the owner's records."""
        pass


class BaseRepository(
    IReadRepository[ModelType],
    IWriteRepository[ModelType],
    Generic[ModelType]
):
    """
    Generic async repository with owner-scoped CRUD operations.

    The model must carry `id` and `user_id` columns. Writes flush but do
    not commit; the session owner (get_session) commits or rolls back.

    Args:
        model: The SQLModel class to operate on
        session: Async database session
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self._model = model
        self._session = session

    @property
    def session(self) -> AsyncSession:
        """Get the current session."""
        return self._session

    async def get_for_user(self, user_id: str, id: int) -> Optional[ModelType]:
        """
        Get a single record by primary key, only if the owner matches.

        Args:
            user_id: Owner id
            id: Primary key

        Returns:
            Model instance or None if missing or owned by someone else
        """
        stmt = select(self._model).where(
            self._model.id == id,
            self._model.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 100
    ) -> List[ModelType]:
        """
        Get the owner's records, newest first.

        Args:
            user_id: Owner id
            skip: Number of records to skip
            limit: Maximum records to return
        """
        stmt = (
            select(self._model)
            .where(self._model.user_id == user_id)
            .order_by(self._model.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def add(self, obj: ModelType) -> ModelType:
        """
        Persist a new record and load server defaults back into it.
        """
        self._session.add(obj)
        await self._session.flush()
        await self._session.refresh(obj)
        return obj

    async def update_fields(
        self,
        user_id: str,
        id: int,
        values: Dict[str, Any]
    ) -> Optional[ModelType]:
        """
        Update an existing record.

        Args:
            user_id: Owner id
            id: Primary key
            values: Column values to set

        Returns:
            Updated model instance or None if not found
        """
        db_obj = await self.get_for_user(user_id, id)
        if not db_obj:
            return None

        for field, value in values.items():
            setattr(db_obj, field, value)

        self._session.add(db_obj)
        await self._session.flush()
        await self._session.refresh(db_obj)
        return db_obj

    async def delete_for_user(self, user_id: str, id: int) -> bool:
        """
        Delete a record by ID.

        Returns:
            True if deleted, False if not found
        """
        db_obj = await self.get_for_user(user_id, id)
        if not db_obj:
            return False

        await self._session.delete(db_obj)
        await self._session.flush()
        return True

    async def delete_all_for_user(self, user_id: str) -> int:
        """
        Delete every record the owner has in this table.

        Returns:
            Number of rows deleted
        """
        stmt = delete(self._model).where(self._model.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def count_for_user(self, user_id: str) -> int:
        """Total number of the owner's records."""
        stmt = (
            select(func.count())
            .select_from(self._model)
            .where(self._model.user_id == user_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()
