# schoolhub/services/base_service.py
"""Base service with common CRUD operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, func
from typing import Type, Any, Dict, Optional, TypeVar, Generic
import logging

from ..core.exceptions import (
    DataAccessError, RecordNotFoundError, UniqueConstraintError, ForeignKeyViolationError
)

logger = logging.getLogger(__name__)

# Define generic type
T = TypeVar('T')

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def translate_integrity_error(error: IntegrityError) -> DataAccessError:
    """Map a driver integrity error onto the typed data-access errors"""
    orig = getattr(error, "orig", None)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    text = str(orig or error).lower()

    if code == UNIQUE_VIOLATION or "unique" in text or "duplicate" in text:
        return UniqueConstraintError(str(orig or error))
    if code == FOREIGN_KEY_VIOLATION or "foreign key" in text:
        return ForeignKeyViolationError(str(orig or error))
    return DataAccessError(str(orig or error))


class BaseService(Generic[T]):
    def __init__(self, model: Type[T], db: AsyncSession):
        self.model = model
        self.db = db

    async def get(self, id: Any) -> Optional[T]:
        stmt = select(self.model).where(self.model.id == id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_raise(self, id: Any) -> T:
        obj = await self.get(id)
        if obj is None:
            raise RecordNotFoundError(self.model.__name__, id)
        return obj

    async def count(self, *conditions) -> int:
        stmt = select(func.count()).select_from(self.model)
        if conditions:
            stmt = stmt.where(*conditions)
        result = await self.db.execute(stmt)
        return result.scalar()

    async def flush(self):
        """Flush pending changes, translating constraint violations"""
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(e)

    async def commit(self):
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(e)

    async def create(self, obj_in: Dict, commit: bool = True) -> T:
        obj = self.model(**obj_in)
        self.db.add(obj)
        if commit:
            await self.commit()
            await self.db.refresh(obj)
        else:
            await self.flush()
        return obj

    async def update(self, id: Any, obj_in: Dict, commit: bool = True) -> T:
        obj = await self.get_or_raise(id)
        for key, value in obj_in.items():
            setattr(obj, key, value)
        if commit:
            await self.commit()
            await self.db.refresh(obj)
        else:
            await self.flush()
        return obj

    async def delete(self, id: Any, commit: bool = True) -> T:
        """Permanently delete record from database"""
        obj = await self.get_or_raise(id)
        await self.db.delete(obj)
        if commit:
            await self.commit()
        else:
            await self.flush()
        return obj
