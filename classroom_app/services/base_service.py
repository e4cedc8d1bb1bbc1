# classroom_app/services/base_service.py
"""Base service with common lookups scoped to a school."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Type, Any, Dict, Iterable, Optional, List, TypeVar, Generic
from uuid import UUID

# Define generic type
T = TypeVar('T')


def unique_ids(ids: Iterable[Any]) -> List[Any]:
    """Drop repeated ids, keeping first-seen order"""
    return list(dict.fromkeys(ids))


def search_pattern(term: str) -> str:
    """Case-insensitive substring pattern for ``ilike(..., escape='\\\\')``"""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped[:100]}%"


class BaseService(Generic[T]):
    def __init__(self, model: Type[T], db: AsyncSession):
        self.model = model
        self.db = db

    def _filtered(self, stmt, filters: Dict[str, Any]):
        for key, value in filters.items():
            if hasattr(self.model, key) and value is not None:
                stmt = stmt.where(getattr(self.model, key) == value)
        return stmt

    async def get(self, id: Any) -> Optional[T]:
        stmt = select(self.model).where(self.model.id == id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_in_school(self, id: Any, school_id: UUID, **filters) -> Optional[T]:
        """Get a row by id only if it belongs to ``school_id`` and matches ``filters``"""
        stmt = select(self.model).where(
            self.model.id == id,
            self.model.school_id == school_id,
        )
        stmt = self._filtered(stmt, filters)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, obj_in: Dict) -> T:
        """Add and flush; the surrounding transaction commits."""
        obj = self.model(**obj_in)
        self.db.add(obj)
        await self.db.flush()
        return obj

    async def bulk_create(self, rows: List[Dict], model: Optional[Type[Any]] = None) -> List[Any]:
        model = model or self.model
        objects = [model(**row) for row in rows]
        if objects:
            self.db.add_all(objects)
            await self.db.flush()
        return objects
