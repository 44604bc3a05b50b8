# classroom_app/services/base_service.py
"""Base service with common lookup operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Type, Any, Optional, TypeVar, Generic

from ..core.exceptions import NotFoundError

# Define generic type
T = TypeVar('T')

class BaseService(Generic[T]):
    resource_name = "Resource"

    def __init__(self, model: Type[T], db: AsyncSession):
        self.model = model
        self.db = db

    async def get(self, id: Any, for_update: bool = False) -> Optional[T]:
        stmt = select(self.model).where(
            self.model.id == id,
            self.model.is_deleted == False
        )
        if for_update:
            # Lock the row and reload it even if this session already holds a copy
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_404(self, id: Any, for_update: bool = False) -> T:
        obj = await self.get(id, for_update=for_update)
        if obj is None:
            raise NotFoundError(self.resource_name, id)
        return obj
