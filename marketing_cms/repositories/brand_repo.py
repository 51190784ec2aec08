"""
Brand repository.
"""
from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from marketing_cms.models.brand import Brand
from marketing_cms.repositories.base import BaseRepository


class BrandRepository(BaseRepository[Brand]):
    """Repository for Brand operations."""
    
    def __init__(self, session: AsyncSession):
        super().__init__(Brand, session)
    
    async def get_by_name(self, name: str) -> Optional[Brand]:
        """Get a brand by its unique name."""
        return await self.get_by_field("name", name)
