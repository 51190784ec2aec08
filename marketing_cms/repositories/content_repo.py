"""
Content repository.
"""
from datetime import datetime
from typing import List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from marketing_cms.models.content import Content, ContentState
from marketing_cms.repositories.base import BaseRepository


class ContentRepository(BaseRepository[Content]):
    """Repository for Content operations."""
    
    def __init__(self, session: AsyncSession):
        super().__init__(Content, session)
    
    async def list_by_micro_plan(self, micro_plan_id: str) -> List[Content]:
        """Get content owned by a micro plan."""
        return await self.list({"micro_plan_id": micro_plan_id})
    
    async def list_by_brand(self, brand_id: str) -> List[Content]:
        """Get standalone content owned directly by a brand."""
        return await self.list({"brand_id": brand_id})
    
    async def list_scheduled_before(self, date: datetime) -> List[Content]:
        """Get content scheduled at or before a date, in any state."""
        query = select(Content).where(
            Content.scheduled_for.is_not(None),
            Content.scheduled_for <= date
        ).order_by(Content.scheduled_for)
        result = await self.session.exec(query)
        return list(result.all())
    
    async def list_due(self, now: datetime) -> List[Content]:
        """Get Ready content whose scheduled time has arrived."""
        query = select(Content).where(
            Content.state == ContentState.READY.value,
            Content.scheduled_for.is_not(None),
            Content.scheduled_for <= now
        ).order_by(Content.scheduled_for)
        result = await self.session.exec(query)
        return list(result.all())
    
    async def count_by_micro_plan(self, micro_plan_id: str) -> int:
        return await self.count({"micro_plan_id": micro_plan_id})
    
    async def count_by_brand(self, brand_id: str) -> int:
        return await self.count({"brand_id": brand_id})
