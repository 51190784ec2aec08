"""
Plan repository.
"""
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from marketing_cms.models.plan import Plan, PlanType
from marketing_cms.repositories.base import BaseRepository


class PlanRepository(BaseRepository[Plan]):
    """Repository for Plan operations."""
    
    def __init__(self, session: AsyncSession):
        super().__init__(Plan, session)
    
    async def list_micro_plans(self, parent_plan_id: str) -> List[Plan]:
        """Get micro plans under a master plan."""
        return await self.list(
            {"parent_plan_id": parent_plan_id, "type": PlanType.MICRO.value},
            order_by="date_start",
            order_desc=False
        )
    
    async def list_by_campaign(self, campaign_id: str) -> List[Plan]:
        """Get master plans of a campaign."""
        return await self.list({"campaign_id": campaign_id})
    
    async def list_by_brand(self, brand_id: str) -> List[Plan]:
        return await self.list({"brand_id": brand_id})
    
    async def count_by_campaign(self, campaign_id: str) -> int:
        return await self.count({"campaign_id": campaign_id})
    
    async def count_micro_plans(self, parent_plan_id: str) -> int:
        return await self.count({"parent_plan_id": parent_plan_id})
