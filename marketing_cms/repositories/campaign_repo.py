"""
Campaign repository.
"""
from typing import Optional, List

from sqlmodel import select
from sqlalchemy import or_
from sqlmodel.ext.asyncio.session import AsyncSession

from marketing_cms.core.dates import utc_now
from marketing_cms.models.campaign import Campaign, CampaignStatus
from marketing_cms.repositories.base import BaseRepository


class CampaignRepository(BaseRepository[Campaign]):
    """Repository for Campaign operations."""
    
    def __init__(self, session: AsyncSession):
        super().__init__(Campaign, session)
    
    async def get_by_name(self, name: str) -> Optional[Campaign]:
        """
        Get a campaign by name (names are unique across brands).
        When several versions share the name, the active one wins.
        """
        query = select(Campaign).where(Campaign.name == name).order_by(
            Campaign.is_active.desc(),
            Campaign.version.desc()
        )
        result = await self.session.exec(query)
        return result.first()
    
    async def list_by_brand(self, brand_id: str) -> List[Campaign]:
        """Get all campaigns of a brand."""
        return await self.list({"brand_id": brand_id})
    
    async def list_active(self, brand_id: str) -> List[Campaign]:
        """Get the active campaigns of a brand, current versions only."""
        return await self.list({
            "brand_id": brand_id,
            "status": CampaignStatus.ACTIVE.value,
            "is_active": True,
        })
    
    def _versions_query(self, root_id: str):
        return select(Campaign).where(
            or_(Campaign.id == root_id, Campaign.root_campaign_id == root_id)
        )
    
    async def list_versions(self, root_id: str) -> List[Campaign]:
        """Get every version of a campaign, oldest first."""
        result = await self.session.exec(self._versions_query(root_id).order_by(Campaign.version))
        return list(result.all())
    
    async def get_version(self, root_id: str, version: int) -> Optional[Campaign]:
        result = await self.session.exec(self._versions_query(root_id).where(Campaign.version == version))
        return result.first()
    
    async def deactivate_versions(self, root_id: str) -> None:
        """Mark every version of a campaign inactive."""
        now = utc_now()
        for campaign in await self.list_versions(root_id):
            if campaign.is_active:
                campaign.is_active = False
                campaign.updated_at = now
                self.session.add(campaign)
        await self.session.commit()
    
    async def count_by_brand(self, brand_id: str) -> int:
        return await self.count({"brand_id": brand_id})
