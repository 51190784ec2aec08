"""
Hierarchy resolver - maps a content item to its owning brand.

Content owned by a micro plan is resolved by walking
micro plan -> master plan -> campaign -> campaign.brand_id.
A missing or mistyped link yields None rather than an exception so that
the scheduler can skip the item and keep going.
"""
import logging
from typing import Optional

from marketing_cms.core.exceptions import ResolutionFailure
from marketing_cms.models.content import Content
from marketing_cms.models.plan import PlanType
from marketing_cms.repositories.campaign_repo import CampaignRepository
from marketing_cms.repositories.plan_repo import PlanRepository

logger = logging.getLogger(__name__)


class HierarchyResolver:
    """Read-only traversal of the content ownership chain."""
    
    def __init__(self, plan_repo: PlanRepository, campaign_repo: CampaignRepository):
        self.plan_repo = plan_repo
        self.campaign_repo = campaign_repo
    
    async def resolve_brand_id(self, content: Content) -> Optional[str]:
        """Return the owning brand id, or None when no owner can be found."""
        if content.brand_id:
            return content.brand_id
        
        if not content.micro_plan_id:
            logger.debug(f"Content {content.id} has neither brand_id nor micro_plan_id")
            return None
        
        micro_plan = await self.plan_repo.get(content.micro_plan_id)
        if not micro_plan or micro_plan.type != PlanType.MICRO.value:
            logger.debug(f"Micro plan {content.micro_plan_id} not found for content {content.id}")
            return None
        
        master_plan = await self.plan_repo.get(micro_plan.master_plan_id)
        if not master_plan or master_plan.type != PlanType.MASTER.value:
            logger.debug(f"Master plan not found for micro plan {micro_plan.id}")
            return None
        
        campaign = await self.campaign_repo.get(master_plan.campaign_id)
        if not campaign:
            logger.debug(f"Campaign not found for master plan {master_plan.id}")
            return None
        
        return campaign.brand_id or None
    
    async def require_brand_id(self, content: Content) -> str:
        """Like resolve_brand_id, but raise ResolutionFailure when unresolved."""
        brand_id = await self.resolve_brand_id(content)
        if not brand_id:
            raise ResolutionFailure(content.id)
        return brand_id
