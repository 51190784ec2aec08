"""
Content service - content management, state lifecycle and scheduling.
"""
import logging
from datetime import datetime
from typing import Optional, List

from sqlmodel.ext.asyncio.session import AsyncSession

from marketing_cms.core.dates import utc_now, to_naive_utc
from marketing_cms.core.exceptions import (
    NotFoundError,
    ValidationFailedError,
    InvalidStateError,
)
from marketing_cms.repositories.brand_repo import BrandRepository
from marketing_cms.repositories.campaign_repo import CampaignRepository
from marketing_cms.repositories.content_repo import ContentRepository
from marketing_cms.repositories.plan_repo import PlanRepository
from marketing_cms.models.content import Content, ContentState
from marketing_cms.models.plan import PlanType
from marketing_cms.schemas.content import ContentCreate, ContentUpdate
from marketing_cms.services.guidelines import check_guidelines
from marketing_cms.services.hierarchy import HierarchyResolver
from marketing_cms.services.integrations.base import PublishResult
from marketing_cms.services.state_machines import CONTENT_STATE_MACHINE, state_metadata_update

logger = logging.getLogger(__name__)


class ContentService:
    """Service for content operations."""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.content_repo = ContentRepository(session)
        self.brand_repo = BrandRepository(session)
        self.plan_repo = PlanRepository(session)
        self.campaign_repo = CampaignRepository(session)
        self.resolver = HierarchyResolver(self.plan_repo, self.campaign_repo)
    
    async def create(self, content_data: ContentCreate, user_id: Optional[str] = None) -> Content:
        """
        Create content in draft state.
        Exactly one owner is required: a micro plan or a brand.
        """
        micro_plan_id = (content_data.micro_plan_id or "").strip() or None
        brand_id = (content_data.brand_id or "").strip() or None
        
        if bool(micro_plan_id) == bool(brand_id):
            raise ValidationFailedError("Exactly one of micro_plan_id or brand_id must be set", "micro_plan_id")
        
        if micro_plan_id:
            plan = await self.plan_repo.get(micro_plan_id)
            if not plan:
                raise NotFoundError("Plan", micro_plan_id)
            if plan.type != PlanType.MICRO.value:
                raise ValidationFailedError("Content can only belong to a micro plan", "micro_plan_id")
        else:
            if not await self.brand_repo.exists(brand_id):
                raise NotFoundError("Brand", brand_id)
        
        data = content_data.model_dump(
            mode="json",
            include={"title", "body", "format", "platform", "target_audience", "keywords", "media_requirements"}
        )
        data.update(
            micro_plan_id=micro_plan_id,
            brand_id=brand_id,
            state=ContentState.DRAFT.value,
            state_comments="",
            **state_metadata_update(user_id)
        )
        
        content = await self.content_repo.create(data)
        logger.info(f"Content '{content.title}' ({content.id}) created")
        return content
    
    async def get(self, content_id: str) -> Content:
        """Get content by ID."""
        content = await self.content_repo.get(content_id)
        if not content:
            raise NotFoundError("Content", content_id)
        return content
    
    async def list(
        self,
        micro_plan_id: Optional[str] = None,
        brand_id: Optional[str] = None,
        state: Optional[str] = None
    ) -> List[Content]:
        """List content with optional owner and state filters."""
        return await self.content_repo.list({
            "micro_plan_id": micro_plan_id,
            "brand_id": brand_id,
            "state": state,
        })
    
    async def update(
        self,
        content_id: str,
        content_data: ContentUpdate,
        user_id: Optional[str] = None
    ) -> Content:
        """Update content; only draft content can be edited."""
        content = await self.get(content_id)
        
        if content.state != ContentState.DRAFT.value:
            raise InvalidStateError("Can only update content in draft state", content.state)
        
        update_data = content_data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        update_data.update(state_metadata_update(user_id))
        return await self.content_repo.update(content_id, update_data)
    
    async def transition_state(
        self,
        content_id: str,
        target: str,
        user_id: Optional[str] = None,
        comments: Optional[str] = None
    ) -> Content:
        """
        Move content to another state.
        Entering ready checks the body against the owning brand's avoided terms.
        """
        content = await self.get(content_id)
        state = CONTENT_STATE_MACHINE.validate(content.state, target)
        
        if state == ContentState.READY.value:
            await self.validate_against_brand_guidelines(content)
        
        update_data = {"state": state, **state_metadata_update(user_id, comments)}
        if state == ContentState.PUBLISHED.value and not content.published_at:
            update_data["published_at"] = utc_now()
        
        updated = await self.content_repo.update(content_id, update_data)
        logger.info(f"Content {content_id} moved from {content.state} to {state}")
        return updated
    
    async def validate_against_brand_guidelines(self, content: Content) -> None:
        """Raise if the content body uses a term its brand avoids."""
        brand_id = await self.resolver.require_brand_id(content)
        brand = await self.brand_repo.get(brand_id)
        if not brand:
            raise NotFoundError("Brand", brand_id)
        check_guidelines(content.body, brand)
    
    async def schedule(
        self,
        content_id: str,
        publish_at: datetime,
        user_id: Optional[str] = None
    ) -> Content:
        """Schedule ready content for publication."""
        content = await self.get(content_id)
        
        if content.state != ContentState.READY.value:
            raise InvalidStateError("Can only schedule content in ready state", content.state)
        
        update_data = {"scheduled_for": to_naive_utc(publish_at), **state_metadata_update(user_id)}
        return await self.content_repo.update(content_id, update_data)
    
    async def unschedule(self, content_id: str, user_id: Optional[str] = None) -> Content:
        """Remove the publication schedule of unpublished content."""
        content = await self.get(content_id)
        
        if content.state == ContentState.PUBLISHED.value:
            raise InvalidStateError("Published content cannot be unscheduled", content.state)
        
        update_data = {"scheduled_for": None, **state_metadata_update(user_id)}
        return await self.content_repo.update(content_id, update_data)
    
    async def record_publication(
        self,
        content_id: str,
        result: PublishResult,
        user_id: Optional[str] = None
    ) -> Content:
        """
        Store the outcome of a successful publish.
        Written before the state flips so a re-poll never publishes twice.
        """
        update_data = {
            "published_url": result.url,
            "platform_post_id": result.platform_post_id,
            "published_at": utc_now(),
            **state_metadata_update(user_id)
        }
        return await self.content_repo.update(content_id, update_data)
    
    async def delete(self, content_id: str) -> bool:
        await self.get(content_id)
        return await self.content_repo.delete(content_id)
