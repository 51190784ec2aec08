"""
Plan service - master/micro plan management and state lifecycle.
"""
import logging
from typing import Optional, List

from sqlmodel.ext.asyncio.session import AsyncSession

from marketing_cms.core.dates import to_naive_utc
from marketing_cms.core.exceptions import (
    NotFoundError,
    ConflictError,
    ValidationFailedError,
    InvalidStateError,
    PreconditionFailedError,
)
from marketing_cms.repositories.plan_repo import PlanRepository
from marketing_cms.repositories.campaign_repo import CampaignRepository
from marketing_cms.repositories.content_repo import ContentRepository
from marketing_cms.models.plan import Plan, PlanState, PlanType
from marketing_cms.schemas.plan import PlanCreate, PlanUpdate
from marketing_cms.services.state_machines import PLAN_STATE_MACHINE, state_metadata_update

logger = logging.getLogger(__name__)


class PlanService:
    """Service for plan operations."""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.plan_repo = PlanRepository(session)
        self.campaign_repo = CampaignRepository(session)
        self.content_repo = ContentRepository(session)
    
    async def create(self, plan_data: PlanCreate, user_id: Optional[str] = None) -> Plan:
        """
        Create a plan in draft state.
        
        Master plans must reference an existing campaign. Micro plans must
        reference an existing master plan and cannot reference a campaign.
        """
        if plan_data.type == PlanType.MASTER:
            if plan_data.parent_plan_id:
                raise ValidationFailedError("Master plans cannot have a parent plan", "parent_plan_id")
            if not plan_data.campaign_id:
                raise ValidationFailedError("Master plans must belong to a campaign", "campaign_id")
            campaign = await self.campaign_repo.get(plan_data.campaign_id)
            if not campaign:
                raise NotFoundError("Campaign", plan_data.campaign_id)
            brand_id = campaign.brand_id
        else:
            if not plan_data.parent_plan_id:
                raise ValidationFailedError("Micro plans must have a parent master plan", "parent_plan_id")
            if plan_data.campaign_id:
                raise ValidationFailedError("Micro plans cannot be directly linked to a campaign", "campaign_id")
            parent = await self.plan_repo.get(plan_data.parent_plan_id)
            if not parent:
                raise NotFoundError("Plan", plan_data.parent_plan_id)
            if parent.type != PlanType.MASTER.value:
                raise ValidationFailedError("Parent plan must be a master plan", "parent_plan_id")
            brand_id = parent.brand_id
        
        date_start = to_naive_utc(plan_data.date_start)
        date_end = to_naive_utc(plan_data.date_end)
        if date_start > date_end:
            raise ValidationFailedError("date_start must not be after date_end", "date_start")
        
        data = plan_data.model_dump(include={"title", "goals", "target_audience", "channels"})
        data.update(
            type=plan_data.type.value,
            campaign_id=plan_data.campaign_id,
            parent_plan_id=plan_data.parent_plan_id,
            brand_id=brand_id,
            date_start=date_start,
            date_end=date_end,
            state=PlanState.DRAFT.value,
            state_version=1,
            state_comments="",
            **state_metadata_update(user_id)
        )
        
        plan = await self.plan_repo.create(data)
        logger.info(f"{plan.type.capitalize()} plan '{plan.title}' ({plan.id}) created")
        return plan
    
    async def get(self, plan_id: str) -> Plan:
        """Get a plan by ID."""
        plan = await self.plan_repo.get(plan_id)
        if not plan:
            raise NotFoundError("Plan", plan_id)
        return plan
    
    async def list(
        self,
        brand_id: Optional[str] = None,
        campaign_id: Optional[str] = None,
        type: Optional[str] = None,
        state: Optional[str] = None
    ) -> List[Plan]:
        """List plans with optional filters."""
        return await self.plan_repo.list({
            "brand_id": brand_id,
            "campaign_id": campaign_id,
            "type": type,
            "state": state,
        })
    
    async def list_micro_plans(self, parent_plan_id: str) -> List[Plan]:
        """List the micro plans of a master plan."""
        await self.get(parent_plan_id)
        return await self.plan_repo.list_micro_plans(parent_plan_id)
    
    async def update(
        self,
        plan_id: str,
        plan_data: PlanUpdate,
        user_id: Optional[str] = None
    ) -> Plan:
        """Update a plan; only draft plans can be edited."""
        plan = await self.get(plan_id)
        
        if plan.state != PlanState.DRAFT.value:
            raise InvalidStateError("Can only update plans in draft state", plan.state)
        
        update_data = plan_data.model_dump(exclude_unset=True, exclude_none=True)
        date_start = to_naive_utc(plan_data.date_start) or plan.date_start
        date_end = to_naive_utc(plan_data.date_end) or plan.date_end
        if date_start > date_end:
            raise ValidationFailedError("date_start must not be after date_end", "date_start")
        if "date_start" in update_data:
            update_data["date_start"] = date_start
        if "date_end" in update_data:
            update_data["date_end"] = date_end
        
        update_data.update(state_metadata_update(user_id))
        return await self.plan_repo.update(plan_id, update_data)
    
    async def transition_state(
        self,
        plan_id: str,
        target: str,
        user_id: Optional[str] = None,
        comments: Optional[str] = None
    ) -> Plan:
        """
        Move a plan to another state.
        A micro plan can only become active while its master plan is active.
        """
        plan = await self.get(plan_id)
        state = PLAN_STATE_MACHINE.validate(plan.state, target)
        
        update_data = {"state": state, **state_metadata_update(user_id, comments)}
        
        if state == PlanState.ACTIVE.value:
            if plan.type == PlanType.MICRO.value:
                parent = await self.plan_repo.get(plan.parent_plan_id)
                if not parent or parent.state != PlanState.ACTIVE.value:
                    raise PreconditionFailedError(
                        "Micro plan can only be activated while its master plan is active",
                        plan_id=plan.id,
                        parent_plan_id=plan.parent_plan_id,
                        parent_state=parent.state if parent else None,
                    )
            update_data["state_version"] = plan.state_version + 1
        
        updated = await self.plan_repo.update(plan_id, update_data)
        logger.info(f"Plan {plan_id} moved from {plan.state} to {state}")
        return updated
    
    async def delete(self, plan_id: str) -> bool:
        """Delete a plan that no micro plan or content references."""
        plan = await self.get(plan_id)
        
        if await self.plan_repo.count_micro_plans(plan_id):
            raise ConflictError("Plan", message=f"Plan '{plan.title}' still has micro plans")
        if await self.content_repo.count_by_micro_plan(plan_id):
            raise ConflictError("Plan", message=f"Plan '{plan.title}' still has content")
        
        return await self.plan_repo.delete(plan_id)
