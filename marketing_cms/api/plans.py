"""
Plans API routes.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from marketing_cms.config import settings
from marketing_cms.database import get_session
from marketing_cms.services.plan_service import PlanService
from marketing_cms.schemas.plan import PlanCreate, PlanUpdate, PlanResponse
from marketing_cms.schemas.common import StateTransitionRequest
from marketing_cms.api.deps import get_user_id

router = APIRouter(prefix=f"{settings.API_PREFIX}/plans", tags=["plans"])


@router.post("/", response_model=PlanResponse, status_code=201)
async def create_plan(
    plan_data: PlanCreate,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Create a master or micro plan."""
    plan = await PlanService(session).create(plan_data, user_id)
    return PlanResponse.model_validate(plan)


@router.get("/", response_model=List[PlanResponse])
async def list_plans(
    brand_id: Optional[str] = None,
    campaign_id: Optional[str] = None,
    type: Optional[str] = None,
    state: Optional[str] = None,
    session: AsyncSession = Depends(get_session)
):
    """List plans with optional filters."""
    plans = await PlanService(session).list(brand_id, campaign_id, type, state)
    return [PlanResponse.model_validate(p) for p in plans]


@router.get("/{plan_id}", response_model=PlanResponse)
async def get_plan(plan_id: str, session: AsyncSession = Depends(get_session)):
    """Get a plan by ID."""
    plan = await PlanService(session).get(plan_id)
    return PlanResponse.model_validate(plan)


@router.get("/{plan_id}/micro-plans", response_model=List[PlanResponse])
async def list_micro_plans(plan_id: str, session: AsyncSession = Depends(get_session)):
    """List the micro plans of a master plan."""
    micro_plans = await PlanService(session).list_micro_plans(plan_id)
    return [PlanResponse.model_validate(p) for p in micro_plans]


@router.patch("/{plan_id}", response_model=PlanResponse)
async def update_plan(
    plan_id: str,
    plan_data: PlanUpdate,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Update a draft plan."""
    plan = await PlanService(session).update(plan_id, plan_data, user_id)
    return PlanResponse.model_validate(plan)


@router.post("/{plan_id}/transition", response_model=PlanResponse)
async def transition_plan_state(
    plan_id: str,
    transition: StateTransitionRequest,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Move a plan to another state."""
    plan = await PlanService(session).transition_state(
        plan_id,
        transition.target,
        user_id,
        transition.comments
    )
    return PlanResponse.model_validate(plan)


@router.delete("/{plan_id}", status_code=204)
async def delete_plan(plan_id: str, session: AsyncSession = Depends(get_session)):
    """Delete a plan with no micro plans or content."""
    await PlanService(session).delete(plan_id)
