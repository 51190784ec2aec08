"""
Campaigns API routes.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from marketing_cms.config import settings
from marketing_cms.database import get_session
from marketing_cms.services.campaign_service import CampaignService
from marketing_cms.schemas.campaign import CampaignCreate, CampaignUpdate, CampaignResponse, MilestoneStatusUpdate
from marketing_cms.schemas.common import PaginatedResponse, StateTransitionRequest
from marketing_cms.api.deps import get_user_id

router = APIRouter(prefix=f"{settings.API_PREFIX}/campaigns", tags=["campaigns"])


@router.post("/", response_model=CampaignResponse, status_code=201)
async def create_campaign(
    campaign_data: CampaignCreate,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Create a new campaign."""
    campaign_service = CampaignService(session)
    campaign = await campaign_service.create(campaign_data, user_id)
    return CampaignResponse.model_validate(campaign)


@router.get("/", response_model=PaginatedResponse[CampaignResponse])
async def list_campaigns(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    brand_id: Optional[str] = None,
    status: Optional[str] = None,
    active_only: bool = True,
    session: AsyncSession = Depends(get_session)
):
    """List campaigns with optional brand and status filters."""
    campaign_service = CampaignService(session)
    result = await campaign_service.list(brand_id, status, page, limit, active_only)
    result["items"] = [CampaignResponse.model_validate(c) for c in result["items"]]
    return result


@router.get("/active", response_model=List[CampaignResponse])
async def list_active_campaigns(
    brand_id: str,
    session: AsyncSession = Depends(get_session)
):
    """List a brand's active campaigns."""
    campaign_service = CampaignService(session)
    campaigns = await campaign_service.get_active_campaigns(brand_id)
    return [CampaignResponse.model_validate(c) for c in campaigns]


@router.get("/upcoming-milestones", response_model=List[CampaignResponse])
async def list_upcoming_milestones(
    days_ahead: int = Query(7, ge=0),
    session: AsyncSession = Depends(get_session)
):
    """List campaigns with a pending milestone in the next days_ahead days."""
    campaign_service = CampaignService(session)
    campaigns = await campaign_service.list_upcoming_milestones(days_ahead)
    return [CampaignResponse.model_validate(c) for c in campaigns]


@router.get("/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(
    campaign_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Get a campaign by ID."""
    campaign_service = CampaignService(session)
    campaign = await campaign_service.get(campaign_id)
    return CampaignResponse.model_validate(campaign)


@router.patch("/{campaign_id}", response_model=CampaignResponse)
async def update_campaign(
    campaign_id: str,
    campaign_data: CampaignUpdate,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Update a campaign."""
    campaign_service = CampaignService(session)
    campaign = await campaign_service.update(campaign_id, campaign_data, user_id)
    return CampaignResponse.model_validate(campaign)


@router.post("/{campaign_id}/transition", response_model=CampaignResponse)
async def transition_campaign_status(
    campaign_id: str,
    transition: StateTransitionRequest,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Move a campaign to another status."""
    campaign_service = CampaignService(session)
    campaign = await campaign_service.transition_status(
        campaign_id,
        transition.target,
        user_id,
        transition.comments
    )
    return CampaignResponse.model_validate(campaign)


@router.post("/{campaign_id}/milestones/{milestone_index}", response_model=CampaignResponse)
async def update_milestone_status(
    campaign_id: str,
    milestone_index: int,
    milestone: MilestoneStatusUpdate,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Set the status of one campaign milestone."""
    campaign_service = CampaignService(session)
    campaign = await campaign_service.update_milestone_status(
        campaign_id,
        milestone_index,
        milestone.status,
        user_id
    )
    return CampaignResponse.model_validate(campaign)


@router.post("/{campaign_id}/versions", response_model=CampaignResponse, status_code=201)
async def create_campaign_version(
    campaign_id: str,
    campaign_data: CampaignUpdate,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Create a new active version of a campaign with the updates applied."""
    campaign_service = CampaignService(session)
    campaign = await campaign_service.create_new_version(campaign_id, campaign_data, user_id)
    return CampaignResponse.model_validate(campaign)


@router.get("/{campaign_id}/versions", response_model=List[CampaignResponse])
async def list_campaign_versions(
    campaign_id: str,
    session: AsyncSession = Depends(get_session)
):
    """List every version of a campaign."""
    campaign_service = CampaignService(session)
    versions = await campaign_service.list_versions(campaign_id)
    return [CampaignResponse.model_validate(c) for c in versions]


@router.get("/{campaign_id}/versions/{version}", response_model=CampaignResponse)
async def get_campaign_version(
    campaign_id: str,
    version: int,
    session: AsyncSession = Depends(get_session)
):
    """Get one version of a campaign."""
    campaign_service = CampaignService(session)
    campaign = await campaign_service.get_version(campaign_id, version)
    return CampaignResponse.model_validate(campaign)


@router.post("/{campaign_id}/activate", response_model=CampaignResponse)
async def activate_campaign_version(
    campaign_id: str,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Make this version the active one."""
    campaign_service = CampaignService(session)
    campaign = await campaign_service.activate_version(campaign_id, user_id)
    return CampaignResponse.model_validate(campaign)


@router.delete("/{campaign_id}", status_code=204)
async def delete_campaign(
    campaign_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Delete a campaign that has no plans."""
    campaign_service = CampaignService(session)
    await campaign_service.delete(campaign_id)
