"""
Content API routes.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from marketing_cms.config import settings
from marketing_cms.database import get_session
from marketing_cms.services.content_service import ContentService
from marketing_cms.schemas.content import ContentCreate, ContentUpdate, ContentResponse, ScheduleRequest
from marketing_cms.schemas.common import StateTransitionRequest
from marketing_cms.api.deps import get_user_id

router = APIRouter(prefix=f"{settings.API_PREFIX}/content", tags=["content"])


@router.post("/", response_model=ContentResponse, status_code=201)
async def create_content(
    content_data: ContentCreate,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """
    Create content for a micro plan or a brand.
    Falls back to DEFAULT_BRAND_ID when configured and no owner is given.
    """
    if not content_data.micro_plan_id and not content_data.brand_id and settings.DEFAULT_BRAND_ID:
        content_data = content_data.model_copy(update={"brand_id": settings.DEFAULT_BRAND_ID})
    content = await ContentService(session).create(content_data, user_id)
    return ContentResponse.model_validate(content)


@router.get("/", response_model=List[ContentResponse])
async def list_content(
    micro_plan_id: Optional[str] = None,
    brand_id: Optional[str] = None,
    state: Optional[str] = None,
    session: AsyncSession = Depends(get_session)
):
    """List content with optional filters."""
    items = await ContentService(session).list(micro_plan_id, brand_id, state)
    return [ContentResponse.model_validate(c) for c in items]


@router.get("/{content_id}", response_model=ContentResponse)
async def get_content(content_id: str, session: AsyncSession = Depends(get_session)):
    """Get content by ID."""
    content = await ContentService(session).get(content_id)
    return ContentResponse.model_validate(content)


@router.patch("/{content_id}", response_model=ContentResponse)
async def update_content(
    content_id: str,
    content_data: ContentUpdate,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Update draft content."""
    content = await ContentService(session).update(content_id, content_data, user_id)
    return ContentResponse.model_validate(content)


@router.post("/{content_id}/transition", response_model=ContentResponse)
async def transition_content_state(
    content_id: str,
    transition: StateTransitionRequest,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Move content to another state."""
    content = await ContentService(session).transition_state(
        content_id,
        transition.target,
        user_id,
        transition.comments
    )
    return ContentResponse.model_validate(content)


@router.post("/{content_id}/schedule", response_model=ContentResponse)
async def schedule_content(
    content_id: str,
    schedule: ScheduleRequest,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Schedule ready content for publication."""
    content = await ContentService(session).schedule(content_id, schedule.publish_at, user_id)
    return ContentResponse.model_validate(content)


@router.delete("/{content_id}/schedule", response_model=ContentResponse)
async def unschedule_content(
    content_id: str,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session)
):
    """Remove the publication schedule."""
    content = await ContentService(session).unschedule(content_id, user_id)
    return ContentResponse.model_validate(content)


@router.delete("/{content_id}", status_code=204)
async def delete_content(content_id: str, session: AsyncSession = Depends(get_session)):
    """Delete content."""
    await ContentService(session).delete(content_id)
