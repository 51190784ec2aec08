"""
Brands API routes.
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from marketing_cms.config import settings
from marketing_cms.database import get_session
from marketing_cms.services.brand_service import BrandService
from marketing_cms.schemas.brand import BrandCreate, BrandUpdate, BrandResponse, KeyMessageCreate

router = APIRouter(prefix=f"{settings.API_PREFIX}/brands", tags=["brands"])


@router.post("/", response_model=BrandResponse, status_code=201)
async def create_brand(
    brand_data: BrandCreate,
    session: AsyncSession = Depends(get_session)
):
    """Create a new brand."""
    return await BrandService(session).create(brand_data)


@router.get("/", response_model=List[BrandResponse])
async def list_brands(session: AsyncSession = Depends(get_session)):
    """List all brands."""
    return await BrandService(session).list()


@router.get("/{brand_id}", response_model=BrandResponse)
async def get_brand(brand_id: str, session: AsyncSession = Depends(get_session)):
    """Get a brand by ID."""
    return await BrandService(session).get(brand_id)


@router.patch("/{brand_id}", response_model=BrandResponse)
async def update_brand(
    brand_id: str,
    brand_data: BrandUpdate,
    session: AsyncSession = Depends(get_session)
):
    """Update a brand and its guidelines."""
    return await BrandService(session).update(brand_id, brand_data)


@router.post("/{brand_id}/key-messages", response_model=BrandResponse)
async def add_key_message(
    brand_id: str,
    key_message: KeyMessageCreate,
    session: AsyncSession = Depends(get_session)
):
    """Append a key message to the brand guidelines."""
    return await BrandService(session).add_key_message(
        brand_id,
        key_message.audience_segment,
        key_message.message
    )


@router.delete("/{brand_id}", status_code=204)
async def delete_brand(brand_id: str, session: AsyncSession = Depends(get_session)):
    """Delete a brand nothing references."""
    await BrandService(session).delete(brand_id)
