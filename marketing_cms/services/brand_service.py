"""
Brand service - brand management and guideline updates.
"""
from typing import Optional, List

from sqlmodel.ext.asyncio.session import AsyncSession

from marketing_cms.core.exceptions import NotFoundError, ConflictError
from marketing_cms.repositories.brand_repo import BrandRepository
from marketing_cms.repositories.campaign_repo import CampaignRepository
from marketing_cms.repositories.content_repo import ContentRepository
from marketing_cms.models.brand import Brand
from marketing_cms.schemas.brand import BrandCreate, BrandUpdate


class BrandService:
    """Service for brand operations."""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.brand_repo = BrandRepository(session)
        self.campaign_repo = CampaignRepository(session)
        self.content_repo = ContentRepository(session)
    
    async def create(self, brand_data: BrandCreate) -> Brand:
        """Create a new brand with a unique name."""
        if await self.brand_repo.get_by_name(brand_data.name):
            raise ConflictError("Brand", "name", brand_data.name)
        
        data = brand_data.model_dump(mode="json")
        return await self.brand_repo.create(data)
    
    async def get(self, brand_id: str) -> Brand:
        """Get a brand by ID."""
        brand = await self.brand_repo.get(brand_id)
        if not brand:
            raise NotFoundError("Brand", brand_id)
        return brand
    
    async def get_by_name(self, name: str) -> Brand:
        brand = await self.brand_repo.get_by_name(name)
        if not brand:
            raise NotFoundError("Brand", name)
        return brand
    
    async def list(self) -> List[Brand]:
        return await self.brand_repo.list(order_by="name", order_desc=False)
    
    async def update(self, brand_id: str, brand_data: BrandUpdate) -> Brand:
        """
        Update a brand.
        Guideline fields that are set replace the stored ones; the rest are kept.
        """
        brand = await self.get(brand_id)
        update_data = {}
        
        if brand_data.name is not None and brand_data.name != brand.name:
            if await self.brand_repo.get_by_name(brand_data.name):
                raise ConflictError("Brand", "name", brand_data.name)
            update_data["name"] = brand_data.name
        
        if brand_data.description is not None:
            update_data["description"] = brand_data.description
        
        if brand_data.guidelines is not None:
            guidelines = dict(brand.guidelines or {})
            changes = brand_data.guidelines.model_dump(mode="json", exclude_unset=True)
            for field, value in changes.items():
                if value is not None:
                    guidelines[field] = value
            for field in ("tone", "vocabulary", "avoided_terms", "key_messages"):
                guidelines.setdefault(field, [])
            update_data["guidelines"] = guidelines
        
        if not update_data:
            return brand
        return await self.brand_repo.update(brand_id, update_data)
    
    async def delete(self, brand_id: str) -> bool:
        """Delete a brand that nothing references."""
        await self.get(brand_id)
        
        if await self.campaign_repo.count_by_brand(brand_id):
            raise ConflictError("Brand", message=f"Brand '{brand_id}' is still referenced by campaigns")
        if await self.content_repo.count_by_brand(brand_id):
            raise ConflictError("Brand", message=f"Brand '{brand_id}' is still referenced by content")
        
        return await self.brand_repo.delete(brand_id)
    
    async def add_key_message(self, brand_id: str, audience_segment: str, message: str) -> Brand:
        """Append a key message, creating empty guidelines if the brand has none."""
        brand = await self.get(brand_id)
        
        guidelines = dict(brand.guidelines or {"tone": [], "vocabulary": [], "avoided_terms": []})
        key_messages = list(guidelines.get("key_messages") or [])
        key_messages.append({"audience_segment": audience_segment, "message": message})
        guidelines["key_messages"] = key_messages
        
        return await self.brand_repo.update(brand_id, {"guidelines": guidelines})
