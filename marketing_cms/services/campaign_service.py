"""
Campaign service - campaign management and status lifecycle.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from marketing_cms.core.dates import utc_now, to_naive_utc
from marketing_cms.core.exceptions import NotFoundError, ConflictError, ValidationFailedError
from marketing_cms.repositories.brand_repo import BrandRepository
from marketing_cms.repositories.campaign_repo import CampaignRepository
from marketing_cms.repositories.plan_repo import PlanRepository
from marketing_cms.models.brand import Brand
from marketing_cms.models.campaign import Campaign, CampaignStatus
from marketing_cms.schemas.campaign import CampaignCreate, CampaignUpdate, Milestone
from marketing_cms.services.state_machines import CAMPAIGN_STATE_MACHINE, state_metadata_update

logger = logging.getLogger(__name__)

# Nested lists are reconciled item by item using these identifying keys
MERGE_KEYS = {
    "goals": "type",
    "audience": "segment",
    "content_mix": "category",
    "major_milestones": "description",
}

# Columns copied into a new campaign version
VERSIONED_FIELDS = {
    "brand_id", "name", "description", "objectives", "start_date", "end_date",
    "goals", "audience", "content_mix", "major_milestones", "status",
}


def merge_by_key(existing: List[Dict[str, Any]], updates: List[Dict[str, Any]], key: str) -> List[Dict[str, Any]]:
    """
    Reconcile two lists of records that share an identifying key.
    Updated records replace stored ones field by field; new records are appended.
    """
    merged = [dict(item) for item in existing]
    positions = {item.get(key): index for index, item in enumerate(merged)}
    for item in updates:
        index = positions.get(item.get(key))
        if index is None:
            positions[item.get(key)] = len(merged)
            merged.append(dict(item))
        else:
            merged[index] = {**merged[index], **item}
    return merged


class CampaignService:
    """Service for campaign operations."""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.campaign_repo = CampaignRepository(session)
        self.brand_repo = BrandRepository(session)
        self.plan_repo = PlanRepository(session)
    
    async def _resolve_brand(self, brand_id: Optional[str], brand_name: Optional[str]) -> Brand:
        if brand_id:
            brand = await self.brand_repo.get(brand_id)
            if not brand:
                raise NotFoundError("Brand", brand_id)
            return brand
        if brand_name:
            brand = await self.brand_repo.get_by_name(brand_name)
            if not brand:
                raise NotFoundError("Brand", brand_name)
            return brand
        raise ValidationFailedError("Either brand_id or brand_name must be provided", "brand_id")
    
    async def create(self, campaign_data: CampaignCreate, user_id: Optional[str] = None) -> Campaign:
        """Create a new campaign in draft status."""
        brand = await self._resolve_brand(campaign_data.brand_id, campaign_data.brand_name)
        
        # Names are unique across all brands
        if await self.campaign_repo.get_by_name(campaign_data.name):
            raise ConflictError("Campaign", "name", campaign_data.name)
        
        start_date = to_naive_utc(campaign_data.start_date)
        end_date = to_naive_utc(campaign_data.end_date)
        if start_date > end_date:
            raise ValidationFailedError("start_date must not be after end_date", "start_date")
        
        data = campaign_data.model_dump(
            mode="json",
            include={"name", "description", "objectives", "goals", "audience", "content_mix", "major_milestones"}
        )
        data.update(
            brand_id=brand.id,
            start_date=start_date,
            end_date=end_date,
            status=CampaignStatus.DRAFT.value,
            state_comments="",
            **state_metadata_update(user_id)
        )
        
        campaign = await self.campaign_repo.create(data)
        logger.info(f"Campaign '{campaign.name}' ({campaign.id}) created for brand {brand.id}")
        return campaign
    
    async def get(self, campaign_id: str) -> Campaign:
        """Get a campaign by ID."""
        campaign = await self.campaign_repo.get(campaign_id)
        if not campaign:
            raise NotFoundError("Campaign", campaign_id)
        return campaign
    
    async def get_by_name(self, name: str) -> Campaign:
        campaign = await self.campaign_repo.get_by_name(name)
        if not campaign:
            raise NotFoundError("Campaign", name)
        return campaign
    
    async def list(
        self,
        brand_id: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
        active_only: bool = True
    ) -> dict:
        """
        List campaigns with optional brand and status filters.
        Superseded versions are left out unless active_only is False.
        """
        filters = {}
        if active_only:
            filters["is_active"] = True
        if brand_id:
            filters["brand_id"] = brand_id
        if status:
            filters["status"] = status
        
        return await self.campaign_repo.list_paginated(
            filters=filters,
            page=page,
            limit=limit
        )
    
    async def _reconcile(self, campaign: Campaign, campaign_data: CampaignUpdate) -> Dict[str, Any]:
        """
        Column changes for the fields set on campaign_data.
        A status change goes through the same transition rules as transition_status.
        """
        changes = campaign_data.model_dump(mode="json", exclude_unset=True)
        update_data: Dict[str, Any] = {}
        
        name = changes.get("name")
        if name is not None and name != campaign.name:
            existing = await self.campaign_repo.get_by_name(name)
            if existing and existing.version_root_id != campaign.version_root_id:
                raise ConflictError("Campaign", "name", name)
            update_data["name"] = name
        
        for field in ("description", "objectives"):
            if changes.get(field) is not None:
                update_data[field] = changes[field]
        
        start_date = to_naive_utc(campaign_data.start_date) or campaign.start_date
        end_date = to_naive_utc(campaign_data.end_date) or campaign.end_date
        if start_date > end_date:
            raise ValidationFailedError("start_date must not be after end_date", "start_date")
        if campaign_data.start_date is not None:
            update_data["start_date"] = start_date
        if campaign_data.end_date is not None:
            update_data["end_date"] = end_date
        
        for field, key in MERGE_KEYS.items():
            if changes.get(field) is not None:
                update_data[field] = merge_by_key(getattr(campaign, field) or [], changes[field], key)
        
        if campaign_data.status is not None:
            update_data["status"] = CAMPAIGN_STATE_MACHINE.validate(campaign.status, campaign_data.status)
        
        return update_data
    
    async def update(
        self,
        campaign_id: str,
        campaign_data: CampaignUpdate,
        user_id: Optional[str] = None
    ) -> Campaign:
        """Update a campaign in place. Only fields set on campaign_data are reconciled."""
        campaign = await self.get(campaign_id)
        update_data = await self._reconcile(campaign, campaign_data)
        update_data.update(state_metadata_update(user_id, campaign_data.comments))
        return await self.campaign_repo.update(campaign_id, update_data)
    
    async def transition_status(
        self,
        campaign_id: str,
        target: str,
        user_id: Optional[str] = None,
        comments: Optional[str] = None
    ) -> Campaign:
        """Move a campaign to another status."""
        campaign = await self.get(campaign_id)
        status = CAMPAIGN_STATE_MACHINE.validate(campaign.status, target)
        
        update_data = {"status": status, **state_metadata_update(user_id, comments)}
        updated = await self.campaign_repo.update(campaign_id, update_data)
        logger.info(f"Campaign {campaign_id} moved from {campaign.status} to {status}")
        return updated
    
    async def update_milestone_status(
        self,
        campaign_id: str,
        milestone_index: int,
        status: str,
        user_id: Optional[str] = None
    ) -> Campaign:
        """Set the status of one milestone."""
        campaign = await self.get(campaign_id)
        milestones = [dict(m) for m in campaign.major_milestones or []]
        if milestone_index < 0 or milestone_index >= len(milestones):
            raise NotFoundError("Milestone", str(milestone_index))
        
        milestones[milestone_index]["status"] = status
        update_data = {"major_milestones": milestones, **state_metadata_update(user_id)}
        return await self.campaign_repo.update(campaign_id, update_data)
    
    async def get_active_campaigns(self, brand_id: str) -> List[Campaign]:
        """Campaigns of a brand whose status is active."""
        return await self.campaign_repo.list_active(brand_id)
    
    async def list_upcoming_milestones(self, days_ahead: int = 7, now: Optional[datetime] = None) -> List[Campaign]:
        """Current campaign versions with a pending milestone due within days_ahead."""
        now = now or utc_now()
        horizon = now + timedelta(days=days_ahead)
        
        campaigns = await self.campaign_repo.list({"is_active": True}, order_by="start_date", order_desc=False)
        upcoming = []
        for campaign in campaigns:
            for item in campaign.major_milestones or []:
                milestone = Milestone.model_validate(item)
                date = to_naive_utc(milestone.date)
                if milestone.status == "pending" and date and now <= date <= horizon:
                    upcoming.append(campaign)
                    break
        return upcoming
    
    # =========================================================================
    # VERSIONS
    # =========================================================================
    
    async def create_new_version(
        self,
        campaign_id: str,
        campaign_data: CampaignUpdate,
        user_id: Optional[str] = None
    ) -> Campaign:
        """
        Copy a campaign into a new active version with the updates applied.
        Every other version of the campaign becomes inactive.
        """
        campaign = await self.get(campaign_id)
        root_id = campaign.version_root_id
        versions = await self.campaign_repo.list_versions(root_id)
        version = versions[-1].version + 1
        
        data = campaign.model_dump(include=VERSIONED_FIELDS)
        data.update(await self._reconcile(campaign, campaign_data))
        data.update(
            version=version,
            is_active=True,
            previous_version_id=campaign.id,
            root_campaign_id=root_id,
            **state_metadata_update(user_id, campaign_data.comments or f"Created new version {version}")
        )
        
        await self.campaign_repo.deactivate_versions(root_id)
        new_version = await self.campaign_repo.create(data)
        logger.info(f"Campaign '{new_version.name}' version {version} ({new_version.id}) created")
        return new_version
    
    async def list_versions(self, campaign_id: str) -> List[Campaign]:
        """All versions of the campaign campaign_id belongs to, oldest first."""
        campaign = await self.get(campaign_id)
        return await self.campaign_repo.list_versions(campaign.version_root_id)
    
    async def get_version(self, campaign_id: str, version: int) -> Campaign:
        campaign = await self.get(campaign_id)
        found = await self.campaign_repo.get_version(campaign.version_root_id, version)
        if not found:
            raise NotFoundError("Campaign version", f"{campaign_id}@{version}")
        return found
    
    async def activate_version(self, campaign_id: str, user_id: Optional[str] = None) -> Campaign:
        """Make campaign_id the active version of its campaign."""
        campaign = await self.get(campaign_id)
        if campaign.is_active:
            return campaign
        
        await self.campaign_repo.deactivate_versions(campaign.version_root_id)
        update_data = {
            "is_active": True,
            **state_metadata_update(user_id, f"Activated version {campaign.version}")
        }
        return await self.campaign_repo.update(campaign_id, update_data)
    
    async def delete(self, campaign_id: str) -> bool:
        """Delete a campaign that no plan references."""
        campaign = await self.get(campaign_id)
        
        if await self.plan_repo.count_by_campaign(campaign_id):
            raise ConflictError(
                "Campaign",
                message=f"Campaign '{campaign.name}' still has plans; delete them first"
            )
        
        success = await self.campaign_repo.delete(campaign_id)
        if success:
            logger.info(f"Campaign '{campaign.name}' ({campaign_id}) deleted")
        return success
