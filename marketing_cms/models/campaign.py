"""
Campaign model - top-level marketing initiative scoped to one brand.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON

from marketing_cms.core.dates import utc_now
from marketing_cms.models.base import NAIVE_UTC, new_id


class CampaignStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class Campaign(SQLModel, table=True):
    """
    Campaign entity - owns master plans.
    Names are unique across all brands; the versions of one campaign share
    its name and its root_campaign_id.
    """
    id: str = Field(default_factory=new_id, primary_key=True)
    brand_id: str = Field(index=True)
    
    # Basic info
    name: str = Field(index=True)
    description: Optional[str] = None
    objectives: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    
    # Date range
    start_date: datetime = Field(sa_type=NAIVE_UTC)
    end_date: datetime = Field(sa_type=NAIVE_UTC)
    
    # Strategy (flexible JSON)
    goals: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    audience: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    content_mix: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    major_milestones: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    
    # Lifecycle
    status: str = Field(default=CampaignStatus.DRAFT.value, index=True)
    state_updated_at: datetime = Field(default_factory=utc_now, sa_type=NAIVE_UTC)
    state_updated_by: str = "system-user"
    state_comments: Optional[str] = None
    
    # Versioning
    version: int = 1
    is_active: bool = Field(default=True, index=True)
    previous_version_id: Optional[str] = None
    root_campaign_id: Optional[str] = Field(default=None, index=True)
    
    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_type=NAIVE_UTC)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=NAIVE_UTC)
    
    @property
    def version_root_id(self) -> str:
        return self.root_campaign_id or self.id
    
    @property
    def state_metadata(self) -> Dict[str, Any]:
        return {
            "updated_at": self.state_updated_at,
            "updated_by": self.state_updated_by,
            "comments": self.state_comments,
        }
