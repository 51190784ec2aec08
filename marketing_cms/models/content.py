"""
Content model - a single publishable item owned by a micro plan or a brand.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON

from marketing_cms.core.dates import utc_now
from marketing_cms.models.base import NAIVE_UTC, new_id


class ContentState(str, Enum):
    DRAFT = "draft"
    READY = "ready"
    PUBLISHED = "published"


class Content(SQLModel, table=True):
    """
    Content entity.
    Exactly one of micro_plan_id / brand_id is set.
    """
    id: str = Field(default_factory=new_id, primary_key=True)
    
    # Owner
    micro_plan_id: Optional[str] = Field(default=None, index=True)
    brand_id: Optional[str] = Field(default=None, index=True)
    
    # Body
    title: str
    body: str
    format: Optional[str] = None
    platform: Optional[str] = None
    target_audience: Optional[str] = None
    keywords: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    media_requirements: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    
    # Lifecycle
    state: str = Field(default=ContentState.DRAFT.value, index=True)
    state_updated_at: datetime = Field(default_factory=utc_now, sa_type=NAIVE_UTC)
    state_updated_by: str = "system-user"
    state_comments: Optional[str] = None
    scheduled_for: Optional[datetime] = Field(default=None, index=True, sa_type=NAIVE_UTC)
    published_at: Optional[datetime] = Field(default=None, sa_type=NAIVE_UTC)
    published_url: Optional[str] = None
    platform_post_id: Optional[str] = None
    
    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_type=NAIVE_UTC)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=NAIVE_UTC)
    
    @property
    def state_metadata(self) -> Dict[str, Any]:
        return {
            "updated_at": self.state_updated_at,
            "updated_by": self.state_updated_by,
            "comments": self.state_comments,
            "scheduled_for": self.scheduled_for,
            "published_at": self.published_at,
            "published_url": self.published_url,
        }
    
    @property
    def published_metadata(self) -> Optional[Dict[str, Any]]:
        if not self.published_url:
            return None
        return {"url": self.published_url, "platform_post_id": self.platform_post_id}
