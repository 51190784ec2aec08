"""
Content schemas.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel


class MediaRequirements(BaseModel):
    type: str
    description: Optional[str] = None


class ContentCreate(BaseModel):
    """Create content owned by a micro plan or directly by a brand."""
    micro_plan_id: Optional[str] = None
    brand_id: Optional[str] = None
    title: str
    body: str
    format: Optional[str] = None
    platform: Optional[str] = None
    target_audience: Optional[str] = None
    keywords: List[str] = []
    media_requirements: Optional[MediaRequirements] = None
    
    class Config:
        json_schema_extra = {
            "example": {
                "brand_id": "3f2c0d9e8b6a4f0e9c1d2b3a4e5f6a7b",
                "title": "Productivity tip",
                "body": "Batch your notifications to stay focused.",
                "format": "Tweet",
                "platform": "Twitter",
                "keywords": ["productivity"]
            }
        }


class ContentUpdate(BaseModel):
    """Update draft content. Keywords replace the stored list."""
    title: Optional[str] = None
    body: Optional[str] = None
    format: Optional[str] = None
    platform: Optional[str] = None
    target_audience: Optional[str] = None
    keywords: Optional[List[str]] = None
    media_requirements: Optional[MediaRequirements] = None


class ScheduleRequest(BaseModel):
    publish_at: datetime


class ContentStateMetadata(BaseModel):
    updated_at: datetime
    updated_by: str
    comments: Optional[str] = None
    scheduled_for: Optional[datetime] = None
    published_at: Optional[datetime] = None
    published_url: Optional[str] = None


class PublishedMetadata(BaseModel):
    url: str
    platform_post_id: Optional[str] = None


class ContentResponse(BaseModel):
    """Content response."""
    id: str
    micro_plan_id: Optional[str]
    brand_id: Optional[str]
    title: str
    body: str
    format: Optional[str]
    platform: Optional[str]
    target_audience: Optional[str]
    keywords: List[str]
    media_requirements: Optional[MediaRequirements]
    state: str
    state_metadata: ContentStateMetadata
    published_metadata: Optional[PublishedMetadata]
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True
