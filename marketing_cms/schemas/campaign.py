"""
Campaign schemas.
"""
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel


class KPI(BaseModel):
    metric: str
    target: float


class CampaignGoal(BaseModel):
    type: str
    description: str
    priority: int = 1
    kpis: List[KPI] = []
    completion_criteria: Optional[str] = None


class AudienceSegment(BaseModel):
    segment: str
    characteristics: List[str] = []
    pain_points: List[str] = []


class ChannelFormat(BaseModel):
    name: str
    format: str


class ContentMixItem(BaseModel):
    category: str
    ratio: float
    platforms: List[ChannelFormat] = []


class Milestone(BaseModel):
    date: Optional[datetime] = None
    description: str
    status: Literal["pending", "completed"] = "pending"


class CampaignCreate(BaseModel):
    """Create a new campaign; identify the brand by id or by name."""
    brand_id: Optional[str] = None
    brand_name: Optional[str] = None
    name: str
    description: Optional[str] = None
    objectives: List[str] = []
    start_date: datetime
    end_date: datetime
    goals: List[CampaignGoal] = []
    audience: List[AudienceSegment] = []
    content_mix: List[ContentMixItem] = []
    major_milestones: List[Milestone] = []
    
    class Config:
        json_schema_extra = {
            "example": {
                "brand_id": "3f2c0d9e8b6a4f0e9c1d2b3a4e5f6a7b",
                "name": "Spring Launch",
                "objectives": ["Increase awareness"],
                "start_date": "2026-03-01T00:00:00Z",
                "end_date": "2026-03-31T00:00:00Z"
            }
        }


class CampaignUpdate(BaseModel):
    """Update an existing campaign. Only fields that are set are applied."""
    name: Optional[str] = None
    description: Optional[str] = None
    objectives: Optional[List[str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    goals: Optional[List[CampaignGoal]] = None
    audience: Optional[List[AudienceSegment]] = None
    content_mix: Optional[List[ContentMixItem]] = None
    major_milestones: Optional[List[Milestone]] = None
    status: Optional[str] = None
    comments: Optional[str] = None


class MilestoneStatusUpdate(BaseModel):
    status: Literal["pending", "completed"]


class CampaignStateMetadata(BaseModel):
    updated_at: datetime
    updated_by: str
    comments: Optional[str] = None


class CampaignResponse(BaseModel):
    """Campaign response."""
    id: str
    brand_id: str
    name: str
    description: Optional[str]
    objectives: List[str]
    start_date: datetime
    end_date: datetime
    goals: List[CampaignGoal]
    audience: List[AudienceSegment]
    content_mix: List[ContentMixItem]
    major_milestones: List[Milestone]
    status: str
    state_metadata: CampaignStateMetadata
    version: int
    is_active: bool
    previous_version_id: Optional[str]
    root_campaign_id: Optional[str]
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True
