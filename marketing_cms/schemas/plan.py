"""
Plan schemas.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel

from marketing_cms.models.plan import PlanType


class PlanCreate(BaseModel):
    """
    Create a plan.
    Master plans need campaign_id; micro plans need parent_plan_id.
    """
    type: PlanType
    title: str
    campaign_id: Optional[str] = None
    parent_plan_id: Optional[str] = None
    date_start: datetime
    date_end: datetime
    goals: List[str] = []
    target_audience: str = ""
    channels: List[str] = []
    
    class Config:
        json_schema_extra = {
            "example": {
                "type": "micro",
                "title": "Week 1 tips",
                "parent_plan_id": "9b1c...",
                "date_start": "2026-03-01T00:00:00Z",
                "date_end": "2026-03-07T00:00:00Z",
                "goals": ["Weekly engagement boost"],
                "channels": ["twitter"]
            }
        }


class PlanUpdate(BaseModel):
    """Update a draft plan."""
    title: Optional[str] = None
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None
    goals: Optional[List[str]] = None
    target_audience: Optional[str] = None
    channels: Optional[List[str]] = None


class PlanStateMetadata(BaseModel):
    version: int
    updated_at: datetime
    updated_by: str
    comments: Optional[str] = None


class PlanResponse(BaseModel):
    """Plan response."""
    id: str
    type: str
    campaign_id: Optional[str]
    parent_plan_id: Optional[str]
    master_plan_id: Optional[str]
    brand_id: Optional[str]
    title: str
    date_start: datetime
    date_end: datetime
    goals: List[str]
    target_audience: str
    channels: List[str]
    state: str
    state_metadata: PlanStateMetadata
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True
