"""
Plan model - master plans belong to a campaign, micro plans to a master plan.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON

from marketing_cms.core.dates import utc_now
from marketing_cms.models.base import NAIVE_UTC, new_id


class PlanType(str, Enum):
    MASTER = "master"
    MICRO = "micro"


class PlanState(str, Enum):
    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"
    ACTIVE = "active"


class Plan(SQLModel, table=True):
    """
    Plan entity - content strategy container.
    Master plans set campaign_id; micro plans set parent_plan_id.
    """
    id: str = Field(default_factory=new_id, primary_key=True)
    type: str = Field(index=True)
    
    # Hierarchy (by id, resolved through explicit lookups)
    campaign_id: Optional[str] = Field(default=None, index=True)
    parent_plan_id: Optional[str] = Field(default=None, index=True)
    brand_id: Optional[str] = Field(default=None, index=True)
    
    # Basic info
    title: str
    date_start: datetime = Field(sa_type=NAIVE_UTC)
    date_end: datetime = Field(sa_type=NAIVE_UTC)
    goals: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    target_audience: str = ""
    channels: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    
    # Lifecycle
    state: str = Field(default=PlanState.DRAFT.value, index=True)
    state_version: int = 1
    state_updated_at: datetime = Field(default_factory=utc_now, sa_type=NAIVE_UTC)
    state_updated_by: str = "system-user"
    state_comments: Optional[str] = None
    
    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_type=NAIVE_UTC)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=NAIVE_UTC)
    
    @property
    def master_plan_id(self) -> Optional[str]:
        return self.parent_plan_id
    
    @property
    def state_metadata(self) -> Dict[str, Any]:
        return {
            "version": self.state_version,
            "updated_at": self.state_updated_at,
            "updated_by": self.state_updated_by,
            "comments": self.state_comments,
        }
