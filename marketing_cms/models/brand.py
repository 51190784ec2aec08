"""
Brand model - identity and guidelines that content is checked against.
"""
from datetime import datetime
from typing import Optional, Dict, Any

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON

from marketing_cms.core.dates import utc_now
from marketing_cms.models.base import NAIVE_UTC, new_id


class Brand(SQLModel, table=True):
    """
    Brand entity - owns campaigns and may directly own standalone content.
    """
    id: str = Field(default_factory=new_id, primary_key=True)
    
    name: str = Field(index=True, unique=True)
    description: str = ""
    
    # Guidelines (flexible JSON)
    guidelines: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    # Example guidelines: {
    #   "tone": ["friendly"],
    #   "vocabulary": ["innovative"],
    #   "avoided_terms": ["cheap"],
    #   "visual_identity": {"primary_color": "#000"},
    #   "narratives": {"elevator_pitch": "..."},
    #   "key_messages": [{"audience_segment": "...", "message": "..."}]
    # }
    
    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_type=NAIVE_UTC)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=NAIVE_UTC)
