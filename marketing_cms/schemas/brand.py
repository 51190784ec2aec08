"""
Brand schemas.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel


class VisualIdentity(BaseModel):
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None


class Narratives(BaseModel):
    elevator_pitch: Optional[str] = None
    short_narrative: Optional[str] = None
    full_narrative: Optional[str] = None


class KeyMessage(BaseModel):
    audience_segment: str
    message: str


class BrandGuidelines(BaseModel):
    """Brand guidelines; avoided_terms gate content entering Ready."""
    tone: List[str] = []
    vocabulary: List[str] = []
    avoided_terms: List[str] = []
    visual_identity: Optional[VisualIdentity] = None
    narratives: Optional[Narratives] = None
    key_messages: List[KeyMessage] = []


class BrandGuidelinesUpdate(BaseModel):
    """Partial guidelines update; unset fields keep their stored value."""
    tone: Optional[List[str]] = None
    vocabulary: Optional[List[str]] = None
    avoided_terms: Optional[List[str]] = None
    visual_identity: Optional[VisualIdentity] = None
    narratives: Optional[Narratives] = None
    key_messages: Optional[List[KeyMessage]] = None


class BrandCreate(BaseModel):
    """Create a new brand."""
    name: str
    description: str = ""
    guidelines: Optional[BrandGuidelines] = None
    
    class Config:
        json_schema_extra = {
            "example": {
                "name": "Acme Tools",
                "description": "Developer productivity tools",
                "guidelines": {
                    "tone": ["friendly", "expert"],
                    "vocabulary": ["streamlined"],
                    "avoided_terms": ["cheap", "guaranteed"]
                }
            }
        }


class KeyMessageCreate(BaseModel):
    """Append a key message to the brand guidelines."""
    audience_segment: str
    message: str


class BrandUpdate(BaseModel):
    """Update an existing brand."""
    name: Optional[str] = None
    description: Optional[str] = None
    guidelines: Optional[BrandGuidelinesUpdate] = None


class BrandResponse(BaseModel):
    """Brand response."""
    id: str
    name: str
    description: str
    guidelines: Optional[BrandGuidelines]
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True
