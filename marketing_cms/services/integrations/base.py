"""
Base interfaces for publication channels.
Abstract base classes for third-party social platform integrations.
"""
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class PublishResult(BaseModel):
    """Outcome of a successful publish."""
    url: str
    platform_post_id: Optional[str] = None


class PublicationGateway(ABC):
    """Base interface for publication channels (X/Twitter, etc.)"""
    
    channel: str = "Publication channel"
    
    @abstractmethod
    async def publish(self, text: str, brand_id: str) -> PublishResult:
        """
        Publish text on behalf of a brand.
        
        Returns:
            PublishResult with the canonical URL of the post
        
        Raises:
            PublishError on transport, auth or rate-limit failures
        """
        pass
    
    async def close(self) -> None:
        """Release network resources."""
        return None
