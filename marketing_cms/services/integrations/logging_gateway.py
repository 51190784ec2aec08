"""
Development publication gateway.
Logs posts instead of publishing them.
"""
import logging
import uuid

from marketing_cms.services.integrations.base import PublicationGateway, PublishResult

logger = logging.getLogger(__name__)


class LoggingPublicationGateway(PublicationGateway):
    """
    Mock gateway for development/testing.
    Returns a synthetic URL for every post.
    """
    
    channel = "Log"
    
    async def publish(self, text: str, brand_id: str) -> PublishResult:
        post_id = uuid.uuid4().hex[:16]
        logger.info(f"[MOCK PUBLISH] Brand: {brand_id}, Post: {post_id}")
        logger.info(f"[MOCK PUBLISH] Body: {text[:100]}")
        return PublishResult(url=f"https://example.invalid/posts/{post_id}", platform_post_id=post_id)
