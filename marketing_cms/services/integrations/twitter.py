"""
X/Twitter API integration.
Handles the authenticated session and posting content as tweets.

Note: Requires an OAuth 2.0 user access token with tweet.write scope.
"""
import asyncio
import logging
import httpx
from typing import Optional, Dict

from marketing_cms.config import settings
from marketing_cms.core.exceptions import PublishError
from marketing_cms.services.integrations.base import PublicationGateway, PublishResult

logger = logging.getLogger(__name__)

CHANNEL = "Twitter"


# =============================================================================
# SESSION
# =============================================================================

class TwitterSession:
    """
    Authenticated X API session.
    
    initialize() verifies the credentials once, retrying with exponential
    backoff up to retry_limit attempts. When max_total_delay is set, retries
    stop early once the next backoff would push the total wait past it. Construct one per process and pass
    it to the gateway.
    """
    
    def __init__(
        self,
        access_token: str,
        username: Optional[str] = None,
        base_url: str = "https://api.twitter.com/2",
        retry_limit: int = 5,
        retry_base_delay: float = 2.0,
        timeout: float = 30.0,
        max_total_delay: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.access_token = access_token
        self.username = username or None
        self.user_id: Optional[str] = None
        self.base_url = base_url.rstrip("/")
        self.retry_limit = max(1, retry_limit)
        self.retry_base_delay = retry_base_delay
        self.max_total_delay = max_total_delay
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self._initialized = False
        self._lock = asyncio.Lock()
    
    @property
    def headers(self) -> Dict[str, str]:
        """Get authorization headers."""
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json"
        }
    
    @property
    def is_initialized(self) -> bool:
        return self._initialized
    
    async def initialize(self) -> None:
        """Verify credentials; safe to call repeatedly."""
        async with self._lock:
            if self._initialized:
                return
            
            if not self.access_token:
                raise PublishError(CHANNEL, "access token not configured")
            
            waited = 0.0
            attempts = 0
            for attempt in range(1, self.retry_limit + 1):
                attempts = attempt
                try:
                    response = await self.client.get(f"{self.base_url}/users/me", headers=self.headers)
                    
                    if response.status_code == 200:
                        data = response.json().get("data", {})
                        self.user_id = data.get("id")
                        self.username = self.username or data.get("username")
                        self._initialized = True
                        logger.info(f"Twitter session ready for @{self.username}")
                        return
                    
                    if response.status_code in (401, 403):
                        raise PublishError(CHANNEL, f"credentials rejected ({response.status_code})")
                    
                    logger.warning(f"Twitter login attempt {attempt}/{self.retry_limit} failed: {response.status_code}")
                
                except httpx.HTTPError as e:
                    logger.warning(f"Twitter login attempt {attempt}/{self.retry_limit} failed: {e}")
                
                if attempt == self.retry_limit:
                    break
                delay = self.retry_base_delay * (2 ** (attempt - 1))
                if self.max_total_delay is not None and waited + delay > self.max_total_delay:
                    logger.warning(f"Twitter login retry budget of {self.max_total_delay}s exhausted")
                    break
                await asyncio.sleep(delay)
                waited += delay
            
            raise PublishError(CHANNEL, f"login failed after {attempts} attempts")
    
    async def get_session(self) -> httpx.AsyncClient:
        """Return the authenticated client, initializing on first use."""
        await self.initialize()
        return self.client
    
    async def close(self) -> None:
        await self.client.aclose()


# =============================================================================
# GATEWAY
# =============================================================================

class TwitterGateway(PublicationGateway):
    """Publishes content bodies as tweets."""
    
    channel = CHANNEL
    
    def __init__(self, session: TwitterSession, max_length: int = 280):
        self.session = session
        self.max_length = max_length
    
    def post_url(self, tweet_id: str) -> str:
        return f"https://x.com/{self.session.username or 'i'}/status/{tweet_id}"
    
    async def publish(self, text: str, brand_id: str) -> PublishResult:
        if not text or not text.strip():
            raise PublishError(CHANNEL, "content body is empty", retryable=False)
        if len(text) > self.max_length:
            raise PublishError(
                CHANNEL,
                f"content is {len(text)} characters, limit is {self.max_length}",
                retryable=False
            )
        
        client = await self.session.get_session()
        try:
            response = await client.post(
                f"{self.session.base_url}/tweets",
                json={"text": text},
                headers=self.session.headers
            )
        except httpx.TimeoutException:
            logger.error("Twitter API timeout")
            raise PublishError(CHANNEL, "request timeout")
        except httpx.HTTPError as e:
            raise PublishError(CHANNEL, str(e))
        
        if response.status_code == 429:
            # Rate limited
            logger.warning("Twitter API rate limit exceeded")
            raise PublishError(CHANNEL, "rate limit exceeded")
        
        if response.status_code == 401:
            logger.error("Twitter API rejected credentials")
            raise PublishError(CHANNEL, "unauthorized (401)")
        
        if response.status_code == 403:
            # The post itself was refused, e.g. duplicate content
            logger.error(f"Twitter API refused the tweet: {response.text}")
            raise PublishError(CHANNEL, "tweet refused (403)", retryable=False)
        
        if response.status_code not in (200, 201):
            logger.error(f"Twitter API error: {response.status_code} - {response.text}")
            raise PublishError(CHANNEL, f"API error: {response.status_code}")
        
        tweet_id = response.json().get("data", {}).get("id")
        if not tweet_id:
            raise PublishError(CHANNEL, "response did not include a tweet id")
        
        logger.info(f"Tweet {tweet_id} published for brand {brand_id}")
        return PublishResult(url=self.post_url(tweet_id), platform_post_id=tweet_id)
    
    async def close(self) -> None:
        await self.session.close()


def build_twitter_gateway() -> TwitterGateway:
    """Build a gateway from settings."""
    session = TwitterSession(
        access_token=settings.TWITTER_ACCESS_TOKEN,
        username=settings.TWITTER_USERNAME,
        base_url=settings.TWITTER_API_BASE_URL,
        retry_limit=settings.TWITTER_RETRY_LIMIT,
        retry_base_delay=settings.TWITTER_RETRY_BASE_DELAY,
        timeout=settings.PUBLISH_TIMEOUT_SECONDS,
        # Login backoff plus the post itself must fit in one publish timeout
        max_total_delay=settings.PUBLISH_TIMEOUT_SECONDS / 2
    )
    return TwitterGateway(session, max_length=settings.TWITTER_MAX_TWEET_LENGTH)
