"""Tests for the X/Twitter publication gateway."""
import httpx
import pytest

from marketing_cms.config import settings
from marketing_cms.core.exceptions import PublishError
from marketing_cms.services.integrations.factory import build_publication_gateway
from marketing_cms.services.integrations.logging_gateway import LoggingPublicationGateway
from marketing_cms.services.integrations.twitter import TwitterGateway, TwitterSession

BASE_URL = "https://api.test/2"


def make_gateway(handler, username=None, retry_limit=3, max_length=280):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    session = TwitterSession(
        access_token="token",
        username=username,
        base_url=BASE_URL,
        retry_limit=retry_limit,
        retry_base_delay=0,
        client=client
    )
    return TwitterGateway(session, max_length=max_length)


def twitter_api(tweet_status=201, me_statuses=None):
    """Mock X API; me_statuses are returned in order for /users/me."""
    requests = []
    me_statuses = list(me_statuses or [200])

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("/users/me"):
            status = me_statuses.pop(0) if len(me_statuses) > 1 else me_statuses[0]
            return httpx.Response(status, json={"data": {"id": "u1", "username": "acme"}})
        if request.url.path.endswith("/tweets"):
            return httpx.Response(tweet_status, json={"data": {"id": "1234", "text": "hi"}})
        return httpx.Response(404)

    return handler, requests


@pytest.mark.asyncio
async def test_publish_returns_post_url():
    handler, requests = twitter_api()
    gateway = make_gateway(handler)

    result = await gateway.publish("Batch your notifications.", "brand-1")

    assert result.url == "https://x.com/acme/status/1234"
    assert result.platform_post_id == "1234"
    tweet_request = requests[-1]
    assert tweet_request.method == "POST"
    assert tweet_request.headers["Authorization"] == "Bearer token"
    assert b"Batch your notifications." in tweet_request.content


@pytest.mark.asyncio
async def test_session_initializes_once():
    handler, requests = twitter_api()
    gateway = make_gateway(handler, username="acme_tools")

    await gateway.publish("one", "brand-1")
    await gateway.publish("two", "brand-1")

    me_calls = [r for r in requests if r.url.path.endswith("/users/me")]
    assert len(me_calls) == 1
    # A configured username takes precedence over the API's
    assert gateway.session.username == "acme_tools"


@pytest.mark.asyncio
async def test_login_retries_then_succeeds():
    handler, requests = twitter_api(me_statuses=[503, 503, 200])
    gateway = make_gateway(handler, retry_limit=3)

    await gateway.session.initialize()

    assert gateway.session.is_initialized
    assert len(requests) == 3


@pytest.mark.asyncio
async def test_login_gives_up_after_retry_limit():
    handler, requests = twitter_api(me_statuses=[503])
    gateway = make_gateway(handler, retry_limit=2)

    with pytest.raises(PublishError):
        await gateway.publish("hello", "brand-1")
    assert len(requests) == 2


@pytest.mark.asyncio
async def test_login_backoff_stops_at_delay_budget():
    handler, requests = twitter_api(me_statuses=[503])
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    session = TwitterSession(
        access_token="token",
        base_url=BASE_URL,
        retry_limit=5,
        retry_base_delay=0.01,
        max_total_delay=0.035,
        client=client
    )

    with pytest.raises(PublishError) as exc_info:
        await session.initialize()

    # Waits 0.01 and 0.02; a third wait of 0.04 would exceed the budget
    assert len(requests) == 3
    assert "after 3 attempts" in exc_info.value.message


@pytest.mark.asyncio
async def test_default_login_budget_fits_publish_timeout():
    gateway = build_publication_gateway("twitter")
    try:
        assert gateway.session.max_total_delay < settings.PUBLISH_TIMEOUT_SECONDS
    finally:
        await gateway.close()


@pytest.mark.asyncio
async def test_rejected_credentials_are_not_retried():
    handler, requests = twitter_api(me_statuses=[401])
    gateway = make_gateway(handler, retry_limit=5)

    with pytest.raises(PublishError) as exc_info:
        await gateway.session.initialize()
    # A channel-wide failure; the content itself may still be published later
    assert exc_info.value.retryable is True
    assert len(requests) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("status, retryable", [(429, True), (401, True), (403, False), (500, True)])
async def test_publish_error_statuses(status, retryable):
    handler, _ = twitter_api(tweet_status=status)
    gateway = make_gateway(handler)

    with pytest.raises(PublishError) as exc_info:
        await gateway.publish("hello", "brand-1")
    assert exc_info.value.retryable is retryable


@pytest.mark.asyncio
async def test_rejects_empty_and_long_text():
    handler, requests = twitter_api()
    gateway = make_gateway(handler, max_length=10)

    with pytest.raises(PublishError):
        await gateway.publish("   ", "brand-1")
    with pytest.raises(PublishError):
        await gateway.publish("x" * 11, "brand-1")
    assert requests == []


@pytest.mark.asyncio
async def test_logging_gateway():
    gateway = build_publication_gateway("log")
    assert isinstance(gateway, LoggingPublicationGateway)

    result = await gateway.publish("hello", "brand-1")
    assert result.url.startswith("https://example.invalid/posts/")
    await gateway.close()


def test_unknown_publisher():
    with pytest.raises(ValueError):
        build_publication_gateway("myspace")
