"""
Scheduler service - publishes due content on a fixed polling interval.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from marketing_cms.config import settings
from marketing_cms.core.dates import utc_now
from marketing_cms.core.exceptions import CMSException, PublishError
from marketing_cms.models.content import ContentState
from marketing_cms.repositories.content_repo import ContentRepository
from marketing_cms.services.content_service import ContentService
from marketing_cms.services.integrations.base import PublicationGateway

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class ItemOutcome(str, Enum):
    PUBLISHED = "published"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class PollReport:
    """Summary of one poll."""
    started_at: datetime
    due: int = 0
    published: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    def record(self, content_id: str, outcome: ItemOutcome) -> None:
        getattr(self, outcome.value).append(content_id)

    def to_dict(self) -> dict:
        return {
            "started_at": self.started_at,
            "due": self.due,
            "published": self.published,
            "skipped": self.skipped,
            "failed": self.failed,
        }


class SchedulerService:
    """
    Polls for ready content whose scheduled time has passed and publishes it.

    Polls never overlap: a poll requested while another is running waits
    for it and then sees the items it already published as no longer ready.
    Each item is handled in its own session; a failure is logged and the
    item stays ready and scheduled, so the next poll retries it. Items the
    channel rejects permanently are unscheduled instead.
    """

    def __init__(
        self,
        session_factory: Callable,
        gateway: PublicationGateway,
        item_timeout: float = settings.SCHEDULER_ITEM_TIMEOUT_SECONDS,
        publish_timeout: float = settings.PUBLISH_TIMEOUT_SECONDS,
        query_timeout: float = settings.SCHEDULER_QUERY_TIMEOUT_SECONDS,
        user_id: str = settings.SCHEDULER_USER_ID
    ):
        self.session_factory = session_factory
        self.gateway = gateway
        self.item_timeout = item_timeout
        self.publish_timeout = publish_timeout
        self.query_timeout = query_timeout
        self.user_id = user_id
        self.interval_ms: Optional[int] = None
        self.last_report: Optional[PollReport] = None
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._poll_lock = asyncio.Lock()

    @property
    def state(self) -> SchedulerState:
        if self._task and not self._task.done():
            return SchedulerState.RUNNING
        return SchedulerState.STOPPED

    async def start(self, interval_ms: int = settings.SCHEDULER_INTERVAL_MS) -> None:
        """
        Poll once immediately, then every interval_ms.
        Calling start while running does nothing.
        """
        if self.state == SchedulerState.RUNNING:
            return

        self.interval_ms = interval_ms
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run_loop(interval_ms / 1000))
        logger.info(f"Scheduler started, checking every {interval_ms}ms")

    async def stop(self) -> None:
        """Stop scheduling polls; an in-flight poll is allowed to finish."""
        if not self._task:
            return

        self._stop_event.set()
        await self._task
        self._task = None
        logger.info("Scheduler stopped")

    async def _run_loop(self, interval_seconds: float) -> None:
        while not self._stop_event.is_set():
            try:
                await self.poll_once()
            except Exception:
                logger.exception("Error checking scheduled content")

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=interval_seconds)
            except asyncio.TimeoutError:
                pass

    async def poll_once(self, now: Optional[datetime] = None) -> PollReport:
        """Publish every content item that is due at `now`."""
        async with self._poll_lock:
            report = await self._poll(now or utc_now())
        self.last_report = report
        return report

    async def _due_ids(self, now: datetime) -> List[str]:
        async with self.session_factory() as session:
            due = await ContentRepository(session).list_due(now)
            return [content.id for content in due]

    async def _poll(self, now: datetime) -> PollReport:
        report = PollReport(started_at=now)

        try:
            due_ids = await asyncio.wait_for(self._due_ids(now), timeout=self.query_timeout)
        except asyncio.TimeoutError:
            logger.error(f"Timed out querying due content after {self.query_timeout}s")
            return report
        report.due = len(due_ids)

        for content_id in due_ids:
            try:
                outcome = await asyncio.wait_for(self._process_item(content_id), timeout=self.item_timeout)
            except asyncio.TimeoutError:
                logger.error(f"Timed out publishing content {content_id}")
                outcome = ItemOutcome.FAILED
            except CMSException as e:
                logger.error(f"Failed to publish content {content_id}: {e.message}")
                outcome = ItemOutcome.FAILED
            except Exception:
                logger.exception(f"Failed to publish content {content_id}")
                outcome = ItemOutcome.FAILED
            report.record(content_id, outcome)

        if report.due:
            logger.info(
                f"Scheduler poll: {report.due} due, {len(report.published)} published, "
                f"{len(report.skipped)} skipped, {len(report.failed)} failed"
            )
        return report

    async def _process_item(self, content_id: str) -> ItemOutcome:
        async with self.session_factory() as session:
            content_service = ContentService(session)

            # Re-read: the item may have changed since the due query
            content = await content_service.content_repo.get(content_id)
            if not content or content.state != ContentState.READY.value:
                logger.info(f"Content {content_id} is scheduled but not in ready state. Skipping.")
                return ItemOutcome.SKIPPED

            # A previous poll published but could not flip the state
            if content.published_url:
                logger.warning(
                    f"Content {content_id} already published at {content.published_url}; "
                    "marking published without republishing"
                )
                await content_service.transition_state(content_id, ContentState.PUBLISHED.value, self.user_id)
                return ItemOutcome.PUBLISHED

            brand_id = await content_service.resolver.resolve_brand_id(content)
            if not brand_id:
                logger.warning(f"Could not resolve owning brand for content {content_id}. Skipping.")
                return ItemOutcome.SKIPPED

            brand = await content_service.brand_repo.get(brand_id)
            if not brand:
                logger.error(f"Brand {brand_id} not found for content {content_id}. Skipping.")
                return ItemOutcome.SKIPPED

            try:
                result = await asyncio.wait_for(
                    self.gateway.publish(content.body, brand.id),
                    timeout=self.publish_timeout
                )
            except asyncio.TimeoutError:
                raise PublishError(self.gateway.channel, "publish timed out")
            except PublishError as e:
                if not e.retryable:
                    # Retrying cannot succeed; stop polling the item until it is rescheduled
                    logger.error(f"{e.message}; unscheduling content {content_id}")
                    await content_service.unschedule(content_id, self.user_id)
                raise

            await content_service.record_publication(content_id, result, self.user_id)
            await content_service.transition_state(content_id, ContentState.PUBLISHED.value, self.user_id)

            logger.info(f"Published content {content_id} to {self.gateway.channel}: {result.url}")
            return ItemOutcome.PUBLISHED
