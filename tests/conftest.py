"""Pytest fixtures for marketing CMS tests."""
import asyncio
import pytest
from datetime import datetime, timedelta
from typing import List, Tuple

from sqlmodel import SQLModel

from marketing_cms import models  # noqa: F401
from marketing_cms.core.exceptions import PublishError
from marketing_cms.database import build_engine, build_session_factory
from marketing_cms.models.plan import PlanType
from marketing_cms.schemas.brand import BrandCreate, BrandGuidelines
from marketing_cms.schemas.campaign import CampaignCreate
from marketing_cms.schemas.plan import PlanCreate
from marketing_cms.services.brand_service import BrandService
from marketing_cms.services.campaign_service import CampaignService
from marketing_cms.services.plan_service import PlanService
from marketing_cms.services.integrations.base import PublicationGateway, PublishResult


# --- Database Fixtures ---

@pytest.fixture
async def engine(tmp_path):
    """A fresh sqlite database per test."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'cms.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


# --- Gateway Fixtures ---

class FakeGateway(PublicationGateway):
    """
    Records every publish call. Bodies in fail_on fail transiently; bodies
    in reject are refused for good. delay slows each publish.
    """

    channel = "Fake"

    def __init__(self):
        self.calls: List[Tuple[str, str]] = []
        self.fail_on: List[str] = []
        self.reject: List[str] = []
        self.delay = 0.0
        self.closed = False

    async def publish(self, text: str, brand_id: str) -> PublishResult:
        self.calls.append((text, brand_id))
        if self.delay:
            await asyncio.sleep(self.delay)
        if text in self.fail_on:
            raise PublishError(self.channel, "upstream unavailable")
        if text in self.reject:
            raise PublishError(self.channel, "content refused", retryable=False)
        post_id = str(len(self.calls))
        return PublishResult(url=f"https://fake.example/posts/{post_id}", platform_post_id=post_id)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


# --- Data Fixtures ---

START = datetime(2026, 3, 1)


@pytest.fixture
async def brand(session):
    return await BrandService(session).create(BrandCreate(
        name="Acme Tools",
        description="Developer productivity tools",
        guidelines=BrandGuidelines(tone=["friendly"], avoided_terms=["cheap", "Guaranteed"])
    ))


@pytest.fixture
async def campaign(session, brand):
    return await CampaignService(session).create(CampaignCreate(
        brand_id=brand.id,
        name="Spring Launch",
        start_date=START,
        end_date=START + timedelta(days=30)
    ), "alice")


@pytest.fixture
async def master_plan(session, campaign):
    return await PlanService(session).create(PlanCreate(
        type=PlanType.MASTER,
        title="Q1 Social Strategy",
        campaign_id=campaign.id,
        date_start=START,
        date_end=START + timedelta(days=30)
    ), "alice")


@pytest.fixture
async def micro_plan(session, master_plan):
    return await PlanService(session).create(PlanCreate(
        type=PlanType.MICRO,
        title="Week 1 tips",
        parent_plan_id=master_plan.id,
        date_start=START,
        date_end=START + timedelta(days=7)
    ), "alice")
