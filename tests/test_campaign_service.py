"""Tests for campaign management and status lifecycle."""
import pytest
from datetime import datetime, timedelta

from marketing_cms.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailedError,
)
from marketing_cms.schemas.campaign import CampaignCreate, CampaignUpdate
from marketing_cms.services.campaign_service import CampaignService, merge_by_key

START = datetime(2026, 3, 1)


def campaign_data(brand_id, name="Summer Sale", **overrides):
    data = {
        "brand_id": brand_id,
        "name": name,
        "start_date": START,
        "end_date": START + timedelta(days=14),
    }
    data.update(overrides)
    return CampaignCreate(**data)


@pytest.mark.asyncio
async def test_create_defaults(session, brand):
    campaign = await CampaignService(session).create(campaign_data(brand.id), None)

    assert campaign.status == "draft"
    assert campaign.objectives == []
    assert campaign.brand_id == brand.id
    assert campaign.state_metadata["updated_by"] == "system-user"


@pytest.mark.asyncio
async def test_create_by_brand_name(session, brand):
    campaign = await CampaignService(session).create(
        campaign_data(None, brand_name="Acme Tools"), "alice"
    )
    assert campaign.brand_id == brand.id
    assert campaign.state_updated_by == "alice"


@pytest.mark.asyncio
async def test_create_duplicate_name_conflicts(session, brand):
    service = CampaignService(session)
    await service.create(campaign_data(brand.id), "alice")

    with pytest.raises(ConflictError):
        await service.create(campaign_data(brand.id), "alice")


@pytest.mark.asyncio
async def test_create_missing_brand(session):
    with pytest.raises(NotFoundError):
        await CampaignService(session).create(campaign_data("missing"), "alice")


@pytest.mark.asyncio
async def test_create_rejects_inverted_dates(session, brand):
    with pytest.raises(ValidationFailedError):
        await CampaignService(session).create(
            campaign_data(brand.id, end_date=START - timedelta(days=1)), "alice"
        )


@pytest.mark.asyncio
async def test_status_lifecycle(session, campaign):
    service = CampaignService(session)
    before = campaign.state_updated_at

    active = await service.transition_status(campaign.id, "active", "bob", "Kickoff")
    assert active.status == "active"
    assert active.state_updated_by == "bob"
    assert active.state_comments == "Kickoff"
    assert active.state_updated_at >= before

    completed = await service.transition_status(campaign.id, "completed", "bob")
    assert completed.status == "completed"
    # Comments are kept when a transition does not supply new ones
    assert completed.state_comments == "Kickoff"

    archived = await service.transition_status(campaign.id, "archived", "bob")
    assert archived.status == "archived"

    for target in ("draft", "active", "completed", "archived"):
        with pytest.raises(InvalidTransitionError):
            await service.transition_status(campaign.id, target, "bob")


@pytest.mark.asyncio
async def test_draft_cannot_complete(session, campaign):
    with pytest.raises(InvalidTransitionError):
        await CampaignService(session).transition_status(campaign.id, "completed", "bob")


@pytest.mark.asyncio
async def test_update_status_goes_through_state_machine(session, campaign):
    service = CampaignService(session)

    with pytest.raises(InvalidTransitionError):
        await service.update(campaign.id, CampaignUpdate(status="archived"), "bob")

    updated = await service.update(campaign.id, CampaignUpdate(status="active", comments="Go"), "bob")
    assert updated.status == "active"
    assert updated.state_comments == "Go"


@pytest.mark.asyncio
async def test_update_merges_goals_by_type(session, brand):
    service = CampaignService(session)
    created = await service.create(campaign_data(
        brand.id,
        goals=[
            {"type": "awareness", "description": "Reach developers"},
            {"type": "engagement", "description": "Grow replies"},
        ]
    ), "alice")

    updated = await service.update(created.id, CampaignUpdate(goals=[
        {"type": "engagement", "description": "Double replies", "priority": 2},
        {"type": "conversion", "description": "Trial signups"},
    ]), "alice")

    assert [g["type"] for g in updated.goals] == ["awareness", "engagement", "conversion"]
    assert updated.goals[1]["description"] == "Double replies"
    assert updated.goals[1]["priority"] == 2


@pytest.mark.asyncio
async def test_update_rename_conflict(session, brand, campaign):
    service = CampaignService(session)
    other = await service.create(campaign_data(brand.id), "alice")

    with pytest.raises(ConflictError):
        await service.update(other.id, CampaignUpdate(name=campaign.name), "alice")


@pytest.mark.asyncio
async def test_update_rejects_inverted_dates(session, campaign):
    with pytest.raises(ValidationFailedError):
        await CampaignService(session).update(
            campaign.id, CampaignUpdate(end_date=START - timedelta(days=1)), "alice"
        )


@pytest.mark.asyncio
async def test_update_milestone_status(session, brand):
    service = CampaignService(session)
    created = await service.create(campaign_data(
        brand.id,
        major_milestones=[{"description": "Launch"}, {"description": "Retro"}]
    ), "alice")

    updated = await service.update_milestone_status(created.id, 1, "completed", "bob")
    assert updated.major_milestones[0]["status"] == "pending"
    assert updated.major_milestones[1]["status"] == "completed"

    with pytest.raises(NotFoundError):
        await service.update_milestone_status(created.id, 5, "completed", "bob")


@pytest.mark.asyncio
async def test_delete_with_plans_conflicts(session, campaign, master_plan):
    with pytest.raises(ConflictError):
        await CampaignService(session).delete(campaign.id)


@pytest.mark.asyncio
async def test_delete(session, campaign):
    service = CampaignService(session)
    assert await service.delete(campaign.id)
    with pytest.raises(NotFoundError):
        await service.get(campaign.id)


@pytest.mark.asyncio
async def test_list_filters_by_status(session, brand, campaign):
    service = CampaignService(session)
    other = await service.create(campaign_data(brand.id), "alice")
    await service.transition_status(other.id, "active", "alice")

    result = await service.list(brand_id=brand.id, status="active")
    assert result["total"] == 1
    assert result["items"][0].id == other.id


def test_merge_by_key_appends_and_replaces():
    existing = [{"segment": "devs", "pain_points": ["noise"]}]
    updates = [{"segment": "devs", "characteristics": ["busy"]}, {"segment": "leads"}]
    merged = merge_by_key(existing, updates, "segment")
    assert merged == [
        {"segment": "devs", "pain_points": ["noise"], "characteristics": ["busy"]},
        {"segment": "leads"},
    ]
    assert existing == [{"segment": "devs", "pain_points": ["noise"]}]


@pytest.mark.asyncio
async def test_new_version_supersedes_current(session, brand, campaign):
    service = CampaignService(session)

    second = await service.create_new_version(
        campaign.id, CampaignUpdate(description="Second cut", objectives=["Reach devs"]), "bob"
    )

    assert second.id != campaign.id
    assert second.version == 2
    assert second.is_active
    assert second.name == campaign.name
    assert second.description == "Second cut"
    assert second.previous_version_id == campaign.id
    assert second.root_campaign_id == campaign.id
    assert second.state_comments == "Created new version 2"
    assert second.state_updated_by == "bob"
    assert not (await service.get(campaign.id)).is_active

    # Only the current version is listed by default
    listed = await service.list(brand_id=brand.id)
    assert [c.id for c in listed["items"]] == [second.id]
    everything = await service.list(brand_id=brand.id, active_only=False)
    assert everything["total"] == 2

    # Versions chain from the root, whichever version they are created from
    third = await service.create_new_version(campaign.id, CampaignUpdate(), "bob")
    assert third.version == 3
    assert third.root_campaign_id == campaign.id
    assert [c.version for c in await service.list_versions(second.id)] == [1, 2, 3]


@pytest.mark.asyncio
async def test_get_version(session, campaign):
    service = CampaignService(session)
    second = await service.create_new_version(campaign.id, CampaignUpdate(), "bob")

    assert (await service.get_version(second.id, 1)).id == campaign.id
    assert (await service.get_version(campaign.id, 2)).id == second.id
    with pytest.raises(NotFoundError):
        await service.get_version(campaign.id, 7)


@pytest.mark.asyncio
async def test_activate_version(session, campaign):
    service = CampaignService(session)
    second = await service.create_new_version(campaign.id, CampaignUpdate(), "bob")

    restored = await service.activate_version(campaign.id, "carol")

    assert restored.is_active
    assert restored.state_comments == "Activated version 1"
    assert not (await service.get(second.id)).is_active
    assert (await service.get_by_name(campaign.name)).id == campaign.id

    # Already active: unchanged
    again = await service.activate_version(campaign.id, "dave")
    assert again.state_updated_by == "carol"


@pytest.mark.asyncio
async def test_version_names_stay_unique_across_campaigns(session, brand, campaign):
    service = CampaignService(session)
    second = await service.create_new_version(campaign.id, CampaignUpdate(name="Spring Launch v2"), "bob")
    assert second.name == "Spring Launch v2"

    # A sibling version's name is not a conflict
    renamed = await service.update(second.id, CampaignUpdate(name=campaign.name), "bob")
    assert renamed.name == campaign.name

    # Another campaign still cannot take it
    with pytest.raises(ConflictError):
        await service.create(campaign_data(brand.id, name=campaign.name), "alice")
    other = await service.create(campaign_data(brand.id), "alice")
    with pytest.raises(ConflictError):
        await service.create_new_version(other.id, CampaignUpdate(name=campaign.name), "alice")


@pytest.mark.asyncio
async def test_get_active_campaigns(session, brand, campaign):
    service = CampaignService(session)
    running = await service.create(campaign_data(brand.id), "alice")
    await service.transition_status(running.id, "active", "alice")
    await service.transition_status(campaign.id, "active", "alice")
    # The superseded version of campaign stays out of the result
    current = await service.create_new_version(campaign.id, CampaignUpdate(), "alice")

    active = await service.get_active_campaigns(brand.id)

    assert {c.id for c in active} == {running.id, current.id}


@pytest.mark.asyncio
async def test_list_upcoming_milestones(session, brand):
    service = CampaignService(session)
    now = START + timedelta(days=2)
    soon = await service.create(campaign_data(
        brand.id, name="Soon",
        major_milestones=[{"description": "Launch", "date": now + timedelta(days=3)}]
    ), "alice")
    await service.create(campaign_data(
        brand.id, name="Far",
        major_milestones=[{"description": "Launch", "date": now + timedelta(days=30)}]
    ), "alice")
    await service.create(campaign_data(
        brand.id, name="Past",
        major_milestones=[{"description": "Kickoff", "date": now - timedelta(days=1)}]
    ), "alice")
    done = await service.create(campaign_data(
        brand.id, name="Done",
        major_milestones=[{"description": "Launch", "date": now + timedelta(days=1)}]
    ), "alice")
    await service.update_milestone_status(done.id, 0, "completed", "alice")

    upcoming = await service.list_upcoming_milestones(days_ahead=7, now=now)

    assert [c.id for c in upcoming] == [soon.id]
    assert await service.list_upcoming_milestones(days_ahead=60, now=now) != []
