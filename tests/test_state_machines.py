"""Tests for lifecycle transition tables."""
import itertools
import pytest

from marketing_cms.config import settings
from marketing_cms.core.exceptions import InvalidTransitionError
from marketing_cms.models.campaign import CampaignStatus
from marketing_cms.models.content import ContentState
from marketing_cms.models.plan import PlanState
from marketing_cms.services.state_machines import (
    CAMPAIGN_STATE_MACHINE,
    CONTENT_STATE_MACHINE,
    PLAN_STATE_MACHINE,
    state_metadata_update,
)

CAMPAIGN_EDGES = {
    ("draft", "active"),
    ("active", "completed"),
    ("active", "archived"),
    ("completed", "archived"),
}

PLAN_EDGES = {
    ("draft", "review"),
    ("review", "draft"),
    ("review", "approved"),
    ("approved", "active"),
    ("approved", "draft"),
    ("active", "draft"),
}

CONTENT_EDGES = {
    ("draft", "ready"),
    ("ready", "draft"),
    ("ready", "published"),
}


@pytest.mark.parametrize("machine, states, edges", [
    (CAMPAIGN_STATE_MACHINE, CampaignStatus, CAMPAIGN_EDGES),
    (PLAN_STATE_MACHINE, PlanState, PLAN_EDGES),
    (CONTENT_STATE_MACHINE, ContentState, CONTENT_EDGES),
])
def test_transition_table_is_exact(machine, states, edges):
    """Every pair outside the table is rejected; every pair inside is accepted."""
    for current, target in itertools.product([s.value for s in states], repeat=2):
        if (current, target) in edges:
            assert machine.validate(current, target) == target
        else:
            with pytest.raises(InvalidTransitionError) as exc_info:
                machine.validate(current, target)
            assert exc_info.value.details["current"] == current
            assert exc_info.value.details["target"] == target


def test_terminal_states():
    assert CAMPAIGN_STATE_MACHINE.is_terminal(CampaignStatus.ARCHIVED)
    assert CONTENT_STATE_MACHINE.is_terminal(ContentState.PUBLISHED)
    assert not CAMPAIGN_STATE_MACHINE.is_terminal(CampaignStatus.COMPLETED)
    assert not any(PLAN_STATE_MACHINE.is_terminal(s) for s in PlanState)


def test_unknown_state_is_rejected():
    with pytest.raises(InvalidTransitionError):
        CAMPAIGN_STATE_MACHINE.validate("draft", "paused")
    with pytest.raises(InvalidTransitionError):
        CONTENT_STATE_MACHINE.validate("scheduled", "published")


def test_enum_and_string_states_are_equivalent():
    assert CONTENT_STATE_MACHINE.validate(ContentState.DRAFT, "ready") == "ready"
    assert CONTENT_STATE_MACHINE.can_transition("ready", ContentState.PUBLISHED)


def test_state_metadata_update_defaults_user():
    fields = state_metadata_update(None)
    assert fields["state_updated_by"] == settings.DEFAULT_USER_ID
    assert "state_comments" not in fields


def test_state_metadata_update_replaces_comments():
    fields = state_metadata_update("bob", "Approved by legal")
    assert fields["state_updated_by"] == "bob"
    assert fields["state_comments"] == "Approved by legal"
