"""
Lifecycle transition tables for campaigns, plans and content.
"""
from typing import Dict, FrozenSet, Iterable, Optional, Union
from enum import Enum

from marketing_cms.config import settings
from marketing_cms.core.dates import utc_now
from marketing_cms.core.exceptions import InvalidTransitionError
from marketing_cms.models.campaign import CampaignStatus
from marketing_cms.models.plan import PlanState
from marketing_cms.models.content import ContentState

StateLike = Union[str, Enum]


def _value(state: StateLike) -> str:
    return state.value if isinstance(state, Enum) else str(state)


class StateMachine:
    """A total transition table over a fixed set of states."""
    
    def __init__(self, entity: str, transitions: Dict[Enum, Iterable[Enum]]):
        self.entity = entity
        self.transitions: Dict[str, FrozenSet[str]] = {
            _value(source): frozenset(_value(t) for t in targets)
            for source, targets in transitions.items()
        }
    
    def allowed_targets(self, current: StateLike) -> FrozenSet[str]:
        return self.transitions.get(_value(current), frozenset())
    
    def can_transition(self, current: StateLike, target: StateLike) -> bool:
        return _value(target) in self.allowed_targets(current)
    
    def is_terminal(self, state: StateLike) -> bool:
        return not self.allowed_targets(state)
    
    def validate(self, current: StateLike, target: StateLike) -> str:
        """Return the target state value, or raise InvalidTransitionError."""
        if not self.can_transition(current, target):
            raise InvalidTransitionError(self.entity, _value(current), _value(target))
        return _value(target)


CAMPAIGN_STATE_MACHINE = StateMachine("campaign", {
    CampaignStatus.DRAFT: [CampaignStatus.ACTIVE],
    CampaignStatus.ACTIVE: [CampaignStatus.COMPLETED, CampaignStatus.ARCHIVED],
    CampaignStatus.COMPLETED: [CampaignStatus.ARCHIVED],
    CampaignStatus.ARCHIVED: [],
})

# Micro plans may only enter ACTIVE while their master plan is ACTIVE;
# PlanService checks that precondition after the edge is validated.
PLAN_STATE_MACHINE = StateMachine("plan", {
    PlanState.DRAFT: [PlanState.REVIEW],
    PlanState.REVIEW: [PlanState.DRAFT, PlanState.APPROVED],
    PlanState.APPROVED: [PlanState.ACTIVE, PlanState.DRAFT],
    PlanState.ACTIVE: [PlanState.DRAFT],
})

CONTENT_STATE_MACHINE = StateMachine("content", {
    ContentState.DRAFT: [ContentState.READY],
    ContentState.READY: [ContentState.DRAFT, ContentState.PUBLISHED],
    ContentState.PUBLISHED: [],
})


def state_metadata_update(user_id: Optional[str], comments: Optional[str] = None) -> dict:
    """
    Column values refreshed on every mutation.
    Comments replace the stored value when given and are kept otherwise.
    """
    fields = {
        "state_updated_at": utc_now(),
        "state_updated_by": user_id or settings.DEFAULT_USER_ID,
    }
    if comments is not None:
        fields["state_comments"] = comments
    return fields
