# Models package - SQLModel tables
from marketing_cms.models.brand import Brand
from marketing_cms.models.campaign import Campaign, CampaignStatus
from marketing_cms.models.plan import Plan, PlanType, PlanState
from marketing_cms.models.content import Content, ContentState
