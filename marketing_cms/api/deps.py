"""
API dependencies - shared across all routes.
"""
from typing import Optional

from fastapi import Header, HTTPException, Request, status

from marketing_cms.config import settings
from marketing_cms.services.scheduler_service import SchedulerService


async def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Acting user from the X-User-Id header, or the configured default."""
    return x_user_id or settings.DEFAULT_USER_ID


def get_scheduler(request: Request) -> SchedulerService:
    """Scheduler created at application startup."""
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Scheduler is not configured"
        )
    return scheduler
