"""
Scheduler API routes.
"""
from fastapi import APIRouter, Depends

from marketing_cms.config import settings
from marketing_cms.services.scheduler_service import SchedulerService
from marketing_cms.api.deps import get_scheduler

router = APIRouter(prefix=f"{settings.API_PREFIX}/scheduler", tags=["scheduler"])


@router.get("/status")
async def scheduler_status(scheduler: SchedulerService = Depends(get_scheduler)):
    """Scheduler state and the last poll summary."""
    return {
        "state": scheduler.state.value,
        "interval_ms": scheduler.interval_ms,
        "last_poll": scheduler.last_report.to_dict() if scheduler.last_report else None
    }


@router.post("/poll")
async def run_poll(scheduler: SchedulerService = Depends(get_scheduler)):
    """Run one poll now and return its summary."""
    report = await scheduler.poll_once()
    return report.to_dict()
