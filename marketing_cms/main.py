"""
Marketing CMS Backend - FastAPI Application
Main entry point with all routes configured.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from marketing_cms.config import settings
from marketing_cms.core.exceptions import CMSException, cms_exception_handler
from marketing_cms.core.logging import configure_logging
from marketing_cms.schemas.common import HealthResponse
from marketing_cms.database import init_db, async_session
from marketing_cms.services.integrations.factory import build_publication_gateway
from marketing_cms.services.scheduler_service import SchedulerService

# Import all API routers
from marketing_cms.api import brands, campaigns, plans, content, scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    configure_logging(settings.LOG_LEVEL)
    await init_db()

    gateway = build_publication_gateway(settings.PUBLISHER)
    app.state.scheduler = SchedulerService(async_session, gateway)
    if settings.SCHEDULER_ENABLED:
        await app.state.scheduler.start(settings.SCHEDULER_INTERVAL_MS)
    else:
        logger.info("Scheduler disabled; use POST /scheduler/poll to publish due content")

    yield

    # Shutdown
    await app.state.scheduler.stop()
    await gateway.close()


app = FastAPI(
    title="Marketing CMS API",
    description="Campaigns, plans and content with scheduled publication",
    version="1.0.0",
    lifespan=lifespan
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(CMSException, cms_exception_handler)

# Include all routers
app.include_router(brands.router)
app.include_router(campaigns.router)
app.include_router(plans.router)
app.include_router(content.router)
app.include_router(scheduler.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "message": "Marketing CMS API is running",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Detailed health check."""
    scheduler_service = getattr(app.state, "scheduler", None)
    return HealthResponse(
        scheduler=scheduler_service.state.value if scheduler_service else "stopped"
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("marketing_cms.main:app", host="0.0.0.0", port=8000)
