"""
DeliveryOps - Main Application Entry Point

Project delivery milestones, role-scoped calendars and deadline alerts.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deliveryops.core.config import get_settings
from deliveryops.core.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting DeliveryOps in {settings.ENVIRONMENT} mode...")

    # Initialize database if needed
    if settings.ENVIRONMENT == "local":
        from deliveryops.infrastructure.local.database import init_db

        await init_db()

    # Start background scheduler for periodic jobs
    from deliveryops.services.background_scheduler import (
        start_background_scheduler,
        stop_background_scheduler,
    )

    await start_background_scheduler()

    yield

    # Shutdown
    logger.info("Shutting down DeliveryOps...")
    await stop_background_scheduler()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="DeliveryOps",
        description="Project delivery milestones, calendars and deadline alerts",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from deliveryops.api import calendar, jobs, milestones

    app.include_router(milestones.router, prefix="/api", tags=["milestones"])
    app.include_router(calendar.router, prefix="/api", tags=["calendar"])
    app.include_router(jobs.router, prefix="/api", tags=["jobs"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "deliveryops.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
