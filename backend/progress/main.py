"""
Weight Progress API - Main Application
FastAPI backend serving weight trend analytics and achievement celebrations.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from .config import settings
from .database import engine, Base
from .routers import insights, achievements
# Import models to ensure they're registered with SQLAlchemy before create_all
from . import models  # noqa: F401

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 {settings.app_name} v{settings.app_version}")
    if settings.git_commit:
        logger.info(f"📦 Git Commit: {settings.git_commit[:8]}")
    if settings.build_date:
        logger.info(f"🕐 Build Date: {settings.build_date}")
    logger.info("=" * 60)

    # Only creates missing tables; a hosted store already has them
    Base.metadata.create_all(bind=engine)

    yield
    # Shutdown (if needed)


# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Weight trends, logging streaks and achievement celebrations",
    lifespan=lifespan,
    docs_url="/docs",  # Swagger UI
    redoc_url="/redoc",  # ReDoc
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(insights.router)
app.include_router(achievements.router)


@app.get("/")
def root():
    """Root endpoint - API status."""
    response = {
        "message": "Welcome to Weight Progress API",
        "version": settings.app_version,
        "status": "healthy",
        "docs": "/docs"
    }
    if settings.git_commit:
        response["git_commit"] = settings.git_commit[:8]
    if settings.build_date:
        response["build_date"] = settings.build_date
    return response


@app.get("/health")
def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}


@app.get("/api/version")
def version():
    """Version information endpoint."""
    response = {
        "app_name": settings.app_name,
        "version": settings.app_version,
    }
    if settings.git_commit:
        response["git_commit"] = settings.git_commit
        response["git_commit_short"] = settings.git_commit[:8]
    if settings.build_date:
        response["build_date"] = settings.build_date
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("progress.main:app", host="0.0.0.0", port=8000, reload=True)
