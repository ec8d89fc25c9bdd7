"""
Workout Challenge Dashboard Backend - FastAPI Application
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import setup_logging, get_logger
from app.api import stats, workouts

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    logger.info("Starting Workout Dashboard Backend", version="1.0.0")
    if settings.sheets_configured:
        logger.info("Google Sheets store configured", sheet=settings.GOOGLE_SHEET_NAME)
    else:
        logger.info("Google Sheets not configured, running in demo mode")

    yield

    # Shutdown
    logger.info("Shutting down Workout Dashboard Backend")


app = FastAPI(
    title="Workout Dashboard API",
    description="Workout challenge tracking and statistics backend",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(workouts.router, prefix="/api/workouts", tags=["workouts"])
app.include_router(stats.router, prefix="/api/stats", tags=["stats"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "workout-dashboard-backend"}
