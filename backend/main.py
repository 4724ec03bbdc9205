"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import accounts, analytics, users
from config import settings
from logging_config import setup_logging
from services.snapshot_job import start_snapshot_scheduler, stop_snapshot_scheduler

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the daily snapshot job for the lifetime of the app."""
    if settings.SNAPSHOT_JOB_ENABLED:
        try:
            start_snapshot_scheduler()
        except Exception:
            logger.warning("Daily snapshot job failed to start", exc_info=True)
    try:
        yield
    finally:
        stop_snapshot_scheduler()


app = FastAPI(
    title="Saldo",
    description="Personal finance accounts and balance analytics",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(accounts.router)
app.include_router(analytics.router)
app.include_router(users.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
