"""
Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from proforma import __version__
from proforma.config import get_settings
from proforma.api import router as api_router
from proforma.api.session import NoticeBoard
from proforma.session import ProFormaSession

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the calculator session and fetch the scenario list once."""
    notices = NoticeBoard()
    session = ProFormaSession.from_settings(settings, notifier=notices)
    app.state.notices = notices
    app.state.session = session
    logger.info(f"Starting session against scenario store {settings.store_base_url}")
    await session.start()
    try:
        yield
    finally:
        await session.aclose()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Real estate pro forma calculator with saved scenarios",
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": __version__}
