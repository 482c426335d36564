"""
API routes for the pro forma calculator.
"""

from fastapi import APIRouter

from proforma.api import calculations, session

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
router.include_router(session.router, prefix="/session", tags=["session"])
