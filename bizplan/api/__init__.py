"""
API routes for the projection engine.
"""

from fastapi import APIRouter

from bizplan.api import calculations

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
