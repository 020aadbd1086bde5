"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints of the residence engine
"""
from fastapi import APIRouter

from residence_engine.api.v1 import bookings, hostels, residences, rooms
from residence_engine.core.logging import get_logger
from residence_engine.schemas.common import ErrorResponse

logger = get_logger(__name__)

router = APIRouter(
    responses={
        404: {"description": "Not Found", "model": ErrorResponse},
        409: {"description": "Conflict", "model": ErrorResponse},
        422: {"description": "Validation Error", "model": ErrorResponse},
        500: {"description": "Internal Server Error", "model": ErrorResponse},
    }
)

router.include_router(hostels.router)
router.include_router(rooms.router)
router.include_router(residences.router)
router.include_router(bookings.router)

logger.debug(f"API v1 router assembled with {len(router.routes)} routes")
