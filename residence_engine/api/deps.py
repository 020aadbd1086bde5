"""
Dependencies shared by the v1 routers: database session, service
factories and the translation of failed ServiceResults into HTTP errors.

Example usage in a router:
    @router.get("/{room_id}")
    def get_room(room_id: str, service: RoomDirectoryService = Depends(deps.get_room_service)):
        return deps.unwrap(service.get_room(room_id))
"""

from typing import TypeVar

from fastapi import Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from residence_engine.core.logging import get_logger
from residence_engine.db.session import get_db
from residence_engine.services import (
    BookingWorkflowService,
    DirectAllocationService,
    HostelService,
    ResidenceLedger,
    RoomDirectoryService,
)
from residence_engine.services.base import ServiceError, ServiceResult

logger = get_logger(__name__)

T = TypeVar("T")


class ServiceFailure(Exception):
    """Raised by ``unwrap`` to abort a request with the failure's status and body."""

    def __init__(self, error: ServiceError):
        self.error = error
        super().__init__(error.message)


def unwrap(result: ServiceResult[T]) -> T:
    if not result.is_success:
        raise ServiceFailure(result.error)
    return result.data


async def service_failure_handler(request: Request, exc: ServiceFailure) -> JSONResponse:
    error = exc.error
    logger.info(
        f"Request refused with {error.code.value}: {error.message}",
        extra={
            "request_id": getattr(request.state, "request_id", "unknown"),
            "path": str(request.url.path),
            "error_code": error.code.value,
        },
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# --- Services -----------------------------------------------------------------

def get_hostel_service(db: Session = Depends(get_db)) -> HostelService:
    return HostelService(db)


def get_room_service(db: Session = Depends(get_db)) -> RoomDirectoryService:
    return RoomDirectoryService(db)


def get_residence_ledger(db: Session = Depends(get_db)) -> ResidenceLedger:
    return ResidenceLedger(db)


def get_direct_allocation_service(db: Session = Depends(get_db)) -> DirectAllocationService:
    return DirectAllocationService(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingWorkflowService:
    return BookingWorkflowService(db)


__all__ = [
    "ServiceFailure",
    "get_booking_service",
    "get_db",
    "get_direct_allocation_service",
    "get_hostel_service",
    "get_residence_ledger",
    "get_room_service",
    "service_failure_handler",
    "unwrap",
]
