"""
Custom Exceptions for the Residence Allocation Engine

This module defines the typed error kinds raised by repositories and the
residence ledger. Service methods translate them into ServiceResult failures
and the API layer into HTTP responses.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    DATABASE_ERROR = "DATABASE_ERROR"

    # Allocation errors
    ROOM_FULL = "ROOM_FULL"
    GENDER_MISMATCH = "GENDER_MISMATCH"
    ALREADY_RESIDENT = "ALREADY_RESIDENT"

    # Workflow errors
    ALREADY_DECIDED = "ALREADY_DECIDED"
    CONCURRENT_CONFLICT = "CONCURRENT_CONFLICT"


# HTTP status used by the API layer for each error kind
ERROR_STATUS_CODES: Dict[ErrorCode, int] = {
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.ALREADY_EXISTS: 409,
    ErrorCode.DATABASE_ERROR: 500,
    ErrorCode.ROOM_FULL: 409,
    ErrorCode.GENDER_MISMATCH: 422,
    ErrorCode.ALREADY_RESIDENT: 409,
    ErrorCode.ALREADY_DECIDED: 409,
    ErrorCode.CONCURRENT_CONFLICT: 409,
}

RETRYABLE_ERROR_CODES = frozenset({ErrorCode.CONCURRENT_CONFLICT})


def status_for(error_code: ErrorCode) -> int:
    return ERROR_STATUS_CODES.get(error_code, 500)


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code or status_for(error_code)
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        return self.error_code in RETRYABLE_ERROR_CODES

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__,
                "retryable": self.retryable,
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# General Application Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        payload = dict(details or {})
        if field_errors:
            payload["field_errors"] = field_errors
        super().__init__(message, ErrorCode.VALIDATION_ERROR, payload)


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    resource_type = "Resource"

    def __init__(
        self,
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
        resource_type: Optional[str] = None,
    ):
        resource_type = resource_type or self.resource_type
        if not message:
            message = f"{resource_type} not found"
            if resource_id is not None:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": str(resource_id) if resource_id is not None else None,
        }
        super().__init__(message, ErrorCode.NOT_FOUND, details)


class StudentNotFoundError(ResourceNotFoundError):
    resource_type = "Student"


class StaffNotFoundError(ResourceNotFoundError):
    resource_type = "Staff"


class HostelNotFoundError(ResourceNotFoundError):
    resource_type = "Hostel"


class RoomNotFoundError(ResourceNotFoundError):
    resource_type = "Room"


class ResidenceNotFoundError(ResourceNotFoundError):
    resource_type = "Residence"


class BookingNotFoundError(ResourceNotFoundError):
    resource_type = "Booking request"


# ========================================
# Database Exceptions
# ========================================

class DatabaseError(BaseAppException):
    """Exception raised for unexpected database failures"""

    def __init__(self, message: str = "Database operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.DATABASE_ERROR, details)


class DuplicateEntryError(BaseAppException):
    """Exception raised when a unique field is already taken"""

    def __init__(self, entity: str, field: str, value: Any):
        super().__init__(
            f"{entity} with {field} '{value}' already exists",
            ErrorCode.ALREADY_EXISTS,
            {"entity": entity, "field": field, "value": str(value)},
        )


class ConcurrentConflictError(BaseAppException):
    """Lost a race on a guarded transaction; safe to retry"""

    def __init__(self, message: str = "Concurrent update conflict, please retry", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.CONCURRENT_CONFLICT, details)


# ========================================
# Allocation Exceptions
# ========================================

class RoomFullError(BaseAppException):
    """Exception raised when a room cannot take another resident"""

    def __init__(
        self,
        room_id: Any,
        occupancy: Optional[int] = None,
        capacity: Optional[int] = None,
        reason: str = "full",
        message: Optional[str] = None,
    ):
        if not message:
            message = (
                f"Room {room_id} is under maintenance"
                if reason == "maintenance"
                else f"Room {room_id} is full"
            )
        super().__init__(
            message,
            ErrorCode.ROOM_FULL,
            {
                "room_id": str(room_id),
                "current_occupancy": occupancy,
                "capacity": capacity,
                "reason": reason,
            },
        )


class CapacityExceededError(RoomFullError):
    """Raised by the occupancy primitive when a delta would break 0 <= occupancy <= capacity"""

    def __init__(self, room_id: Any, delta: int):
        super().__init__(
            room_id,
            reason="capacity_bounds",
            message=f"Adjusting occupancy of room {room_id} by {delta:+d} violates its capacity bounds",
        )
        self.details["delta"] = delta


class GenderMismatchError(BaseAppException):
    """Exception raised when a student is not eligible for a hostel"""

    def __init__(self, student_id: Any, student_gender: Optional[str], hostel_id: Any, hostel_gender: str):
        super().__init__(
            f"Student {student_id} ({student_gender or 'unknown'}) cannot be placed in "
            f"{hostel_gender} hostel {hostel_id}",
            ErrorCode.GENDER_MISMATCH,
            {
                "student_id": str(student_id),
                "student_gender": student_gender,
                "hostel_id": str(hostel_id),
                "hostel_gender": hostel_gender,
            },
        )


class AlreadyResidentError(BaseAppException):
    """Exception raised when allocating a student who already has a residence"""

    def __init__(self, student_id: Any, residence_id: Optional[Any] = None):
        super().__init__(
            f"Student {student_id} already has a residence",
            ErrorCode.ALREADY_RESIDENT,
            {
                "student_id": str(student_id),
                "residence_id": str(residence_id) if residence_id is not None else None,
            },
        )


class AlreadyDecidedError(BaseAppException):
    """Exception raised when deciding a booking request that is no longer pending"""

    def __init__(self, booking_id: Any, status: str):
        super().__init__(
            f"Booking request {booking_id} has already been {status}",
            ErrorCode.ALREADY_DECIDED,
            {"booking_id": str(booking_id), "status": status},
        )


__all__ = [
    "ErrorCode",
    "ERROR_STATUS_CODES",
    "RETRYABLE_ERROR_CODES",
    "status_for",
    "BaseAppException",
    "ValidationError",
    "ResourceNotFoundError",
    "StudentNotFoundError",
    "StaffNotFoundError",
    "HostelNotFoundError",
    "RoomNotFoundError",
    "ResidenceNotFoundError",
    "BookingNotFoundError",
    "DatabaseError",
    "DuplicateEntryError",
    "ConcurrentConflictError",
    "RoomFullError",
    "CapacityExceededError",
    "GenderMismatchError",
    "AlreadyResidentError",
    "AlreadyDecidedError",
]
