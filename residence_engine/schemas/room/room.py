"""
Room schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from residence_engine.models.base import RoomStatus
from residence_engine.schemas.common import BaseCreateSchema, BaseResponseSchema, BaseSchema

__all__ = ["RoomCreate", "RoomMaintenanceUpdate", "RoomResponse"]


class RoomCreate(BaseCreateSchema):
    hostel_id: str = Field(..., description="Hostel the room belongs to")
    room_number: str = Field(..., max_length=50, examples=["101", "A-201"])
    floor: Optional[int] = Field(default=None, ge=0)
    # Bounds are checked by the room directory so the error shape matches other refusals
    capacity: int = Field(..., description="Number of beds, at least 1")
    room_type: Optional[str] = Field(default=None, max_length=50, examples=["double"])
    amenities: Optional[str] = Field(default=None, description="Free-text amenities list")


class RoomMaintenanceUpdate(BaseSchema):
    enabled: bool = Field(..., description="True puts the room under maintenance, False lifts it")


class RoomResponse(BaseResponseSchema):
    hostel_id: str
    room_number: str
    floor: Optional[int] = None
    capacity: int
    current_occupancy: int
    room_type: Optional[str] = None
    amenities: Optional[str] = None
    status: RoomStatus
    version: int
