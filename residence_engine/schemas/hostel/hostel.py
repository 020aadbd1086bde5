"""
Hostel schemas.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from residence_engine.models.base import HostelGender
from residence_engine.schemas.common import BaseCreateSchema, BaseResponseSchema
from residence_engine.schemas.room import RoomResponse

__all__ = ["HostelCreate", "HostelResponse", "HostelDetail"]


class HostelCreate(BaseCreateSchema):
    name: str = Field(..., min_length=1, max_length=120, examples=["New Men Dorm"])
    gender_restriction: HostelGender
    total_room_count: int = Field(default=0, ge=0)
    location: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    warden_ref: Optional[str] = Field(default=None, description="Staff id of the warden")


class HostelResponse(BaseResponseSchema):
    name: str
    gender_restriction: HostelGender
    total_room_count: int
    location: Optional[str] = None
    description: Optional[str] = None
    warden_ref: Optional[str] = None


class HostelDetail(HostelResponse):
    rooms: List[RoomResponse] = Field(default_factory=list)
