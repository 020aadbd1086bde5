"""Room directory endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from residence_engine.api import deps
from residence_engine.models.base import RoomStatus
from residence_engine.schemas.residence import RoomOccupant
from residence_engine.schemas.room import RoomCreate, RoomMaintenanceUpdate, RoomResponse
from residence_engine.services import RoomDirectoryService

router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    hostel_id: Optional[str] = None,
    status: Optional[RoomStatus] = None,
    floor: Optional[int] = None,
    available: bool = Query(default=False, description="Only rooms with a free bed that are not under maintenance"),
    service: RoomDirectoryService = Depends(deps.get_room_service),
):
    return deps.unwrap(
        service.list_rooms(hostel_id=hostel_id, status=status, floor=floor, available_only=available)
    )


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    service: RoomDirectoryService = Depends(deps.get_room_service),
):
    return deps.unwrap(service.create_room(**payload.model_dump()))


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: str,
    service: RoomDirectoryService = Depends(deps.get_room_service),
):
    return deps.unwrap(service.get_room(room_id))


@router.get("/{room_id}/occupants", response_model=List[RoomOccupant])
def get_room_occupants(
    room_id: str,
    service: RoomDirectoryService = Depends(deps.get_room_service),
):
    return deps.unwrap(service.get_room_occupants(room_id))


@router.put("/{room_id}/maintenance", response_model=RoomResponse)
def set_room_maintenance(
    room_id: str,
    payload: RoomMaintenanceUpdate,
    service: RoomDirectoryService = Depends(deps.get_room_service),
):
    return deps.unwrap(service.set_maintenance(room_id, payload.enabled))
