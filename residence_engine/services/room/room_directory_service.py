"""
Room directory service: room queries, room creation and the maintenance
override.

Occupancy is never written here; it changes only through the residence
ledger, which calls RoomRepository.adjust_occupancy inside its own
transaction.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from residence_engine.core.exceptions import DuplicateEntryError, ValidationError
from residence_engine.models.base import RoomStatus
from residence_engine.models.residence import Residence
from residence_engine.models.room import Room
from residence_engine.repositories.hostel import HostelRepository
from residence_engine.repositories.residence import ResidenceRepository
from residence_engine.repositories.room import RoomRepository
from residence_engine.services.base import BaseService, ServiceResult


class RoomDirectoryService(BaseService):
    """Hostel rooms and their occupancy counters."""

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.rooms = RoomRepository(db_session)
        self.hostels = HostelRepository(db_session)
        self.residences = ResidenceRepository(db_session)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_rooms(
        self,
        hostel_id: Optional[str] = None,
        status: Optional[RoomStatus] = None,
        floor: Optional[int] = None,
        available_only: bool = False,
    ) -> ServiceResult[List[Room]]:
        return self._query(
            "list rooms",
            lambda: self.rooms.list_rooms(
                hostel_id=hostel_id,
                status=status,
                floor=floor,
                available_only=available_only,
            ),
        )

    def get_room(self, room_id: str) -> ServiceResult[Room]:
        return self._query("get room", lambda: self.rooms.get_by_id(room_id), room_id)

    def get_room_occupants(self, room_id: str) -> ServiceResult[List[Residence]]:
        """On-campus residences currently placed in the room, ordered by bed."""

        def _occupants() -> List[Residence]:
            self.rooms.get_by_id(room_id)
            return self.residences.list_room_occupants(room_id)

        return self._query("get room occupants", _occupants, room_id)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create_room(
        self,
        hostel_id: str,
        room_number: str,
        capacity: int,
        floor: Optional[int] = None,
        room_type: Optional[str] = None,
        amenities: Optional[str] = None,
    ) -> ServiceResult[Room]:
        """
        Create an empty room in an existing hostel.

        Fails with ValidationError when capacity is below one or the room
        number is blank, NotFound when the hostel is absent and AlreadyExists
        when the number is taken in that hostel.
        """

        def _create() -> Room:
            if capacity is None or capacity < 1:
                raise ValidationError(
                    "Room capacity must be at least 1",
                    field_errors={"capacity": [f"got {capacity}"]},
                )
            number = (room_number or "").strip()
            if not number:
                raise ValidationError(
                    "Room number is required",
                    field_errors={"room_number": ["must not be blank"]},
                )

            hostel = self.hostels.get_by_id(hostel_id)
            if self.rooms.find_by_room_number(hostel.id, number) is not None:
                raise DuplicateEntryError("Room", "room_number", number)

            room = Room(
                hostel_id=hostel.id,
                room_number=number,
                floor=floor,
                capacity=capacity,
                current_occupancy=0,
                room_type=room_type,
                amenities=amenities,
                status=RoomStatus.AVAILABLE,
                version=0,
            )
            return self.rooms.add(room)

        return self._execute("create room", _create, room_number, message="Room created")

    def set_maintenance(self, room_id: str, enabled: bool) -> ServiceResult[Room]:
        """
        Put a room under maintenance, or lift the override.

        Lifting it restores the status implied by the room's occupancy.
        Residents already in the room stay where they are.
        """

        def _apply() -> Room:
            room = self.rooms.lock_room(room_id)
            if enabled:
                status = RoomStatus.MAINTENANCE
            else:
                status = RoomStatus.derive(room.current_occupancy, room.capacity)
            if room.status != status:
                self.rooms.set_status(room, status)
            return room

        return self._execute("set room maintenance", _apply, room_id)
