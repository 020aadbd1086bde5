# residence_engine/repositories/room/room_repository.py
"""
Room repository: queries, row locking and the occupancy primitive.
"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import case, literal, select, update
from sqlalchemy.orm import Session

from residence_engine.core.exceptions import CapacityExceededError, RoomNotFoundError
from residence_engine.core.logging import get_audit_logger, get_logger
from residence_engine.models.base import RoomStatus, utcnow
from residence_engine.models.room import Room
from residence_engine.repositories.base import BaseRepository

logger = get_logger(__name__)


class RoomRepository(BaseRepository[Room]):
    """
    Repository for Room entities.

    current_occupancy is written only by adjust_occupancy; no other code
    path assigns it.
    """

    not_found_error = RoomNotFoundError

    def __init__(self, session: Session):
        super().__init__(Room, session)
        self._audit = get_audit_logger()

    # ============================================================================
    # QUERIES
    # ============================================================================

    def list_rooms(
        self,
        hostel_id: Optional[str] = None,
        status: Optional[RoomStatus] = None,
        floor: Optional[int] = None,
        available_only: bool = False,
    ) -> List[Room]:
        """
        List rooms with optional filters.

        Args:
            hostel_id: Owning hostel
            status: Room status
            floor: Floor number
            available_only: Keep only rooms with a free bed that are not under maintenance

        Returns:
            Rooms ordered by hostel and room number
        """
        query = select(Room)

        if hostel_id is not None:
            query = query.where(Room.hostel_id == hostel_id)
        if status is not None:
            query = query.where(Room.status == status)
        if floor is not None:
            query = query.where(Room.floor == floor)
        if available_only:
            query = query.where(
                Room.current_occupancy < Room.capacity,
                Room.status != RoomStatus.MAINTENANCE,
            )

        query = query.order_by(Room.hostel_id, Room.room_number)
        return list(self.session.execute(query).unique().scalars().all())

    def find_by_room_number(self, hostel_id: str, room_number: str) -> Optional[Room]:
        return self.find_one_by_criteria({
            'hostel_id': hostel_id,
            'room_number': room_number,
        })

    # ============================================================================
    # LOCKING
    # ============================================================================

    def lock_rooms(self, room_ids: Iterable[str]) -> Dict[str, Room]:
        """
        Lock the given rooms for the rest of the transaction.

        Rows are locked in ascending id order so two transactions touching
        the same pair of rooms cannot deadlock. Missing ids raise
        RoomNotFoundError.
        """
        ids = sorted({room_id for room_id in room_ids if room_id is not None})
        if not ids:
            return {}

        query = (
            select(Room)
            .where(Room.id.in_(ids))
            .order_by(Room.id)
            .with_for_update(of=Room)
            .execution_options(populate_existing=True)
        )
        rooms = {room.id: room for room in self.session.execute(query).unique().scalars().all()}

        for room_id in ids:
            if room_id not in rooms:
                raise RoomNotFoundError(room_id)
        return rooms

    def lock_room(self, room_id: str) -> Room:
        return self.lock_rooms([room_id])[room_id]

    # ============================================================================
    # OCCUPANCY PRIMITIVE
    # ============================================================================

    def adjust_occupancy(self, room_id: str, delta: int) -> Room:
        """
        Apply an occupancy delta as a single conditional update.

        Must run inside the residence ledger's transaction, after the room
        has been locked. The update only matches when the result stays
        within 0..capacity; otherwise CapacityExceededError is raised and
        nothing is written. Status is recomputed unless the room is under
        maintenance.

        Args:
            room_id: Room to adjust
            delta: Signed change in residents

        Returns:
            The refreshed Room
        """
        new_occupancy = Room.current_occupancy + delta

        stmt = (
            update(Room)
            .where(
                Room.id == room_id,
                new_occupancy >= 0,
                new_occupancy <= Room.capacity,
            )
            .values(
                current_occupancy=new_occupancy,
                status=case(
                    (Room.status == RoomStatus.MAINTENANCE, Room.status),
                    (new_occupancy >= Room.capacity, literal(RoomStatus.FULL.value)),
                    else_=literal(RoomStatus.AVAILABLE.value),
                ),
                version=Room.version + 1,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)

        if result.rowcount != 1:
            if self.find_by_id(room_id) is None:
                raise RoomNotFoundError(room_id)
            raise CapacityExceededError(room_id, delta)

        room = self.reload(room_id)
        self._audit.info(
            "occupancy_adjusted",
            room_id=room_id,
            delta=delta,
            current_occupancy=room.current_occupancy,
            capacity=room.capacity,
            status=room.status.value,
        )
        return room

    def set_status(self, room: Room, status: RoomStatus) -> Room:
        """Write a status on a locked room and bump its version."""
        room.status = status
        room.version = room.version + 1
        self.session.flush()
        logger.info(
            f"Room {room.id} status set to {status.value}",
            extra={"room_id": room.id, "status": status.value},
        )
        return room

    def reload(self, room_id: str) -> Room:
        query = (
            select(Room)
            .where(Room.id == room_id)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(query).unique().scalar_one()
