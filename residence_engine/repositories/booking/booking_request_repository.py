"""
Booking request repository with the compare-and-set decision write.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from residence_engine.core.exceptions import (
    AlreadyDecidedError,
    BookingNotFoundError,
    ValidationError,
)
from residence_engine.models.base import BookingRequestType, BookingStatus
from residence_engine.models.booking import BookingRequest
from residence_engine.repositories.base import BaseRepository


class BookingRequestRepository(BaseRepository[BookingRequest]):
    not_found_error = BookingNotFoundError

    def __init__(self, session: Session):
        super().__init__(BookingRequest, session)

    def list_bookings(
        self,
        status: Optional[BookingStatus] = None,
        request_type: Optional[BookingRequestType] = None,
        student_id: Optional[str] = None,
    ) -> List[BookingRequest]:
        return self.find_by_criteria(
            {
                'status': status,
                'request_type': request_type,
                'student_id': student_id,
            },
            order_by=['requested_at'],
        )

    def record_decision(
        self,
        booking_id: str,
        decision: BookingStatus,
        approver_id: str,
        note: Optional[str],
        decided_at: datetime,
    ) -> BookingRequest:
        """
        Move a booking out of pending with a single guarded update.

        The update only matches while the row is still pending, so two
        concurrent decisions cannot both apply.

        Raises:
            ValidationError: decision is not a terminal status
            BookingNotFoundError: no such booking
            AlreadyDecidedError: the booking was already decided
        """
        if not BookingStatus.PENDING.can_transition_to(decision):
            raise ValidationError(
                "Decision must be 'approved' or 'rejected'",
                field_errors={"decision": [f"invalid value '{decision.value}'"]},
            )

        stmt = (
            update(BookingRequest)
            .where(
                BookingRequest.id == booking_id,
                BookingRequest.status == BookingStatus.PENDING,
            )
            .values(
                status=decision,
                approved_by=approver_id,
                approved_at=decided_at,
                decision_note=note,
                updated_at=decided_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)

        booking = self.reload(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        if result.rowcount != 1:
            raise AlreadyDecidedError(booking_id, booking.status.value)
        return booking

    def reload(self, booking_id: str) -> Optional[BookingRequest]:
        query = (
            select(BookingRequest)
            .where(BookingRequest.id == booking_id)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(query).scalar_one_or_none()
