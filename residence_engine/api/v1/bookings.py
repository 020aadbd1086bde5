"""Booking workflow endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from residence_engine.api import deps
from residence_engine.schemas.booking import BookingCreate, BookingDecision, BookingResponse
from residence_engine.services import BookingWorkflowService
from residence_engine.services.booking import build_target

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.get("", response_model=List[BookingResponse])
def list_bookings(
    status: Optional[str] = None,
    request_type: Optional[str] = None,
    student_id: Optional[str] = None,
    service: BookingWorkflowService = Depends(deps.get_booking_service),
):
    return deps.unwrap(service.list_bookings(status=status, request_type=request_type, student_id=student_id))


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def submit_booking(
    payload: BookingCreate,
    service: BookingWorkflowService = Depends(deps.get_booking_service),
):
    target = build_target(
        requested_room_id=payload.requested_room_id,
        requested_hostel_id=payload.requested_hostel_id,
        requested_bed=payload.requested_bed,
        off_campus_hostel_name=payload.requested_off_campus_hostel_name,
        off_campus_room_number=payload.requested_off_campus_room_number,
        off_campus_area=payload.requested_off_campus_area,
    )
    return deps.unwrap(service.submit_booking(payload.student_id, payload.request_type, target, payload.note))


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: str,
    service: BookingWorkflowService = Depends(deps.get_booking_service),
):
    return deps.unwrap(service.get_booking(booking_id))


@router.put("/{booking_id}/decision", response_model=BookingResponse)
def decide_booking(
    booking_id: str,
    payload: BookingDecision,
    service: BookingWorkflowService = Depends(deps.get_booking_service),
):
    return deps.unwrap(service.decide(booking_id, payload.decision, payload.approver_id, payload.note))
