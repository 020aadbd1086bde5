"""Hostel endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from residence_engine.api import deps
from residence_engine.models.base import HostelGender
from residence_engine.schemas.hostel import HostelCreate, HostelDetail, HostelResponse
from residence_engine.services import HostelService

router = APIRouter(prefix="/hostels", tags=["Hostels"])


@router.get("", response_model=List[HostelResponse])
def list_hostels(
    gender: Optional[HostelGender] = None,
    service: HostelService = Depends(deps.get_hostel_service),
):
    return deps.unwrap(service.list_hostels(gender))


@router.post("", response_model=HostelResponse, status_code=status.HTTP_201_CREATED)
def create_hostel(
    payload: HostelCreate,
    service: HostelService = Depends(deps.get_hostel_service),
):
    return deps.unwrap(service.create_hostel(**payload.model_dump()))


@router.get("/{hostel_id}", response_model=HostelDetail)
def get_hostel(
    hostel_id: str,
    service: HostelService = Depends(deps.get_hostel_service),
):
    return deps.unwrap(service.get_hostel(hostel_id))
