"""Residence endpoints: lookups, direct allocation and vacate."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from residence_engine.api import deps
from residence_engine.models.base import ResidenceKind
from residence_engine.schemas.residence import (
    AreaCount,
    OffCampusAllocationRequest,
    OnCampusAllocationRequest,
    ResidenceResponse,
)
from residence_engine.services import DirectAllocationService, ResidenceLedger

router = APIRouter(prefix="/residences", tags=["Residences"])


@router.get("", response_model=List[ResidenceResponse])
def list_residences(
    kind: Optional[ResidenceKind] = None,
    hostel_id: Optional[str] = None,
    area: Optional[str] = None,
    ledger: ResidenceLedger = Depends(deps.get_residence_ledger),
):
    return deps.unwrap(ledger.list_residences(kind=kind, hostel_id=hostel_id, area=area))


@router.get("/by-area", response_model=List[AreaCount])
def residences_by_area(ledger: ResidenceLedger = Depends(deps.get_residence_ledger)):
    rows = deps.unwrap(ledger.residences_by_area())
    return [AreaCount(area=area, count=count) for area, count in rows]


@router.post("/on-campus", response_model=ResidenceResponse, status_code=status.HTTP_201_CREATED)
def allocate_on_campus(
    payload: OnCampusAllocationRequest,
    service: DirectAllocationService = Depends(deps.get_direct_allocation_service),
):
    return deps.unwrap(service.allocate(payload))


@router.post("/off-campus", response_model=ResidenceResponse, status_code=status.HTTP_201_CREATED)
def allocate_off_campus(
    payload: OffCampusAllocationRequest,
    service: DirectAllocationService = Depends(deps.get_direct_allocation_service),
):
    return deps.unwrap(service.allocate_off_campus(payload))


@router.get("/{student_id}", response_model=ResidenceResponse)
def get_residence(
    student_id: str,
    ledger: ResidenceLedger = Depends(deps.get_residence_ledger),
):
    return deps.unwrap(ledger.get_residence(student_id))


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def vacate_residence(
    student_id: str,
    ledger: ResidenceLedger = Depends(deps.get_residence_ledger),
):
    deps.unwrap(ledger.vacate(student_id))
