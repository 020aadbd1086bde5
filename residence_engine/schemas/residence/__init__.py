from residence_engine.schemas.residence.residence import (
    AreaCount,
    OffCampusAllocationRequest,
    OnCampusAllocationRequest,
    ResidenceResponse,
    RoomOccupant,
)

__all__ = [
    "AreaCount",
    "OffCampusAllocationRequest",
    "OnCampusAllocationRequest",
    "ResidenceResponse",
    "RoomOccupant",
]
