from residence_engine.models.base.base_model import (
    Base,
    BaseModel,
    TimestampMixin,
    enum_type,
    new_uuid,
    utcnow,
)
from residence_engine.models.base.enums import (
    BookingRequestType,
    BookingStatus,
    HostelGender,
    ResidenceKind,
    RoomStatus,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampMixin",
    "enum_type",
    "new_uuid",
    "utcnow",
    "BookingRequestType",
    "BookingStatus",
    "HostelGender",
    "ResidenceKind",
    "RoomStatus",
]
