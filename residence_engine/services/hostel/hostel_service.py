"""
Hostel service.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from residence_engine.core.exceptions import DuplicateEntryError, StaffNotFoundError, ValidationError
from residence_engine.models.base import HostelGender
from residence_engine.models.hostel import Hostel
from residence_engine.repositories.hostel import HostelRepository
from residence_engine.services.base import BaseService, ServiceResult, coerce_enum
from residence_engine.services.directory import SqlStaffDirectory, StaffDirectory


class HostelService(BaseService):

    def __init__(self, db_session: Session, staff_directory: Optional[StaffDirectory] = None):
        super().__init__(db_session)
        self.hostels = HostelRepository(db_session)
        self.staff_directory = staff_directory or SqlStaffDirectory(db_session)

    def list_hostels(self, gender: Optional[HostelGender] = None) -> ServiceResult[List[Hostel]]:
        return self._query("list hostels", lambda: self.hostels.list_hostels(gender))

    def get_hostel(self, hostel_id: str) -> ServiceResult[Hostel]:
        """Hostel with its rooms loaded."""
        return self._query("get hostel", lambda: self.hostels.get_with_rooms(hostel_id), hostel_id)

    def create_hostel(
        self,
        name: str,
        gender_restriction: HostelGender,
        total_room_count: int = 0,
        location: Optional[str] = None,
        description: Optional[str] = None,
        warden_ref: Optional[str] = None,
    ) -> ServiceResult[Hostel]:

        def _create() -> Hostel:
            hostel_name = (name or "").strip()
            if not hostel_name:
                raise ValidationError("Hostel name is required", field_errors={"name": ["must not be blank"]})
            if total_room_count is not None and total_room_count < 0:
                raise ValidationError(
                    "Total room count cannot be negative",
                    field_errors={"total_room_count": [f"got {total_room_count}"]},
                )
            if warden_ref and not self.staff_directory.find_staff(warden_ref):
                raise StaffNotFoundError(warden_ref)
            if self.hostels.find_by_name(hostel_name) is not None:
                raise DuplicateEntryError("Hostel", "name", hostel_name)

            hostel = Hostel(
                name=hostel_name,
                gender_restriction=coerce_enum(HostelGender, gender_restriction, "gender_restriction"),
                total_room_count=total_room_count or 0,
                location=location,
                description=description,
                warden_ref=warden_ref,
            )
            return self.hostels.add(hostel)

        return self._execute("create hostel", _create, name, message="Hostel created")
