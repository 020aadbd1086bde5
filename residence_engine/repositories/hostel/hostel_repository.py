"""
Hostel repository.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from residence_engine.core.exceptions import HostelNotFoundError
from residence_engine.models.base import HostelGender
from residence_engine.models.hostel import Hostel
from residence_engine.repositories.base import BaseRepository


class HostelRepository(BaseRepository[Hostel]):
    not_found_error = HostelNotFoundError

    def __init__(self, session: Session):
        super().__init__(Hostel, session)

    def list_hostels(self, gender: Optional[HostelGender] = None) -> List[Hostel]:
        return self.find_by_criteria({'gender_restriction': gender}, order_by=['name'])

    def find_by_name(self, name: str) -> Optional[Hostel]:
        return self.find_one_by_criteria({'name': name})

    def get_with_rooms(self, hostel_id: str) -> Hostel:
        query = (
            select(Hostel)
            .where(Hostel.id == hostel_id)
            .options(selectinload(Hostel.rooms))
        )
        hostel = self.session.execute(query).scalar_one_or_none()
        if hostel is None:
            raise HostelNotFoundError(hostel_id)
        return hostel
