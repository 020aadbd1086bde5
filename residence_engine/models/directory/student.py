"""
Reference tables read by the student and staff directories.

Records are owned by the student and staff registries; the engine only
reads them.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from residence_engine.models.base import BaseModel, TimestampMixin

__all__ = ["Student", "Staff"]


class Student(BaseModel, TimestampMixin):
    __tablename__ = "students"

    student_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        index=True,
    )
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)


class Staff(BaseModel, TimestampMixin):
    __tablename__ = "staff"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
