from residence_engine.services.directory.directory import (
    SqlStaffDirectory,
    SqlStudentDirectory,
    StaffDirectory,
    StudentDirectory,
    StudentRecord,
)

__all__ = [
    "SqlStaffDirectory",
    "SqlStudentDirectory",
    "StaffDirectory",
    "StudentDirectory",
    "StudentRecord",
]
