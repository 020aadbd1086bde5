from residence_engine.repositories.directory.directory_repository import StaffRepository, StudentRepository

__all__ = ["StaffRepository", "StudentRepository"]
