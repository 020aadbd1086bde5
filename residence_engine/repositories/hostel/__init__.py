from residence_engine.repositories.hostel.hostel_repository import HostelRepository

__all__ = ["HostelRepository"]
