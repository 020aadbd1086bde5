from residence_engine.services.hostel.hostel_service import HostelService

__all__ = ["HostelService"]
