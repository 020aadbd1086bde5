from residence_engine.schemas.hostel.hostel import HostelCreate, HostelDetail, HostelResponse

__all__ = ["HostelCreate", "HostelDetail", "HostelResponse"]
