from residence_engine.models.hostel.hostel import Hostel

__all__ = ["Hostel"]
