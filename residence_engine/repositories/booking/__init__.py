from residence_engine.repositories.booking.booking_request_repository import BookingRequestRepository

__all__ = ["BookingRequestRepository"]
