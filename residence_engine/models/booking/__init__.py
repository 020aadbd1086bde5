from residence_engine.models.booking.booking_request import BookingRequest

__all__ = ["BookingRequest"]
