from residence_engine.schemas.booking.booking import BookingCreate, BookingDecision, BookingResponse

__all__ = ["BookingCreate", "BookingDecision", "BookingResponse"]
