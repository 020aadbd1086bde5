from residence_engine.services.booking.booking_workflow_service import BookingWorkflowService, build_target

__all__ = ["BookingWorkflowService", "build_target"]
