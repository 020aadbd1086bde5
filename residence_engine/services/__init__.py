from residence_engine.services.booking import BookingWorkflowService
from residence_engine.services.hostel import HostelService
from residence_engine.services.residence import DirectAllocationService, ResidenceLedger
from residence_engine.services.room import RoomDirectoryService

__all__ = [
    "BookingWorkflowService",
    "DirectAllocationService",
    "HostelService",
    "ResidenceLedger",
    "RoomDirectoryService",
]
