from residence_engine.services.room.room_directory_service import RoomDirectoryService

__all__ = ["RoomDirectoryService"]
