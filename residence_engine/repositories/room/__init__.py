from residence_engine.repositories.room.room_repository import RoomRepository

__all__ = ["RoomRepository"]
