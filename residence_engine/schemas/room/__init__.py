from residence_engine.schemas.room.room import RoomCreate, RoomMaintenanceUpdate, RoomResponse

__all__ = ["RoomCreate", "RoomMaintenanceUpdate", "RoomResponse"]
