from residence_engine.models.room.room import Room

__all__ = ["Room"]
