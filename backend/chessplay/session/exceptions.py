from uuid import UUID


class SessionLayerError(Exception):
    """Base exception for session and registry failures."""


class RoomNotFoundError(SessionLayerError):
    def __init__(self, room_id: UUID) -> None:
        self.room_id = room_id
        super().__init__(f"room {room_id} not found")
