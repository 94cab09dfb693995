"""
Pydantic models for the session layer.
"""

from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel

from chessplay.logic.enums import Color


class RoomStatus(StrEnum):
    EMPTY = "empty"
    WAITING = "waiting"
    STARTED = "started"


class RoomInfo(BaseModel):
    """Room summary for the status endpoint."""

    room_id: UUID
    reserved_color: Color
    status: RoomStatus
    client_count: int
    moves_played: int
