from uuid import UUID

from pydantic import BaseModel, ConfigDict

from chessplay.logic.enums import Color


class NewGameRequest(BaseModel):
    """Body of the room-creation request: the color the first joiner receives."""

    model_config = ConfigDict(extra="forbid")

    color: Color


class NewGameResponse(BaseModel):
    game_id: UUID
