from enum import StrEnum
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field, TypeAdapter

from chessplay.logic.enums import Color
from chessplay.logic.types import GameState, Move


class ClientMessageType(StrEnum):
    IDENTIFY = "Identify"
    JOIN_GAME = "JoinGame"
    MAKE_MOVE = "MakeMove"
    RESIGN = "Resign"


class ServerMessageType(StrEnum):
    COLOR_ASSIGNED = "ColorAssigned"
    WAITING_FOR_PLAYERS = "WaitingForPlayers"
    GAME_STARTED = "GameStarted"
    GAME_STATE = "GameState"
    MOVE_MADE = "MoveMade"
    ERROR = "Error"


class SessionError(StrEnum):
    """Fixed texts of error replies sent to the originating connection."""

    IDENTIFY_FIRST = "Identify first"
    ALREADY_IDENTIFIED = "Already identified"
    JOIN_FIRST = "Join a game first"
    ALREADY_JOINED = "Already joined a game"
    ALREADY_IN_GAME = "Already in this game"
    GAME_NOT_FOUND = "Game not found"
    GAME_FULL = "Game is full"
    INVALID_MOVE = "Invalid move or not your turn"
    RESIGN_NOT_IMPLEMENTED = "Resign not implemented"


# --- Client -> server ---


class IdentifyMessage(BaseModel):
    type: Literal[ClientMessageType.IDENTIFY] = ClientMessageType.IDENTIFY
    id: UUID


class JoinGameMessage(BaseModel):
    type: Literal[ClientMessageType.JOIN_GAME] = ClientMessageType.JOIN_GAME
    game_id: UUID


class MakeMoveMessage(BaseModel):
    type: Literal[ClientMessageType.MAKE_MOVE] = ClientMessageType.MAKE_MOVE
    move_: Move


class ResignMessage(BaseModel):
    type: Literal[ClientMessageType.RESIGN] = ClientMessageType.RESIGN


ClientMessage = Annotated[
    IdentifyMessage | JoinGameMessage | MakeMoveMessage | ResignMessage,
    Field(discriminator="type"),
]

_client_message_adapter = TypeAdapter(ClientMessage)


def parse_client_message(data: dict[str, Any]) -> IdentifyMessage | JoinGameMessage | MakeMoveMessage | ResignMessage:
    """Parse a raw dict into a typed client message, dispatching on the `type` tag."""
    return _client_message_adapter.validate_python(data)


# --- Server -> client ---


class ColorAssignedMessage(BaseModel):
    type: Literal[ServerMessageType.COLOR_ASSIGNED] = ServerMessageType.COLOR_ASSIGNED
    color: Color


class WaitingForPlayersMessage(BaseModel):
    type: Literal[ServerMessageType.WAITING_FOR_PLAYERS] = ServerMessageType.WAITING_FOR_PLAYERS
    connected_count: int


class GameStartedMessage(BaseModel):
    type: Literal[ServerMessageType.GAME_STARTED] = ServerMessageType.GAME_STARTED


class GameStateMessage(BaseModel):
    type: Literal[ServerMessageType.GAME_STATE] = ServerMessageType.GAME_STATE
    state: GameState


class MoveMadeMessage(BaseModel):
    type: Literal[ServerMessageType.MOVE_MADE] = ServerMessageType.MOVE_MADE
    move_: Move


class ErrorMessage(BaseModel):
    type: Literal[ServerMessageType.ERROR] = ServerMessageType.ERROR
    message: str


ServerMessage = (
    ColorAssignedMessage
    | WaitingForPlayersMessage
    | GameStartedMessage
    | GameStateMessage
    | MoveMadeMessage
    | ErrorMessage
)


def dump_message(message: ServerMessage) -> dict[str, Any]:
    """Serialize an outbound message to its wire dict (JSON-safe values, wire aliases)."""
    return message.model_dump(mode="json", by_alias=True)
