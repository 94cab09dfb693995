from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from chessplay.logic.exceptions import IllegalMoveError
from chessplay.messaging.types import (
    ColorAssignedMessage,
    ErrorMessage,
    GameStartedMessage,
    GameStateMessage,
    MoveMadeMessage,
    SessionError,
    WaitingForPlayersMessage,
    dump_message,
)
from chessplay.session.exceptions import RoomNotFoundError
from chessplay.session.models import Client, Session, SessionState

if TYPE_CHECKING:
    from uuid import UUID

    from chessplay.logic.types import Move
    from chessplay.session.models import DeliverySink
    from chessplay.session.registry import RoomRegistry
    from chessplay.session.room import Room

logger = structlog.get_logger()


class SessionManager:
    """Drive the per-connection protocol: identify, join, move, disconnect.

    Each live connection has a Session (connected -> identified -> joined).
    Rejections are sent as Error replies to the originating connection only
    and leave every room untouched. Room work runs inside
    RoomRegistry.with_room, so the resulting broadcasts are enqueued in the
    same critical section as the mutation that caused them.
    """

    def __init__(self, registry: RoomRegistry) -> None:
        self._registry = registry
        self._sessions: dict[str, Session] = {}  # connection_id -> Session

    @property
    def registry(self) -> RoomRegistry:
        return self._registry

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def register_connection(self, connection_id: str, sink: DeliverySink) -> Session:
        session = Session(connection_id=connection_id, sink=sink)
        self._sessions[connection_id] = session
        return session

    def get_session(self, connection_id: str) -> Session | None:
        return self._sessions.get(connection_id)

    def send_error(self, connection_id: str, message: str) -> None:
        session = self._sessions.get(connection_id)
        if session is None:
            return
        session.sink.deliver(dump_message(ErrorMessage(message=str(message))))

    # --- Inbound operations ---

    async def identify(self, connection_id: str, client_id: UUID) -> None:
        session = self._sessions.get(connection_id)
        if session is None:
            return
        if session.state is not SessionState.CONNECTED:
            self.send_error(connection_id, SessionError.ALREADY_IDENTIFIED)
            return

        session.client_id = client_id
        structlog.contextvars.bind_contextvars(client_id=str(client_id))
        logger.info("client identified", connection_id=connection_id)

    async def join_game(self, connection_id: str, room_id: UUID) -> None:
        session = self._sessions.get(connection_id)
        if session is None:
            return
        if session.client_id is None:
            self.send_error(connection_id, SessionError.IDENTIFY_FIRST)
            return
        if session.room_id is not None:
            self.send_error(connection_id, SessionError.ALREADY_JOINED)
            return

        client = Client(id=session.client_id, sink=session.sink)

        def join(room: Room) -> SessionError | None:
            if room.has_client(client.id):
                return SessionError.ALREADY_IN_GAME
            color = room.add_client(client)
            if color is None:
                return SessionError.GAME_FULL

            room.send_to(client.id, ColorAssignedMessage(color=color))
            if room.start():
                room.broadcast(GameStartedMessage())
                room.broadcast(GameStateMessage(state=room.snapshot_state()))
            else:
                room.broadcast(WaitingForPlayersMessage(connected_count=room.client_count))
            return None

        try:
            error = await self._registry.with_room(room_id, join)
        except RoomNotFoundError:
            self.send_error(connection_id, SessionError.GAME_NOT_FOUND)
            return

        if error is not None:
            self.send_error(connection_id, error)
            return

        session.room_id = room_id
        structlog.contextvars.bind_contextvars(room_id=str(room_id))

    async def make_move(self, connection_id: str, move: Move) -> None:
        session = self._sessions.get(connection_id)
        if session is None:
            return
        if session.client_id is None:
            self.send_error(connection_id, SessionError.IDENTIFY_FIRST)
            return
        if session.room_id is None:
            self.send_error(connection_id, SessionError.JOIN_FIRST)
            return

        client_id = session.client_id

        def apply(room: Room) -> str | None:
            try:
                result = room.apply_move(client_id, move)
            except IllegalMoveError as e:
                logger.info("move rejected by validator", room_id=str(room.room_id), reason=str(e))
                return str(e)
            if result is None:
                return SessionError.INVALID_MOVE

            applied, state = result
            room.broadcast(MoveMadeMessage(move_=applied))
            room.broadcast(GameStateMessage(state=state))
            return None

        try:
            error = await self._registry.with_room(session.room_id, apply)
        except RoomNotFoundError:
            self.send_error(connection_id, SessionError.GAME_NOT_FOUND)
            return

        if error is not None:
            self.send_error(connection_id, error)

    async def resign(self, connection_id: str) -> None:
        self.send_error(connection_id, SessionError.RESIGN_NOT_IMPLEMENTED)

    # --- Lifecycle ---

    async def disconnect(self, connection_id: str) -> None:
        """Drop the session; vacate its seat and tell the remaining occupant."""
        session = self._sessions.pop(connection_id, None)
        if session is None:
            return

        client_id = session.client_id
        room_id = session.room_id
        if client_id is None or room_id is None:
            return

        def leave(room: Room) -> None:
            room.remove_client(client_id)
            if not room.is_started:
                room.broadcast(WaitingForPlayersMessage(connected_count=room.client_count))

        try:
            await self._registry.with_room(room_id, leave)
        except RoomNotFoundError:
            logger.warning("room vanished before disconnect cleanup", room_id=str(room_id))
            return
        logger.info("client left room", room_id=str(room_id), client_id=str(client_id))
