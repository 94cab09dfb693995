from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from chessplay.messaging.types import (
    IdentifyMessage,
    JoinGameMessage,
    MakeMoveMessage,
    ResignMessage,
    parse_client_message,
)

if TYPE_CHECKING:
    from chessplay.messaging.encoder import DecodeError
    from chessplay.messaging.protocol import ConnectionProtocol
    from chessplay.session.manager import SessionManager
    from chessplay.session.models import DeliverySink

logger = structlog.get_logger()

INTERNAL_ERROR = "Internal server error"


def _invalid_message(error: Exception) -> str:
    return f"Invalid message: {error}"


class MessageRouter:
    """
    Routes incoming messages to appropriate handlers.

    This class contains pure business logic and can be tested
    without real WebSocket connections.
    """

    def __init__(self, session_manager: SessionManager) -> None:
        self._session_manager = session_manager

    async def handle_message(
        self,
        connection: ConnectionProtocol,
        raw_message: dict[str, Any],
    ) -> None:
        connection_id = connection.connection_id
        try:
            message = parse_client_message(raw_message)
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            logger.warning("invalid message", connection_id=connection_id, error=str(e))
            self._session_manager.send_error(connection_id, _invalid_message(e))
            return

        try:
            await self._dispatch(connection_id, message)
        except Exception:
            # contain the fault to this connection; room state is only ever
            # mutated inside a completed with_room callback
            logger.exception("unexpected error handling message", connection_id=connection_id)
            self._session_manager.send_error(connection_id, INTERNAL_ERROR)

    async def _dispatch(
        self,
        connection_id: str,
        message: IdentifyMessage | JoinGameMessage | MakeMoveMessage | ResignMessage,
    ) -> None:
        if isinstance(message, IdentifyMessage):
            await self._session_manager.identify(connection_id, message.id)
        elif isinstance(message, JoinGameMessage):
            await self._session_manager.join_game(connection_id, message.game_id)
        elif isinstance(message, MakeMoveMessage):
            await self._session_manager.make_move(connection_id, message.move_)
        elif isinstance(message, ResignMessage):
            await self._session_manager.resign(connection_id)

    async def handle_decode_error(self, connection: ConnectionProtocol, error: DecodeError) -> None:
        logger.warning("decode error", connection_id=connection.connection_id, error=str(error))
        self._session_manager.send_error(connection.connection_id, _invalid_message(error))

    async def handle_connect(self, connection: ConnectionProtocol, sink: DeliverySink) -> None:
        self._session_manager.register_connection(connection.connection_id, sink)

    async def handle_disconnect(self, connection: ConnectionProtocol) -> None:
        await self._session_manager.disconnect(connection.connection_id)
