from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from starlette.websockets import WebSocket, WebSocketDisconnect

from chessplay.messaging.encoder import DecodeError, WireFormat, decode
from chessplay.messaging.protocol import ConnectionProtocol
from chessplay.session.outbox import ConnectionOutbox

logger = structlog.get_logger()

if TYPE_CHECKING:
    from chessplay.messaging.router import MessageRouter

_DEFAULT_MAX_DECODE_ERRORS = 5


class WebSocketConnection(ConnectionProtocol):
    def __init__(
        self,
        websocket: WebSocket,
        wire_format: WireFormat = WireFormat.JSON,
        connection_id: str | None = None,
    ) -> None:
        self._websocket = websocket
        self.wire_format = wire_format
        self._connection_id = connection_id or str(uuid4())

    @property
    def connection_id(self) -> str:
        return self._connection_id

    async def send_frame(self, frame: str | bytes) -> None:
        try:
            if isinstance(frame, bytes):
                await self._websocket.send_bytes(frame)
            else:
                await self._websocket.send_text(frame)
        except WebSocketDisconnect:
            raise ConnectionError("WebSocket already disconnected") from None

    async def receive_frame(self) -> str | bytes:
        message = await self._websocket.receive()
        if message["type"] == "websocket.disconnect":
            raise ConnectionError("WebSocket disconnected")
        if message.get("text") is not None:
            return message["text"]
        if message.get("bytes") is not None:
            return message["bytes"]
        return ""

    async def close(self, code: int = 1000, reason: str = "") -> None:
        with contextlib.suppress(WebSocketDisconnect, RuntimeError):
            await self._websocket.close(code=code, reason=reason)


async def websocket_endpoint(
    websocket: WebSocket,
    router: MessageRouter,
    *,
    wire_format: WireFormat = WireFormat.JSON,
    max_decode_errors: int = _DEFAULT_MAX_DECODE_ERRORS,
) -> None:
    """Run one connection: inbound receive loop here, outbound sends in the outbox pump."""
    await websocket.accept()

    connection = WebSocketConnection(websocket, wire_format=wire_format)
    structlog.contextvars.bind_contextvars(connection_id=connection.connection_id)
    logger.info("websocket connected")

    outbox = ConnectionOutbox(connection)
    outbox.start()
    await router.handle_connect(connection, outbox)

    decode_errors = 0

    try:
        while True:
            frame = await connection.receive_frame()

            try:
                data = decode(frame)
            except DecodeError as e:
                decode_errors += 1
                await router.handle_decode_error(connection, e)
                if decode_errors >= max_decode_errors:
                    logger.info("too many decode errors, disconnecting", strikes=decode_errors)
                    await outbox.drain()
                    await connection.close(code=4004, reason="too_many_decode_errors")
                    return
                continue

            decode_errors = 0
            await router.handle_message(connection, data)
    except (WebSocketDisconnect, RuntimeError, ConnectionError):  # fmt: skip
        pass
    finally:
        logger.info("websocket disconnected")
        await router.handle_disconnect(connection)
        await outbox.stop()
        structlog.contextvars.clear_contextvars()
