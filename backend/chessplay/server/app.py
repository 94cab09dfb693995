from __future__ import annotations

import json
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route, WebSocketRoute

from chessplay.messaging.router import MessageRouter
from chessplay.server.settings import GameServerSettings
from chessplay.server.types import NewGameRequest, NewGameResponse
from chessplay.server.websocket import websocket_endpoint
from chessplay.session.manager import SessionManager
from chessplay.session.registry import RoomRegistry
from chessplay.session.types import RoomStatus
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.websockets import WebSocket


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def status(request: Request) -> JSONResponse:
    registry: RoomRegistry = request.app.state.registry
    session_manager: SessionManager = request.app.state.session_manager
    rooms = registry.get_rooms_info()
    return JSONResponse(
        {
            "status": "ok",
            "rooms": len(rooms),
            "active_games": sum(1 for r in rooms if r.status is RoomStatus.STARTED),
            "connections": session_manager.session_count,
        },
    )


async def create_game(request: Request) -> JSONResponse:
    registry: RoomRegistry = request.app.state.registry
    settings: GameServerSettings = request.app.state.settings

    raw_body = await request.body()
    if len(raw_body) > settings.max_request_body:
        return JSONResponse({"error": "Request body too large"}, status_code=413)

    try:
        game_request = NewGameRequest.model_validate(json.loads(raw_body))
    except (ValueError, TypeError, UnicodeDecodeError, ValidationError) as e:  # fmt: skip
        logger.info("rejected new game request", error=str(e))
        return JSONResponse({"error": "Invalid request body"}, status_code=400)

    room_id = registry.create_room(game_request.color)
    return JSONResponse(NewGameResponse(game_id=room_id).model_dump(mode="json"))


def create_app(
    settings: GameServerSettings | None = None,
    registry: RoomRegistry | None = None,
    session_manager: SessionManager | None = None,
    message_router: MessageRouter | None = None,
) -> Starlette:
    if settings is None:
        settings = GameServerSettings()

    if registry is None:
        registry = session_manager.registry if session_manager is not None else RoomRegistry()

    if session_manager is None:
        session_manager = SessionManager(registry)

    if message_router is None:
        message_router = MessageRouter(session_manager)

    async def ws_endpoint(websocket: WebSocket) -> None:
        await websocket_endpoint(
            websocket,
            message_router,
            wire_format=settings.wire_format,
            max_decode_errors=settings.max_decode_errors,
        )

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/status", status, methods=["GET"]),
        Route("/api/game", create_game, methods=["PUT"]),
        WebSocketRoute("/ws", ws_endpoint),
    ]

    app = Starlette(routes=routes)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "PUT"],
        allow_headers=["Content-Type"],
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.session_manager = session_manager

    logger.info("chess server ready", wire_format=settings.wire_format)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (uvicorn --factory chessplay.server.app:get_app)."""
    settings = GameServerSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_app(settings=settings)
