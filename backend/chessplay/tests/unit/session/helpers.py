"""Helpers for driving SessionManager directly with recording sinks."""

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from chessplay.logic.enums import Color
from chessplay.tests.mocks import MockSink

if TYPE_CHECKING:
    from chessplay.session.manager import SessionManager


async def connect_player(
    manager: SessionManager,
    room_id: UUID | None = None,
    connection_id: str | None = None,
    client_id: UUID | None = None,
) -> tuple[str, MockSink, UUID]:
    """Register a connection, identify it, and optionally join a room.

    Returns (connection_id, sink, client_id).
    """
    connection_id = connection_id or f"conn-{uuid4().hex[:8]}"
    client_id = client_id or uuid4()
    sink = MockSink()
    manager.register_connection(connection_id, sink)
    await manager.identify(connection_id, client_id)
    if room_id is not None:
        await manager.join_game(connection_id, room_id)
    return connection_id, sink, client_id


async def create_started_room(
    manager: SessionManager,
    reserved_color: Color = Color.WHITE,
) -> tuple[UUID, list[tuple[str, MockSink, UUID]]]:
    """Create a room and seat two players so the game starts.

    The first player returned holds reserved_color. Sinks are cleared so
    assertions only see messages produced after setup.
    """
    room_id = manager.registry.create_room(reserved_color)
    players = [await connect_player(manager, room_id) for _ in range(2)]
    for _, sink, _ in players:
        sink.clear()
    return room_id, players
