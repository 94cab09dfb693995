"""Room registry: creation, lookup and the per-room critical section."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TypeVar

import structlog

from chessplay.logic.validator import MoveValidator, StructuralMoveValidator
from chessplay.session.exceptions import RoomNotFoundError
from chessplay.session.room import Room

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from chessplay.logic.enums import Color
    from chessplay.session.types import RoomInfo

logger = structlog.get_logger()

T = TypeVar("T")


class RoomRegistry:
    """Own every Room and the lock that linearizes its mutations.

    One registry is constructed per process and handed to the HTTP layer
    and the session manager. All Room mutations go through with_room();
    its callback is synchronous, so no transport I/O ever happens while a
    room lock is held (broadcasts only enqueue onto delivery sinks).

    Rooms are never removed.
    """

    def __init__(self, validator_factory: Callable[[], MoveValidator] = StructuralMoveValidator) -> None:
        self._validator_factory = validator_factory
        self._rooms: dict[UUID, Room] = {}
        self._room_locks: dict[UUID, asyncio.Lock] = {}

    def create_room(self, reserved_color: Color) -> UUID:
        room = Room.create(reserved_color, validator=self._validator_factory())
        self._rooms[room.room_id] = room
        self._room_locks[room.room_id] = asyncio.Lock()
        logger.info("room created", room_id=str(room.room_id), reserved_color=reserved_color)
        return room.room_id

    def get_room(self, room_id: UUID) -> Room | None:
        """Unlocked lookup for read-only use (status reporting, tests)."""
        return self._rooms.get(room_id)

    @property
    def room_count(self) -> int:
        return len(self._rooms)

    def get_rooms_info(self) -> list[RoomInfo]:
        return [room.get_info() for room in list(self._rooms.values())]

    async def with_room(self, room_id: UUID, fn: Callable[[Room], T]) -> T:
        """Run fn against the room while holding that room's lock.

        Raises RoomNotFoundError for unknown ids. Must not be re-entered
        from inside fn.
        """
        lock = self._room_locks.get(room_id)
        if lock is None:
            raise RoomNotFoundError(room_id)
        async with lock:
            return fn(self._rooms[room_id])
