import asyncio
from uuid import uuid4

import pytest

from chessplay.logic.enums import Color
from chessplay.logic.validator import StructuralMoveValidator
from chessplay.session.exceptions import RoomNotFoundError
from chessplay.session.registry import RoomRegistry
from chessplay.session.types import RoomStatus


@pytest.fixture
def registry():
    return RoomRegistry()


class TestRoomRegistry:
    def test_create_room_returns_distinct_ids(self, registry) -> None:
        ids = {registry.create_room(Color.WHITE) for _ in range(5)}

        assert len(ids) == 5
        assert registry.room_count == 5

    def test_created_room_is_empty_with_reserved_color(self, registry) -> None:
        room_id = registry.create_room(Color.BLACK)
        room = registry.get_room(room_id)

        assert room.room_id == room_id
        assert room.reserved_color is Color.BLACK
        assert room.client_count == 0

    def test_get_unknown_room(self, registry) -> None:
        assert registry.get_room(uuid4()) is None

    def test_each_room_gets_its_own_validator(self) -> None:
        registry = RoomRegistry(validator_factory=StructuralMoveValidator)
        first = registry.get_room(registry.create_room(Color.WHITE))
        second = registry.get_room(registry.create_room(Color.WHITE))

        assert first.validator is not second.validator

    def test_rooms_info(self, registry) -> None:
        registry.create_room(Color.WHITE)
        registry.create_room(Color.BLACK)

        infos = registry.get_rooms_info()

        assert len(infos) == 2
        assert {info.status for info in infos} == {RoomStatus.EMPTY}


class TestWithRoom:
    async def test_runs_fn_and_returns_its_result(self, registry) -> None:
        room_id = registry.create_room(Color.WHITE)

        result = await registry.with_room(room_id, lambda room: room.room_id)

        assert result == room_id

    async def test_unknown_room_raises(self, registry) -> None:
        with pytest.raises(RoomNotFoundError) as exc_info:
            await registry.with_room(uuid4(), lambda room: room)

        assert "not found" in str(exc_info.value)

    async def test_exception_in_fn_releases_lock(self, registry) -> None:
        room_id = registry.create_room(Color.WHITE)

        def boom(_room):
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await registry.with_room(room_id, boom)

        assert await registry.with_room(room_id, lambda room: True) is True

    async def test_waits_for_room_lock(self, registry) -> None:
        """A second caller's fn does not run until the current holder releases the room lock."""
        room_id = registry.create_room(Color.WHITE)
        lock = registry._room_locks[room_id]
        ran: list[str] = []

        def fn(_room) -> str:
            ran.append("fn")
            return "done"

        await lock.acquire()
        task = asyncio.create_task(registry.with_room(room_id, fn))
        for _ in range(5):
            await asyncio.sleep(0)

        assert ran == []
        assert not task.done()

        lock.release()

        assert await task == "done"
        assert ran == ["fn"]

    async def test_other_rooms_not_blocked(self, registry) -> None:
        busy = registry.create_room(Color.WHITE)
        free = registry.create_room(Color.WHITE)

        async with registry._room_locks[busy]:
            result = await asyncio.wait_for(registry.with_room(free, lambda room: room.room_id), timeout=1.0)

        assert result == free
