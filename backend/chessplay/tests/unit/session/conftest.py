import pytest

from chessplay.session.manager import SessionManager
from chessplay.session.registry import RoomRegistry


@pytest.fixture
def manager():
    return SessionManager(RoomRegistry())
