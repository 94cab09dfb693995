import pytest

from chessplay.messaging.router import MessageRouter
from chessplay.server.app import create_app
from chessplay.server.settings import GameServerSettings
from chessplay.session.manager import SessionManager
from chessplay.session.registry import RoomRegistry
from chessplay.tests.mocks import MockConnection, MockSink


@pytest.fixture
def registry():
    return RoomRegistry()


@pytest.fixture
def session_manager(registry):
    return SessionManager(registry)


@pytest.fixture
def message_router(session_manager):
    return MessageRouter(session_manager)


@pytest.fixture
def mock_connection():
    return MockConnection()


@pytest.fixture
def sink():
    return MockSink()


@pytest.fixture
def settings():
    return GameServerSettings()


@pytest.fixture
def app(settings, registry, session_manager, message_router):
    return create_app(
        settings=settings,
        registry=registry,
        session_manager=session_manager,
        message_router=message_router,
    )
