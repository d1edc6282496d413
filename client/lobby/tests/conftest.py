import pytest

from lobby.session.manager import LobbySession
from lobby.settings import LobbyClientSettings
from lobby.tests.mocks import MockConnection, RecordingNavigator, RecordingNoticeSink
from shared.storage import InMemorySessionStorage


@pytest.fixture
def storage():
    return InMemorySessionStorage()


@pytest.fixture
def notices():
    return RecordingNoticeSink()


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def settings():
    return LobbyClientSettings(server_url="ws://testserver/ws")


@pytest.fixture
def session(storage, notices, navigator, settings):
    return LobbySession(storage, notices, navigator, settings=settings)


@pytest.fixture
def connection():
    return MockConnection()
