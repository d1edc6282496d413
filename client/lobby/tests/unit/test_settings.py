import pytest
from pydantic import ValidationError

from lobby.settings import LobbyClientSettings

_ENV_VARS = (
    "LOBBY_CLIENT_SERVER_URL",
    "LOBBY_CLIENT_RECONNECT_DELAY_SECONDS",
    "LOBBY_CLIENT_MAX_RECONNECT_ATTEMPTS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLobbyClientSettings:
    def test_defaults(self, clean_env):
        settings = LobbyClientSettings()
        assert settings.server_url == "ws://localhost:8000/ws"
        assert settings.guest_rating == 1200
        assert settings.default_time_limit == 600
        assert settings.default_play_white is True
        assert settings.game_path_template == "/game/{game_id}"
        assert settings.storage_path is None

    def test_reads_prefixed_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("LOBBY_CLIENT_SERVER_URL", "wss://chess.example/ws")
        monkeypatch.setenv("LOBBY_CLIENT_DEFAULT_TIME_LIMIT", "300")
        settings = LobbyClientSettings()
        assert settings.server_url == "wss://chess.example/ws"
        assert settings.default_time_limit == 300

    def test_rejects_http_url(self):
        with pytest.raises(ValidationError, match="ws:// or wss://"):
            LobbyClientSettings(server_url="http://chess.example")

    def test_rejects_non_positive_time_limit(self):
        with pytest.raises(ValidationError):
            LobbyClientSettings(default_time_limit=0)

    def test_rejects_short_guest_names(self):
        with pytest.raises(ValidationError):
            LobbyClientSettings(guest_name_length=2)

    def test_path_template_needs_game_id(self):
        with pytest.raises(ValidationError, match="game_id"):
            LobbyClientSettings(game_path_template="/game/")
