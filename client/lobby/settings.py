"""Lobby client configuration via environment variables."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from lobby.session.identity import DEFAULT_GUEST_NAME_LENGTH, DEFAULT_GUEST_RATING
from lobby.session.redirect import DEFAULT_GAME_PATH_TEMPLATE


class LobbyClientSettings(BaseSettings):
    model_config = {"env_prefix": "LOBBY_CLIENT_"}

    server_url: str = Field(default="ws://localhost:8000/ws", min_length=1)
    log_dir: str | None = None
    storage_path: str | None = None  # in-memory credential store when unset

    guest_rating: int = Field(default=DEFAULT_GUEST_RATING, ge=0)
    guest_name_length: int = Field(default=DEFAULT_GUEST_NAME_LENGTH, ge=4, le=32)

    default_time_limit: int = Field(default=600, gt=0)  # seconds
    default_play_white: bool = True
    game_path_template: str = DEFAULT_GAME_PATH_TEMPLATE

    reconnect_delay_seconds: float = Field(default=2.0, ge=0)
    max_reconnect_attempts: int = Field(default=5, ge=0)

    @field_validator("server_url")
    @classmethod
    def validate_server_url(cls, v: str) -> str:
        if not v.startswith(("ws://", "wss://")):
            raise ValueError(f"server_url must be a ws:// or wss:// URL, got {v!r}")
        return v

    @field_validator("game_path_template")
    @classmethod
    def validate_game_path_template(cls, v: str) -> str:
        if "{game_id}" not in v:
            raise ValueError("game_path_template must contain '{game_id}'")
        return v
