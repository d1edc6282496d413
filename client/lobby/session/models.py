"""
Identity and assignment models for the lobby session.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from lobby.messaging.wire import WireModel


class SessionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"  # transport ready, no identity yet
    IDENTIFIED = "identified"
    IDLE = "idle"  # browsing the lobby
    GAME_ASSIGNED = "game_assigned"


# States in which the server has acknowledged our identity.
IDENTIFIED_STATES = frozenset({SessionState.IDENTIFIED, SessionState.IDLE, SessionState.GAME_ASSIGNED})


class PlayerInfo(WireModel):
    """Identity acknowledged by the server. Immutable for the session."""

    display_name: str
    rating: int | float
    player_token: str


class AuthenticatedUser(BaseModel):
    """User record supplied by the external auth store."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    rating: int | float


class GameAssignment(WireModel):
    """Server notice that our player now takes part in a game."""

    game_id: str
