from enum import StrEnum
from typing import Annotated, Literal

from pydantic import Field, PositiveFloat, PositiveInt, TypeAdapter

from lobby.messaging.wire import WireModel
from lobby.rooms.models import GameInfo
from lobby.session.models import GameAssignment, PlayerInfo


class ServerErrorCode(StrEnum):
    REGISTER_REJECTED = "register_rejected"
    LOGIN_REJECTED = "login_rejected"
    CREATE_GAME_REJECTED = "create_game_rejected"
    INVALID_MESSAGE = "invalid_message"


IDENTITY_ERROR_CODES = frozenset({ServerErrorCode.REGISTER_REJECTED, ServerErrorCode.LOGIN_REJECTED})


class RegisterMessage(WireModel):
    type: Literal["register"] = "register"
    display_name: str = Field(min_length=1, max_length=64)
    rating: int | float


class LoginMessage(WireModel):
    """Resume a previously issued identity."""

    type: Literal["login"] = "login"
    player_token: str = Field(min_length=1)


class CreateGameMessage(WireModel):
    type: Literal["create_game"] = "create_game"
    player_token: str = Field(min_length=1)
    play_white: bool = True
    time_limit: PositiveInt | PositiveFloat


class PlayerInfoMessage(WireModel):
    """Identity acknowledgement for a register or login request."""

    type: Literal["player_info"] = "player_info"
    display_name: str
    rating: int | float
    player_token: str = Field(min_length=1)

    def to_player_info(self) -> PlayerInfo:
        return PlayerInfo(display_name=self.display_name, rating=self.rating, player_token=self.player_token)


class GamesMessage(WireModel):
    """Full room-list snapshot."""

    type: Literal["games"] = "games"
    games: tuple[GameInfo, ...] = ()


class CurrentGameMessage(WireModel):
    type: Literal["current_game"] = "current_game"
    game_id: str = Field(min_length=1)

    def to_assignment(self) -> GameAssignment:
        return GameAssignment(game_id=self.game_id)


class ServerErrorMessage(WireModel):
    type: Literal["error"] = "error"
    code: str
    message: str = ""


ServerMessage = Annotated[
    PlayerInfoMessage | GamesMessage | CurrentGameMessage | ServerErrorMessage,
    Field(discriminator="type"),
]

_server_message_adapter: TypeAdapter[ServerMessage] = TypeAdapter(ServerMessage)


def parse_server_message(
    data: dict,
) -> PlayerInfoMessage | GamesMessage | CurrentGameMessage | ServerErrorMessage:
    """Validate a decoded server frame into a typed message."""
    return _server_message_adapter.validate_python(data)
