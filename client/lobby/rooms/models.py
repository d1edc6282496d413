"""Room models as published by the lobby server."""

from enum import StrEnum

from pydantic import Field, NonNegativeFloat, NonNegativeInt

from lobby.messaging.wire import WireModel


class GameState(StrEnum):
    """Game states the room browser filters on.

    The server may report other (terminal) states; GameInfo.game_state
    keeps whatever string it receives.
    """

    WAITING = "waiting"
    IN_PROGRESS = "in-progress"


class PlayerRef(WireModel):
    """A seated player or spectator."""

    display_name: str = ""
    rating: int | float


class GameInfo(WireModel):
    """One room in the lobby list. Replaced wholesale on every snapshot."""

    game_id: str = Field(min_length=1)
    game_state: str
    time_limit: NonNegativeInt | NonNegativeFloat  # seconds
    white: PlayerRef | None = None
    black: PlayerRef | None = None
    spectators: tuple[PlayerRef, ...] = ()

    @property
    def is_waiting(self) -> bool:
        return self.game_state == GameState.WAITING

    @property
    def is_in_progress(self) -> bool:
        return self.game_state == GameState.IN_PROGRESS

    @property
    def seat_rating_total(self) -> int | float:
        """Sum of both seats' ratings; an empty seat counts as 0."""
        white = self.white.rating if self.white is not None else 0
        black = self.black.rating if self.black is not None else 0
        return white + black

    @property
    def spectator_count(self) -> int:
        return len(self.spectators)
