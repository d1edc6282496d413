from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

    from lobby.session.models import GameAssignment

logger = structlog.get_logger()

DEFAULT_GAME_PATH_TEMPLATE = "/game/{game_id}"


class RedirectTrigger:
    """Navigate into an assigned game exactly once per game id.

    Repeated notices for the same game are ignored; a different game id
    (e.g. a rematch) navigates again.
    """

    def __init__(
        self,
        navigate: Callable[[str], None],
        path_template: str = DEFAULT_GAME_PATH_TEMPLATE,
    ) -> None:
        self._navigate = navigate
        self._path_template = path_template
        self._last_game_id: str | None = None

    @property
    def last_game_id(self) -> str | None:
        return self._last_game_id

    def observe(self, assignment: GameAssignment | None) -> bool:
        """Navigate if the assignment is new. Return True when navigation happened."""
        if assignment is None or assignment.game_id == self._last_game_id:
            return False
        self._last_game_id = assignment.game_id
        path = self._path_template.format(game_id=assignment.game_id)
        logger.info("redirecting to game", game_id=assignment.game_id, path=path)
        self._navigate(path)
        return True

    def reset(self) -> None:
        """Forget the last navigation (after the lobby state was discarded)."""
        self._last_game_id = None
