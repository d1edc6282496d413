"""User-visible notices emitted by the lobby session.

Notices are the non-blocking error channel: nothing in the session raises
for identity, room-sync or create-game failures. A rendering layer shows
them as toasts; the CLI logs them.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

import structlog

logger = structlog.get_logger()


class NoticeLevel(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class NoticeCode(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    IDENTITY_REJECTED = "identity_rejected"
    GAME_REJECTED = "game_rejected"
    ALREADY_IN_GAME = "already_in_game"
    INVALID_ROOM_LIST = "invalid_room_list"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    code: NoticeCode
    message: str


class NoticeSink(Protocol):
    def notify(self, notice: Notice) -> None: ...


class LoggingNoticeSink:
    """Writes notices to the structured log."""

    _LEVELS = {
        NoticeLevel.INFO: "info",
        NoticeLevel.WARNING: "warning",
        NoticeLevel.ERROR: "error",
    }

    def notify(self, notice: Notice) -> None:
        log = getattr(logger, self._LEVELS[notice.level])
        log("notice", code=notice.code, message=notice.message)
