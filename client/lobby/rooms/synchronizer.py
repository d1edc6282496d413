"""Authoritative in-memory room list, fed by full server snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from lobby.rooms.models import GameInfo

logger = structlog.get_logger()


@dataclass(frozen=True)
class RoomSnapshot:
    """One server snapshot: games in server order plus an id index.

    Published by replacing a single reference, so a reader either sees the
    previous snapshot or the next one, never a mix.
    """

    games: tuple[GameInfo, ...] = ()
    by_id: Mapping[str, GameInfo] = field(default_factory=lambda: MappingProxyType({}))
    received: bool = False


_EMPTY = RoomSnapshot()


class RoomListSynchronizer:
    """Holds the latest room list. Read-through only: no local edits.

    Every update replaces the whole collection; entries absent from the
    newest snapshot are gone.
    """

    def __init__(self) -> None:
        self._current = _EMPTY

    @property
    def games(self) -> tuple[GameInfo, ...]:
        return self._current.games

    @property
    def game_count(self) -> int:
        return len(self._current.games)

    @property
    def has_snapshot(self) -> bool:
        """False until the first snapshot after construction or reset."""
        return self._current.received

    def get(self, game_id: str) -> GameInfo | None:
        return self._current.by_id.get(game_id)

    def apply_snapshot(self, games: Iterable[GameInfo]) -> RoomSnapshot:
        """Replace the room list with ``games``. Duplicate ids: the last entry wins."""
        by_id: dict[str, GameInfo] = {}
        order: list[str] = []
        for game in games:
            if game.game_id in by_id:
                logger.warning("duplicate game in room list", game_id=game.game_id)
            else:
                order.append(game.game_id)
            by_id[game.game_id] = game

        snapshot = RoomSnapshot(
            games=tuple(by_id[game_id] for game_id in order),
            by_id=MappingProxyType(by_id),
            received=True,
        )
        self._current = snapshot
        logger.debug("room list replaced", game_count=len(snapshot.games))
        return snapshot

    def reset(self) -> None:
        """Drop everything; the next snapshot starts from scratch."""
        self._current = _EMPTY
