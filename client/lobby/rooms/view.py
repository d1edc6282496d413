"""Filtered, sorted projection of the room list for display."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from lobby.rooms.models import GameInfo


class StatusFilter(StrEnum):
    ALL = "ALL"
    IN_GAME = "In-Game"
    AVAILABLE = "Available"


class SortKey(StrEnum):
    GAME_ID = "GameId"
    TIMER = "Timer"
    RATING = "Rating"
    PEOPLE = "People"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


_FILTERS: dict[str, Callable[[GameInfo], bool]] = {
    StatusFilter.IN_GAME: lambda game: game.is_in_progress,
    StatusFilter.AVAILABLE: lambda game: game.is_waiting,
}

_SORT_KEYS: dict[str, Callable[[GameInfo], str | int | float]] = {
    SortKey.GAME_ID: lambda game: game.game_id,
    SortKey.TIMER: lambda game: game.time_limit,
    SortKey.RATING: lambda game: game.seat_rating_total,
    SortKey.PEOPLE: lambda game: game.spectator_count,
}


def filter_games(games: Iterable[GameInfo], status: str = StatusFilter.ALL) -> list[GameInfo]:
    """Keep games matching ``status``. Unrecognized values pass everything, like ALL."""
    predicate = _FILTERS.get(status)
    if predicate is None:
        return list(games)
    return [game for game in games if predicate(game)]


def sort_games(
    games: Iterable[GameInfo],
    sort_key: str = SortKey.GAME_ID,
    sort_order: str = SortOrder.ASC,
) -> list[GameInfo]:
    """Order games by ``sort_key``.

    Ascending is stable, so equal keys keep input order. Descending is the
    exact reverse of the ascending result. An unrecognized key keeps input
    order (then reversed for descending).
    """
    key = _SORT_KEYS.get(sort_key)
    ordered = list(games) if key is None else sorted(games, key=key)
    if sort_order == SortOrder.DESC:
        ordered.reverse()
    return ordered


def derive_room_view(
    games: Iterable[GameInfo],
    status: str = StatusFilter.ALL,
    sort_key: str = SortKey.GAME_ID,
    sort_order: str = SortOrder.ASC,
) -> tuple[GameInfo, ...]:
    """Project the room list for display. Never mutates ``games``."""
    return tuple(sort_games(filter_games(games, status), sort_key, sort_order))
