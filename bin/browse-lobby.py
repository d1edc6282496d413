"""Browse the live lobby from the command line.

Connects to the lobby server, identifies (resume, authenticated or guest),
prints the room list with the chosen filter and sort, and optionally
creates a game and waits for the assignment.

Usage:
    uv run python bin/browse-lobby.py
    uv run python bin/browse-lobby.py --status Available --sort Rating --order desc
    uv run python bin/browse-lobby.py --create --time-limit 300 --black

Configuration comes from LOBBY_CLIENT_* environment variables
(e.g. LOBBY_CLIENT_SERVER_URL, LOBBY_CLIENT_STORAGE_PATH).
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import TYPE_CHECKING

from lobby.client import LobbyClient
from lobby.rooms.view import SortKey, SortOrder, StatusFilter
from lobby.session.identity import is_guest_name
from lobby.session.manager import LobbySession
from lobby.session.notices import LoggingNoticeSink
from lobby.settings import LobbyClientSettings
from shared.logging import setup_logging
from shared.storage import FileSessionStorage, InMemorySessionStorage

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lobby.rooms.models import GameInfo

POLL_INTERVAL_SECONDS = 0.1


def format_room_table(games: Sequence[GameInfo]) -> str:
    """Render the derived view as a fixed-width table."""
    lines = [f"{'GAME':<14} {'STATE':<12} {'TIMER':>6} {'RATING':>8} {'PEOPLE':>6}"]
    lines.extend(
        f"{game.game_id:<14} {game.game_state:<12} {game.time_limit:>6} "
        f"{game.seat_rating_total:>8} {game.spectator_count:>6}"
        for game in games
    )
    lines.append(f"{len(games)} Games")
    return "\n".join(lines)


async def _wait_for_lobby(session: LobbySession) -> None:
    while not (session.is_identified and session.rooms.has_snapshot):
        await asyncio.sleep(POLL_INTERVAL_SECONDS)


async def browse(args: argparse.Namespace) -> int:
    settings = LobbyClientSettings()
    setup_logging(settings.log_dir)

    storage = FileSessionStorage(settings.storage_path) if settings.storage_path else InMemorySessionStorage()
    assigned = asyncio.Event()

    def navigate(path: str) -> None:
        print(f"Joined game: {path}")
        assigned.set()

    session = LobbySession(storage, LoggingNoticeSink(), navigate, settings=settings)
    client = LobbyClient(session, settings)
    client.start()
    try:
        try:
            await asyncio.wait_for(_wait_for_lobby(session), timeout=args.timeout)
        except TimeoutError:
            print("Timed out waiting for the lobby")
            return 1

        player = session.player_info
        if player is not None:
            kind = "guest" if is_guest_name(player.display_name) else "player"
            print(f"Signed in as {player.display_name} ({kind}, rating {player.rating})")
        print(format_room_table(session.room_view(args.status, args.sort, args.order)))

        if args.create:
            sent = await session.create_game(play_white=not args.black, time_limit=args.time_limit)
            if not sent:
                return 1
            try:
                await asyncio.wait_for(assigned.wait(), timeout=args.timeout)
            except TimeoutError:
                print("Game created, no assignment received yet")
        return 0
    finally:
        await client.stop()


def main() -> None:
    parser = argparse.ArgumentParser(description="Browse the live game lobby")
    parser.add_argument("--status", default=StatusFilter.ALL, choices=[s.value for s in StatusFilter])
    parser.add_argument("--sort", default=SortKey.GAME_ID, choices=[k.value for k in SortKey])
    parser.add_argument("--order", default=SortOrder.ASC, choices=[o.value for o in SortOrder])
    parser.add_argument("--create", action="store_true", help="create a game after listing rooms")
    parser.add_argument("--time-limit", type=int, default=None, help="time limit in seconds for --create")
    parser.add_argument("--black", action="store_true", help="play black in the created game")
    parser.add_argument("--timeout", type=float, default=10.0, help="seconds to wait for the server")
    args = parser.parse_args()
    sys.exit(asyncio.run(browse(args)))


if __name__ == "__main__":
    main()
