"""Drive a LobbySession over a live connection."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

import structlog
from websockets.exceptions import WebSocketException

from lobby.messaging.encoder import DecodeError
from lobby.messaging.websocket import connect_websocket

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractAsyncContextManager

    from lobby.messaging.protocol import ConnectionProtocol
    from lobby.session.manager import LobbySession
    from lobby.settings import LobbyClientSettings

    ConnectFactory = Callable[[str], AbstractAsyncContextManager[ConnectionProtocol]]

logger = structlog.get_logger()


class LobbyClient:
    """Connect, hand inbound frames to the session in arrival order, reconnect on loss.

    Each connection gets a fresh handshake; the session discards lobby state
    on every loss. Gives up after ``max_reconnect_attempts`` consecutive
    failed attempts. ``stop()`` closes the session before cancelling, so a
    frame that is already in flight cannot touch state afterwards.
    """

    def __init__(
        self,
        session: LobbySession,
        settings: LobbyClientSettings,
        connect: ConnectFactory | None = None,
    ) -> None:
        self._session = session
        self._settings = settings
        self._connect = connect or connect_websocket
        self._task: asyncio.Task[None] | None = None

    @property
    def session(self) -> LobbySession:
        return self._session

    def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        self._session.close()
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def run(self) -> None:
        failures = 0
        while not self._session.is_closed:
            self._session.mark_connecting()
            try:
                async with self._connect(self._settings.server_url) as connection:
                    failures = 0
                    await self._session.on_connected(connection)
                    await self._receive_loop(connection)
            except (OSError, WebSocketException) as e:
                logger.warning("connection lost", error=str(e))
            self._session.on_connection_lost()

            if self._session.is_closed:
                break
            failures += 1
            if failures > self._settings.max_reconnect_attempts:
                logger.error("giving up after repeated connection failures", attempts=failures)
                break
            await asyncio.sleep(self._settings.reconnect_delay_seconds)

    async def _receive_loop(self, connection: ConnectionProtocol) -> None:
        log = logger.bind(connection_id=connection.connection_id)
        while not self._session.is_closed:
            try:
                message = await connection.receive_message()
            except DecodeError as e:
                log.warning("dropping undecodable frame", error=str(e))
                continue
            await self._session.handle_message(message)
