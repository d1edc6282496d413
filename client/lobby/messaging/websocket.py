"""ConnectionProtocol adapter over the websockets client library."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
import websockets
from websockets.exceptions import ConnectionClosed

from lobby.messaging.encoder import MAX_BUFFER_LEN
from lobby.messaging.protocol import ConnectionLostError, ConnectionProtocol

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from websockets.asyncio.client import ClientConnection

logger = structlog.get_logger()


class WebSocketConnection(ConnectionProtocol):
    def __init__(self, websocket: ClientConnection, connection_id: str | None = None) -> None:
        self._websocket = websocket
        self._connection_id = connection_id or str(uuid4())

    @property
    def connection_id(self) -> str:
        return self._connection_id

    async def send_bytes(self, data: bytes) -> None:
        try:
            await self._websocket.send(data)
        except ConnectionClosed as e:
            raise ConnectionLostError(str(e)) from e

    async def receive_bytes(self) -> bytes:
        try:
            data = await self._websocket.recv()
        except ConnectionClosed as e:
            raise ConnectionLostError(str(e)) from e
        if isinstance(data, str):
            # text frames are not part of the protocol; let the decoder reject them
            return data.encode("utf-8")
        return data

    async def close(self, code: int = 1000, reason: str = "") -> None:
        await self._websocket.close(code=code, reason=reason)


@contextlib.asynccontextmanager
async def connect_websocket(url: str) -> AsyncIterator[WebSocketConnection]:
    """Open the session channel and yield it wrapped as a ConnectionProtocol."""
    async with websockets.connect(url, max_size=MAX_BUFFER_LEN) as websocket:
        connection = WebSocketConnection(websocket)
        logger.info("connected", url=url, connection_id=connection.connection_id)
        yield connection
