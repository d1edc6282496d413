from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from lobby.messaging.types import (
    IDENTITY_ERROR_CODES,
    CreateGameMessage,
    CurrentGameMessage,
    GamesMessage,
    LoginMessage,
    PlayerInfoMessage,
    RegisterMessage,
    ServerErrorCode,
    ServerErrorMessage,
    parse_server_message,
)
from lobby.rooms.synchronizer import RoomListSynchronizer
from lobby.rooms.view import SortKey, SortOrder, StatusFilter, derive_room_view
from lobby.session.exceptions import SessionInvariantError
from lobby.session.identity import DeferIdentity, IdentityResolver, ResumeIdentity
from lobby.session.models import IDENTIFIED_STATES, SessionState
from lobby.session.notices import Notice, NoticeCode, NoticeLevel
from lobby.session.redirect import RedirectTrigger
from lobby.settings import LobbyClientSettings
from shared.storage import PLAYER_TOKEN_KEY

if TYPE_CHECKING:
    from collections.abc import Callable

    from lobby.messaging.protocol import ConnectionProtocol
    from lobby.messaging.wire import WireModel
    from lobby.rooms.models import GameInfo
    from lobby.session.models import AuthenticatedUser, GameAssignment, PlayerInfo
    from lobby.session.notices import NoticeSink
    from shared.storage import SessionStorage

logger = structlog.get_logger()


_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.DISCONNECTED: frozenset({SessionState.CONNECTING, SessionState.CONNECTED}),
    SessionState.CONNECTING: frozenset({SessionState.CONNECTED, SessionState.DISCONNECTED}),
    SessionState.CONNECTED: frozenset({SessionState.IDENTIFIED, SessionState.DISCONNECTED}),
    SessionState.IDENTIFIED: frozenset(
        {SessionState.IDLE, SessionState.GAME_ASSIGNED, SessionState.CONNECTED, SessionState.DISCONNECTED},
    ),
    SessionState.IDLE: frozenset({SessionState.GAME_ASSIGNED, SessionState.CONNECTED, SessionState.DISCONNECTED}),
    SessionState.GAME_ASSIGNED: frozenset({SessionState.CONNECTED, SessionState.DISCONNECTED}),
}


class LobbySession:
    """
    Client side of the lobby session channel.

    Owns the connection lifecycle state machine, issues the identity
    handshake at most once per connection, feeds room-list snapshots into
    the synchronizer and hands game assignments to the redirect trigger.

    Collaborators are injected: the credential store, the notice sink, the
    navigation callback and the (optional, possibly late) authenticated
    user record. Failures reported by the server become notices; only a
    broken invariant raises.

    Lifecycle:
    - mark_connecting / on_connected / on_connection_lost are driven by the transport
    - handle_message is called for every inbound frame, in arrival order
    - close() tears the session down; later reactions are dropped
    """

    def __init__(
        self,
        storage: SessionStorage,
        notices: NoticeSink,
        navigate: Callable[[str], None],
        *,
        user: AuthenticatedUser | None = None,
        settings: LobbyClientSettings | None = None,
        resolver: IdentityResolver | None = None,
    ) -> None:
        self._settings = settings or LobbyClientSettings()
        self._storage = storage
        self._notices = notices
        self._user = user
        self._resolver = resolver or IdentityResolver(
            storage,
            guest_rating=self._settings.guest_rating,
            guest_name_length=self._settings.guest_name_length,
        )
        self._rooms = RoomListSynchronizer()
        self._redirect = RedirectTrigger(navigate, self._settings.game_path_template)

        self._state = SessionState.DISCONNECTED
        self._connection: ConnectionProtocol | None = None
        self._player_info: PlayerInfo | None = None
        self._assignment: GameAssignment | None = None
        self._identity_requested = False  # once per connection
        self._awaiting_identity = False  # request sent, no ack/rejection yet
        self._closed = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def player_info(self) -> PlayerInfo | None:
        return self._player_info

    @property
    def assignment(self) -> GameAssignment | None:
        return self._assignment

    @property
    def rooms(self) -> RoomListSynchronizer:
        return self._rooms

    @property
    def is_identified(self) -> bool:
        return self._state in IDENTIFIED_STATES

    @property
    def is_closed(self) -> bool:
        return self._closed

    def room_view(
        self,
        status: str = StatusFilter.ALL,
        sort_key: str = SortKey.GAME_ID,
        sort_order: str = SortOrder.ASC,
    ) -> tuple[GameInfo, ...]:
        """Derive the display list from the current snapshot."""
        return derive_room_view(self._rooms.games, status, sort_key, sort_order)

    # --- transport lifecycle ---

    def mark_connecting(self) -> None:
        if self._closed:
            return
        if self._state != SessionState.DISCONNECTED:
            logger.warning("connect attempt while not disconnected", state=self._state)
            return
        self._set_state(SessionState.CONNECTING)

    async def on_connected(self, connection: ConnectionProtocol) -> None:
        """Transport is ready: resolve and send the identity request."""
        if self._closed:
            return
        if self._state not in (SessionState.DISCONNECTED, SessionState.CONNECTING):
            raise SessionInvariantError(f"connection established while {self._state}")
        self._connection = connection
        self._identity_requested = False
        self._awaiting_identity = False
        self._set_state(SessionState.CONNECTED)
        await self._evaluate_identity()

    def on_connection_lost(self) -> None:
        """Reset to disconnected. Nothing from this connection is trusted afterwards."""
        if self._closed:
            return
        self._connection = None
        self._player_info = None
        self._assignment = None
        self._identity_requested = False
        self._awaiting_identity = False
        self._rooms.reset()
        self._redirect.reset()
        self._set_state(SessionState.DISCONNECTED)

    def close(self) -> None:
        """Tear down: every later message, callback or action is ignored."""
        if self._closed:
            return
        self._closed = True
        self._connection = None
        logger.info("session closed", state=self._state)

    # --- identity ---

    async def set_authenticated_user(self, user: AuthenticatedUser | None) -> None:
        """Record the auth store's user; completes a deferred registration."""
        self._user = user
        if self._closed or user is None:
            return
        if self._state == SessionState.CONNECTED and not self._identity_requested:
            await self._evaluate_identity()
        else:
            logger.debug("user record updated, identity already settled", state=self._state)

    async def _evaluate_identity(self) -> None:
        decision = self._resolver.resolve(self._user)
        if isinstance(decision, DeferIdentity):
            logger.info("identity deferred until user record is available")
            return
        if isinstance(decision, ResumeIdentity):
            message: LoginMessage | RegisterMessage = LoginMessage(player_token=decision.player_token)
            logger.info("resuming identity")
        else:
            message = RegisterMessage(display_name=decision.display_name, rating=decision.rating)
            logger.info("registering identity", display_name=decision.display_name, guest=decision.guest)
        await self._send_identity_request(message)

    async def _send_identity_request(self, message: LoginMessage | RegisterMessage) -> None:
        if self._identity_requested:
            raise SessionInvariantError("identity already requested on this connection")
        self._identity_requested = True
        self._awaiting_identity = True
        await self._send(message)

    def logout(self) -> None:
        """Forget stored credentials and the local identity."""
        if self._closed:
            return
        self._storage.clear()
        self._player_info = None
        self._assignment = None
        self._awaiting_identity = False
        self._redirect.reset()
        if self._state in IDENTIFIED_STATES:
            self._set_state(SessionState.CONNECTED)
        logger.info("logged out")

    # --- lobby actions ---

    async def create_game(self, play_white: bool | None = None, time_limit: float | None = None) -> bool:
        """Ask the server for a new room. Return True when the request was sent."""
        if self._closed:
            return False
        if play_white is None:
            play_white = self._settings.default_play_white
        if time_limit is None:
            time_limit = self._settings.default_time_limit
        if time_limit <= 0:
            raise ValueError(f"time_limit must be a positive number of seconds, got {time_limit}")

        player_token = self._storage.get(PLAYER_TOKEN_KEY)
        if not player_token or not self.is_identified:
            self._notify(NoticeLevel.ERROR, NoticeCode.UNAUTHENTICATED, "You need to login first!")
            return False
        if self._state == SessionState.GAME_ASSIGNED:
            self._notify(NoticeLevel.WARNING, NoticeCode.ALREADY_IN_GAME, "You are already in a game")
            return False

        await self._send(CreateGameMessage(player_token=player_token, play_white=play_white, time_limit=time_limit))
        logger.info("create game requested", play_white=play_white, time_limit=time_limit)
        return True

    # --- inbound ---

    async def handle_message(self, raw_message: dict[str, Any]) -> None:
        if self._closed:
            logger.debug("session closed, dropping message", type=raw_message.get("type"))
            return
        try:
            message = parse_server_message(raw_message)
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            logger.warning("invalid server message", type=raw_message.get("type"), error=str(e))
            if raw_message.get("type") == "games":
                self._notify(NoticeLevel.WARNING, NoticeCode.INVALID_ROOM_LIST, "Received an invalid room list")
            return

        if isinstance(message, PlayerInfoMessage):
            self._handle_player_info(message)
        elif isinstance(message, GamesMessage):
            self._handle_games(message)
        elif isinstance(message, CurrentGameMessage):
            self._handle_current_game(message)
        elif isinstance(message, ServerErrorMessage):
            self._handle_error(message)

    def _handle_player_info(self, message: PlayerInfoMessage) -> None:
        if self._state != SessionState.CONNECTED or not self._awaiting_identity:
            logger.warning("unexpected identity acknowledgement", state=self._state)
            return
        self._awaiting_identity = False
        self._player_info = message.to_player_info()
        if self._storage.get(PLAYER_TOKEN_KEY) != message.player_token:
            self._storage.set(PLAYER_TOKEN_KEY, message.player_token)
        logger.info("identified", display_name=message.display_name, rating=message.rating)
        self._set_state(SessionState.IDENTIFIED)
        self._apply_assignment()

    def _handle_games(self, message: GamesMessage) -> None:
        self._rooms.apply_snapshot(message.games)
        if self._state == SessionState.IDENTIFIED:
            self._set_state(SessionState.IDLE)

    def _handle_current_game(self, message: CurrentGameMessage) -> None:
        assignment = message.to_assignment()
        if assignment == self._assignment:
            logger.debug("repeated game assignment", game_id=assignment.game_id)
            return
        self._assignment = assignment
        logger.info("game assigned", game_id=assignment.game_id)
        self._apply_assignment()

    def _handle_error(self, message: ServerErrorMessage) -> None:
        if message.code in IDENTITY_ERROR_CODES:
            self._awaiting_identity = False
            logger.warning("identity rejected", code=message.code, message=message.message)
            self._notify(NoticeLevel.ERROR, NoticeCode.IDENTITY_REJECTED, message.message or "Could not sign in")
        elif message.code == ServerErrorCode.CREATE_GAME_REJECTED:
            self._notify(NoticeLevel.ERROR, NoticeCode.GAME_REJECTED, message.message or "Could not create game")
        else:
            logger.warning("server error", code=message.code, message=message.message)

    def _apply_assignment(self) -> None:
        """Enter the assigned game once identified; before that the assignment waits."""
        if self._assignment is None or not self.is_identified:
            return
        self._set_state(SessionState.GAME_ASSIGNED)
        self._redirect.observe(self._assignment)

    # --- helpers ---

    def _set_state(self, new_state: SessionState) -> None:
        if new_state == self._state:
            return
        if new_state not in _TRANSITIONS[self._state]:
            raise SessionInvariantError(f"illegal session transition {self._state} -> {new_state}")
        logger.debug("session state changed", old_state=self._state, new_state=new_state)
        self._state = new_state

    async def _send(self, message: WireModel) -> None:
        if self._connection is None:
            raise SessionInvariantError("send without an established connection")
        await self._connection.send_message(message.to_wire())

    def _notify(self, level: NoticeLevel, code: NoticeCode, message: str) -> None:
        self._notices.notify(Notice(level=level, code=code, message=message))
