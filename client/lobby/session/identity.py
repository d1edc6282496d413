"""Decide how a freshly connected client identifies itself.

Precedence, evaluated against the session store on every call:

1. A stored player token resumes that identity (wins over everything).
2. No access token: register a generated guest with the default rating.
3. Access token but no authenticated user record yet: defer.
4. Access token and user record: register as that user.
"""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shared.storage import ACCESS_TOKEN_KEY, PLAYER_TOKEN_KEY

if TYPE_CHECKING:
    from collections.abc import Callable

    from lobby.session.models import AuthenticatedUser
    from shared.storage import SessionStorage

GUEST_SUFFIX = "_guest"
DEFAULT_GUEST_RATING = 1200
DEFAULT_GUEST_NAME_LENGTH = 6

_GUEST_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class ResumeIdentity:
    player_token: str


@dataclass(frozen=True)
class RegisterIdentity:
    display_name: str
    rating: int | float
    guest: bool = False


@dataclass(frozen=True)
class DeferIdentity:
    """Wait for the authenticated user record before registering."""


IdentityDecision = ResumeIdentity | RegisterIdentity | DeferIdentity


def generate_guest_name(length: int = DEFAULT_GUEST_NAME_LENGTH) -> str:
    """Return a random base36 name carrying the guest suffix, e.g. ``k3x9qa_guest``."""
    if length < 1:
        raise ValueError(f"guest name length must be positive, got {length}")
    random_part = "".join(secrets.choice(_GUEST_ALPHABET) for _ in range(length))
    return f"{random_part}{GUEST_SUFFIX}"


def is_guest_name(display_name: str) -> bool:
    return display_name.endswith(GUEST_SUFFIX) and len(display_name) > len(GUEST_SUFFIX)


class IdentityResolver:
    """Map stored credentials and the auth user record to one identity action.

    Pure with respect to the session: reads the store, never writes it and
    never sends anything. The caller decides when to act on the result.
    """

    def __init__(
        self,
        storage: SessionStorage,
        *,
        guest_rating: int | float = DEFAULT_GUEST_RATING,
        guest_name_length: int = DEFAULT_GUEST_NAME_LENGTH,
        name_factory: Callable[[], str] | None = None,
    ) -> None:
        self._storage = storage
        self._guest_rating = guest_rating
        self._name_factory = name_factory or (lambda: generate_guest_name(guest_name_length))

    def resolve(self, user: AuthenticatedUser | None) -> IdentityDecision:
        player_token = self._storage.get(PLAYER_TOKEN_KEY)
        if player_token:
            return ResumeIdentity(player_token=player_token)

        if not self._storage.get(ACCESS_TOKEN_KEY):
            return RegisterIdentity(display_name=self._name_factory(), rating=self._guest_rating, guest=True)

        if user is None:
            return DeferIdentity()
        return RegisterIdentity(display_name=user.display_name, rating=user.rating)
