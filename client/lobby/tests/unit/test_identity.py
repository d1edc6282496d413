import pytest

from lobby.session.identity import (
    GUEST_SUFFIX,
    DeferIdentity,
    IdentityResolver,
    RegisterIdentity,
    ResumeIdentity,
    generate_guest_name,
    is_guest_name,
)
from lobby.session.models import AuthenticatedUser
from shared.storage import ACCESS_TOKEN_KEY, PLAYER_TOKEN_KEY, InMemorySessionStorage

ALICE = AuthenticatedUser(display_name="Alice", rating=1830)


class TestGenerateGuestName:
    def test_carries_guest_suffix(self):
        name = generate_guest_name()
        assert name.endswith(GUEST_SUFFIX)
        assert is_guest_name(name)

    def test_random_part_has_requested_length(self):
        name = generate_guest_name(4)
        assert len(name) == 4 + len(GUEST_SUFFIX)
        assert name[:4].isalnum()
        assert name[:4] == name[:4].lower()

    def test_names_are_unique_with_high_probability(self):
        names = {generate_guest_name() for _ in range(200)}
        assert len(names) == 200

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError, match="positive"):
            generate_guest_name(0)

    def test_bare_suffix_is_not_a_guest_name(self):
        assert not is_guest_name(GUEST_SUFFIX)
        assert not is_guest_name("Alice")


class TestIdentityResolver:
    def test_player_token_resumes(self):
        storage = InMemorySessionStorage({PLAYER_TOKEN_KEY: "tok-1"})
        decision = IdentityResolver(storage).resolve(None)
        assert decision == ResumeIdentity(player_token="tok-1")

    def test_player_token_wins_over_access_token_and_user(self):
        storage = InMemorySessionStorage({PLAYER_TOKEN_KEY: "tok-1", ACCESS_TOKEN_KEY: "access"})
        decision = IdentityResolver(storage).resolve(ALICE)
        assert decision == ResumeIdentity(player_token="tok-1")

    def test_no_tokens_registers_guest_with_default_rating(self):
        resolver = IdentityResolver(InMemorySessionStorage(), name_factory=lambda: "zz99_guest")
        decision = resolver.resolve(None)
        assert decision == RegisterIdentity(display_name="zz99_guest", rating=1200, guest=True)

    def test_guest_rating_is_always_1200_by_default(self):
        resolver = IdentityResolver(InMemorySessionStorage())
        for _ in range(10):
            decision = resolver.resolve(None)
            assert isinstance(decision, RegisterIdentity)
            assert decision.rating == 1200
            assert decision.display_name.endswith(GUEST_SUFFIX)

    def test_guest_ignores_user_record_without_access_token(self):
        resolver = IdentityResolver(InMemorySessionStorage())
        decision = resolver.resolve(ALICE)
        assert isinstance(decision, RegisterIdentity)
        assert decision.guest is True

    def test_access_token_without_user_defers(self):
        storage = InMemorySessionStorage({ACCESS_TOKEN_KEY: "access"})
        assert IdentityResolver(storage).resolve(None) == DeferIdentity()

    def test_access_token_with_user_registers_as_user(self):
        storage = InMemorySessionStorage({ACCESS_TOKEN_KEY: "access"})
        decision = IdentityResolver(storage).resolve(ALICE)
        assert decision == RegisterIdentity(display_name="Alice", rating=1830, guest=False)

    def test_resolution_is_deterministic_for_same_stored_state(self):
        storage = InMemorySessionStorage({PLAYER_TOKEN_KEY: "tok-1"})
        resolver = IdentityResolver(storage)
        assert resolver.resolve(None) == resolver.resolve(None)

    def test_empty_player_token_is_treated_as_absent(self):
        storage = InMemorySessionStorage({PLAYER_TOKEN_KEY: "", ACCESS_TOKEN_KEY: "access"})
        decision = IdentityResolver(storage).resolve(ALICE)
        assert isinstance(decision, RegisterIdentity)

    def test_resolver_does_not_write_storage(self):
        storage = InMemorySessionStorage()
        IdentityResolver(storage).resolve(None)
        assert storage.get(PLAYER_TOKEN_KEY) is None

    def test_custom_guest_rating(self):
        resolver = IdentityResolver(InMemorySessionStorage(), guest_rating=1000)
        decision = resolver.resolve(None)
        assert isinstance(decision, RegisterIdentity)
        assert decision.rating == 1000
