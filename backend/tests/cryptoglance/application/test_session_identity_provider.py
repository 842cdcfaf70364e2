from __future__ import annotations

from cryptoglance.application.auth.service import SessionIdentityProvider
from cryptoglance.domain.auth.schemas import Identity


def test_sign_in_and_out_notify_subscribers() -> None:
    provider = SessionIdentityProvider()
    seen: list[str | None] = []
    provider.on_identity_change(seen.append)

    provider.sign_in(Identity(user_id="u1", email="alice@example.com"))
    provider.sign_out()

    assert seen == ["u1", None]
    assert provider.current_identity() is None
    assert provider.current_session() is None


def test_repeated_sign_in_for_same_user_notifies_once() -> None:
    provider = SessionIdentityProvider()
    seen: list[str | None] = []
    provider.on_identity_change(seen.append)

    provider.sign_in(Identity(user_id="u1"))
    provider.sign_in(Identity(user_id="u1", email="alice@example.com"))
    provider.sign_in(Identity(user_id="u2"))

    assert seen == ["u1", "u2"]
    assert provider.current_identity() == "u2"


def test_sign_out_without_session_is_silent() -> None:
    provider = SessionIdentityProvider()
    seen: list[str | None] = []
    provider.on_identity_change(seen.append)

    provider.sign_out()

    assert seen == []


def test_unsubscribe_stops_notifications() -> None:
    provider = SessionIdentityProvider()
    seen: list[str | None] = []
    unsubscribe = provider.on_identity_change(seen.append)

    unsubscribe()
    unsubscribe()
    provider.sign_in(Identity(user_id="u1"))

    assert seen == []


def test_failing_handler_does_not_block_other_subscribers() -> None:
    provider = SessionIdentityProvider()
    seen: list[str | None] = []

    def broken(_: str | None) -> None:
        raise RuntimeError("boom")

    provider.on_identity_change(broken)
    provider.on_identity_change(seen.append)
    provider.sign_in(Identity(user_id="u1"))

    assert seen == ["u1"]
