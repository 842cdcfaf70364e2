from __future__ import annotations

import asyncio
import time
from typing import Callable

from cryptoglance.application.auth.identity_relay import IdentityEventRelay
from cryptoglance.application.auth.service import SessionIdentityProvider


class ScriptedSubscriber:
    def __init__(self, payloads: list[dict]) -> None:
        self.payloads = payloads
        self.listen_calls = 0

    async def listen(self, *, stop_event: asyncio.Event, on_message) -> None:
        self.listen_calls += 1
        for payload in self.payloads:
            await on_message(payload)
        await stop_event.wait()


class FlakySubscriber:
    def __init__(self) -> None:
        self.listen_calls = 0

    async def listen(self, *, stop_event: asyncio.Event, on_message: object) -> None:
        _ = on_message
        self.listen_calls += 1
        if self.listen_calls == 1:
            raise RuntimeError("subscriber failed")
        await stop_event.wait()


def test_relay_applies_sign_in_and_sign_out_events() -> None:
    async def scenario() -> None:
        provider = SessionIdentityProvider()
        relay = IdentityEventRelay(subscriber=ScriptedSubscriber([]), provider=provider)

        await relay.handle_message(
            {"type": "auth.signed_in", "data": {"user_id": "u1", "email": "alice@example.com"}}
        )
        session = provider.current_session()
        assert session is not None
        assert session.user_id == "u1"
        assert session.display_name == "alice"

        await relay.handle_message({"type": "auth.signed_out"})
        assert provider.current_identity() is None

    asyncio.run(scenario())


def test_relay_ignores_unknown_and_malformed_events() -> None:
    async def scenario() -> None:
        provider = SessionIdentityProvider()
        relay = IdentityEventRelay(subscriber=ScriptedSubscriber([]), provider=provider)

        await relay.handle_message({"type": "auth.token_refreshed", "data": {"user_id": "u1"}})
        await relay.handle_message({"type": "auth.signed_in"})
        await relay.handle_message({"type": "auth.signed_in", "data": {"user_id": ""}})

        assert provider.current_identity() is None

    asyncio.run(scenario())


def test_relay_forwards_subscriber_messages_until_shutdown() -> None:
    async def scenario() -> None:
        provider = SessionIdentityProvider()
        subscriber = ScriptedSubscriber([{"type": "auth.signed_in", "data": {"user_id": "u9"}}])
        relay = IdentityEventRelay(subscriber=subscriber, provider=provider)

        relay.start()
        assert await _wait_until_async(lambda: provider.current_identity() == "u9", timeout_seconds=2.0)
        await relay.shutdown()

        assert subscriber.listen_calls == 1

    asyncio.run(scenario())


def test_relay_restarts_subscriber_after_crash() -> None:
    async def scenario() -> None:
        subscriber = FlakySubscriber()
        relay = IdentityEventRelay(subscriber=subscriber, provider=SessionIdentityProvider())

        relay.start()
        assert await _wait_until_async(lambda: subscriber.listen_calls >= 2, timeout_seconds=3.0)
        await relay.shutdown()

    asyncio.run(scenario())


async def _wait_until_async(predicate: Callable[[], bool], *, timeout_seconds: float) -> bool:
    deadline = time.monotonic() + timeout_seconds
    while time.monotonic() < deadline:
        if predicate():
            return True
        await asyncio.sleep(0.01)
    return predicate()
