from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import logging
from typing import Any, Protocol

from pydantic import ValidationError

from cryptoglance.application.auth.service import SessionIdentityProvider
from cryptoglance.domain.auth.schemas import Identity

logger = logging.getLogger(__name__)

EVENT_SIGNED_IN = "auth.signed_in"
EVENT_SIGNED_OUT = "auth.signed_out"


class IdentityEventSubscriber(Protocol):
    async def listen(
        self,
        *,
        stop_event: asyncio.Event,
        on_message: Callable[[dict[str, Any]], Awaitable[None]],
    ) -> None: ...


class IdentityEventRelay:
    """Applies sign-in/sign-out events pushed by the auth integration."""

    def __init__(
        self,
        *,
        subscriber: IdentityEventSubscriber,
        provider: SessionIdentityProvider,
        max_retry_delay_seconds: int = 30,
    ) -> None:
        self._subscriber = subscriber
        self._provider = provider
        self._max_retry_delay_seconds = max(1, max_retry_delay_seconds)
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run())

    async def shutdown(self) -> None:
        task = self._task
        self._task = None
        self._stop_event.set()
        if task is not None:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    async def handle_message(self, payload: dict[str, Any]) -> None:
        event_type = payload.get("type")
        if event_type == EVENT_SIGNED_OUT:
            self._provider.sign_out()
            return
        if event_type != EVENT_SIGNED_IN:
            logger.debug("Ignoring identity event", extra={"event_type": event_type})
            return

        data = payload.get("data")
        if not isinstance(data, dict):
            logger.warning("Identity event without data payload")
            return
        try:
            identity = Identity(
                user_id=str(data.get("user_id") or ""),
                email=data.get("email"),
                display_name=data.get("display_name"),
            )
        except ValidationError:
            logger.warning("Identity event carried an invalid identity")
            return
        self._provider.sign_in(identity)

    async def _run(self) -> None:
        retry_delay_seconds = 1
        while not self._stop_event.is_set():
            try:
                await self._subscriber.listen(
                    stop_event=self._stop_event,
                    on_message=self.handle_message,
                )
                if self._stop_event.is_set():
                    return
                logger.warning("Identity event subscriber stopped unexpectedly, restarting")
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Identity event subscriber crashed")

            if self._stop_event.is_set():
                return

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=retry_delay_seconds)
            except asyncio.TimeoutError:
                retry_delay_seconds = min(retry_delay_seconds * 2, self._max_retry_delay_seconds)
                continue
            return
