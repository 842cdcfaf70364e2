from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import json
import logging
from typing import Any

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class RedisIdentityEventSubscriber:
    def __init__(self, *, redis_url: str, channel: str) -> None:
        self._redis_url = redis_url
        self._channel = channel

    async def listen(
        self,
        *,
        stop_event: asyncio.Event,
        on_message: Callable[[dict[str, Any]], Awaitable[None]],
    ) -> None:
        client = redis.from_url(self._redis_url, decode_responses=False)
        pubsub = client.pubsub()
        await pubsub.subscribe(self._channel)
        try:
            while not stop_event.is_set():
                message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
                if not message:
                    continue
                payload = decode_event_payload(message.get("data"))
                if payload is None:
                    continue
                try:
                    await on_message(payload)
                except Exception:
                    logger.exception("Failed to handle identity event payload")
        finally:
            try:
                await pubsub.unsubscribe(self._channel)
            finally:
                await pubsub.aclose()
                await client.aclose()


def decode_event_payload(raw: object) -> dict[str, Any] | None:
    if raw is None:
        return None
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not isinstance(raw, str):
        return None
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    return payload
