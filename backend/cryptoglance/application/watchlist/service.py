from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import logging
from typing import TypeVar

from cryptoglance.domain.auth.interfaces import IdentityProvider
from cryptoglance.domain.watchlist import services as outcomes
from cryptoglance.domain.watchlist.interfaces import RemoteWatchlistStore
from cryptoglance.domain.watchlist.schemas import StoreError, WatchlistOutcome, WatchlistSyncState
from cryptoglance.domain.watchlist.services import normalize_item_id

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WatchlistMembershipService:
    """Keeps the active user's watchlist in memory, in step with the remote store.

    Mutations are optimistic: local state changes before the store answers and
    is rolled back when the store reports a failure. Each identity change bumps
    a generation counter; store answers tagged with an older generation never
    touch the current state.

    All methods must be called from the event loop that owns the service.
    """

    def __init__(self, *, store: RemoteWatchlistStore) -> None:
        self._store = store
        self._items: list[str] = []
        self._members: set[str] = set()
        self._user_id: str | None = None
        self._state = WatchlistSyncState.UNAUTHENTICATED
        self._generation = 0
        self._in_flight: set[tuple[int, str]] = set()
        self._load_task: asyncio.Task[None] | None = None
        self._background_tasks: set[asyncio.Task[None]] = set()
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def watchlist(self) -> tuple[str, ...]:
        return tuple(self._items)

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def state(self) -> WatchlistSyncState:
        return self._state

    def is_in_watchlist(self, item_id: str) -> bool:
        return item_id.strip() in self._members

    def attach(self, provider: IdentityProvider) -> None:
        self.detach()
        self._unsubscribe = provider.on_identity_change(self.handle_identity_change)
        self.handle_identity_change(provider.current_identity())

    def detach(self) -> None:
        unsubscribe = self._unsubscribe
        self._unsubscribe = None
        if unsubscribe is not None:
            unsubscribe()

    async def close(self) -> None:
        self.detach()
        tasks = list(self._background_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._load_task = None

    def handle_identity_change(self, user_id: str | None) -> None:
        self._generation += 1
        self._replace_items([])

        if user_id is None:
            self._user_id = None
            self._state = WatchlistSyncState.UNAUTHENTICATED
            self._load_task = None
            logger.info("Watchlist cleared after sign-out")
            return

        self._user_id = user_id
        self._state = WatchlistSyncState.LOADING
        task = asyncio.get_running_loop().create_task(
            self._load(user_id=user_id, generation=self._generation)
        )
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        self._load_task = task

    async def wait_until_ready(self) -> None:
        while True:
            task = self._load_task
            if task is None or task.done():
                return
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                # A load cancelled by close() ends the wait; our own cancellation does not.
                current = asyncio.current_task()
                if not task.cancelled() or (current is not None and current.cancelling()):
                    raise

    async def add_to_watchlist(self, item_id: str) -> WatchlistOutcome:
        try:
            item_id = normalize_item_id(item_id)
        except ValueError as exc:
            return outcomes.invalid(str(exc))

        await self.wait_until_ready()
        user_id = self._user_id
        if user_id is None:
            return outcomes.unauthenticated()
        if self._state is WatchlistSyncState.LOADING:
            return outcomes.failed("Watchlist is not loaded, try again shortly.")
        if item_id in self._members:
            return outcomes.already_present(item_id)

        generation = self._generation
        key = (generation, item_id)
        if key in self._in_flight:
            return outcomes.pending(item_id)

        self._in_flight.add(key)
        self._append(item_id)
        failure_message = f"Failed to add {item_id} to watchlist."
        try:
            result = await self._call_store(
                lambda: self._store.insert_item(user_id=user_id, item_id=item_id),
                failure_message=failure_message,
            )
        finally:
            self._in_flight.discard(key)

        if isinstance(result, StoreError):
            if generation == self._generation:
                self._discard(item_id)
            logger.warning(
                "Watchlist insert rejected, optimistic add rolled back",
                extra={"user_id": user_id, "item_id": item_id},
            )
            return outcomes.failed(result.message or failure_message)
        return outcomes.added(item_id, result.message)

    async def remove_from_watchlist(self, item_id: str) -> WatchlistOutcome:
        try:
            item_id = normalize_item_id(item_id)
        except ValueError as exc:
            return outcomes.invalid(str(exc))

        await self.wait_until_ready()
        user_id = self._user_id
        if user_id is None:
            return outcomes.unauthenticated()
        if self._state is WatchlistSyncState.LOADING:
            return outcomes.failed("Watchlist is not loaded, try again shortly.")

        generation = self._generation
        key = (generation, item_id)
        if key in self._in_flight:
            return outcomes.pending(item_id)

        self._in_flight.add(key)
        position = self._discard(item_id)
        failure_message = f"Failed to remove {item_id} from watchlist."
        try:
            result = await self._call_store(
                lambda: self._store.delete_item(user_id=user_id, item_id=item_id),
                failure_message=failure_message,
            )
        finally:
            self._in_flight.discard(key)

        if isinstance(result, StoreError) or not result.success:
            if position is not None and generation == self._generation:
                self._restore(item_id, position)
            logger.warning(
                "Watchlist delete rejected, optimistic remove rolled back",
                extra={"user_id": user_id, "item_id": item_id},
            )
            return outcomes.failed(result.message or failure_message)
        return outcomes.removed(item_id, result.message)

    async def _load(self, *, user_id: str, generation: int) -> None:
        result = await self._call_store(
            lambda: self._store.list_items(user_id=user_id),
            failure_message=f"Failed to fetch watchlist for user {user_id}.",
        )
        if generation != self._generation:
            logger.debug("Discarding stale watchlist snapshot", extra={"user_id": user_id})
            return

        if isinstance(result, list):
            self._replace_items(item for item in result if isinstance(item, str))
        else:
            logger.warning("Watchlist fetch failed, starting empty", extra={"user_id": user_id})
            self._replace_items([])
        self._state = WatchlistSyncState.READY

    async def _call_store(
        self,
        call: Callable[[], Awaitable[T]],
        *,
        failure_message: str,
    ) -> T | StoreError:
        try:
            return await call()
        except Exception:
            logger.exception(failure_message)
            return StoreError(message=failure_message)

    def _replace_items(self, items) -> None:
        self._items = []
        self._members = set()
        for item in items:
            self._append(item)

    def _append(self, item_id: str) -> None:
        if item_id in self._members:
            return
        self._items.append(item_id)
        self._members.add(item_id)

    def _discard(self, item_id: str) -> int | None:
        if item_id not in self._members:
            return None
        position = self._items.index(item_id)
        del self._items[position]
        self._members.discard(item_id)
        return position

    def _restore(self, item_id: str, position: int) -> None:
        if item_id in self._members:
            return
        self._items.insert(min(position, len(self._items)), item_id)
        self._members.add(item_id)
