from __future__ import annotations

from typing import Protocol

from cryptoglance.domain.watchlist.schemas import WatchlistOutcome, WatchlistSyncState


class WatchlistMembership(Protocol):
    @property
    def watchlist(self) -> tuple[str, ...]: ...

    @property
    def user_id(self) -> str | None: ...

    @property
    def state(self) -> WatchlistSyncState: ...

    def is_in_watchlist(self, item_id: str) -> bool: ...

    async def wait_until_ready(self) -> None: ...

    async def add_to_watchlist(self, item_id: str) -> WatchlistOutcome: ...

    async def remove_from_watchlist(self, item_id: str) -> WatchlistOutcome: ...
