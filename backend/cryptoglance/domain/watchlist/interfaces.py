from __future__ import annotations

from typing import Protocol

from cryptoglance.domain.watchlist.schemas import DeleteReceipt, InsertReceipt, StoreError


class RemoteWatchlistStore(Protocol):
    """Per-user membership records kept outside the process.

    Implementations report failures as ``StoreError`` values. ``delete_item``
    matches the exact (user, item) pair and answers ``success=False`` when no
    record exists.
    """

    async def list_items(self, *, user_id: str) -> list[str] | StoreError: ...

    async def insert_item(self, *, user_id: str, item_id: str) -> InsertReceipt | StoreError: ...

    async def delete_item(self, *, user_id: str, item_id: str) -> DeleteReceipt | StoreError: ...
