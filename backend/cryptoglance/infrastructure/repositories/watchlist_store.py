from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError

from cryptoglance.domain.watchlist.schemas import DeleteReceipt, InsertReceipt, StoreError
from cryptoglance.infrastructure.db.uow import SqlAlchemyUnitOfWork
from cryptoglance.infrastructure.repositories.watchlist_repository import DuplicateMembershipError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlAlchemyWatchlistStore:
    """Remote watchlist store backed by the ``watchlist_items`` table.

    Database work runs in a worker thread so the event loop never blocks;
    every failure comes back as a ``StoreError`` value.
    """

    def __init__(self, *, uow_factory: Callable[[], SqlAlchemyUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def list_items(self, *, user_id: str) -> list[str] | StoreError:
        def run() -> list[str]:
            with self._uow_factory() as uow:
                return uow.watchlist.list_items(user_id=user_id)

        return await self._run(run, failure_message=f"Failed to fetch watchlist for user {user_id}.")

    async def insert_item(self, *, user_id: str, item_id: str) -> InsertReceipt | StoreError:
        def run() -> InsertReceipt:
            with self._uow_factory() as uow:
                uow.watchlist.add_item(user_id=user_id, item_id=item_id)
                uow.commit()
            return InsertReceipt(message=f"{item_id} added to watchlist successfully.")

        try:
            return await self._run(run, failure_message=f"Failed to add {item_id} to watchlist.")
        except DuplicateMembershipError as exc:
            # An existing record already satisfies the insert.
            logger.info("Watchlist insert hit an existing record", extra={"user_id": user_id, "item_id": item_id})
            return InsertReceipt(message=str(exc))

    async def delete_item(self, *, user_id: str, item_id: str) -> DeleteReceipt | StoreError:
        def run() -> DeleteReceipt:
            with self._uow_factory() as uow:
                deleted = uow.watchlist.remove_item(user_id=user_id, item_id=item_id)
                if not deleted:
                    return DeleteReceipt(success=False, message=f"{item_id} not found in watchlist.")
                uow.commit()
            return DeleteReceipt(success=True, message=f"{item_id} removed from watchlist successfully.")

        return await self._run(run, failure_message=f"Failed to remove {item_id} from watchlist.")

    async def _run(self, func: Callable[[], T], *, failure_message: str) -> T | StoreError:
        try:
            return await asyncio.to_thread(func)
        except SQLAlchemyError:
            logger.exception(failure_message)
            return StoreError(message=failure_message)
