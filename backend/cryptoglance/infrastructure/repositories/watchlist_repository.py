from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cryptoglance.domain.watchlist.schemas import MembershipRecord
from cryptoglance.infrastructure.db.models.watchlist import WatchlistItemModel


class DuplicateMembershipError(ValueError):
    """Raised when a (user, item) record already exists."""


class SqlAlchemyWatchlistRepository:
    def __init__(self, *, session: Session) -> None:
        self._session = session

    def list_items(self, *, user_id: str) -> list[str]:
        rows = (
            self._session.execute(
                select(WatchlistItemModel.item_id)
                .where(WatchlistItemModel.user_id == user_id)
                .order_by(WatchlistItemModel.created_at, WatchlistItemModel.id)
            )
            .scalars()
            .all()
        )
        return list(rows)

    def add_item(self, *, user_id: str, item_id: str) -> MembershipRecord:
        item = WatchlistItemModel(user_id=user_id, item_id=item_id)
        self._session.add(item)
        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise DuplicateMembershipError(f"{item_id} is already in watchlist") from exc
        return MembershipRecord(user_id=item.user_id, item_id=item.item_id)

    def remove_item(self, *, user_id: str, item_id: str) -> bool:
        result = self._session.execute(
            delete(WatchlistItemModel).where(
                WatchlistItemModel.user_id == user_id,
                WatchlistItemModel.item_id == item_id,
            )
        )
        self._session.flush()
        return bool(result.rowcount)
