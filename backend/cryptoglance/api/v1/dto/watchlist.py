from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cryptoglance.domain.watchlist.schemas import WatchlistOutcomeStatus, WatchlistSyncState


class WatchlistItemCreate(BaseModel):
    item_id: str = Field(min_length=1, max_length=100)


class WatchlistOut(BaseModel):
    user_id: str | None = None
    state: WatchlistSyncState
    items: list[str]


class WatchlistMembershipOut(BaseModel):
    item_id: str
    in_watchlist: bool


class WatchlistOutcomeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    success: bool
    message: str
    status: WatchlistOutcomeStatus
    items: list[str]
