from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class WatchlistSyncState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    LOADING = "loading"
    READY = "ready"


class WatchlistOutcomeStatus(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    ALREADY_PRESENT = "already_present"
    UNAUTHENTICATED = "unauthenticated"
    PENDING = "pending"
    INVALID = "invalid"
    FAILED = "failed"


class WatchlistOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    status: WatchlistOutcomeStatus


class MembershipRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    item_id: str


class StoreError(BaseModel):
    """Error shape returned by a remote watchlist store instead of raising."""

    message: str


class InsertReceipt(BaseModel):
    message: str


class DeleteReceipt(BaseModel):
    success: bool
    message: str
