from __future__ import annotations

from cryptoglance.domain.watchlist.schemas import WatchlistOutcome, WatchlistOutcomeStatus

ITEM_ID_MAX_LENGTH = 100


def normalize_item_id(item_id: str) -> str:
    normalized = item_id.strip()
    if not normalized:
        raise ValueError("Item id is required")
    if len(normalized) > ITEM_ID_MAX_LENGTH:
        raise ValueError("Item id is too long")
    return normalized


def added(item_id: str, message: str | None = None) -> WatchlistOutcome:
    return WatchlistOutcome(
        success=True,
        message=message or f"{item_id} added to watchlist successfully.",
        status=WatchlistOutcomeStatus.ADDED,
    )


def removed(item_id: str, message: str | None = None) -> WatchlistOutcome:
    return WatchlistOutcome(
        success=True,
        message=message or f"{item_id} removed from watchlist successfully.",
        status=WatchlistOutcomeStatus.REMOVED,
    )


def already_present(item_id: str) -> WatchlistOutcome:
    return WatchlistOutcome(
        success=True,
        message=f"{item_id} is already in watchlist",
        status=WatchlistOutcomeStatus.ALREADY_PRESENT,
    )


def unauthenticated() -> WatchlistOutcome:
    return WatchlistOutcome(
        success=False,
        message="Sign in to manage your watchlist.",
        status=WatchlistOutcomeStatus.UNAUTHENTICATED,
    )


def pending(item_id: str) -> WatchlistOutcome:
    return WatchlistOutcome(
        success=False,
        message=f"An update for {item_id} is already in progress.",
        status=WatchlistOutcomeStatus.PENDING,
    )


def invalid(message: str) -> WatchlistOutcome:
    return WatchlistOutcome(success=False, message=message, status=WatchlistOutcomeStatus.INVALID)


def failed(message: str) -> WatchlistOutcome:
    return WatchlistOutcome(success=False, message=message, status=WatchlistOutcomeStatus.FAILED)
