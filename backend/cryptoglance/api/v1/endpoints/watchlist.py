from __future__ import annotations

from fastapi import APIRouter, Depends, status

from cryptoglance.api.deps import get_market_data_service, get_watchlist_service
from cryptoglance.api.errors import raise_api_error
from cryptoglance.api.v1.dto.market_data import CryptocurrencyOut
from cryptoglance.api.v1.dto.mappers import to_coin_out, to_outcome_out
from cryptoglance.api.v1.dto.watchlist import (
    WatchlistItemCreate,
    WatchlistMembershipOut,
    WatchlistOut,
    WatchlistOutcomeOut,
)
from cryptoglance.api.v1.endpoints.market_data import translate_market_data_error
from cryptoglance.application.market_data.errors import MarketDataApplicationError
from cryptoglance.application.market_data.service import MarketDataApplicationService
from cryptoglance.application.watchlist.interfaces import WatchlistMembership
from cryptoglance.domain.watchlist.schemas import WatchlistOutcome, WatchlistOutcomeStatus

router = APIRouter()


@router.get("", response_model=WatchlistOut)
async def list_watchlist(watchlist: WatchlistMembership = Depends(get_watchlist_service)) -> WatchlistOut:
    await watchlist.wait_until_ready()
    return WatchlistOut(user_id=watchlist.user_id, state=watchlist.state, items=list(watchlist.watchlist))


@router.get("/markets", response_model=list[CryptocurrencyOut])
async def list_watchlist_markets(
    watchlist: WatchlistMembership = Depends(get_watchlist_service),
    market_data: MarketDataApplicationService = Depends(get_market_data_service),
) -> list[CryptocurrencyOut]:
    await watchlist.wait_until_ready()
    try:
        coins = await market_data.watchlist_markets(watchlist.watchlist)
    except MarketDataApplicationError as exc:
        translate_market_data_error(exc)
    return [to_coin_out(coin, watchlist=watchlist) for coin in coins]


@router.get("/{item_id}", response_model=WatchlistMembershipOut)
async def get_membership(
    item_id: str,
    watchlist: WatchlistMembership = Depends(get_watchlist_service),
) -> WatchlistMembershipOut:
    await watchlist.wait_until_ready()
    return WatchlistMembershipOut(item_id=item_id, in_watchlist=watchlist.is_in_watchlist(item_id))


@router.post("", response_model=WatchlistOutcomeOut)
async def add_watchlist_item(
    payload: WatchlistItemCreate,
    watchlist: WatchlistMembership = Depends(get_watchlist_service),
) -> WatchlistOutcomeOut:
    outcome = await watchlist.add_to_watchlist(payload.item_id)
    _reject_unauthenticated(outcome)
    return to_outcome_out(outcome, watchlist=watchlist)


@router.delete("/{item_id}", response_model=WatchlistOutcomeOut)
async def delete_watchlist_item(
    item_id: str,
    watchlist: WatchlistMembership = Depends(get_watchlist_service),
) -> WatchlistOutcomeOut:
    outcome = await watchlist.remove_from_watchlist(item_id)
    _reject_unauthenticated(outcome)
    return to_outcome_out(outcome, watchlist=watchlist)


def _reject_unauthenticated(outcome: WatchlistOutcome) -> None:
    if outcome.status == WatchlistOutcomeStatus.UNAUTHENTICATED:
        raise_api_error(
            status_code=status.HTTP_401_UNAUTHORIZED,
            code="WATCHLIST_UNAUTHENTICATED",
            message=outcome.message,
        )
