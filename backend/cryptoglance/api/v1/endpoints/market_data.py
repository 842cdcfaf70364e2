from __future__ import annotations

from typing import NoReturn

from fastapi import APIRouter, Depends, Query, status

from cryptoglance.api.deps import get_market_data_service, get_watchlist_service
from cryptoglance.api.errors import ApiError, raise_api_error
from cryptoglance.api.v1.dto.market_data import CoinListOut, CryptocurrencyOut
from cryptoglance.api.v1.dto.mappers import to_coin_out
from cryptoglance.application.market_data.errors import (
    MarketDataApplicationError,
    MarketDataNotFoundError,
    MarketDataRateLimitedError,
)
from cryptoglance.application.market_data.service import MarketDataApplicationService
from cryptoglance.application.watchlist.interfaces import WatchlistMembership
from cryptoglance.domain.market_data.schemas import ChartData, MarketStats, TimeFrame

router = APIRouter()


@router.get("/coins", response_model=CoinListOut)
async def list_coins(
    page: int = Query(default=1, ge=1),
    per_page: int | None = Query(default=None, ge=1, le=250),
    service: MarketDataApplicationService = Depends(get_market_data_service),
    watchlist: WatchlistMembership = Depends(get_watchlist_service),
) -> CoinListOut:
    try:
        coins = await service.list_markets(page=page, per_page=per_page)
    except MarketDataApplicationError as exc:
        translate_market_data_error(exc)
    return CoinListOut(
        page=page,
        per_page=per_page or service.default_per_page,
        items=[to_coin_out(coin, watchlist=watchlist) for coin in coins],
    )


@router.get("/search", response_model=list[CryptocurrencyOut])
async def search_coins(
    q: str = Query(default="", max_length=100),
    limit: int = Query(default=5, ge=1, le=20),
    service: MarketDataApplicationService = Depends(get_market_data_service),
    watchlist: WatchlistMembership = Depends(get_watchlist_service),
) -> list[CryptocurrencyOut]:
    try:
        coins = await service.search(q, limit=limit)
    except MarketDataApplicationError as exc:
        translate_market_data_error(exc)
    return [to_coin_out(coin, watchlist=watchlist) for coin in coins]


@router.get("/coins/{coin_id}", response_model=CryptocurrencyOut)
async def get_coin(
    coin_id: str,
    service: MarketDataApplicationService = Depends(get_market_data_service),
    watchlist: WatchlistMembership = Depends(get_watchlist_service),
) -> CryptocurrencyOut:
    try:
        coin = await service.get_coin(coin_id=coin_id)
    except MarketDataApplicationError as exc:
        translate_market_data_error(exc)
    except ValueError as exc:
        raise_api_error(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="MARKET_DATA_INVALID_COIN",
            message=str(exc),
        )
    return to_coin_out(coin, watchlist=watchlist)


@router.get("/global", response_model=MarketStats)
async def get_global_stats(
    service: MarketDataApplicationService = Depends(get_market_data_service),
) -> MarketStats:
    try:
        return await service.get_global_stats()
    except MarketDataApplicationError as exc:
        translate_market_data_error(exc)


@router.get("/coins/{coin_id}/chart", response_model=ChartData)
async def get_market_chart(
    coin_id: str,
    timeframe: TimeFrame = Query(default="24h"),
    service: MarketDataApplicationService = Depends(get_market_data_service),
) -> ChartData:
    try:
        return await service.get_market_chart(coin_id=coin_id, timeframe=timeframe)
    except MarketDataApplicationError as exc:
        translate_market_data_error(exc)
    except ValueError as exc:
        raise_api_error(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="MARKET_DATA_INVALID_COIN",
            message=str(exc),
        )


def translate_market_data_error(exc: MarketDataApplicationError) -> NoReturn:
    if isinstance(exc, MarketDataRateLimitedError):
        raise ApiError(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            code=str(exc),
            message="Market data provider rate limit reached, retry shortly",
        ) from exc
    if isinstance(exc, MarketDataNotFoundError):
        raise ApiError(
            status_code=status.HTTP_404_NOT_FOUND,
            code=str(exc),
            message="Requested coin was not found",
        ) from exc
    raise ApiError(
        status_code=status.HTTP_502_BAD_GATEWAY,
        code="MARKET_DATA_UPSTREAM_UNAVAILABLE",
        message="Market data provider is unavailable",
    ) from exc
