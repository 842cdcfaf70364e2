from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
import logging
import time
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from cryptoglance.application.market_data.errors import (
    MarketDataNotFoundError,
    MarketDataRateLimitedError,
    MarketDataUpstreamUnavailableError,
)
from cryptoglance.domain.market_data.interfaces import MarketDataClient
from cryptoglance.domain.market_data.schemas import (
    TIMEFRAME_DAYS,
    ChartData,
    Cryptocurrency,
    MarketStats,
)
from cryptoglance.domain.watchlist.services import normalize_item_id

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_PER_PAGE = 250
SEARCH_RESULT_LIMIT = 5


class MarketDataApplicationService:
    """Read-through access to the market data provider.

    Responses are cached per query for ``cache_ttl_seconds`` so that list,
    detail and watchlist views rendered together hit the provider once.
    """

    def __init__(
        self,
        *,
        client: MarketDataClient,
        default_currency: str = "usd",
        default_per_page: int = 40,
        cache_ttl_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._default_currency = default_currency
        self._default_per_page = default_per_page
        self._cache_ttl_seconds = max(0, cache_ttl_seconds)
        self._clock = clock
        self._cache: dict[tuple[Any, ...], tuple[float, Any]] = {}

    @property
    def default_per_page(self) -> int:
        return self._default_per_page

    async def list_markets(self, *, page: int = 1, per_page: int | None = None) -> list[Cryptocurrency]:
        if page < 1:
            raise ValueError("Page must be at least 1")
        resolved_per_page = per_page or self._default_per_page
        key = ("markets", self._default_currency, page, resolved_per_page)
        return await self._cached(
            key,
            lambda: self._fetch_markets(page=page, per_page=resolved_per_page),
        )

    async def get_global_stats(self) -> MarketStats:
        return await self._cached(("global",), self._fetch_global_stats)

    async def get_market_chart(self, *, coin_id: str, timeframe: str = "24h") -> ChartData:
        days = TIMEFRAME_DAYS.get(timeframe)
        if days is None:
            raise ValueError("Unsupported timeframe")
        normalized = normalize_item_id(coin_id)
        key = ("chart", self._default_currency, normalized, days)
        return await self._cached(key, lambda: self._fetch_market_chart(coin_id=normalized, days=days))

    async def watchlist_markets(self, item_ids: Iterable[str]) -> list[Cryptocurrency]:
        ordered_ids = list(dict.fromkeys(item_ids))
        if not ordered_ids:
            return []
        key = ("watchlist", self._default_currency, tuple(sorted(ordered_ids)))
        coins = await self._cached(key, lambda: self._fetch_by_ids(ordered_ids))
        by_id = {coin.id: coin for coin in coins}
        return [by_id[item_id] for item_id in ordered_ids if item_id in by_id]

    async def get_coin(self, *, coin_id: str) -> Cryptocurrency:
        normalized = normalize_item_id(coin_id)
        for coin in await self.list_markets():
            if coin.id == normalized:
                return coin
        key = ("coin", self._default_currency, normalized)
        matches = await self._cached(key, lambda: self._fetch_by_ids([normalized]))
        for coin in matches:
            if coin.id == normalized:
                return coin
        raise MarketDataNotFoundError()

    async def search(self, query: str, *, limit: int = SEARCH_RESULT_LIMIT) -> list[Cryptocurrency]:
        """Filters the default listing by name or symbol, like the dashboard search bar."""
        needle = query.strip().lower()
        if not needle or limit < 1:
            return []
        matches = [
            coin
            for coin in await self.list_markets()
            if needle in coin.name.lower() or needle in coin.symbol.lower()
        ]
        return matches[:limit]

    async def _fetch_by_ids(self, ids: list[str]) -> list[Cryptocurrency]:
        coins: list[Cryptocurrency] = []
        for start in range(0, len(ids), MAX_PER_PAGE):
            chunk = ids[start : start + MAX_PER_PAGE]
            coins.extend(await self._fetch_markets(page=1, per_page=len(chunk), ids=chunk))
        return coins

    async def _fetch_markets(
        self,
        *,
        page: int,
        per_page: int,
        ids: list[str] | None = None,
    ) -> list[Cryptocurrency]:
        rows = await self._call_upstream(
            lambda: self._client.list_markets(
                vs_currency=self._default_currency,
                page=page,
                per_page=per_page,
                ids=ids,
            )
        )
        return _parse(lambda: [Cryptocurrency.model_validate(row) for row in rows])

    async def _fetch_global_stats(self) -> MarketStats:
        data = await self._call_upstream(self._client.get_global)

        def build() -> MarketStats:
            stats = MarketStats.model_validate(data)
            stats.btc_dominance = stats.market_cap_percentage.get("btc")
            stats.eth_dominance = stats.market_cap_percentage.get("eth")
            return stats

        return _parse(build)

    async def _fetch_market_chart(self, *, coin_id: str, days: str) -> ChartData:
        data = await self._call_upstream(
            lambda: self._client.get_market_chart(
                coin_id=coin_id,
                vs_currency=self._default_currency,
                days=days,
            )
        )
        return _parse(lambda: ChartData.model_validate(data))

    async def _cached(self, key: tuple[Any, ...], loader: Callable[[], Awaitable[T]]) -> T:
        now = self._clock()
        hit = self._cache.get(key)
        if hit is not None and now - hit[0] < self._cache_ttl_seconds:
            return hit[1]
        value = await loader()
        stored_at = self._clock()
        self._cache = {
            cached_key: entry
            for cached_key, entry in self._cache.items()
            if stored_at - entry[0] < self._cache_ttl_seconds
        }
        self._cache[key] = (stored_at, value)
        return value

    async def _call_upstream(self, call: Callable[[], Awaitable[T]]) -> T:
        try:
            return await call()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code == 429:
                raise MarketDataRateLimitedError() from exc
            if status_code == 404:
                raise MarketDataNotFoundError() from exc
            logger.warning("Market data upstream returned an error", extra={"status_code": status_code})
            raise MarketDataUpstreamUnavailableError() from exc
        except httpx.HTTPError as exc:
            logger.warning("Market data upstream request failed: %s", exc)
            raise MarketDataUpstreamUnavailableError() from exc
        except ValueError as exc:
            logger.warning("Market data upstream sent an unexpected payload: %s", exc)
            raise MarketDataUpstreamUnavailableError() from exc


def _parse(build: Callable[[], T]) -> T:
    try:
        return build()
    except ValidationError as exc:
        logger.warning("Market data payload failed validation: %s", exc)
        raise MarketDataUpstreamUnavailableError() from exc
