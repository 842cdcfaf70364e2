from __future__ import annotations

from pydantic import BaseModel

from cryptoglance.domain.market_data.schemas import Cryptocurrency


class CryptocurrencyOut(Cryptocurrency):
    in_watchlist: bool = False


class CoinListOut(BaseModel):
    page: int
    per_page: int
    items: list[CryptocurrencyOut]
