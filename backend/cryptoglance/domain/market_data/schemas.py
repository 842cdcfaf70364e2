from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

TimeFrame = Literal["24h", "7d", "30d", "90d", "1y"]

TIMEFRAME_DAYS: dict[str, str] = {
    "24h": "1",
    "7d": "7",
    "30d": "30",
    "90d": "90",
    "1y": "365",
}


class Cryptocurrency(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    symbol: str
    name: str
    image: str | None = None
    current_price: float | None = None
    market_cap: float | None = None
    market_cap_rank: int | None = None
    total_volume: float | None = None
    high_24h: float | None = None
    low_24h: float | None = None
    price_change_24h: float | None = None
    price_change_percentage_24h: float | None = None
    market_cap_change_24h: float | None = None
    market_cap_change_percentage_24h: float | None = None
    circulating_supply: float | None = None
    total_supply: float | None = None
    max_supply: float | None = None
    last_updated: datetime | None = None


class MarketStats(BaseModel):
    model_config = ConfigDict(extra="ignore")

    active_cryptocurrencies: int
    markets: int
    total_market_cap: dict[str, float]
    total_volume: dict[str, float]
    market_cap_percentage: dict[str, float]
    market_cap_change_percentage_24h_usd: float
    btc_dominance: float | None = None
    eth_dominance: float | None = None


class ChartData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    prices: list[tuple[float, float]]
    market_caps: list[tuple[float, float]]
    total_volumes: list[tuple[float, float]]
