from __future__ import annotations

from typing import Any, Protocol


class MarketDataClient(Protocol):
    async def list_markets(
        self,
        *,
        vs_currency: str,
        page: int,
        per_page: int,
        ids: list[str] | None = None,
    ) -> list[dict[str, Any]]: ...

    async def get_global(self) -> dict[str, Any]: ...

    async def get_market_chart(
        self,
        *,
        coin_id: str,
        vs_currency: str,
        days: str,
    ) -> dict[str, Any]: ...
