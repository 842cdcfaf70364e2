from __future__ import annotations

from typing import Any

import httpx

DEFAULT_BASE_URL = "https://api.coingecko.com/api/v3"
API_KEY_PARAM = "x_cg_demo_api_key"


class CoinGeckoClient:
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str | None = None,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = (api_key or "").strip() or None
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout_seconds,
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            transport=transport,
        )

    async def list_markets(
        self,
        *,
        vs_currency: str,
        page: int,
        per_page: int,
        ids: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {
            "vs_currency": vs_currency,
            "order": "market_cap_desc",
            "per_page": per_page,
            "page": page,
            "sparkline": "false",
            "price_change_percentage": "24h",
        }
        if ids:
            params["ids"] = ",".join(ids)
        payload = await self._get("/coins/markets", params=params)
        if not isinstance(payload, list):
            raise ValueError("Unexpected markets payload")
        return payload

    async def get_global(self) -> dict[str, Any]:
        payload = await self._get("/global")
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise ValueError("Unexpected global stats payload")
        return data

    async def get_market_chart(
        self,
        *,
        coin_id: str,
        vs_currency: str,
        days: str,
    ) -> dict[str, Any]:
        payload = await self._get(
            f"/coins/{coin_id}/market_chart",
            params={"vs_currency": vs_currency, "days": days},
        )
        if not isinstance(payload, dict):
            raise ValueError("Unexpected market chart payload")
        return payload

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        params = dict(params or {})
        if self.api_key:
            params[API_KEY_PARAM] = self.api_key
        resp = await self._client.get(path, params=params)
        resp.raise_for_status()
        return resp.json()
