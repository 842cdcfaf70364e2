from __future__ import annotations

from dataclasses import dataclass
from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from cryptoglance.api.deps import get_identity_provider, get_market_data_service, get_watchlist_service
from cryptoglance.api.errors import install_api_error_handlers
from cryptoglance.api.v1.router import api_router
from cryptoglance.application.auth.service import SessionIdentityProvider
from cryptoglance.application.market_data.service import MarketDataApplicationService
from cryptoglance.application.watchlist.service import WatchlistMembershipService
from cryptoglance.domain.watchlist.schemas import DeleteReceipt, InsertReceipt, StoreError


class InMemoryWatchlistStore:
    def __init__(self) -> None:
        self.items_by_user: dict[str, list[str]] = {}
        self.fail_writes = False

    async def list_items(self, *, user_id: str) -> list[str] | StoreError:
        return list(self.items_by_user.get(user_id, []))

    async def insert_item(self, *, user_id: str, item_id: str) -> InsertReceipt | StoreError:
        if self.fail_writes:
            return StoreError(message=f"Failed to add {item_id} to watchlist.")
        self.items_by_user.setdefault(user_id, []).append(item_id)
        return InsertReceipt(message=f"{item_id} added to watchlist successfully.")

    async def delete_item(self, *, user_id: str, item_id: str) -> DeleteReceipt | StoreError:
        if self.fail_writes:
            return StoreError(message=f"Failed to remove {item_id} from watchlist.")
        items = self.items_by_user.get(user_id, [])
        if item_id not in items:
            return DeleteReceipt(success=False, message=f"{item_id} not found in watchlist.")
        items.remove(item_id)
        return DeleteReceipt(success=True, message=f"{item_id} removed from watchlist successfully.")


class FakeCoinGeckoClient:
    def __init__(self) -> None:
        self.error: Exception | None = None
        self.markets = [
            {"id": "bitcoin", "symbol": "btc", "name": "Bitcoin", "current_price": 64000.0, "market_cap_rank": 1},
            {"id": "ethereum", "symbol": "eth", "name": "Ethereum", "current_price": 3100.0, "market_cap_rank": 2},
            {"id": "dogecoin", "symbol": "doge", "name": "Dogecoin", "current_price": 0.12, "market_cap_rank": 9},
        ]

    async def list_markets(self, *, vs_currency: str, page: int, per_page: int, ids: list[str] | None = None):
        if self.error is not None:
            raise self.error
        rows = [row for row in self.markets if not ids or row["id"] in ids]
        return rows[:per_page]

    async def get_global(self):
        if self.error is not None:
            raise self.error
        return {
            "active_cryptocurrencies": 12000,
            "markets": 900,
            "total_market_cap": {"usd": 2.5e12},
            "total_volume": {"usd": 9.0e10},
            "market_cap_percentage": {"btc": 52.1, "eth": 17.4},
            "market_cap_change_percentage_24h_usd": 0.8,
        }

    async def get_market_chart(self, *, coin_id: str, vs_currency: str, days: str):
        if self.error is not None:
            raise self.error
        return {"prices": [[1700000000000, 1.0]], "market_caps": [], "total_volumes": []}


@dataclass(slots=True)
class ApiHarness:
    client: TestClient
    store: InMemoryWatchlistStore
    market_client: FakeCoinGeckoClient
    provider: SessionIdentityProvider
    watchlist: WatchlistMembershipService


@pytest.fixture()
def harness() -> Generator[ApiHarness, None, None]:
    store = InMemoryWatchlistStore()
    market_client = FakeCoinGeckoClient()
    provider = SessionIdentityProvider()
    watchlist = WatchlistMembershipService(store=store)
    watchlist.attach(provider)
    market_data = MarketDataApplicationService(client=market_client, cache_ttl_seconds=0)

    app = FastAPI()
    install_api_error_handlers(app)
    app.include_router(api_router, prefix="/api/v1")
    app.dependency_overrides[get_identity_provider] = lambda: provider
    app.dependency_overrides[get_watchlist_service] = lambda: watchlist
    app.dependency_overrides[get_market_data_service] = lambda: market_data

    with TestClient(app) as client:
        yield ApiHarness(
            client=client,
            store=store,
            market_client=market_client,
            provider=provider,
            watchlist=watchlist,
        )
