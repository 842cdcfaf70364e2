from __future__ import annotations

from cryptoglance.application.auth.service import SessionIdentityProvider
from cryptoglance.application.container import (
    build_identity_provider,
    build_market_data_service,
    build_watchlist_service,
)
from cryptoglance.application.market_data.service import MarketDataApplicationService
from cryptoglance.application.watchlist.interfaces import WatchlistMembership


def get_identity_provider() -> SessionIdentityProvider:
    return build_identity_provider()


def get_watchlist_service() -> WatchlistMembership:
    return build_watchlist_service()


def get_market_data_service() -> MarketDataApplicationService:
    return build_market_data_service()
