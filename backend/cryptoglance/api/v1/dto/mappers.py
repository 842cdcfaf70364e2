from __future__ import annotations

from cryptoglance.api.v1.dto.market_data import CryptocurrencyOut
from cryptoglance.api.v1.dto.session import SessionOut
from cryptoglance.api.v1.dto.watchlist import WatchlistOutcomeOut
from cryptoglance.application.watchlist.interfaces import WatchlistMembership
from cryptoglance.domain.auth.schemas import Identity
from cryptoglance.domain.market_data.schemas import Cryptocurrency
from cryptoglance.domain.watchlist.schemas import WatchlistOutcome


def to_session_out(identity: Identity | None) -> SessionOut:
    if identity is None:
        return SessionOut(authenticated=False)
    return SessionOut(
        authenticated=True,
        user_id=identity.user_id,
        email=identity.email,
        display_name=identity.display_name,
    )


def to_outcome_out(outcome: WatchlistOutcome, *, watchlist: WatchlistMembership) -> WatchlistOutcomeOut:
    return WatchlistOutcomeOut(
        success=outcome.success,
        message=outcome.message,
        status=outcome.status,
        items=list(watchlist.watchlist),
    )


def to_coin_out(coin: Cryptocurrency, *, watchlist: WatchlistMembership) -> CryptocurrencyOut:
    return CryptocurrencyOut(**coin.model_dump(), in_watchlist=watchlist.is_in_watchlist(coin.id))
