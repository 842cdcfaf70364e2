from __future__ import annotations

from functools import lru_cache

from cryptoglance.application.auth.identity_relay import IdentityEventRelay
from cryptoglance.application.auth.service import SessionIdentityProvider
from cryptoglance.application.market_data.service import MarketDataApplicationService
from cryptoglance.application.watchlist.service import WatchlistMembershipService
from cryptoglance.core.config import settings
from cryptoglance.infrastructure.clients.coingecko import CoinGeckoClient
from cryptoglance.infrastructure.db.session import get_session_factory
from cryptoglance.infrastructure.db.uow import SqlAlchemyUnitOfWork
from cryptoglance.infrastructure.repositories.watchlist_store import SqlAlchemyWatchlistStore
from cryptoglance.infrastructure.streaming.redis_identity_events import RedisIdentityEventSubscriber


def build_uow() -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(session_factory=get_session_factory())


@lru_cache
def _identity_provider() -> SessionIdentityProvider:
    return SessionIdentityProvider()


def build_identity_provider() -> SessionIdentityProvider:
    return _identity_provider()


@lru_cache
def _watchlist_service() -> WatchlistMembershipService:
    return WatchlistMembershipService(store=SqlAlchemyWatchlistStore(uow_factory=build_uow))


def build_watchlist_service() -> WatchlistMembershipService:
    return _watchlist_service()


@lru_cache
def _coingecko_client() -> CoinGeckoClient:
    return CoinGeckoClient(
        base_url=settings.coingecko_base_url,
        api_key=settings.coingecko_api_key,
        timeout_seconds=settings.coingecko_timeout_seconds,
    )


@lru_cache
def _market_data_service() -> MarketDataApplicationService:
    return MarketDataApplicationService(
        client=_coingecko_client(),
        default_currency=settings.market_data_default_currency,
        default_per_page=settings.market_data_default_per_page,
        cache_ttl_seconds=settings.market_data_cache_ttl_seconds,
    )


def build_market_data_service() -> MarketDataApplicationService:
    return _market_data_service()


@lru_cache
def _identity_event_relay() -> IdentityEventRelay:
    return IdentityEventRelay(
        subscriber=RedisIdentityEventSubscriber(
            redis_url=settings.redis_url,
            channel=settings.identity_events_channel,
        ),
        provider=_identity_provider(),
    )


def build_identity_event_relay() -> IdentityEventRelay:
    return _identity_event_relay()


async def startup_session() -> None:
    """Wires the watchlist to identity changes and starts the event relay."""
    build_watchlist_service().attach(build_identity_provider())
    if settings.identity_events_enabled:
        build_identity_event_relay().start()


async def shutdown_session() -> None:
    if _identity_event_relay.cache_info().currsize > 0:
        await _identity_event_relay().shutdown()
        _identity_event_relay.cache_clear()
    if _watchlist_service.cache_info().currsize > 0:
        await _watchlist_service().close()
        _watchlist_service.cache_clear()
    if _coingecko_client.cache_info().currsize > 0:
        await _coingecko_client().aclose()
        _coingecko_client.cache_clear()
        _market_data_service.cache_clear()
    _identity_provider.cache_clear()
