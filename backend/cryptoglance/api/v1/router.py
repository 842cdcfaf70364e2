from fastapi import APIRouter

from cryptoglance.api.v1.endpoints.health import router as health_router
from cryptoglance.api.v1.endpoints.market_data import router as market_data_router
from cryptoglance.api.v1.endpoints.session import router as session_router
from cryptoglance.api.v1.endpoints.watchlist import router as watchlist_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(session_router, prefix="/session", tags=["session"])
api_router.include_router(watchlist_router, prefix="/watchlist", tags=["watchlist"])
api_router.include_router(market_data_router, prefix="/market-data", tags=["market-data"])
