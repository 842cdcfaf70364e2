from __future__ import annotations

from fastapi import APIRouter, Depends

from cryptoglance.api.deps import get_identity_provider, get_watchlist_service
from cryptoglance.api.v1.dto.mappers import to_session_out
from cryptoglance.api.v1.dto.session import SessionCreate, SessionOut
from cryptoglance.application.auth.service import SessionIdentityProvider
from cryptoglance.application.watchlist.interfaces import WatchlistMembership
from cryptoglance.domain.auth.schemas import Identity

router = APIRouter()


@router.get("", response_model=SessionOut)
def get_session(provider: SessionIdentityProvider = Depends(get_identity_provider)) -> SessionOut:
    return to_session_out(provider.current_session())


@router.post("", response_model=SessionOut)
async def sign_in(
    payload: SessionCreate,
    provider: SessionIdentityProvider = Depends(get_identity_provider),
    watchlist: WatchlistMembership = Depends(get_watchlist_service),
) -> SessionOut:
    provider.sign_in(Identity(user_id=payload.user_id, email=payload.email))
    await watchlist.wait_until_ready()
    return to_session_out(provider.current_session())


@router.delete("", response_model=SessionOut)
async def sign_out(provider: SessionIdentityProvider = Depends(get_identity_provider)) -> SessionOut:
    provider.sign_out()
    return to_session_out(provider.current_session())
