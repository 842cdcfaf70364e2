from __future__ import annotations

from collections.abc import Callable
import logging

from cryptoglance.domain.auth.interfaces import IdentityChangeHandler
from cryptoglance.domain.auth.schemas import Identity

logger = logging.getLogger(__name__)


class SessionIdentityProvider:
    """Holds the identity established by the hosted auth service.

    Credentials are never checked here; callers hand over an identity the
    auth service already vouched for. Subscribers are notified only when the
    active user id actually changes.
    """

    def __init__(self) -> None:
        self._identity: Identity | None = None
        self._handlers: list[IdentityChangeHandler] = []

    def current_identity(self) -> str | None:
        if self._identity is None:
            return None
        return self._identity.user_id

    def current_session(self) -> Identity | None:
        return self._identity

    def on_identity_change(self, handler: IdentityChangeHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            try:
                self._handlers.remove(handler)
            except ValueError:
                pass

        return unsubscribe

    def sign_in(self, identity: Identity) -> None:
        previous_user_id = self.current_identity()
        self._identity = identity
        if previous_user_id != identity.user_id:
            logger.info("Identity established", extra={"user_id": identity.user_id})
            self._notify(identity.user_id)

    def sign_out(self) -> None:
        if self._identity is None:
            return
        user_id = self._identity.user_id
        self._identity = None
        logger.info("Identity cleared", extra={"user_id": user_id})
        self._notify(None)

    def _notify(self, user_id: str | None) -> None:
        for handler in list(self._handlers):
            try:
                handler(user_id)
            except Exception:
                logger.exception("Identity change handler failed")
