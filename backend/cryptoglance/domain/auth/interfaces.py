from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

IdentityChangeHandler = Callable[[str | None], None]


class IdentityProvider(Protocol):
    def current_identity(self) -> str | None: ...

    def on_identity_change(self, handler: IdentityChangeHandler) -> Callable[[], None]: ...
