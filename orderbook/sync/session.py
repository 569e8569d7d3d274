"""Session provider protocol and a static provider for non-interactive use."""

import os
from typing import Protocol

from orderbook.models.session import Session, SessionStatus


class SessionProvider(Protocol):
    @property
    def session(self) -> Session | None: ...

    @property
    def status(self) -> SessionStatus: ...

    async def update(self) -> None: ...


class StaticSession:
    """Fixed identity, e.g. from ORDERBOOK_USER_ID. update() re-reads the environment."""

    def __init__(self, user_id: str | None = None, display_name: str = ""):
        self._explicit_user_id = user_id
        self._display_name = display_name
        self._session = self._resolve()

    def _resolve(self) -> Session | None:
        user_id = self._explicit_user_id or os.environ.get("ORDERBOOK_USER_ID")
        if not user_id:
            return None
        return Session(user_id=user_id, display_name=self._display_name)

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def status(self) -> SessionStatus:
        if self._session is None:
            return SessionStatus.UNAUTHENTICATED
        return SessionStatus.AUTHENTICATED

    async def update(self) -> None:
        self._session = self._resolve()
