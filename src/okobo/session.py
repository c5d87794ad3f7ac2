"""Client session state machine.

    loading ──restore()──▶ authenticated | unauthenticated
    any ──signin()/signup() ok──▶ authenticated
    any ──logout()──▶ unauthenticated

State only changes after an awaited API call completes or on logout. Pages
read ``SessionContext.state`` synchronously.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from okobo.api_client import AuthClient, AuthResult
from okobo.storage import SessionStore

logger = logging.getLogger(__name__)

UNAUTHORIZED = 401


class SessionStatus(str, Enum):
    LOADING = 'loading'
    AUTHENTICATED = 'authenticated'
    UNAUTHENTICATED = 'unauthenticated'


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus
    user: dict | None = None
    token: str | None = None

    @property
    def loading(self) -> bool:
        return self.status is SessionStatus.LOADING

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED


LOADING = SessionState(SessionStatus.LOADING)
SIGNED_OUT = SessionState(SessionStatus.UNAUTHENTICATED)


class SessionContext:
    def __init__(self, client: AuthClient, store: SessionStore):
        self.client = client
        self.store = store
        self._state = LOADING

    @property
    def state(self) -> SessionState:
        return self._state

    async def restore(self) -> SessionState:
        """Rebuild the session from storage, checking the token with the server.

        Only a 401 discards the stored token. When the server cannot be
        reached or fails, the stored user is trusted until the next
        successful check; without one the viewer is signed out but the token
        is kept.
        """
        self._state = LOADING
        saved = self.store.load()
        if not saved:
            self._state = SIGNED_OUT
            return self._state

        token = saved["token"]
        result = await self.client.me(token)
        if result.ok and result.user:
            self.store.save(token, result.user)
            self._state = SessionState(SessionStatus.AUTHENTICATED, result.user, token)
        elif result.status_code == UNAUTHORIZED:
            logger.info("Stored token rejected", extra={"status_code": result.status_code})
            self.store.clear()
            self._state = SIGNED_OUT
        elif saved.get("user"):
            logger.info("Session check failed, restoring stored session", extra={"status_code": result.status_code})
            self._state = SessionState(SessionStatus.AUTHENTICATED, saved["user"], token)
        else:
            logger.info("Session check failed, keeping stored token", extra={"status_code": result.status_code})
            self._state = SIGNED_OUT
        return self._state

    async def signin(self, email: str, password: str) -> AuthResult:
        result = await self.client.signin(email, password)
        self._apply(result)
        return result

    async def signup(self, email: str, password: str, name: str) -> AuthResult:
        result = await self.client.signup(email, password, name)
        self._apply(result)
        return result

    def logout(self) -> SessionState:
        self.store.clear()
        self._state = SIGNED_OUT
        return self._state

    def _apply(self, result: AuthResult) -> None:
        # Failed calls leave the current state alone
        if not (result.ok and result.token):
            return
        self.store.save(result.token, result.user)
        self._state = SessionState(SessionStatus.AUTHENTICATED, result.user, result.token)
