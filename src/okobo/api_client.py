"""HTTP client for the auth endpoints."""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
NETWORK_ERROR = "Network error"


@dataclass
class AuthResult:
    """Outcome of an auth call, success or failure, in envelope terms."""
    ok: bool
    status_code: int | None
    message: str
    error: str | None = None
    user: dict[str, Any] | None = None
    token: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def network_failure(self) -> bool:
        return self.status_code is None

    @classmethod
    def from_response(cls, response: httpx.Response) -> 'AuthResult':
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return cls(
            ok=bool(body.get("success")) and response.is_success,
            status_code=response.status_code,
            message=body.get("message", ""),
            error=body.get("error"),
            user=body.get("user"),
            token=body.get("token"),
            raw=body,
        )


class AuthClient:
    """Calls /api/auth/* and never raises for HTTP or network failures."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def signup(self, email: str, password: str, name: str) -> AuthResult:
        return await self._request(
            "POST", "/api/auth/signup",
            json={"email": email, "password": password, "name": name},
        )

    async def signin(self, email: str, password: str) -> AuthResult:
        return await self._request(
            "POST", "/api/auth/signin",
            json={"email": email, "password": password},
        )

    async def me(self, token: str) -> AuthResult:
        return await self._request(
            "GET", "/api/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )

    async def _request(self, method: str, path: str, **kwargs) -> AuthResult:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.warning(
                "Auth API request error",
                extra={"path": path, "error_type": type(e).__name__},
            )
            return AuthResult(
                ok=False,
                status_code=None,
                message="Could not reach the server. Please try again later.",
                error=NETWORK_ERROR,
            )

        result = AuthResult.from_response(response)
        logger.debug("Auth API call finished", extra={"path": path, "status_code": response.status_code})
        return result
