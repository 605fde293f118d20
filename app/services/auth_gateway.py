"""Primary authentication backend client.

Talks to the remote auth API over HTTP. Any failure (no URL configured,
network error, non-2xx reply, malformed body) is reported as
``BackendUnavailable`` so the session manager can fall back to the demo
directory.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from app.config import settings
from app.core.exceptions import BackendUnavailable

logger = logging.getLogger(__name__)


class AuthGateway:
    """HTTP client for the primary auth API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (settings.AUTH_API_URL if base_url is None else base_url).rstrip("/")
        self.timeout = settings.AUTH_API_TIMEOUT if timeout is None else timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    async def _post(self, path: str, payload: Dict[str, Any],
                    token: Optional[str] = None) -> Dict[str, Any]:
        if not self.configured:
            raise BackendUnavailable("Primary auth backend is not configured")

        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post(path, json=payload, headers=headers)
                resp.raise_for_status()
                return resp.json() if resp.content else {}
        except httpx.HTTPError as e:
            raise BackendUnavailable(f"Primary auth backend request failed: {e}") from e
        except ValueError as e:
            raise BackendUnavailable("Primary auth backend returned a malformed body") from e

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate against the primary backend.

        Returns:
            Dict with ``user`` and ``token`` keys

        Raises:
            BackendUnavailable: on any failure, including rejected credentials
        """
        body = await self._post("/auth/login", {"email": email, "password": password})
        if not isinstance(body.get("user"), dict) or not body.get("token"):
            raise BackendUnavailable("Primary auth backend returned no session")
        logger.info("Primary auth login succeeded", extra={"email": email})
        return body

    async def logout(self, token: Optional[str]) -> None:
        await self._post("/auth/logout", {}, token=token)
