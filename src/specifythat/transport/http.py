"""
JSON HTTP client for the SpecifyThat backend endpoints.
"""

import logging
from typing import Any, Optional

import httpx

from specifythat.errors import ServiceError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.specifythat.com"
DEFAULT_TIMEOUT_S = 60.0


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/api",
            headers={"User-Agent": "specifythat-python/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def _error_message(resp: httpx.Response, default: str) -> str:
        """Backend errors come back as { "error": "<message>" }."""
        try:
            body = resp.json()
        except ValueError:
            return default
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return default

    async def post(self, path: str, body: Optional[dict[str, Any]] = None, error_message: str = "Request failed") -> Any:
        try:
            resp = await self._client.post(path, json=body)
        except httpx.HTTPError as e:
            logger.warning("POST %s failed: %s", path, e)
            raise ServiceError(error_message, details={"path": path, "reason": str(e)}) from e
        if resp.status_code >= 400:
            message = self._error_message(resp, error_message)
            logger.warning("POST %s returned HTTP %s: %s", path, resp.status_code, message)
            raise ServiceError(message, details={"path": path, "status": resp.status_code})
        try:
            return resp.json()
        except ValueError as e:
            raise ServiceError(error_message, details={"path": path, "reason": "invalid JSON"}) from e

    async def close(self) -> None:
        await self._client.aclose()
