"""Thin async HTTP wrapper around the tracker backend."""
from typing import Any, Optional
import logging

import httpx

from tracker.config import app_config

logger = logging.getLogger(__name__)


class ApiGateway:
    """Resolves relative paths against one backend origin and forwards verbs.

    A fresh ``httpx.AsyncClient`` is opened per request so the gateway can be
    shared across event loops (Streamlit runs each action in its own loop).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = (base_url or app_config.BACKEND_URL).rstrip("/")
        self._timeout = timeout or app_config.REQUEST_TIMEOUT
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def url(self, path: str) -> str:
        """Resolve a path against the configured origin."""
        if not path:
            return self._base_url
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return self._base_url + path

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body (None if empty)."""
        url = self.url(path)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.request(method.upper(), url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"{method.upper()} {url} failed: {e}")
            raise

        logger.debug(f"{method.upper()} {url} -> {response.status_code}")
        if not response.content:
            return None
        return response.json()

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, body: Any = None, **kwargs: Any) -> Any:
        return await self.request("POST", path, json=body, **kwargs)

    async def put(self, path: str, body: Any = None, **kwargs: Any) -> Any:
        return await self.request("PUT", path, json=body, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)
